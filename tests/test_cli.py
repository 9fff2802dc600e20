import io
import json
import logging
from types import SimpleNamespace

import pytest

import stacked_bar_chart.__main__ as cli

QUARTERS = {
    'title': 'Quarterly revenue',
    'categories': [
        {'name': 'Q1', 'segments': {'A': 10, 'B': 5}},
        {'name': 'Q2', 'segments': {'A': 8, 'B': 12}},
    ],
    'style': {'canvas_width': 400, 'canvas_height': 300},
}


def _write_input(tmp_path, document=QUARTERS):
    path = tmp_path / 'chart.json'
    path.write_text(json.dumps(document), encoding='utf-8')
    return path


def test_main_writes_svg_file(tmp_path):
    input_path = _write_input(tmp_path)
    output_path = tmp_path / 'out' / 'chart.svg'

    cli.main([str(input_path), str(output_path), '--no-color'])

    svg = output_path.read_text(encoding='utf-8')
    assert svg.startswith('<?xml')
    assert 'Quarterly revenue' in svg
    assert 'width="400"' in svg


def test_main_reads_stdin_and_writes_stdout(monkeypatch, capsys):
    monkeypatch.setattr('sys.stdin', io.StringIO(json.dumps(QUARTERS)))

    cli.main(['-', '--pretty', '-n'])

    out = capsys.readouterr().out
    assert out.startswith('<?xml')
    assert '\n  <' in out


def test_overrides_are_applied_before_rendering(tmp_path, monkeypatch):
    input_path = _write_input(tmp_path)
    seen = []

    def _render(chart, config):
        seen.append(config)
        return SimpleNamespace(warnings=[], to_svg=lambda pretty=False: '<svg/>')

    monkeypatch.setattr(cli, 'render_chart', _render)
    output_path = tmp_path / 'chart.svg'

    cli.main(
        [
            str(input_path),
            str(output_path),
            '--width',
            '800',
            '--tick-count',
            '7',
            '--legend',
            'bottom',
            '--font-size',
            '10',
        ]
    )

    assert output_path.read_text(encoding='utf-8') == '<svg/>'
    (config,) = seen
    assert config.canvas_width == 800.0
    assert config.canvas_height == 300
    assert config.tick_count_target == 7
    assert config.legend_position == 'bottom'
    assert config.font_size == 10.0


def test_invalid_input_exits_with_error(tmp_path, capsys):
    document = dict(QUARTERS, categories=[{'name': 'Q1', 'segments': {'A': -1}}])
    input_path = _write_input(tmp_path, document)

    with pytest.raises(SystemExit) as exc:
        cli.main([str(input_path), str(tmp_path / 'chart.svg'), '--no-color'])

    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert err.startswith('error: ')
    assert 'must be non-negative' in err
    assert not (tmp_path / 'chart.svg').exists()


def test_missing_input_file_reports_error(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([str(tmp_path / 'missing.json'), '--no-color'])

    assert exc.value.code == 1
    assert "error: unable to open file" in capsys.readouterr().err


def test_malformed_json_reports_location(tmp_path, capsys):
    path = tmp_path / 'broken.json'
    path.write_text('{"categories": [}', encoding='utf-8')

    with pytest.raises(SystemExit):
        cli.main([str(path), '--no-color'])

    assert 'error: [line 1, col 17]' in capsys.readouterr().err


def test_undecodable_input_reports_error(tmp_path, capsys):
    path = tmp_path / 'latin1.json'
    path.write_bytes(b'{"categories": [{"name": "\xff", "segments": {"A": 1}}]}')

    with pytest.raises(SystemExit) as exc:
        cli.main([str(path), str(tmp_path / 'chart.svg'), '-n'])

    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert err.startswith('error: ')
    assert 'is not valid UTF-8' in err
    assert 'Traceback' not in err


def test_oversized_values_report_error(tmp_path, capsys):
    document = dict(QUARTERS, categories=[{'name': 'Q1', 'segments': {'A': 10 ** 400}}])
    input_path = _write_input(tmp_path, document)

    with pytest.raises(SystemExit) as exc:
        cli.main([str(input_path), str(tmp_path / 'chart.svg'), '-n'])

    assert exc.value.code == 1
    assert 'too large to represent' in capsys.readouterr().err


def test_axis_overflow_reports_error(tmp_path, capsys):
    document = dict(QUARTERS, categories=[{'name': 'Q1', 'segments': {'A': 1.7e308}}])
    input_path = _write_input(tmp_path, document)

    with pytest.raises(SystemExit) as exc:
        cli.main([str(input_path), str(tmp_path / 'chart.svg'), '-n'])

    assert exc.value.code == 1
    assert 'too large for a value axis' in capsys.readouterr().err


def test_infeasible_layout_reports_error(tmp_path, capsys):
    document = dict(QUARTERS, style={'canvas_width': 10, 'canvas_height': 10})
    input_path = _write_input(tmp_path, document)

    with pytest.raises(SystemExit):
        cli.main([str(input_path), str(tmp_path / 'chart.svg'), '--no-color'])

    assert 'layout infeasible' in capsys.readouterr().err


def test_degenerate_scale_is_reported_as_warning(tmp_path, capsys):
    document = dict(QUARTERS, categories=[{'name': 'Q1', 'segments': {'A': 0}}])
    input_path = _write_input(tmp_path, document)
    output_path = tmp_path / 'chart.svg'

    cli.main([str(input_path), str(output_path), '--no-color'])

    assert output_path.exists()
    assert 'warning: all category totals are zero' in capsys.readouterr().err


def test_colored_output_wraps_message():
    formatter = cli._CliFormatter(use_color=True)
    record = logging.LogRecord('x', logging.ERROR, __file__, 1, 'boom', None, None)

    assert formatter.format(record) == '\033[31merror: boom\033[0m'
    assert cli._CliFormatter(use_color=False).format(record) == 'error: boom'


@pytest.mark.parametrize('value, expected', [('1', True), ('yes', True), ('', False), ('0', False)])
def test_no_cli_color_env_flag(monkeypatch, value, expected):
    monkeypatch.setenv('NO_CLI_COLOR', value)

    assert cli._env_flag('NO_CLI_COLOR') is expected
