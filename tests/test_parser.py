import json

import pytest

from stacked_bar_chart.model import ChartConfig
from stacked_bar_chart.parser import ParseError, chart_from_dict, config_from_dict, parse_chart


def test_parse_chart_reads_categories_titles_and_style():
    text = json.dumps(
        {
            'title': 'Revenue',
            'axis_title': 'USD',
            'categories': [
                {'name': 'Q1', 'segments': {'A': 10, 'B': 5}},
                {'name': 'Q2', 'segments': [['A', 8], ['B', 12]]},
                {'name': 'Q3', 'segments': [{'name': 'A', 'value': 1.5}]},
            ],
            'style': {'canvas_width': 400, 'legend_position': 'bottom'},
        }
    )

    parsed = parse_chart(text)

    chart = parsed.chart
    assert chart.title == 'Revenue'
    assert chart.axis_title == 'USD'
    assert [cat.name for cat in chart.categories] == ['Q1', 'Q2', 'Q3']
    assert chart.categories[1].value_of('B') == 12.0
    assert chart.categories[2].segments[0].value == 1.5
    assert parsed.config.canvas_width == 400
    assert parsed.config.legend_position == 'bottom'
    assert parsed.config.canvas_height == ChartConfig().canvas_height


def test_categories_may_be_an_object():
    chart = chart_from_dict({'categories': {'Q1': {'A': 1}, 'Q2': {'A': 2, 'B': 3}}})

    assert [cat.name for cat in chart.categories] == ['Q1', 'Q2']
    assert chart.legend_keys == ('A', 'B')


def test_syntax_error_points_at_the_offending_column():
    text = '{\n  "categories": [\n    {"name": "Q1",, "segments": {}}\n  ]\n}'

    with pytest.raises(ParseError) as exc:
        parse_chart(text)

    message = str(exc.value)
    assert message.startswith('[line 3, col ')
    lines = message.splitlines()
    assert lines[1] == '    {"name": "Q1",, "segments": {}}'
    assert lines[2].endswith('^')
    assert lines[1][len(lines[2]) - 1] == ','


@pytest.mark.parametrize(
    'document, message_part',
    [
        ([], 'must be a JSON object'),
        ({}, "no 'categories'"),
        ({'categories': [], 'colour': 'red'}, "unknown top-level key(s): 'colour'"),
        ({'categories': 'Q1'}, "'categories' must be a list or an object"),
        ({'categories': [{'segments': {}}]}, "needs a string 'name'"),
        ({'categories': [{'name': 'Q1', 'segments': {'A': 'ten'}}]}, 'must be a number'),
        ({'categories': [{'name': 'Q1', 'segments': [['A']]}]}, '[name, value] pairs'),
        ({'categories': [{'name': 'Q1', 'segments': {'A': 10 ** 400}}]}, "segment 'A' is too large to represent"),
        ({'categories': [], 'style': {'canvas_width': 'wide'}}, "'canvas_width' must be a number"),
        ({'categories': [], 'style': {'canvas_width': 10 ** 400}}, "style option 'canvas_width' is too large"),
        ({'categories': [], 'style': {'shadow': True}}, "unknown style option 'shadow'"),
        ({'categories': [], 'style': {'tick_count_target': 4.5}}, 'must be an integer'),
        ({'categories': [], 'style': {'palette_override': '#fff'}}, "'palette_override' must be"),
        ({'categories': [], 'title': 3}, "'title' must be a string"),
    ],
)
def test_invalid_documents_raise_parse_error(document, message_part):
    with pytest.raises(ParseError) as exc:
        parse_chart(json.dumps(document))

    assert message_part in str(exc.value)


def test_config_from_dict_normalizes_palettes():
    by_name = config_from_dict({'palette_override': {'A': '#fff'}})
    by_position = config_from_dict({'palette_override': ['#fff', '#000']})

    assert by_name.palette_override == {'A': '#fff'}
    assert by_position.palette_override == ('#fff', '#000')


def test_config_from_dict_overlays_base():
    base = ChartConfig(canvas_width=800)

    config = config_from_dict({'font_size': 14}, base)

    assert config.canvas_width == 800
    assert config.font_size == 14
    assert base.font_size == 12.0
