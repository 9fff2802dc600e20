import pytest

from stacked_bar_chart.model import Category, Chart, ChartConfig, Segment
from stacked_bar_chart.validate import ValidationError, validate, validate_config


def chart(*categories):
    return Chart(categories=tuple(Category(name, tuple(Segment(*seg) for seg in segs)) for name, segs in categories))


def test_validate_accepts_valid_chart():
    validate(chart(('Q1', [('A', 10), ('B', 0)]), ('Q2', [])), ChartConfig())


@pytest.mark.parametrize(
    'bad_chart, message_part',
    [
        (Chart(), 'at least one category'),
        (chart(('Q1', [('A', -1)])), 'must be non-negative'),
        (chart(('Q1', [('A', float('nan'))])), 'finite value'),
        (chart(('Q1', [('A', float('inf'))])), 'finite value'),
        (chart(('Q1', [('A', 1), ('A', 2)])), 'appears more than once'),
        (chart(('Q1', [('', 1)])), 'non-empty strings'),
    ],
)
def test_validate_rejects_bad_charts(bad_chart, message_part):
    with pytest.raises(ValidationError) as exc:
        validate(bad_chart)

    assert message_part in str(exc.value)


def test_error_names_the_category():
    with pytest.raises(ValidationError) as exc:
        validate(chart(('Q1', [('A', 1)]), ('Q2', [('B', -3)])))

    assert "[category 2 'Q2']" in str(exc.value)


@pytest.mark.parametrize(
    'changes, message_part',
    [
        ({'canvas_width': 0}, 'canvas_width must be a positive number'),
        ({'canvas_height': -5}, 'canvas_height must be a positive number'),
        ({'font_size': float('nan')}, 'font_size must be a positive number'),
        ({'title_font_size': 0}, 'title_font_size'),
        ({'margin_left': -1}, 'margin_left must be a non-negative number'),
        ({'tick_count_target': 0}, 'at least 1'),
        ({'tick_count_target': 2.5}, 'must be an integer'),
        ({'tick_count_target': True}, 'must be an integer'),
        ({'tick_count_target': 10 ** 400}, 'too large'),
        ({'bar_gap_ratio': 1.0}, 'bar_gap_ratio'),
        ({'legend_position': 'left'}, 'legend_position must be one of right, bottom'),
        ({'palette_override': ['#12345']}, 'is not a #rgb or #rrggbb hex color'),
        ({'palette_override': {'A': 'blue'}}, "'blue'"),
    ],
)
def test_validate_config_rejects_bad_options(changes, message_part):
    with pytest.raises(ValidationError) as exc:
        validate_config(ChartConfig().replace(**changes))

    assert message_part in str(exc.value)


@pytest.mark.parametrize('ratio', [0.0, 0.3, 0.99])
def test_bar_gap_ratio_range_is_half_open(ratio):
    validate_config(ChartConfig(bar_gap_ratio=ratio))
