from __future__ import annotations

import re
import xml.etree.ElementTree as ET

import pytest

from stacked_bar_chart import Category, Chart, ChartConfig, Segment, render_chart
from stacked_bar_chart.svg import build_stylesheet, format_number, style_class_for, svg_to_string

SVG_NS = '{http://www.w3.org/2000/svg}'

QUARTERS = Chart(
    categories=(
        Category('Q1', (Segment('A', 10), Segment('B', 5))),
        Category('Q2', (Segment('A', 8), Segment('B', 12))),
    ),
    title='Quarterly revenue',
)
SMALL = ChartConfig(canvas_width=400, canvas_height=300)


def _parse(svg_text: str) -> ET.Element:
    return ET.fromstring(svg_text.encode('utf-8'))


def _group(root: ET.Element, group_id: str) -> ET.Element:
    node = root.find(f".//{SVG_NS}g[@id='{group_id}']")
    assert node is not None, group_id
    return node


def test_document_has_canvas_size_and_title() -> None:
    svg_text = render_chart(QUARTERS, SMALL).to_svg()
    root = _parse(svg_text)

    assert svg_text.startswith('<?xml')
    assert root.tag == f'{SVG_NS}svg'
    assert root.get('width') == '400'
    assert root.get('height') == '300'
    assert root.get('viewBox') == '0 0 400 300'
    assert root.find(f'{SVG_NS}title').text == 'Quarterly revenue'


def test_one_rect_per_segment_with_style_class() -> None:
    result = render_chart(QUARTERS, SMALL)
    root = _parse(result.to_svg())

    bars = _group(root, 'bars').findall(f'{SVG_NS}g')
    assert [bar.get('data-category') for bar in bars] == ['Q1', 'Q2']
    assert [bar.get('data-total') for bar in bars] == ['15', '20']

    segments = _group(root, 'bars').findall(f'.//{SVG_NS}rect')
    assert len(segments) == 4
    assert [rect.get('data-segment') for rect in segments] == ['A', 'B', 'A', 'B']
    for rect in segments:
        name = rect.get('data-segment')
        assert rect.get('class') == f'segment seg-{name}'
        assert rect.get('fill') == result.colors[name]


def test_stylesheet_has_one_rule_per_legend_key() -> None:
    result = render_chart(QUARTERS, SMALL)
    svg_text = result.to_svg()

    for name, color in result.colors.items():
        assert f'.{style_class_for(name)} {{ fill: {color}; }}' in svg_text
    stylesheet = build_stylesheet(result.colors, SMALL)
    assert 'font-family: Helvetica, Arial, sans-serif' in stylesheet
    segment_rules = [line for line in stylesheet.splitlines() if line.startswith('.seg-')]
    assert len(segment_rules) == len(result.colors)


def test_same_name_keeps_its_color_across_bars() -> None:
    root = _parse(render_chart(QUARTERS, SMALL).to_svg())

    fills = {}
    for rect in _group(root, 'bars').findall(f'.//{SVG_NS}rect'):
        fills.setdefault(rect.get('data-segment'), set()).add(rect.get('fill'))
    assert all(len(colors) == 1 for colors in fills.values())
    assert fills['A'] != fills['B']


def test_axes_ticks_and_gridlines() -> None:
    root = _parse(render_chart(QUARTERS, SMALL).to_svg())
    axes = _group(root, 'axes')

    ticks = axes.findall(f".//{SVG_NS}line[@class='tick']")
    gridlines = axes.findall(f".//{SVG_NS}line[@class='gridline']")
    assert len(ticks) == 5
    assert len(gridlines) == 4
    assert axes.find(f".//{SVG_NS}line[@class='value-axis']") is not None
    assert axes.find(f".//{SVG_NS}line[@class='category-axis']") is not None


def test_labels_and_legend_text() -> None:
    root = _parse(render_chart(QUARTERS, SMALL).to_svg())

    texts = [node.text for node in _group(root, 'labels').findall(f'{SVG_NS}text')]
    assert texts[0] == 'Quarterly revenue'
    assert ['0', '5', '10', '15', '20'] == [t for t in texts if t.isdigit()]
    assert 'Q1' in texts and 'Q2' in texts

    entries = _group(root, 'legend').findall(f'{SVG_NS}g')
    assert [entry.get('data-segment') for entry in entries] == ['A', 'B']
    for entry in entries:
        swatch = entry.find(f'{SVG_NS}rect')
        assert swatch.get('class') == f"swatch seg-{entry.get('data-segment')}"
        assert entry.find(f'{SVG_NS}text').text == entry.get('data-segment')


def test_truncated_label_keeps_full_text_in_title() -> None:
    chart = Chart(
        categories=(
            Category('Very long category label number one', (Segment('A', 1),)),
            Category('Very long category label number two', (Segment('A', 2),)),
        )
    )
    root = _parse(render_chart(chart, SMALL).to_svg())

    rotated = [
        node
        for node in _group(root, 'labels').findall(f'{SVG_NS}text')
        if node.get('class') == 'category-label'
    ]
    assert len(rotated) == 2
    for node in rotated:
        assert node.get('transform', '').startswith('rotate(-45')
        assert node.text.endswith('…')
        assert node.find(f'{SVG_NS}title').text.startswith('Very long category label')


def test_pretty_output_parses_the_same() -> None:
    result = render_chart(QUARTERS, SMALL)

    compact = _parse(result.to_svg())
    pretty = _parse(svg_to_string(result.drawing, pretty=True))

    assert len(list(compact.iter())) == len(list(pretty.iter()))


@pytest.mark.parametrize(
    'value, expected',
    [(1.0, '1'), (2.5, '2.5'), (100.0, '100'), (-0.00001, '0'), (1 / 3, '0.3333')],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_format_number_rejects_non_finite():
    with pytest.raises(ValueError):
        format_number(float('nan'))


def test_style_class_for_is_stable_and_collision_free():
    assert style_class_for('A') == 'seg-A'
    assert style_class_for('net_income-2') == 'seg-net_income-2'
    assert style_class_for('a b') == style_class_for('a b')
    assert style_class_for('a b') != style_class_for('a-b')
    assert re.match(r'^seg-Net-income-[0-9a-f]{6}$', style_class_for('Net income'))
    assert re.match(r'^seg-[0-9a-f]{6}$', style_class_for('%%%'))
