"""SVG document tree for a laid-out stacked bar chart."""

from __future__ import annotations

import logging
from typing import List, Optional

import svgwrite

from .utils import css_safe, format_number, style_class_for
from ..geometry import ChartLayout
from ..labels import LabelLayout, TextLabel
from ..logging_utils import apply_debug_logging
from ..model import Chart, ChartConfig, ColorAssignment, resolve_titles

logger = logging.getLogger(__name__)

TEXT_COLOR = "#333333"
AXIS_COLOR = "#333333"
GRID_COLOR = "#dddddd"
BACKGROUND_COLOR = "#ffffff"
AXIS_WIDTH = 1.0
GRID_WIDTH = 0.5


def build_stylesheet(colors: ColorAssignment, config: ChartConfig) -> str:
    """One rule per legend key plus the shared text and axis styling."""

    rules: List[str] = [
        f"text {{ font-family: {css_safe(config.font_family)}; fill: {TEXT_COLOR}; }}",
        ".title { font-weight: bold; }",
        f".axis line {{ stroke: {AXIS_COLOR}; stroke-width: {format_number(AXIS_WIDTH)}; }}",
        f".gridline {{ stroke: {GRID_COLOR}; stroke-width: {format_number(GRID_WIDTH)}; }}",
        ".segment { stroke: none; }",
    ]
    for name, color in colors.items():
        rules.append(f".{style_class_for(name)} {{ fill: {color}; }}")
    return "\n".join(rules)


def _pt(x: float, y: float):
    return (format_number(x), format_number(y))


def _text_node(drawing: svgwrite.Drawing, label: TextLabel):
    node = drawing.text(
        label.text,
        insert=_pt(label.x, label.y),
        class_=label.role,
        font_size=format_number(label.font_size),
        text_anchor=label.text_anchor,
    )
    if label.rotation:
        node.rotate(format_number(label.rotation), center=_pt(label.x, label.y))
    if label.truncated and label.full_text:
        node.set_desc(title=label.full_text)
    return node


def _add_axes(drawing: svgwrite.Drawing, layout: ChartLayout):
    axes = drawing.g(id="axes", class_="axis")
    grid = drawing.g(class_="gridlines")
    for tick in layout.ticks:
        if tick.value == layout.scale.minimum:
            continue
        grid.add(
            drawing.line(
                start=_pt(tick.grid_start.x, tick.grid_start.y),
                end=_pt(tick.grid_end.x, tick.grid_end.y),
                class_="gridline",
            )
        )
    axes.add(grid)

    marks = drawing.g(class_="ticks")
    for tick in layout.ticks:
        marks.add(
            drawing.line(
                start=_pt(tick.mark_start.x, tick.mark_start.y),
                end=_pt(tick.mark_end.x, tick.mark_end.y),
                class_="tick",
            )
        )
    axes.add(marks)

    plot = layout.plot
    axes.add(drawing.line(start=_pt(plot.x, plot.y), end=_pt(plot.x, plot.bottom), class_="value-axis"))
    axes.add(
        drawing.line(start=_pt(plot.x, plot.bottom), end=_pt(plot.right, plot.bottom), class_="category-axis")
    )
    return axes


def _add_bars(drawing: svgwrite.Drawing, layout: ChartLayout, colors: ColorAssignment):
    bars = drawing.g(id="bars")
    for bar in layout.bars:
        group = drawing.g(class_="bar")
        group["data-category"] = bar.category
        group["data-total"] = format_number(bar.total)
        for segment in bar.segments:
            rect = segment.rect
            node = drawing.rect(
                insert=_pt(rect.x, rect.y),
                size=(format_number(rect.width), format_number(rect.height)),
                class_=f"segment {style_class_for(segment.name)}",
                fill=colors[segment.name],
            )
            node["data-segment"] = segment.name
            node["data-value"] = format_number(segment.value)
            group.add(node)
        bars.add(group)
    return bars


def _add_legend(drawing: svgwrite.Drawing, layout: ChartLayout, labels: LabelLayout, colors: ColorAssignment):
    legend = drawing.g(id="legend")
    for entry, label in zip(layout.legend, labels.legend):
        item = drawing.g(class_="legend-entry")
        item["data-segment"] = entry.name
        item.add(
            drawing.rect(
                insert=_pt(entry.swatch.x, entry.swatch.y),
                size=(format_number(entry.swatch.width), format_number(entry.swatch.height)),
                class_=f"swatch {style_class_for(entry.name)}",
                fill=colors[entry.name],
            )
        )
        if label.text:
            item.add(_text_node(drawing, label))
        legend.add(item)
    return legend


def _add_labels(drawing: svgwrite.Drawing, labels: LabelLayout):
    group = drawing.g(id="labels")
    for label in labels.all_labels():
        if label.role == "legend-label" or not label.text:
            continue
        group.add(_text_node(drawing, label))
    return group


def emit_document(
    layout: ChartLayout,
    labels: LabelLayout,
    colors: ColorAssignment,
    config: ChartConfig,
    chart: Optional[Chart] = None,
) -> svgwrite.Drawing:
    """Build the SVG tree; nothing is written to disk here."""

    canvas = layout.canvas
    drawing = svgwrite.Drawing(
        size=(format_number(canvas.width), format_number(canvas.height)),
        viewBox=" ".join(format_number(v) for v in (0, 0, canvas.width, canvas.height)),
        profile="full",
        debug=False,
    )
    title = resolve_titles(chart, config)[0] if chart is not None else config.title
    if title:
        drawing.set_desc(title=title)
    drawing.embed_stylesheet(build_stylesheet(colors, config))

    drawing.add(
        drawing.rect(
            insert=(0, 0),
            size=(format_number(canvas.width), format_number(canvas.height)),
            class_="background",
            fill=BACKGROUND_COLOR,
        )
    )
    drawing.add(_add_axes(drawing, layout))
    drawing.add(_add_bars(drawing, layout, colors))
    drawing.add(_add_labels(drawing, labels))
    if layout.legend:
        drawing.add(_add_legend(drawing, layout, labels, colors))
    return drawing


apply_debug_logging(globals(), logger=logger)
