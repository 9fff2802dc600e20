"""Pixel geometry for the plot area, stacked bars, axis ticks and legend.

All coordinates are SVG user units with the origin at the top-left corner of
the canvas; bars grow upwards from the plot area's bottom edge.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .labels import category_band_height
from .logging_utils import apply_debug_logging
from .model import AxisScale, Category, Chart, ChartConfig, ChartError, Point, Rect, resolve_titles
from .text import estimate_text_height, estimate_text_width

logger = logging.getLogger(__name__)

TICK_LENGTH = 5.0
TICK_LABEL_GAP = 4.0
AXIS_TITLE_GAP = 8.0
TITLE_GAP = 10.0
CATEGORY_BAND_MAX_RATIO = 0.35
CATEGORY_LABEL_GAP = 4.0
LEGEND_GAP = 12.0
LEGEND_SWATCH_EM = 0.9
LEGEND_TEXT_GAP = 6.0
LEGEND_ROW_GAP = 4.0
LEGEND_COLUMN_GAP = 12.0
LEGEND_MAX_WIDTH_RATIO = 0.3
MIN_SLOT_WIDTH = 2.0
MIN_PLOT_HEIGHT = 10.0

LEGEND_POSITIONS = ("right", "bottom")


class LayoutInfeasible(ChartError):
    """Raised when the canvas cannot hold the margins plus the category slots."""

    def __init__(
        self,
        canvas_width: float,
        canvas_height: float,
        plot_width: float,
        plot_height: float,
        reason: str,
    ):
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.plot_width = plot_width
        self.plot_height = plot_height
        self.reason = reason
        super().__init__(
            f"layout infeasible for {canvas_width:g}x{canvas_height:g} canvas "
            f"(plot area {plot_width:g}x{plot_height:g}): {reason}"
        )


@dataclass(frozen=True)
class SegmentGeometry:
    name: str
    value: float
    rect: Rect


@dataclass(frozen=True)
class BarGeometry:
    category: str
    index: int
    slot: Rect
    x: float
    width: float
    baseline: float
    total: float
    height: float
    segments: Tuple[SegmentGeometry, ...]

    @property
    def top(self) -> float:
        return self.baseline - self.height

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.top, self.width, self.height)


@dataclass(frozen=True)
class TickGeometry:
    value: float
    label: str
    y: float
    mark_start: Point
    mark_end: Point
    grid_start: Point
    grid_end: Point


@dataclass(frozen=True)
class LegendEntryGeometry:
    name: str
    cell: Rect
    swatch: Rect
    text_anchor: Point
    text_width: float


@dataclass(frozen=True)
class Bands:
    """Areas reserved around the plot for text."""

    title: Optional[Rect]
    axis_title: Optional[Rect]
    tick_labels: Rect
    category_labels: Rect
    category_axis_title: Optional[Rect]


@dataclass(frozen=True)
class ChartLayout:
    canvas: Rect
    plot: Rect
    scale: AxisScale
    bars: Tuple[BarGeometry, ...]
    ticks: Tuple[TickGeometry, ...]
    legend: Tuple[LegendEntryGeometry, ...]
    legend_area: Optional[Rect]
    legend_position: str
    bands: Bands
    font_size: float
    title_font_size: float

    @property
    def baseline(self) -> float:
        return self.plot.bottom

    def value_to_y(self, value: float) -> float:
        return self.plot.bottom - (value - self.scale.minimum) * self.plot.height / self.scale.span


@dataclass(frozen=True)
class _LegendPlan:
    entries: Tuple[LegendEntryGeometry, ...]
    area: Rect


def _infeasible(config: ChartConfig, width: float, height: float, reason: str) -> LayoutInfeasible:
    return LayoutInfeasible(config.canvas_width, config.canvas_height, width, height, reason)


def stack_segments(category: Category, baseline: float, px_per_unit: float) -> List[Tuple[float, float]]:
    """Return ``(top, height)`` for each segment stacked upwards from ``baseline``.

    Offsets come from cumulative sums, so the heights telescope to the bar
    height without accumulating per-segment rounding.
    """

    values = np.array([seg.value for seg in category.segments], dtype=float)
    edges = baseline - np.concatenate(([0.0], np.cumsum(values))) * px_per_unit
    return [(float(edges[idx + 1]), float(edges[idx] - edges[idx + 1])) for idx in range(len(values))]


def _legend_text_widths(keys: Sequence[str], font_size: float) -> List[float]:
    return [estimate_text_width(key, font_size) for key in keys]


def _plan_right_legend(
    keys: Sequence[str],
    font_size: float,
    inner: Rect,
    top: float,
    right: float,
) -> _LegendPlan:
    swatch = LEGEND_SWATCH_EM * font_size
    row_h = max(swatch, estimate_text_height(font_size))
    max_text = max(0.0, inner.width * LEGEND_MAX_WIDTH_RATIO - swatch - LEGEND_TEXT_GAP)
    text_w = min(max(_legend_text_widths(keys, font_size)), max_text)
    cell_w = swatch + LEGEND_TEXT_GAP + text_w

    available_h = max(row_h, inner.bottom - top)
    rows = max(1, int(math.floor((available_h + LEGEND_ROW_GAP) / (row_h + LEGEND_ROW_GAP))))
    rows = min(rows, len(keys))
    columns = int(math.ceil(len(keys) / rows))
    area_w = columns * cell_w + (columns - 1) * LEGEND_COLUMN_GAP
    area_h = rows * row_h + (rows - 1) * LEGEND_ROW_GAP
    area = Rect(right - area_w, top, area_w, area_h)

    entries = []
    for idx, key in enumerate(keys):
        col, row = divmod(idx, rows)
        cell = Rect(
            area.x + col * (cell_w + LEGEND_COLUMN_GAP),
            area.y + row * (row_h + LEGEND_ROW_GAP),
            cell_w,
            row_h,
        )
        entries.append(_legend_entry(key, cell, swatch, text_w))
    return _LegendPlan(tuple(entries), area)


def _plan_bottom_legend(
    keys: Sequence[str],
    font_size: float,
    inner: Rect,
    bottom: float,
) -> _LegendPlan:
    swatch = LEGEND_SWATCH_EM * font_size
    row_h = max(swatch, estimate_text_height(font_size))
    max_text = max(0.0, inner.width - swatch - LEGEND_TEXT_GAP)
    text_w = min(max(_legend_text_widths(keys, font_size)), max_text)
    cell_w = swatch + LEGEND_TEXT_GAP + text_w

    columns = max(1, int(math.floor((inner.width + LEGEND_COLUMN_GAP) / (cell_w + LEGEND_COLUMN_GAP))))
    columns = min(columns, len(keys))
    rows = int(math.ceil(len(keys) / columns))
    area_w = columns * cell_w + (columns - 1) * LEGEND_COLUMN_GAP
    area_h = rows * row_h + (rows - 1) * LEGEND_ROW_GAP
    area = Rect(inner.x + 0.5 * (inner.width - area_w), bottom - area_h, area_w, area_h)

    entries = []
    for idx, key in enumerate(keys):
        row, col = divmod(idx, columns)
        cell = Rect(
            area.x + col * (cell_w + LEGEND_COLUMN_GAP),
            area.y + row * (row_h + LEGEND_ROW_GAP),
            cell_w,
            row_h,
        )
        entries.append(_legend_entry(key, cell, swatch, text_w))
    return _LegendPlan(tuple(entries), area)


def _legend_entry(key: str, cell: Rect, swatch: float, text_w: float) -> LegendEntryGeometry:
    swatch_rect = Rect(cell.x, cell.center_y - 0.5 * swatch, swatch, swatch)
    anchor = Point(cell.x + swatch + LEGEND_TEXT_GAP, cell.center_y)
    return LegendEntryGeometry(name=key, cell=cell, swatch=swatch_rect, text_anchor=anchor, text_width=text_w)


def plan_bars(categories: Sequence[Category], plot: Rect, scale: AxisScale, bar_gap_ratio: float) -> List[BarGeometry]:
    """Evenly spaced slots across ``plot``; each bar is centered in its slot."""

    slot_w = plot.width / len(categories)
    bar_w = slot_w * (1.0 - bar_gap_ratio)
    px_per_unit = plot.height / scale.span
    baseline = plot.bottom

    bars: List[BarGeometry] = []
    for idx, category in enumerate(categories):
        slot = Rect(plot.x + idx * slot_w, plot.y, slot_w, plot.height)
        x = slot.x + 0.5 * (slot_w - bar_w)
        stacked = stack_segments(category, baseline, px_per_unit)
        segments = tuple(
            SegmentGeometry(name=seg.name, value=seg.value, rect=Rect(x, top, bar_w, height))
            for seg, (top, height) in zip(category.segments, stacked)
        )
        bar_top = stacked[-1][0] if stacked else baseline
        bars.append(
            BarGeometry(
                category=category.name,
                index=idx,
                slot=slot,
                x=x,
                width=bar_w,
                baseline=baseline,
                total=category.total,
                height=baseline - bar_top,
                segments=segments,
            )
        )
    return bars


def plan_ticks(plot: Rect, scale: AxisScale) -> List[TickGeometry]:
    px_per_unit = plot.height / scale.span
    ticks = []
    for value in scale.ticks():
        y = plot.bottom - (value - scale.minimum) * px_per_unit
        ticks.append(
            TickGeometry(
                value=value,
                label=scale.format_tick(value),
                y=y,
                mark_start=Point(plot.x - TICK_LENGTH, y),
                mark_end=Point(plot.x, y),
                grid_start=Point(plot.x, y),
                grid_end=Point(plot.right, y),
            )
        )
    return ticks


def plan_layout(chart: Chart, scale: AxisScale, config: ChartConfig) -> ChartLayout:
    """Compute every rectangle and line the document emitter needs."""

    if not chart.categories:
        raise ValueError("chart has no categories to lay out")
    if config.legend_position not in LEGEND_POSITIONS:
        raise ValueError(f"unknown legend position {config.legend_position!r}")

    font_size = float(config.font_size)
    title_font_size = config.resolved_title_font_size
    line_h = estimate_text_height(font_size)
    title, axis_title, category_axis_title = resolve_titles(chart, config)

    canvas = Rect(0.0, 0.0, float(config.canvas_width), float(config.canvas_height))
    inner = Rect(
        config.margin_left,
        config.margin_top,
        config.canvas_width - config.margin_left - config.margin_right,
        config.canvas_height - config.margin_top - config.margin_bottom,
    )
    if inner.width <= 0 or inner.height <= 0:
        raise _infeasible(config, inner.width, inner.height, "margins leave no drawable area")

    top, bottom, left, right = inner.y, inner.bottom, inner.x, inner.right

    title_band: Optional[Rect] = None
    if title:
        title_h = estimate_text_height(title_font_size)
        title_band = Rect(inner.x, top, inner.width, title_h)
        top += title_h + TITLE_GAP

    axis_title_x: Optional[float] = None
    if axis_title:
        axis_title_x = left
        left += line_h + AXIS_TITLE_GAP

    tick_label_w = max(estimate_text_width(scale.format_tick(v), font_size) for v in scale.ticks())
    tick_label_x = left
    left += tick_label_w + TICK_LABEL_GAP + TICK_LENGTH

    keys = chart.legend_keys
    legend: Optional[_LegendPlan] = None
    if keys and config.legend_position == "right":
        legend = _plan_right_legend(keys, font_size, inner, top, right)
        right = legend.area.x - LEGEND_GAP
    elif keys:
        legend = _plan_bottom_legend(keys, font_size, inner, bottom)
        bottom = legend.area.y - LEGEND_GAP

    plot_w = right - left
    if plot_w <= 0:
        raise _infeasible(config, plot_w, bottom - top, "no room left for the plot area")
    slot_w = plot_w / len(chart.categories)
    if slot_w < MIN_SLOT_WIDTH:
        raise _infeasible(
            config,
            plot_w,
            bottom - top,
            f"{len(chart.categories)} categories need at least {MIN_SLOT_WIDTH:g}px each",
        )

    category_axis_title_y: Optional[float] = None
    if category_axis_title:
        bottom -= line_h
        category_axis_title_y = bottom
        bottom -= AXIS_TITLE_GAP

    category_band_h = category_band_height(
        [category.name for category in chart.categories],
        slot_w,
        font_size,
        inner.height * CATEGORY_BAND_MAX_RATIO,
    )
    bottom -= category_band_h + CATEGORY_LABEL_GAP

    plot = Rect(left, top, plot_w, bottom - top)
    if plot.height < MIN_PLOT_HEIGHT:
        raise _infeasible(config, plot.width, plot.height, "no room left for the plot area")

    bands = Bands(
        title=title_band,
        axis_title=Rect(axis_title_x, plot.y, line_h, plot.height) if axis_title_x is not None else None,
        tick_labels=Rect(tick_label_x, plot.y, tick_label_w, plot.height),
        category_labels=Rect(plot.x, plot.bottom + CATEGORY_LABEL_GAP, plot.width, category_band_h),
        category_axis_title=(
            Rect(plot.x, category_axis_title_y, plot.width, line_h)
            if category_axis_title_y is not None
            else None
        ),
    )

    return ChartLayout(
        canvas=canvas,
        plot=plot,
        scale=scale,
        bars=tuple(plan_bars(chart.categories, plot, scale, config.bar_gap_ratio)),
        ticks=tuple(plan_ticks(plot, scale)),
        legend=legend.entries if legend else (),
        legend_area=legend.area if legend else None,
        legend_position=config.legend_position,
        bands=bands,
        font_size=font_size,
        title_font_size=title_font_size,
    )


apply_debug_logging(globals(), logger=logger)
