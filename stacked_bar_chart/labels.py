"""Text placement for titles, tick labels, category labels and the legend.

Category labels degrade in a fixed order when they do not fit their slot:
first every label is rotated, then rotated labels that are still too long for
the category band are truncated with an ellipsis.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from .logging_utils import apply_debug_logging
from .model import Chart, ChartConfig, Rect, resolve_titles
from .text import (
    BASELINE_SHIFT_EM,
    LINE_HEIGHT_EM,
    estimate_text_height,
    estimate_text_width,
    truncate_to_width,
)

if TYPE_CHECKING:
    from .geometry import ChartLayout

logger = logging.getLogger(__name__)

CATEGORY_LABEL_ROTATION = -45.0
CATEGORY_SLOT_FILL = 0.95
# Rotated labels hang below this offset so their ascent stays out of the plot.
ROTATED_LABEL_DROP_EM = 0.8
ROTATED_BAND_PADDING = 1.0
MIN_FONT_SIZE = 6.0

ROLE_TITLE = "title"
ROLE_AXIS_TITLE = "axis-title"
ROLE_CATEGORY_AXIS_TITLE = "category-axis-title"
ROLE_TICK = "tick-label"
ROLE_CATEGORY = "category-label"
ROLE_LEGEND = "legend-label"


@dataclass(frozen=True)
class TextLabel:
    """A positioned text node; ``(x, y)`` is the anchor on the baseline."""

    text: str
    x: float
    y: float
    font_size: float
    role: str
    text_anchor: str = "start"
    rotation: float = 0.0
    truncated: bool = False
    full_text: Optional[str] = None

    @property
    def ascent(self) -> float:
        return (BASELINE_SHIFT_EM + 0.5 * LINE_HEIGHT_EM) * self.font_size

    @property
    def descent(self) -> float:
        return (0.5 * LINE_HEIGHT_EM - BASELINE_SHIFT_EM) * self.font_size

    def bounding_box(self) -> Rect:
        """Axis-aligned box of the (possibly rotated) estimated text extent."""

        width = estimate_text_width(self.text, self.font_size)
        if self.text_anchor == "middle":
            x0, x1 = -0.5 * width, 0.5 * width
        elif self.text_anchor == "end":
            x0, x1 = -width, 0.0
        else:
            x0, x1 = 0.0, width
        y0, y1 = -self.ascent, self.descent

        theta = math.radians(self.rotation)
        cos_t, sin_t = math.cos(theta), math.sin(theta)
        xs, ys = [], []
        for cx, cy in ((x0, y0), (x1, y0), (x1, y1), (x0, y1)):
            xs.append(self.x + cx * cos_t - cy * sin_t)
            ys.append(self.y + cx * sin_t + cy * cos_t)
        return Rect(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


@dataclass(frozen=True)
class LabelLayout:
    title: Optional[TextLabel]
    axis_title: Optional[TextLabel]
    category_axis_title: Optional[TextLabel]
    ticks: Tuple[TextLabel, ...]
    categories: Tuple[TextLabel, ...]
    legend: Tuple[TextLabel, ...]
    category_rotation: float = 0.0

    def all_labels(self) -> List[TextLabel]:
        labels: List[TextLabel] = []
        for single in (self.title, self.axis_title, self.category_axis_title):
            if single is not None:
                labels.append(single)
        labels.extend(self.ticks)
        labels.extend(self.categories)
        labels.extend(self.legend)
        return labels


def _fitted(text: str, max_width: float, font_size: float) -> Tuple[str, bool]:
    fitted = truncate_to_width(text, max_width, font_size)
    return fitted, fitted != text


def _baseline_for_center(center_y: float, font_size: float) -> float:
    return center_y + BASELINE_SHIFT_EM * font_size


def _centered_label(text: str, band: Rect, font_size: float, role: str) -> TextLabel:
    fitted, truncated = _fitted(text, band.width, font_size)
    return TextLabel(
        text=fitted,
        x=band.center_x,
        y=_baseline_for_center(band.center_y, font_size),
        font_size=font_size,
        role=role,
        text_anchor="middle",
        truncated=truncated,
        full_text=text,
    )


def _axis_title_label(text: str, band: Rect, font_size: float) -> TextLabel:
    # Rotated -90: the baseline runs vertically and glyphs extend towards -x.
    fitted, truncated = _fitted(text, band.height, font_size)
    return TextLabel(
        text=fitted,
        x=band.center_x + BASELINE_SHIFT_EM * font_size,
        y=band.center_y,
        font_size=font_size,
        role=ROLE_AXIS_TITLE,
        text_anchor="middle",
        rotation=-90.0,
        truncated=truncated,
        full_text=text,
    )


def category_labels_fit_flat(names: Sequence[str], slot_width: float, font_size: float) -> bool:
    allowed = slot_width * CATEGORY_SLOT_FILL
    return all(estimate_text_width(name, font_size) <= allowed for name in names)


def rotated_font_size(slot_width: float, font_size: float) -> float:
    # Neighbouring rotated labels are slot_width * sin apart; shrink text to fit.
    sin_r = abs(math.sin(math.radians(CATEGORY_LABEL_ROTATION)))
    size = max(MIN_FONT_SIZE, min(font_size, slot_width * sin_r / LINE_HEIGHT_EM))
    return round(size, 2)


def _rotated_descent(font_size: float) -> float:
    return (0.5 * LINE_HEIGHT_EM - BASELINE_SHIFT_EM) * font_size


def category_band_height(
    names: Sequence[str],
    slot_width: float,
    font_size: float,
    max_height: float,
) -> float:
    """Height of the band under the plot that holds the category labels.

    One text line when every name fits its slot; otherwise enough for the
    longest rotated name, capped at ``max_height``.
    """

    line_h = estimate_text_height(font_size)
    if not names or category_labels_fit_flat(names, slot_width, font_size):
        return line_h

    size = rotated_font_size(slot_width, font_size)
    theta = math.radians(CATEGORY_LABEL_ROTATION)
    sin_r, cos_r = abs(math.sin(theta)), abs(math.cos(theta))
    longest = max(estimate_text_width(name, size) for name in names)
    needed = (
        ROTATED_LABEL_DROP_EM * size
        + longest * sin_r
        + _rotated_descent(size) * cos_r
        + ROTATED_BAND_PADDING
    )
    return max(line_h, min(needed, max_height))


def layout_tick_labels(layout: ChartLayout) -> List[TextLabel]:
    """Right-aligned labels left of the tick marks, clear of the plot area."""

    x = layout.bands.tick_labels.right
    return [
        TextLabel(
            text=tick.label,
            x=x,
            y=_baseline_for_center(tick.y, layout.font_size),
            font_size=layout.font_size,
            role=ROLE_TICK,
            text_anchor="end",
        )
        for tick in layout.ticks
    ]


def layout_category_labels(layout: ChartLayout) -> Tuple[List[TextLabel], float]:
    """Place one label under each bar; returns the labels and their rotation."""

    band = layout.bands.category_labels
    font_size = layout.font_size
    if not layout.bars:
        return [], 0.0
    slot_w = layout.bars[0].slot.width

    if category_labels_fit_flat([bar.category for bar in layout.bars], slot_w, font_size):
        baseline = band.y + (BASELINE_SHIFT_EM + 0.5 * LINE_HEIGHT_EM) * font_size
        return [
            TextLabel(
                text=bar.category,
                x=bar.slot.center_x,
                y=baseline,
                font_size=font_size,
                role=ROLE_CATEGORY,
                text_anchor="middle",
                full_text=bar.category,
            )
            for bar in layout.bars
        ], 0.0

    rotation = CATEGORY_LABEL_ROTATION
    sin_r = abs(math.sin(math.radians(rotation)))
    cos_r = abs(math.cos(math.radians(rotation)))
    rotated_size = rotated_font_size(slot_w, font_size)
    anchor_y = band.y + ROTATED_LABEL_DROP_EM * rotated_size
    descent = _rotated_descent(rotated_size)
    ascent = (BASELINE_SHIFT_EM + 0.5 * LINE_HEIGHT_EM) * rotated_size
    max_width = max(0.0, (band.bottom - anchor_y - descent * cos_r) / sin_r)

    labels = []
    for bar in layout.bars:
        # End-anchored text runs down-left; keep it inside the canvas.
        room = (bar.slot.center_x - layout.canvas.x) / cos_r - ascent
        width = max(0.0, min(max_width, room))
        fitted, truncated = _fitted(bar.category, width, rotated_size)
        labels.append(
            TextLabel(
                text=fitted,
                x=bar.slot.center_x,
                y=anchor_y,
                font_size=rotated_size,
                role=ROLE_CATEGORY,
                text_anchor="end",
                rotation=rotation,
                truncated=truncated,
                full_text=bar.category,
            )
        )
    return labels, rotation


def layout_legend_labels(layout: ChartLayout) -> List[TextLabel]:
    labels = []
    for entry in layout.legend:
        fitted, truncated = _fitted(entry.name, entry.text_width, layout.font_size)
        labels.append(
            TextLabel(
                text=fitted,
                x=entry.text_anchor.x,
                y=_baseline_for_center(entry.text_anchor.y, layout.font_size),
                font_size=layout.font_size,
                role=ROLE_LEGEND,
                text_anchor="start",
                truncated=truncated,
                full_text=entry.name,
            )
        )
    return labels


def layout_labels(layout: ChartLayout, chart: Chart, config: ChartConfig) -> LabelLayout:
    title, axis_title, category_axis_title = resolve_titles(chart, config)
    bands = layout.bands

    title_label = None
    if title and bands.title is not None:
        title_label = _centered_label(title, bands.title, layout.title_font_size, ROLE_TITLE)

    axis_label = None
    if axis_title and bands.axis_title is not None:
        axis_label = _axis_title_label(axis_title, bands.axis_title, layout.font_size)

    category_axis_label = None
    if category_axis_title and bands.category_axis_title is not None:
        category_axis_label = _centered_label(
            category_axis_title, bands.category_axis_title, layout.font_size, ROLE_CATEGORY_AXIS_TITLE
        )

    categories, rotation = layout_category_labels(layout)
    return LabelLayout(
        title=title_label,
        axis_title=axis_label,
        category_axis_title=category_axis_label,
        ticks=tuple(layout_tick_labels(layout)),
        categories=tuple(categories),
        legend=tuple(layout_legend_labels(layout)),
        category_rotation=rotation,
    )


apply_debug_logging(globals(), logger=logger)
