"""Render façade: one pure pass from (Chart, ChartConfig) to an SVG tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

import svgwrite

from .colors import allocate_colors
from .geometry import ChartLayout, plan_layout
from .labels import LabelLayout, layout_labels
from .model import AxisScale, Chart, ChartConfig, ColorAssignment
from .scale import DegenerateScaleWarning, compute_scale
from .svg import emit_document, svg_to_string

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    drawing: svgwrite.Drawing
    scale: AxisScale
    layout: ChartLayout
    labels: LabelLayout
    colors: ColorAssignment
    warnings: List[DegenerateScaleWarning] = field(default_factory=list)

    def to_svg(self, *, pretty: bool = False) -> str:
        return svg_to_string(self.drawing, pretty=pretty)


def render_chart(chart: Chart, config: ChartConfig = ChartConfig()) -> RenderResult:
    """Run scale, color, geometry, label and emission stages for ``chart``.

    Raises ``LayoutInfeasible`` or ``PaletteTooSmall``; a degenerate scale is
    reported through ``RenderResult.warnings`` instead.
    """

    logger.debug(
        "Rendering chart with %d categories and %d legend keys",
        len(chart.categories),
        len(chart.legend_keys),
    )
    scale_result = compute_scale(chart.max_total, config.tick_count_target)
    colors = allocate_colors(
        chart.legend_keys,
        config.palette_override,
        auto_fill=config.palette_auto_fill,
    )
    layout = plan_layout(chart, scale_result.scale, config)
    labels = layout_labels(layout, chart, config)
    drawing = emit_document(layout, labels, colors, config, chart)

    warnings = [scale_result.warning] if scale_result.warning is not None else []
    return RenderResult(
        drawing=drawing,
        scale=scale_result.scale,
        layout=layout,
        labels=labels,
        colors=colors,
        warnings=warnings,
    )


def render_svg(chart: Chart, config: ChartConfig = ChartConfig(), *, pretty: bool = False) -> str:
    return render_chart(chart, config).to_svg(pretty=pretty)
