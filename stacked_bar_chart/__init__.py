from .model import (
    AxisScale,
    Category,
    Chart,
    ChartConfig,
    ChartError,
    ColorAssignment,
    Point,
    Rect,
    Segment,
)
from .scale import DegenerateScaleWarning, ScaleOverflow, ScaleResult, compute_scale, nice_step
from .colors import PaletteTooSmall, allocate_colors, hue_palette
from .geometry import ChartLayout, LayoutInfeasible, plan_layout
from .labels import LabelLayout, TextLabel, layout_labels
from .svg import emit_document, style_class_for, svg_to_string
from .render import RenderResult, render_chart, render_svg
from .parser import ParseError, ParsedInput, parse_chart
from .validate import ValidationError, validate

__version__ = "0.1.0"

__all__ = [
    'AxisScale',
    'Category',
    'Chart',
    'ChartConfig',
    'ChartError',
    'ChartLayout',
    'ColorAssignment',
    'DegenerateScaleWarning',
    'LabelLayout',
    'LayoutInfeasible',
    'PaletteTooSmall',
    'ParseError',
    'ParsedInput',
    'Point',
    'Rect',
    'RenderResult',
    'ScaleOverflow',
    'ScaleResult',
    'Segment',
    'TextLabel',
    'ValidationError',
    'allocate_colors',
    'compute_scale',
    'emit_document',
    'hue_palette',
    'layout_labels',
    'nice_step',
    'parse_chart',
    'plan_layout',
    'render_chart',
    'render_svg',
    'style_class_for',
    'svg_to_string',
    'validate',
]
