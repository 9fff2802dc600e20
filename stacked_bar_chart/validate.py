from collections.abc import Mapping

from .colors import is_hex_color
from .geometry import LEGEND_POSITIONS
from .model import Chart, ChartConfig, ChartError, is_finite_number


class ValidationError(ChartError):
    pass


def _where(cat_idx: int, name: str) -> str:
    return f"[category {cat_idx + 1} '{name}']"


def validate_chart(chart: Chart) -> None:
    if not chart.categories:
        raise ValidationError("chart needs at least one category")
    for cat_idx, category in enumerate(chart.categories):
        if not isinstance(category.name, str):
            raise ValidationError(f"category #{cat_idx + 1} name must be a string")
        seen = set()
        for seg in category.segments:
            where = _where(cat_idx, category.name)
            if not isinstance(seg.name, str) or not seg.name:
                raise ValidationError(f"{where} segment names must be non-empty strings")
            if seg.name in seen:
                raise ValidationError(f'{where} segment "{seg.name}" appears more than once')
            seen.add(seg.name)
            if not is_finite_number(seg.value):
                raise ValidationError(f'{where} segment "{seg.name}" must have a finite value')
            if seg.value < 0:
                raise ValidationError(f'{where} segment "{seg.name}" must be non-negative (got {seg.value:g})')


def validate_config(config: ChartConfig) -> None:
    for key in ("canvas_width", "canvas_height", "font_size"):
        value = getattr(config, key)
        if not is_finite_number(value) or value <= 0:
            raise ValidationError(f"{key} must be a positive number")
    if config.title_font_size is not None and (
        not is_finite_number(config.title_font_size) or config.title_font_size <= 0
    ):
        raise ValidationError("title_font_size must be a positive number")
    for key in ("margin_top", "margin_right", "margin_bottom", "margin_left"):
        value = getattr(config, key)
        if not is_finite_number(value) or value < 0:
            raise ValidationError(f"{key} must be a non-negative number")
    if isinstance(config.tick_count_target, bool) or not isinstance(config.tick_count_target, int):
        raise ValidationError("tick_count_target must be an integer")
    if config.tick_count_target < 1:
        raise ValidationError("tick_count_target must be at least 1")
    if not is_finite_number(config.tick_count_target):
        raise ValidationError("tick_count_target is too large")
    if not is_finite_number(config.bar_gap_ratio) or not 0 <= config.bar_gap_ratio < 1:
        raise ValidationError("bar_gap_ratio must be in [0, 1)")
    if config.legend_position not in LEGEND_POSITIONS:
        raise ValidationError(
            f'legend_position must be one of {", ".join(LEGEND_POSITIONS)} (got "{config.legend_position}")'
        )

    palette = config.palette_override
    if palette is None:
        return
    colors = list(palette.values()) if isinstance(palette, Mapping) else list(palette)
    for color in colors:
        if not is_hex_color(color):
            raise ValidationError(f"palette color {color!r} is not a #rgb or #rrggbb hex color")


def validate(chart: Chart, config: ChartConfig = ChartConfig()) -> None:
    validate_chart(chart)
    validate_config(config)
