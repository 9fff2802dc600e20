"""Core data structures for the chart pipeline."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

SegmentName = str
Palette = Union[Mapping[str, str], Sequence[str]]


class ChartError(ValueError):
    """Base class for errors raised while rendering a chart."""


@dataclass(frozen=True)
class Segment:
    name: SegmentName
    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))


@dataclass(frozen=True)
class Category:
    """One labeled bar; segments stack bottom-up in the given order."""

    name: str
    segments: Tuple[Segment, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "segments", tuple(self.segments))

    @property
    def total(self) -> float:
        return float(sum(seg.value for seg in self.segments))

    def value_of(self, name: SegmentName) -> float:
        for seg in self.segments:
            if seg.name == name:
                return seg.value
        return 0.0


@dataclass(frozen=True)
class Chart:
    categories: Tuple[Category, ...] = ()
    title: Optional[str] = None
    axis_title: Optional[str] = None
    category_axis_title: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "categories", tuple(self.categories))

    @property
    def legend_keys(self) -> Tuple[SegmentName, ...]:
        """Distinct segment names in first-seen order."""

        seen: Dict[SegmentName, None] = {}
        for category in self.categories:
            for seg in category.segments:
                seen.setdefault(seg.name, None)
        return tuple(seen)

    @property
    def totals(self) -> List[float]:
        return [category.total for category in self.categories]

    @property
    def max_total(self) -> float:
        totals = self.totals
        return max(totals) if totals else 0.0


@dataclass(frozen=True)
class ChartConfig:
    """Immutable render options; every render receives one explicitly."""

    canvas_width: float = 640.0
    canvas_height: float = 400.0
    margin_top: float = 40.0
    margin_right: float = 40.0
    margin_bottom: float = 40.0
    margin_left: float = 40.0
    tick_count_target: int = 5
    bar_gap_ratio: float = 0.3
    font_family: str = "Helvetica, Arial, sans-serif"
    font_size: float = 12.0
    title_font_size: Optional[float] = None
    palette_override: Optional[Palette] = None
    palette_auto_fill: bool = False
    legend_position: str = "right"
    title: Optional[str] = None
    axis_title: Optional[str] = None
    category_axis_title: Optional[str] = None

    @property
    def resolved_title_font_size(self) -> float:
        if self.title_font_size is not None:
            return float(self.title_font_size)
        return round(self.font_size * 1.4, 2)

    def replace(self, **changes: object) -> "ChartConfig":
        return replace(self, **changes)


def resolve_titles(chart: Chart, config: ChartConfig) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """Return (title, axis_title, category_axis_title); config values win."""

    def pick(override: Optional[str], base: Optional[str]) -> Optional[str]:
        value = override if override is not None else base
        if value is None or not value.strip():
            return None
        return value

    return (
        pick(config.title, chart.title),
        pick(config.axis_title, chart.axis_title),
        pick(config.category_axis_title, chart.category_axis_title),
    )


@dataclass(frozen=True)
class AxisScale:
    minimum: float
    maximum: float
    step: float
    precision: int = 0

    @property
    def span(self) -> float:
        return self.maximum - self.minimum

    @property
    def tick_count(self) -> int:
        """Number of step intervals between minimum and maximum."""

        return int(round(self.span / self.step))

    def ticks(self) -> List[float]:
        return [
            round(self.minimum + idx * self.step, self.precision)
            for idx in range(self.tick_count + 1)
        ]

    def format_tick(self, value: float) -> str:
        text = f"{value:.{self.precision}f}"
        if text.startswith("-") and float(text) == 0.0:
            text = text[1:]
        return text


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in SVG coordinates (y grows downwards)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + 0.5 * self.width

    @property
    def center_y(self) -> float:
        return self.y + 0.5 * self.height

    def intersects(self, other: "Rect") -> bool:
        return not (
            self.right <= other.x
            or other.right <= self.x
            or self.bottom <= other.y
            or other.bottom <= self.y
        )

    def contains(self, point: Point, eps: float = 1e-9) -> bool:
        return (
            self.x - eps <= point.x <= self.right + eps
            and self.y - eps <= point.y <= self.bottom + eps
        )


@dataclass(frozen=True)
class ColorAssignment:
    """Ordered segment name → ``#rrggbb`` mapping for one render."""

    names: Tuple[SegmentName, ...]
    colors: Tuple[str, ...]
    generated: Tuple[SegmentName, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if len(self.names) != len(self.colors):
            raise ValueError("ColorAssignment needs one color per name")

    def __getitem__(self, name: SegmentName) -> str:
        try:
            return self.colors[self.names.index(name)]
        except ValueError as exc:
            raise KeyError(f"No color assigned to segment '{name}'") from exc

    def __len__(self) -> int:
        return len(self.names)

    def __iter__(self) -> Iterator[SegmentName]:
        return iter(self.names)

    def items(self) -> List[Tuple[SegmentName, str]]:
        return list(zip(self.names, self.colors))

    def as_dict(self) -> Dict[SegmentName, str]:
        return dict(self.items())


def is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False
