"""JSON input documents → ``Chart`` and ``ChartConfig`` values.

Accepted shape::

    {
      "title": "Revenue", "axis_title": "USD", "category_axis_title": "Quarter",
      "categories": [
        {"name": "Q1", "segments": {"A": 10, "B": 5}},
        {"name": "Q2", "segments": [["A", 8], ["B", 12]]}
      ],
      "style": {"canvas_width": 400, "palette_override": {"A": "#1f77b4"}}
    }

``categories`` may also be an object mapping category names to segment
objects. Range checks belong to :mod:`stacked_bar_chart.validate`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from typing import Any, List, Mapping, Optional

from .model import Category, Chart, ChartConfig, Segment

_TOP_LEVEL_KEYS = {"title", "axis_title", "category_axis_title", "categories", "style"}
_CONFIG_FIELDS = {item.name for item in fields(ChartConfig)}
_NUMERIC_FIELDS = {
    "canvas_width",
    "canvas_height",
    "margin_top",
    "margin_right",
    "margin_bottom",
    "margin_left",
    "bar_gap_ratio",
    "font_size",
    "title_font_size",
}


class ParseError(ValueError):
    """Raised for malformed input documents."""


@dataclass(frozen=True)
class ParsedInput:
    chart: Chart
    config: ChartConfig


def _error_with_pointer(text: str, line: int, col: int, message: str) -> ParseError:
    lines = text.splitlines()
    source = lines[line - 1] if 0 < line <= len(lines) else ""
    pointer = " " * max(col - 1, 0) + "^"
    return ParseError(f"[line {line}, col {col}] {message}\n{source}\n{pointer}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_float(value: Any, what: str) -> float:
    try:
        return float(value)
    except OverflowError:
        raise ParseError(f"{what} is too large to represent") from None


def _optional_text(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ParseError(f"'{key}' must be a string")
    return value


def _segment(category: str, entry: Any) -> Segment:
    if isinstance(entry, Mapping):
        if "name" not in entry or "value" not in entry:
            raise ParseError(f"segment objects in category '{category}' need 'name' and 'value'")
        name, value = entry["name"], entry["value"]
    elif isinstance(entry, (list, tuple)) and len(entry) == 2:
        name, value = entry
    else:
        raise ParseError(f"category '{category}': segments must be [name, value] pairs or objects")
    if not isinstance(name, str):
        raise ParseError(f"category '{category}': segment names must be strings, got {name!r}")
    if not _is_number(value):
        raise ParseError(f"category '{category}': value of segment '{name}' must be a number, got {value!r}")
    return Segment(name, _as_float(value, f"category '{category}': value of segment '{name}'"))


def _segments(category: str, raw: Any) -> List[Segment]:
    if raw is None:
        return []
    if isinstance(raw, Mapping):
        return [_segment(category, [name, value]) for name, value in raw.items()]
    if isinstance(raw, list):
        return [_segment(category, entry) for entry in raw]
    raise ParseError(f"category '{category}': 'segments' must be an object or a list")


def _categories(raw: Any) -> List[Category]:
    if isinstance(raw, Mapping):
        return [Category(str(name), tuple(_segments(str(name), segs))) for name, segs in raw.items()]
    if not isinstance(raw, list):
        raise ParseError("'categories' must be a list or an object")

    categories = []
    for idx, entry in enumerate(raw):
        if not isinstance(entry, Mapping):
            raise ParseError(f"category #{idx + 1} must be an object")
        name = entry.get("name")
        if not isinstance(name, str):
            raise ParseError(f"category #{idx + 1} needs a string 'name'")
        categories.append(Category(name, tuple(_segments(name, entry.get("segments")))))
    return categories


def chart_from_dict(data: Mapping[str, Any]) -> Chart:
    if "categories" not in data:
        raise ParseError("input document has no 'categories'")
    return Chart(
        categories=tuple(_categories(data["categories"])),
        title=_optional_text(data, "title"),
        axis_title=_optional_text(data, "axis_title"),
        category_axis_title=_optional_text(data, "category_axis_title"),
    )


def config_from_dict(style: Mapping[str, Any], base: ChartConfig = ChartConfig()) -> ChartConfig:
    """Overlay the ``style`` object of an input document onto ``base``."""

    changes = {}
    for key, value in style.items():
        if key not in _CONFIG_FIELDS:
            raise ParseError(f"unknown style option '{key}'")
        if key in _NUMERIC_FIELDS and value is not None and not _is_number(value):
            raise ParseError(f"style option '{key}' must be a number, got {value!r}")
        if key in _NUMERIC_FIELDS and value is not None:
            value = _as_float(value, f"style option '{key}'")
        if key == "tick_count_target" and not (isinstance(value, int) and not isinstance(value, bool)):
            raise ParseError(f"style option 'tick_count_target' must be an integer, got {value!r}")
        if key == "palette_override" and value is not None:
            if isinstance(value, Mapping):
                value = dict(value)
            elif isinstance(value, list):
                value = tuple(value)
            else:
                raise ParseError("style option 'palette_override' must be an object or a list")
        changes[key] = value
    return base.replace(**changes)


def parse_chart(text: str, base_config: ChartConfig = ChartConfig()) -> ParsedInput:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise _error_with_pointer(text, exc.lineno, exc.colno, exc.msg) from exc

    if not isinstance(data, Mapping):
        raise ParseError("input document must be a JSON object")
    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        raise ParseError("unknown top-level key(s): " + ", ".join(repr(key) for key in unknown))

    style = data.get("style") or {}
    if not isinstance(style, Mapping):
        raise ParseError("'style' must be an object")

    return ParsedInput(chart=chart_from_dict(data), config=config_from_dict(style, base_config))
