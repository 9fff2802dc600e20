"""Segment color allocation.

Generated palettes spread hues evenly around the HSL wheel so any two legend
keys are at least ``360 / N`` degrees apart. Explicit palettes are used
verbatim, either by segment name (mapping) or by legend position (sequence).
"""

from __future__ import annotations

import colorsys
import logging
import re
from collections.abc import Mapping
from typing import List, Optional, Sequence

import numpy as np

from .logging_utils import apply_debug_logging
from .model import ChartError, ColorAssignment, Palette

logger = logging.getLogger(__name__)

SATURATION = 0.65
LIGHTNESS = 0.50
HUE_OFFSET_DEG = 0.0

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class PaletteTooSmall(ChartError):
    """Raised when an explicit palette cannot color every legend key."""

    def __init__(self, required: int, supplied: int, missing: Sequence[str] = ()):
        self.required = required
        self.supplied = supplied
        self.missing = tuple(missing)
        message = f"palette supplies {supplied} color(s) but {required} segment name(s) need one"
        if self.missing:
            message += " (missing: " + ", ".join(self.missing) + ")"
        super().__init__(message)


def is_hex_color(value: object) -> bool:
    return isinstance(value, str) and bool(_HEX_COLOR_RE.match(value))


def normalize_hex(color: str) -> str:
    """Return ``#rrggbb`` for a 3- or 6-digit hex color."""

    if not is_hex_color(color):
        raise ValueError(f"Invalid hex color {color!r}")
    digits = color[1:].lower()
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return "#" + digits


def hsl_to_hex(hue_deg: float, saturation: float = SATURATION, lightness: float = LIGHTNESS) -> str:
    r, g, b = colorsys.hls_to_rgb((hue_deg % 360.0) / 360.0, lightness, saturation)
    return "#%02x%02x%02x" % (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))


def hex_to_hue(color: str) -> float:
    """Hue in degrees of a hex color; used to audit palette separation."""

    digits = normalize_hex(color)[1:]
    r, g, b = (int(digits[i : i + 2], 16) / 255.0 for i in (0, 2, 4))
    hue, _, _ = colorsys.rgb_to_hls(r, g, b)
    return hue * 360.0


def hue_palette(n: int) -> List[str]:
    """``n`` colors with hues ``i * 360 / n`` at fixed saturation/lightness."""

    if n <= 0:
        return []
    hues = HUE_OFFSET_DEG + np.linspace(0.0, 360.0, n, endpoint=False)
    return [hsl_to_hex(float(hue)) for hue in hues]


def allocate_colors(
    names: Sequence[str],
    palette: Optional[Palette] = None,
    *,
    auto_fill: bool = False,
) -> ColorAssignment:
    """Map each legend key in ``names`` to a color.

    ``names`` must already be in first-seen order; the same ordered names
    always yield the same colors.
    """

    names = tuple(names)
    if len(set(names)) != len(names):
        raise ValueError("legend keys must be distinct")
    count = len(names)

    if palette is None:
        return ColorAssignment(names=names, colors=tuple(hue_palette(count)), generated=names)

    chosen: List[Optional[str]]
    if isinstance(palette, Mapping):
        chosen = [palette.get(name) for name in names]
    else:
        entries = list(palette)
        chosen = [entries[idx] if idx < len(entries) else None for idx in range(count)]

    missing = [name for name, color in zip(names, chosen) if color is None]
    if missing and not auto_fill:
        raise PaletteTooSmall(required=count, supplied=count - len(missing), missing=missing)

    fallback = hue_palette(count) if missing else []
    colors = [
        normalize_hex(color) if color is not None else fallback[idx]
        for idx, color in enumerate(chosen)
    ]
    return ColorAssignment(names=names, colors=tuple(colors), generated=tuple(missing))


apply_debug_logging(globals(), logger=logger)
