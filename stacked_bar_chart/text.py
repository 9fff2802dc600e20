"""Approximate text extents; the SVG renderer owns the real font metrics."""

from __future__ import annotations

import math
import unicodedata
from typing import Tuple

GLYPH_WIDTH_EM = 0.6
WIDE_GLYPH_WIDTH_EM = 1.0
LINE_HEIGHT_EM = 1.2
# Distance from the baseline to the vertical center of a line of text.
BASELINE_SHIFT_EM = 0.35
ELLIPSIS = "…"


def _glyph_units(ch: str) -> float:
    if unicodedata.combining(ch):
        return 0.0
    if unicodedata.east_asian_width(ch) in ("W", "F"):
        return WIDE_GLYPH_WIDTH_EM
    return GLYPH_WIDTH_EM


def estimate_text_width(text: str, font_size: float) -> float:
    return sum(_glyph_units(ch) for ch in text) * font_size


def estimate_text_height(font_size: float) -> float:
    return LINE_HEIGHT_EM * font_size


def rotated_extent(width: float, height: float, degrees: float) -> Tuple[float, float]:
    """Axis-aligned (width, height) of a ``width`` x ``height`` box rotated by ``degrees``."""

    theta = math.radians(degrees)
    cos_t = abs(math.cos(theta))
    sin_t = abs(math.sin(theta))
    return (width * cos_t + height * sin_t, width * sin_t + height * cos_t)


def truncate_to_width(text: str, max_width: float, font_size: float) -> str:
    """Shorten ``text`` with a trailing ellipsis until it fits ``max_width``.

    Returns an empty string when not even the ellipsis fits.
    """

    if estimate_text_width(text, font_size) <= max_width:
        return text
    ellipsis_width = estimate_text_width(ELLIPSIS, font_size)
    if ellipsis_width > max_width:
        return ""

    budget = max_width - ellipsis_width
    used = 0.0
    cut = 0
    for ch in text:
        used += _glyph_units(ch) * font_size
        if used > budget:
            break
        cut += 1
    candidate = text[:cut].rstrip() + ELLIPSIS
    # summation order can differ from estimate_text_width by an ulp
    while cut and estimate_text_width(candidate, font_size) > max_width:
        cut -= 1
        candidate = text[:cut].rstrip() + ELLIPSIS
    return candidate
