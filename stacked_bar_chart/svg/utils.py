import hashlib
import io
import math
import re

import svgwrite

_CLASS_UNSAFE_RE = re.compile(r"[^A-Za-z0-9_-]+")
_CSS_UNSAFE_RE = re.compile(r"[{};<>]")

SEGMENT_CLASS_PREFIX = "seg-"


def format_number(value: float) -> str:
    if math.isnan(value) or math.isinf(value):
        raise ValueError("Cannot format non-finite float for SVG output")
    formatted = f"{value:.4f}".rstrip("0").rstrip(".")
    if formatted in ("", "-0"):
        return "0"
    return formatted


def style_class_for(name: str) -> str:
    """CSS class for a segment name; the same name always maps to the same class.

    Names that are already valid class tokens are kept readable. Otherwise the
    sanitized name gets a short digest of the original so two different names
    never collapse onto one class.
    """

    slug = _CLASS_UNSAFE_RE.sub("-", name).strip("-")
    if slug and slug == name:
        return SEGMENT_CLASS_PREFIX + slug
    digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:6]
    if slug:
        return f"{SEGMENT_CLASS_PREFIX}{slug}-{digest}"
    return SEGMENT_CLASS_PREFIX + digest


def css_safe(value: str) -> str:
    return _CSS_UNSAFE_RE.sub("", value).strip()


def svg_to_string(drawing: svgwrite.Drawing, *, pretty: bool = False) -> str:
    """Serialize ``drawing`` including the XML declaration."""

    buffer = io.StringIO()
    drawing.write(buffer, pretty=pretty)
    return buffer.getvalue()
