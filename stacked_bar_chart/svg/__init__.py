"""Chart layout → SVG document helpers."""

from .emitter import build_stylesheet, emit_document
from .utils import format_number, style_class_for, svg_to_string

__all__ = [
    "build_stylesheet",
    "emit_document",
    "format_number",
    "style_class_for",
    "svg_to_string",
]
