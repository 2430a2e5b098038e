"""Text formats for version values and the registry that names them."""

from .base import Format
from .delimiter import DelimiterFormat, FieldStyle
from .registry import FormatRegistry, default_formats

__all__ = [
    "Format",
    "DelimiterFormat",
    "FieldStyle",
    "FormatRegistry",
    "default_formats",
]
