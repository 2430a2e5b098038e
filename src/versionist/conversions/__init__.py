"""Conversions between version schemas."""

from .base import Conversion, FunctionConversion
from .mapping import FieldMappingConversion
from .registry import ConversionRegistry, default_conversions

__all__ = [
    "Conversion",
    "FunctionConversion",
    "FieldMappingConversion",
    "ConversionRegistry",
    "default_conversions",
]
