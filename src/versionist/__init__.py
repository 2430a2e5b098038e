"""
versionist: schema-driven version numbers.

A version number is an immutable Value whose fields, their types and the
order they appear in are defined by a pluggable Schema. Formats turn values
into text and back; registered conversions translate values between schemas,
chaining through a standard format's schema when no direct path exists.
"""

from typing import Optional

from .catalog import Catalog, CatalogLoader, load_catalog
from .config import get_settings
from .conversions import (
    Conversion,
    ConversionRegistry,
    FieldMappingConversion,
    FunctionConversion,
    default_conversions,
)
from .exceptions import (
    ConversionError,
    InvalidInputError,
    ParseError,
    SchemaDefinitionError,
    SchemaMismatchError,
    UnknownConversionError,
    UnknownFormatError,
    UnparseError,
    VersionistError,
)
from .formats import DelimiterFormat, FieldStyle, Format, FormatRegistry, default_formats
from .schema import Field, FieldType, Schema, SchemaLoader, build_schema
from .value import Value

__version__ = "0.1.0"


def parse(text: str, format_name: Optional[str] = None) -> Value:
    """
    Parse text with a format from the default registry.

    The standard format is used when no format name is given.
    """
    return default_formats.get(format_name or get_settings().standard_format).parse(text)


__all__ = [
    "Value",
    "parse",
    "Field",
    "FieldType",
    "Schema",
    "SchemaLoader",
    "build_schema",
    "Format",
    "DelimiterFormat",
    "FieldStyle",
    "FormatRegistry",
    "default_formats",
    "Conversion",
    "ConversionRegistry",
    "FieldMappingConversion",
    "FunctionConversion",
    "default_conversions",
    "Catalog",
    "CatalogLoader",
    "load_catalog",
    "VersionistError",
    "InvalidInputError",
    "ParseError",
    "UnparseError",
    "ConversionError",
    "UnknownConversionError",
    "SchemaMismatchError",
    "UnknownFormatError",
    "SchemaDefinitionError",
]
