"""Schema model: fields, their conditional chain and declarative loading."""

from .field import Field, FieldType
from .schema import Schema
from .loader import FieldDefinition, SchemaDefinition, SchemaLoader, build_schema

__all__ = [
    "Field",
    "FieldType",
    "Schema",
    "FieldDefinition",
    "SchemaDefinition",
    "SchemaLoader",
    "build_schema",
]
