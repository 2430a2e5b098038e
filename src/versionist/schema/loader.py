"""
Declarative schema definitions.

Builds a Schema from a dict or YAML document listing its fields and the way
each field selects its successor.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import SchemaDefinitionError
from .field import Field as VersionField
from .field import FieldType
from .schema import Schema

logger = logging.getLogger(__name__)


class FieldDefinition(BaseModel):
    """Pydantic model for a single field definition."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Canonical field name")
    field_type: FieldType = Field(
        default=FieldType.INTEGER, alias="type", description="Field value type"
    )
    default: Optional[Any] = Field(default=None, description="Default value")
    aliases: List[str] = Field(default_factory=list, description="Alternative names")
    symbols: List[str] = Field(
        default_factory=list, description="Ordered symbols for symbol fields"
    )
    next: Optional[str] = Field(
        default=None, description="Field following this one by default"
    )
    next_by_value: Dict[Any, Optional[str]] = Field(
        default_factory=dict,
        description="Field following this one for specific values (null ends the chain)",
    )
    description: Optional[str] = Field(default=None, description="Field description")

    @field_validator("symbols")
    @classmethod
    def validate_symbols_unique(cls, v: List[str]) -> List[str]:
        """Validate that symbols are not repeated."""
        lowered = [s.lower() for s in v]
        if len(set(lowered)) != len(lowered):
            raise ValueError("Symbols must be unique (case-insensitive)")
        return v


class SchemaDefinition(BaseModel):
    """Pydantic model for schema definition validation."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, description="Schema name")
    root: Optional[str] = Field(
        default=None, description="Root field name (defaults to the first field)"
    )
    description: Optional[str] = Field(default=None, description="Schema description")
    fields: List[FieldDefinition] = Field(..., description="Field definitions")

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v: List[FieldDefinition]) -> List[FieldDefinition]:
        """Validate that fields are present and uniquely named."""
        if not v:
            raise ValueError("At least one field must be defined")
        names = [f.name for f in v]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate field names: {duplicates}")
        return v


def build_schema(definition: Union[SchemaDefinition, Mapping[str, Any]]) -> Schema:
    """
    Build a Schema from a definition.

    Args:
        definition: A SchemaDefinition or a mapping that validates as one

    Returns:
        The constructed Schema

    Raises:
        SchemaDefinitionError: If the definition is invalid or references
            unknown fields
    """
    if not isinstance(definition, SchemaDefinition):
        try:
            definition = SchemaDefinition.model_validate(definition)
        except ValidationError as e:
            raise SchemaDefinitionError(
                f"Invalid schema definition: {e}",
                details={"errors": e.errors(include_url=False)},
            ) from e

    fields: Dict[str, VersionField] = {}
    for field_def in definition.fields:
        fields[field_def.name] = VersionField(
            name=field_def.name,
            field_type=field_def.field_type,
            default_value=field_def.default,
            aliases=field_def.aliases,
            symbols=field_def.symbols,
            description=field_def.description,
        )

    def resolve(ref: Optional[str], source: str) -> Optional[VersionField]:
        if ref is None:
            return None
        if ref not in fields:
            raise SchemaDefinitionError(
                f"Field '{source}' refers to unknown field '{ref}'",
                schema_name=definition.name,
            )
        return fields[ref]

    for field_def in definition.fields:
        field = fields[field_def.name]
        field.link(resolve(field_def.next, field_def.name))
        for value, ref in field_def.next_by_value.items():
            field.link(resolve(ref, field_def.name), value)

    root_name = definition.root or definition.fields[0].name
    root = resolve(root_name, "<root>")

    schema = Schema(root, name=definition.name)

    unreachable = [name for name in fields if schema.field_named(name) is None]
    if unreachable:
        logger.warning(
            "Schema '%s' defines unreachable fields: %s", definition.name, unreachable
        )

    return schema


class SchemaLoader:
    """
    Loads and validates a schema definition from a YAML file.
    """

    def __init__(self, schema_path: Union[str, Path]):
        """
        Initialize SchemaLoader.

        Args:
            schema_path: Path to the schema YAML file
        """
        self.schema_path = Path(schema_path)
        self._schema: Optional[Schema] = None

    def load_schema(self, force_reload: bool = False) -> Schema:
        """
        Load schema from YAML file.

        Args:
            force_reload: Rebuild even if a schema was already loaded

        Returns:
            Loaded Schema object

        Raises:
            FileNotFoundError: If schema file doesn't exist
            SchemaDefinitionError: If schema file is invalid
        """
        if self._schema is not None and not force_reload:
            return self._schema

        if not self.schema_path.exists():
            raise FileNotFoundError(f"Schema file not found: {self.schema_path}")

        logger.info("Loading schema from: %s", self.schema_path)

        try:
            with open(self.schema_path, "r", encoding="utf-8") as f:
                raw_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SchemaDefinitionError(f"Invalid YAML in schema file: {e}") from e

        if not raw_data:
            raise SchemaDefinitionError(f"Schema file is empty: {self.schema_path}")

        self._schema = build_schema(raw_data)
        return self._schema

    def __repr__(self) -> str:
        return f"SchemaLoader(path={self.schema_path}, loaded={self._schema is not None})"
