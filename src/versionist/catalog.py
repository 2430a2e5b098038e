"""
Catalog of schemas, formats and conversions.

A catalog is a YAML document describing every version scheme an application
works with:

    schemas:
      - name: triple
        fields:
          - {name: major, next: minor}
          - {name: minor, next: patch}
          - {name: patch}
    formats:
      triple:
        schema: triple
        required_fields: 3
    conversions:
      - from: triple
        to: standard
        fields: {major: major, minor: minor, tiny: patch}

Loading a catalog registers its formats and conversions in the given (or the
default) registries.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .conversions import ConversionRegistry, FieldMappingConversion, default_conversions
from .exceptions import SchemaDefinitionError
from .formats import DelimiterFormat, FieldStyle, Format, FormatRegistry, default_formats
from .logging import get_logger
from .schema import Schema, SchemaDefinition, build_schema

logger = get_logger(__name__)


class StyleDefinition(BaseModel):
    """Pydantic model for a field style."""

    model_config = ConfigDict(extra="forbid")

    delimiter: str = Field(default=".", description="Text written before the field")
    labels: Dict[str, str] = Field(
        default_factory=dict, description="Symbol value -> text written for it"
    )


class FormatDefinition(BaseModel):
    """Pydantic model for a delimiter format definition."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    schema_name: str = Field(..., alias="schema", description="Schema name")
    required_fields: int = Field(
        default=1, ge=1, description="Leading fields always written"
    )
    styles: Dict[str, StyleDefinition] = Field(
        default_factory=dict, description="Per-field styles"
    )


class ConversionDefinition(BaseModel):
    """Pydantic model for a field mapping conversion."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    from_schema: str = Field(..., alias="from", description="Source schema name")
    to_schema: str = Field(..., alias="to", description="Target schema name")
    fields: Dict[str, str] = Field(..., description="Target field -> source field")
    values: Dict[str, Dict[Any, Any]] = Field(
        default_factory=dict, description="Per-field value translation tables"
    )
    strict: bool = Field(
        default=False, description="Fail on values missing from a translation table"
    )

    @field_validator("fields")
    @classmethod
    def validate_fields_not_empty(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Validate that at least one field is mapped."""
        if not v:
            raise ValueError("A conversion must map at least one field")
        return v


class CatalogConfig(BaseModel):
    """Pydantic model for catalog validation."""

    model_config = ConfigDict(extra="forbid")

    schemas: List[SchemaDefinition] = Field(default_factory=list)
    formats: Dict[str, FormatDefinition] = Field(default_factory=dict)
    conversions: List[ConversionDefinition] = Field(default_factory=list)


@dataclass
class Catalog:
    """Objects built from a catalog."""

    schemas: Dict[str, Schema] = field(default_factory=dict)
    formats: Dict[str, Format] = field(default_factory=dict)
    conversions: List[FieldMappingConversion] = field(default_factory=list)

    def get_statistics(self) -> Dict[str, int]:
        return {
            "schemas": len(self.schemas),
            "formats": len(self.formats),
            "conversions": len(self.conversions),
        }


def load_catalog(
    data: Union[CatalogConfig, Mapping[str, Any]],
    formats: Optional[FormatRegistry] = None,
    conversions: Optional[ConversionRegistry] = None,
    replace: bool = False,
) -> Catalog:
    """
    Build a catalog and register its formats and conversions.

    Args:
        data: A CatalogConfig or a mapping that validates as one
        formats: Format registry to populate (default registry if None)
        conversions: Conversion registry to populate (default registry if None)
        replace: Allow replacing formats that are already registered

    Returns:
        The built Catalog

    Raises:
        SchemaDefinitionError: If the catalog is invalid
    """
    format_registry = formats if formats is not None else default_formats
    conversion_registry = conversions if conversions is not None else default_conversions

    if not isinstance(data, CatalogConfig):
        try:
            data = CatalogConfig.model_validate(data)
        except ValidationError as e:
            raise SchemaDefinitionError(
                f"Invalid catalog: {e}",
                details={"errors": e.errors(include_url=False)},
            ) from e

    catalog = Catalog()

    for schema_def in data.schemas:
        if schema_def.name in catalog.schemas:
            raise SchemaDefinitionError(
                f"Duplicate schema '{schema_def.name}'", schema_name=schema_def.name
            )
        catalog.schemas[schema_def.name] = build_schema(schema_def)

    def schema_named(name: str, context: str) -> Schema:
        schema = catalog.schemas.get(name)
        if schema is None:
            raise SchemaDefinitionError(
                f"{context} refers to unknown schema '{name}'", schema_name=name
            )
        return schema

    for format_name, format_def in data.formats.items():
        styles = {
            name: FieldStyle(delimiter=style.delimiter, labels=dict(style.labels))
            for name, style in format_def.styles.items()
        }
        fmt = DelimiterFormat(
            schema_named(format_def.schema_name, f"Format '{format_name}'"),
            styles=styles,
            required_fields=format_def.required_fields,
            name=format_name,
        )
        try:
            format_registry.register(format_name, fmt, replace=replace)
        except ValueError as e:
            raise SchemaDefinitionError(str(e)) from e
        catalog.formats[format_name] = fmt

    for conversion_def in data.conversions:
        context = f"Conversion {conversion_def.from_schema}->{conversion_def.to_schema}"
        source = schema_named(conversion_def.from_schema, context)
        target = schema_named(conversion_def.to_schema, context)
        conversion = FieldMappingConversion(
            conversion_def.fields, conversion_def.values, strict=conversion_def.strict
        )
        conversion_registry.register(source, target, conversion)
        catalog.conversions.append(conversion)

    logger.info("Loaded version catalog", **catalog.get_statistics())
    return catalog


class CatalogLoader:
    """
    Loads and validates a catalog from a YAML file.
    """

    def __init__(self, catalog_path: Union[str, Path]):
        """
        Initialize CatalogLoader.

        Args:
            catalog_path: Path to the catalog YAML file
        """
        self.catalog_path = Path(catalog_path)

    def read(self) -> CatalogConfig:
        """
        Read and validate the catalog file without building anything.

        Raises:
            FileNotFoundError: If the catalog file doesn't exist
            SchemaDefinitionError: If the catalog file is invalid
        """
        if not self.catalog_path.exists():
            raise FileNotFoundError(f"Catalog file not found: {self.catalog_path}")

        try:
            with open(self.catalog_path, "r", encoding="utf-8") as f:
                raw_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SchemaDefinitionError(f"Invalid YAML in catalog file: {e}") from e

        if not raw_data:
            raise SchemaDefinitionError(f"Catalog file is empty: {self.catalog_path}")

        try:
            return CatalogConfig.model_validate(raw_data)
        except ValidationError as e:
            raise SchemaDefinitionError(
                f"Invalid catalog {self.catalog_path}: {e}",
                details={"errors": e.errors(include_url=False)},
            ) from e

    def load(
        self,
        formats: Optional[FormatRegistry] = None,
        conversions: Optional[ConversionRegistry] = None,
        replace: bool = False,
    ) -> Catalog:
        """Read the catalog file and register its contents."""
        logger.info("Loading version catalog", catalog_path=str(self.catalog_path))
        return load_catalog(self.read(), formats, conversions, replace=replace)

    def __repr__(self) -> str:
        return f"CatalogLoader(path={self.catalog_path})"
