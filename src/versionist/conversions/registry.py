"""
Conversion registry.

Maps (source schema, target schema) pairs to conversions. The registry also
names the standard format whose schema serves as the hub when no direct
conversion exists between two schemas.
"""

from typing import Dict, Optional, Tuple, Union

from ..config import get_settings
from ..formats import Format, FormatRegistry, default_formats
from ..logging import get_logger
from ..schema import Schema
from .base import Conversion

logger = get_logger(__name__)

SchemaRef = Union[Schema, Format]


def _schema_of(ref: SchemaRef) -> Schema:
    return ref.schema if isinstance(ref, Format) else ref


class ConversionRegistry:
    """Registry of conversions between schemas."""

    def __init__(
        self,
        formats: Optional[FormatRegistry] = None,
        standard_format: Optional[str] = None,
    ):
        """
        Initialize registry.

        Args:
            formats: Registry used to resolve the standard format
            standard_format: Name of the standard format; defaults to the
                ``standard_format`` setting
        """
        self.formats = formats if formats is not None else default_formats
        self._standard_format = standard_format
        self._conversions: Dict[Tuple[Schema, Schema], Conversion] = {}

    @property
    def standard_format_name(self) -> str:
        return self._standard_format or get_settings().standard_format

    def register(
        self, from_schema: SchemaRef, to_schema: SchemaRef, conversion: Conversion
    ) -> Conversion:
        """
        Register a conversion. Formats are accepted in place of schemas.

        Returns:
            The registered conversion
        """
        source, target = _schema_of(from_schema), _schema_of(to_schema)
        self._conversions[(source, target)] = conversion
        logger.info(
            "Registered conversion",
            from_schema=source.name,
            to_schema=target.name,
        )
        return conversion

    def get(self, from_schema: SchemaRef, to_schema: SchemaRef) -> Optional[Conversion]:
        """Return the conversion between two schemas, or None."""
        return self._conversions.get((_schema_of(from_schema), _schema_of(to_schema)))

    def standard(self) -> Optional[Format]:
        """Return the standard format, or None if it is not registered."""
        return self.formats.get(self.standard_format_name, strict=False)

    def clear(self) -> None:
        self._conversions.clear()

    def __len__(self) -> int:
        return len(self._conversions)


default_conversions = ConversionRegistry(default_formats)
