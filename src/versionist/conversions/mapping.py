"""
Field mapping conversion.

Declarative conversion that copies fields by name from the source value into
the target schema, optionally translating individual values. Target fields
without a source are re-derived from their defaults by the target schema.
"""

from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from ..exceptions import ConversionError, InvalidInputError
from .base import Conversion

if TYPE_CHECKING:
    from ..formats import Format
    from ..value import Value


class FieldMappingConversion(Conversion):
    """Copy and translate field values between two schemas."""

    def __init__(
        self,
        fields: Mapping[str, str],
        values: Optional[Mapping[str, Mapping[Any, Any]]] = None,
        strict: bool = False,
    ):
        """
        Initialize conversion.

        Args:
            fields: Target field name -> source field name
            values: Target field name -> {source value: target value}
            strict: Fail when a source value has no entry in a field's
                translation table instead of passing it through
        """
        self.fields = dict(fields)
        self.values = {name: dict(table) for name, table in (values or {}).items()}
        self.strict = strict

    def map_values(self, value: "Value") -> Dict[str, Any]:
        """Compute the target field mapping for a source value."""
        result: Dict[str, Any] = {}
        for target, source in self.fields.items():
            if not value.has_field(source):
                continue
            field_value = value[source]
            table = self.values.get(target)
            if table is not None:
                if field_value in table:
                    field_value = table[field_value]
                elif self.strict:
                    raise ConversionError(
                        f"No translation for {source}={field_value!r}",
                        details={"field": target, "value": field_value},
                    )
            result[target] = field_value
        return result

    def convert_value(
        self,
        value: "Value",
        to_format: "Format",
        params: Optional[Dict[str, Any]] = None,
    ) -> "Value":
        from ..value import Value

        mapped = self.map_values(value)
        try:
            return Value(mapped, to_format, params)
        except InvalidInputError as e:
            raise ConversionError(
                f"Cannot convert {value} to {to_format!r}: {e.message}",
                details={"cause": e.to_dict()},
            ) from e

    def __repr__(self) -> str:
        return f"FieldMappingConversion(fields={self.fields})"
