"""
Version number values.

A Value is an immutable snapshot of one version number: the chain of fields
realized for its particular values, and the value of each field on that
chain. Every modifying operation builds a new Value through the constructor,
so the chain always agrees with the values.

For example, with a ``major.minor.patch`` schema the version ``1.4.2`` has
the values ``[1, 4, 2]`` for the fields ``[major, minor, patch]``.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .conversions import ConversionRegistry, default_conversions
from .exceptions import (
    ConversionError,
    InvalidInputError,
    ParseError,
    SchemaDefinitionError,
    SchemaMismatchError,
    UnknownConversionError,
    UnparseError,
)
from .formats import Format
from .logging import get_logger
from .schema import Field, Schema

logger = get_logger(__name__)

FieldRef = Union[Field, str, int]
RawValues = Union[Mapping[str, Any], Sequence[Any]]


def _canonicalize_keys(schema: Schema, values: Mapping[Any, Any]) -> Dict[str, Any]:
    """Map names and aliases to canonical names, dropping unknown keys."""
    result: Dict[str, Any] = {}
    for key, raw in values.items():
        name = schema.canonical_name(key)
        if name is not None:
            result[name] = raw
    return result


class Value:
    """
    An immutable version number.

    Values built from a mapping or from a positional sequence with the same
    content are equal. Fields can be addressed by Field object, by name or
    alias, or by position in the realized field chain.
    """

    __slots__ = ("_format", "_unparse_params", "_field_path", "_values", "_hash")

    def __init__(
        self,
        values: RawValues,
        format: Format,
        unparse_params: Optional[Dict[str, Any]] = None,
    ):
        """
        Create a value.

        Args:
            values: Field name (or alias) -> raw value mapping, or raw values
                in field chain order. Unknown names are ignored; missing
                fields take their defaults.
            format: Format defining the schema and text representation
            unparse_params: Formatting defaults replayed by unparse

        Raises:
            InvalidInputError: If values is neither a mapping nor a sequence,
                or a raw value is not legal for its field
        """
        schema = format.schema
        named: Optional[Dict[str, Any]] = None
        positional: Optional[Iterator[Any]] = None

        if isinstance(values, Mapping):
            named = _canonicalize_keys(schema, values)
        elif isinstance(values, Sequence) and not isinstance(values, (str, bytes, bytearray)):
            positional = iter(list(values))
        else:
            raise InvalidInputError(
                f"Expected a mapping or sequence but got {type(values).__name__}"
            )

        path: List[Field] = []
        resolved: Dict[str, Any] = {}
        field_: Optional[Field] = schema.root_field

        while field_ is not None:
            if field_.name in resolved:
                raise SchemaDefinitionError(
                    f"Field chain revisits '{field_.name}'", schema_name=schema.name
                )
            if named is not None:
                raw = named.get(field_.name)
            else:
                raw = next(positional, None)  # type: ignore[arg-type]
            value = field_.default_value if raw is None else field_.canonicalize(raw)
            path.append(field_)
            resolved[field_.name] = value
            field_ = field_.next_field(value)

        self._format = format
        self._unparse_params = dict(unparse_params) if unparse_params is not None else None
        self._field_path: Tuple[Field, ...] = tuple(path)
        self._values = resolved
        self._hash: Optional[int] = None

    # ---- Text ----
    def unparse(self, params: Optional[Dict[str, Any]] = None) -> str:
        """
        Render this value using its format.

        Raises:
            UnparseError: If the format cannot render this value
        """
        return self._format.unparse(self, params)

    def _debug_text(self) -> str:
        fields = " ".join(f"{f.name}={self._values[f.name]!r}" for f in self._field_path)
        return f"<{self.__class__.__name__} {self._format!r} {fields}>"

    def __str__(self) -> str:
        try:
            return self.unparse()
        except UnparseError:
            return self._debug_text()

    def __repr__(self) -> str:
        try:
            return f"<{self.__class__.__name__} {self.unparse()!r}>"
        except UnparseError:
            return self._debug_text()

    # ---- Accessors ----
    @property
    def schema(self) -> Schema:
        """Schema defining the structure and semantics of this value."""
        return self._format.schema

    @property
    def format(self) -> Format:
        """Format defining the schema and text representation of this value."""
        return self._format

    @property
    def unparse_params(self) -> Optional[Dict[str, Any]]:
        """A copy of the remembered unparse params, or None."""
        return dict(self._unparse_params) if self._unparse_params is not None else None

    @property
    def field_path(self) -> Tuple[Field, ...]:
        """Fields realized by this value, most significant first."""
        return self._field_path

    def fields(self) -> Iterator[Tuple[Field, Any]]:
        """Iterate over (field, value) pairs in field order."""
        for field_ in self._field_path:
            yield field_, self._values[field_.name]

    def field_names(self) -> List[str]:
        return [f.name for f in self._field_path]

    def values_array(self) -> List[Any]:
        """Field values in field order."""
        return [self._values[f.name] for f in self._field_path]

    def values_dict(self) -> Dict[str, Any]:
        """Field values keyed by canonical field name."""
        return dict(self._values)

    def has_field(self, field: FieldRef) -> bool:
        """
        Return whether this value contains the given field.

        Args:
            field: A Field object, a field name or alias, or a field index

        Raises:
            TypeError: For any other kind of reference
        """
        if isinstance(field, Field):
            return any(f is field for f in self._field_path)
        if isinstance(field, int) and not isinstance(field, bool):
            return 0 <= field < len(self._field_path)
        if isinstance(field, str):
            return self.schema.canonical_name(field) in self._values
        raise TypeError(f"Unsupported field reference: {field!r}")

    __contains__ = has_field

    def get(self, field: FieldRef) -> Any:
        """Return a field's value, or None if the field is not recognized."""
        name = self._interpret_field(field)
        return self._values.get(name) if name is not None else None

    __getitem__ = get

    def __getattr__(self, name: str) -> Any:
        # Only called for names that are not real attributes, e.g. value.major
        if not name.startswith("_"):
            canonical = self.schema.canonical_name(name)
            if canonical is not None and canonical in self._values:
                return self._values[canonical]
        raise AttributeError(
            f"{self.__class__.__name__!r} object has no attribute {name!r}"
        )

    def _interpret_field(self, field: Any) -> Optional[str]:
        if isinstance(field, Field):
            return field.name if self.schema.field_named(field.name) is field else None
        if isinstance(field, int) and not isinstance(field, bool):
            if 0 <= field < len(self._field_path):
                return self._field_path[field].name
            return None
        if isinstance(field, str):
            return self.schema.canonical_name(field)
        return None

    # ---- Derived values ----
    def bump(self, field: FieldRef) -> "Value":
        """
        Return a value with the given field bumped.

        Fields after the bumped one are re-derived from their defaults.
        Returns self if the field is not recognized or cannot be bumped.
        """
        name = self._interpret_field(field)
        if name is None or name not in self._values:
            return self
        values: List[Any] = []
        for field_, old in self.fields():
            if field_.name == name:
                new = field_.bump_value(old)
                if new == old:
                    return self
                values.append(new)
                return Value(values, self._format, self._unparse_params)
            values.append(old)
        return self

    def reset(self, field: FieldRef) -> "Value":
        """
        Return a value with the given field reset to its default.

        Fields after the reset one are re-derived from their defaults.
        Returns self if the field is not recognized.
        """
        name = self._interpret_field(field)
        if name is None or name not in self._values:
            return self
        values: List[Any] = []
        for field_, old in self.fields():
            if field_.name == name:
                values.append(field_.default_value)
                return Value(values, self._format, self._unparse_params)
            values.append(old)
        return self

    def change(
        self,
        values: Optional[Mapping[str, Any]] = None,
        unparse_params: Optional[Dict[str, Any]] = None,
    ) -> "Value":
        """
        Return a value with the given fields changed.

        Other fields keep their values unless the change alters which fields
        the chain contains. Unparse param overrides are merged into the
        remembered params.

        Args:
            values: Field name (or alias) -> new raw value
            unparse_params: Unparse params to merge

        Raises:
            InvalidInputError: If values is not a mapping or holds an
                illegal value
        """
        values = values or {}
        if not isinstance(values, Mapping):
            raise InvalidInputError(
                f"Expected a mapping of changes but got {type(values).__name__}"
            )
        if not values and not unparse_params:
            return self

        params = self._unparse_params
        if unparse_params:
            params = {**(params or {}), **unparse_params}

        merged = {**self._values, **_canonicalize_keys(self.schema, values)}
        return Value(merged, self._format, params)

    def convert(
        self,
        format: Union[Format, str],
        params: Optional[Dict[str, Any]] = None,
        conversions: Optional[ConversionRegistry] = None,
    ) -> "Value":
        """
        Convert this value to another format.

        Args:
            format: Target format, or the name of a registered format
            params: Unparse params for the converted value
            conversions: Registry to use instead of the default one

        Raises:
            UnknownFormatError: If a format name is not registered
            UnknownConversionError: If no conversion path exists
            ConversionError: If a conversion fails
        """
        registry = conversions if conversions is not None else default_conversions
        if isinstance(format, str):
            format = registry.formats.get(format)
        if format is self._format:
            return self

        from_schema = self.schema
        to_schema = format.schema
        if from_schema is to_schema:
            return Value(self._values, format, params)

        conversion = registry.get(from_schema, to_schema)
        if conversion is not None:
            return conversion.convert_value(self, format, params)

        standard = registry.standard()
        if standard is not None:
            to_standard = registry.get(from_schema, standard)
            from_standard = registry.get(standard, to_schema)
            if to_standard is not None and from_standard is not None:
                logger.debug(
                    "Converting through standard format",
                    from_schema=from_schema.name,
                    to_schema=to_schema.name,
                    standard_format=registry.standard_format_name,
                )
                intermediate = to_standard.convert_value(self, standard, params)
                return from_standard.convert_value(intermediate, format, params)

        raise UnknownConversionError(
            f"No conversion from schema '{from_schema.name}' to '{to_schema.name}'",
            from_schema=from_schema.name,
            to_schema=to_schema.name,
        )

    # ---- Equality and ordering ----
    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset(self._values.items()))
        return self._hash

    def eql(self, other: Any) -> bool:
        """
        Return whether other has exactly this schema chain and these values.

        Strings are parsed with this value's format. Unlike ``==``, no
        conversion between schemas is attempted.
        """
        if isinstance(other, str):
            try:
                other = self._format.parse(other)
            except ParseError:
                return False
        if not isinstance(other, Value):
            return False
        if len(other._field_path) != len(self._field_path):
            return False
        for mine, theirs in zip(self._field_path, other._field_path):
            if mine is not theirs:
                return False
            if self._values[mine.name] != other._values[theirs.name]:
                return False
        return True

    def compare(self, other: Any) -> Optional[int]:
        """
        Three-way comparison.

        Returns a negative number if other is greater, zero if the two are
        value-equal, positive if self is greater. Strings are parsed with
        this value's format; values of another schema are converted to this
        value's format first. Returns None when the two are incomparable.

        Raises:
            ParseError: If other is a string this format cannot parse
        """
        if isinstance(other, str):
            other = self._format.parse(other)
        if not isinstance(other, Value):
            return None
        if other.schema is not self.schema:
            try:
                other = other.convert(self._format)
            except ConversionError:
                return None

        for field_, mine in self.fields():
            theirs = other._values.get(field_.name, field_.default_value)
            result = field_.compare(mine, theirs)
            if result:
                return result
        for field_, theirs in other.fields():
            if field_.name not in self._values:
                result = field_.compare(field_.default_value, theirs)
                if result:
                    return result
        return 0

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, (Value, str)):
            return NotImplemented
        try:
            return self.compare(other) == 0
        except ParseError:
            return False

    def _ordered(self, other: Any) -> int:
        result = self.compare(other)
        if result is None:
            raise SchemaMismatchError(
                f"Cannot order {self} against {other!r}",
                details={"schema": self.schema.name},
            )
        return result

    def __lt__(self, other: Any) -> bool:
        return self._ordered(other) < 0

    def __le__(self, other: Any) -> bool:
        return self._ordered(other) <= 0

    def __gt__(self, other: Any) -> bool:
        return self._ordered(other) > 0

    def __ge__(self, other: Any) -> bool:
        return self._ordered(other) >= 0

    # ---- Copying and pickling ----
    def __copy__(self) -> "Value":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "Value":
        return self

    def __reduce__(self) -> Tuple[Any, ...]:
        from .serialization import dump, load

        return (load, (dump(self),))
