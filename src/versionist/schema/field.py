"""
Field definitions for version number schemas.

A field is one named component of a version number. Besides its default
value, a field knows how to canonicalize raw input, bump and compare its
values, and which field follows it in the chain given its own value.
"""

from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Sequence, Tuple

from ..exceptions import InvalidInputError, SchemaDefinitionError


class FieldType(str, Enum):
    """Value types understood by the built-in field behaviour."""

    INTEGER = "integer"
    STRING = "string"
    SYMBOL = "symbol"


def _sign(result: int) -> int:
    return (result > 0) - (result < 0)


class Field:
    """
    A single named field in a schema's field graph.

    Fields are compared and hashed by identity. A schema may route a field to
    different next fields depending on its resolved value, so the realized
    chain of a version number depends on its values.

    A custom ``canonicalize`` must accept already-canonical values and return
    them unchanged. It sees the type default, bumped values and every value
    carried over when a version number is rebuilt.
    """

    def __init__(
        self,
        name: str,
        field_type: FieldType = FieldType.INTEGER,
        default_value: Any = None,
        aliases: Iterable[str] = (),
        symbols: Sequence[str] = (),
        bump: Optional[Callable[[Any], Any]] = None,
        canonicalize: Optional[Callable[[Any], Any]] = None,
        compare: Optional[Callable[[Any, Any], int]] = None,
        description: Optional[str] = None,
    ):
        """
        Initialize a field.

        Args:
            name: Canonical field name, unique within a schema
            field_type: Type driving the built-in canonicalize/bump/compare
            default_value: Value used when input omits the field
            aliases: Alternative names resolving to this field
            symbols: Ordered legal values for symbol fields, lowest first
            bump: Optional override computing the bumped value
            canonicalize: Optional override converting raw input
            compare: Optional override returning a negative, zero or positive int
            description: Human readable description
        """
        if not name:
            raise SchemaDefinitionError("Field name cannot be empty")
        self.name = name
        self.field_type = FieldType(field_type)
        self.aliases: Tuple[str, ...] = tuple(aliases)
        self.symbols: Tuple[str, ...] = tuple(str(s) for s in symbols)
        self.description = description

        if self.field_type == FieldType.SYMBOL and not self.symbols:
            raise SchemaDefinitionError(
                f"Symbol field '{name}' requires at least one symbol"
            )

        self._bump = bump
        self._canonicalize = canonicalize
        self._compare = compare

        if default_value is None:
            default_value = self._type_default()
        self.default_value = self.canonicalize(default_value)

        self._default_child: Optional["Field"] = None
        self._children: Dict[Any, Optional["Field"]] = {}

    def _type_default(self) -> Any:
        if self.field_type == FieldType.INTEGER:
            return 0
        if self.field_type == FieldType.SYMBOL:
            return self.symbols[0]
        return ""

    # ---- Chain wiring ----
    def link(self, child: Optional["Field"], *when: Any) -> Optional["Field"]:
        """
        Route this field to the given child.

        With no values, sets the default next field. With values, those
        resolved values of this field lead to ``child`` instead; a ``None``
        child ends the chain for them.

        Returns:
            The child, to allow chaining definitions
        """
        if not when:
            self._default_child = child
            return child
        for value in when:
            self._children[self.canonicalize(value)] = child
        return child

    def next_field(self, value: Any) -> Optional["Field"]:
        """Return the field that follows this one when it holds ``value``."""
        if value in self._children:
            return self._children[value]
        return self._default_child

    def routes_by_value(self, value: Any) -> bool:
        """Whether ``value`` selects its next field explicitly rather than by default."""
        return value in self._children

    def children(self) -> Iterator["Field"]:
        """Iterate over every distinct field reachable in one step."""
        seen = set()
        for child in [self._default_child, *self._children.values()]:
            if child is not None and id(child) not in seen:
                seen.add(id(child))
                yield child

    # ---- Value behaviour ----
    def canonicalize(self, raw: Any) -> Any:
        """
        Convert raw input into this field's value type.

        Raises:
            InvalidInputError: If the raw value is not legal for this field
        """
        if self._canonicalize is not None:
            try:
                return self._canonicalize(raw)
            except (TypeError, ValueError) as e:
                raise InvalidInputError(
                    f"Invalid value {raw!r} for field '{self.name}': {e}",
                    field_name=self.name,
                ) from e

        if self.field_type == FieldType.INTEGER:
            if isinstance(raw, bool):
                raise InvalidInputError(
                    f"Invalid value {raw!r} for integer field '{self.name}'",
                    field_name=self.name,
                )
            try:
                return int(raw)
            except (TypeError, ValueError) as e:
                raise InvalidInputError(
                    f"Invalid value {raw!r} for integer field '{self.name}'",
                    field_name=self.name,
                ) from e

        if self.field_type == FieldType.SYMBOL:
            text = str(raw).strip().lower()
            for symbol in self.symbols:
                if symbol.lower() == text:
                    return symbol
            raise InvalidInputError(
                f"Unknown symbol {raw!r} for field '{self.name}'",
                field_name=self.name,
                details={"symbols": list(self.symbols)},
            )

        return str(raw)

    def bump_value(self, value: Any) -> Any:
        """Return the value following ``value``; equal to it at a fixed point."""
        if self._bump is not None:
            return self.canonicalize(self._bump(value))
        if self.field_type == FieldType.INTEGER:
            return value + 1
        if self.field_type == FieldType.SYMBOL:
            index = self.symbols.index(value)
            if index + 1 < len(self.symbols):
                return self.symbols[index + 1]
        return value

    def compare(self, a: Any, b: Any) -> int:
        """Compare two values of this field, returning -1, 0 or 1."""
        if self._compare is not None:
            return _sign(self._compare(a, b))
        if self.field_type == FieldType.SYMBOL:
            a, b = self.symbols.index(a), self.symbols.index(b)
        if a == b:
            return 0
        return -1 if a < b else 1

    def __repr__(self) -> str:
        return f"Field(name={self.name!r}, type={self.field_type.value})"
