"""
Schema: the field graph of a version numbering scheme.

A schema is rooted at a single field. Each field selects its successor from
its own resolved value, so the graph is a tree (or DAG) of fields rather than
a flat list. The schema indexes every reachable field by name and alias.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..exceptions import SchemaDefinitionError
from .field import Field


class Schema:
    """
    Version number schema.

    Schemas are compared by identity: two values share a schema only if
    they were built against the very same schema object.
    """

    def __init__(
        self,
        root_field: Field,
        name: Optional[str] = None,
        modules: Iterable[Any] = (),
    ):
        """
        Initialize schema and index its field graph.

        Args:
            root_field: First field of every version number in this schema
            name: Optional human readable name
            modules: Opaque extension types associated with this schema

        Raises:
            SchemaDefinitionError: On duplicate names/aliases or a cyclic chain
        """
        self.root_field = root_field
        self.name = name
        self.modules: Tuple[Any, ...] = tuple(modules)
        self._fields: List[Field] = []
        self._names: Dict[str, str] = {}
        self._by_name: Dict[str, Field] = {}

        self._walk(root_field, ())

    def _walk(self, field: Field, ancestors: Tuple[Field, ...]) -> None:
        if any(field is a for a in ancestors):
            chain = " -> ".join(a.name for a in ancestors + (field,))
            raise SchemaDefinitionError(
                f"Cyclic field chain: {chain}", schema_name=self.name
            )

        known = self._by_name.get(field.name)
        if known is None:
            self._register(field)
        elif known is not field:
            raise SchemaDefinitionError(
                f"Duplicate field name '{field.name}'", schema_name=self.name
            )

        for child in field.children():
            self._walk(child, ancestors + (field,))

    def _register(self, field: Field) -> None:
        for key in (field.name, *field.aliases):
            if key in self._names:
                raise SchemaDefinitionError(
                    f"Name or alias '{key}' is used by more than one field",
                    schema_name=self.name,
                )
            self._names[key] = field.name
        self._by_name[field.name] = field
        self._fields.append(field)

    def canonical_name(self, name: Any) -> Optional[str]:
        """Return the canonical field name for a name or alias, or None."""
        if isinstance(name, Field):
            name = name.name
        if not isinstance(name, str):
            return None
        return self._names.get(name)

    def field_named(self, name: str) -> Optional[Field]:
        """Return the field with the given name or alias, or None."""
        canonical = self.canonical_name(name)
        return self._by_name.get(canonical) if canonical else None

    @property
    def fields(self) -> Tuple[Field, ...]:
        """All reachable fields in discovery order."""
        return tuple(self._fields)

    def __repr__(self) -> str:
        label = self.name or hex(id(self))
        return f"Schema({label}, fields={[f.name for f in self._fields]})"
