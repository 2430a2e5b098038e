"""
Delimiter-based text format.

Renders a value as its field chain joined by per-field delimiters, e.g.
``1.4.2`` or ``2.0rc1``. Parsing walks the schema chain consuming text, so
conditional fields only appear when the preceding values route to them.

Parse remembers formatting intent as unparse params:

- ``required_fields``: number of leading fields present in the text
- ``<field>_width``: zero padding width of an integer field (``01`` -> 2)
"""

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

from ..exceptions import InvalidInputError, ParseError, UnparseError
from ..schema import Field, FieldType, Schema
from .base import Format

if TYPE_CHECKING:
    from ..value import Value

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"\d+")
_WORD = re.compile(r"[A-Za-z0-9]+")


@dataclass(frozen=True)
class FieldStyle:
    """How a single field is written in text."""

    delimiter: str = "."
    labels: Mapping[str, str] = field(default_factory=dict)

    def label_for(self, symbol: str) -> str:
        """Text written for a symbol value."""
        return self.labels.get(symbol, symbol)


class DelimiterFormat(Format):
    """
    Generic delimiter format over any schema.

    Fields without a style use ``.`` as their delimiter and, for symbols,
    write the symbol itself.
    """

    def __init__(
        self,
        schema: Schema,
        styles: Optional[Mapping[str, FieldStyle]] = None,
        required_fields: int = 1,
        name: Optional[str] = None,
    ):
        """
        Initialize format.

        Args:
            schema: Schema of the values handled by this format
            styles: Per-field styles keyed by field name or alias
            required_fields: Leading fields always written by unparse
            name: Optional human readable name
        """
        self._schema = schema
        self.name = name
        self.required_fields = max(1, required_fields)
        self._styles: Dict[str, FieldStyle] = {}
        for key, style in (styles or {}).items():
            canonical = schema.canonical_name(key)
            if canonical is None:
                logger.warning("Ignoring style for unknown field '%s'", key)
                continue
            self._styles[canonical] = style

    @property
    def schema(self) -> Schema:
        return self._schema

    def style_for(self, field_name: str) -> FieldStyle:
        return self._styles.get(field_name, FieldStyle())

    # ---- Parsing ----
    def parse(self, text: str, params: Optional[Dict[str, Any]] = None) -> "Value":
        """
        Parse a version string.

        Args:
            text: Version string
            params: Extra unparse params to remember on the parsed value

        Returns:
            Parsed Value

        Raises:
            ParseError: If the text does not match the schema chain
        """
        from ..value import Value

        if not isinstance(text, str):
            raise ParseError(f"Expected a string but got {type(text).__name__}")
        source = text.strip()
        if not source:
            raise ParseError("Empty version string", text=text)

        values: Dict[str, Any] = {}
        remembered: Dict[str, Any] = dict(params or {})
        leading = 0
        contiguous = True
        pos = 0
        index = 0
        field_: Optional[Field] = self._schema.root_field

        while field_ is not None:
            style = self.style_for(field_.name)
            delimiter = style.delimiter if index else ""
            match = self._match(field_, style, source, pos, delimiter)

            if match is None:
                if index == 0:
                    raise ParseError(
                        f"Expected {field_.name} at start of {text!r}",
                        text=text,
                        position=pos,
                    )
                value = field_.default_value
                contiguous = False
            else:
                raw, end, token = match
                try:
                    value = field_.canonicalize(raw)
                except InvalidInputError as e:
                    raise ParseError(
                        f"Invalid {field_.name} {token!r} in {text!r}: {e.message}",
                        text=text,
                        position=pos,
                    ) from e
                values[field_.name] = value
                if end > pos:
                    pos = end
                    if contiguous:
                        leading = index + 1
                    if (
                        field_.field_type == FieldType.INTEGER
                        and len(token) > 1
                        and token.startswith("0")
                    ):
                        remembered[f"{field_.name}_width"] = len(token)
                else:
                    contiguous = False

            index += 1
            field_ = field_.next_field(value)

        if pos < len(source):
            raise ParseError(
                f"Unexpected text {source[pos:]!r} in {text!r}",
                text=text,
                position=pos,
            )

        remembered["required_fields"] = leading
        return Value(values, self, remembered)

    def _match(
        self, field_: Field, style: FieldStyle, source: str, pos: int, delimiter: str
    ) -> Optional[Tuple[Any, int, str]]:
        if field_.field_type == FieldType.SYMBOL:
            return self._match_symbol(field_, style, source, pos, delimiter)

        if not source.startswith(delimiter, pos):
            return None
        start = pos + len(delimiter)
        pattern = _DIGITS if field_.field_type == FieldType.INTEGER else _WORD
        m = pattern.match(source, start)
        if m is None:
            return None
        return m.group(0), m.end(), m.group(0)

    @staticmethod
    def _implied_symbol(field_: Field, style: FieldStyle) -> Optional[str]:
        """Symbol read when a symbol field has no text, i.e. the first with an empty label."""
        for symbol in field_.symbols:
            if not style.label_for(symbol):
                return symbol
        return None

    def _match_symbol(
        self, field_: Field, style: FieldStyle, source: str, pos: int, delimiter: str
    ) -> Optional[Tuple[Any, int, str]]:
        implied = self._implied_symbol(field_, style)
        candidates: List[Tuple[str, str]] = [
            (style.label_for(symbol), symbol)
            for symbol in field_.symbols
            if style.label_for(symbol)
        ]

        if source.startswith(delimiter, pos):
            start = pos + len(delimiter)
            folded = source.lower()
            for label, symbol in sorted(candidates, key=lambda c: -len(c[0])):
                if folded.startswith(label.lower(), start):
                    return symbol, start + len(label), label

        if implied is not None:
            return implied, pos, ""
        return None

    # ---- Unparsing ----
    def unparse(self, value: "Value", params: Optional[Dict[str, Any]] = None) -> str:
        """
        Render a value.

        A field is written when it is within ``required_fields``, holds a
        non-default value, or was selected by the value of a written field.
        Other default fields are omitted when they trail the version or
        precede a field written with a different delimiter. A symbol field is
        also written when omitting it would parse back as its empty-label
        symbol instead of its value. An empty label is written without its
        delimiter.

        Raises:
            UnparseError: If a field value cannot be written
        """
        if value.schema is not self._schema:
            raise UnparseError("Value does not belong to this format's schema")

        merged = dict(value.unparse_params or {})
        merged.update(params or {})
        required = int(merged.get("required_fields", self.required_fields) or 1)

        entries = []
        selected = False
        for index, (field_, field_value) in enumerate(value.fields()):
            style = self.style_for(field_.name)
            needed = (
                index < required
                or selected
                or field_value != field_.default_value
                or self._absent_differs(field_, style, field_value)
            )
            selected = needed and field_.routes_by_value(field_value)
            entries.append((field_, field_value, style, needed))

        emit = [needed for (_, _, _, needed) in entries]
        next_needed: Optional[FieldStyle] = None
        for i in range(len(entries) - 1, -1, -1):
            field_, _, style, needed = entries[i]
            if needed:
                next_needed = style
            elif next_needed is not None and next_needed.delimiter == style.delimiter:
                emit[i] = True
                next_needed = style

        parts: List[str] = []
        for i, (field_, field_value, style, _) in enumerate(entries):
            if not emit[i]:
                continue
            text = self._render(field_, field_value, style, merged)
            if parts and text:
                parts.append(style.delimiter)
            parts.append(text)
        return "".join(parts)

    def _absent_differs(self, field_: Field, style: FieldStyle, field_value: Any) -> bool:
        # Omitted symbol text parses back as the empty-label symbol, not the default
        if field_.field_type != FieldType.SYMBOL:
            return False
        implied = self._implied_symbol(field_, style)
        return implied is not None and field_value != implied

    def unparse_for_serialization(self, value: "Value") -> Tuple[str, Optional[Dict[str, Any]]]:
        """Return the text of a value and the params to parse it back with."""
        return self.unparse(value), value.unparse_params

    def _render(
        self, field_: Field, field_value: Any, style: FieldStyle, params: Dict[str, Any]
    ) -> str:
        if field_value is None:
            raise UnparseError(f"Field '{field_.name}' has no value", field_name=field_.name)

        if field_.field_type == FieldType.INTEGER:
            if not isinstance(field_value, int) or field_value < 0:
                raise UnparseError(
                    f"Cannot write {field_value!r} for field '{field_.name}'",
                    field_name=field_.name,
                )
            width = int(params.get(f"{field_.name}_width", 1) or 1)
            return str(field_value).zfill(width)

        if field_.field_type == FieldType.SYMBOL:
            if field_value not in field_.symbols:
                raise UnparseError(
                    f"Unknown symbol {field_value!r} for field '{field_.name}'",
                    field_name=field_.name,
                )
            return style.label_for(field_value)

        text = str(field_value)
        if not _WORD.fullmatch(text):
            raise UnparseError(
                f"Cannot write {text!r} for field '{field_.name}'",
                field_name=field_.name,
            )
        return text
