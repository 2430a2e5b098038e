"""Format interface shared by every text representation of version values."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from ..schema import Schema

if TYPE_CHECKING:
    from ..value import Value


class Format(ABC):
    """
    Pairs a schema with text parsing and unparsing behaviour.

    Values defer all text I/O to their format. A format may optionally
    provide ``unparse_for_serialization(value)`` returning a
    ``(text, parse_params)`` pair when its plain unparse output would lose
    information on a round trip.
    """

    name: Optional[str] = None

    @property
    @abstractmethod
    def schema(self) -> Schema:
        """Schema of the values this format produces."""

    @abstractmethod
    def parse(self, text: str, params: Optional[Dict[str, Any]] = None) -> "Value":
        """
        Parse text into a value.

        Raises:
            ParseError: If the text is not a version string of this format
        """

    @abstractmethod
    def unparse(self, value: "Value", params: Optional[Dict[str, Any]] = None) -> str:
        """
        Render a value as text.

        Raises:
            UnparseError: If the value cannot be represented
        """

    def __repr__(self) -> str:
        label = self.name or hex(id(self))
        return f"{self.__class__.__name__}({label})"
