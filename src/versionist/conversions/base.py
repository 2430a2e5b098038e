"""Conversion interface and simple callable-backed conversions."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional, Sequence, Union

from ..exceptions import ConversionError, InvalidInputError

if TYPE_CHECKING:
    from ..formats import Format
    from ..value import Value


class Conversion(ABC):
    """Transforms a value from one schema into another schema's shape."""

    @abstractmethod
    def convert_value(
        self,
        value: "Value",
        to_format: "Format",
        params: Optional[Dict[str, Any]] = None,
    ) -> "Value":
        """
        Convert a value into a value of ``to_format``.

        Raises:
            ConversionError: If the value cannot be represented in the target
        """


class FunctionConversion(Conversion):
    """
    Conversion backed by a callable.

    The callable receives the source value and returns the target's raw
    input: a field-name mapping or a positional sequence.
    """

    def __init__(self, func: Callable[["Value"], Union[Mapping[str, Any], Sequence[Any]]]):
        self.func = func

    def convert_value(
        self,
        value: "Value",
        to_format: "Format",
        params: Optional[Dict[str, Any]] = None,
    ) -> "Value":
        from ..value import Value

        try:
            raw = self.func(value)
        except (TypeError, ValueError, KeyError) as e:
            raise ConversionError(
                f"Cannot convert {value} to {to_format!r}: {e}",
                details={"cause": type(e).__name__},
            ) from e
        try:
            return Value(raw, to_format, params)
        except InvalidInputError as e:
            raise ConversionError(
                f"Cannot convert {value} to {to_format!r}: {e.message}",
                details={"cause": e.to_dict()},
            ) from e
