"""
Format registry.

Process-wide lookup table of formats by name. Populated at startup (by
explicit registration or a catalog load) and only read afterwards.
"""

from typing import Dict, List, Optional

from ..exceptions import UnknownFormatError
from ..logging import get_logger
from .base import Format

logger = get_logger(__name__)


class FormatRegistry:
    """Registry of formats keyed by name."""

    def __init__(self) -> None:
        self._formats: Dict[str, Format] = {}

    def register(self, name: str, fmt: Format, replace: bool = False) -> Format:
        """
        Register a format under a name.

        Args:
            name: Format name
            fmt: Format instance
            replace: Allow replacing an existing registration

        Returns:
            The registered format

        Raises:
            ValueError: If the name is taken and ``replace`` is False
        """
        if not name:
            raise ValueError("Format name cannot be empty")
        if name in self._formats and not replace:
            raise ValueError(f"Format '{name}' is already registered")
        if fmt.name is None:
            fmt.name = name
        self._formats[name] = fmt
        logger.info("Registered format", format_name=name)
        return fmt

    def get(self, name: str, strict: bool = True) -> Optional[Format]:
        """
        Get a format by name.

        Raises:
            UnknownFormatError: If strict and no format has that name
        """
        fmt = self._formats.get(name)
        if fmt is None and strict:
            raise UnknownFormatError(
                f"Format '{name}' is not registered", format_name=name
            )
        return fmt

    def canonical_name_for(self, fmt: Format, strict: bool = False) -> Optional[str]:
        """
        Return the name a format is registered under.

        Raises:
            UnknownFormatError: If strict and the format is not registered
        """
        for name, registered in self._formats.items():
            if registered is fmt:
                return name
        if strict:
            raise UnknownFormatError(f"Format {fmt!r} is not registered")
        return None

    def names(self) -> List[str]:
        """Registered format names in registration order."""
        return list(self._formats)

    def clear(self) -> None:
        self._formats.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._formats

    def __len__(self) -> int:
        return len(self._formats)


default_formats = FormatRegistry()
