"""Exceptions raised by versionist."""

from typing import Any, Dict, Optional


class VersionistError(Exception):
    """Base exception for all versionist errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}'"
            f")"
        )


class InvalidInputError(VersionistError):
    """Exception raised when a value cannot be built from the given input."""

    def __init__(
        self,
        message: str = "Invalid version input",
        error_code: str = "INVALID_INPUT",
        details: Optional[Dict[str, Any]] = None,
        field_name: Optional[str] = None,
    ):
        super().__init__(message, error_code, details)
        self.field_name = field_name
        if field_name:
            self.details["field_name"] = field_name


class ParseError(VersionistError):
    """Exception raised when a format cannot parse a version string."""

    def __init__(
        self,
        message: str = "Unable to parse version string",
        error_code: str = "PARSE_ERROR",
        details: Optional[Dict[str, Any]] = None,
        text: Optional[str] = None,
        position: Optional[int] = None,
    ):
        super().__init__(message, error_code, details)
        if text is not None:
            self.details["text"] = text
        if position is not None:
            self.details["position"] = position


class UnparseError(VersionistError):
    """Exception raised when a format cannot render a value as text."""

    def __init__(
        self,
        message: str = "Unable to unparse version value",
        error_code: str = "UNPARSE_ERROR",
        details: Optional[Dict[str, Any]] = None,
        field_name: Optional[str] = None,
    ):
        super().__init__(message, error_code, details)
        if field_name:
            self.details["field_name"] = field_name


class ConversionError(VersionistError):
    """Exception raised when a value could not be converted to another format."""

    def __init__(
        self,
        message: str = "Conversion failed",
        error_code: str = "CONVERSION_ERROR",
        details: Optional[Dict[str, Any]] = None,
        from_schema: Optional[str] = None,
        to_schema: Optional[str] = None,
    ):
        super().__init__(message, error_code, details)
        if from_schema:
            self.details["from_schema"] = from_schema
        if to_schema:
            self.details["to_schema"] = to_schema


class UnknownConversionError(ConversionError):
    """Exception raised when no conversion path exists between two schemas."""

    def __init__(
        self,
        message: str = "No conversion path between schemas",
        error_code: str = "UNKNOWN_CONVERSION",
        details: Optional[Dict[str, Any]] = None,
        from_schema: Optional[str] = None,
        to_schema: Optional[str] = None,
    ):
        super().__init__(message, error_code, details, from_schema, to_schema)


class SchemaMismatchError(VersionistError):
    """Exception raised when two values cannot be ordered against each other."""

    def __init__(
        self,
        message: str = "Values have incomparable schemas",
        error_code: str = "SCHEMA_MISMATCH",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code, details)


class UnknownFormatError(VersionistError):
    """Exception raised when a format name is not registered."""

    def __init__(
        self,
        message: str = "Unknown format",
        error_code: str = "UNKNOWN_FORMAT",
        details: Optional[Dict[str, Any]] = None,
        format_name: Optional[str] = None,
    ):
        super().__init__(message, error_code, details)
        if format_name:
            self.details["format_name"] = format_name


class SchemaDefinitionError(VersionistError):
    """Exception raised for invalid schema or catalog definitions."""

    def __init__(
        self,
        message: str = "Invalid schema definition",
        error_code: str = "SCHEMA_DEFINITION_ERROR",
        details: Optional[Dict[str, Any]] = None,
        schema_name: Optional[str] = None,
    ):
        super().__init__(message, error_code, details)
        if schema_name:
            self.details["schema_name"] = schema_name
