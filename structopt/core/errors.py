"""
Exception classes raised while binding configuration records.
Every error is returned to the caller of ``load``; nothing is logged and
swallowed along the way.
"""

from typing import Any, Dict, Optional


class StructOptError(Exception):
    """Base class for all structopt errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class ConfigShapeError(StructOptError, TypeError):
    """Raised when the config argument is not a dataclass or pydantic model instance."""

    pass


class UnsupportedTypeError(StructOptError, TypeError):
    """Raised when a tagged field has a type no parser is registered for."""

    pass


class EnvironmentParseError(StructOptError, ValueError):
    """Raised when a non-blank environment value does not parse into the field type."""

    pass


class ArgumentParseError(StructOptError):
    """Raised by the flag set when command line arguments cannot be parsed."""

    pass
