"""Exception types raised by toon_formatter."""

from typing import Optional


class ToonError(Exception):
    """Base class for all toon_formatter errors."""


class InputError(ToonError, ValueError):
    """Raised when an argument is not a usable string or value."""


class StructuralError(ToonError, ValueError):
    """Raised when TOON text violates the structural rules of the format.

    Attributes:
        message: Human-readable description of the first violation
        line: 1-based line number of the violation, if known
    """

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        self.message = message
        self.line = line
        super().__init__(self._render())

    def _render(self) -> str:
        if self.line is None:
            return f"Invalid TOON: {self.message}"
        return f"Invalid TOON: L{self.line}: {self.message}"


class ParseError(StructuralError):
    """Raised when a validated line still fails scalar coercion."""


class ConversionError(ToonError):
    """Raised when a native payload (JSON, YAML, XML, CSV) cannot be converted."""
