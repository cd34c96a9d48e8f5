"""Type definitions for toon_formatter."""

from enum import Enum
from typing import Any, Dict, List, Optional, TypedDict, Union

# JSON-compatible types
JsonPrimitive = Union[str, int, float, bool, None]
JsonObject = Dict[str, Any]
JsonArray = List[Any]
JsonValue = Union[JsonPrimitive, JsonArray, JsonObject]


class EncodeOptions(TypedDict, total=False):
    """Options for TOON encoding.

    Attributes:
        indent: Number of spaces per indentation level (default: 2)
        comments: Optional mapping from dotted paths to comment text
        commentPrefix: Prefix for comment lines (default: '#')
        modelComments: Auto-extract comments from Pydantic BaseModel (default: True)
    """

    indent: int
    comments: Dict[str, str]
    commentPrefix: str
    modelComments: bool


class ResolvedEncodeOptions:
    """Resolved encoding options with defaults applied."""

    def __init__(
        self,
        indent: int = 2,
        comments: Dict[str, str] | None = None,
        comment_prefix: str = "#",
    ) -> None:
        self.indent = indent
        self.delimiter = ","
        self.comments: Dict[str, str] = comments or {}
        self.commentPrefix = comment_prefix


class ArrayShape(Enum):
    """How the encoder lays out a sequence."""

    EMPTY = "empty"
    INLINE_PRIMITIVE = "inline"
    TABULAR = "tabular"
    BLOCK = "block"


class ValidationResult(TypedDict):
    """Outcome of validating a TOON document.

    ``message`` and ``line`` are ``None`` when the document is valid.
    """

    valid: bool
    message: Optional[str]
    line: Optional[int]


# Depth type for tracking indentation level
Depth = int
