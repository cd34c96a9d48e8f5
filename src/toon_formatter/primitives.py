"""Scalar formatting, quoting and the bare-token parse law."""

import math
import re
from typing import List, Optional

from .constants import (
    BACKSLASH,
    COLON,
    COMMA,
    COMMENT_PREFIX,
    DOUBLE_QUOTE,
    FALSE_LITERAL,
    LIST_ITEM_MARKER,
    LIST_ITEM_PREFIX,
    MAX_SAFE_INTEGER,
    NULL_LITERAL,
    TRUE_LITERAL,
)
from .errors import InputError
from .types import JsonPrimitive

_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")

_ESCAPES = {
    BACKSLASH: BACKSLASH + BACKSLASH,
    DOUBLE_QUOTE: BACKSLASH + DOUBLE_QUOTE,
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}
_UNESCAPES = {"n": "\n", "r": "\r", "t": "\t"}

_KEY_FORBIDDEN = (COLON, "[", "{", DOUBLE_QUOTE, "\n", "\r")


def format_number(value: float) -> str:
    """Render a number as the shortest decimal text that reads back to it.

    Raises:
        InputError: If an integer exceeds the interpreter's digit limit for
            int-to-str conversion
    """
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError as exc:
            raise InputError(f"Integer is too large to encode: {exc}") from exc
    if value.is_integer() and abs(value) < MAX_SAFE_INTEGER:
        return str(int(value))
    return repr(value)


def escape_string(value: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


def encode_primitive(value: JsonPrimitive) -> str:
    """Encode a scalar for TOON output.

    Strings are always quoted.

    Args:
        value: Scalar value

    Returns:
        Encoded token
    """
    if value is None:
        return NULL_LITERAL
    if value is True:
        return TRUE_LITERAL
    if value is False:
        return FALSE_LITERAL
    if isinstance(value, (int, float)):
        return format_number(value)
    return f"{DOUBLE_QUOTE}{escape_string(str(value))}{DOUBLE_QUOTE}"


def unquote(token: str) -> str:
    """Strip surrounding double quotes and resolve backslash escapes."""
    inner = token[1:-1]
    if BACKSLASH not in inner:
        return inner
    out: List[str] = []
    escaped = False
    for ch in inner:
        if escaped:
            out.append(_UNESCAPES.get(ch, ch))
            escaped = False
        elif ch == BACKSLASH:
            escaped = True
        else:
            out.append(ch)
    if escaped:
        out.append(BACKSLASH)
    return "".join(out)


def parse_number(token: str) -> Optional[float]:
    """Parse a decimal number token, or return None when it is not one."""
    if not _NUMBER_RE.match(token):
        return None
    if _INTEGER_RE.match(token):
        try:
            return int(token)
        except ValueError:
            # Longer than the interpreter's int-from-str digit limit
            return None
    number = float(token)
    if not math.isfinite(number):
        return None
    return number


def _keeps_leading_zero(token: str) -> bool:
    return token.startswith("0") and len(token) > 1 and not token.startswith("0.")


def parse_value(token: str) -> JsonPrimitive:
    """Parse a bare or quoted token into a scalar.

    ``true``/``false``/``null`` map to their literals. Tokens such as ``0123``
    stay strings so identifiers with leading zeros survive; other decimal
    numbers become int or float. Quoted tokens are unquoted, anything else is
    returned verbatim.
    """
    token = token.strip()
    if token == TRUE_LITERAL:
        return True
    if token == FALSE_LITERAL:
        return False
    if token == NULL_LITERAL:
        return None
    if token == "":
        return ""
    if token == "0":
        return 0

    if not _keeps_leading_zero(token):
        number = parse_number(token)
        if number is not None:
            return number

    if is_fully_quoted(token):
        return unquote(token)
    return token


def _scan_quotes(text: str):
    """Yield (index, char, in_quote) for each character outside escapes."""
    in_quote = False
    escaped = False
    for index, ch in enumerate(text):
        if escaped:
            escaped = False
            continue
        if in_quote and ch == BACKSLASH:
            escaped = True
            continue
        if ch == DOUBLE_QUOTE:
            in_quote = not in_quote
            yield index, ch, True
            continue
        yield index, ch, in_quote


def split_by_delimiter(text: str, delimiter: str) -> List[str]:
    """Split text on a delimiter, ignoring delimiters inside quoted spans."""
    parts: List[str] = []
    start = 0
    for index, ch, in_quote in _scan_quotes(text):
        if ch == delimiter and not in_quote:
            parts.append(text[start:index])
            start = index + 1
    parts.append(text[start:])
    return parts


def has_unquoted(text: str, char: str) -> bool:
    """Check whether a character occurs outside quoted spans."""
    return any(ch == char and not in_quote for _, ch, in_quote in _scan_quotes(text))


def is_fully_quoted(text: str) -> bool:
    """Check whether text is exactly one double-quoted string."""
    if len(text) < 2 or not text.startswith(DOUBLE_QUOTE) or not text.endswith(DOUBLE_QUOTE):
        return False
    closing = None
    for index, ch, _ in _scan_quotes(text):
        if ch == DOUBLE_QUOTE and index > 0:
            closing = index
            break
    return closing == len(text) - 1


def is_scalar_literal(text: str) -> bool:
    """Check whether a whole line is a single scalar token."""
    if text in (TRUE_LITERAL, FALSE_LITERAL, NULL_LITERAL) or is_fully_quoted(text):
        return True
    return not _keeps_leading_zero(text) and parse_number(text) is not None


def encode_key(key: str) -> str:
    """Encode a mapping key.

    Keys are written bare, so keys that would change the meaning of a line
    are rejected.

    Raises:
        InputError: If the key cannot be represented in TOON
    """
    if (
        not key
        or key != key.strip()
        or any(ch in key for ch in _KEY_FORBIDDEN)
        or key.startswith((COMMENT_PREFIX, LIST_ITEM_PREFIX))
        or key == LIST_ITEM_MARKER
    ):
        raise InputError(f"Key {key!r} cannot be represented in TOON")
    return key


def is_safe_field_name(name: str, delimiter: str = COMMA) -> bool:
    """Check whether a key can appear in a tabular ``{fields}`` list."""
    try:
        encode_key(name)
    except InputError:
        return False
    return delimiter not in name and "}" not in name


def format_header(key: Optional[str], length: int, fields: Optional[List[str]], delimiter: str = COMMA) -> str:
    """Format an array header such as ``key[N]{f1,f2}:``."""
    marker = "" if delimiter == COMMA else delimiter
    header = f"{encode_key(key) if key else ''}[{length}{marker}]"
    if fields:
        header += "{" + delimiter.join(fields) + "}"
    return header + COLON


def join_encoded_values(values: List[str], delimiter: str = COMMA, spaced: bool = False) -> str:
    """Join encoded tokens; inline arrays use ``", "`` and table rows a bare delimiter."""
    separator = f"{delimiter} " if spaced else delimiter
    return separator.join(values)
