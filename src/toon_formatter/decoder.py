"""Core TOON decoding functionality."""

import logging
from typing import Any, List, Optional, Tuple

from .constants import COLON
from .errors import InputError, ParseError
from .primitives import has_unquoted, parse_value, split_by_delimiter
from .scanner import ClassifiedLine, LineKind, classify_line, scan_lines
from .types import JsonArray, JsonObject, JsonValue
from .validator import check_structure

logger = logging.getLogger(__name__)


class Frame:
    """A container being filled and the indentation of the line that opened it."""

    __slots__ = ("container", "indent")

    def __init__(self, container: Any, indent: int) -> None:
        self.container = container
        self.indent = indent


class TabularTarget:
    """Side-mode state while consuming the rows of a ``key[N]{fields}:`` table."""

    __slots__ = ("rows", "fields", "delimiter", "header_indent", "indent")

    def __init__(self, rows: JsonArray, fields: Tuple[str, ...], delimiter: str, header_indent: int) -> None:
        self.rows = rows
        self.fields = fields
        self.delimiter = delimiter
        self.header_indent = header_indent
        # Indentation of the first row, fixed once seen
        self.indent: Optional[int] = None


def _parse_scalar(token: str, line_number: int) -> JsonValue:
    try:
        return parse_value(token)
    except ValueError as exc:
        raise ParseError(f"Cannot parse value {token!r}: {exc}", line_number) from exc


def _inline_values(header: ClassifiedLine, line_number: int) -> JsonArray:
    tokens = split_by_delimiter(header.value, header.delimiter)
    return [_parse_scalar(token, line_number) for token in tokens if token.strip()]


class _Decoder:
    """Builds the value tree for one validated document."""

    def __init__(self) -> None:
        self.root: Any = None
        self.stack: List[Frame] = []
        self.tabular: Optional[TabularTarget] = None

    def decode(self, text: str) -> JsonValue:
        lines = list(scan_lines(text))
        if not lines:
            return {}

        first = classify_line(lines[0][2])
        if first.kind in (LineKind.BARE_QUOTED, LineKind.SCALAR):
            return _parse_scalar(first.text, lines[0][0])

        self.root = [] if lines[0][2].startswith("[") else {}
        self.stack = [Frame(self.root, -1)]

        for line_number, indent, stripped in lines:
            if self._consume_tabular_row(indent, stripped, line_number):
                continue

            while len(self.stack) > 1 and self.stack[-1].indent >= indent:
                self.stack.pop()
            parent = self.stack[-1].container

            line = classify_line(stripped)
            if line.kind is LineKind.ROOT_ARRAY_HEADER and isinstance(self.root, list) and len(self.stack) == 1:
                self._fill_array(self.root, line, indent, line_number, push=False)
            elif line.kind is LineKind.LIST_ITEM:
                self._decode_list_item(parent, line, indent, line_number)
            elif line.kind is LineKind.ARRAY_HEADER:
                array: JsonArray = []
                parent[line.key] = array
                self._fill_array(array, line, indent, line_number)
            elif line.kind is LineKind.KEY_VALUE:
                if line.value:
                    parent[line.key] = _parse_scalar(line.value, line_number)
                else:
                    child: JsonObject = {}
                    parent[line.key] = child
                    self.stack.append(Frame(child, indent))
            else:
                raise ParseError(f"Unexpected line {stripped!r}", line_number)

        return self.root

    def _consume_tabular_row(self, indent: int, stripped: str, line_number: int) -> bool:
        """Append a table row if the side-mode is active and the line is a row."""
        target = self.tabular
        if target is None:
            return False
        if target.indent is None:
            if indent > target.header_indent:
                target.indent = indent
            else:
                self.tabular = None
                return False
        if indent == target.indent and not has_unquoted(stripped, COLON):
            values = [_parse_scalar(token, line_number) for token in split_by_delimiter(stripped, target.delimiter)]
            target.rows.append(dict(zip(target.fields, values)))
            return True
        if indent <= target.indent:
            self.tabular = None
        return False

    def _fill_array(self, array: JsonArray, header: ClassifiedLine, indent: int, line_number: int, push: bool = True) -> None:
        if header.fields is not None:
            self.tabular = TabularTarget(array, header.fields, header.delimiter, indent)
        elif header.value:
            array.extend(_inline_values(header, line_number))
        elif push:
            self.stack.append(Frame(array, indent))

    def _decode_list_item(self, parent: JsonArray, line: ClassifiedLine, indent: int, line_number: int) -> None:
        item = line.item
        if item is None:
            element: JsonObject = {}
            parent.append(element)
            self.stack.append(Frame(element, indent))
        elif item.is_array_header and not item.key:
            array: JsonArray = []
            parent.append(array)
            self._fill_array(array, item, indent, line_number)
        elif item.is_array_header:
            array = []
            parent.append({item.key: array})
            self._fill_array(array, item, indent, line_number)
        elif item.kind is LineKind.KEY_VALUE and not item.value:
            child: JsonObject = {}
            parent.append({item.key: child})
            self.stack.append(Frame(child, indent))
        elif item.kind is LineKind.KEY_VALUE:
            parent.append({item.key: _parse_scalar(item.value, line_number)})
        else:
            parent.append(_parse_scalar(item.text, line_number))


def decode(text: str) -> JsonValue:
    """Decode a TOON string into a Python value.

    The document is validated in full first; nothing is built from an
    invalid document.

    Args:
        text: TOON document

    Returns:
        Decoded value (dict, list or scalar)

    Raises:
        InputError: If text is not a non-empty string
        StructuralError: If the document is not valid TOON
    """
    if not isinstance(text, str) or not text:
        raise InputError("Input must be a non-empty string.")
    check_structure(text)
    logger.debug("Decoding validated TOON document (%d chars)", len(text))
    return _Decoder().decode(text)
