"""Structural validation of TOON documents.

The validator walks the content lines with its own stack of indentation
contexts and proves, before anything is decoded, that:

* every indented block follows a line that can open one,
* every un-indent lands on an indentation level that is still open,
* every declared array holds exactly the declared number of items,
* every line has a recognizable shape for the context it appears in.

The first violation wins; errors are not accumulated.
"""

import logging
from enum import Enum
from typing import List, Optional, Set

from .constants import COLON
from .errors import StructuralError
from .primitives import has_unquoted, is_scalar_literal, split_by_delimiter
from .scanner import ClassifiedLine, LineKind, classify_line, scan_lines
from .types import ValidationResult

logger = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = "Input must be a non-empty string."


class ContextKind(Enum):
    ROOT = "root"
    OBJECT = "object"
    ARRAY = "array"


class LineContext:
    """One open indentation level."""

    def __init__(
        self,
        indent: int,
        kind: ContextKind,
        expected: Optional[int] = None,
        is_tabular: bool = False,
        width: int = 0,
        delimiter: str = ",",
        header_line: Optional[int] = None,
    ) -> None:
        self.indent = indent
        self.kind = kind
        self.expected = expected
        self.seen = 0
        self.is_tabular = is_tabular
        self.width = width
        self.delimiter = delimiter
        self.header_line = header_line
        self.keys: Set[str] = set()


def _close(context: LineContext) -> None:
    if context.kind is ContextKind.ARRAY and context.seen != context.expected:
        raise StructuralError(
            f"Array size mismatch. Declared {context.expected}, found {context.seen} items.",
            context.header_line,
        )


def _open_context(opener: ClassifiedLine, indent: int, opener_line: int) -> LineContext:
    header = opener.array_header
    if header is None:
        return LineContext(indent, ContextKind.OBJECT)
    return LineContext(
        indent,
        ContextKind.ARRAY,
        expected=header.length,
        is_tabular=header.fields is not None,
        width=len(header.fields or ()),
        delimiter=header.delimiter,
        header_line=opener_line,
    )


def _check_tabular_row(context: LineContext, text: str, line_number: int) -> None:
    if has_unquoted(text, COLON):
        raise StructuralError("Tabular rows cannot contain a colon.", line_number)
    values = split_by_delimiter(text, context.delimiter)
    if len(values) != context.width:
        raise StructuralError(f"Tabular row has {len(values)} values, expected {context.width}.", line_number)


def _check_array_header(header: ClassifiedLine, line_number: int) -> None:
    if not header.value:
        return
    if header.fields is not None:
        raise StructuralError("Tabular array header cannot carry inline values.", line_number)
    items = [item for item in split_by_delimiter(header.value, header.delimiter) if item.strip()]
    if len(items) != header.length:
        raise StructuralError(
            f"Array size mismatch. Declared {header.length}, found {len(items)} inline items.",
            line_number,
        )


def _unrecognized(line: ClassifiedLine, line_number: int) -> StructuralError:
    if COLON in line.text:
        return StructuralError("Invalid Key-Value assignment.", line_number)
    return StructuralError("Unrecognized TOON syntax.", line_number)


def _check_shape(line: ClassifiedLine, context: LineContext, line_number: int, first_line: bool) -> None:
    """Reject lines whose shape is not legal in the given context."""
    kind = line.kind

    if kind is LineKind.UNRECOGNIZED:
        raise _unrecognized(line, line_number)

    if kind is LineKind.LIST_ITEM:
        if context.kind is not ContextKind.ARRAY:
            raise StructuralError("List item found in non-array context.", line_number)
        if line.item is not None and line.item.is_array_header:
            _check_array_header(line.item, line_number)
        return

    if context.kind is ContextKind.ARRAY:
        raise StructuralError("Array blocks may only contain list items.", line_number)

    if kind is LineKind.ROOT_ARRAY_HEADER:
        if not first_line:
            raise StructuralError("Array header is missing a key.", line_number)
        _check_array_header(line, line_number)
        return

    if kind in (LineKind.BARE_QUOTED, LineKind.SCALAR):
        if not first_line or context.kind is not ContextKind.ROOT:
            raise StructuralError("Unexpected scalar line.", line_number)
        if not is_scalar_literal(line.text):
            raise StructuralError("Unrecognized TOON syntax.", line_number)
        return

    # Keyed array header or key-value line
    if line.key in context.keys:
        raise StructuralError(f"Duplicate key '{line.key}'.", line_number)
    context.keys.add(line.key)
    if kind is LineKind.ARRAY_HEADER:
        _check_array_header(line, line_number)


def check_structure(text: str) -> None:
    """Validate a TOON document, raising on the first violation.

    Args:
        text: TOON document

    Raises:
        StructuralError: If the document is not structurally valid
    """
    contexts: List[LineContext] = [LineContext(0, ContextKind.ROOT)]
    # Previous content line; None after a tabular row, which opens nothing
    prev: Optional[ClassifiedLine] = None
    prev_indent = 0
    prev_number = 0
    root_kind: Optional[LineKind] = None
    content_lines = 0

    for line_number, indent, stripped in scan_lines(text):
        content_lines += 1
        top = contexts[-1]

        if prev is not None:
            header = prev.array_header
            if header is not None and not header.value and header.length > 0 and indent <= prev_indent:
                raise StructuralError(
                    f"Array declared with size {header.length} but has no items (expected indented block).",
                    prev_number,
                )

        if indent > top.indent:
            if prev is None or not prev.opens_block:
                raise StructuralError("Indentation error.", line_number)
            contexts.append(_open_context(prev, indent, prev_number))
        elif indent < top.indent:
            while len(contexts) > 1 and contexts[-1].indent > indent:
                _close(contexts.pop())
            if contexts[-1].indent != indent:
                raise StructuralError("Invalid un-indentation.", line_number)

        context = contexts[-1]
        prev_indent, prev_number = indent, line_number

        if context.kind is ContextKind.ROOT and root_kind is not None:
            if root_kind is LineKind.ROOT_ARRAY_HEADER:
                raise StructuralError("Unexpected content after root array.", line_number)
            raise StructuralError("Unexpected content after root value.", line_number)

        if context.kind is ContextKind.ARRAY and context.is_tabular:
            _check_tabular_row(context, stripped, line_number)
            context.seen += 1
            prev = None
            continue

        line = classify_line(stripped)
        _check_shape(line, context, line_number, first_line=content_lines == 1)
        if context.kind is ContextKind.ARRAY:
            context.seen += 1
        if content_lines == 1 and line.kind in (LineKind.ROOT_ARRAY_HEADER, LineKind.BARE_QUOTED, LineKind.SCALAR):
            root_kind = line.kind
        prev = line

    if prev is not None:
        header = prev.array_header
        if header is not None and not header.value and header.length > 0:
            raise StructuralError(
                f"Array declared with size {header.length} but has no items (expected indented block).",
                prev_number,
            )

    while len(contexts) > 1:
        _close(contexts.pop())


def validate(text: str) -> ValidationResult:
    """Validate a TOON document.

    Args:
        text: TOON document

    Returns:
        ``{"valid": True, "message": None, "line": None}`` or the first
        violation with its message and 1-based line number
    """
    if not isinstance(text, str) or not text:
        return {"valid": False, "message": INVALID_INPUT_MESSAGE, "line": None}
    try:
        check_structure(text)
    except StructuralError as exc:
        logger.debug("TOON validation failed at line %s: %s", exc.line, exc.message)
        return {"valid": False, "message": exc.message, "line": exc.line}
    return {"valid": True, "message": None, "line": None}
