"""Line scanning and classification shared by the decoder and the validator.

Both passes walk the same stream of content lines and need the same view of
what each line is. Structural facts (indentation, counts, nesting) are left
to the callers; this module only says what a single line looks like.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple

from .constants import COLON, COMMA, COMMENT_PREFIX, LIST_ITEM_MARKER, LIST_ITEM_PREFIX, PIPE, TAB
from .primitives import has_unquoted, is_fully_quoted

_ARRAY_HEADER_RE = re.compile(
    r"^(?P<key>[^:\[]*)\[(?P<length>\d+)(?P<delimiter>[" + re.escape(TAB + PIPE) + r"])?\](?:\{(?P<fields>[^}]+)\})?:(?P<rest>.*)$"
)
_KEY_VALUE_RE = re.compile(r"^(?P<key>[^:\[]+):(?P<value>.*)$")


class LineKind(Enum):
    ROOT_ARRAY_HEADER = "root_array_header"
    ARRAY_HEADER = "array_header"
    LIST_ITEM = "list_item"
    KEY_VALUE = "key_value"
    BARE_QUOTED = "bare_quoted"
    SCALAR = "scalar"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class ClassifiedLine:
    """The shape of one content line.

    Attributes:
        kind: Line kind
        text: Stripped line text
        key: Key for array headers and key-value lines
        length: Declared item count for array headers
        delimiter: Delimiter declared by an array header
        fields: Field names of a tabular array header
        value: Inline array content or key-value value (stripped)
        item: Classified payload of a list item, None for a bare ``-``
    """

    kind: LineKind
    text: str
    key: Optional[str] = None
    length: Optional[int] = None
    delimiter: str = COMMA
    fields: Optional[Tuple[str, ...]] = None
    value: str = ""
    item: Optional["ClassifiedLine"] = None

    @property
    def is_array_header(self) -> bool:
        return self.kind in (LineKind.ROOT_ARRAY_HEADER, LineKind.ARRAY_HEADER)

    @property
    def is_tabular_header(self) -> bool:
        return self.is_array_header and self.fields is not None

    @property
    def array_header(self) -> Optional["ClassifiedLine"]:
        """The array header carried by this line, directly or as a list-item payload."""
        if self.is_array_header:
            return self
        if self.kind is LineKind.LIST_ITEM and self.item is not None and self.item.is_array_header:
            return self.item
        return None

    @property
    def opens_block(self) -> bool:
        """Whether an indented block may follow this line."""
        if self.kind is LineKind.KEY_VALUE or self.is_array_header:
            return self.value == ""
        if self.kind is LineKind.LIST_ITEM:
            return self.item is None or self.item.opens_block
        return False


def _classify_array_header(text: str, in_list_item: bool) -> Optional[ClassifiedLine]:
    match = _ARRAY_HEADER_RE.match(text)
    if not match:
        return None
    try:
        length = int(match.group("length"))
    except ValueError:
        # Beyond the int-from-str digit limit; no such array can exist
        return None
    key = match.group("key").strip()
    delimiter = match.group("delimiter") or COMMA
    fields = match.group("fields")
    if key or in_list_item:
        kind = LineKind.ARRAY_HEADER
    else:
        kind = LineKind.ROOT_ARRAY_HEADER
    return ClassifiedLine(
        kind=kind,
        text=text,
        key=key,
        length=length,
        delimiter=delimiter,
        fields=tuple(f.strip() for f in fields.split(delimiter)) if fields is not None else None,
        value=match.group("rest").strip(),
    )


def _classify_key_value(text: str) -> Optional[ClassifiedLine]:
    match = _KEY_VALUE_RE.match(text)
    if not match:
        return None
    value = match.group("value").strip()
    # A value that opens a quote must be exactly one quoted string
    if value.startswith('"') and not is_fully_quoted(value):
        return None
    return ClassifiedLine(kind=LineKind.KEY_VALUE, text=text, key=match.group("key").strip(), value=value)


def _classify_payload(text: str, in_list_item: bool) -> ClassifiedLine:
    header = _classify_array_header(text, in_list_item)
    if header is not None:
        return header
    if is_fully_quoted(text):
        return ClassifiedLine(kind=LineKind.BARE_QUOTED, text=text, value=text)
    if has_unquoted(text, COLON):
        key_value = _classify_key_value(text)
        if key_value is not None:
            return key_value
        return ClassifiedLine(kind=LineKind.UNRECOGNIZED, text=text)
    return ClassifiedLine(kind=LineKind.SCALAR, text=text, value=text)


def classify_line(text: str) -> ClassifiedLine:
    """Classify a stripped, non-blank, non-comment line.

    Args:
        text: Line content without surrounding whitespace

    Returns:
        ClassifiedLine describing the line
    """
    if text == LIST_ITEM_MARKER:
        return ClassifiedLine(kind=LineKind.LIST_ITEM, text=text)
    if text.startswith(LIST_ITEM_PREFIX):
        payload = text[len(LIST_ITEM_PREFIX):].strip()
        item = _classify_payload(payload, in_list_item=True) if payload else None
        if item is not None and item.kind is LineKind.UNRECOGNIZED:
            return ClassifiedLine(kind=LineKind.UNRECOGNIZED, text=text)
        return ClassifiedLine(kind=LineKind.LIST_ITEM, text=text, item=item)
    return _classify_payload(text, in_list_item=False)


def measure_indent(line: str) -> int:
    return len(line) - len(line.lstrip())


def scan_lines(text: str) -> Iterator[Tuple[int, int, str]]:
    """Yield ``(line_number, indent, stripped_text)`` for each content line.

    Blank lines and full-line ``#`` comments are skipped. Line numbers are
    1-based and count every physical line.
    """
    for number, raw in enumerate(text.split("\n"), start=1):
        line = raw.rstrip("\r")
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue
        yield number, measure_indent(line), stripped
