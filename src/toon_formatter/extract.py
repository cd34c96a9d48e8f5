"""Locate embedded JSON-, XML- and CSV-shaped payloads inside free-form text.

Each extractor is stateless and returns the first payload it finds, or None.
They are meant to be called repeatedly by :func:`toon_formatter.pipeline.convert_embedded`,
which replaces one payload per pass.
"""

import json
import re
from typing import Any, Callable, List, Optional

from .constants import COMMA

_TOON_INLINE_ARRAY_RE = re.compile(r"^\s*\[\d+\]")
_TOON_BLOCK_START_RE = re.compile(r"^\s*(\w+)?\[\d+\]")
_TOON_ARRAY_HEADER_RE = re.compile(r"^.*?\[\d+\].*:\s*$")
_TOON_COUNT_RE = re.compile(r"\[(\d+)\]")

_XML_START_TAG_RE = re.compile(r"<([a-zA-Z0-9_:-]+)(?:\s[^>]*)?/?>")
_XML_TAG_RE = re.compile(r"</?([a-zA-Z0-9_:-]+)(?:\s[^>]*)?/?>")

_JSON_KEY_LINE_RE = re.compile(r'^"[^"]+"\s*:')
_JSON_OPENER_RE = re.compile(r"^[{\[]")
_JSON_CLOSER_LINE_RE = re.compile(r"^[}\]],?$")
_YAML_ITEM_RE = re.compile(r"^- ")
_YAML_KEY_RE = re.compile(r'^[^",]+:\s')

_OPENERS = "{["
_CLOSERS = "}]"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _is_strict_json(candidate: str) -> bool:
    try:
        json.loads(candidate, parse_constant=_reject_constant)
    except ValueError:
        return False
    return True


def _can_start_json(text: str, index: int) -> bool:
    # Skip openers glued to a word, such as the "[" in "key[3]"
    if index == 0:
        return True
    before = text[index - 1]
    return before.isspace() or before in "}]>"


def _find_balanced_end(text: str, start: int) -> Optional[int]:
    """Return the index closing the bracket at ``start``, honoring quoted spans."""
    balance = 0
    in_quote = False
    escape = False
    for index in range(start, len(text)):
        char = text[index]
        if escape:
            escape = False
            continue
        if char == "\\":
            escape = True
            continue
        if char == '"':
            in_quote = not in_quote
            continue
        if in_quote:
            continue
        if char in _OPENERS:
            balance += 1
        elif char in _CLOSERS:
            balance -= 1
        if balance == 0:
            return index
    return None


def extract_json(text: str) -> Optional[str]:
    """Find the first strictly valid JSON object or array in text.

    Candidates start at ``{`` or ``[`` that is not glued to a preceding word.
    A balanced candidate that looks like a TOON inline array (``[3]: ...``)
    is skipped entirely; one that fails to parse is abandoned and the search
    resumes right after its opening bracket. Every retry moves the search
    start forward, so the scan ends within the length of the input.

    Args:
        text: Mixed text

    Returns:
        The JSON substring, or None
    """
    if not isinstance(text, str) or not text:
        return None

    search_start = 0
    while search_start < len(text):
        start = -1
        for index in range(search_start, len(text)):
            if text[index] in _OPENERS and _can_start_json(text, index):
                start = index
                break
        if start == -1:
            return None

        end = _find_balanced_end(text, start)
        if end is None:
            search_start = start + 1
            continue

        candidate = text[start : end + 1]
        if _TOON_INLINE_ARRAY_RE.match(candidate):
            search_start = end + 1
            continue
        if _is_strict_json(candidate):
            return candidate
        search_start = start + 1

    return None


def extract_xml(text: str) -> Optional[str]:
    """Find the first balanced XML element in text.

    Only tags sharing the first element's name affect the balance, so
    unrelated siblings and self-closing tags of other names are ignored.

    Args:
        text: Mixed text

    Returns:
        The XML element substring, or None if the first element never closes
    """
    if not isinstance(text, str) or not text:
        return None

    match = _XML_START_TAG_RE.search(text)
    if not match:
        return None

    start = match.start()
    root_name = match.group(1)
    if match.group(0).endswith("/>"):
        return match.group(0)

    balance = 0
    for tag in _XML_TAG_RE.finditer(text, start):
        if tag.group(1) != root_name:
            continue
        full = tag.group(0)
        if full.startswith("</"):
            balance -= 1
        elif not full.endswith("/>"):
            balance += 1
        if balance == 0:
            return text[start : tag.end()]

    return None


def _is_json_like(line: str) -> bool:
    stripped = line.strip()
    return bool(_JSON_KEY_LINE_RE.match(stripped) or _JSON_OPENER_RE.match(stripped) or _JSON_CLOSER_LINE_RE.match(stripped))


def _is_yaml_like(line: str) -> bool:
    stripped = line.strip()
    return bool(_YAML_ITEM_RE.match(stripped) or _YAML_KEY_RE.match(stripped))


def _is_xml_like(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith("<") and ">" in stripped


def _is_other_format(line: str) -> bool:
    return _is_json_like(line) or _is_yaml_like(line) or _is_xml_like(line)


def extract_csv(text: str, delimiter: str = COMMA) -> Optional[str]:
    """Find the first block of delimiter-separated lines in text.

    TOON array headers and their declared body lines are skipped. The block
    starts at the first remaining line holding the delimiter that does not
    look like JSON, YAML or XML, and extends over the following lines with
    the same property up to the first blank line, so the block is always a
    contiguous slice of the input.

    Args:
        text: Mixed text
        delimiter: Cell delimiter

    Returns:
        The CSV block, or None
    """
    if not isinstance(text, str) or not text:
        return None

    lines = text.split("\n")
    start_line = -1
    index = 0
    while index < len(lines):
        line = lines[index]
        if _TOON_ARRAY_HEADER_RE.match(line.strip()):
            count_match = _TOON_COUNT_RE.search(line)
            try:
                count = int(count_match.group(1)) if count_match else 0
            except ValueError:
                count = 0
            index += count + 1
            continue
        if delimiter in line and not _is_other_format(line):
            start_line = index
            break
        index += 1

    if start_line == -1:
        return None

    block: List[str] = []
    for line in lines[start_line:]:
        if not line.strip() or delimiter not in line or _is_other_format(line):
            break
        block.append(line)

    result = "\n".join(block).strip()
    if _TOON_BLOCK_START_RE.match(result) or _JSON_OPENER_RE.match(result):
        return None
    return result or None


Extractor = Callable[[str], Optional[str]]
