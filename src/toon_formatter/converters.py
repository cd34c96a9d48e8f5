"""Conversions between TOON and JSON, YAML, XML and CSV.

The ``*_to_toon`` functions accept either a pure payload or mixed text; in
the latter case every embedded payload is converted in place and the prose
around it is kept (optionally shortened with a phrase table).
"""

import csv
import io
import json
import logging
import re
import xml.etree.ElementTree as ElementTree
from typing import Any, Callable, Dict, List, Mapping, Optional
from xml.sax.saxutils import escape, quoteattr

import yaml

from .constants import COMMA, MAX_EXTRACTION_PASSES
from .decoder import decode
from .encoder import encode
from .errors import ConversionError, InputError
from .extract import extract_csv, extract_json, extract_xml
from .normalize import is_json_array, is_json_object, is_json_primitive
from .pipeline import convert_embedded
from .primitives import encode_primitive, parse_number
from .types import JsonObject, JsonValue

logger = logging.getLogger(__name__)

FORMATS = ("json", "yaml", "xml", "csv", "toon")

ATTRIBUTES_KEY = "@attributes"
# "#text" would read back as a comment line
TEXT_KEY = "$text"

_BARE_AMPERSAND_RE = re.compile(r"&(?!#|\w+;)")
_TAG_START_RE = re.compile(r"^[^a-zA-Z_]")
_TAG_INVALID_RE = re.compile(r"[^a-zA-Z0-9_.]")


def _require_text(text: Any) -> str:
    if not isinstance(text, str) or not text:
        raise InputError("Input must be a non-empty string")
    return text


# JSON


def load_json(text: str) -> JsonValue:
    try:
        return json.loads(text)
    except ValueError as exc:
        raise ConversionError(f"Invalid JSON: {exc}") from exc


def dump_json(value: JsonValue, indent: Optional[int] = 2) -> str:
    return json.dumps(value, indent=indent, ensure_ascii=False)


# YAML


def load_yaml(text: str) -> JsonValue:
    try:
        value = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConversionError(f"Invalid YAML: {exc}") from exc
    if not isinstance(value, (dict, list)):
        raise ConversionError("YAML parsing failed: document is not a mapping or sequence")
    return value


def dump_yaml(value: JsonValue) -> str:
    return yaml.safe_dump(value, sort_keys=False, allow_unicode=True)


# XML


def encode_xml_reserved_chars(raw: str) -> str:
    """Escape ``&`` characters that do not start an entity reference."""
    return _BARE_AMPERSAND_RE.sub("&amp;", raw)


def sanitize_tag_name(name: str) -> str:
    """Turn an arbitrary key into a legal XML element name."""
    if not name:
        return "_"
    if _TAG_START_RE.match(name):
        name = "_" + name
    return _TAG_INVALID_RE.sub("_", name)


def _element_to_value(element: ElementTree.Element) -> Any:
    obj: JsonObject = {}
    if element.attrib:
        obj[ATTRIBUTES_KEY] = dict(element.attrib)

    texts: List[str] = []
    if element.text and element.text.strip():
        texts.append(element.text.strip())

    for child in element:
        child_value = _element_to_value(child)
        if child.tag in obj:
            existing = obj[child.tag]
            if not isinstance(existing, list):
                obj[child.tag] = [existing]
            obj[child.tag].append(child_value)
        else:
            obj[child.tag] = child_value
        if child.tail and child.tail.strip():
            texts.append(child.tail.strip())

    if texts:
        obj[TEXT_KEY] = " ".join(texts)
    if list(obj) == [TEXT_KEY]:
        return obj[TEXT_KEY]
    return obj


def load_xml(text: str) -> JsonObject:
    """Parse one XML element into ``{tag: value}``.

    Attributes go under ``@attributes``, character data under ``$text``
    (or replaces the element when it has nothing else), and repeated child
    tags become lists.
    """
    try:
        root = ElementTree.fromstring(encode_xml_reserved_chars(text))
    except ElementTree.ParseError as exc:
        raise ConversionError(f"Invalid XML: {exc}") from exc
    return {root.tag: _element_to_value(root)}


def _xml_scalar(value: Any) -> str:
    if isinstance(value, str):
        return escape(value)
    return escape(encode_primitive(value))


def build_tag(key: str, value: Any) -> str:
    """Render one key/value pair as XML."""
    tag = sanitize_tag_name(key)

    if value is None:
        return f"<{tag} />"

    if is_json_array(value):
        return "".join(build_tag(key, item) for item in value)

    if is_json_object(value):
        attrs = ""
        for attr_name, attr_value in (value.get(ATTRIBUTES_KEY) or {}).items():
            attr_text = attr_value if isinstance(attr_value, str) else encode_primitive(attr_value)
            attrs += f" {sanitize_tag_name(attr_name)}={quoteattr(attr_text)}"
        content = ""
        for child_key, child_value in value.items():
            if child_key == ATTRIBUTES_KEY:
                continue
            if child_key == TEXT_KEY:
                content += _xml_scalar(child_value)
            else:
                content += build_tag(child_key, child_value)
        return f"<{tag}{attrs}>{content}</{tag}>"

    return f"<{tag}>{_xml_scalar(value)}</{tag}>"


def dump_xml(value: JsonValue) -> str:
    if is_json_object(value):
        return "".join(build_tag(key, child) for key, child in value.items())
    if is_json_array(value):
        return build_tag("root", {"item": value})
    return build_tag("root", value)


# CSV


def _csv_cell(cell: str) -> Any:
    """Type a CSV cell: empty -> None, booleans, numbers; IDs like ``007`` stay text."""
    if cell == "":
        return None
    lowered = cell.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    token = cell.strip()
    if not (token.startswith("0") and len(token) > 1 and not token.startswith("0.")):
        number = parse_number(token)
        if number is not None:
            return number
    return cell


def flatten_object(value: Any, prefix: str = "", result: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Flatten nested mappings and lists into dotted keys."""
    if result is None:
        result = {}
    if is_json_object(value) and value:
        for key, child in value.items():
            flatten_object(child, f"{prefix}.{key}" if prefix else str(key), result)
    elif is_json_array(value) and value:
        for index, child in enumerate(value):
            flatten_object(child, f"{prefix}.{index}" if prefix else str(index), result)
    else:
        result[prefix] = value
    return result


def unflatten_object(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Rebuild nested mappings from dotted keys."""
    if not any("." in key for key in data):
        return dict(data)
    result: Dict[str, Any] = {}
    for key, value in data.items():
        parts = key.split(".")
        current = result
        for part in parts[:-1]:
            nested = current.get(part)
            if not isinstance(nested, dict):
                nested = {}
                current[part] = nested
            current = nested
        current[parts[-1]] = value
    return result


def load_csv(text: str, delimiter: str = COMMA) -> List[Dict[str, Any]]:
    """Parse CSV with a header row into a list of typed records."""
    reader = csv.DictReader(io.StringIO(text.strip()), delimiter=delimiter)
    rows: List[Dict[str, Any]] = []
    try:
        for row in reader:
            if None in row:
                raise ConversionError(f"CSV row {reader.line_num} has more cells than the header")
            typed = {key: _csv_cell(cell) if cell is not None else None for key, cell in row.items()}
            rows.append(unflatten_object(typed))
    except csv.Error as exc:
        raise ConversionError(f"Invalid CSV: {exc}") from exc
    if not reader.fieldnames:
        raise ConversionError("CSV has no header row")
    if not rows:
        raise ConversionError("CSV has no data rows")
    return rows


def _csv_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return encode_primitive(value)


def dump_csv(value: JsonValue, delimiter: str = COMMA) -> str:
    """Write records as CSV, flattening nested values into dotted columns."""
    records = value if is_json_array(value) else [value]
    flat_rows = [flatten_object(record) if not is_json_primitive(record) else {"value": record} for record in records]

    fieldnames: List[str] = []
    for row in flat_rows:
        for key in row:
            if key not in fieldnames:
                fieldnames.append(key)

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=fieldnames, delimiter=delimiter, lineterminator="\n")
    writer.writeheader()
    for row in flat_rows:
        writer.writerow({key: _csv_text(row.get(key)) for key in fieldnames})
    return buffer.getvalue().rstrip("\n")


_LOADERS: Dict[str, Callable[[str], JsonValue]] = {
    "json": load_json,
    "yaml": load_yaml,
    "xml": load_xml,
    "csv": load_csv,
    "toon": decode,
}

_DUMPERS: Dict[str, Callable[[JsonValue], str]] = {
    "json": dump_json,
    "yaml": dump_yaml,
    "xml": dump_xml,
    "csv": dump_csv,
    "toon": encode,
}


def load(text: str, fmt: str) -> JsonValue:
    """Parse text in the named format into a value."""
    if fmt not in _LOADERS:
        raise InputError(f"Unsupported format {fmt!r}; expected one of {', '.join(FORMATS)}")
    return _LOADERS[fmt](_require_text(text))


def dump(value: JsonValue, fmt: str) -> str:
    """Render a value in the named format."""
    if fmt not in _DUMPERS:
        raise InputError(f"Unsupported format {fmt!r}; expected one of {', '.join(FORMATS)}")
    return _DUMPERS[fmt](value)


def convert(text: str, source: str, target: str) -> str:
    """Convert a pure payload between any two supported formats."""
    logger.debug("Converting %s payload to %s", source, target)
    return dump(load(text, source), target)


# TOON <-> X


def json_to_toon(
    data: Any,
    *,
    phrases: Optional[Mapping[str, str]] = None,
    max_passes: int = MAX_EXTRACTION_PASSES,
) -> str:
    """Convert JSON data, a JSON string, or text with embedded JSON to TOON.

    Args:
        data: Parsed value, JSON string, or mixed text
        phrases: Optional phrase table applied to prose around payloads
        max_passes: Upper bound on extraction passes

    Returns:
        TOON text (mixed text keeps its prose)
    """
    if not isinstance(data, str):
        return encode(data)
    return convert_embedded(
        _require_text(data), extract_json, lambda block: encode(load_json(block)), max_passes=max_passes, phrases=phrases
    )


def toon_to_json(text: str, *, as_text: bool = False, indent: Optional[int] = 2) -> Any:
    """Decode TOON into a value, or into JSON text when ``as_text`` is set."""
    value = decode(_require_text(text))
    return dump_json(value, indent=indent) if as_text else value


def yaml_to_toon(text: str) -> str:
    return encode(load_yaml(_require_text(text)))


def toon_to_yaml(text: str) -> str:
    return dump_yaml(decode(_require_text(text)))


def xml_to_toon(
    text: str,
    *,
    phrases: Optional[Mapping[str, str]] = None,
    max_passes: int = MAX_EXTRACTION_PASSES,
) -> str:
    """Convert XML, or text with embedded XML elements, to TOON."""
    return convert_embedded(
        _require_text(text), extract_xml, lambda block: encode(load_xml(block)), max_passes=max_passes, phrases=phrases
    )


def toon_to_xml(text: str) -> str:
    return dump_xml(decode(_require_text(text)))


def csv_to_toon(
    text: str,
    *,
    delimiter: str = COMMA,
    phrases: Optional[Mapping[str, str]] = None,
    max_passes: int = MAX_EXTRACTION_PASSES,
) -> str:
    """Convert CSV, or text with an embedded CSV block, to TOON."""
    return convert_embedded(
        _require_text(text),
        lambda chunk: extract_csv(chunk, delimiter),
        lambda block: encode(load_csv(block, delimiter)),
        max_passes=max_passes,
        phrases=phrases,
    )


def toon_to_csv(text: str, *, delimiter: str = COMMA) -> str:
    return dump_csv(decode(_require_text(text)), delimiter)
