"""Encoders for different value types."""

from typing import List, Optional, Tuple

from .constants import LIST_ITEM_MARKER, LIST_ITEM_PREFIX
from .normalize import (
    is_array_of_objects,
    is_array_of_primitives,
    is_json_array,
    is_json_object,
    is_json_primitive,
)
from .primitives import encode_key, encode_primitive, format_header, is_safe_field_name, join_encoded_values
from .types import ArrayShape, Depth, JsonArray, JsonObject, JsonValue, ResolvedEncodeOptions
from .writer import LineWriter


def _path_to_key(path_parts: List[str]) -> str:
    return ".".join(path_parts)


def _maybe_write_comment(options: ResolvedEncodeOptions, writer: LineWriter, depth: Depth, path_parts: List[str]) -> None:
    key = _path_to_key(path_parts)
    if not key:
        return
    comment = options.comments.get(key)
    if comment:
        prefix = options.commentPrefix if options.commentPrefix is not None else "#"
        writer.push(depth, f"{prefix} {' '.join(str(comment).split())}")


def encode_value(
    value: JsonValue, options: ResolvedEncodeOptions, writer: LineWriter, depth: Depth = 0, path_parts: Optional[List[str]] = None
) -> None:
    """Encode a value to TOON format.

    Args:
        value: Normalized JSON value
        options: Resolved encoding options
        writer: Line writer for output
        depth: Current indentation depth
    """
    if path_parts is None:
        path_parts = []

    if is_json_primitive(value):
        writer.push(depth, encode_primitive(value))
    elif is_json_array(value):
        if value:
            encode_array(value, options, writer, depth, None, path_parts)
    elif is_json_object(value):
        encode_object(value, options, writer, depth, None, path_parts)


def encode_object(
    obj: JsonObject,
    options: ResolvedEncodeOptions,
    writer: LineWriter,
    depth: Depth,
    key: Optional[str],
    path_parts: List[str],
) -> None:
    """Encode an object to TOON format.

    Members of a keyed object go one level deeper than its ``key:`` header;
    members of the root object stay at the current depth.
    """
    if key:
        _maybe_write_comment(options, writer, depth, [*path_parts, key])
        writer.push(depth, f"{encode_key(key)}:")

    for obj_key, obj_value in obj.items():
        encode_key_value_pair(
            obj_key,
            obj_value,
            options,
            writer,
            depth if not key else depth + 1,
            [*path_parts, key] if key else path_parts,
        )


def encode_key_value_pair(
    key: str, value: JsonValue, options: ResolvedEncodeOptions, writer: LineWriter, depth: Depth, path_parts: List[str]
) -> None:
    """Encode a key-value pair."""
    if is_json_primitive(value):
        _maybe_write_comment(options, writer, depth, [*path_parts, key])
        writer.push(depth, f"{encode_key(key)}: {encode_primitive(value)}")
    elif is_json_array(value):
        encode_array(value, options, writer, depth, key, path_parts)
    elif is_json_object(value):
        encode_object(value, options, writer, depth, key, path_parts)


def classify_array(arr: JsonArray, delimiter: str) -> Tuple[ArrayShape, Optional[List[str]]]:
    """Pick the layout for an array.

    Returns:
        Tuple of the shape and, for tabular arrays, the header fields
    """
    if not arr:
        return ArrayShape.EMPTY, None
    if is_array_of_primitives(arr):
        return ArrayShape.INLINE_PRIMITIVE, None
    fields = detect_tabular_header(arr, delimiter)
    if fields:
        return ArrayShape.TABULAR, fields
    return ArrayShape.BLOCK, None


def detect_tabular_header(arr: JsonArray, delimiter: str) -> Optional[List[str]]:
    """Detect if array can use tabular format and return header keys.

    Every row must be an object with exactly the first row's keys and only
    scalar values. Rows with extra keys disqualify the table so that no field
    is dropped.

    Args:
        arr: Array to inspect
        delimiter: Delimiter character

    Returns:
        List of keys in first-row order if tabular, None otherwise
    """
    if not arr or not is_array_of_objects(arr):
        return None

    first_keys = list(arr[0].keys())
    if not first_keys or not all(is_safe_field_name(k, delimiter) for k in first_keys):
        return None

    key_set = set(first_keys)
    for obj in arr:
        if set(obj.keys()) != key_set:
            return None
        if not all(is_json_primitive(value) for value in obj.values()):
            return None

    return first_keys


def encode_array(
    arr: JsonArray,
    options: ResolvedEncodeOptions,
    writer: LineWriter,
    depth: Depth,
    key: Optional[str],
    path_parts: List[str],
    prefix: str = "",
) -> None:
    """Encode an array to TOON format.

    Args:
        arr: List array
        options: Resolved encoding options
        writer: Line writer for output
        depth: Current indentation depth
        key: Optional key name
        prefix: Text placed before the header (the list marker for nested arrays)
    """
    if key:
        _maybe_write_comment(options, writer, depth, [*path_parts, key])

    shape, fields = classify_array(arr, options.delimiter)

    if shape is ArrayShape.EMPTY:
        writer.push(depth, prefix + format_header(key, 0, None, options.delimiter))
    elif shape is ArrayShape.INLINE_PRIMITIVE:
        encode_inline_primitive_array(arr, options, writer, depth, key, prefix)
    elif shape is ArrayShape.TABULAR:
        encode_array_of_objects_as_tabular(arr, fields, options, writer, depth, key, path_parts, prefix)
    else:
        encode_array_as_list_items(arr, options, writer, depth, key, path_parts, prefix)


def encode_inline_primitive_array(
    arr: JsonArray,
    options: ResolvedEncodeOptions,
    writer: LineWriter,
    depth: Depth,
    key: Optional[str],
    prefix: str = "",
) -> None:
    """Encode an array of primitives inline as ``key[N]: v1, v2``."""
    encoded_values = [encode_primitive(item) for item in arr]
    joined = join_encoded_values(encoded_values, options.delimiter, spaced=True)
    header = format_header(key, len(arr), None, options.delimiter)
    writer.push(depth, f"{prefix}{header} {joined}")


def encode_array_of_objects_as_tabular(
    arr: List[JsonObject],
    fields: List[str],
    options: ResolvedEncodeOptions,
    writer: LineWriter,
    depth: Depth,
    key: Optional[str],
    path_parts: List[str],
    prefix: str = "",
) -> None:
    """Encode array of uniform objects in tabular format.

    Args:
        arr: Array of uniform objects
        fields: Field names for header
        options: Resolved encoding options
        writer: Line writer for output
        depth: Current indentation depth
        key: Optional key name
    """
    header = format_header(key, len(arr), fields, options.delimiter)
    writer.push(depth, prefix + header)

    # Optional per-field comments (if provided) placed under header
    for field in fields:
        field_comment = options.comments.get(_path_to_key([*path_parts, key, field]) if key else _path_to_key([*path_parts, field]))
        if field_comment:
            comment_prefix = options.commentPrefix if options.commentPrefix is not None else "#"
            writer.push(depth + 1, f"{comment_prefix} {field}: {' '.join(str(field_comment).split())}")

    for obj in arr:
        row_values = [encode_primitive(obj[field]) for field in fields]
        writer.push(depth + 1, join_encoded_values(row_values, options.delimiter))


def encode_array_as_list_items(
    arr: JsonArray,
    options: ResolvedEncodeOptions,
    writer: LineWriter,
    depth: Depth,
    key: Optional[str],
    path_parts: List[str],
    prefix: str = "",
) -> None:
    """Encode a non-uniform array as ``-`` list items one level deeper."""
    header = format_header(key, len(arr), None, options.delimiter)
    writer.push(depth, prefix + header)

    item_path = [*path_parts, key] if key else path_parts
    for item in arr:
        encode_list_item(item, options, writer, depth + 1, item_path)


def encode_list_item(item: JsonValue, options: ResolvedEncodeOptions, writer: LineWriter, depth: Depth, path_parts: List[str]) -> None:
    """Encode one element of a block array.

    Objects put the marker on its own line with members one level deeper;
    scalars and nested arrays share the marker line.
    """
    if is_json_primitive(item):
        writer.push(depth, f"{LIST_ITEM_PREFIX}{encode_primitive(item)}")
    elif is_json_array(item):
        encode_array(item, options, writer, depth, None, path_parts, prefix=LIST_ITEM_PREFIX)
    elif is_json_object(item):
        writer.push(depth, LIST_ITEM_MARKER)
        for obj_key, obj_value in item.items():
            encode_key_value_pair(obj_key, obj_value, options, writer, depth + 1, path_parts)
