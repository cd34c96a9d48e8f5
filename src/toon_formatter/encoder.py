"""Core TOON encoding functionality."""

from typing import Any, Dict, List, Optional

from .constants import COMMENT_PREFIX, DEFAULT_INDENT
from .encoders import encode_value
from .errors import InputError
from .normalize import normalize_value
from .types import EncodeOptions, ResolvedEncodeOptions
from .writer import LineWriter


def _field_description(field: Any) -> Optional[str]:
    # pydantic v2 FieldInfo, or v1 ModelField wrapping a FieldInfo
    desc = getattr(field, "description", None)
    if desc is None:
        extra = getattr(field, "json_schema_extra", None)
        if isinstance(extra, dict):
            desc = extra.get("description")
    if desc is None:
        field_info = getattr(field, "field_info", None)
        if field_info is not None:
            desc = getattr(field_info, "description", None)
    return desc


def _model_fields(value: Any) -> Optional[Dict[str, Any]]:
    # model_fields lives on the class in pydantic v2; __fields__ is the v1 spelling
    for attr in ("model_fields", "__fields__"):
        fields = getattr(type(value), attr, None)
        if isinstance(fields, dict):
            return fields
    return None


def _extract_model_field_description_map(value: Any, base_path: List[str] | None = None) -> Dict[str, str]:
    """Extract dotted-path comments from Pydantic BaseModel descriptions.

    Supports Pydantic v2 (model_fields, field.description) and v1 (__fields__, FieldInfo.description).
    """
    result: Dict[str, str] = {}
    if base_path is None:
        base_path = []

    fields = _model_fields(value)
    if fields is not None:
        for name, field in fields.items():
            desc = _field_description(field)
            if desc:
                result[".".join([*base_path, name])] = str(desc)
            if hasattr(value, name):
                result.update(_extract_model_field_description_map(getattr(value, name), [*base_path, name]))
        return result

    if isinstance(value, dict):
        for k, v in value.items():
            result.update(_extract_model_field_description_map(v, [*base_path, str(k)]))
        return result

    if isinstance(value, (list, tuple)):
        for item in value:
            result.update(_extract_model_field_description_map(item, base_path))
        return result

    return result


def encode(value: Any, options: Optional[EncodeOptions] = None) -> str:
    """Encode a value into TOON format.

    Strings are always quoted, arrays of uniform flat objects become tables
    and everything else is nested by indentation. An empty mapping or
    sequence at the root encodes to an empty string.

    Args:
        value: The value to encode (JSON-compatible, dataclass or Pydantic model)
        options: Optional encoding options

    Returns:
        TOON-formatted string

    Raises:
        InputError: If a mapping key cannot be written as a bare TOON key
    """
    # Merge model-derived comments before normalization so we don't lose metadata
    incoming_options = options or {}
    auto_comments: Dict[str, str] = {}
    if incoming_options.get("modelComments", True):
        auto_comments = _extract_model_field_description_map(value)

    # Merge with user-provided comments (user wins)
    provided_comments = incoming_options.get("comments", {}) or {}
    merged_comments = {**auto_comments, **provided_comments}

    normalized = normalize_value(value)
    merged_options: EncodeOptions = {**incoming_options, "comments": merged_comments}
    resolved_options = resolve_options(merged_options)
    writer = LineWriter(resolved_options.indent)
    encode_value(normalized, resolved_options, writer, 0)
    return writer.to_string()


def resolve_options(options: Optional[EncodeOptions]) -> ResolvedEncodeOptions:
    """Resolve encoding options with defaults.

    Args:
        options: Optional user-provided options

    Returns:
        Resolved options with defaults applied

    Raises:
        InputError: If the indent is not a positive integer
    """
    if options is None:
        return ResolvedEncodeOptions()

    indent = options.get("indent", DEFAULT_INDENT)
    if isinstance(indent, bool) or not isinstance(indent, int) or indent < 1:
        raise InputError(f"indent must be a positive integer, got {indent!r}")

    # Decoders only skip lines that start with '#'
    comment_prefix = options.get("commentPrefix", COMMENT_PREFIX)
    if not comment_prefix.startswith(COMMENT_PREFIX):
        raise InputError(f"commentPrefix must start with {COMMENT_PREFIX!r}, got {comment_prefix!r}")

    return ResolvedEncodeOptions(
        indent=indent,
        comments=options.get("comments", {}),
        comment_prefix=comment_prefix,
    )
