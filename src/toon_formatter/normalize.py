"""Normalization of arbitrary Python values into the JSON value model."""

import dataclasses
import math
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from .types import JsonValue


def normalize_value(value: Any) -> JsonValue:
    """Convert a Python value into a JSON-compatible value.

    Args:
        value: Any value; containers are converted recursively

    Returns:
        Value built only from dict, list, str, int, float, bool and None
    """
    if value is None or isinstance(value, (bool, str)):
        return value

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value == 0:
            # -0.0 has no distinct TOON spelling
            return 0
        return value

    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        if value == value.to_integral_value():
            return int(value)
        return float(value)

    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (date, time)):
        return value.isoformat()

    # Pydantic v2 / v1 models
    if hasattr(value, "model_dump") and callable(getattr(value, "model_dump")):
        return normalize_value(value.model_dump())
    if hasattr(value, "__fields__") and hasattr(value, "dict") and callable(getattr(value, "dict")):
        return normalize_value(value.dict())

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {field.name: normalize_value(getattr(value, field.name)) for field in dataclasses.fields(value)}

    if isinstance(value, Mapping):
        return {str(k): normalize_value(v) for k, v in value.items()}

    if isinstance(value, (set, frozenset)):
        try:
            items = sorted(value)
        except TypeError:
            items = list(value)
        return [normalize_value(item) for item in items]

    if isinstance(value, (list, tuple)):
        return [normalize_value(item) for item in value]

    return str(value)


def is_json_primitive(value: Any) -> bool:
    """Check whether a value is a scalar (str, number, bool or None)."""
    return value is None or isinstance(value, (str, int, float, bool))


def is_json_array(value: Any) -> bool:
    return isinstance(value, list)


def is_json_object(value: Any) -> bool:
    return isinstance(value, dict)


def is_array_of_primitives(value: Any) -> bool:
    """Check whether every element of a list is a scalar."""
    return is_json_array(value) and all(is_json_primitive(item) for item in value)

def is_array_of_objects(value: Any) -> bool:
    return is_json_array(value) and all(is_json_object(item) for item in value)
