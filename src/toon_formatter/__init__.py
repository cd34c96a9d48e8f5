"""
toon_formatter - Token-Oriented Object Notation for Python

Encode, validate and decode TOON, a compact indentation-based notation for
passing structured data to LLMs, and convert JSON, YAML, XML and CSV payloads
(on their own or embedded in prose) to and from it.
"""

from .converters import (
    convert,
    csv_to_toon,
    json_to_toon,
    toon_to_csv,
    toon_to_json,
    toon_to_xml,
    toon_to_yaml,
    xml_to_toon,
    yaml_to_toon,
)
from .decoder import decode
from .encoder import encode
from .errors import ConversionError, InputError, ParseError, StructuralError, ToonError
from .extract import extract_csv, extract_json, extract_xml
from .phrases import DEFAULT_PHRASES, shorten_phrases
from .pipeline import convert_embedded
from .types import EncodeOptions, JsonValue, ValidationResult
from .validator import validate

__version__ = "0.1.0"
__all__ = [
    "encode",
    "decode",
    "validate",
    "extract_json",
    "extract_xml",
    "extract_csv",
    "convert_embedded",
    "shorten_phrases",
    "DEFAULT_PHRASES",
    "convert",
    "json_to_toon",
    "toon_to_json",
    "yaml_to_toon",
    "toon_to_yaml",
    "xml_to_toon",
    "toon_to_xml",
    "csv_to_toon",
    "toon_to_csv",
    "ToonError",
    "InputError",
    "StructuralError",
    "ParseError",
    "ConversionError",
    "EncodeOptions",
    "JsonValue",
    "ValidationResult",
]
