"""Extract-convert-splice loop over mixed text."""

import logging
from typing import Callable, List, Mapping, Optional

from .constants import MAX_EXTRACTION_PASSES
from .errors import InputError, ToonError
from .extract import Extractor
from .phrases import shorten_phrases

logger = logging.getLogger(__name__)

Converter = Callable[[str], str]


def convert_embedded(
    text: str,
    extractor: Extractor,
    converter: Converter,
    *,
    max_passes: int = MAX_EXTRACTION_PASSES,
    phrases: Optional[Mapping[str, str]] = None,
) -> str:
    """Convert every payload found in mixed text, leaving the prose around it.

    Each pass extracts one payload from the text that follows the previous
    one, converts it and splices the result in its place. The loop stops
    when no payload is left or after ``max_passes`` passes. A payload the
    converter rejects is kept verbatim.

    Args:
        text: Mixed text
        extractor: Returns the first payload in a string, or None
        converter: Turns one payload into its replacement text
        max_passes: Upper bound on extraction passes
        phrases: Optional phrase table applied to the prose between payloads

    Returns:
        Text with payloads converted

    Raises:
        InputError: If text is not a non-empty string or max_passes < 1
    """
    if not isinstance(text, str) or not text:
        raise InputError("Input must be a non-empty string")
    if max_passes < 1:
        raise InputError(f"max_passes must be at least 1, got {max_passes}")

    def prose(segment: str) -> str:
        return shorten_phrases(segment, phrases) if phrases else segment

    parts: List[str] = []
    rest = text
    for _ in range(max_passes):
        block = extractor(rest)
        if not block:
            break
        index = rest.find(block)
        if index == -1:
            logger.debug("Extracted payload is not a slice of the text; stopping")
            break
        parts.append(prose(rest[:index]))
        try:
            parts.append(converter(block).strip())
        except ToonError as exc:
            logger.debug("Leaving payload unconverted: %s", exc)
            parts.append(block)
        rest = rest[index + len(block):]
    else:
        if extractor(rest):
            logger.warning("Stopped after %d extraction passes; remaining text left as is", max_passes)
    parts.append(prose(rest))
    return "".join(parts)
