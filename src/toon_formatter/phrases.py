"""Verbose-phrase shortening for prose that surrounds structured payloads.

The phrase table is plain configuration: callers may pass their own mapping,
the default one is read-only.
"""

import re
from types import MappingProxyType
from typing import Mapping, Optional, Pattern

DEFAULT_PHRASES: Mapping[str, str] = MappingProxyType(
    {
        # Contractions
        "i am": "i'm",
        "do not": "don't",
        "would not": "wouldn't",
        "i will": "i'll",
        "i have": "i've",
        "you are": "you're",
        "we will": "we'll",
        "they are": "they're",
        "it is": "it's",
        "could have": "could've",
        "should not": "shouldn't",
        "has not": "hasn't",
        "there is": "there's",
        # Common phrases
        "as soon as possible": "asap",
        "frequently asked questions": "faq",
        "user interface": "ui",
        "to be determined": "tbd",
        "by the way": "btw",
        "artificial intelligence": "ai",
        "large language model": "llm",
        "point of view": "pov",
        "for your information": "fyi",
        "estimated time of arrival": "eta",
        "end of day": "eod",
        "thank you": "thanks",
        # Single words
        "information": "info",
        "please": "pls",
        "message": "msg",
        "people": "ppl",
        "without": "w/o",
        "approximate": "approx",
        "maximum": "max",
        "minimum": "min",
        "miscellaneous": "misc",
        "introduction": "intro",
        "definition": "def",
        "average": "avg",
        "quantity": "qty",
        "package": "pkg",
        "document": "doc",
        "management": "mgmt",
        "reference": "ref",
        "utilize": "use",
        "versus": "vs",
        "tomorrow": "tmrw",
        # Days/Months
        "january": "jan",
        "february": "feb",
        "august": "aug",
        "september": "sept",
        "october": "oct",
        "november": "nov",
        "december": "dec",
        "monday": "mon",
        "tuesday": "tue",
        "wednesday": "wed",
        "thursday": "thur",
        "friday": "fri",
        "saturday": "sat",
        "sunday": "sun",
    }
)


def compile_phrases(phrases: Mapping[str, str]) -> Optional[Pattern[str]]:
    """Build one case-insensitive, word-bounded alternation, longest phrase first."""
    if not phrases:
        return None
    ordered = sorted(phrases, key=len, reverse=True)
    alternation = "|".join(re.escape(phrase) for phrase in ordered)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", re.IGNORECASE)


def shorten_phrases(text: str, phrases: Mapping[str, str] = DEFAULT_PHRASES) -> str:
    """Replace verbose phrases with their short forms.

    Matching ignores case and only hits whole words; longer phrases win
    over the shorter phrases they contain.

    Args:
        text: Prose to shorten
        phrases: Mapping of lower-case phrase to replacement

    Returns:
        Shortened text
    """
    pattern = compile_phrases(phrases)
    if pattern is None or not text:
        return text
    lookup = {phrase.lower(): replacement for phrase, replacement in phrases.items()}
    return pattern.sub(lambda match: lookup[match.group(0).lower()], text)
