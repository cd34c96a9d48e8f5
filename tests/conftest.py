"""Shared fixtures for toon_formatter tests."""

import pytest


@pytest.fixture
def users_value():
    """A mapping with a uniform array of flat objects (tabular candidate)."""
    return {
        "users": [
            {"id": 1, "name": "Ada", "active": True},
            {"id": 2, "name": "Linus", "active": False},
        ]
    }


@pytest.fixture
def users_toon():
    """TOON text for ``users_value``."""
    return 'users[2]{id,name,active}:\n  1,"Ada",true\n  2,"Linus",false'


@pytest.fixture
def rich_value():
    """A value exercising every array shape, nesting and awkward strings."""
    return {
        "name": "Ada",
        "tags": ["x", "y"],
        "rows": [
            {"a": 1, "b": "x,y"},
            {"a": 2, "b": "http://example.com"},
        ],
        "nested": {"deep": {"n": None, "flag": True}},
        "mixed": [1, "two", {"three": 3}, [4]],
        "empty": [],
        "text": 'line1\nline2\t"q" \\ end',
        "zero": "007",
        "ratio": 2.5,
        "numberish": "42",
    }


@pytest.fixture
def mixed_json_text():
    return 'Intro {"a": 1} middle {"b": 2} end'
