"""Unit tests for scalar formatting, quoting and the bare-token parse law."""

import sys

import pytest

from toon_formatter.errors import InputError
from toon_formatter.primitives import (
    encode_key,
    encode_primitive,
    format_header,
    format_number,
    has_unquoted,
    is_fully_quoted,
    parse_value,
    split_by_delimiter,
    unquote,
)


int_digit_limit = pytest.mark.skipif(
    not getattr(sys, "get_int_max_str_digits", lambda: 0)(),
    reason="interpreter has no int-to-str digit limit",
)


class TestEncodePrimitive:
    """Test formatting of scalars."""

    def test_literals(self):
        assert encode_primitive(None) == "null"
        assert encode_primitive(True) == "true"
        assert encode_primitive(False) == "false"

    def test_strings_are_always_quoted(self):
        """Strings that look like numbers or literals still get quotes."""
        assert encode_primitive("hello") == '"hello"'
        assert encode_primitive("42") == '"42"'
        assert encode_primitive("true") == '"true"'
        assert encode_primitive("") == '""'

    def test_string_escaping(self):
        assert encode_primitive('He said "hi"') == '"He said \\"hi\\""'
        assert encode_primitive("a\\b") == '"a\\\\b"'
        assert encode_primitive("a\nb\rc\td") == '"a\\nb\\rc\\td"'

    def test_numbers(self):
        assert format_number(7) == "7"
        assert format_number(-3) == "-3"
        assert format_number(1.0) == "1"
        assert format_number(2.5) == "2.5"
        assert format_number(0.1) == "0.1"
        assert format_number(1e20) == "1e+20"
        assert format_number(10**30) == str(10**30)

    @int_digit_limit
    def test_int_past_digit_limit_raises(self):
        with pytest.raises(InputError):
            format_number(10 ** sys.get_int_max_str_digits())


class TestParseValue:
    """Test the bare-token parse law."""

    def test_literals(self):
        assert parse_value("true") is True
        assert parse_value("false") is False
        assert parse_value("null") is None

    def test_empty_and_zero(self):
        assert parse_value("") == ""
        assert parse_value("   ") == ""
        assert parse_value("0") == 0

    def test_leading_zero_stays_string(self):
        assert parse_value("0123") == "0123"
        assert parse_value("00") == "00"

    def test_numbers(self):
        assert parse_value("0.5") == 0.5
        assert parse_value("-3") == -3
        assert isinstance(parse_value("-3"), int)
        assert parse_value(".5") == 0.5
        assert parse_value("1e3") == 1000.0
        assert parse_value("+7") == 7

    def test_non_finite_number_stays_string(self):
        assert parse_value("1e999") == "1e999"

    @int_digit_limit
    def test_digit_run_past_limit_stays_string(self):
        token = "1" * (sys.get_int_max_str_digits() + 1)
        assert parse_value(token) == token

    def test_quoted_tokens_are_unquoted(self):
        assert parse_value('"42"') == "42"
        assert parse_value('"He said \\"hi\\""') == 'He said "hi"'

    def test_other_tokens_verbatim(self):
        assert parse_value("hello world") == "hello world"
        assert parse_value("1.2.3") == "1.2.3"


class TestQuoting:
    """Test quote-aware helpers."""

    def test_unquote_resolves_escapes(self):
        assert unquote('"a\\nb"') == "a\nb"
        assert unquote('"tab\\there"') == "tab\there"
        assert unquote('"back\\\\slash"') == "back\\slash"
        assert unquote('"keep\\x"') == "keepx"

    def test_split_ignores_quoted_delimiters(self):
        assert split_by_delimiter('a,"b,c",d', ",") == ["a", '"b,c"', "d"]
        assert split_by_delimiter('1|"x|y"', "|") == ["1", '"x|y"']

    def test_split_honors_escaped_quotes(self):
        assert split_by_delimiter('"a\\",b",c', ",") == ['"a\\",b"', "c"]

    def test_has_unquoted(self):
        assert has_unquoted("a: 1", ":")
        assert not has_unquoted('1,"http://x"', ":")

    def test_is_fully_quoted(self):
        assert is_fully_quoted('"abc"')
        assert is_fully_quoted('"a\\"b"')
        assert not is_fully_quoted('"a" "b"')
        assert not is_fully_quoted('"')


class TestKeysAndHeaders:
    """Test key validation and array headers."""

    def test_plain_keys_pass_through(self):
        assert encode_key("name") == "name"
        assert encode_key("@attributes") == "@attributes"
        assert encode_key("with space") == "with space"

    @pytest.mark.parametrize("key", ["", " padded", "a:b", "a[0]", "a{b}", "line\nbreak", "#comment", '"quoted', 'a"b', "-", "- item"])
    def test_unrepresentable_keys_raise(self, key):
        with pytest.raises(InputError):
            encode_key(key)

    def test_format_header(self):
        assert format_header("rows", 2, ["a", "b"]) == "rows[2]{a,b}:"
        assert format_header("ids", 3, None) == "ids[3]:"
        assert format_header(None, 0, None) == "[0]:"
        assert format_header(None, 3, None, "|") == "[3|]:"
