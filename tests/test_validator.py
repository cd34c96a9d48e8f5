"""Unit tests for structural validation of TOON documents."""

import sys

import pytest

from toon_formatter import validate
from toon_formatter.validator import INVALID_INPUT_MESSAGE


def invalid(message, line):
    return {"valid": False, "message": message, "line": line}


VALID = {"valid": True, "message": None, "line": None}


class TestValidDocuments:
    """Documents that must pass."""

    def test_encoder_output_is_valid(self, users_toon):
        assert validate(users_toon) == VALID

    def test_nested_blocks(self):
        text = "a:\n  b:\n    c: 1\n  d[2]:\n    - 1\n    -\n      e: 2\nf: 3"
        assert validate(text) == VALID

    def test_comments_are_ignored(self):
        assert validate("# leading\na: 1\n  # misplaced indent is fine in a comment\nb: 2") == VALID

    def test_quoted_colon_in_tabular_row(self):
        assert validate('rows[1]{a,b}:\n  1,"http://x"') == VALID

    def test_lone_root_scalar(self):
        assert validate("42") == VALID
        assert validate('"text"') == VALID

    def test_blank_inline_tokens_are_ignored(self):
        assert validate("ids[2]: 1, 2,") == VALID


class TestArraySizes:
    """Declared counts must match actual items."""

    def test_inline_mismatch(self):
        assert validate("items[3]: 1, 2") == invalid("Array size mismatch. Declared 3, found 2 inline items.", 1)

    def test_block_mismatch_reported_on_header(self):
        text = "x: 0\nitems[3]:\n  - 1\n  - 2\ny: 1"
        assert validate(text) == invalid("Array size mismatch. Declared 3, found 2 items.", 2)

    def test_block_mismatch_at_end_of_document(self):
        assert validate("items[1]:\n  - 1\n  - 2") == invalid("Array size mismatch. Declared 1, found 2 items.", 1)

    def test_tabular_mismatch(self):
        assert validate("rows[3]{a}:\n  1\n  2") == invalid("Array size mismatch. Declared 3, found 2 items.", 1)

    def test_missing_block(self):
        message = "Array declared with size 2 but has no items (expected indented block)."
        assert validate("items[2]:\nnext: 1") == invalid(message, 1)
        assert validate("a: 1\nitems[2]:") == invalid(message, 2)

    def test_zero_length_needs_no_block(self):
        assert validate("items[0]:\nnext: 1") == VALID


class TestIndentation:
    """Indentation must follow block openers and return to open levels."""

    def test_invalid_un_indentation(self):
        assert validate("a:\n    b: 1\n  c: 2") == invalid("Invalid un-indentation.", 3)

    def test_indent_without_opener(self):
        assert validate("a: 1\n  b: 2") == invalid("Indentation error.", 2)

    def test_indent_after_tabular_row(self):
        assert validate("rows[2]{a}:\n  1\n    2") == invalid("Indentation error.", 3)


class TestLineShapes:
    """Lines must have a shape that is legal where they appear."""

    def test_list_item_outside_array(self):
        assert validate("a:\n  - 1") == invalid("List item found in non-array context.", 2)

    def test_key_value_inside_array_block(self):
        assert validate("items[1]:\n  a: 1") == invalid("Array blocks may only contain list items.", 2)

    def test_tabular_row_with_colon(self):
        assert validate("rows[1]{a,b}:\n  1,x: y") == invalid("Tabular rows cannot contain a colon.", 2)

    def test_tabular_row_width(self):
        assert validate("rows[1]{a,b}:\n  1") == invalid("Tabular row has 1 values, expected 2.", 2)

    def test_tabular_header_with_inline_values(self):
        assert validate("rows[1]{a}: 1") == invalid("Tabular array header cannot carry inline values.", 1)

    def test_malformed_key_value(self):
        assert validate('a: "unterminated') == invalid("Invalid Key-Value assignment.", 1)

    def test_unrecognized_root_line(self):
        assert validate("just some words") == invalid("Unrecognized TOON syntax.", 1)

    @pytest.mark.skipif(
        not getattr(sys, "get_int_max_str_digits", lambda: 0)(),
        reason="interpreter has no int-to-str digit limit",
    )
    def test_overlong_digit_run(self):
        text = "1" * (sys.get_int_max_str_digits() + 1)
        assert validate(text) == invalid("Unrecognized TOON syntax.", 1)

    def test_scalar_after_content(self):
        assert validate("a: 1\nfoo") == invalid("Unexpected scalar line.", 2)

    def test_duplicate_key(self):
        assert validate("a: 1\nb: 2\na: 3") == invalid("Duplicate key 'a'.", 3)

    def test_same_key_in_different_objects(self):
        assert validate("x:\n  a: 1\ny:\n  a: 2") == VALID

    def test_root_array_header_must_come_first(self):
        assert validate("a: 1\n[1]: 2") == invalid("Array header is missing a key.", 2)

    def test_content_after_root_array(self):
        assert validate("[1]: 1\na: 2") == invalid("Unexpected content after root array.", 2)

    def test_content_after_root_scalar(self):
        assert validate("42\n43") == invalid("Unexpected content after root value.", 2)


class TestInvalidInput:
    @pytest.mark.parametrize("value", ["", None, 7, b"a: 1"])
    def test_non_string_or_empty(self, value):
        assert validate(value) == invalid(INVALID_INPUT_MESSAGE, None)
