"""Unit tests for TOON decoding."""

import pytest

from toon_formatter import decode, encode
from toon_formatter.errors import InputError, StructuralError


class TestDecodeObjects:
    """Test decoding of key-value lines and nested objects."""

    def test_flat_object(self):
        assert decode('name: "Ada"\nage: 36') == {"name": "Ada", "age": 36}

    def test_nested_object(self):
        assert decode("user:\n  id: 1\n  meta:\n    ok: true\nnext: null") == {
            "user": {"id": 1, "meta": {"ok": True}},
            "next": None,
        }

    def test_empty_key_opens_empty_object(self):
        assert decode("a:\nb: 1") == {"a": {}, "b": 1}

    def test_bare_token_law(self):
        assert decode("code: 0123") == {"code": "0123"}
        assert decode("v: 0.5") == {"v": 0.5}
        assert decode("z: 0") == {"z": 0}
        assert decode("s: hello world") == {"s": "hello world"}

    def test_escaped_quotes(self):
        assert decode('s: "He said \\"hi\\""') == {"s": 'He said "hi"'}

    def test_quoted_value_with_colon(self):
        assert decode('url: "http://example.com"') == {"url": "http://example.com"}

    def test_comments_and_blank_lines_are_ignored(self):
        text = "# header\na: 1\n\n  # indented comment\nb:\n  # inside\n  c: 2\n"
        assert decode(text) == {"a": 1, "b": {"c": 2}}

    def test_crlf_line_endings(self):
        assert decode("a: 1\r\nb:\r\n  c: 2\r\n") == {"a": 1, "b": {"c": 2}}

    def test_root_scalars(self):
        assert decode("42") == 42
        assert decode('"hi"') == "hi"
        assert decode("true") is True

    def test_comment_only_document(self):
        assert decode("# nothing here") == {}


class TestDecodeArrays:
    """Test decoding of inline, tabular and block arrays."""

    def test_inline_array(self):
        assert decode("ids[3]: 1, 2, 3") == {"ids": [1, 2, 3]}

    def test_empty_array(self):
        assert decode("items[0]:\nnext: 1") == {"items": [], "next": 1}

    def test_tabular_array(self):
        assert decode('rows[2]{a,b}:\n  1,"x"\n  2,"y"') == {"rows": [{"a": 1, "b": "x"}, {"a": 2, "b": "y"}]}

    def test_tabular_array_followed_by_key(self):
        assert decode("rows[1]{a}:\n  1\nafter: 2") == {"rows": [{"a": 1}], "after": 2}

    def test_tabular_quoted_cells_keep_delimiters_and_colons(self):
        text = 'rows[2]{a,b}:\n  1,"x,y"\n  2,"http://example.com"'
        assert decode(text) == {"rows": [{"a": 1, "b": "x,y"}, {"a": 2, "b": "http://example.com"}]}

    def test_pipe_delimiter(self):
        assert decode("rows[2|]{a|b}:\n  1|x\n  2|y") == {"rows": [{"a": 1, "b": "x"}, {"a": 2, "b": "y"}]}
        assert decode("ids[2|]: 1 | 2") == {"ids": [1, 2]}

    def test_tab_delimiter(self):
        assert decode("rows[1\t]{a\tb}:\n  1\t2") == {"rows": [{"a": 1, "b": 2}]}

    def test_root_arrays(self, users_value, users_toon):
        assert decode("[2]: 1, 2") == [1, 2]
        assert decode(users_toon.replace("users[2]", "[2]")) == users_value["users"]

    def test_block_array(self):
        text = 'items[3]:\n  - 1\n  - "two"\n  -\n    a:\n      b: 2'
        assert decode(text) == {"items": [1, "two", {"a": {"b": 2}}]}

    def test_list_item_key_value(self):
        assert decode("items[2]:\n  - a: 1\n  - b:\n      c: 2") == {"items": [{"a": 1}, {"b": {"c": 2}}]}

    def test_nested_arrays(self):
        assert decode("m[2]:\n  - [2]: 1, 2\n  - [1]: 3") == {"m": [[1, 2], [3]]}

    def test_keyed_array_in_list_item(self):
        assert decode("m[1]:\n  - ids[2]: 1, 2") == {"m": [{"ids": [1, 2]}]}


class TestDecodeErrors:
    """Test rejected documents."""

    @pytest.mark.parametrize("value", ["", None, 42])
    def test_non_string_or_empty_input(self, value):
        with pytest.raises(InputError):
            decode(value)

    def test_invalid_un_indentation(self):
        with pytest.raises(StructuralError) as exc_info:
            decode("a:\n    b: 1\n  c: 2")
        assert exc_info.value.line == 3
        assert exc_info.value.message == "Invalid un-indentation."
        assert str(exc_info.value) == "Invalid TOON: L3: Invalid un-indentation."

    def test_size_mismatch(self):
        with pytest.raises(StructuralError, match="Array size mismatch"):
            decode("items[3]: 1, 2")

    def test_structural_error_is_value_error(self):
        with pytest.raises(ValueError):
            decode("a: 1\n  b: 2")


class TestRoundTrip:
    """decode(encode(v)) == v for representable values."""

    def test_rich_value(self, rich_value):
        assert decode(encode(rich_value)) == rich_value

    def test_tabular_value(self, users_value):
        assert decode(encode(users_value)) == users_value

    def test_root_list(self):
        value = [{"a": 1}, [1, 2], "s", None]
        assert decode(encode(value)) == value

    def test_custom_indent(self, rich_value):
        assert decode(encode(rich_value, {"indent": 4})) == rich_value

    def test_comments_do_not_change_value(self, users_value):
        toon = encode(users_value, {"comments": {"users": "People", "users.name": "Display name"}})
        assert toon.startswith("# People\n")
        assert decode(toon) == users_value
