"""Unit tests for pointer parsing, predicates, matching and compilation."""

import pytest

from hyperschema.services.core import PointerError, PointerNotFoundError
from hyperschema.services.pointer import (
    compile_pointer_get,
    create_pointer,
    fix_json_pointer_path,
    is_absolute_json_pointer,
    is_json_pointer,
    is_pointer_equal,
    is_relative_json_pointer,
    is_star_pointer,
    match_pointer,
    parse_pointer,
    parse_pointer_root_adjusted,
    pointer_get,
)


class TestParsing:
    """Test parse_pointer and root adjustment."""

    def test_parse_absolute(self):
        """Test absolute pointers have no root."""
        parsed = parse_pointer("/a/b~1c")
        assert parsed.root is None
        assert parsed.parts == ["a", "b/c"]
        assert parsed.modifier is None

    def test_parse_relative_with_modifier(self):
        """Test relative pointers with the key modifier."""
        assert parse_pointer("2#") == (2, [], "#")
        assert parse_pointer("1/name#") == (1, ["name"], "#")

    def test_root_adjusted(self):
        """Test relative pointers against a context root."""
        assert parse_pointer_root_adjusted("1/c", "/a/b") == ["a", "c"]
        assert parse_pointer_root_adjusted("0#", "/a/b") == "b"
        assert parse_pointer_root_adjusted("/x/y", "/a/b") == ["x", "y"]

    @pytest.mark.parametrize("root", ["", "/a", "/a/b", "/a/b/c/d"])
    def test_relative_root_bound(self, root):
        """Test '5#' fails for roots shallower than five segments."""
        with pytest.raises(PointerError):
            parse_pointer_root_adjusted("5#", root)

    def test_key_of_document_root_rejected(self):
        """Test asking for the key of the document root."""
        with pytest.raises(PointerError):
            parse_pointer_root_adjusted("2#", "/a/b")

    def test_create_pointer(self):
        """Test parts are escaped and joined."""
        assert create_pointer(["a/b", "c~d", 0]) == "/a~1b/c~0d/0"

    def test_fix_json_pointer_path(self):
        """Test slash normalization."""
        assert fix_json_pointer_path("a//b/") == "/a/b/"
        assert fix_json_pointer_path("/a/b", leading_slash=False) == "a/b"


class TestPredicates:
    """Test syntactic pointer checks."""

    def test_is_json_pointer(self):
        """Test absolute pointer syntax."""
        assert is_json_pointer("")
        assert is_json_pointer("/a/0")
        assert not is_json_pointer("/a/")
        assert not is_json_pointer("a")
        assert not is_json_pointer(None)

    def test_is_star_pointer(self):
        """Test star detection on whole segments."""
        assert is_star_pointer("/a/*/b")
        assert not is_star_pointer("/a/b*")

    def test_is_relative_json_pointer(self):
        """Test relative pointer syntax."""
        assert is_relative_json_pointer("0")
        assert is_relative_json_pointer("1/a")
        assert is_relative_json_pointer("2#")
        assert not is_relative_json_pointer("01")
        assert not is_relative_json_pointer("/a")

    def test_is_absolute_json_pointer(self):
        """Test schema URIs with pointer fragments."""
        assert is_absolute_json_pointer("http://example.org/user#/properties/id")
        assert not is_absolute_json_pointer("/properties/id")


class TestMatching:
    """Test pointer comparison."""

    def test_equal_with_star(self):
        """Test star segments match any segment."""
        assert is_pointer_equal("/a/*/c", "/a/1/c")
        assert not is_pointer_equal("/a/b", "/a/b/c")

    def test_match_pointer(self):
        """Test relative depth of related pointers."""
        assert match_pointer("/a", "/a") == 0
        assert match_pointer("/a", "/a/b/c") == 2
        assert match_pointer("/a/b", "/a") == -1
        assert match_pointer("/a/b", "/x") is None


class TestCompiledPointer:
    """Test compile_pointer_get."""

    @pytest.mark.parametrize("pointer", ["/a/b", "/list/1", "/list/*/x", "/*", "/a/b#"])
    def test_matches_pointer_get(self, pointer):
        """Test compiled accessors agree with pointer_get."""
        data = {"a": {"b": 1}, "list": [{"x": 2}, {"x": 3}]}
        assert compile_pointer_get(pointer)(data) == pointer_get(data, pointer)

    def test_reusable_across_documents(self):
        """Test one accessor over many documents."""
        get_name = compile_pointer_get("/name")
        assert [get_name(item) for item in ({"name": "a"}, {"name": "b"})] == ["a", "b"]

    def test_missing_raises(self):
        """Test missing values use the default generator."""
        with pytest.raises(PointerNotFoundError):
            compile_pointer_get("/missing")({})
        assert compile_pointer_get("/missing", default_generator=lambda p, c: 0)({}) == 0

    def test_dash_rejected_at_compile_time(self):
        """Test unreadable pointers fail immediately."""
        with pytest.raises(PointerError):
            compile_pointer_get("/items/-")
