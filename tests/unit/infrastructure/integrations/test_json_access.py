"""Tests for the lenient JSON accessors."""

import pytest

from scrobbleview.infrastructure.integrations.json_access import (
    as_list,
    get_int,
    get_optional_int,
    get_optional_str,
    get_path,
    get_str,
)

DATA = {
    "user": {
        "name": "rj",
        "playcount": "1234",
        "empty": "",
        "images": [{"#text": "small"}, {"#text": "large"}],
        "registered": {"unixtime": "1037793040", "#text": 1037793040},
    }
}


class TestGetPath:
    """Test nested lookups."""

    def test_nested_dict_and_index(self) -> None:
        """Test walking dicts and list indexes."""
        assert get_path(DATA, "user", "images", -1, "#text") == "large"

    @pytest.mark.parametrize(
        "path",
        [
            ("missing",),
            ("user", "images", 5),
            ("user", "name", "deeper"),
            ("user", 0),
        ],
    )
    def test_missing_steps_give_none(self, path: tuple) -> None:
        """Test that any missing or mistyped step returns None."""
        assert get_path(DATA, *path) is None


class TestStrings:
    """Test string accessors."""

    def test_empty_string_is_none(self) -> None:
        """Test that providers' "" placeholders read as absent."""
        assert get_optional_str(DATA, "user", "empty") is None
        assert get_str(DATA, "user", "empty") == ""

    def test_number_is_stringified(self) -> None:
        """Test that numeric values come back as text."""
        assert get_optional_str(DATA, "user", "registered", "#text") == "1037793040"

    def test_default(self) -> None:
        """Test the fallback for missing strings."""
        assert get_str(DATA, "nope", default="?") == "?"


class TestInts:
    """Test integer accessors."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("42", 42),
            (" 7 ", 7),
            ("3.0", 3),
            (42, 42),
            (2.9, 2),
            ("", None),
            ("abc", None),
            ("inf", None),
            (None, None),
            ([1], None),
        ],
    )
    def test_optional_int(self, value: object, expected: int | None) -> None:
        """Test best-effort integer parsing."""
        assert get_optional_int({"v": value}, "v") == expected

    def test_get_int_defaults_to_zero(self) -> None:
        """Test that absent or unparsable numbers become 0."""
        assert get_int(DATA, "user", "empty") == 0
        assert get_int(DATA, "user", "missing") == 0
        assert get_int(DATA, "user", "playcount") == 1234


class TestAsList:
    """Test list normalisation."""

    def test_none_is_empty(self) -> None:
        """Test that a missing list is empty."""
        assert as_list(None) == []

    def test_bare_object_is_wrapped(self) -> None:
        """Test that a collapsed one-item list is restored."""
        assert as_list({"name": "rock"}) == [{"name": "rock"}]

    def test_list_passes_through(self) -> None:
        """Test that real lists are unchanged."""
        items = [{"name": "rock"}, {"name": "pop"}]
        assert as_list(items) is items

    def test_string_is_not_split(self) -> None:
        """Test that a string is one element, not characters."""
        assert as_list("rock") == ["rock"]
