"""Unit tests for cell classification and the media predicate."""

import pytest

from formlens.analysis import MEDIA_KEYS, classify_cell, has_any_of, is_media_object


class TestHasAnyOf:
    """Tests for has_any_of / is_media_object."""

    def test_matches_any_key(self) -> None:
        """One of the keys is enough."""
        assert has_any_of({"src": "x"}, MEDIA_KEYS) is True
        assert has_any_of({"other": 1}, MEDIA_KEYS) is False

    def test_non_mapping(self) -> None:
        """Strings and lists never match."""
        assert has_any_of("url", MEDIA_KEYS) is False
        assert is_media_object(["url"]) is False
        assert is_media_object(None) is False


class TestClassifyCell:
    """Tests for classify_cell ordering."""

    def test_null(self) -> None:
        """None is a null cell."""
        cell = classify_cell(None)
        assert cell.kind == "null"
        assert cell.value is None

    def test_boolean(self) -> None:
        """Booleans keep their value."""
        assert classify_cell(False).kind == "boolean"
        assert classify_cell(False).value is False

    def test_media_array(self) -> None:
        """Arrays containing media-like objects."""
        files = [{"fileName": "a.png", "url": "https://x/a.png"}, "note"]
        cell = classify_cell(files)
        assert cell.kind == "media_array"
        assert cell.value == files

    def test_plain_array(self) -> None:
        """Other arrays, including arrays of booleans."""
        assert classify_cell([True, False]).kind == "array"
        assert classify_cell([]).kind == "array"

    def test_object(self) -> None:
        """A mapping is an object cell even when it looks like media."""
        cell = classify_cell({"url": "https://x"})
        assert cell.kind == "object"
        assert cell.value == {"url": "https://x"}

    def test_url(self) -> None:
        """http(s) strings are URLs even when long."""
        long_url = "https://example.com/" + "a" * 100
        assert classify_cell(long_url).kind == "url"
        assert classify_cell(long_url).value == long_url

    def test_long_text_truncated(self) -> None:
        """Strings over 50 chars keep a preview plus the full value."""
        text = "x" * 60
        cell = classify_cell(text)
        assert cell.kind == "text"
        assert cell.value == "x" * 50 + "..."
        assert cell.full_value == text

    @pytest.mark.parametrize("value,expected", [("hello", "hello"), (42, "42"), (1.5, "1.5"), ("x" * 50, "x" * 50)])
    def test_short_text(self, value, expected: str) -> None:
        """Everything else is text of its string form."""
        cell = classify_cell(value)
        assert cell.kind == "text"
        assert cell.value == expected
        assert cell.full_value is None
