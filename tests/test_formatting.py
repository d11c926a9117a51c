"""Unit tests for display formatting and field validation."""

from datetime import datetime, timezone

from formlens.analysis import format_value, validate_field_value
from formlens.models import FieldType


class TestFormatValue:
    """Tests for format_value."""

    def test_empty(self) -> None:
        """None and empty string display as a dash."""
        assert format_value(None, FieldType.TEXT) == "-"
        assert format_value("", FieldType.EMAIL) == "-"

    def test_phone(self) -> None:
        """Ten-digit numbers are grouped; others are unchanged."""
        assert format_value("5551234567", FieldType.PHONE) == "(555) 123-4567"
        assert format_value("+44 20 7946 0958", FieldType.PHONE) == "+44 20 7946 0958"

    def test_email_lowercased(self) -> None:
        """Emails display lowercased."""
        assert format_value("Ann@Example.COM", FieldType.EMAIL) == "ann@example.com"

    def test_date(self) -> None:
        """Dates display as ISO calendar dates."""
        assert format_value("2025-06-01T10:00:00Z", FieldType.DATE) == "2025-06-01"
        assert format_value(datetime(2025, 1, 2, tzinfo=timezone.utc), FieldType.DATE) == "2025-01-02"
        assert format_value("someday", FieldType.DATE) == "someday"

    def test_truncation(self) -> None:
        """Textarea cuts at 100, other text at 50."""
        assert format_value("a" * 120, FieldType.TEXTAREA) == "a" * 100 + "..."
        assert format_value("a" * 60, FieldType.TEXT) == "a" * 50 + "..."
        assert format_value("short", FieldType.TEXT) == "short"


class TestValidateFieldValue:
    """Tests for validate_field_value."""

    def test_empty_is_valid(self) -> None:
        """Empty values are always valid."""
        assert validate_field_value("", FieldType.EMAIL) == (True, None)

    def test_email(self) -> None:
        """Strict email shape."""
        assert validate_field_value("a@b.co", FieldType.EMAIL) == (True, None)
        assert validate_field_value("a b@c.d", FieldType.EMAIL) == (False, "Invalid email format")

    def test_phone(self) -> None:
        """Digits, spaces, dashes and parentheses only."""
        assert validate_field_value("(555) 123-4567", FieldType.PHONE)[0] is True
        assert validate_field_value("call me", FieldType.PHONE) == (False, "Invalid phone format")

    def test_url(self) -> None:
        """Needs a scheme and host."""
        assert validate_field_value("https://example.com", FieldType.URL)[0] is True
        assert validate_field_value("example", FieldType.URL) == (False, "Invalid URL format")

    def test_number_and_date(self) -> None:
        """Numbers and dates are checked by parsing."""
        assert validate_field_value("4.2", FieldType.NUMBER)[0] is True
        assert validate_field_value("four", FieldType.NUMBER) == (False, "Must be a number")
        assert validate_field_value("2025-01-01", FieldType.DATE)[0] is True
        assert validate_field_value("nope", FieldType.DATE) == (False, "Invalid date format")

    def test_text_always_valid(self) -> None:
        """Free text has no rules."""
        assert validate_field_value("anything", FieldType.TEXTAREA) == (True, None)
