"""Display formatting and per-type validation of single field values."""

import re
from typing import Any, Optional
from urllib.parse import urlparse

from formlens.models.fields import FieldType
from formlens.normalization import parse_datetime

from .classifier import PHONE_RE, is_number

EMPTY_DISPLAY = "-"
STRICT_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _truncate(text: str, length: int) -> str:
    return text[:length] + ("..." if len(text) > length else "")


def format_phone(value: str) -> str:
    """(xxx) xxx-xxxx for ten-digit numbers; anything else unchanged."""
    digits = re.sub(r"\D", "", value)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return value


def format_value(value: Any, field_type: FieldType) -> str:
    if value is None or value == "":
        return EMPTY_DISPLAY
    text = str(value)
    if field_type == FieldType.DATE:
        parsed = parse_datetime(value, allow_epoch=True)
        return parsed.date().isoformat() if parsed else text
    if field_type == FieldType.EMAIL:
        return text.lower()
    if field_type == FieldType.PHONE:
        return format_phone(text)
    if field_type == FieldType.URL:
        return text
    if field_type == FieldType.TEXTAREA:
        return _truncate(text, 100)
    return _truncate(text, 50)


def validate_field_value(value: Any, field_type: FieldType) -> tuple[bool, Optional[str]]:
    """(valid, error). Empty values are always valid."""
    if value is None or value == "":
        return True, None
    text = str(value)
    if field_type == FieldType.EMAIL:
        return (True, None) if STRICT_EMAIL_RE.match(text) else (False, "Invalid email format")
    if field_type == FieldType.PHONE:
        return (True, None) if PHONE_RE.match(text) else (False, "Invalid phone format")
    if field_type == FieldType.URL:
        parsed = urlparse(text)
        return (True, None) if parsed.scheme and parsed.netloc else (False, "Invalid URL format")
    if field_type == FieldType.NUMBER:
        return (True, None) if is_number(value) else (False, "Must be a number")
    if field_type == FieldType.DATE:
        return (True, None) if parse_datetime(value) is not None else (False, "Invalid date format")
    return True, None
