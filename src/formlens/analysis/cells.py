"""Presentation-ready classification of a single field value."""

from typing import Any, Iterable

from formlens.models.fields import CellValue

from .classifier import URL_RE

MEDIA_KEYS = ("displayName", "fileName", "url", "src")
TEXT_PREVIEW_LENGTH = 50


def has_any_of(obj: Any, keys: Iterable[str]) -> bool:
    """True when obj is a mapping carrying at least one of keys."""
    return isinstance(obj, dict) and any(key in obj for key in keys)


def is_media_object(obj: Any) -> bool:
    return has_any_of(obj, MEDIA_KEYS)


def classify_cell(value: Any) -> CellValue:
    # Order matters: null, boolean, media array, array, object, url, long text, text
    if value is None:
        return CellValue(kind="null")
    if isinstance(value, bool):
        return CellValue(kind="boolean", value=value)
    if isinstance(value, (list, tuple)):
        items = list(value)
        if any(is_media_object(item) for item in items):
            return CellValue(kind="media_array", value=items)
        return CellValue(kind="array", value=items)
    if isinstance(value, dict):
        return CellValue(kind="object", value=value)
    if isinstance(value, str) and URL_RE.match(value):
        return CellValue(kind="url", value=value)
    if isinstance(value, str) and len(value) > TEXT_PREVIEW_LENGTH:
        return CellValue(kind="text", value=value[:TEXT_PREVIEW_LENGTH] + "...", full_value=value)
    return CellValue(kind="text", value=str(value))
