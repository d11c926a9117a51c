"""Lenient date parsing shared by the normalizer and the field classifier."""

from datetime import date, datetime, timezone
from typing import Any, Optional

DATETIME_FORMATS = [
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d.%m.%Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%a, %d %b %Y %H:%M:%S %Z",
]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_datetime(value: Any, *, allow_epoch: bool = False) -> Optional[datetime]:
    """
    Parse a backend date value; returns None instead of raising.
    Accepts datetime/date, ISO-8601 strings (trailing Z allowed), a fixed list of
    common formats, {"$date": ...} wrappers, and epoch milliseconds when allow_epoch.
    Naive results are taken as UTC.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, dict) and "$date" in value:
        return parse_datetime(value["$date"], allow_epoch=allow_epoch)
    if isinstance(value, (int, float)):
        if not allow_epoch:
            return None
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text or text.isdigit():
        return None
    iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return _as_utc(datetime.fromisoformat(iso))
    except ValueError:
        pass
    for fmt in DATETIME_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue
    return None


def is_date_like(value: Any) -> bool:
    """True for datetime/date objects and strings parse_datetime accepts."""
    return parse_datetime(value) is not None
