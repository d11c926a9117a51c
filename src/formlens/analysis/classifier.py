"""Field order extraction, type inference and statistics over schema-less records.

Records may be NormalizedSubmission / NormalizedItem (their `fields` map is
used) or plain dicts. Inputs are never mutated.
"""

import json
import math
import re
from typing import Any, Iterable, Optional

from formlens.models.fields import DateRange, FieldStatistics, FieldType, MostCommon
from formlens.normalization import is_date_like, parse_datetime

EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
PHONE_RE = re.compile(r"^\+?[\d\s()-]+$")
URL_RE = re.compile(r"^https?://")

MIN_PHONE_DIGITS = 7
TEXTAREA_MIN_LENGTH = 100

COLLECTION_SYSTEM_FIELDS = ("_id", "_createdDate", "_updatedDate", "_owner")


def fields_of(record: Any) -> dict[str, Any]:
    """The field map of a normalized record or dict."""
    if isinstance(record, dict):
        return record
    fields = getattr(record, "fields", None)
    return fields if isinstance(fields, dict) else {}


def is_blank(value: Any) -> bool:
    """None and "" count as no response."""
    return value is None or value == ""


def field_values(field_name: str, records: Iterable[Any]) -> list[Any]:
    """Non-null, non-empty values of a field in record order."""
    values = []
    for record in records:
        value = fields_of(record).get(field_name)
        if not is_blank(value):
            values.append(value)
    return values


def extract_field_order(records: Iterable[Any]) -> list[str]:
    """
    Column order: the first record's own key order, then keys seen only in
    later records, in first-encounter order.
    """
    order: list[str] = []
    seen: set[str] = set()
    for record in records:
        for key in fields_of(record):
            if key not in seen:
                seen.add(key)
                order.append(key)
    return order


def extract_collection_field_order(items: list[dict[str, Any]], max_fields: int = 15) -> list[str]:
    """
    Column order for raw collection items: system fields present on the first
    item, then its user fields (up to max_fields), then any unseen key of any
    item, underscore keys included, while the total stays under max_fields +
    the system field count.
    """
    if not items:
        return []
    first = items[0]
    order = [name for name in COLLECTION_SYSTEM_FIELDS if name in first]
    user_fields = [key for key in first if not key.startswith("_")]
    order.extend(user_fields[:max_fields])

    cap = max_fields + len(COLLECTION_SYSTEM_FIELDS)
    seen = set(order)
    for item in items:
        for key in item:
            if len(order) >= cap:
                return order
            if key not in seen:
                seen.add(key)
                order.append(key)
    return order


def is_number(value: Any) -> bool:
    """int/float (not bool), or a string float() accepts with a finite result."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    if isinstance(value, str):
        try:
            return math.isfinite(float(value))
        except ValueError:
            return False
    return False


def is_phone(value: Any) -> bool:
    """Phone-shaped string with at least seven digits that is not a date like 2025-06-01."""
    if not isinstance(value, str) or not PHONE_RE.match(value):
        return False
    return sum(ch.isdigit() for ch in value) >= MIN_PHONE_DIGITS and not is_date_like(value)


def infer_type(field_name: str, records: list[Any]) -> FieldType:
    """Priority cascade; the first matching rule wins."""
    values = field_values(field_name, records)
    if not values:
        return FieldType.TEXT
    name = field_name.lower()
    strings = [v for v in values if isinstance(v, str)]

    if "email" in name or any(EMAIL_RE.search(v) for v in strings):
        return FieldType.EMAIL
    if "phone" in name or any(is_phone(v) for v in strings):
        return FieldType.PHONE
    if "url" in name or "website" in name or any(URL_RE.match(v) for v in strings):
        return FieldType.URL
    if "date" in name or any(is_date_like(v) for v in values):
        return FieldType.DATE
    if all(is_number(v) for v in values):
        return FieldType.NUMBER
    if any(len(v) > TEXTAREA_MIN_LENGTH for v in strings):
        return FieldType.TEXTAREA
    return FieldType.TEXT


def _hashable(value: Any) -> Any:
    # Keyed by type so True, 1 and "1" stay distinct
    if isinstance(value, (dict, list)):
        return (type(value).__name__, json.dumps(value, sort_keys=True, default=str))
    return (type(value).__name__, value)


def most_common(values: list[Any]) -> Optional[MostCommon]:
    """
    Highest-frequency value. One left-to-right scan: the leader changes only
    when a value's running count exceeds the current best, so on a tie the
    value that reached the count first wins.
    """
    counts: dict[Any, int] = {}
    best_key: Any = None
    best_value: Any = None
    best_count = 0
    for value in values:
        key = _hashable(value)
        counts[key] = counts.get(key, 0) + 1
        if counts[key] > best_count:
            best_key, best_value, best_count = key, value, counts[key]
    if best_count == 0:
        return None
    return MostCommon(value=best_value, count=best_count)


def compute_statistics(field_name: str, records: list[Any]) -> FieldStatistics:
    values = field_values(field_name, records)
    if not values:
        return FieldStatistics()

    stats = FieldStatistics(
        total_responses=len(values),
        unique_values=len({_hashable(v) for v in values}),
        most_common=most_common(values),
        is_empty=False,
    )

    strings = [v for v in values if isinstance(v, str)]
    if strings:
        stats.average_length = sum(len(v) for v in strings) / len(strings)

    dates = [d for d in (parse_datetime(v) for v in values) if d is not None]
    if dates:
        stats.date_range = DateRange(min=min(dates), max=max(dates))
    return stats
