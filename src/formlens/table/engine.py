"""In-memory search, status filter, sort and pagination over normalized records."""

import json
import math
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import Field

from formlens.models.query import SortOrder
from formlens.models.records import CamelModel, NormalizedSubmission, SubmissionStatus

T = TypeVar("T")

DEFAULT_SORT_FIELD = "createdAt"
DEFAULT_SORT_ORDER: SortOrder = "desc"

_BUILTIN_SORT_ATTRS = {
    "createdAt": "created_at",
    "createdDate": "created_at",
    "updatedAt": "updated_at",
    "updatedDate": "updated_at",
    "status": "status",
}

# Key types compared directly; anything else sorts by its text form
_ORDERABLE_TYPES = (str, int, float, datetime)


class TablePage(CamelModel, Generic[T]):
    """One rendered page of the filtered, sorted record list."""

    rows: list[T] = Field(default_factory=list)
    page: int = 1
    page_size: int = 25
    total: int = 0
    page_count: int = 0


def _status_value(record: Any) -> str:
    status = getattr(record, "status", None)
    return status.value if isinstance(status, SubmissionStatus) else str(status or "")


def matches_search(record: NormalizedSubmission, query: str, visible_fields: list[str]) -> bool:
    """Case-insensitive substring match on id, status and visible field values."""
    needle = query.lower()
    if needle in record.id.lower() or needle in _status_value(record).lower():
        return True
    for name in visible_fields:
        value = record.fields.get(name)
        if value and needle in str(value).lower():
            return True
    return False


def search_records(records: list[NormalizedSubmission], query: Optional[str], visible_fields: list[str]) -> list[NormalizedSubmission]:
    if not query:
        return list(records)
    return [r for r in records if matches_search(r, query, visible_fields)]


def filter_by_status(records: list[NormalizedSubmission], status: Optional[str]) -> list[NormalizedSubmission]:
    if not status:
        return list(records)
    return [r for r in records if _status_value(r) == status]


def _sort_value(record: NormalizedSubmission, field: str) -> Any:
    attr = _BUILTIN_SORT_ATTRS.get(field)
    if attr == "status":
        return _status_value(record)
    if attr:
        return getattr(record, attr)
    value = record.fields.get(field)
    return "" if value is None else value


def _text_key(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True, default=str)
    return str(value)


def sort_records(records: list[NormalizedSubmission], field: str, order: SortOrder = "desc") -> list[NormalizedSubmission]:
    """
    Sort by a built-in key or a field lookup. Values of mixed types, and
    values such as dicts or lists that have no natural order, compare by
    text form (canonical JSON for dicts and lists). Ties keep no particular
    secondary order.
    """
    keyed = [(_sort_value(r, field), r) for r in records]
    types = {type(k) for k, _ in keyed}
    numeric = types <= {int, float}
    orderable = all(issubclass(t, _ORDERABLE_TYPES) for t in types)
    if not orderable or (len(types) > 1 and not numeric):
        keyed = [(_text_key(k), r) for k, r in keyed]
    keyed.sort(key=lambda pair: pair[0], reverse=order == "desc")
    return [r for _, r in keyed]


def paginate(records: list[T], page: int = 1, page_size: int = 25) -> TablePage[T]:
    """1-based page slice. Out-of-range pages return no rows."""
    page_size = max(page_size, 1)
    page = max(page, 1)
    total = len(records)
    start = (page - 1) * page_size
    return TablePage[T](
        rows=list(records[start:start + page_size]),
        page=page,
        page_size=page_size,
        total=total,
        page_count=math.ceil(total / page_size),
    )


class TableEngine:
    """Holds the current search, status filter and sort for one table view."""

    def __init__(self, visible_fields: Optional[list[str]] = None):
        self.visible_fields = list(visible_fields or [])
        self.search: str = ""
        self.status_filter: str = ""
        self.sort_field: str = DEFAULT_SORT_FIELD
        self.sort_order: SortOrder = DEFAULT_SORT_ORDER

    def set_sorting(self, field: str, order: SortOrder) -> None:
        self.sort_field = field
        self.sort_order = order

    def clear_filters(self) -> None:
        self.search = ""
        self.status_filter = ""
        self.sort_field = DEFAULT_SORT_FIELD
        self.sort_order = DEFAULT_SORT_ORDER

    def apply(self, records: list[NormalizedSubmission]) -> list[NormalizedSubmission]:
        """search -> status -> sort. The input list is left untouched."""
        filtered = search_records(records, self.search, self.visible_fields)
        filtered = filter_by_status(filtered, self.status_filter)
        return sort_records(filtered, self.sort_field, self.sort_order)

    def page(self, records: list[NormalizedSubmission], page: int = 1, page_size: int = 25) -> TablePage[NormalizedSubmission]:
        return paginate(self.apply(records), page, page_size)
