"""Table engine: filter, search, sort and paginate an already-fetched page."""

from .engine import (
    TableEngine,
    TablePage,
    filter_by_status,
    paginate,
    search_records,
    sort_records,
)

__all__ = ["TableEngine", "TablePage", "filter_by_status", "paginate", "search_records", "sort_records"]
