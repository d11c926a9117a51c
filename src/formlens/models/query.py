"""Query options and paginated result envelopes."""

import logging
from typing import Any, Generic, Literal, Optional, TypeVar

from pydantic import Field, field_validator, model_validator

from formlens.models.records import CamelModel

logger = logging.getLogger(__name__)

T = TypeVar("T")

MIN_LIMIT = 1
MAX_LIMIT = 200
DEFAULT_LIMIT = 50

SortOrder = Literal["asc", "desc"]
Scalar = str | int | float | bool


class QueryOptions(CamelModel):
    """Uniform query contract across submission namespaces and collections."""

    source_id: str = Field(..., min_length=1, description="Namespace or collection id")
    limit: int = DEFAULT_LIMIT
    cursor: Optional[str] = None
    equality_filters: dict[str, Scalar] = Field(default_factory=dict)
    sort_field: Optional[str] = None
    sort_order: SortOrder = "desc"
    search_query: Optional[str] = None

    @field_validator("limit", mode="before")
    @classmethod
    def _clamp_limit(cls, value: Any) -> int:
        if value is None or value == "":
            return DEFAULT_LIMIT
        return min(max(int(value), MIN_LIMIT), MAX_LIMIT)

    @field_validator("cursor", "search_query", "sort_field", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None


class Cursors(CamelModel):
    """Opaque forward/backward page tokens."""

    next: Optional[str] = None
    prev: Optional[str] = None


class QueryResult(CamelModel, Generic[T]):
    """One page of results. has_next implies a next cursor."""

    items: list[T] = Field(default_factory=list)
    total_count: int = 0
    has_next: bool = False
    has_prev: bool = False
    cursors: Cursors = Field(default_factory=Cursors)

    @model_validator(mode="after")
    def _next_requires_cursor(self) -> "QueryResult[T]":
        if self.has_next and not self.cursors.next:
            logger.warning("Result reports a next page without a cursor; treating as last page")
            self.has_next = False
        return self
