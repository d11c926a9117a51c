"""Abstract contracts for the two backend families behind the query gateway."""

from abc import ABC, abstractmethod
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

SortClause = tuple[str, Literal["asc", "desc"]]


class BackendPage(BaseModel):
    """One page as returned by a backend, before any normalization."""

    items: list[dict[str, Any]] = Field(default_factory=list)
    has_next: bool = False
    has_prev: bool = False
    next_cursor: Optional[str] = None
    prev_cursor: Optional[str] = None
    total_count: Optional[int] = None


class SubmissionBackend(ABC):
    """
    Namespaced submission source.
    Supports chained equality filters, one sort clause, a page limit and
    forward-only opaque cursors (skip_to).
    """

    name: str = ""

    @abstractmethod
    async def query(
        self,
        namespace: str,
        *,
        filters: dict[str, Any],
        sort: SortClause,
        limit: int,
        skip_to: Optional[str] = None,
    ) -> BackendPage:
        """Return one page of raw submissions matching all equality filters."""
        pass

    @abstractmethod
    async def get(self, submission_id: str) -> dict[str, Any]:
        """Fetch one raw submission by id."""
        pass

    async def aclose(self) -> None:
        """Release transport resources; no-op by default."""


class CollectionBackend(ABC):
    """
    Keyed collection source.
    Supports one sort clause, limit/skip paging, equality predicates, optional
    OR-ed `contains` text filters, and reports a total count.
    """

    name: str = ""

    @abstractmethod
    async def query(
        self,
        collection_id: str,
        *,
        sort: SortClause,
        limit: int,
        skip: int = 0,
        contains: Optional[dict[str, str]] = None,
        equals: Optional[dict[str, Any]] = None,
    ) -> BackendPage:
        """Return one page of raw items plus total_count. `contains` terms are OR-ed, `equals` AND-ed."""
        pass

    @abstractmethod
    async def list_collections(self) -> list[dict[str, Any]]:
        """Return raw collection metadata records (_id, displayName, collectionType, ...)."""
        pass

    async def aclose(self) -> None:
        """Release transport resources; no-op by default."""
