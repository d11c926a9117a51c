"""Uniform cursor-paginated query contract over heterogeneous backends."""

from abc import ABC, abstractmethod
from typing import Optional

from formlens.models.query import QueryOptions, QueryResult
from formlens.models.raw import RawRecord

CREATED_FIELD = "_createdDate"
UPDATED_FIELD = "_updatedDate"

# Caller-facing sort names -> backend field names
SORT_ALIASES = {
    "createdAt": CREATED_FIELD,
    "createdDate": CREATED_FIELD,
    "updatedAt": UPDATED_FIELD,
    "updatedDate": UPDATED_FIELD,
    "sourceId": "formId",
}


def resolve_sort_field(sort_field: Optional[str]) -> str:
    """Map a caller sort name to the backend field; defaults to the created date."""
    if not sort_field:
        return CREATED_FIELD
    return SORT_ALIASES.get(sort_field, sort_field)


class QueryGateway(ABC):
    """
    Hides backend-specific filter/sort syntax behind QueryOptions -> QueryResult.
    Gateways hold no mutable state between calls, so concurrent calls are safe.
    """

    kind: str = ""

    @abstractmethod
    async def query(self, options: QueryOptions) -> QueryResult[RawRecord]:
        """Return one page of raw records. Raises BackendError on backend failure."""
        pass

    @abstractmethod
    async def aclose(self) -> None:
        """Release the underlying backend."""
        pass
