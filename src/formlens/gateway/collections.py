"""Query gateway over the keyed collection backend."""

import base64
import binascii
import json
import logging
from typing import Optional

from formlens.backends.base import CollectionBackend
from formlens.errors import BackendError
from formlens.models.query import Cursors, QueryOptions, QueryResult
from formlens.models.raw import RawRecord
from formlens.models.sources import CollectionSummary
from formlens.normalization import parse_datetime

from .base import QueryGateway, resolve_sort_field

logger = logging.getLogger(__name__)


def encode_cursor(collection_id: str, offset: int) -> str:
    """Opaque token for the next page of a collection."""
    payload = json.dumps({"c": collection_id, "o": offset}, separators=(",", ":"))
    return base64.urlsafe_b64encode(payload.encode()).decode().rstrip("=")


def decode_cursor(collection_id: str, cursor: str) -> int:
    """Offset from a token issued for the same collection; BackendError otherwise."""
    try:
        padded = cursor + "=" * (-len(cursor) % 4)
        data = json.loads(base64.urlsafe_b64decode(padded.encode()))
        offset = int(data["o"])
        owner = data["c"]
    except (binascii.Error, ValueError, KeyError, TypeError) as e:
        raise BackendError(f"Invalid cursor for collection {collection_id}", source_id=collection_id) from e
    if owner != collection_id or offset < 0:
        raise BackendError(f"Cursor does not belong to collection {collection_id}", source_id=collection_id)
    return offset


class CollectionGateway(QueryGateway):
    """
    Collections are addressed by id; options.source_id is the collection id.
    The backend pages by offset, so the gateway issues its own opaque forward
    cursors. Search is pushed down as OR-ed `contains` over `search_fields`.
    """

    kind = "collection"

    def __init__(
        self,
        backend: CollectionBackend,
        *,
        search_fields: Optional[list[str]] = None,
    ):
        self._backend = backend
        self._search_fields = list(search_fields or ["title", "name", "description"])

    async def aclose(self) -> None:
        await self._backend.aclose()

    async def query(self, options: QueryOptions) -> QueryResult[RawRecord]:
        collection_id = options.source_id
        offset = decode_cursor(collection_id, options.cursor) if options.cursor else 0
        sort = (resolve_sort_field(options.sort_field), options.sort_order)
        contains = (
            {field: options.search_query for field in self._search_fields}
            if options.search_query
            else None
        )
        try:
            page = await self._backend.query(
                collection_id,
                sort=sort,
                limit=options.limit,
                skip=offset,
                contains=contains,
                equals=dict(options.equality_filters) or None,
            )
        except Exception as e:
            logger.warning("Collection query failed for %s: %s", collection_id, e)
            raise BackendError(f"Failed to query CMS items: {e}", source_id=collection_id) from e

        items = [RawRecord(data=item) for item in page.items[:options.limit]]
        next_offset = offset + len(items)
        return QueryResult[RawRecord](
            items=items,
            total_count=page.total_count if page.total_count is not None else len(items),
            has_next=page.has_next and bool(items),
            has_prev=offset > 0,
            cursors=Cursors(
                next=encode_cursor(collection_id, next_offset) if page.has_next and items else None,
                prev=encode_cursor(collection_id, max(offset - options.limit, 0)) if offset > 0 else None,
            ),
        )

    async def count_items(self, collection_id: str) -> int:
        result = await self.query(QueryOptions(source_id=collection_id, limit=1))
        return result.total_count

    async def list_collections(self) -> list[CollectionSummary]:
        """Collections with item counts, largest first. A failed count probe reports 0."""
        try:
            raw_collections = await self._backend.list_collections()
        except Exception as e:
            raise BackendError(f"Failed to get CMS collections: {e}") from e

        summaries: list[CollectionSummary] = []
        for meta in raw_collections:
            collection_id = meta.get("_id")
            name = meta.get("displayName")
            if not collection_id or not name:
                continue
            try:
                count = await self.count_items(collection_id)
            except BackendError as e:
                logger.warning("Could not count items in %s: %s", collection_id, e)
                count = 0
            summaries.append(
                CollectionSummary(
                    collection_id=collection_id,
                    collection_name=name,
                    item_count=count,
                    collection_type=meta.get("collectionType") or "NATIVE",
                    last_updated_date=parse_datetime(meta.get("_updatedDate")),
                )
            )
        summaries.sort(key=lambda s: s.item_count, reverse=True)
        return summaries
