"""In-memory backends used by tests and the CLI's --data mode."""

import base64
import json
from pathlib import Path
from typing import Any, Optional

from formlens.errors import BackendError

from .base import BackendPage, CollectionBackend, SortClause, SubmissionBackend


def _sort_key(field: str):
    def key(record: dict[str, Any]):
        value = record.get(field)
        if value is None:
            return (0, "")
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return (1, value)
        return (2, str(value))

    return key


def _sorted(records: list[dict[str, Any]], sort: SortClause) -> list[dict[str, Any]]:
    field, order = sort
    return sorted(records, key=_sort_key(field), reverse=order == "desc")


class InMemorySubmissionBackend(SubmissionBackend):
    """
    Holds raw submissions in a list. Cursors are opaque tokens that encode the
    position after the last returned record, so a stable data set never repeats
    ids across consecutive pages.
    """

    name = "memory"

    def __init__(self, records: Optional[list[dict[str, Any]]] = None, fail_namespaces: Optional[set[str]] = None):
        self._records = list(records or [])
        self._fail = set(fail_namespaces or ())
        self.calls: list[dict[str, Any]] = []

    def _encode(self, offset: int) -> str:
        return base64.urlsafe_b64encode(f"s:{offset}".encode()).decode()

    def _decode(self, cursor: str) -> int:
        try:
            prefix, offset = base64.urlsafe_b64decode(cursor.encode()).decode().split(":", 1)
            if prefix != "s":
                raise ValueError(prefix)
            return int(offset)
        except ValueError as e:
            raise BackendError(f"Invalid cursor: {cursor}") from e

    async def query(
        self,
        namespace: str,
        *,
        filters: dict[str, Any],
        sort: SortClause,
        limit: int,
        skip_to: Optional[str] = None,
    ) -> BackendPage:
        self.calls.append({"namespace": namespace, "filters": dict(filters), "sort": sort, "limit": limit, "skip_to": skip_to})
        if namespace in self._fail:
            raise BackendError(f"Backend unavailable for {namespace}", source_id=namespace)
        matches = [
            r for r in self._records
            if all(r.get(k) == v for k, v in filters.items())
        ]
        ordered = _sorted(matches, sort)
        start = self._decode(skip_to) if skip_to else 0
        page = ordered[start:start + limit]
        end = start + len(page)
        has_next = end < len(ordered)
        return BackendPage(
            items=[dict(r) for r in page],
            has_next=has_next,
            has_prev=start > 0,
            next_cursor=self._encode(end) if has_next else None,
            prev_cursor=self._encode(max(start - limit, 0)) if start > 0 else None,
            total_count=len(ordered),
        )

    async def get(self, submission_id: str) -> dict[str, Any]:
        for r in self._records:
            if r.get("_id") == submission_id:
                return dict(r)
        raise BackendError(f"Submission not found: {submission_id}")


class InMemoryCollectionBackend(CollectionBackend):
    """Holds raw items per collection id; supports skip paging and contains filters."""

    name = "memory"

    def __init__(
        self,
        collections: Optional[dict[str, list[dict[str, Any]]]] = None,
        metadata: Optional[list[dict[str, Any]]] = None,
        fail_collections: Optional[set[str]] = None,
    ):
        self._collections = {k: list(v) for k, v in (collections or {}).items()}
        self._metadata = list(metadata) if metadata is not None else [
            {"_id": cid, "displayName": cid, "collectionType": "NATIVE"} for cid in self._collections
        ]
        self._fail = set(fail_collections or ())
        self.calls: list[dict[str, Any]] = []

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
        self.calls.append({"collection_id": collection_id, "sort": sort, "limit": limit, "skip": skip, "contains": contains, "equals": equals})
        if collection_id in self._fail or collection_id not in self._collections:
            raise BackendError(f"Collection not available: {collection_id}", source_id=collection_id)
        records = self._collections[collection_id]
        if equals:
            records = [r for r in records if all(r.get(k) == v for k, v in equals.items())]
        if contains:
            records = [
                r for r in records
                if any(needle.lower() in str(r.get(field) or "").lower() for field, needle in contains.items())
            ]
        ordered = _sorted(records, sort)
        page = ordered[skip:skip + limit]
        return BackendPage(
            items=[dict(r) for r in page],
            has_next=skip + len(page) < len(ordered),
            has_prev=skip > 0,
            total_count=len(ordered),
        )

    async def list_collections(self) -> list[dict[str, Any]]:
        return [dict(m) for m in self._metadata]


def load_memory_backends(path: str | Path) -> tuple[InMemorySubmissionBackend, InMemoryCollectionBackend]:
    """Build both in-memory backends from a JSON file with `submissions` and `collections` keys."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, list):
        data = {"submissions": data}
    return (
        InMemorySubmissionBackend(data.get("submissions") or []),
        InMemoryCollectionBackend(data.get("collections") or {}, data.get("collectionMetadata")),
    )
