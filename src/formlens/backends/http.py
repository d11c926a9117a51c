"""HTTP backends speaking a JSON query API.

Submissions:
  POST {base_url}/submissions/query
    {"query": {"filter": {"namespace": {"$eq": ...}, ...},
               "sort": [{"fieldName": "_createdDate", "order": "DESC"}],
               "cursorPaging": {"limit": 50, "cursor": "..."}}}
  -> {"submissions": [...], "pagingMetadata": {"hasNext": true, "cursors": {"next": "...", "prev": null}}}
  GET  {base_url}/submissions/{id} -> {"submission": {...}}

Collections:
  POST {base_url}/collections/{id}/query
    {"query": {"filter": {"$or": [{"title": {"$contains": "x"}}]},
               "sort": [...], "paging": {"limit": 50, "offset": 0}},
     "returnTotalCount": true}
  -> {"dataItems": [...], "pagingMetadata": {"total": 120, "hasNext": true}}
  GET  {base_url}/collections -> {"collections": [...]}
"""

import logging
from typing import Any, Optional

import httpx

from formlens.errors import BackendError

from .base import BackendPage, CollectionBackend, SortClause, SubmissionBackend

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "formlens/0.1",
    "Accept": "application/json",
    "Content-Type": "application/json",
}


def _build_client(
    base_url: str,
    api_key: Optional[str],
    timeout: float,
    client: Optional[httpx.AsyncClient],
) -> httpx.AsyncClient:
    if client is not None:
        return client
    headers = dict(DEFAULT_HEADERS)
    if api_key:
        headers["Authorization"] = api_key
    return httpx.AsyncClient(
        base_url=base_url.rstrip("/"),
        timeout=timeout,
        follow_redirects=True,
        headers=headers,
    )


def _sort_payload(sort: SortClause) -> list[dict[str, str]]:
    field, order = sort
    return [{"fieldName": field, "order": order.upper()}]


class _JsonTransport:
    """Shared request/raise/decode helper for both HTTP backends."""

    _client: httpx.AsyncClient

    async def _request(self, method: str, path: str, *, source_id: Optional[str] = None, **kwargs) -> dict:
        try:
            resp = await self._client.request(method, path, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            kind = "authorization" if status in (401, 403) else "HTTP"
            raise BackendError(f"{kind} error {status} from {path}", source_id=source_id) from e
        except httpx.RequestError as e:
            raise BackendError(f"Request to {path} failed: {e}", source_id=source_id) from e

        content_type = resp.headers.get("content-type", "")
        if "json" not in content_type:
            logger.warning("Backend returned non-JSON (content-type=%s) for %s", content_type, path)
            raise BackendError(f"Backend returned non-JSON response for {path}", source_id=source_id)
        try:
            return resp.json()
        except ValueError as e:
            raise BackendError(f"Malformed JSON from {path}", source_id=source_id) from e

    async def aclose(self) -> None:
        await self._client.aclose()


class HttpSubmissionBackend(_JsonTransport, SubmissionBackend):
    """Namespaced submissions over HTTP with cursor paging."""

    name = "http"

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._client = _build_client(base_url, api_key, timeout, client)

    async def query(
        self,
        namespace: str,
        *,
        filters: dict[str, Any],
        sort: SortClause,
        limit: int,
        skip_to: Optional[str] = None,
    ) -> BackendPage:
        paging: dict[str, Any] = {"limit": limit}
        if skip_to:
            paging["cursor"] = skip_to
        body = {
            "query": {
                "filter": {field: {"$eq": value} for field, value in filters.items()},
                "sort": _sort_payload(sort),
                "cursorPaging": paging,
            }
        }
        logger.debug("POST /submissions/query namespace=%s body=%s", namespace, body)
        payload = await self._request("POST", "/submissions/query", json=body, source_id=namespace)
        meta = payload.get("pagingMetadata") or {}
        cursors = meta.get("cursors") or {}
        return BackendPage(
            items=payload.get("submissions") or [],
            has_next=bool(meta.get("hasNext")),
            has_prev=bool(cursors.get("prev")),
            next_cursor=cursors.get("next") or None,
            prev_cursor=cursors.get("prev") or None,
            total_count=meta.get("total"),
        )

    async def get(self, submission_id: str) -> dict[str, Any]:
        payload = await self._request("GET", f"/submissions/{submission_id}")
        submission = payload.get("submission")
        if not isinstance(submission, dict):
            raise BackendError(f"Submission not found: {submission_id}")
        return submission


class HttpCollectionBackend(_JsonTransport, CollectionBackend):
    """Keyed collections over HTTP with offset paging and a total count."""

    name = "http"

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._client = _build_client(base_url, api_key, timeout, client)

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
        query: dict[str, Any] = {
            "sort": _sort_payload(sort),
            "paging": {"limit": limit, "offset": skip},
        }
        filter_: dict[str, Any] = {field: {"$eq": value} for field, value in (equals or {}).items()}
        if contains:
            filter_["$or"] = [{field: {"$contains": needle}} for field, needle in contains.items()]
        if filter_:
            query["filter"] = filter_
        body = {"query": query, "returnTotalCount": True}
        path = f"/collections/{collection_id}/query"
        logger.debug("POST %s body=%s", path, body)
        payload = await self._request("POST", path, json=body, source_id=collection_id)
        items = payload.get("dataItems") or []
        meta = payload.get("pagingMetadata") or {}
        total = meta.get("total")
        has_next = meta.get("hasNext")
        if has_next is None:
            has_next = total is not None and skip + len(items) < total
        return BackendPage(
            items=items,
            has_next=bool(has_next),
            has_prev=skip > 0,
            total_count=total if total is not None else len(items),
        )

    async def list_collections(self) -> list[dict[str, Any]]:
        payload = await self._request("GET", "/collections")
        return payload.get("collections") or []
