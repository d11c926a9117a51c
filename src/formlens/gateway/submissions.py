"""Query gateway over the namespaced submission backend."""

import logging
from typing import Any, Optional

from formlens.backends.base import SubmissionBackend
from formlens.errors import BackendError
from formlens.models.query import Cursors, QueryOptions, QueryResult
from formlens.models.raw import RawRecord
from formlens.models.records import NormalizedSubmission
from formlens.normalization import RecordNormalizer

from .base import CREATED_FIELD, QueryGateway, resolve_sort_field

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = frozenset({"_createdDate", "_updatedDate", "formId", "status", "seen"})
FILTER_ALIASES = {"sourceId": "formId", "formId": "formId"}
COUNT_PAGE_SIZE = 200


class SubmissionGateway(QueryGateway):
    """
    Submissions live under a namespace; options.source_id is the namespace.
    The backend has no text search, so a search query is never pushed down:
    the page is widened to `search_fetch_cap` and filtering is left to the
    table engine. Matches beyond that window are not returned.
    """

    kind = "namespace"

    def __init__(
        self,
        backend: SubmissionBackend,
        *,
        search_fetch_cap: int = 200,
        normalizer: Optional[RecordNormalizer] = None,
    ):
        self._backend = backend
        self._search_fetch_cap = search_fetch_cap
        self._normalizer = normalizer or RecordNormalizer()

    async def aclose(self) -> None:
        await self._backend.aclose()

    def build_filters(self, options: QueryOptions) -> dict[str, Any]:
        """Chain equality predicates; the namespace predicate always comes first."""
        filters: dict[str, Any] = {"namespace": options.source_id}
        for field, value in options.equality_filters.items():
            filters[FILTER_ALIASES.get(field, field)] = value
        return filters

    def build_sort(self, options: QueryOptions) -> tuple[str, str]:
        field = resolve_sort_field(options.sort_field)
        if field not in SORTABLE_FIELDS:
            logger.warning("Sort field %s not supported for submissions; using %s", field, CREATED_FIELD)
            field = CREATED_FIELD
        return field, options.sort_order

    def effective_limit(self, options: QueryOptions) -> int:
        if options.search_query:
            return max(options.limit, self._search_fetch_cap)
        return options.limit

    async def query(self, options: QueryOptions) -> QueryResult[RawRecord]:
        filters = self.build_filters(options)
        sort = self.build_sort(options)
        limit = self.effective_limit(options)
        if options.search_query:
            logger.info(
                "Search on %s fetched client-side within a window of %d records",
                options.source_id, limit,
            )
        try:
            page = await self._backend.query(
                options.source_id,
                filters=filters,
                sort=sort,
                limit=limit,
                skip_to=options.cursor,
            )
        except Exception as e:
            logger.warning("Submission query failed for %s: %s", options.source_id, e)
            raise BackendError(f"Failed to query submissions: {e}", source_id=options.source_id) from e

        items = [RawRecord(data=item) for item in page.items[:limit]]
        logger.info("Namespace %s returned %d raw submissions", options.source_id, len(items))
        return QueryResult[RawRecord](
            items=items,
            total_count=page.total_count if page.total_count is not None else len(items),
            has_next=page.has_next,
            has_prev=page.has_prev,
            cursors=Cursors(next=page.next_cursor, prev=page.prev_cursor),
        )

    async def get_submission(self, submission_id: str) -> NormalizedSubmission:
        """Fetch and normalize one submission; invalid data is an error here."""
        try:
            raw = await self._backend.get(submission_id)
        except Exception as e:
            raise BackendError(f"Failed to get submission: {e}") from e
        submission = self._normalizer.normalize_submission(RawRecord(data=raw))
        if submission is None:
            raise BackendError(f"Failed to get submission: invalid submission data for {submission_id}")
        return submission

    async def count_submissions(self, namespace: str, status: Optional[str] = None) -> int:
        """Count valid submissions in a namespace by walking every page."""
        filters = {"status": status} if status else {}
        options = QueryOptions(source_id=namespace, limit=COUNT_PAGE_SIZE, equality_filters=filters)
        count = 0
        while True:
            result = await self.query(options)
            count += sum(1 for raw in result.items if self._normalizer.is_valid_submission(raw))
            if not result.has_next:
                return count
            options = options.model_copy(update={"cursor": result.cursors.next})
