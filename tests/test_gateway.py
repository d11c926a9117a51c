"""Unit tests for the submission and collection gateways."""

import pytest

from conftest import make_raw_submission
from formlens.backends.memory import InMemoryCollectionBackend, InMemorySubmissionBackend
from formlens.errors import BackendError
from formlens.gateway import CollectionGateway, SubmissionGateway, resolve_sort_field
from formlens.gateway.collections import decode_cursor, encode_cursor
from formlens.models import QueryOptions


class TestResolveSortField:
    """Tests for resolve_sort_field."""

    def test_aliases(self) -> None:
        """Caller names map to backend fields; unset means created date."""
        assert resolve_sort_field(None) == "_createdDate"
        assert resolve_sort_field("createdAt") == "_createdDate"
        assert resolve_sort_field("updatedDate") == "_updatedDate"
        assert resolve_sort_field("status") == "status"


class TestSubmissionGateway:
    """Tests for SubmissionGateway.query."""

    @pytest.mark.asyncio
    async def test_default_sort_and_namespace_filter(
        self, submission_gateway: SubmissionGateway, submission_backend: InMemorySubmissionBackend
    ) -> None:
        """Namespace filter comes first; default sort is created date descending."""
        result = await submission_gateway.query(QueryOptions(source_id="wix.form_app.form"))
        call = submission_backend.calls[-1]
        assert list(call["filters"]) == ["namespace"]
        assert call["sort"] == ("_createdDate", "desc")
        assert call["limit"] == 50
        assert [r.get("_id") for r in result.items] == ["s5", "s4", "s3", "s2", "s1"]
        assert result.total_count == 5
        assert result.has_next is False

    @pytest.mark.asyncio
    async def test_equality_filters_translated(
        self, submission_gateway: SubmissionGateway, submission_backend: InMemorySubmissionBackend
    ) -> None:
        """sourceId maps to formId and filters chain after namespace."""
        opts = QueryOptions(
            source_id="wix.form_app.form",
            equality_filters={"sourceId": "form-bbbbbbbb-2", "status": "CONFIRMED"},
            sort_field="createdAt",
            sort_order="asc",
        )
        result = await submission_gateway.query(opts)
        call = submission_backend.calls[-1]
        assert call["filters"] == {"namespace": "wix.form_app.form", "formId": "form-bbbbbbbb-2", "status": "CONFIRMED"}
        assert call["sort"] == ("_createdDate", "asc")
        assert [r.get("_id") for r in result.items] == ["s3", "s5"]

    @pytest.mark.asyncio
    async def test_unsupported_sort_falls_back(
        self, submission_gateway: SubmissionGateway, submission_backend: InMemorySubmissionBackend
    ) -> None:
        """Sorting by an arbitrary field falls back to created date."""
        await submission_gateway.query(QueryOptions(source_id="wix.form_app.form", sort_field="first_name"))
        assert submission_backend.calls[-1]["sort"] == ("_createdDate", "desc")

    @pytest.mark.asyncio
    async def test_search_widens_page(
        self, submission_gateway: SubmissionGateway, submission_backend: InMemorySubmissionBackend
    ) -> None:
        """A search query fetches the wider window and is not sent to the backend."""
        await submission_gateway.query(QueryOptions(source_id="wix.form_app.form", limit=10, search_query="john"))
        call = submission_backend.calls[-1]
        assert call["limit"] == 200
        assert "john" not in str(call["filters"])

    @pytest.mark.asyncio
    async def test_pagination_round_trip_no_duplicates(self) -> None:
        """Following next cursors never repeats an id."""
        backend = InMemorySubmissionBackend([make_raw_submission(f"s{i:02d}", created=f"2025-06-{i:02d}T00:00:00Z") for i in range(1, 24)])
        gateway = SubmissionGateway(backend)
        opts = QueryOptions(source_id="wix.form_app.form", limit=5)
        seen: list[str] = []
        pages = 0
        while True:
            result = await gateway.query(opts)
            ids = [r.get("_id") for r in result.items]
            assert len(ids) <= opts.limit
            assert not set(ids) & set(seen)
            seen.extend(ids)
            pages += 1
            if not result.has_next:
                break
            assert result.cursors.next
            opts = opts.model_copy(update={"cursor": result.cursors.next})
        assert pages == 5
        assert len(seen) == 23

    @pytest.mark.asyncio
    async def test_backend_failure_wrapped(self) -> None:
        """Backend errors surface as BackendError with context and cause."""
        backend = InMemorySubmissionBackend([], fail_namespaces={"broken"})
        gateway = SubmissionGateway(backend)
        with pytest.raises(BackendError) as exc_info:
            await gateway.query(QueryOptions(source_id="broken"))
        assert str(exc_info.value).startswith("Failed to query submissions:")
        assert exc_info.value.source_id == "broken"
        assert exc_info.value.__cause__ is not None

    @pytest.mark.asyncio
    async def test_invalid_cursor(self, submission_gateway: SubmissionGateway) -> None:
        """An undecodable cursor is a backend error."""
        with pytest.raises(BackendError):
            await submission_gateway.query(QueryOptions(source_id="wix.form_app.form", cursor="%%%"))


class TestSubmissionGatewayLookups:
    """Tests for get_submission and count_submissions."""

    @pytest.mark.asyncio
    async def test_get_submission(self, submission_gateway: SubmissionGateway) -> None:
        """Returns the normalized record."""
        sub = await submission_gateway.get_submission("s3")
        assert sub.id == "s3"
        assert sub.fields == {"message": "Hello"}

    @pytest.mark.asyncio
    async def test_get_submission_missing(self, submission_gateway: SubmissionGateway) -> None:
        """Unknown ids raise BackendError."""
        with pytest.raises(BackendError):
            await submission_gateway.get_submission("nope")

    @pytest.mark.asyncio
    async def test_get_submission_invalid(self) -> None:
        """A stored record failing validation raises BackendError."""
        gateway = SubmissionGateway(InMemorySubmissionBackend([{"_id": "x"}]))
        with pytest.raises(BackendError):
            await gateway.get_submission("x")

    @pytest.mark.asyncio
    async def test_count_submissions(self) -> None:
        """Counts valid records across pages, optionally by status."""
        records = [make_raw_submission(f"s{i}", status="PENDING" if i % 3 == 0 else "CONFIRMED") for i in range(450)]
        invalid = make_raw_submission("bad")
        invalid["_createdDate"] = ""
        gateway = SubmissionGateway(InMemorySubmissionBackend(records + [invalid]))
        assert await gateway.count_submissions("wix.form_app.form") == 450
        assert await gateway.count_submissions("wix.form_app.form", status="PENDING") == 150


class TestCollectionCursor:
    """Tests for synthesized collection cursors."""

    def test_round_trip(self) -> None:
        """Encoded offsets decode for the same collection."""
        assert decode_cursor("posts", encode_cursor("posts", 40)) == 40

    def test_other_collection_rejected(self) -> None:
        """A token for another collection is rejected."""
        with pytest.raises(BackendError):
            decode_cursor("posts", encode_cursor("drafts", 5))

    def test_garbage_rejected(self) -> None:
        """Undecodable tokens are rejected."""
        with pytest.raises(BackendError):
            decode_cursor("posts", "not-a-cursor")


class TestCollectionGateway:
    """Tests for CollectionGateway."""

    @pytest.mark.asyncio
    async def test_paging_with_cursors(self, collection_gateway: CollectionGateway) -> None:
        """Pages forward with opaque cursors and no duplicates."""
        opts = QueryOptions(source_id="posts", limit=2, sort_field="createdAt", sort_order="asc")
        first = await collection_gateway.query(opts)
        assert [r.get("_id") for r in first.items] == ["p1", "p2"]
        assert first.total_count == 5
        assert first.has_next is True
        assert first.has_prev is False

        second = await collection_gateway.query(opts.model_copy(update={"cursor": first.cursors.next}))
        assert [r.get("_id") for r in second.items] == ["p3", "p4"]
        assert second.has_prev is True

        third = await collection_gateway.query(opts.model_copy(update={"cursor": second.cursors.next}))
        assert [r.get("_id") for r in third.items] == ["p5"]
        assert third.has_next is False
        assert third.cursors.next is None

    @pytest.mark.asyncio
    async def test_search_pushed_down(
        self, collection_gateway: CollectionGateway, collection_backend: InMemoryCollectionBackend
    ) -> None:
        """Search becomes OR-ed contains over the search fields."""
        result = await collection_gateway.query(QueryOptions(source_id="posts", search_query="release"))
        call = collection_backend.calls[-1]
        assert call["contains"] == {"title": "release", "name": "release", "description": "release"}
        assert [r.get("_id") for r in result.items] == ["p3"]
        assert result.total_count == 1

    @pytest.mark.asyncio
    async def test_equality_filters(
        self, collection_gateway: CollectionGateway, collection_backend: InMemoryCollectionBackend
    ) -> None:
        """Equality filters are passed through."""
        result = await collection_gateway.query(QueryOptions(source_id="posts", equality_filters={"views": 20}))
        assert collection_backend.calls[-1]["equals"] == {"views": 20}
        assert [r.get("_id") for r in result.items] == ["p2"]

    @pytest.mark.asyncio
    async def test_failure_wrapped(self, collection_gateway: CollectionGateway) -> None:
        """Unknown collections raise BackendError."""
        with pytest.raises(BackendError) as exc_info:
            await collection_gateway.query(QueryOptions(source_id="missing"))
        assert exc_info.value.source_id == "missing"

    @pytest.mark.asyncio
    async def test_list_collections(self, collection_gateway: CollectionGateway) -> None:
        """Collections come back with counts, largest first."""
        summaries = await collection_gateway.list_collections()
        assert [(s.collection_id, s.collection_name, s.item_count) for s in summaries] == [
            ("posts", "Posts", 5),
            ("drafts", "Drafts", 0),
        ]
        assert summaries[1].collection_type == "NATIVE"

    @pytest.mark.asyncio
    async def test_list_collections_failed_count_is_zero(self) -> None:
        """A failing count probe reports zero instead of failing the listing."""
        backend = InMemoryCollectionBackend(
            {"a": [{"_id": "1"}], "b": [{"_id": "2"}, {"_id": "3"}]},
            fail_collections={"b"},
        )
        summaries = await CollectionGateway(backend).list_collections()
        assert [(s.collection_id, s.item_count) for s in summaries] == [("a", 1), ("b", 0)]
