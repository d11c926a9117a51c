"""Pytest fixtures for formlens tests."""

from datetime import datetime, timezone

import pytest

from formlens.backends.memory import InMemoryCollectionBackend, InMemorySubmissionBackend
from formlens.gateway import CollectionGateway, SubmissionGateway
from formlens.normalization import RecordNormalizer

FIXED_NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def make_raw_submission(
    submission_id: str,
    *,
    namespace: str = "wix.form_app.form",
    form_id: str = "form-aaaaaaaa-1",
    created: str = "2025-06-01T10:00:00Z",
    status: str = "CONFIRMED",
    **fields,
) -> dict:
    """Raw backend submission with the given field values under `submissions`."""
    return {
        "_id": submission_id,
        "namespace": namespace,
        "formId": form_id,
        "_createdDate": created,
        "_updatedDate": created,
        "status": status,
        "seen": False,
        "submissions": dict(fields),
    }


@pytest.fixture
def raw_submissions() -> list[dict]:
    """Five valid submissions in one namespace across two forms."""
    return [
        make_raw_submission("s1", created="2025-06-01T10:00:00Z", first_name="John", email="john@example.com"),
        make_raw_submission("s2", created="2025-06-02T10:00:00Z", first_name="Ana", email="ana@example.com"),
        make_raw_submission("s3", created="2025-06-03T10:00:00Z", form_id="form-bbbbbbbb-2", message="Hello"),
        make_raw_submission("s4", created="2025-06-04T10:00:00Z", status="PENDING", first_name="Lee"),
        make_raw_submission("s5", created="2025-06-05T10:00:00Z", form_id="form-bbbbbbbb-2", message="Bye"),
    ]


@pytest.fixture
def submission_backend(raw_submissions: list[dict]) -> InMemorySubmissionBackend:
    return InMemorySubmissionBackend(raw_submissions)


@pytest.fixture
def submission_gateway(submission_backend: InMemorySubmissionBackend) -> SubmissionGateway:
    return SubmissionGateway(submission_backend)


@pytest.fixture
def collection_backend() -> InMemoryCollectionBackend:
    """Two collections: `posts` with 5 items and an empty `drafts`."""
    posts = [
        {"_id": f"p{i}", "_createdDate": f"2025-05-0{i}T00:00:00Z", "title": f"Post {i}", "views": i * 10}
        for i in range(1, 6)
    ]
    posts[2]["title"] = "Release notes"
    return InMemoryCollectionBackend(
        {"posts": posts, "drafts": []},
        metadata=[
            {"_id": "posts", "displayName": "Posts", "collectionType": "NATIVE"},
            {"_id": "drafts", "displayName": "Drafts"},
        ],
    )


@pytest.fixture
def collection_gateway(collection_backend: InMemoryCollectionBackend) -> CollectionGateway:
    return CollectionGateway(collection_backend)


@pytest.fixture
def normalizer() -> RecordNormalizer:
    """Normalizer with a fixed clock."""
    return RecordNormalizer(now=lambda: FIXED_NOW)
