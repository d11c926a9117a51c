"""Backend contracts and implementations behind the query gateway."""

from formlens.backends.base import BackendPage, CollectionBackend, SubmissionBackend
from formlens.backends.registry import BackendRegistry

__all__ = ["BackendPage", "BackendRegistry", "CollectionBackend", "SubmissionBackend"]
