"""Registry for resolving backend implementations by name."""

from typing import Type

from formlens.backends.base import CollectionBackend, SubmissionBackend
from formlens.backends.http import HttpCollectionBackend, HttpSubmissionBackend
from formlens.backends.memory import InMemoryCollectionBackend, InMemorySubmissionBackend


class BackendRegistry:
    """Provides submission and collection backends by name."""

    _submission_backends: dict[str, Type[SubmissionBackend]] = {
        "http": HttpSubmissionBackend,
        "memory": InMemorySubmissionBackend,
    }
    _collection_backends: dict[str, Type[CollectionBackend]] = {
        "http": HttpCollectionBackend,
        "memory": InMemoryCollectionBackend,
    }

    @classmethod
    def submissions(cls, name: str, **kwargs) -> SubmissionBackend:
        """Get a submission backend instance. kwargs passed to backend __init__."""
        backend_cls = cls._submission_backends.get(name.lower())
        if not backend_cls:
            raise ValueError(f"Unknown backend: {name}. Available: {cls.available_backends()}")
        return backend_cls(**kwargs)

    @classmethod
    def collections(cls, name: str, **kwargs) -> CollectionBackend:
        """Get a collection backend instance. kwargs passed to backend __init__."""
        backend_cls = cls._collection_backends.get(name.lower())
        if not backend_cls:
            raise ValueError(f"Unknown backend: {name}. Available: {cls.available_backends()}")
        return backend_cls(**kwargs)

    @classmethod
    def available_backends(cls) -> list[str]:
        return list(cls._submission_backends.keys())
