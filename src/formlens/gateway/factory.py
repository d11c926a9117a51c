"""Build gateways from Settings."""

import logging
from pathlib import Path
from typing import Optional

from formlens.backends import BackendRegistry
from formlens.backends.memory import load_memory_backends
from formlens.config import Settings

from .collections import CollectionGateway
from .submissions import SubmissionGateway

logger = logging.getLogger(__name__)


def build_gateways(
    settings: Settings,
    data_path: Optional[str | Path] = None,
) -> tuple[SubmissionGateway, CollectionGateway]:
    """
    Submission and collection gateways for the configured backend.
    A data_path always selects the in-memory backends loaded from that JSON file.
    """
    if data_path is not None:
        logger.info("Using in-memory backends loaded from %s", data_path)
        submissions, collections = load_memory_backends(data_path)
    elif settings.backend.lower() == "http":
        if not settings.base_url:
            raise ValueError("base_url is required for the http backend (set FORMLENS_BASE_URL)")
        kwargs = {"base_url": settings.base_url, "api_key": settings.api_key, "timeout": settings.timeout}
        submissions = BackendRegistry.submissions("http", **kwargs)
        collections = BackendRegistry.collections("http", **kwargs)
    else:
        submissions = BackendRegistry.submissions(settings.backend)
        collections = BackendRegistry.collections(settings.backend)

    return (
        SubmissionGateway(submissions, search_fetch_cap=settings.search_fetch_cap),
        CollectionGateway(collections, search_fields=settings.collection_search_fields),
    )
