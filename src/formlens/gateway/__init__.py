"""Query gateways: one QueryOptions -> QueryResult contract for every backend."""

from .base import QueryGateway, resolve_sort_field
from .collections import CollectionGateway
from .factory import build_gateways
from .submissions import SubmissionGateway

__all__ = ["CollectionGateway", "QueryGateway", "SubmissionGateway", "build_gateways", "resolve_sort_field"]
