"""Framework-free handlers for the two read endpoints.

Each returns (status_code, body). The body is fully built before returning,
so a caller emits either a complete success envelope or a complete error.
"""

import logging
from typing import Any, Mapping

from formlens.errors import FormlensError, NotFoundInput
from formlens.gateway import SubmissionGateway
from formlens.models.query import DEFAULT_LIMIT, QueryOptions
from formlens.models.sources import FormSummary
from formlens.pipeline import fetch_submissions, list_forms

logger = logging.getLogger(__name__)

Response = tuple[int, dict[str, Any]]


def error_body(message: str) -> dict[str, Any]:
    return {"error": message}


def forms_envelope(forms: list[FormSummary]) -> dict[str, Any]:
    """Single-page list envelope; forms are never paginated."""
    return {
        "items": [f.model_dump(mode="json", by_alias=True) for f in forms],
        "totalCount": len(forms),
        "hasNext": False,
        "hasPrev": False,
        "cursors": {},
        "pageInfo": {"hasNext": False, "hasPrevious": False},
    }


def _require(params: Mapping[str, Any], name: str) -> str:
    value = params.get(name)
    if value is None or not str(value).strip():
        raise NotFoundInput(name)
    return str(value).strip()


def _parse_limit(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return DEFAULT_LIMIT


def build_submission_options(params: Mapping[str, Any]) -> QueryOptions:
    """QueryOptions from request parameters; raises NotFoundInput without a namespace."""
    namespace = _require(params, "namespace")
    filters = {}
    if params.get("formId"):
        filters["formId"] = str(params["formId"])
    if params.get("status"):
        filters["status"] = str(params["status"])
    return QueryOptions(
        source_id=namespace,
        limit=_parse_limit(params.get("limit")),
        cursor=params.get("cursor"),
        equality_filters=filters,
        sort_field=params.get("sortField"),
        sort_order="asc" if params.get("sortOrder") == "asc" else "desc",
        search_query=params.get("searchQuery"),
    )


async def handle_get_forms(params: Mapping[str, Any], gateway: SubmissionGateway) -> Response:
    try:
        namespace = _require(params, "namespace")
        forms = await list_forms(gateway, namespace)
        return 200, forms_envelope(forms)
    except NotFoundInput as e:
        return 400, error_body(str(e))
    except FormlensError as e:
        logger.error("Forms request failed: %s", e)
        return 500, error_body("Failed to fetch forms")
    except Exception:
        logger.exception("Unexpected error while listing forms")
        return 500, error_body("Failed to fetch forms")


async def handle_get_submissions(params: Mapping[str, Any], gateway: SubmissionGateway) -> Response:
    try:
        options = build_submission_options(params)
        result = await fetch_submissions(gateway, options)
        return 200, result.model_dump(mode="json", by_alias=True)
    except NotFoundInput as e:
        return 400, error_body(str(e))
    except FormlensError as e:
        logger.error("Submissions request failed: %s", e)
        return 500, error_body("Failed to fetch submissions")
    except Exception:
        logger.exception("Unexpected error while fetching submissions")
        return 500, error_body("Failed to fetch submissions")
