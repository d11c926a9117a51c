"""Orchestration: gateway query -> normalize -> search / group / classify."""

import logging
from typing import Any, Optional

from formlens.analysis import FieldRegistry
from formlens.gateway import SubmissionGateway
from formlens.models.query import Cursors, QueryOptions, QueryResult
from formlens.models.records import NormalizedSubmission
from formlens.models.sources import FormSummary
from formlens.normalization import RecordNormalizer
from formlens.table.engine import matches_search

logger = logging.getLogger(__name__)

FORMS_PAGE_SIZE = 200


async def fetch_submissions(
    gateway: SubmissionGateway,
    options: QueryOptions,
    normalizer: Optional[RecordNormalizer] = None,
) -> QueryResult[NormalizedSubmission]:
    """
    Query one page, normalize it and drop invalid records.
    total_count is the number of records that survived normalization, so it
    can be smaller than the backend's own total.

    With a search_query the gateway returns a widened window and the match
    runs here over every field. Matches outside that window are not found,
    and a searched result is always a single page without cursors.
    """
    normalizer = normalizer or RecordNormalizer()
    page = await gateway.query(options)
    normalized = normalizer.normalize_submissions(page.items)
    items = normalized.items

    if options.search_query:
        items = [s for s in items if matches_search(s, options.search_query, list(s.fields))]
        logger.info("Search %r matched %d of %d records", options.search_query, len(items), normalized.accepted)
        return QueryResult[NormalizedSubmission](
            items=items[:options.limit],
            total_count=len(items),
            has_next=False,
            has_prev=False,
            cursors=Cursors(),
        )

    return QueryResult[NormalizedSubmission](
        items=items,
        total_count=len(items),
        has_next=page.has_next,
        has_prev=page.has_prev,
        cursors=page.cursors,
    )


def generate_form_name(submission: NormalizedSubmission) -> str:
    """Readable form name from `_form.title`, else from the submission's field names."""
    form_meta = submission.fields.get("_form")
    if isinstance(form_meta, dict) and form_meta.get("title"):
        return str(form_meta["title"])

    keys = list(submission.fields)
    lowered = [(k, k.lower()) for k in keys]
    name_fields = [k for k, low in lowered if "name" in low or "title" in low or "subject" in low]
    has_email = any("email" in low for _, low in lowered)
    has_phone = any("phone" in low for _, low in lowered)

    if name_fields:
        name = f"{', '.join(name_fields)} Form"
    elif has_email and has_phone:
        name = "Contact Form"
    elif has_email:
        name = "Email Form"
    elif keys:
        name = f"{', '.join(keys[:2])} Form"
    else:
        name = "Form"
    return f"{name} ({submission.source_id[:8]}...)"


def summarize_forms(submissions: list[NormalizedSubmission]) -> list[FormSummary]:
    """Group by form id; newest submission first."""
    groups: dict[str, dict[str, Any]] = {}
    for submission in submissions:
        group = groups.get(submission.source_id)
        if group is None:
            groups[submission.source_id] = {
                "first": submission,
                "count": 1,
                "last": submission.created_at,
            }
            continue
        group["count"] += 1
        if submission.created_at > group["last"]:
            group["last"] = submission.created_at

    forms = [
        FormSummary(
            form_id=form_id,
            form_name=generate_form_name(group["first"]),
            submission_count=group["count"],
            last_submission_date=group["last"],
        )
        for form_id, group in groups.items()
    ]
    forms.sort(key=lambda f: f.last_submission_date, reverse=True)
    return forms


async def list_forms(
    gateway: SubmissionGateway,
    namespace: str,
    normalizer: Optional[RecordNormalizer] = None,
) -> list[FormSummary]:
    """Forms seen in one page of up to 200 submissions of a namespace."""
    normalizer = normalizer or RecordNormalizer()
    page = await gateway.query(QueryOptions(source_id=namespace, limit=FORMS_PAGE_SIZE))
    submissions = normalizer.normalize_submissions(page.items).items
    forms = summarize_forms(submissions)
    logger.info("Found %d forms in namespace %s", len(forms), namespace)
    return forms


def build_field_view(records: list[Any]) -> FieldRegistry:
    return FieldRegistry.from_records(records)
