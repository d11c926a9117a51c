"""Convert raw submission and collection records into canonical models.

A raw submission is accepted only when it carries non-empty _id, formId,
namespace and _createdDate. Anything else falls back to a typed default.
Rejected records are dropped and counted, never raised: only backend-level
failures propagate as exceptions.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional

from formlens.models.raw import RawRecord
from formlens.models.records import NormalizedItem, NormalizedSubmission, SubmissionStatus, Submitter
from formlens.models.sources import NormalizationResult

from .dates import parse_datetime

logger = logging.getLogger(__name__)

# Raw submission keys
ID = "_id"
CREATED_DATE = "_createdDate"
UPDATED_DATE = "_updatedDate"
FORM_ID = "formId"
NAMESPACE = "namespace"
STATUS = "status"
SUBMISSIONS = "submissions"
SUBMITTER = "submitter"
SEEN = "seen"
CONTACT_ID = "contactId"
REVISION = "revision"

# Raw collection item keys
OWNER = "_owner"
SYSTEM_FIELDS = (ID, CREATED_DATE, UPDATED_DATE, OWNER)

REQUIRED_SUBMISSION_KEYS = (ID, FORM_ID, NAMESPACE, CREATED_DATE)


def _present(value: Any) -> bool:
    return value is not None and value != ""


def _optional_str(value: Any) -> Optional[str]:
    return str(value) if _present(value) else None


def sanitize_fields(data: Optional[dict[str, Any]]) -> dict[str, Any]:
    """Drop None values and strip strings; returns a new dict."""
    sanitized: dict[str, Any] = {}
    for key, value in (data or {}).items():
        if value is None:
            continue
        sanitized[key] = value.strip() if isinstance(value, str) else value
    return sanitized


class RecordNormalizer:
    """
    Validates raw records and builds NormalizedSubmission / NormalizedItem.
    `now` is injectable so the created-date fallback is testable.
    """

    def __init__(self, now: Optional[Callable[[], datetime]] = None):
        self._now = now or (lambda: datetime.now(timezone.utc))

    def missing_required(self, raw: RawRecord) -> list[str]:
        """Required submission keys that are absent, null or empty."""
        return [key for key in REQUIRED_SUBMISSION_KEYS if not _present(raw.get(key))]

    def is_valid_submission(self, raw: RawRecord) -> bool:
        return not self.missing_required(raw)

    def _dates(self, raw: RawRecord) -> tuple[datetime, datetime]:
        created = parse_datetime(raw.get(CREATED_DATE), allow_epoch=True)
        if created is None:
            logger.debug("Unparseable %s on %s; using current time", CREATED_DATE, raw.get(ID))
            created = self._now()
        updated = parse_datetime(raw.get(UPDATED_DATE), allow_epoch=True) or created
        return created, updated

    def _submitter(self, value: Any) -> Optional[Submitter]:
        if not isinstance(value, dict):
            return None
        return Submitter(
            member_id=_optional_str(value.get("memberId")),
            visitor_id=_optional_str(value.get("visitorId")),
            user_id=_optional_str(value.get("userId")),
            application_id=_optional_str(value.get("applicationId")),
        )

    def normalize_submission(self, raw: RawRecord) -> Optional[NormalizedSubmission]:
        """Return the canonical submission, or None when a required key is missing."""
        missing = self.missing_required(raw)
        if missing:
            logger.debug("Rejected submission %s: missing %s", raw.get(ID), ", ".join(missing))
            return None

        created, updated = self._dates(raw)
        fields = raw.get(SUBMISSIONS)
        return NormalizedSubmission(
            id=str(raw.get(ID)),
            created_at=created,
            updated_at=updated,
            source_id=str(raw.get(FORM_ID)),
            namespace=str(raw.get(NAMESPACE)),
            status=SubmissionStatus.parse(raw.get(STATUS)),
            fields=dict(fields) if isinstance(fields, dict) else {},
            submitter=self._submitter(raw.get(SUBMITTER)),
            seen=bool(raw.get(SEEN) or False),
            contact_id=_optional_str(raw.get(CONTACT_ID)),
            revision=_optional_str(raw.get(REVISION)),
        )

    def normalize_item(self, raw: RawRecord) -> Optional[NormalizedItem]:
        """Return the canonical collection item, or None when it has no id."""
        if not _present(raw.get(ID)):
            logger.debug("Rejected collection item without %s", ID)
            return None
        created, updated = self._dates(raw)
        fields = {k: v for k, v in raw.data.items() if k not in SYSTEM_FIELDS}
        return NormalizedItem(
            id=str(raw.get(ID)),
            created_at=created,
            updated_at=updated,
            owner=_optional_str(raw.get(OWNER)),
            fields=fields,
        )

    def normalize_submissions(self, raws: Iterable[RawRecord]) -> NormalizationResult[NormalizedSubmission]:
        """Normalize a batch, dropping invalid records and counting the drops."""
        return self._batch(raws, self.normalize_submission)

    def normalize_items(self, raws: Iterable[RawRecord]) -> NormalizationResult[NormalizedItem]:
        return self._batch(raws, self.normalize_item)

    def _batch(self, raws: Iterable[RawRecord], convert: Callable) -> NormalizationResult:
        items = []
        rejected = 0
        for raw in raws:
            normalized = convert(raw)
            if normalized is None:
                rejected += 1
            else:
                items.append(normalized)
        if rejected:
            logger.info("Dropped %d of %d raw records during normalization", rejected, rejected + len(items))
        return NormalizationResult(items=items, rejected=rejected)
