"""Data models for raw records, normalized entities, queries and field metadata."""

from formlens.models.fields import (
    CellValue,
    DateRange,
    FieldDescriptor,
    FieldStatistics,
    FieldType,
    MostCommon,
)
from formlens.models.query import Cursors, QueryOptions, QueryResult
from formlens.models.raw import RawRecord
from formlens.models.records import NormalizedItem, NormalizedSubmission, SubmissionStatus, Submitter
from formlens.models.sources import (
    CollectionSummary,
    DiscoveryResult,
    FormSummary,
    NormalizationResult,
    SourceSummary,
)

__all__ = [
    "CellValue",
    "CollectionSummary",
    "Cursors",
    "DateRange",
    "DiscoveryResult",
    "FieldDescriptor",
    "FieldStatistics",
    "FieldType",
    "FormSummary",
    "MostCommon",
    "NormalizationResult",
    "NormalizedItem",
    "NormalizedSubmission",
    "QueryOptions",
    "QueryResult",
    "RawRecord",
    "SourceSummary",
    "SubmissionStatus",
    "Submitter",
]
