"""Validation and normalization of raw backend records into canonical entities."""

from .dates import is_date_like, parse_datetime
from .normalizer import RecordNormalizer, sanitize_fields

__all__ = ["RecordNormalizer", "is_date_like", "parse_datetime", "sanitize_fields"]
