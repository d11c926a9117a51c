"""Field classification: order, type inference, statistics and cell values."""

from .cells import MEDIA_KEYS, classify_cell, has_any_of, is_media_object
from .classifier import (
    compute_statistics,
    extract_collection_field_order,
    extract_field_order,
    infer_type,
)
from .formatting import format_value, validate_field_value
from .registry import FieldRegistry

__all__ = [
    "FieldRegistry",
    "MEDIA_KEYS",
    "classify_cell",
    "compute_statistics",
    "extract_collection_field_order",
    "extract_field_order",
    "format_value",
    "has_any_of",
    "infer_type",
    "is_media_object",
    "validate_field_value",
]
