"""Field metadata, statistics and rendering-ready cell values."""

from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from formlens.models.records import CamelModel


class FieldType(str, Enum):
    """Semantic type inferred for a discovered field."""

    EMAIL = "email"
    PHONE = "phone"
    URL = "url"
    DATE = "date"
    NUMBER = "number"
    TEXTAREA = "textarea"
    TEXT = "text"


class FieldDescriptor(CamelModel):
    """One discovered field: position, visibility, type and how many records use it."""

    name: str
    order: int = Field(..., ge=0)
    visible: bool = True
    type: FieldType = FieldType.TEXT
    usage_count: int = Field(default=0, ge=0)
    label: Optional[str] = None


class MostCommon(BaseModel):
    value: Any
    count: int


class DateRange(BaseModel):
    min: datetime
    max: datetime


class FieldStatistics(CamelModel):
    """Aggregates over a field's non-empty values."""

    total_responses: int = 0
    unique_values: int = 0
    most_common: Optional[MostCommon] = None
    is_empty: bool = True
    average_length: Optional[float] = None
    date_range: Optional[DateRange] = None


CellKind = Literal["null", "boolean", "array", "media_array", "url", "text", "object"]


class CellValue(CamelModel):
    """Tagged, presentation-ready value of one field within one record."""

    kind: CellKind
    value: Any = None
    full_value: Optional[str] = None
