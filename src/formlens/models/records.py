"""Normalized submission and collection item models."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SubmissionStatus(str, Enum):
    """Canonical submission status; unknown backend values map to UNKNOWN."""

    CONFIRMED = "CONFIRMED"
    PENDING = "PENDING"
    PAYMENT_WAITING = "PAYMENT_WAITING"
    PAYMENT_CANCELED = "PAYMENT_CANCELED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Any) -> "SubmissionStatus":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        return cls.UNKNOWN


class CamelModel(BaseModel):
    """Base for models serialized with camelCase keys at the HTTP boundary."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Submitter(CamelModel):
    """Who submitted a form; every id is optional."""

    member_id: Optional[str] = None
    visitor_id: Optional[str] = None
    user_id: Optional[str] = None
    application_id: Optional[str] = None


class NormalizedSubmission(CamelModel):
    """Canonical form submission. id, source_id, namespace and created_at are always set."""

    id: str = Field(..., min_length=1)
    created_at: datetime
    updated_at: datetime
    source_id: str = Field(..., min_length=1, description="Form id within the namespace")
    namespace: str = Field(..., min_length=1)
    status: SubmissionStatus = SubmissionStatus.UNKNOWN
    fields: dict[str, Any] = Field(default_factory=dict)
    submitter: Optional[Submitter] = None
    seen: bool = False
    contact_id: Optional[str] = None
    revision: Optional[str] = None


class NormalizedItem(CamelModel):
    """Canonical CMS collection item. Only id is required."""

    id: str = Field(..., min_length=1)
    created_at: datetime
    updated_at: datetime
    owner: Optional[str] = None
    fields: dict[str, Any] = Field(default_factory=dict)
