"""Discovery and listing summaries."""

from datetime import datetime
from typing import Any, Generic, Literal, Optional, TypeVar

from pydantic import Field

from formlens.models.records import CamelModel

T = TypeVar("T")


class SourceSummary(CamelModel):
    """A discovered non-empty namespace or collection."""

    source_id: str
    display_name: str
    kind: Literal["namespace", "collection"] = "namespace"
    record_count: int = 0
    secondary_ids: list[str] = Field(default_factory=list, description="Distinct form ids in a namespace")


class DiscoveryResult(CamelModel):
    found: list[SourceSummary] = Field(default_factory=list)
    report: list[str] = Field(default_factory=list)
    cancelled: bool = False


class FormSummary(CamelModel):
    form_id: str
    form_name: str
    submission_count: int = 0
    last_submission_date: datetime


class CollectionSummary(CamelModel):
    collection_id: str
    collection_name: str
    item_count: int = 0
    collection_type: str = "NATIVE"
    last_updated_date: Optional[datetime] = None


class NormalizationResult(CamelModel, Generic[T]):
    """Normalized records plus how many raw records were dropped."""

    items: list[T] = Field(default_factory=list)
    rejected: int = 0

    @property
    def accepted(self) -> int:
        return len(self.items)
