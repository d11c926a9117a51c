"""Raw record representation before normalization."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RawRecord(BaseModel):
    """
    Backend-native record, untyped.
    Backends populate this from JSON responses; any key may be missing or null.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    data: dict[str, Any] = Field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)
