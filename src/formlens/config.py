"""Settings model: YAML file plus FORMLENS_* environment overrides."""

import os
from pathlib import Path
from typing import Optional

try:
    import yaml
except ModuleNotFoundError as e:
    raise ModuleNotFoundError(
        "PyYAML is required for settings loading. Run: poetry install"
    ) from e
from pydantic import BaseModel, Field

# Submission namespaces probed when no explicit list is configured.
DEFAULT_NAMESPACES: list[str] = [
    "wix.form_app.form",
    "wix.site.form",
    "wix.contacts.form",
    "wix.bookings.form",
    "wix.events.form",
    "wix.stores.form",
    "wix.pro_gallery.form",
    "wix.blog.form",
    "wix.members.form",
    "wix.marketing.form",
    "wix.automation.form",
    "wix.crm.form",
    "forms",
    "site.forms",
    "standalone.forms",
    "custom.forms",
]


class Settings(BaseModel):
    """Runtime configuration for backends, discovery and paging."""

    backend: str = Field(default="http", description="http | memory")
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    timeout: float = 30.0

    namespaces: list[str] = Field(default_factory=lambda: list(DEFAULT_NAMESPACES))
    collections: list[str] = Field(default_factory=list)

    probe_limit: int = Field(default=100, ge=1, le=1000)
    probe_interval: float = Field(default=0.1, ge=0.0, description="Seconds between discovery probes")
    default_limit: int = Field(default=50, ge=1, le=200)
    search_fetch_cap: int = Field(default=200, ge=1, le=1000)
    collection_search_fields: list[str] = Field(
        default_factory=lambda: ["title", "name", "description"],
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from YAML. Supports nested (backend/discovery/paging) or flat structure."""
        data = yaml.safe_load(Path(path).read_text()) or {}
        flat: dict = {}
        backend = data.get("backend") if isinstance(data.get("backend"), dict) else {}
        discovery = data.get("discovery", {})
        paging = data.get("paging", {})

        def _get(key: str, nested: dict, top: dict, default=None):
            return nested.get(key, top.get(key, default))

        if isinstance(data.get("backend"), str):
            flat["backend"] = data["backend"]
        elif backend.get("type"):
            flat["backend"] = backend["type"]
        for key in ("base_url", "api_key", "timeout"):
            value = _get(key, backend, data)
            if value is not None:
                flat[key] = value
        for key in ("namespaces", "collections", "probe_limit", "probe_interval"):
            value = _get(key, discovery, data)
            if value is not None:
                flat[key] = value
        for key in ("default_limit", "search_fetch_cap", "collection_search_fields"):
            value = _get(key, paging, data)
            if value is not None:
                flat[key] = value
        return cls.model_validate(flat)

    def with_env(self, environ: Optional[dict[str, str]] = None) -> "Settings":
        """Return a copy with FORMLENS_* environment variables applied on top."""
        env = os.environ if environ is None else environ
        update: dict = {}
        if env.get("FORMLENS_BACKEND"):
            update["backend"] = env["FORMLENS_BACKEND"].strip()
        if env.get("FORMLENS_BASE_URL"):
            update["base_url"] = env["FORMLENS_BASE_URL"].strip()
        if env.get("FORMLENS_API_KEY"):
            update["api_key"] = env["FORMLENS_API_KEY"].strip()
        if env.get("FORMLENS_TIMEOUT"):
            update["timeout"] = float(env["FORMLENS_TIMEOUT"])
        if env.get("FORMLENS_NAMESPACES"):
            update["namespaces"] = split_list(env["FORMLENS_NAMESPACES"])
        if env.get("FORMLENS_COLLECTIONS"):
            update["collections"] = split_list(env["FORMLENS_COLLECTIONS"])
        if not update:
            return self
        return self.model_validate({**self.model_dump(), **update})


def split_list(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def load_settings(path: Optional[str | Path] = None) -> Settings:
    """Settings from an optional YAML file, then environment overrides."""
    settings = Settings.from_yaml(path) if path else Settings()
    return settings.with_env()
