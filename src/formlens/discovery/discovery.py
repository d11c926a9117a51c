"""Sequential discovery of non-empty namespaces and collections."""

import asyncio
import logging
from typing import Callable, Optional

from formlens.errors import SourceProbeError
from formlens.gateway import QueryGateway
from formlens.models.query import QueryOptions, QueryResult
from formlens.models.raw import RawRecord
from formlens.models.sources import DiscoveryResult, SourceSummary

from .throttle import IntervalGate

logger = logging.getLogger(__name__)

NAMESPACE_DISPLAY_NAMES = {
    "wix.form_app.form": "New Forms",
    "wix.site.form": "Legacy Site Forms",
    "wix.contacts.form": "Contact Forms",
    "wix.bookings.form": "Bookings",
    "wix.events.form": "Events",
    "wix.stores.form": "Stores",
    "wix.pro_gallery.form": "Pro Gallery",
    "wix.blog.form": "Blog",
    "wix.members.form": "Members",
    "wix.marketing.form": "Marketing",
    "wix.automation.form": "Automation",
    "wix.crm.form": "CRM",
    "forms": "Generic Forms",
    "site.forms": "Site Forms",
    "standalone.forms": "Standalone Forms",
    "custom.forms": "Custom Forms",
}


def namespace_display_name(namespace: str) -> str:
    return NAMESPACE_DISPLAY_NAMES.get(namespace, "Unknown")


def distinct_form_ids(items: list[RawRecord]) -> list[str]:
    """Distinct non-empty formId values in first-seen order."""
    seen: dict[str, None] = {}
    for item in items:
        form_id = item.get("formId")
        if form_id:
            seen.setdefault(str(form_id), None)
    return list(seen)


class SourceDiscovery:
    """
    Probes candidate sources one at a time through a gateway.
    A failing candidate becomes a report line and the scan moves on; sources
    without records are left out of `found`.
    """

    def __init__(self, gateway: QueryGateway, gate: Optional[IntervalGate] = None, probe_limit: int = 100):
        self.gateway = gateway
        self.gate = gate or IntervalGate(0.1)
        self.probe_limit = probe_limit

    async def _probe(self, source_id: str, limit: int) -> QueryResult[RawRecord]:
        try:
            return await self.gateway.query(QueryOptions(source_id=source_id, limit=limit))
        except Exception as e:
            raise SourceProbeError(source_id, str(e)) from e

    async def _scan(
        self,
        candidate_ids: list[str],
        limit: int,
        summarize: Callable[[str, QueryResult[RawRecord]], Optional[SourceSummary]],
        cancel: Optional[asyncio.Event],
    ) -> DiscoveryResult:
        result = DiscoveryResult()
        self.gate.reset()
        for index, source_id in enumerate(candidate_ids):
            await self.gate.wait()
            if cancel is not None and cancel.is_set():
                logger.info("Discovery cancelled after %d of %d candidates", index, len(candidate_ids))
                result.report.append(f"cancelled after {index} of {len(candidate_ids)} candidates")
                result.cancelled = True
                break
            logger.info("Probing %s", source_id)
            try:
                page = await self._probe(source_id, limit)
            except SourceProbeError as e:
                logger.warning("Probe failed for %s: %s", source_id, e.__cause__ or e)
                result.report.append(f"{source_id}: probe failed: {e.__cause__ or e}")
                continue
            summary = summarize(source_id, page)
            if summary is None:
                result.report.append(f"{source_id}: no records")
                continue
            result.found.append(summary)
            result.report.append(self._found_line(summary))
        logger.info("Discovery finished: %d sources with data", len(result.found))
        return result

    @staticmethod
    def _found_line(summary: SourceSummary) -> str:
        if summary.kind == "namespace":
            return f"{summary.source_id}: found {summary.record_count} records in {len(summary.secondary_ids)} forms"
        return f"{summary.source_id}: found {summary.record_count} items"

    @staticmethod
    def _namespace_summary(source_id: str, page: QueryResult[RawRecord]) -> Optional[SourceSummary]:
        if not page.items:
            return None
        return SourceSummary(
            source_id=source_id,
            display_name=namespace_display_name(source_id),
            kind="namespace",
            record_count=max(page.total_count, len(page.items)),
            secondary_ids=distinct_form_ids(page.items),
        )

    @staticmethod
    def _collection_summary(source_id: str, page: QueryResult[RawRecord]) -> Optional[SourceSummary]:
        count = max(page.total_count, len(page.items))
        if count == 0:
            return None
        return SourceSummary(source_id=source_id, display_name=source_id, kind="collection", record_count=count)

    async def discover_sources(
        self,
        candidate_ids: list[str],
        cancel: Optional[asyncio.Event] = None,
    ) -> DiscoveryResult:
        """Probe each namespace with a page of probe_limit records, in order."""
        return await self._scan(candidate_ids, self.probe_limit, self._namespace_summary, cancel)

    async def discover_collections(
        self,
        collection_ids: list[str],
        cancel: Optional[asyncio.Event] = None,
    ) -> DiscoveryResult:
        """Probe each collection with limit=1 and report its total count."""
        return await self._scan(collection_ids, 1, self._collection_summary, cancel)
