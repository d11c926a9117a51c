#!/usr/bin/env python3
"""Quick live check of namespace discovery against a real backend.

Needs FORMLENS_BASE_URL (and usually FORMLENS_API_KEY).

Run:
  python scripts/discover_live.py                      # configured namespaces
  python scripts/discover_live.py wix.form_app.form    # one namespace
  python scripts/discover_live.py collections          # every collection
"""

import asyncio
import logging
import sys

from formlens.config import load_settings
from formlens.discovery import IntervalGate, SourceDiscovery
from formlens.gateway import build_gateways


async def run(arg: str | None) -> None:
    settings = load_settings()
    submissions, collections = build_gateways(settings)
    gate = IntervalGate(settings.probe_interval)
    try:
        if arg == "collections":
            print("Listing collections...")
            listed = await collections.list_collections()
            result = await SourceDiscovery(collections, gate=gate).discover_collections([c.collection_id for c in listed])
        else:
            namespaces = [arg] if arg else settings.namespaces
            print(f"Probing {len(namespaces)} namespace(s)...")
            result = await SourceDiscovery(submissions, gate=gate, probe_limit=settings.probe_limit).discover_sources(namespaces)
    finally:
        await submissions.aclose()
        await collections.aclose()

    for line in result.report:
        print(f"  {line}")
    if result.found:
        print(f"\nFound data in {len(result.found)} source(s).")
    else:
        print("\nNo data found. Check the base URL, API key and logs.")


def main() -> None:
    logging.basicConfig(level=logging.WARNING)
    asyncio.run(run(sys.argv[1] if len(sys.argv) > 1 else None))


if __name__ == "__main__":
    main()
