"""Main CLI entry point."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings YAML (env FORMLENS_* overrides apply on top)",
    )
    parser.add_argument(
        "--data",
        type=Path,
        default=None,
        help="Use in-memory backends loaded from a JSON file with submissions/collections keys",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write JSON to file (default: stdout)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="formlens", description="Typed views over schema-less form submissions")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # discover
    discover_parser = subparsers.add_parser("discover", help="Find namespaces (or collections) that contain data")
    discover_parser.add_argument(
        "--namespaces",
        type=str,
        default=None,
        help="Comma-separated candidate namespaces (default: configured list)",
    )
    discover_parser.add_argument(
        "--collections",
        action="store_true",
        help="Probe configured collections instead of namespaces",
    )
    _add_common(discover_parser)

    # submissions
    sub_parser = subparsers.add_parser("submissions", help="Fetch one page of normalized submissions")
    sub_parser.add_argument("--namespace", required=True, help="Submission namespace")
    sub_parser.add_argument("--form-id", default=None, help="Only submissions of this form")
    sub_parser.add_argument("--limit", type=int, default=None, help="Page size (1-200)")
    sub_parser.add_argument("--cursor", default=None, help="Cursor from a previous page")
    sub_parser.add_argument("--status", default=None, help="Status equality filter (e.g. CONFIRMED)")
    sub_parser.add_argument("--search", default=None, help="Case-insensitive text search")
    sub_parser.add_argument("--sort-field", default=None, help="createdAt, updatedAt, formId, status, seen")
    sub_parser.add_argument("--sort-order", choices=["asc", "desc"], default="desc")
    _add_common(sub_parser)

    # forms
    forms_parser = subparsers.add_parser("forms", help="List forms seen in a namespace")
    forms_parser.add_argument("--namespace", required=True, help="Submission namespace")
    _add_common(forms_parser)

    # fields
    fields_parser = subparsers.add_parser("fields", help="Field descriptors and statistics for a namespace")
    fields_parser.add_argument("--namespace", required=True, help="Submission namespace")
    fields_parser.add_argument("--form-id", default=None, help="Only submissions of this form")
    fields_parser.add_argument("--limit", type=int, default=None, help="Records to sample (1-200)")
    _add_common(fields_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse args and dispatch to subcommands."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)

    from formlens.config import load_settings
    from formlens.errors import FormlensError

    try:
        settings = load_settings(args.config)
    except (OSError, ValueError) as e:
        raise SystemExit(f"Could not load settings: {e}")

    commands = {
        "discover": _run_discover,
        "submissions": _run_submissions,
        "forms": _run_forms,
        "fields": _run_fields,
    }
    gateways = _gateways(args, settings)
    try:
        data = asyncio.run(_run_command(commands[args.command], args, settings, gateways))
    except FormlensError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)
    _emit(data, args.output)


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def _emit(data: Any, output: Path | None) -> None:
    text = json.dumps(data, indent=2, default=str)
    if output:
        output.write_text(text, encoding="utf-8")
        print(f"Wrote {output}", file=sys.stderr)
    else:
        print(text)


def _gateways(args: argparse.Namespace, settings):
    from formlens.gateway import build_gateways

    try:
        return build_gateways(settings, data_path=args.data)
    except ValueError as e:
        raise SystemExit(str(e))


async def _run_command(command, args: argparse.Namespace, settings, gateways) -> Any:
    submissions, collections = gateways
    try:
        return await command(args, settings, submissions, collections)
    finally:
        await submissions.aclose()
        await collections.aclose()


async def _run_discover(args: argparse.Namespace, settings, submissions, collections) -> dict:
    """Run discover command."""
    from formlens.config import split_list
    from formlens.discovery import IntervalGate, SourceDiscovery

    gate = IntervalGate(settings.probe_interval)
    if args.collections:
        candidates = settings.collections
        if not candidates:
            candidates = [c.collection_id for c in await collections.list_collections()]
        discovery = SourceDiscovery(collections, gate=gate, probe_limit=settings.probe_limit)
        result = await discovery.discover_collections(candidates)
    else:
        candidates = split_list(args.namespaces) if args.namespaces else settings.namespaces
        discovery = SourceDiscovery(submissions, gate=gate, probe_limit=settings.probe_limit)
        result = await discovery.discover_sources(candidates)
    for line in result.report:
        logger.info(line)
    return result.model_dump(mode="json", by_alias=True)


async def _run_submissions(args: argparse.Namespace, settings, submissions, collections) -> dict:
    """Run submissions command."""
    from formlens.models.query import QueryOptions
    from formlens.pipeline import fetch_submissions

    filters = {}
    if args.form_id:
        filters["formId"] = args.form_id
    if args.status:
        filters["status"] = args.status
    options = QueryOptions(
        source_id=args.namespace,
        limit=args.limit or settings.default_limit,
        cursor=args.cursor,
        equality_filters=filters,
        sort_field=args.sort_field,
        sort_order=args.sort_order,
        search_query=args.search,
    )
    result = await fetch_submissions(submissions, options)
    return result.model_dump(mode="json", by_alias=True)


async def _run_forms(args: argparse.Namespace, settings, submissions, collections) -> dict:
    """Run forms command."""
    from formlens.api.handlers import forms_envelope
    from formlens.pipeline import list_forms

    forms = await list_forms(submissions, args.namespace)
    return forms_envelope(forms)


async def _run_fields(args: argparse.Namespace, settings, submissions, collections) -> dict:
    """Run fields command: descriptors in display order plus per-field statistics."""
    from formlens.models.query import QueryOptions
    from formlens.pipeline import build_field_view, fetch_submissions

    filters = {"formId": args.form_id} if args.form_id else {}
    options = QueryOptions(
        source_id=args.namespace,
        limit=args.limit or settings.default_limit,
        equality_filters=filters,
    )
    result = await fetch_submissions(submissions, options)
    registry = build_field_view(result.items)
    return {
        "recordCount": len(result.items),
        "fields": [
            {
                **d.model_dump(mode="json", by_alias=True),
                "statistics": registry.statistics(d.name).model_dump(mode="json", by_alias=True),
            }
            for d in registry.descriptors
        ],
    }


if __name__ == "__main__":
    main()
