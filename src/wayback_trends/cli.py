"""Command-line interface for Wayback Trends.

Fetch, count, and chart the captures of one or more sites::

    wayback-trends fetch example.com example.org --granularity month \\
        --since 2015-01-01 --mode stacked_bar --chart activity.png

Label sites differently from their domain with ``--label DOMAIN=LABEL``.
When no domain is given, ``WAYBACK_TRENDS_DEFAULT_SITES`` is used.

Check that the CDX API is reachable::

    wayback-trends health

Exit codes:
    0: Success.
    1: Every site failed, ``--fail-fast`` aborted the run, or the CDX API
        is not healthy.
    2: Invalid arguments.
"""

from __future__ import annotations

import argparse
import json
import sys
import uuid
from datetime import date
from pathlib import Path

import structlog

from wayback_trends.analysis.aggregate import Granularity, aggregate, buckets_to_frame
from wayback_trends.analysis.export import export_buckets_csv, export_records_csv
from wayback_trends.analysis.render import RenderMode, render
from wayback_trends.cdx.fetcher import health_check
from wayback_trends.config.settings import Settings, get_settings
from wayback_trends.core.exceptions import WaybackTrendsError
from wayback_trends.core.logging_config import configure_logging, run_id_var
from wayback_trends.pipeline import run_analysis

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}; expected YYYY-MM-DD") from None


def _parse_labels(parser: argparse.ArgumentParser, pairs: list[str]) -> dict[str, str]:
    labels: dict[str, str] = {}
    for pair in pairs:
        domain, sep, label = pair.partition("=")
        if not sep or not domain.strip() or not label.strip():
            parser.error(f"--label expects DOMAIN=LABEL, got {pair!r}")
        labels[domain.strip()] = label.strip()
    return labels


def build_parser() -> argparse.ArgumentParser:
    """Build the ``wayback-trends`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="wayback-trends",
        description="Chart page-change activity of websites from the Wayback Machine CDX index.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging verbosity (DEBUG, INFO, WARNING, ...). Defaults to WAYBACK_TRENDS_LOG_LEVEL.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    fetch = sub.add_parser("fetch", help="Fetch, aggregate, and optionally chart captures.")
    fetch.add_argument("domains", nargs="*", metavar="DOMAIN", help="Bare hostnames to analyse.")
    fetch.add_argument(
        "--label",
        action="append",
        default=[],
        metavar="DOMAIN=LABEL",
        help="Site label for a domain (repeatable).",
    )
    fetch.add_argument(
        "--granularity",
        choices=[g.value for g in Granularity],
        default=Granularity.YEAR.value,
        help="Time bucket size (default: year).",
    )
    fetch.add_argument("--since", type=_iso_date, default=None, help="Ignore captures before YYYY-MM-DD.")
    fetch.add_argument(
        "--mode",
        choices=[m.value for m in RenderMode],
        default=RenderMode.LINE.value,
        help="Chart kind (default: line).",
    )
    fetch.add_argument("--chart", default=None, metavar="PATH", help="Write the chart to PATH.")
    fetch.add_argument("--records-csv", default=None, metavar="PATH", help="Write capture records as CSV.")
    fetch.add_argument("--buckets-csv", default=None, metavar="PATH", help="Write bucket counts as CSV.")
    fetch.add_argument(
        "--fail-fast",
        action="store_true",
        default=False,
        help="Abort on the first failing site instead of skipping it.",
    )

    sub.add_parser("health", help="Probe the CDX API and print the result as JSON.")
    return parser


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _resolve(path: str, settings: Settings) -> Path:
    candidate = Path(path)
    return candidate if candidate.is_absolute() else Path(settings.output_dir) / candidate


def _write(path: Path, payload: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(payload)
    logger.info("file written", path=str(path), bytes=len(payload))


def _cmd_fetch(args: argparse.Namespace, parser: argparse.ArgumentParser, settings: Settings) -> int:
    domains = args.domains or list(settings.default_sites)
    if not domains:
        parser.error("no DOMAIN given and WAYBACK_TRENDS_DEFAULT_SITES is empty")
    labels = _parse_labels(parser, args.label)

    try:
        result = run_analysis(domains, labels=labels, fail_fast=args.fail_fast, settings=settings)
    except WaybackTrendsError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        parser.error(str(exc))

    for domain, exc in result.failures.items():
        print(f"warning: skipped {domain}: {exc}", file=sys.stderr)
    if not result.succeeded:
        print("error: every site failed", file=sys.stderr)
        return 1

    buckets = aggregate(result.records, args.granularity, since=args.since)

    wide = buckets_to_frame(buckets)
    if wide.empty:
        print("No captures.")
    else:
        print(wide.to_string())

    if args.chart:
        render(
            buckets,
            args.mode,
            output_path=_resolve(args.chart, settings),
            granularity=args.granularity,
        )
    if args.records_csv:
        _write(_resolve(args.records_csv, settings), export_records_csv(result.records))
    if args.buckets_csv:
        _write(_resolve(args.buckets_csv, settings), export_buckets_csv(buckets))
    return 0


def _cmd_health(settings: Settings) -> int:
    report = health_check(settings=settings)
    print(json.dumps(report, indent=2))
    return 0 if report["status"] == "ok" else 1


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``wayback-trends`` console script."""
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()

    configure_logging(args.log_level or settings.log_level)
    token = run_id_var.set(uuid.uuid4().hex[:12])
    try:
        if args.command == "fetch":
            return _cmd_fetch(args, parser, settings)
        return _cmd_health(settings)
    finally:
        run_id_var.reset(token)


if __name__ == "__main__":
    sys.exit(main())
