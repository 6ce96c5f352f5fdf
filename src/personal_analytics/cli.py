"""Command-line interface for Personal Analytics.

This module provides the main entry point for the CLI application. The
commands mirror the manual actions of the automation: initial setup, fetching
yesterday, backfilling a missed day, sending each report, listing calendar
names, and running the scheduler.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import date

import structlog

from personal_analytics import __version__
from personal_analytics.config import get_settings
from personal_analytics.exceptions import PersonalAnalyticsError
from personal_analytics.models import RAW_DATA_HEADERS, ReportFrequency
from personal_analytics.scheduling import (
    SCHEDULE,
    build_operations,
    create_scheduler,
    install_schedule,
)
from personal_analytics.store import RAW_DATA_TAB, InMemoryStore
from personal_analytics.tracker import TimeTracker

logger = structlog.get_logger()


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="personal-analytics",
        description="Calendar time tracking into Google Sheets",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup", help="Create the sheet tabs, headers and Config values")

    fetch_parser = subparsers.add_parser("fetch", help="Fetch a day's events into the data log")
    when = fetch_parser.add_mutually_exclusive_group()
    when.add_argument("--date", type=_parse_date, default=None, help="Day to fetch (YYYY-MM-DD)")
    when.add_argument(
        "--days-ago",
        type=int,
        default=None,
        help="Fetch the day N days before today (default: 1, i.e. yesterday)",
    )
    fetch_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the rows instead of writing them to the sheet",
    )

    backfill_parser = subparsers.add_parser(
        "backfill",
        help="Fetch a missed prior day (default: the day before yesterday)",
    )
    backfill_parser.add_argument("date", type=_parse_date, nargs="?", default=None)
    backfill_parser.add_argument("--dry-run", action="store_true", help="Print rows only")

    report_parser = subparsers.add_parser("send-report", help="Email one rendered report")
    report_parser.add_argument("frequency", choices=[f.value for f in ReportFrequency])
    report_parser.add_argument(
        "--force",
        action="store_true",
        help="Send quarterly/annual reports outside their month",
    )

    subparsers.add_parser("list-calendars", help="Print the names of all your calendars")

    schedule_parser = subparsers.add_parser("schedule", help="Show or run the automation schedule")
    schedule_parser.add_argument(
        "--run",
        action="store_true",
        help="Install the schedule and run it in the foreground",
    )

    return parser


def _print_rows(rows: list[list[object]]) -> None:
    for row in rows:
        print("\t".join("" if value is None else str(value) for value in row))


async def _cmd_setup(tracker: TimeTracker) -> int:
    await tracker.authenticate()
    created = await tracker.setup()
    print(f"Setup complete. Created tabs: {', '.join(created) or 'none'}")
    return 0


async def _cmd_fetch(tracker: TimeTracker, args: argparse.Namespace) -> int:
    dry_run = bool(args.dry_run)
    if dry_run:
        tracker.store = InMemoryStore({RAW_DATA_TAB: [list(RAW_DATA_HEADERS)]})
    await tracker.authenticate()

    if args.command == "backfill":
        count = await tracker.backfill(args.date)
    elif args.date is not None:
        count = await tracker.fetch_and_log(args.date)
    elif args.days_ago is not None:
        count = await tracker.backfill(days_ago=args.days_ago)
    else:
        count = await tracker.fetch_yesterday()

    if dry_run:
        _print_rows(await tracker.store.read_rows(RAW_DATA_TAB))
        print(f"Dry run: {count} events fetched, nothing written.")
    else:
        print(f"Logged {count} events.")
    return 0


async def _cmd_send_report(tracker: TimeTracker, args: argparse.Namespace) -> int:
    await tracker.authenticate()
    frequency = ReportFrequency(args.frequency)
    if frequency is ReportFrequency.QUARTERLY and not args.force:
        sent = await tracker.send_quarterly_report()
    elif frequency is ReportFrequency.ANNUAL and not args.force:
        sent = await tracker.send_annual_report()
    else:
        sent = await tracker.send_report(frequency)

    print(f"{frequency.value.title()} report {'sent' if sent else 'not sent'}.")
    return 0 if sent else 1


async def _cmd_list_calendars(tracker: TimeTracker) -> int:
    await tracker.authenticate()
    names = await tracker.list_calendar_names()
    print("--- YOUR CALENDAR NAMES ---")
    for name in names:
        marker = "*" if name in tracker.settings.tracked_calendars else " "
        print(f"{marker} {name}")
    print("(* = tracked)")
    return 0


def _cmd_schedule(tracker: TimeTracker, args: argparse.Namespace) -> int:
    for name, rule in SCHEDULE.items():
        print(f"{name}: {rule.describe()}")
    if not args.run:
        return 0

    asyncio.run(tracker.authenticate())
    scheduler = create_scheduler(tracker.timezone)
    install_schedule(scheduler, build_operations(tracker), timezone=tracker.timezone)
    logger.info("scheduler_starting", jobs=len(SCHEDULE))
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("scheduler_stopped")
    return 0


def _run(parsed: argparse.Namespace) -> int:
    tracker = TimeTracker()

    if parsed.command == "setup":
        return asyncio.run(_cmd_setup(tracker))
    if parsed.command in ("fetch", "backfill"):
        return asyncio.run(_cmd_fetch(tracker, parsed))
    if parsed.command == "send-report":
        return asyncio.run(_cmd_send_report(tracker, parsed))
    if parsed.command == "list-calendars":
        return asyncio.run(_cmd_list_calendars(tracker))
    if parsed.command == "schedule":
        return _cmd_schedule(tracker, parsed)

    logger.error("unknown_command", command=parsed.command)
    return 2


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Personal Analytics CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, 1 for a handled failure, 2 for usage errors).
    """
    if args is None:
        args = sys.argv[1:]

    settings = get_settings()

    # Configure logging
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
    )

    logger.info("personal_analytics_started", version=__version__, debug=settings.debug)

    parser = _build_parser()
    parsed = parser.parse_args(args)

    try:
        return _run(parsed)
    except PersonalAnalyticsError as exc:
        logger.error("command_failed", command=parsed.command, error_type=type(exc).__name__, error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
