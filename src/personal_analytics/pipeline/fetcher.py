"""Event ingestion for one day across the tracked calendars."""

from __future__ import annotations

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

import structlog

from personal_analytics.calendar import CalendarProvider
from personal_analytics.exceptions import NoCalendarsFoundError, ProviderFetchError
from personal_analytics.models import EventRecord, ProviderCalendar
from personal_analytics.periods import classify, resolve_timezone

logger = structlog.get_logger()

_END_OF_DAY = time(23, 59, 59, 999000)


def day_window(target_date: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Return the closed window [00:00:00.000, 23:59:59.999] of a local day."""
    start = datetime.combine(target_date, time.min, tzinfo=tz)
    end = datetime.combine(target_date, _END_OF_DAY, tzinfo=tz)
    return start, end


def resolve_calendars(
    available: list[ProviderCalendar],
    tracked_calendar_names: list[str],
) -> list[ProviderCalendar]:
    """Select the available calendars whose name is tracked.

    Names are compared exactly (case-sensitive). Provider order is kept.
    """
    tracked = set(tracked_calendar_names)
    resolved = [calendar for calendar in available if calendar.name in tracked]

    found = {calendar.name for calendar in resolved}
    missing = [name for name in tracked_calendar_names if name not in found]
    if missing:
        logger.warning("tracked_calendars_not_found", names=missing)

    return resolved


async def fetch_events(
    target_date: date,
    timezone: str | ZoneInfo,
    tracked_calendar_names: list[str],
    provider: CalendarProvider,
) -> list[EventRecord]:
    """Fetch the timed events of `target_date` from every tracked calendar.

    A calendar that fails for any reason is logged and skipped; the others
    still contribute.
    Records come grouped by calendar in resolution order, and in provider
    order within a calendar.

    Raises:
        ConfigurationError: If the timezone is invalid.
        NoCalendarsFoundError: If none of the tracked names match a calendar.
    """
    tz = timezone if isinstance(timezone, ZoneInfo) else resolve_timezone(timezone)
    start, end = day_window(target_date, tz)
    labels = classify(target_date, tz)

    logger.info(
        "fetching_events",
        target_date=target_date.isoformat(),
        week=labels.week_label,
        month=labels.month_label,
    )

    calendars = resolve_calendars(await provider.list_calendars(), tracked_calendar_names)
    if not calendars:
        logger.error("no_tracked_calendars_found", tracked=tracked_calendar_names)
        raise NoCalendarsFoundError(
            "No target calendars found. Check the tracked calendar names in the configuration."
        )
    logger.info("tracked_calendars_resolved", count=len(calendars))

    records: list[EventRecord] = []
    for calendar in calendars:
        try:
            events = await provider.get_events(calendar, start, end)
        except ProviderFetchError as exc:
            logger.error("calendar_fetch_failed", calendar=calendar.name, error=str(exc))
            continue
        except Exception as exc:  # noqa: BLE001
            logger.exception(
                "calendar_fetch_failed",
                calendar=calendar.name,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            continue

        kept = 0
        for event in events:
            if event.is_all_day:
                continue
            if event.start_time is None or event.end_time is None or event.end_time <= event.start_time:
                logger.warning(
                    "event_skipped_invalid_window",
                    calendar=calendar.name,
                    title=event.title,
                )
                continue

            records.append(
                EventRecord.from_event(
                    date=target_date,
                    title=event.title,
                    start_time=event.start_time.astimezone(tz),
                    end_time=event.end_time.astimezone(tz),
                    calendar_name=calendar.name,
                    labels=labels,
                )
            )
            kept += 1

        logger.info("events_fetched", calendar=calendar.name, count=kept)

    return records
