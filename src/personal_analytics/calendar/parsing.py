"""Helpers for parsing Google Calendar API payloads into internal models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from personal_analytics.models import ProviderCalendar, ProviderEvent


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        # RFC3339; older interpreters reject the trailing Z.
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def calendar_list_entry_to_calendar(entry: dict[str, Any]) -> ProviderCalendar:
    """Convert a calendarList entry to ProviderCalendar.

    The user's own rename (summaryOverride) wins over the calendar's summary,
    matching the name shown in the Calendar UI.
    """

    name = entry.get("summaryOverride") or entry.get("summary") or ""
    return ProviderCalendar(id=str(entry.get("id") or ""), name=str(name))


def event_to_provider_event(item: dict[str, Any]) -> ProviderEvent:
    """Convert a Google Calendar API event resource to ProviderEvent.

    Args:
        item: events.list item.

    Returns:
        ProviderEvent: Normalized event. All-day events (start.date instead of
        start.dateTime) carry no timestamps.
    """

    start = item.get("start") or {}
    end = item.get("end") or {}
    is_all_day = "dateTime" not in start and "date" in start

    return ProviderEvent(
        event_id=str(item.get("id") or "") or None,
        title=str(item.get("summary") or ""),
        start_time=None if is_all_day else _parse_timestamp(start.get("dateTime")),
        end_time=None if is_all_day else _parse_timestamp(end.get("dateTime")),
        is_all_day=is_all_day,
    )
