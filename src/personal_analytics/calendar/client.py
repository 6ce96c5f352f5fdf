"""Google Calendar API client implementation.

This module provides the calendar provider the fetch pipeline reads from.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any, Protocol

import structlog

from personal_analytics.calendar.parsing import (
    calendar_list_entry_to_calendar,
    event_to_provider_event,
)
from personal_analytics.exceptions import ProviderFetchError
from personal_analytics.google_auth import GoogleServiceClient
from personal_analytics.models import ProviderCalendar, ProviderEvent

logger = structlog.get_logger()

_PAGE_SIZE = 250


class CalendarProvider(Protocol):
    """What the fetch pipeline needs from a calendar source."""

    async def list_calendars(self) -> list[ProviderCalendar]: ...

    async def get_events(
        self,
        calendar: ProviderCalendar,
        start: datetime,
        end: datetime,
    ) -> list[ProviderEvent]: ...


class GoogleCalendarClient(GoogleServiceClient):
    """Google Calendar API client for read-only event access."""

    api_name = "calendar"
    api_version = "v3"

    async def list_calendars(self) -> list[ProviderCalendar]:
        """List the calendars on the user's calendar list.

        Returns:
            Calendars in the order the API returns them.

        Raises:
            ProviderFetchError: If the API request fails.
        """

        self._ensure_authenticated()
        logger.info("listing_calendars")

        try:
            entries = await asyncio.to_thread(self._list_calendars_sync)
        except Exception as exc:  # noqa: BLE001
            logger.exception("calendar_list_failed", error=str(exc))
            raise ProviderFetchError(str(exc)) from exc

        return [calendar_list_entry_to_calendar(entry) for entry in entries]

    async def get_events(
        self,
        calendar: ProviderCalendar,
        start: datetime,
        end: datetime,
    ) -> list[ProviderEvent]:
        """Get the events of one calendar overlapping [start, end].

        Recurring events are expanded into their instances.

        Raises:
            ProviderFetchError: If the API request fails.
        """

        self._ensure_authenticated()
        logger.info(
            "getting_events",
            calendar=calendar.name,
            start=start.isoformat(),
            end=end.isoformat(),
        )

        try:
            items = await asyncio.to_thread(
                self._list_events_sync,
                calendar.id,
                start.isoformat(timespec="milliseconds"),
                end.isoformat(timespec="milliseconds"),
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("calendar_get_events_failed", calendar=calendar.name, error=str(exc))
            raise ProviderFetchError(f"{calendar.name}: {exc}") from exc

        return [event_to_provider_event(item) for item in items]

    def _list_calendars_sync(self) -> list[dict[str, Any]]:
        service = self._ensure_authenticated()
        entries: list[dict[str, Any]] = []

        page_token: str | None = None
        while True:
            response = service.calendarList().list(pageToken=page_token).execute()
            entries.extend(response.get("items", []) or [])
            page_token = response.get("nextPageToken")
            if page_token is None:
                break

        return entries

    def _list_events_sync(self, calendar_id: str, time_min: str, time_max: str) -> list[dict[str, Any]]:
        service = self._ensure_authenticated()
        items: list[dict[str, Any]] = []

        page_token: str | None = None
        while True:
            request = service.events().list(
                calendarId=calendar_id,
                timeMin=time_min,
                timeMax=time_max,
                singleEvents=True,
                orderBy="startTime",
                maxResults=_PAGE_SIZE,
                pageToken=page_token,
            )
            response = request.execute()
            items.extend(response.get("items", []) or [])
            page_token = response.get("nextPageToken")
            if page_token is None:
                break

        return items
