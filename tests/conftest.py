"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from personal_analytics.models import RAW_DATA_HEADERS, ProviderCalendar, ProviderEvent


class FakeCalendarProvider:
    """Calendar provider serving canned calendars and events."""

    def __init__(self) -> None:
        self.calendars: list[ProviderCalendar] = []
        self.events: dict[str, list[ProviderEvent] | Exception] = {}
        self.requests: list[tuple[str, datetime, datetime]] = []

    def add_calendar(
        self,
        name: str,
        events: list[ProviderEvent] | None = None,
        error: Exception | None = None,
    ) -> ProviderCalendar:
        calendar = ProviderCalendar(id=f"cal-{len(self.calendars) + 1}", name=name)
        self.calendars.append(calendar)
        self.events[calendar.id] = error if error is not None else list(events or [])
        return calendar

    async def list_calendars(self) -> list[ProviderCalendar]:
        return list(self.calendars)

    async def get_events(
        self, calendar: ProviderCalendar, start: datetime, end: datetime
    ) -> list[ProviderEvent]:
        self.requests.append((calendar.name, start, end))
        result = self.events.get(calendar.id, [])
        if isinstance(result, Exception):
            raise result
        return list(result)


class RecordingMailer:
    """Email transport that records what it was asked to send."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.sent: list[dict[str, str | None]] = []

    async def send(self, to: str, subject: str, html_body: str, cc: str | None = None) -> str:
        if self.error is not None:
            raise self.error
        self.sent.append({"to": to, "subject": subject, "html_body": html_body, "cc": cc})
        return f"sent-{len(self.sent)}"


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def timed_event(title: str, start: datetime, end: datetime) -> ProviderEvent:
    return ProviderEvent(title=title, start_time=start, end_time=end, is_all_day=False)


def all_day_event(title: str) -> ProviderEvent:
    return ProviderEvent(title=title, is_all_day=True)


@pytest.fixture
def mock_settings():
    """Provide mock settings for testing."""
    from personal_analytics.config import Settings

    return Settings(
        sheet_id="sheet-123",
        email_recipient="me@example.com",
        email_cc="",
        tracked_calendars=["Productivity & Work", "Sleep"],
        productive_calendars=["Productivity & Work"],
        unproductive_calendars=["Unproductive"],
        timezone="UTC",
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def calendar_provider() -> FakeCalendarProvider:
    return FakeCalendarProvider()


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def store():
    """In-memory data log holding only the Raw Data header row."""
    from personal_analytics.store import RAW_DATA_TAB, InMemoryStore

    return InMemoryStore({RAW_DATA_TAB: [list(RAW_DATA_HEADERS)]})


@pytest.fixture
def tracker(mock_settings, calendar_provider, store, mailer):
    from personal_analytics.tracker import TimeTracker

    return TimeTracker(
        calendar=calendar_provider,
        store=store,
        mailer=mailer,
        settings=mock_settings,
    )
