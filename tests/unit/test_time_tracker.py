"""Unit tests for the TimeTracker orchestrator."""

from datetime import date

import pytest
from structlog.testing import capture_logs

from conftest import FakeCalendarProvider, RecordingMailer, timed_event, utc
from personal_analytics.exceptions import NoCalendarsFoundError, ProviderFetchError, StoreError
from personal_analytics.models import RAW_DATA_HEADERS
from personal_analytics.store import RAW_DATA_TAB, REPORTS_TAB, InMemoryStore
from personal_analytics.tracker import TimeTracker

BODY = "<h2>Quarter in review</h2><p>312 hours tracked.</p>"


class TestFetchAndLog:
    """Test suite for logging a day's events."""

    @pytest.mark.asyncio
    async def test_logs_one_event(
        self, tracker: TimeTracker, calendar_provider: FakeCalendarProvider, store: InMemoryStore
    ) -> None:
        calendar_provider.add_calendar(
            "Productivity & Work",
            [timed_event("Deep work", utc(2025, 10, 14, 9), utc(2025, 10, 14, 10, 30))],
        )

        count = await tracker.fetch_and_log(date(2025, 10, 14))

        assert count == 1
        assert await store.read_rows(RAW_DATA_TAB) == [
            RAW_DATA_HEADERS,
            [
                "2025-10-14",
                "Deep work",
                "2025-10-14 09:00:00",
                "2025-10-14 10:30:00",
                1.5,
                "Productivity & Work",
                "2025-W42",
                "2025-10",
                "2025-Q4",
                "2025",
            ],
        ]
        assert (RAW_DATA_TAB, "data") in store.formatted

    @pytest.mark.asyncio
    async def test_failing_calendar_does_not_block_others(
        self, tracker: TimeTracker, calendar_provider: FakeCalendarProvider, store: InMemoryStore
    ) -> None:
        calendar_provider.add_calendar("Productivity & Work", error=ProviderFetchError("timeout"))
        calendar_provider.add_calendar(
            "Sleep",
            [
                timed_event("Night", utc(2025, 10, 14, 0), utc(2025, 10, 14, 7)),
                timed_event("Nap", utc(2025, 10, 14, 14), utc(2025, 10, 14, 14, 30)),
            ],
        )

        with capture_logs() as logs:
            count = await tracker.fetch_and_log(date(2025, 10, 14))

        assert count == 2
        assert [row[1] for row in (await store.read_rows(RAW_DATA_TAB))[1:]] == ["Night", "Nap"]
        assert any(log["event"] == "calendar_fetch_failed" for log in logs)

    @pytest.mark.asyncio
    async def test_no_tracked_calendars_appends_nothing(
        self, tracker: TimeTracker, calendar_provider: FakeCalendarProvider, store: InMemoryStore
    ) -> None:
        calendar_provider.add_calendar("Birthdays")

        with pytest.raises(NoCalendarsFoundError):
            await tracker.fetch_and_log(date(2025, 10, 14))

        assert await store.read_rows(RAW_DATA_TAB) == [RAW_DATA_HEADERS]

    @pytest.mark.asyncio
    async def test_refetching_a_day_duplicates_rows(
        self, tracker: TimeTracker, calendar_provider: FakeCalendarProvider, store: InMemoryStore
    ) -> None:
        calendar_provider.add_calendar(
            "Sleep", [timed_event("Night", utc(2025, 10, 14, 0), utc(2025, 10, 14, 7))]
        )

        await tracker.fetch_and_log(date(2025, 10, 14))
        await tracker.fetch_and_log(date(2025, 10, 14))

        rows = await store.read_rows(RAW_DATA_TAB)
        assert len(rows) == 3
        assert rows[1] == rows[2]

    @pytest.mark.asyncio
    async def test_empty_day_logs_nothing(
        self, tracker: TimeTracker, calendar_provider: FakeCalendarProvider, store: InMemoryStore
    ) -> None:
        calendar_provider.add_calendar("Sleep")

        assert await tracker.fetch_and_log(date(2025, 10, 14)) == 0
        assert await store.read_rows(RAW_DATA_TAB) == [RAW_DATA_HEADERS]
        assert store.formatted == set()

    @pytest.mark.asyncio
    async def test_formatting_failure_keeps_the_fetch_successful(
        self,
        tracker: TimeTracker,
        calendar_provider: FakeCalendarProvider,
        store: InMemoryStore,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        async def failing_format(tab: str) -> None:
            raise StoreError("429 Too Many Requests")

        monkeypatch.setattr(store, "format_raw_data", failing_format)
        calendar_provider.add_calendar(
            "Sleep", [timed_event("Night", utc(2025, 10, 14, 0), utc(2025, 10, 14, 7))]
        )

        assert await tracker.fetch_and_log(date(2025, 10, 14)) == 1
        assert len(await store.read_rows(RAW_DATA_TAB)) == 2


class TestRelativeFetches:
    """Test suite for yesterday and backfill fetches."""

    @pytest.mark.asyncio
    async def test_fetch_yesterday(
        self, tracker: TimeTracker, calendar_provider: FakeCalendarProvider
    ) -> None:
        calendar_provider.add_calendar("Sleep")

        await tracker.fetch_yesterday(today=date(2025, 10, 15))

        _, start, end = calendar_provider.requests[0]
        assert start == utc(2025, 10, 14)
        assert end.date() == date(2025, 10, 14)

    @pytest.mark.asyncio
    async def test_backfill_defaults_to_day_before_yesterday(
        self, tracker: TimeTracker, calendar_provider: FakeCalendarProvider
    ) -> None:
        calendar_provider.add_calendar("Sleep")

        await tracker.backfill(today=date(2025, 10, 15))

        assert calendar_provider.requests[0][1] == utc(2025, 10, 13)

    @pytest.mark.asyncio
    async def test_backfill_explicit_date(
        self, tracker: TimeTracker, calendar_provider: FakeCalendarProvider
    ) -> None:
        calendar_provider.add_calendar("Sleep")

        await tracker.backfill(date(2025, 9, 30), today=date(2025, 10, 15))

        assert calendar_provider.requests[0][1] == utc(2025, 9, 30)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("target", [date(2025, 10, 15), date(2025, 10, 20)])
    async def test_backfill_rejects_today_and_future(
        self, tracker: TimeTracker, calendar_provider: FakeCalendarProvider, target: date
    ) -> None:
        with pytest.raises(ValueError):
            await tracker.backfill(target, today=date(2025, 10, 15))
        assert calendar_provider.requests == []


class TestReports:
    """Test suite for report sending and its calendar gates."""

    @pytest.fixture
    def reports_tracker(self, tracker: TimeTracker) -> TimeTracker:
        grid = [[""] * 22 for _ in range(5)]
        for subject_col in (5, 9, 13, 17, 21):
            grid[3][subject_col] = "Report"
            grid[4][subject_col] = BODY
        tracker.store.tabs[REPORTS_TAB] = grid
        return tracker

    @pytest.mark.asyncio
    async def test_daily_weekly_monthly(
        self, reports_tracker: TimeTracker, mailer: RecordingMailer
    ) -> None:
        assert await reports_tracker.send_daily_report() is True
        assert await reports_tracker.send_weekly_report() is True
        assert await reports_tracker.send_monthly_report() is True
        assert len(mailer.sent) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("today", "expected"),
        [(date(2025, 10, 1), True), (date(2025, 11, 1), False), (date(2026, 1, 1), True)],
    )
    async def test_quarterly_gate(
        self, reports_tracker: TimeTracker, mailer: RecordingMailer, today: date, expected: bool
    ) -> None:
        assert await reports_tracker.send_quarterly_report(today=today) is expected
        assert len(mailer.sent) == int(expected)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("today", "expected"),
        [(date(2026, 1, 1), True), (date(2025, 4, 1), False)],
    )
    async def test_annual_gate(
        self, reports_tracker: TimeTracker, mailer: RecordingMailer, today: date, expected: bool
    ) -> None:
        assert await reports_tracker.send_annual_report(today=today) is expected
        assert len(mailer.sent) == int(expected)


class TestSetupAndCalendars:
    """Test suite for setup and calendar listing."""

    @pytest.mark.asyncio
    async def test_setup_on_existing_raw_data(self, tracker: TimeTracker, store: InMemoryStore) -> None:
        created = await tracker.setup()

        assert RAW_DATA_TAB not in created
        assert "Config" in created
        assert (await store.read_rows(RAW_DATA_TAB))[0] == RAW_DATA_HEADERS

    @pytest.mark.asyncio
    async def test_list_calendar_names(
        self, tracker: TimeTracker, calendar_provider: FakeCalendarProvider
    ) -> None:
        calendar_provider.add_calendar("Sleep")
        calendar_provider.add_calendar("Birthdays")

        assert await tracker.list_calendar_names() == ["Sleep", "Birthdays"]

    @pytest.mark.asyncio
    async def test_authenticate_skips_non_google_clients(self, tracker: TimeTracker) -> None:
        await tracker.authenticate()
