"""Time tracker orchestration.

This module provides the object that ties the calendar provider, the data log
and the email transport together into the operations the command line and the
scheduler run.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

import structlog

from personal_analytics.calendar import CalendarProvider, GoogleCalendarClient
from personal_analytics.config import Settings
from personal_analytics.gmail import GmailSender
from personal_analytics.google_auth import GoogleServiceClient
from personal_analytics.models import ReportFrequency
from personal_analytics.periods import resolve_timezone
from personal_analytics.pipeline import append, fetch_events
from personal_analytics.reports import EmailTransport, send_report
from personal_analytics.scheduling.table import is_quarter_start, is_year_start
from personal_analytics.store import SheetsStore, TabularStore, setup_sheet_structure

logger = structlog.get_logger()


class TimeTracker:
    """Main time tracking service.

    This service coordinates fetching calendar events into the data log,
    preparing the spreadsheet, and emailing the rendered reports.
    """

    def __init__(
        self,
        calendar: CalendarProvider | None = None,
        store: TabularStore | None = None,
        mailer: EmailTransport | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the tracker.

        Args:
            calendar: Calendar provider. If None, creates a Google Calendar client.
            store: Data log store. If None, creates a Google Sheets store.
            mailer: Email transport. If None, creates a Gmail sender.
            settings: Application settings. If None, uses default settings.

        Raises:
            ConfigurationError: If the configured timezone is invalid.
        """
        from personal_analytics.config import get_settings

        self.settings = settings or get_settings()
        self.timezone = resolve_timezone(self.settings.timezone)
        self.calendar = calendar or GoogleCalendarClient(self.settings)
        self.store = store or SheetsStore(self.settings)
        self.mailer = mailer or GmailSender(self.settings)
        logger.info("time_tracker_initialized", timezone=self.settings.timezone)

    async def authenticate(self) -> None:
        """Authenticate every Google-backed client."""
        for client in (self.calendar, self.store, self.mailer):
            if isinstance(client, GoogleServiceClient):
                await client.authenticate()

    def today(self) -> date:
        """Current day in the configured timezone."""
        return datetime.now(self.timezone).date()

    async def fetch_and_log(self, target_date: date) -> int:
        """Fetch one day's events and append them to the data log.

        Returns:
            Number of rows appended.

        Raises:
            NoCalendarsFoundError: If no tracked calendar could be resolved.
        """
        records = await fetch_events(
            target_date,
            self.timezone,
            self.settings.tracked_calendars,
            self.calendar,
        )
        appended = await append(self.store, records)
        if appended:
            logger.info("events_logged", target_date=target_date.isoformat(), count=appended)
        else:
            logger.info("no_events_found", target_date=target_date.isoformat())
        return appended

    async def fetch_yesterday(self, today: date | None = None) -> int:
        """Log yesterday's events; the daily scheduled fetch."""
        return await self.fetch_and_log((today or self.today()) - timedelta(days=1))

    async def backfill(
        self,
        target_date: date | None = None,
        *,
        days_ago: int = 2,
        today: date | None = None,
    ) -> int:
        """Log a prior day's events, for recovering from a missed run.

        Defaults to the day before yesterday.

        Raises:
            ValueError: If the target is not before today.
        """
        current = today or self.today()
        target = target_date or current - timedelta(days=days_ago)
        if target >= current:
            raise ValueError(f"Backfill date must be before {current.isoformat()}, got {target.isoformat()}")
        logger.info("backfill_started", target_date=target.isoformat())
        return await self.fetch_and_log(target)

    async def send_report(self, frequency: ReportFrequency | str) -> bool:
        """Email one rendered report. See personal_analytics.reports.send_report."""
        return await send_report(
            frequency,
            store=self.store,
            mailer=self.mailer,
            settings=self.settings,
        )

    async def send_daily_report(self) -> bool:
        return await self.send_report(ReportFrequency.DAILY)

    async def send_weekly_report(self) -> bool:
        return await self.send_report(ReportFrequency.WEEKLY)

    async def send_monthly_report(self) -> bool:
        return await self.send_report(ReportFrequency.MONTHLY)

    async def send_quarterly_report(self, today: date | None = None) -> bool:
        """Send the quarterly report, but only in the first month of a quarter."""
        if not is_quarter_start(today or self.today()):
            logger.info("quarterly_report_skipped", reason="not the first month of a quarter")
            return False
        return await self.send_report(ReportFrequency.QUARTERLY)

    async def send_annual_report(self, today: date | None = None) -> bool:
        """Send the annual report, but only in January."""
        if not is_year_start(today or self.today()):
            logger.info("annual_report_skipped", reason="not January")
            return False
        return await self.send_report(ReportFrequency.ANNUAL)

    async def setup(self) -> list[str]:
        """Create the spreadsheet tabs, headers and Config values.

        Returns:
            Names of newly created tabs.
        """
        logger.info("initial_setup_started")
        created = await setup_sheet_structure(self.store, self.settings)
        logger.info("initial_setup_completed", created=created)
        return created

    async def list_calendar_names(self) -> list[str]:
        """Names of every calendar the provider exposes, for checking the tracked names."""
        names = [calendar.name for calendar in await self.calendar.list_calendars()]
        logger.info("calendar_names_listed", count=len(names))
        return names
