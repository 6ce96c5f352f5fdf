"""Report delivery.

Report subjects and bodies are rendered by formulas in the "Reports" tab.
This module only reads the rendered text at a fixed address per frequency
and forwards it by email; it knows nothing about how the text is produced.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import structlog

from personal_analytics.config import Settings
from personal_analytics.exceptions import EmailDispatchError, StoreError
from personal_analytics.models import ReportFrequency
from personal_analytics.store import REPORTS_TAB, TabularStore

logger = structlog.get_logger()

# Bodies shorter than this are placeholders, not rendered reports.
MIN_BODY_LENGTH = 20


class EmailTransport(Protocol):
    async def send(self, to: str, subject: str, html_body: str, cc: str | None = None) -> str: ...


@dataclass(frozen=True)
class ReportCells:
    """Where a report's rendered subject and body live in the Reports tab."""

    subject: str
    body: str


# Each report uses two data columns followed by two content columns.
REPORT_CELLS: dict[ReportFrequency, ReportCells] = {
    ReportFrequency.DAILY: ReportCells(subject="F4", body="F5"),
    ReportFrequency.WEEKLY: ReportCells(subject="J4", body="J5"),
    ReportFrequency.MONTHLY: ReportCells(subject="N4", body="N5"),
    ReportFrequency.QUARTERLY: ReportCells(subject="R4", body="R5"),
    ReportFrequency.ANNUAL: ReportCells(subject="V4", body="V5"),
}


def is_rendered_body(body: str) -> bool:
    """Whether a body looks like a finished report rather than a placeholder or raw formula."""
    return bool(body) and len(body) >= MIN_BODY_LENGTH and not body.startswith("=")


async def send_report(
    frequency: ReportFrequency | str,
    *,
    store: TabularStore,
    mailer: EmailTransport,
    settings: Settings,
) -> bool:
    """Read one rendered report from the Reports tab and email it.

    Store and transport failures are logged and reported as False; they are
    never retried.

    Returns:
        True if an email was sent.

    Raises:
        ConfigurationError: If no recipient is configured.
    """
    try:
        frequency = ReportFrequency(frequency)
    except ValueError:
        logger.error("invalid_report_frequency", frequency=str(frequency))
        return False

    recipient = settings.require_recipient()
    cells = REPORT_CELLS[frequency]

    try:
        subject = await store.read_display_value(REPORTS_TAB, cells.subject)
        body = await store.read_display_value(REPORTS_TAB, cells.body)

        if not is_rendered_body(body):
            logger.warning("report_body_not_rendered", frequency=frequency.value, length=len(body))
            return False

        await mailer.send(recipient, subject, body, cc=settings.email_cc or None)
    except (StoreError, EmailDispatchError) as exc:
        logger.error("report_send_failed", frequency=frequency.value, error=str(exc))
        return False

    logger.info("report_sent", frequency=frequency.value, to=recipient)
    return True
