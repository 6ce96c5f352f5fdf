"""Run scheduled operations by name."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any

import structlog

from personal_analytics.exceptions import PersonalAnalyticsError
from personal_analytics.scheduling.table import (
    FETCH_YESTERDAY,
    SEND_ANNUAL_REPORT,
    SEND_DAILY_REPORT,
    SEND_MONTHLY_REPORT,
    SEND_QUARTERLY_REPORT,
    SEND_WEEKLY_REPORT,
)

if TYPE_CHECKING:
    from personal_analytics.tracker import TimeTracker

logger = structlog.get_logger()

Operation = Callable[[], Awaitable[Any]]


def build_operations(tracker: TimeTracker) -> dict[str, Operation]:
    """Map every scheduled operation name to the tracker coroutine it runs."""
    return {
        FETCH_YESTERDAY: tracker.fetch_yesterday,
        SEND_DAILY_REPORT: tracker.send_daily_report,
        SEND_WEEKLY_REPORT: tracker.send_weekly_report,
        SEND_MONTHLY_REPORT: tracker.send_monthly_report,
        SEND_QUARTERLY_REPORT: tracker.send_quarterly_report,
        SEND_ANNUAL_REPORT: tracker.send_annual_report,
    }


async def dispatch(name: str, operations: Mapping[str, Operation]) -> bool:
    """Run one operation to completion.

    Errors raised by the operation end here as a logged message.

    Returns:
        True if the operation completed without error.
    """
    operation = operations.get(name)
    if operation is None:
        logger.error("unknown_operation", operation=name)
        return False

    logger.info("operation_started", operation=name)
    try:
        result = await operation()
    except PersonalAnalyticsError as exc:
        logger.error(
            "operation_failed",
            operation=name,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return False

    logger.info("operation_completed", operation=name, result=result)
    return True


def run_operation(name: str, operations: Mapping[str, Operation]) -> bool:
    """Blocking entry point for scheduler jobs."""
    return asyncio.run(dispatch(name, operations))
