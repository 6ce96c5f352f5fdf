"""Install the recurrence table into APScheduler."""

from __future__ import annotations

from collections.abc import Mapping
from zoneinfo import ZoneInfo

import structlog
from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.job import Job
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from personal_analytics.exceptions import ConfigurationError
from personal_analytics.scheduling.dispatcher import Operation, run_operation
from personal_analytics.scheduling.table import SCHEDULE, RecurrenceKind, RecurrenceRule

logger = structlog.get_logger()


def rule_to_trigger(rule: RecurrenceRule, timezone: ZoneInfo) -> CronTrigger:
    """Translate a recurrence rule into a cron trigger firing on the hour."""
    if rule.kind is RecurrenceKind.WEEKLY:
        assert rule.weekday is not None
        return CronTrigger(day_of_week=rule.weekday.value, hour=rule.hour, minute=0, timezone=timezone)
    if rule.kind is RecurrenceKind.MONTHLY:
        return CronTrigger(day=rule.day_of_month, hour=rule.hour, minute=0, timezone=timezone)
    return CronTrigger(hour=rule.hour, minute=0, timezone=timezone)


def create_scheduler(timezone: ZoneInfo) -> BlockingScheduler:
    """Create a blocking scheduler that runs one job at a time."""
    return BlockingScheduler(
        timezone=timezone,
        executors={"default": ThreadPoolExecutor(max_workers=1)},
    )


def install_schedule(
    scheduler: BaseScheduler,
    operations: Mapping[str, Operation],
    *,
    timezone: ZoneInfo,
    table: Mapping[str, RecurrenceRule] = SCHEDULE,
) -> list[Job]:
    """Replace every job on `scheduler` with one job per table entry.

    Previously installed jobs are removed first, so installing twice never
    yields duplicate invocations.

    Raises:
        ConfigurationError: If the table names an operation with no implementation.
    """
    unknown = [name for name in table if name not in operations]
    if unknown:
        raise ConfigurationError(f"No implementation for scheduled operations: {unknown}")

    removed = len(scheduler.get_jobs())
    scheduler.remove_all_jobs()
    logger.info("scheduled_jobs_cleared", count=removed)

    jobs: list[Job] = []
    for name, rule in table.items():
        job = scheduler.add_job(
            run_operation,
            trigger=rule_to_trigger(rule, timezone),
            args=[name, operations],
            id=name,
            name=name,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        jobs.append(job)
        logger.info("scheduled_job_installed", operation=name, rule=rule.describe())

    return jobs
