"""Recurrence table for the automated operations.

The table is plain data: operation name to recurrence rule. Installing it
into a real scheduler is the job of personal_analytics.scheduling.installer.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RecurrenceKind(str, Enum):
    """Recurrence kind enumeration."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Weekday(str, Enum):
    """Day of week, using cron's three-letter names."""

    MONDAY = "mon"
    TUESDAY = "tue"
    WEDNESDAY = "wed"
    THURSDAY = "thu"
    FRIDAY = "fri"
    SATURDAY = "sat"
    SUNDAY = "sun"


class RecurrenceRule(BaseModel):
    """When an operation fires: at `hour` every day, every `weekday`, or every `day_of_month`."""

    model_config = ConfigDict(frozen=True)

    kind: RecurrenceKind
    hour: int = Field(ge=0, le=23, description="Hour of day the operation fires at")
    weekday: Weekday | None = Field(default=None, description="Weekly rules only")
    day_of_month: int | None = Field(default=None, ge=1, le=31, description="Monthly rules only")

    @model_validator(mode="after")
    def _check_kind_fields(self) -> RecurrenceRule:
        if self.kind is RecurrenceKind.WEEKLY:
            valid = self.weekday is not None and self.day_of_month is None
        elif self.kind is RecurrenceKind.MONTHLY:
            valid = self.day_of_month is not None and self.weekday is None
        else:
            valid = self.weekday is None and self.day_of_month is None
        if not valid:
            raise ValueError(f"fields do not match a {self.kind.value} rule")
        return self

    @classmethod
    def daily(cls, hour: int) -> RecurrenceRule:
        return cls(kind=RecurrenceKind.DAILY, hour=hour)

    @classmethod
    def weekly(cls, weekday: Weekday, hour: int) -> RecurrenceRule:
        return cls(kind=RecurrenceKind.WEEKLY, weekday=weekday, hour=hour)

    @classmethod
    def monthly(cls, day_of_month: int, hour: int) -> RecurrenceRule:
        return cls(kind=RecurrenceKind.MONTHLY, day_of_month=day_of_month, hour=hour)

    def describe(self) -> str:
        at = f"{self.hour:02d}:00"
        if self.kind is RecurrenceKind.WEEKLY:
            assert self.weekday is not None
            return f"every {self.weekday.name.title()} @ {at}"
        if self.kind is RecurrenceKind.MONTHLY:
            return f"day {self.day_of_month} of every month @ {at}"
        return f"daily @ {at}"


FETCH_YESTERDAY = "fetch_yesterday"
SEND_DAILY_REPORT = "send_daily_report"
SEND_WEEKLY_REPORT = "send_weekly_report"
SEND_MONTHLY_REPORT = "send_monthly_report"
SEND_QUARTERLY_REPORT = "send_quarterly_report"
SEND_ANNUAL_REPORT = "send_annual_report"

# Quarterly and annual reports fire monthly; the operations themselves check
# is_quarter_start / is_year_start when they run.
SCHEDULE: Mapping[str, RecurrenceRule] = MappingProxyType(
    {
        FETCH_YESTERDAY: RecurrenceRule.daily(hour=4),
        SEND_DAILY_REPORT: RecurrenceRule.daily(hour=7),
        SEND_WEEKLY_REPORT: RecurrenceRule.weekly(Weekday.MONDAY, hour=8),
        SEND_MONTHLY_REPORT: RecurrenceRule.monthly(1, hour=8),
        SEND_QUARTERLY_REPORT: RecurrenceRule.monthly(1, hour=9),
        SEND_ANNUAL_REPORT: RecurrenceRule.monthly(1, hour=9),
    }
)


def is_quarter_start(today: date) -> bool:
    """True in January, April, July and October."""
    return today.month in (1, 4, 7, 10)


def is_year_start(today: date) -> bool:
    """True in January."""
    return today.month == 1
