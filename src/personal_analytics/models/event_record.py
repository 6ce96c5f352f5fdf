"""Event record model written to the "Raw Data" log.

A record exists only for the length of one fetch run: it is built from a
provider event, appended to the log as a row, and then forgotten. There is no
primary key and no update path.
"""

from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

RAW_DATA_HEADERS: list[str] = [
    "Date",
    "Event Title",
    "Start Time",
    "End Time",
    "Duration (Decimal)",
    "Calendar",
    "Week-Year",
    "Month-Year",
    "Quarter-Year",
    "Year",
]

_DATE_FORMAT = "%Y-%m-%d"
_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Leading characters that make Sheets read USER_ENTERED input as a formula,
# number, date or time instead of text.
_COERCED_PREFIXES = ("=", "+", "-", "@", "'", *"0123456789")
_BOOLEAN_LITERALS = {"TRUE", "FALSE"}


def literal_text(value: str) -> str:
    """Quote-prefix `value` when Sheets would otherwise parse it.

    The leading apostrophe is consumed by Sheets and never shown, so ordinary
    titles are left as they are and only ambiguous ones are marked.
    """
    stripped = value.strip()
    if stripped.startswith(_COERCED_PREFIXES) or stripped.upper() in _BOOLEAN_LITERALS:
        return f"'{value}"
    return value


class PeriodLabels(BaseModel):
    """Calendar-period labels for a single day."""

    model_config = ConfigDict(frozen=True)

    week_label: str = Field(description="ISO week, e.g. 2025-W42")
    month_label: str = Field(description="Year and month, e.g. 2025-10")
    quarter_label: str = Field(description="Year and quarter, e.g. 2025-Q4")
    year_label: str = Field(description="Four-digit year, e.g. 2025")


class EventRecord(BaseModel):
    """One timed calendar event, labelled with the periods of its day."""

    model_config = ConfigDict(frozen=True)

    date: dt.date = Field(description="Day the event was fetched for")
    title: str = Field(default="", description="Event title")
    start_time: dt.datetime = Field(description="Event start, in the configured timezone")
    end_time: dt.datetime = Field(description="Event end, in the configured timezone")
    calendar_name: str = Field(description="Tracked calendar the event came from")

    week_label: str
    month_label: str
    quarter_label: str
    year_label: str

    @model_validator(mode="after")
    def _check_time_window(self) -> EventRecord:
        if self.end_time <= self.start_time:
            raise ValueError(
                f"end_time {self.end_time.isoformat()} must be after "
                f"start_time {self.start_time.isoformat()}"
            )
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration_hours(self) -> float:
        """Length of the event in decimal hours, unrounded."""
        return (self.end_time - self.start_time).total_seconds() / 3600

    @classmethod
    def from_event(
        cls,
        *,
        date: dt.date,
        title: str,
        start_time: dt.datetime,
        end_time: dt.datetime,
        calendar_name: str,
        labels: PeriodLabels,
    ) -> EventRecord:
        return cls(
            date=date,
            title=title,
            start_time=start_time,
            end_time=end_time,
            calendar_name=calendar_name,
            **labels.model_dump(),
        )

    def to_row(self) -> list[Any]:
        """Render the record in RAW_DATA_HEADERS column order, with the title kept as text."""
        return [
            self.date.strftime(_DATE_FORMAT),
            literal_text(self.title),
            self.start_time.strftime(_TIMESTAMP_FORMAT),
            self.end_time.strftime(_TIMESTAMP_FORMAT),
            self.duration_hours,
            self.calendar_name,
            self.week_label,
            self.month_label,
            self.quarter_label,
            self.year_label,
        ]
