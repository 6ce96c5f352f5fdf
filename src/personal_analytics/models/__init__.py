"""Data models for Personal Analytics.

This module contains Pydantic models for data validation and serialization.
"""

from enum import Enum

from personal_analytics.models.event_record import RAW_DATA_HEADERS, EventRecord, PeriodLabels
from personal_analytics.models.provider import ProviderCalendar, ProviderEvent


class ReportFrequency(str, Enum):
    """Report cadence enumeration."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


__all__ = [
    "RAW_DATA_HEADERS",
    "EventRecord",
    "PeriodLabels",
    "ProviderCalendar",
    "ProviderEvent",
    "ReportFrequency",
]
