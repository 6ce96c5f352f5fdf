"""Calendar-period labelling.

Every record in the data log carries week, month, quarter and year labels so
the spreadsheet can group durations without date arithmetic of its own.
"""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from personal_analytics.exceptions import ConfigurationError
from personal_analytics.models import PeriodLabels


def resolve_timezone(name: str) -> ZoneInfo:
    """Resolve an IANA timezone identifier.

    Raises:
        ConfigurationError: If the identifier is not a known timezone.
    """
    if not name:
        raise ConfigurationError("Timezone identifier is empty")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown timezone: {name!r}") from exc


def quarter_of(month: int) -> int:
    """Return the quarter (1-4) of a 1-indexed month."""
    return (month - 1) // 3 + 1


def classify(day: date | datetime, timezone: str | ZoneInfo) -> PeriodLabels:
    """Return the period labels for a day in the given timezone.

    Aware datetimes are converted into the timezone before the calendar day is
    taken; naive datetimes and plain dates are read as local to it. Weeks use
    ISO-8601 numbering, so the week label carries the ISO year, which differs
    from the calendar year for a few days around New Year.

    Raises:
        ConfigurationError: If the timezone identifier is invalid.
    """
    tz = timezone if isinstance(timezone, ZoneInfo) else resolve_timezone(timezone)

    if isinstance(day, datetime):
        local = day.astimezone(tz) if day.tzinfo is not None else day
        day = local.date()

    iso_year, iso_week, _ = day.isocalendar()
    return PeriodLabels(
        week_label=f"{iso_year}-W{iso_week:02d}",
        month_label=f"{day.year}-{day.month:02d}",
        quarter_label=f"{day.year}-Q{quarter_of(day.month)}",
        year_label=f"{day.year:04d}",
    )
