"""Time-based automation: the recurrence table, its dispatcher and installer."""

from .dispatcher import build_operations, dispatch, run_operation
from .installer import create_scheduler, install_schedule, rule_to_trigger
from .table import (
    SCHEDULE,
    RecurrenceKind,
    RecurrenceRule,
    Weekday,
    is_quarter_start,
    is_year_start,
)

__all__ = [
    "SCHEDULE",
    "RecurrenceKind",
    "RecurrenceRule",
    "Weekday",
    "build_operations",
    "create_scheduler",
    "dispatch",
    "install_schedule",
    "is_quarter_start",
    "is_year_start",
    "rule_to_trigger",
    "run_operation",
]
