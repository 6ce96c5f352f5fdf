"""Tabular data log storage (Google Sheets, or in memory for dry runs)."""

from .base import TabularStore
from .layout import CONFIG_TAB, RAW_DATA_TAB, REPORTS_TAB, setup_sheet_structure
from .memory import InMemoryStore
from .sheets import SheetsStore

__all__ = [
    "CONFIG_TAB",
    "RAW_DATA_TAB",
    "REPORTS_TAB",
    "InMemoryStore",
    "SheetsStore",
    "TabularStore",
    "setup_sheet_structure",
]
