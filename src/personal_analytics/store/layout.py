"""Spreadsheet layout: tabs, headers, aesthetics and one-time setup."""

from __future__ import annotations

import structlog

from personal_analytics.config import Settings
from personal_analytics.models import RAW_DATA_HEADERS
from personal_analytics.store.base import TabularStore

logger = structlog.get_logger()

RAW_DATA_TAB = "Raw Data"
CONFIG_TAB = "Config"
ANALYSIS_TAB = "Analysis_Engine (Pivot)"
DASHBOARD_TAB = "Dashboard"
REPORTS_TAB = "Reports"

CONFIG_HEADERS = [
    "Productive Calendars",
    "Unproductive Calendars",
    "All Tracked Calendars",
    "Sheet ID",
]

# Tab name -> header row. Tabs without headers belong to the report formulas.
REQUIRED_TABS: dict[str, list[str]] = {
    RAW_DATA_TAB: RAW_DATA_HEADERS,
    CONFIG_TAB: CONFIG_HEADERS,
    ANALYSIS_TAB: [],
    DASHBOARD_TAB: [],
    REPORTS_TAB: [],
}

HEADER_BG = "#4a86e8"
HEADER_FONT_COLOR = "#ffffff"
TAB_COLOR = "#4a86e8"
FONT_FAMILY = "Arial"

DATE_FORMAT = "yyyy-mm-dd"
TIME_FORMAT = "h:mm am/pm"
DURATION_FORMAT = "0.00"


async def setup_sheet_structure(store: TabularStore, settings: Settings) -> list[str]:
    """Create missing tabs, rewrite headers and repopulate the Config tab.

    Safe to run repeatedly: existing tabs and their data rows are kept, only
    the header rows and the Config columns are rewritten.

    Returns:
        Names of the tabs that had to be created.
    """

    existing = set(await store.list_tabs())
    created: list[str] = []

    for tab, headers in REQUIRED_TABS.items():
        if tab not in existing:
            await store.add_tab(tab)
            created.append(tab)
            logger.info("sheet_tab_created", tab=tab)

        if headers:
            await store.write_rows(tab, "A1", [list(headers)])
            await store.format_header(tab, len(headers))

    await _populate_config(store, settings)
    await store.format_raw_data(RAW_DATA_TAB)

    logger.info("sheet_structure_ready", created=created)
    return created


async def _populate_config(store: TabularStore, settings: Settings) -> None:
    columns = {
        "A": settings.productive_calendars,
        "B": settings.unproductive_calendars,
        "C": settings.tracked_calendars,
    }
    for column, names in columns.items():
        await store.clear_range(CONFIG_TAB, f"{column}2:{column}")
        if names:
            await store.write_rows(CONFIG_TAB, f"{column}2", [[name] for name in names])

    # Report formulas read the sheet ID from D2.
    await store.write_rows(CONFIG_TAB, "D2", [[settings.sheet_id or ""]])
    logger.info(
        "config_tab_populated",
        productive=len(settings.productive_calendars),
        unproductive=len(settings.unproductive_calendars),
        tracked=len(settings.tracked_calendars),
    )
