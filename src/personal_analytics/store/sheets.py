"""Google Sheets API store implementation.

The spreadsheet is the persistent data log. Rows are appended with
`INSERT_ROWS`, so existing rows are never overwritten, and values are written
`USER_ENTERED` so Sheets parses dates and numbers the way a person typing
them would.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import structlog

from personal_analytics.config import Settings
from personal_analytics.exceptions import ConfigurationError, StoreError
from personal_analytics.google_auth import GoogleServiceClient
from personal_analytics.store.base import column_index, quote_range
from personal_analytics.store.layout import (
    DATE_FORMAT,
    DURATION_FORMAT,
    FONT_FAMILY,
    HEADER_BG,
    HEADER_FONT_COLOR,
    TAB_COLOR,
    TIME_FORMAT,
)

logger = structlog.get_logger()


def _rgb(hex_color: str) -> dict[str, float]:
    value = hex_color.lstrip("#")
    red, green, blue = (int(value[i : i + 2], 16) / 255 for i in (0, 2, 4))
    return {"red": red, "green": green, "blue": blue}


class SheetsStore(GoogleServiceClient):
    """Google Sheets API client exposing the TabularStore operations."""

    api_name = "sheets"
    api_version = "v4"

    def __init__(
        self,
        settings: Settings | None = None,
        service: Any | None = None,
        spreadsheet_id: str | None = None,
    ) -> None:
        super().__init__(settings, service)
        self._spreadsheet_id = spreadsheet_id or self.settings.sheet_id

    @property
    def spreadsheet_id(self) -> str:
        if not self._spreadsheet_id:
            raise ConfigurationError("No sheet ID configured. Set PERSONAL_ANALYTICS_SHEET_ID.")
        return self._spreadsheet_id

    async def list_tabs(self) -> list[str]:
        """Return the tab titles in sheet order."""
        sheets = await self._call("list_tabs", self._sheet_properties_sync)
        return [props["title"] for props in sheets]

    async def add_tab(self, tab: str) -> None:
        """Add a tab with a frozen header row."""
        request = {
            "addSheet": {
                "properties": {
                    "title": tab,
                    "gridProperties": {"frozenRowCount": 1},
                    "tabColor": _rgb(TAB_COLOR),
                }
            }
        }
        await self._call("add_tab", self._batch_update_sync, [request], tab=tab)

    async def read_rows(self, tab: str) -> list[list[Any]]:
        """Read every populated row of a tab, header included."""
        response = await self._call(
            "read_rows",
            self._values_get_sync,
            quote_range(tab),
            "UNFORMATTED_VALUE",
            tab=tab,
        )
        return response.get("values", []) or []

    async def append_rows(self, tab: str, rows: list[list[Any]]) -> int:
        """Append rows after the last row of the tab's data table.

        Returns:
            Number of rows the API reports as written.
        """
        if not rows:
            return 0
        response = await self._call("append_rows", self._values_append_sync, tab, rows, tab=tab)
        updates = response.get("updates") or {}
        return int(updates.get("updatedRows", len(rows)))

    async def write_rows(self, tab: str, start_cell: str, rows: list[list[Any]]) -> None:
        """Overwrite a block of cells starting at `start_cell`."""
        await self._call(
            "write_rows",
            self._values_update_sync,
            quote_range(tab, start_cell),
            rows,
            tab=tab,
        )

    async def clear_range(self, tab: str, a1_range: str) -> None:
        await self._call("clear_range", self._values_clear_sync, quote_range(tab, a1_range), tab=tab)

    async def read_display_value(self, tab: str, cell: str) -> str:
        """Read the text a cell displays (formulas evaluated and formatted)."""
        response = await self._call(
            "read_display_value",
            self._values_get_sync,
            quote_range(tab, cell),
            "FORMATTED_VALUE",
            tab=tab,
        )
        values = response.get("values") or [[]]
        first_row = values[0] if values else []
        return str(first_row[0]) if first_row else ""

    async def format_header(self, tab: str, width: int) -> None:
        """Style the first `width` header cells and colour the tab."""
        sheet_id = await self._sheet_id(tab)
        requests = [
            {
                "repeatCell": {
                    "range": {
                        "sheetId": sheet_id,
                        "startRowIndex": 0,
                        "endRowIndex": 1,
                        "startColumnIndex": 0,
                        "endColumnIndex": width,
                    },
                    "cell": {
                        "userEnteredFormat": {
                            "backgroundColor": _rgb(HEADER_BG),
                            "textFormat": {
                                "foregroundColor": _rgb(HEADER_FONT_COLOR),
                                "fontFamily": FONT_FAMILY,
                                "bold": True,
                            },
                        }
                    },
                    "fields": "userEnteredFormat(backgroundColor,textFormat)",
                }
            },
            {
                "updateSheetProperties": {
                    "properties": {"sheetId": sheet_id, "tabColor": _rgb(TAB_COLOR)},
                    "fields": "tabColor",
                }
            },
        ]
        await self._call("format_header", self._batch_update_sync, requests, tab=tab)

    async def format_raw_data(self, tab: str) -> None:
        """Apply number formats to the data columns below the header."""
        sheet_id = await self._sheet_id(tab)
        formats = [
            ("A", "A", "DATE", DATE_FORMAT),
            ("C", "D", "TIME", TIME_FORMAT),
            ("E", "E", "NUMBER", DURATION_FORMAT),
        ]
        requests = [
            {
                "repeatCell": {
                    "range": {
                        "sheetId": sheet_id,
                        "startRowIndex": 1,
                        "startColumnIndex": column_index(first),
                        "endColumnIndex": column_index(last) + 1,
                    },
                    "cell": {
                        "userEnteredFormat": {
                            "numberFormat": {"type": kind, "pattern": pattern},
                            "textFormat": {"fontFamily": FONT_FAMILY},
                        }
                    },
                    "fields": "userEnteredFormat(numberFormat,textFormat)",
                }
            }
            for first, last, kind, pattern in formats
        ]
        await self._call("format_raw_data", self._batch_update_sync, requests, tab=tab)

    async def _sheet_id(self, tab: str) -> int:
        sheets = await self._call("list_tabs", self._sheet_properties_sync)
        for props in sheets:
            if props.get("title") == tab:
                return int(props["sheetId"])
        raise StoreError(f"Tab not found: {tab}")

    async def _call(self, operation: str, func: Callable[..., Any], *args: Any, **context: Any) -> Any:
        self._ensure_authenticated()
        spreadsheet_id = self.spreadsheet_id
        logger.debug("sheets_request", operation=operation, **context)
        try:
            return await asyncio.to_thread(func, spreadsheet_id, *args)
        except Exception as exc:  # noqa: BLE001
            logger.exception("sheets_request_failed", operation=operation, error=str(exc), **context)
            raise StoreError(f"{operation}: {exc}") from exc

    def _sheet_properties_sync(self, spreadsheet_id: str) -> list[dict[str, Any]]:
        service = self._ensure_authenticated()
        response = (
            service.spreadsheets()
            .get(spreadsheetId=spreadsheet_id, fields="sheets.properties")
            .execute()
        )
        return [sheet.get("properties", {}) for sheet in response.get("sheets", []) or []]

    def _batch_update_sync(self, spreadsheet_id: str, requests: list[dict[str, Any]]) -> dict[str, Any]:
        service = self._ensure_authenticated()
        return (
            service.spreadsheets()
            .batchUpdate(spreadsheetId=spreadsheet_id, body={"requests": requests})
            .execute()
        )

    def _values_get_sync(self, spreadsheet_id: str, a1_range: str, render: str) -> dict[str, Any]:
        service = self._ensure_authenticated()
        return (
            service.spreadsheets()
            .values()
            .get(spreadsheetId=spreadsheet_id, range=a1_range, valueRenderOption=render)
            .execute()
        )

    def _values_append_sync(
        self, spreadsheet_id: str, tab: str, rows: list[list[Any]]
    ) -> dict[str, Any]:
        service = self._ensure_authenticated()
        return (
            service.spreadsheets()
            .values()
            .append(
                spreadsheetId=spreadsheet_id,
                range=quote_range(tab, "A1"),
                valueInputOption="USER_ENTERED",
                insertDataOption="INSERT_ROWS",
                body={"values": rows},
            )
            .execute()
        )

    def _values_update_sync(
        self, spreadsheet_id: str, a1_range: str, rows: list[list[Any]]
    ) -> dict[str, Any]:
        service = self._ensure_authenticated()
        return (
            service.spreadsheets()
            .values()
            .update(
                spreadsheetId=spreadsheet_id,
                range=a1_range,
                valueInputOption="USER_ENTERED",
                body={"values": rows},
            )
            .execute()
        )

    def _values_clear_sync(self, spreadsheet_id: str, a1_range: str) -> dict[str, Any]:
        service = self._ensure_authenticated()
        return (
            service.spreadsheets()
            .values()
            .clear(spreadsheetId=spreadsheet_id, range=a1_range, body={})
            .execute()
        )
