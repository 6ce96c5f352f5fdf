"""In-process store with the same surface as SheetsStore.

Used for dry runs, where records are fetched and rendered but nothing is
written to the real spreadsheet. Cells hold raw values; there is no formula
evaluation, so display values are plain string conversions.
"""

from __future__ import annotations

from typing import Any

from personal_analytics.exceptions import StoreError
from personal_analytics.store.base import parse_cell


class InMemoryStore:
    """Tabs of rows kept in dictionaries."""

    def __init__(self, tabs: dict[str, list[list[Any]]] | None = None) -> None:
        self.tabs: dict[str, list[list[Any]]] = {
            name: [list(row) for row in rows] for name, rows in (tabs or {}).items()
        }
        self.formatted: set[tuple[str, str]] = set()

    async def list_tabs(self) -> list[str]:
        return list(self.tabs)

    async def add_tab(self, tab: str) -> None:
        if tab in self.tabs:
            raise StoreError(f"Tab already exists: {tab}")
        self.tabs[tab] = []

    async def read_rows(self, tab: str) -> list[list[Any]]:
        return [list(row) for row in self._tab(tab)]

    async def append_rows(self, tab: str, rows: list[list[Any]]) -> int:
        self._tab(tab).extend(list(row) for row in rows)
        return len(rows)

    async def write_rows(self, tab: str, start_cell: str, rows: list[list[Any]]) -> None:
        col, row = parse_cell(start_cell)
        grid = self._tab(tab)
        for offset, values in enumerate(rows):
            target = (row or 0) + offset
            while len(grid) <= target:
                grid.append([])
            line = grid[target]
            while len(line) < col + len(values):
                line.append("")
            line[col : col + len(values)] = list(values)

    async def clear_range(self, tab: str, a1_range: str) -> None:
        start, _, end = a1_range.partition(":")
        first_col, first_row = parse_cell(start)
        last_col, last_row = parse_cell(end or start)
        grid = self._tab(tab)
        stop = len(grid) if last_row is None else min(last_row + 1, len(grid))
        for index in range(first_row or 0, stop):
            line = grid[index]
            for col in range(first_col, min(last_col + 1, len(line))):
                line[col] = ""

    async def read_display_value(self, tab: str, cell: str) -> str:
        col, row = parse_cell(cell)
        grid = self._tab(tab)
        if row is None or row >= len(grid) or col >= len(grid[row]):
            return ""
        value = grid[row][col]
        return "" if value is None else str(value)

    async def format_header(self, tab: str, width: int) -> None:
        self._tab(tab)
        self.formatted.add((tab, "header"))

    async def format_raw_data(self, tab: str) -> None:
        self._tab(tab)
        self.formatted.add((tab, "data"))

    def _tab(self, tab: str) -> list[list[Any]]:
        try:
            return self.tabs[tab]
        except KeyError:
            raise StoreError(f"Tab not found: {tab}") from None
