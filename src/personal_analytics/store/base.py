"""Tabular store protocol and A1 notation helpers."""

from __future__ import annotations

import re
from typing import Any, Protocol

_CELL_RE = re.compile(r"^([A-Z]+)(\d*)$")


class TabularStore(Protocol):
    """A spreadsheet-like store made of named tabs of rows."""

    async def list_tabs(self) -> list[str]: ...

    async def add_tab(self, tab: str) -> None: ...

    async def read_rows(self, tab: str) -> list[list[Any]]: ...

    async def append_rows(self, tab: str, rows: list[list[Any]]) -> int: ...

    async def write_rows(self, tab: str, start_cell: str, rows: list[list[Any]]) -> None: ...

    async def clear_range(self, tab: str, a1_range: str) -> None: ...

    async def read_display_value(self, tab: str, cell: str) -> str: ...

    async def format_header(self, tab: str, width: int) -> None: ...

    async def format_raw_data(self, tab: str) -> None: ...


def quote_range(tab: str, a1: str | None = None) -> str:
    """Build a sheet-qualified A1 range, e.g. 'Raw Data'!A1."""
    quoted = "'" + tab.replace("'", "''") + "'"
    return quoted if a1 is None else f"{quoted}!{a1}"


def column_index(letters: str) -> int:
    """Zero-based index of a column given in letters (A -> 0, AA -> 26)."""
    index = 0
    for ch in letters:
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index - 1


def parse_cell(cell: str) -> tuple[int, int | None]:
    """Split an A1 cell into zero-based (column, row); row is None for A-style refs."""
    match = _CELL_RE.match(cell.strip().upper())
    if match is None:
        raise ValueError(f"Invalid A1 cell reference: {cell!r}")
    letters, digits = match.groups()
    return column_index(letters), (int(digits) - 1 if digits else None)
