"""Append-only writes to the "Raw Data" log.

There is no deduplication: appending the same records twice produces two
identical sets of rows. Callers must not fetch the same day twice; the
natural identity of a row, if one is ever needed, is
(date, calendar_name, start_time, title).
"""

from __future__ import annotations

import structlog

from personal_analytics.exceptions import StoreError
from personal_analytics.models import EventRecord
from personal_analytics.store import RAW_DATA_TAB, TabularStore

logger = structlog.get_logger()


async def append(
    store: TabularStore,
    records: list[EventRecord],
    tab: str = RAW_DATA_TAB,
) -> int:
    """Append records after the last row of `tab`, in the given order.

    Returns:
        Number of rows appended (0 when there is nothing to write).
    """
    if not records:
        logger.info("no_records_to_append", tab=tab)
        return 0

    appended = await store.append_rows(tab, [record.to_row() for record in records])

    # Rows are already written here; a formatting failure leaves them in place.
    try:
        await store.format_raw_data(tab)
    except StoreError as exc:
        logger.warning("raw_data_format_failed", tab=tab, error=str(exc))

    logger.info("records_appended", tab=tab, count=appended)
    return appended
