"""
External system adapters.

- StreamtimeClient: Streamtime REST reads (users, paginated search views)
- SheetsStore: Google Sheets range reads and cell writes
- fetch_all: offset pager shared by the search views
"""

from .pagination import fetch_all
from .sheets_store import (
    RangeOrigin,
    SheetRow,
    SheetsStore,
    SheetTable,
    SheetWriteResult,
    cell_range,
    column_index,
    column_letter,
)
from .streamtime_client import StreamtimeClient

__all__ = [
    "fetch_all",
    "StreamtimeClient",
    "SheetsStore",
    "SheetTable",
    "SheetRow",
    "SheetWriteResult",
    "RangeOrigin",
    "cell_range",
    "column_index",
    "column_letter",
]
