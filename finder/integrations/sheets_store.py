"""
Sheets Store - range reads and cell writes against Google Sheets.

Wraps the Sheets v4 API via a service account. Reads return rectangular
string arrays; writes are single-cell patches or batched row appends.
Column positions are never assumed: SheetTable resolves headers by name
once per read because header order differs between tabs.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any

from googleapiclient.errors import HttpError

from .. import config
from ..errors import SheetsError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


@dataclass
class SheetWriteResult:
    """Result of a Sheets write operation."""

    success: bool
    updated_range: str | None = None
    updated_cells: int = 0
    error: str | None = None


def column_letter(index: int) -> str:
    """Convert a 0-based column index to A1 letters (0 -> A, 26 -> AA)."""
    if index < 0:
        raise ValueError(f"Column index must be >= 0, got {index}")
    letters = ""
    i = index
    while i >= 0:
        letters = chr(i % 26 + 65) + letters
        i = i // 26 - 1
    return letters


def quote_tab(tab: str) -> str:
    """Quote a tab name for A1 notation ("AD/Designers" -> "'AD/Designers'")."""
    return "'" + tab.replace("'", "''") + "'"


def cell_range(column_index: int, sheet_row: int, tab: str | None = None) -> str:
    """Build an A1 reference for one cell, optionally qualified by tab."""
    ref = f"{column_letter(column_index)}{sheet_row}"
    return f"{quote_tab(tab)}!{ref}" if tab else ref


def column_index(letters: str) -> int:
    """Convert A1 column letters to a 0-based index (A -> 0, AA -> 26)."""
    if not letters or not letters.isalpha():
        raise ValueError(f"Invalid column letters: {letters!r}")
    index = 0
    for ch in letters.upper():
        index = index * 26 + (ord(ch) - 64)
    return index - 1


_RANGE_RE = re.compile(r"^(?:(?P<tab>'(?:[^']|'')*'|[^!']+)!)?(?P<col>[A-Za-z]*)(?P<row>\d*)")


@dataclass(frozen=True)
class RangeOrigin:
    """Tab and top-left cell of an A1 range, used to address cells found by reading it."""

    tab: str | None = None
    column: int = 0
    row: int = 1

    @classmethod
    def parse(cls, range_: str) -> "RangeOrigin":
        """
        Parse "'Team'!B3:Z", "Team!A1:Z" or "A1:Z".

        A missing column or row defaults to A or 1 ("'Team'!A:Z" starts at A1).
        """
        match = _RANGE_RE.match(range_.strip())
        tab = match.group("tab")
        if tab and tab.startswith("'"):
            tab = tab[1:-1].replace("''", "'")
        col = match.group("col")
        row = match.group("row")
        return cls(
            tab=tab or None,
            column=column_index(col) if col else 0,
            row=int(row) if row else 1,
        )

    @property
    def anchor(self) -> str:
        """The top-left cell, e.g. "'Team'!A1"."""
        return cell_range(self.column, self.row, self.tab)

    def cell(self, column_offset: int, sheet_row: int) -> str:
        """A1 reference for a column index relative to the range start."""
        return cell_range(self.column + column_offset, sheet_row, self.tab)


@dataclass
class SheetRow:
    """One data row, addressed by its 1-based row number in the sheet."""

    sheet_row: int
    values: dict[str, str]
    cells: list[str] = field(default_factory=list)

    def get(self, header: str, default: str = "") -> str:
        """Case-insensitive cell lookup by header name."""
        wanted = header.strip().lower()
        for key, value in self.values.items():
            if key.lower() == wanted:
                return value
        return default


@dataclass
class SheetTable:
    """
    A header-indexed view over a rectangular range.

    Attributes:
        headers: Trimmed header cells, in sheet order.
        rows: Data rows below the header row. Short rows are padded with "".
    """

    headers: list[str]
    rows: list[SheetRow]

    @classmethod
    def from_values(
        cls,
        values: list[list[Any]],
        header_row: int = 0,
        first_sheet_row: int = 1,
    ) -> "SheetTable":
        """
        Build a table from a values.get() payload.

        Args:
            values: Rectangular-ish array of cells as returned by the API.
            header_row: Index into values of the header row.
            first_sheet_row: Sheet row number of values[0] (2 when the range
                starts at A2).
        """
        if len(values) <= header_row:
            return cls(headers=[], rows=[])

        headers = [str(h).strip() for h in values[header_row]]
        rows = []
        for offset, raw in enumerate(values[header_row + 1 :], start=header_row + 1):
            cells = [str(c).strip() for c in raw] + [""] * max(0, len(headers) - len(raw))
            row_values = {h: cells[i] for i, h in enumerate(headers) if h}
            rows.append(SheetRow(sheet_row=first_sheet_row + offset, values=row_values, cells=cells))
        return cls(headers=headers, rows=rows)

    def column(self, name: str) -> int | None:
        """Return the 0-based index of a header (case-insensitive), or None."""
        wanted = name.strip().lower()
        for i, header in enumerate(self.headers):
            if header.lower() == wanted:
                return i
        return None

    def blank_row(self) -> list[str]:
        """A row of empty cells as wide as the header."""
        return [""] * len(self.headers)


class SheetsStore:
    """Read ranges from and write cells to Google Sheets."""

    def __init__(
        self,
        credentials_path: str | None = None,
        service: Any = None,
    ):
        """
        Initialize SheetsStore.

        Args:
            credentials_path: Service account JSON. If None, uses GOOGLE_SERVICE_ACCOUNT_FILE.
            service: Prebuilt Sheets API resource (tests inject a mock here).
        """
        self.credentials_path = credentials_path or os.environ.get(
            "GOOGLE_SERVICE_ACCOUNT_FILE", config.GOOGLE_SERVICE_ACCOUNT_FILE
        )
        self._service = service

    def _get_service(self):
        """Get Sheets API service using service account."""
        if self._service:
            return self._service

        from google.oauth2 import service_account
        from googleapiclient.discovery import build

        try:
            creds = service_account.Credentials.from_service_account_file(
                self.credentials_path, scopes=SCOPES
            )
        except (OSError, ValueError) as e:
            raise SheetsError(f"Failed to load service account {self.credentials_path}: {e}") from e

        self._service = build("sheets", "v4", credentials=creds, cache_discovery=False)
        return self._service

    def get_values(self, spreadsheet_id: str, range_: str) -> list[list[str]]:
        """
        Read a range.

        Raises:
            SheetsError if the API call fails (missing tab, permissions, network).
        """
        try:
            result = (
                self._get_service()
                .spreadsheets()
                .values()
                .get(spreadsheetId=spreadsheet_id, range=range_)
                .execute()
            )
        except (HttpError, OSError) as e:
            raise SheetsError(f"Failed to read {range_}: {e}", range_) from e
        return result.get("values", [])

    def get_table(
        self, spreadsheet_id: str, range_: str, first_sheet_row: int = 1
    ) -> SheetTable:
        """Read a range whose first row is the header row."""
        return SheetTable.from_values(
            self.get_values(spreadsheet_id, range_), first_sheet_row=first_sheet_row
        )

    def list_tab_titles(self, spreadsheet_id: str) -> list[str]:
        """List tab titles in a spreadsheet."""
        try:
            result = (
                self._get_service()
                .spreadsheets()
                .get(spreadsheetId=spreadsheet_id, fields="sheets.properties.title")
                .execute()
            )
        except (HttpError, OSError) as e:
            raise SheetsError(f"Failed to list tabs: {e}") from e
        return [s["properties"]["title"] for s in result.get("sheets", [])]

    def update_cell(self, spreadsheet_id: str, range_: str, value: str) -> SheetWriteResult:
        """Overwrite a single cell."""
        try:
            result = (
                self._get_service()
                .spreadsheets()
                .values()
                .update(
                    spreadsheetId=spreadsheet_id,
                    range=range_,
                    valueInputOption="RAW",
                    body={"values": [[value]]},
                )
                .execute()
            )
        except (HttpError, OSError, SheetsError) as e:
            logger.error(f"Failed to update {range_}: {e}")
            return SheetWriteResult(success=False, error=str(e))

        return SheetWriteResult(
            success=True,
            updated_range=result.get("updatedRange", range_),
            updated_cells=result.get("updatedCells", 1),
        )

    def append_rows(
        self, spreadsheet_id: str, range_: str, rows: list[list[str]]
    ) -> SheetWriteResult:
        """Append rows after the table anchored at range_."""
        if not rows:
            return SheetWriteResult(success=True)

        try:
            result = (
                self._get_service()
                .spreadsheets()
                .values()
                .append(
                    spreadsheetId=spreadsheet_id,
                    range=range_,
                    valueInputOption="RAW",
                    insertDataOption="INSERT_ROWS",
                    body={"values": rows},
                )
                .execute()
            )
        except (HttpError, OSError, SheetsError) as e:
            logger.error(f"Failed to append {len(rows)} row(s) at {range_}: {e}")
            return SheetWriteResult(success=False, error=str(e))

        updates = result.get("updates", {})
        return SheetWriteResult(
            success=True,
            updated_range=updates.get("updatedRange"),
            updated_cells=updates.get("updatedCells", 0),
        )
