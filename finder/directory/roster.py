"""
Roster readers for the freelancer spreadsheet and the internal team sheet.

Freelancer tabs carry a title in row 1 and headers in row 2; the team sheet
has headers in row 1. Entries are returned as header -> value dicts so
callers never depend on column order.
"""

import logging

from ..errors import SheetsError
from ..integrations.sheets_store import SheetsStore, SheetTable, quote_tab

logger = logging.getLogger(__name__)

TEAM_SOURCE = "Internal Team"


def _entries(table: SheetTable) -> list[dict[str, str]]:
    entries = []
    for row in table.rows:
        # Rows without a value in the first column are spacers or notes
        if not row.cells or not row.cells[0]:
            continue
        entries.append(dict(row.values))
    return entries


def read_team(store: SheetsStore, spreadsheet_id: str, range_: str = "A1:Z") -> list[dict[str, str]]:
    """
    Read the internal team sheet, excluding people marked Inactive.

    Raises:
        SheetsError if the sheet cannot be read.
    """
    table = store.get_table(spreadsheet_id, range_)
    if not table.rows:
        return []

    logger.debug(f"Team sheet headers: [{', '.join(table.headers)}]")

    team = []
    for entry in _entries(table):
        status = next((v for k, v in entry.items() if k.lower() == "status"), "")
        if status.lower() == "inactive":
            continue
        entry["Source"] = TEAM_SOURCE
        team.append(entry)

    logger.info(f"Team sheet: {len(team)} team members loaded")
    return team


def read_roster(store: SheetsStore, spreadsheet_id: str, tabs: list[str]) -> list[dict[str, str]]:
    """
    Read every freelancer tab. A tab that can't be read is skipped.

    Each entry gets a "Category" key holding its tab name.
    """
    roster = []
    for tab in tabs:
        try:
            table = store.get_table(spreadsheet_id, f"{quote_tab(tab)}!A2:Z", first_sheet_row=2)
        except SheetsError as e:
            logger.warning(f"Skipping tab '{tab}': {e}")
            continue

        entries = _entries(table)
        for entry in entries:
            entry["Category"] = tab
        roster.extend(entries)
        logger.debug(f"Tab '{tab}': {len(entries)} rows")

    logger.info(f"Roster: {len(roster)} freelancers across {len(tabs)} tab(s)")
    return roster


def resolve_tab_names(expected: list[str], actual: list[str]) -> list[str]:
    """
    Correct configured tab names to the spreadsheet's real ones.

    Matching ignores case and surrounding whitespace. Unmatched names are kept
    (they'll be skipped at read time) and logged.
    """
    by_key = {t.strip().lower(): t for t in actual}
    resolved = []
    for name in expected:
        if name in actual:
            resolved.append(name)
            continue
        match = by_key.get(name.strip().lower())
        if match:
            logger.info(f"Tab name fix: '{name}' -> '{match}'")
            resolved.append(match)
        else:
            logger.warning(f"Tab '{name}' not found in spreadsheet; it will be skipped")
            resolved.append(name)
    return resolved
