"""
Post-project feedback write-back.

Finds a person across the freelancer tabs and the team sheet, then appends a
dated note to their Comments cell. Only the Comments cell is written.
"""

import logging
from dataclasses import dataclass
from datetime import date

from ..cache import ROSTER, TEAM, SlotCache
from ..errors import SheetsError
from ..integrations.sheets_store import (
    RangeOrigin,
    SheetsStore,
    SheetTable,
    SheetWriteResult,
    cell_range,
    quote_tab,
)
from ..names import names_match
from .roster import TEAM_SOURCE

logger = logging.getLogger(__name__)


@dataclass
class FeedbackTarget:
    """
    Where a person's Comments cell lives.

    comments_col is an absolute 0-based sheet column. tab is the label shown to
    users; team targets are addressed on team_tab (None for the first tab).
    """

    name: str
    spreadsheet_id: str
    tab: str
    sheet_row: int
    comments_col: int | None
    current_comments: str = ""
    is_team: bool = False
    team_tab: str | None = None

    @property
    def range(self) -> str | None:
        if self.comments_col is None:
            return None
        return cell_range(self.comments_col, self.sheet_row, self.team_tab if self.is_team else self.tab)


def _matches(
    table: SheetTable,
    name: str,
    spreadsheet_id: str,
    tab: str,
    origin: RangeOrigin,
    is_team: bool,
) -> list[FeedbackTarget]:
    name_col = table.column("name")
    if name_col is None:
        return []
    comments_col = table.column("comments")

    targets = []
    for row in table.rows:
        cell_name = row.cells[name_col] if name_col < len(row.cells) else ""
        if not cell_name or not names_match(cell_name, name):
            continue
        current = row.cells[comments_col] if comments_col is not None and comments_col < len(row.cells) else ""
        targets.append(
            FeedbackTarget(
                name=cell_name,
                spreadsheet_id=spreadsheet_id,
                tab=tab,
                sheet_row=row.sheet_row,
                comments_col=None if comments_col is None else origin.column + comments_col,
                current_comments=current,
                is_team=is_team,
                team_tab=origin.tab if is_team else None,
            )
        )
    return targets


def find_person(
    store: SheetsStore,
    name: str,
    roster_spreadsheet_id: str,
    tabs: list[str],
    team_spreadsheet_id: str | None = None,
    team_range: str = "A1:Z",
) -> list[FeedbackTarget]:
    """
    Find every row for a person across the freelancer tabs and the team sheet.

    A person can appear on several discipline tabs; all matches are returned.
    Unreadable tabs are skipped.
    """
    logger.info(f"Searching for '{name}' across {len(tabs)} tab(s)")
    targets = []

    for tab in tabs:
        range_ = f"{quote_tab(tab)}!A2:Z"
        try:
            table = store.get_table(roster_spreadsheet_id, range_, first_sheet_row=2)
        except SheetsError as e:
            logger.warning(f"Feedback search: skipping tab '{tab}': {e}")
            continue
        targets.extend(
            _matches(table, name, roster_spreadsheet_id, tab, RangeOrigin.parse(range_), is_team=False)
        )

    if team_spreadsheet_id:
        origin = RangeOrigin.parse(team_range)
        try:
            table = store.get_table(team_spreadsheet_id, team_range, first_sheet_row=origin.row)
            targets.extend(_matches(table, name, team_spreadsheet_id, TEAM_SOURCE, origin, is_team=True))
        except SheetsError as e:
            logger.warning(f"Feedback search: team sheet error: {e}")

    if targets:
        logger.info(f"Found '{name}' in {len(targets)} location(s): {', '.join(t.tab for t in targets)}")
    else:
        logger.info(f"'{name}' not found in any tab or team sheet")
    return targets


def write_feedback(
    store: SheetsStore,
    target: FeedbackTarget,
    feedback: str,
    cache: SlotCache | None = None,
    today: str | None = None,
) -> SheetWriteResult:
    """
    Append "[YYYY-MM-DD via Slack] feedback" to the person's Comments cell.

    Existing comments are kept, separated by " | ". Invalidates the roster or
    team cache slot after a successful write.
    """
    if target.range is None:
        return SheetWriteResult(success=False, error="no_comments_column")

    entry = f"[{today or date.today().isoformat()} via Slack] {feedback.strip()}"
    updated = f"{target.current_comments} | {entry}" if target.current_comments else entry

    logger.info(f"Writing feedback for {target.name} at {target.tab} {target.range}")
    result = store.update_cell(target.spreadsheet_id, target.range, updated)

    if result.success:
        target.current_comments = updated
        if cache is not None:
            cache.invalidate(TEAM if target.is_team else ROSTER)
    return result
