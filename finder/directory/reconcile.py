"""
Team Directory Reconciliation

One-way sync from the Streamtime user directory to the internal team sheet.

Streamtime is the source of truth for who is on the team, their role and
whether they are still active. The sheet owns everything else (Comments,
Level, rates, capabilities...). The sync only ever:
- appends rows for people missing from the sheet
- patches the Role cell when the role changed
- patches the Status cell to Active or Inactive

Rows are never deleted and no other cell is written. Running the sync twice
with nothing changed upstream writes nothing the second time.
"""

import logging
from dataclasses import dataclass, field

from ..cache import TEAM, SlotCache
from ..errors import SchemaMismatchError, SheetsError
from ..integrations.sheets_store import RangeOrigin, SheetsStore, SheetTable
from ..names import full_name, normalize_name
from ..observability import RunContext
from ..work_history.aggregator import is_archived, user_role

logger = logging.getLogger(__name__)

STATUS_ACTIVE = "Active"
STATUS_INACTIVE = "Inactive"

ROLE_UPDATE = "role"
REACTIVATE = "reactivate"
DEACTIVATE = "deactivate"


@dataclass(frozen=True)
class Addition:
    """A person to append to the sheet."""

    name: str
    role: str
    cells: tuple[str, ...]


@dataclass(frozen=True)
class CellPatch:
    """A single-cell update to an existing row."""

    kind: str  # ROLE_UPDATE, REACTIVATE or DEACTIVATE
    name: str
    sheet_row: int
    column_index: int
    old_value: str
    new_value: str


@dataclass
class ReconciliationPlan:
    """Writes needed to bring the sheet in line with Streamtime."""

    additions: list[Addition] = field(default_factory=list)
    patches: list[CellPatch] = field(default_factory=list)

    def _patches(self, kind: str) -> list[CellPatch]:
        return [p for p in self.patches if p.kind == kind]

    @property
    def role_updates(self) -> list[CellPatch]:
        return self._patches(ROLE_UPDATE)

    @property
    def reactivations(self) -> list[CellPatch]:
        return self._patches(REACTIVATE)

    @property
    def deactivations(self) -> list[CellPatch]:
        return self._patches(DEACTIVATE)

    @property
    def is_empty(self) -> bool:
        return not self.additions and not self.patches

    def summary(self) -> str:
        return (
            f"{len(self.additions)} to add, {len(self.role_updates)} role update(s), "
            f"{len(self.reactivations)} to reactivate, {len(self.deactivations)} to deactivate"
        )


@dataclass
class ReconciliationResult:
    """Outcome of a sync run."""

    plan: ReconciliationPlan = field(default_factory=ReconciliationPlan)
    added: list[str] = field(default_factory=list)
    patched: list[CellPatch] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)
    error: str | None = None
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return self.error is None and not self.failures

    @property
    def writes(self) -> int:
        return len(self.added) + len(self.patched)

    @property
    def role_updates_applied(self) -> list[CellPatch]:
        return [p for p in self.patched if p.kind == ROLE_UPDATE]


def _cell(row_cells: list[str], index: int | None) -> str:
    if index is None or index >= len(row_cells):
        return ""
    return row_cells[index].strip()


def plan_reconciliation(users: list[dict], table: SheetTable) -> ReconciliationPlan:
    """
    Compute the minimal set of writes. Pure: reads nothing, writes nothing.

    Args:
        users: Streamtime /users records
        table: The team sheet, header row first

    Raises:
        SchemaMismatchError if the sheet has no Name column.
    """
    name_col = table.column("name")
    if name_col is None:
        raise SchemaMismatchError("Name", table.headers)
    role_col = table.column("role")
    status_col = table.column("status")

    existing = {}
    for row in table.rows:
        name = _cell(row.cells, name_col)
        if name:
            existing.setdefault(normalize_name(name), row)

    plan = ReconciliationPlan()
    active = set()
    queued = set()

    for user in users:
        name = full_name(user.get("firstName"), user.get("lastName"))
        if not name or is_archived(user):
            continue

        key = normalize_name(name)
        role = user_role(user)
        active.add(key)

        if key in queued:
            continue
        queued.add(key)

        row = existing.get(key)
        if row is None:
            cells = table.blank_row()
            cells[name_col] = name
            if role_col is not None:
                cells[role_col] = role
            if status_col is not None:
                cells[status_col] = STATUS_ACTIVE
            plan.additions.append(Addition(name=name, role=role, cells=tuple(cells)))
            continue

        if role_col is not None and role:
            current_role = _cell(row.cells, role_col)
            if current_role != role:
                plan.patches.append(
                    CellPatch(ROLE_UPDATE, name, row.sheet_row, role_col, current_role, role)
                )

    if status_col is not None:
        for row in table.rows:
            name = _cell(row.cells, name_col)
            if not name:
                continue
            status = _cell(row.cells, status_col)
            if normalize_name(name) in active:
                if status.lower() != STATUS_ACTIVE.lower():
                    plan.patches.append(
                        CellPatch(REACTIVATE, name, row.sheet_row, status_col, status, STATUS_ACTIVE)
                    )
            elif status.lower() != STATUS_INACTIVE.lower():
                plan.patches.append(
                    CellPatch(DEACTIVATE, name, row.sheet_row, status_col, status, STATUS_INACTIVE)
                )

    return plan


def apply_plan(
    store: SheetsStore,
    spreadsheet_id: str,
    plan: ReconciliationPlan,
    origin: RangeOrigin | None = None,
) -> ReconciliationResult:
    """
    Write a plan to the sheet.

    Additions go in one batched append; every patch is its own single-cell
    update. A failed write is recorded and the rest still run.

    Args:
        origin: Where the planned table starts. Patch column indexes are
            relative to it and the append is anchored at it. Defaults to A1
            on the first tab.
    """
    origin = origin or RangeOrigin()
    result = ReconciliationResult(plan=plan)

    if plan.additions:
        rows = [list(a.cells) for a in plan.additions]
        names = [a.name for a in plan.additions]
        write = store.append_rows(spreadsheet_id, origin.anchor, rows)
        if write.success:
            result.added.extend(names)
            logger.info(f"Added {len(names)} new team member(s) from Streamtime: {', '.join(names)}")
        else:
            result.failures.append(f"append {', '.join(names)}: {write.error}")

    for patch in plan.patches:
        range_ = origin.cell(patch.column_index, patch.sheet_row)
        write = store.update_cell(spreadsheet_id, range_, patch.new_value)
        if write.success:
            result.patched.append(patch)
        else:
            result.failures.append(
                f"{patch.kind} {patch.name} at {range_} -> {patch.new_value}: {write.error}"
            )

    if result.role_updates_applied:
        logger.info(
            "Updated roles: "
            + ", ".join(f"{p.name} -> {p.new_value}" for p in result.role_updates_applied)
        )
    for kind, label in ((REACTIVATE, "reactivated"), (DEACTIVATE, "marked Inactive")):
        names = [p.name for p in result.patched if p.kind == kind]
        if names:
            logger.info(f"{len(names)} team member(s) {label}: {', '.join(names)}")

    for failure in result.failures:
        logger.error(f"Team sync write failed: {failure}")

    return result


def sync_team_directory(
    client,
    store: SheetsStore,
    cache: SlotCache | None,
    spreadsheet_id: str,
    range_: str = "A1:Z",
    dry_run: bool = False,
) -> ReconciliationResult:
    """
    Read Streamtime and the team sheet, then apply the reconciliation.

    Never raises for upstream or schema problems: those come back in
    result.error with nothing written. Invalidates the team cache slot once
    any write has succeeded, so the next read sees the sheet as it now is.
    Writes are addressed relative to range_, which may name a tab and start
    below row 1.

    Args:
        client: StreamtimeClient
        store: SheetsStore
        cache: SlotCache to invalidate, or None
        spreadsheet_id: Team spreadsheet
        range_: Team sheet range, header row first (e.g. "A1:Z" or "'Team'!A3:Z")
        dry_run: Plan only, write nothing
    """
    with RunContext(kind="team-sync"):
        logger.info("Syncing Streamtime users -> team sheet...")

        users = client.list_users()
        if users is None:
            logger.warning("Team sync: could not fetch Streamtime users")
            return ReconciliationResult(error="Streamtime users unavailable", dry_run=dry_run)

        origin = RangeOrigin.parse(range_)
        try:
            table = store.get_table(spreadsheet_id, range_, first_sheet_row=origin.row)
        except SheetsError as e:
            logger.warning(f"Team sync: could not read team sheet: {e}")
            return ReconciliationResult(error=str(e), dry_run=dry_run)

        if not table.headers:
            logger.warning("Team sync: team sheet has no headers")
            return ReconciliationResult(error="team sheet has no headers", dry_run=dry_run)

        try:
            plan = plan_reconciliation(users, table)
        except SchemaMismatchError as e:
            logger.warning(f"Team sync aborted: {e}")
            return ReconciliationResult(error=str(e), dry_run=dry_run)

        if plan.is_empty:
            logger.info("Team sync: team sheet already up to date")
            return ReconciliationResult(plan=plan, dry_run=dry_run)

        if dry_run:
            logger.info(f"Team sync (dry run): {plan.summary()}")
            return ReconciliationResult(plan=plan, dry_run=True)

        result = apply_plan(store, spreadsheet_id, plan, origin=origin)

        if cache is not None and result.writes:
            cache.invalidate(TEAM)

        return result
