"""
Spreadsheet-backed people directories.

- read_roster / read_team: header-indexed reads of the freelancer and team sheets
- plan_reconciliation / sync_team_directory: Streamtime -> team sheet sync
- find_person / write_feedback: Comments write-back
"""

from .feedback import FeedbackTarget, find_person, write_feedback
from .reconcile import (
    ReconciliationPlan,
    ReconciliationResult,
    apply_plan,
    plan_reconciliation,
    sync_team_directory,
)
from .roster import read_roster, read_team, resolve_tab_names

__all__ = [
    "FeedbackTarget",
    "find_person",
    "write_feedback",
    "ReconciliationPlan",
    "ReconciliationResult",
    "apply_plan",
    "plan_reconciliation",
    "sync_team_directory",
    "read_roster",
    "read_team",
    "resolve_tab_names",
]
