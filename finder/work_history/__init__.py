"""
Per-person work history built from Streamtime.

- aggregate / build_work_history: join jobs, job items and job item users
- collect_work_history: fetch the relations and aggregate them
- format_work_history_for_prompt: plain-text projection for the LLM prompt
"""

from .aggregator import aggregate, build_work_history, collect_work_history
from .formatter import format_work_history_for_prompt
from .models import (
    Assignment,
    Booking,
    Engagement,
    EngagementSummary,
    Identity,
    PersonWorkHistory,
    SkippedRecord,
    WorkHistoryIndex,
    WorkItem,
)

__all__ = [
    "aggregate",
    "build_work_history",
    "collect_work_history",
    "format_work_history_for_prompt",
    "Assignment",
    "Booking",
    "Engagement",
    "EngagementSummary",
    "Identity",
    "PersonWorkHistory",
    "SkippedRecord",
    "WorkHistoryIndex",
    "WorkItem",
]
