"""
Plain-text projection of the work history for the recommendation prompt.

Only people who also appear on the roster or team sheet are included, to keep
the prompt small.
"""

from collections.abc import Iterable

from ..names import normalize_name
from .models import PersonWorkHistory, WorkHistoryIndex

HEADER = (
    "\n\n═══ STREAMTIME PROJECT HISTORY ═══\n"
    "(Real project data from Streamtime: who worked on what, their tasks, hours logged, "
    "and current bookings. Use this to match people to similar jobs/clients and check "
    "availability.)\n"
)


def _hours(value: float) -> str:
    """1.5 -> "1.5", 12.0 -> "12"."""
    return f"{value:.1f}".rstrip("0").rstrip(".")


def format_person(
    person: PersonWorkHistory,
    max_engagements: int = 10,
    max_bookings: int = 3,
    max_tasks: int = 3,
) -> str:
    """Format one person as a bullet plus a line of recent jobs."""
    jobs = person.engagement_list[-max_engagements:]

    text = f"\n• {person.full_name}"
    if person.current_bookings:
        booked = ", ".join(b.engagement_label for b in person.current_bookings[:max_bookings])
        text += f" [⚠️ CURRENTLY BOOKED: {booked}]"

    entries = []
    for job in jobs:
        entry = f"{job.label} [{job.company_name}]"
        if job.tasks:
            entry += f" ({', '.join(job.tasks[:max_tasks])})"
        if job.total_hours >= 1:
            entry += f" {_hours(job.total_hours)}hrs"
        entries.append(entry)

    text += "\n  " + " | ".join(entries) + "\n"
    return text


def format_work_history_for_prompt(
    index: WorkHistoryIndex | None,
    known_names: Iterable[str] | None = None,
    max_engagements: int = 10,
    max_bookings: int = 3,
    max_tasks: int = 3,
) -> str:
    """
    Render the index as prompt text.

    Args:
        index: Aggregated work history (None renders nothing)
        known_names: Names from the roster/team sheets. If given, only these
            people are included.
        max_engagements: Most recent jobs shown per person
        max_bookings: Current bookings shown per person
        max_tasks: Task names shown per job

    Returns:
        Formatted text, or "" if nobody qualified.
    """
    if index is None or not index.people:
        return ""

    allowed = None
    if known_names is not None:
        allowed = {normalize_name(n) for n in known_names if n}

    parts = []
    for key, person in index.people.items():
        if allowed is not None and key not in allowed:
            continue
        if not person.engagements:
            continue
        parts.append(format_person(person, max_engagements, max_bookings, max_tasks))

    if not parts:
        return ""
    return HEADER + "".join(parts)
