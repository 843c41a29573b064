"""
Work History Aggregator

Folds three independently paginated Streamtime relations (jobs, job items,
job item users) plus the user directory into one PersonWorkHistory per person.

Two passes are needed because each relation can be the only evidence that a
person worked on a job:
- Job-level: the users listed directly on a job (no task detail, no hours)
- Task-level: job item users, carrying the task, logged minutes and schedule

Both passes write into the same per-person, per-job summary, so a person who
appears in both relations gets one entry with tasks and hours accumulated.

Bad records never abort a run. Anything that cannot be parsed or resolved is
dropped and reported in WorkHistoryIndex.skipped.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any

from ..observability import RunContext
from ..sources import SourcesConfig
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

logger = logging.getLogger(__name__)


# ============================================================
# Parsing
# ============================================================


def _id(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _name_of(value: Any) -> str:
    """Pull .name out of a nested {"id": ..., "name": ...} reference."""
    if isinstance(value, dict):
        return value.get("name") or ""
    return ""


def _minutes(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def is_archived(user: dict) -> bool:
    """Streamtime has used several flags for departed users over time."""
    return bool(user.get("isArchived") or user.get("archived") or user.get("isActive") is False)


def user_role(user: dict) -> str:
    """Role name, falling back to job title. Always trimmed."""
    return _name_of(user.get("role")).strip() or (user.get("jobTitle") or "").strip()


def parse_identity(user: dict) -> Identity | None:
    """Build an Identity from a /users record, or None if it has no id."""
    user_id = _id(user.get("id"))
    if user_id is None:
        return None
    return Identity(
        id=user_id,
        first_name=user.get("firstName") or "",
        last_name=user.get("lastName") or "",
        display_name=user.get("displayName") or "",
        role=user_role(user),
        archived=is_archived(user),
    )


def parse_identities(users: list[dict], skipped: list[SkippedRecord]) -> dict[str, Identity]:
    """Map user id -> Identity."""
    identities = {}
    for user in users:
        identity = parse_identity(user) if isinstance(user, dict) else None
        if identity is None:
            skipped.append(SkippedRecord("users", "?", "missing id"))
            continue
        identities[identity.id] = identity
    return identities


def parse_engagements(jobs: list[dict], skipped: list[SkippedRecord]) -> dict[str, Engagement]:
    """Map job id -> Engagement."""
    engagements = {}
    for job in jobs:
        job_id = _id(job.get("id")) if isinstance(job, dict) else None
        if job_id is None:
            skipped.append(SkippedRecord("jobs", "?", "missing id"))
            continue

        person_ids = []
        for u in job.get("users") or []:
            person_id = _id(u.get("id")) if isinstance(u, dict) else None
            if person_id is not None:
                person_ids.append(person_id)

        engagements[job_id] = Engagement(
            id=job_id,
            number=str(job.get("number") or ""),
            name=job.get("name") or "",
            company_name=_name_of(job.get("company")) or "Unknown client",
            status=_name_of(job.get("jobStatus")),
            person_ids=tuple(person_ids),
        )
    return engagements


def parse_work_items(items: list[dict], skipped: list[SkippedRecord]) -> dict[str, WorkItem]:
    """Map job item id -> WorkItem."""
    work_items = {}
    for item in items:
        item_id = _id(item.get("id")) if isinstance(item, dict) else None
        if item_id is None:
            skipped.append(SkippedRecord("job_items", "?", "missing id"))
            continue
        engagement_id = _id(item.get("jobId"))
        if engagement_id is None:
            skipped.append(SkippedRecord("job_items", item_id, "missing jobId"))
            continue
        work_items[item_id] = WorkItem(
            id=item_id, name=item.get("name") or "", engagement_id=engagement_id
        )
    return work_items


def parse_assignments(rows: list[dict], skipped: list[SkippedRecord]) -> list[Assignment]:
    """Parse job item users."""
    assignments = []
    for row in rows:
        if not isinstance(row, dict):
            skipped.append(SkippedRecord("job_item_users", "?", "not a record"))
            continue
        record_id = _id(row.get("id")) or "?"
        work_item_id = _id(row.get("jobItemId"))
        person_id = _id(row.get("userId"))
        if work_item_id is None or person_id is None:
            skipped.append(SkippedRecord("job_item_users", record_id, "missing jobItemId or userId"))
            continue
        assignments.append(
            Assignment(
                work_item_id=work_item_id,
                person_id=person_id,
                logged_minutes=_minutes(row.get("totalLoggedMinutes")),
                status=_name_of(row.get("jobItemUserStatus")),
                earliest_start=row.get("earliestStartDate") or "",
                latest_end=row.get("latestEndDate") or "",
                record_id=record_id,
            )
        )
    return assignments


# ============================================================
# Join
# ============================================================


def _person(
    people: dict[str, PersonWorkHistory], identity: Identity
) -> PersonWorkHistory:
    person = people.get(identity.key)
    if person is None:
        person = PersonWorkHistory.for_identity(identity)
        people[identity.key] = person
    return person


def _summary(person: PersonWorkHistory, engagement: Engagement) -> EngagementSummary:
    summary = person.engagements.get(engagement.id)
    if summary is None:
        summary = EngagementSummary.for_engagement(engagement)
        person.engagements[engagement.id] = summary
    return summary


def _report_name_collisions(
    identities: dict[str, Identity], skipped: list[SkippedRecord]
) -> None:
    # People are keyed by name, so two users sharing a name merge into one history
    first_by_key: dict[str, str] = {}
    for identity in identities.values():
        if not identity.key:
            continue
        owner = first_by_key.setdefault(identity.key, identity.id)
        if owner != identity.id:
            skipped.append(
                SkippedRecord(
                    "users",
                    identity.id,
                    f"name collision with user {owner} ({identity.full_name}); histories merged",
                )
            )


def build_work_history(
    identities: dict[str, Identity],
    engagements: dict[str, Engagement],
    work_items: dict[str, WorkItem],
    assignments: list[Assignment],
    today: str | None = None,
    skipped: list[SkippedRecord] | None = None,
) -> WorkHistoryIndex:
    """
    Join parsed relations into a per-person work history index.

    Args:
        identities: user id -> Identity
        engagements: job id -> Engagement
        work_items: job item id -> WorkItem
        assignments: job item users
        today: ISO date used for the current-booking cutoff. Defaults to today.
        skipped: Diagnostics from parsing, extended in place and attached to the result.

    Returns:
        WorkHistoryIndex keyed by normalized full name.
    """
    today = today or date.today().isoformat()
    skipped = skipped if skipped is not None else []
    people: dict[str, PersonWorkHistory] = {}

    _report_name_collisions(identities, skipped)

    # Pass 1: job-level assignments
    for engagement in engagements.values():
        for person_id in engagement.person_ids:
            identity = identities.get(person_id)
            if identity is None or not identity.key:
                skipped.append(
                    SkippedRecord("jobs", engagement.id, f"unknown user {person_id}")
                )
                continue
            _summary(_person(people, identity), engagement)

    # Pass 2: task-level assignments
    for assignment in assignments:
        work_item = work_items.get(assignment.work_item_id)
        if work_item is None:
            skipped.append(
                SkippedRecord(
                    "job_item_users",
                    assignment.record_id,
                    f"unknown job item {assignment.work_item_id}",
                )
            )
            continue

        engagement = engagements.get(work_item.engagement_id)
        if engagement is None:
            skipped.append(
                SkippedRecord(
                    "job_item_users",
                    assignment.record_id,
                    f"unknown job {work_item.engagement_id}",
                )
            )
            continue

        identity = identities.get(assignment.person_id)
        if identity is None or not identity.key:
            skipped.append(
                SkippedRecord(
                    "job_item_users",
                    assignment.record_id,
                    f"unknown user {assignment.person_id}",
                )
            )
            continue

        person = _person(people, identity)
        _summary(person, engagement).add_task(work_item.name, assignment.hours)

        if assignment.is_current(today):
            person.current_bookings.append(
                Booking(
                    engagement_label=engagement.label,
                    task_name=work_item.name,
                    start_date=assignment.earliest_start,
                    end_date=assignment.latest_end,
                    status=assignment.status,
                )
            )

    # Pass 3: one booking per job
    for person in people.values():
        seen = set()
        bookings = []
        for booking in person.current_bookings:
            if booking.engagement_label in seen:
                continue
            seen.add(booking.engagement_label)
            bookings.append(booking)
        person.current_bookings = bookings

    if skipped:
        logger.info(f"Work history: skipped {len(skipped)} record(s)")
        for record in skipped[:20]:
            logger.debug(f"  skipped {record.relation} {record.record_id}: {record.reason}")

    return WorkHistoryIndex(
        people=people,
        skipped=skipped,
        total_engagements=len(engagements),
    )


def aggregate(
    users: list[dict],
    jobs: list[dict],
    job_items: list[dict],
    job_item_users: list[dict],
    today: str | None = None,
) -> WorkHistoryIndex:
    """Parse raw Streamtime payloads and build the index."""
    skipped: list[SkippedRecord] = []
    return build_work_history(
        identities=parse_identities(users, skipped),
        engagements=parse_engagements(jobs, skipped),
        work_items=parse_work_items(job_items, skipped),
        assignments=parse_assignments(job_item_users, skipped),
        today=today,
        skipped=skipped,
    )


# ============================================================
# Collection
# ============================================================


def collect_work_history(
    client,
    sources: SourcesConfig,
    today: str | None = None,
) -> WorkHistoryIndex | None:
    """
    Fetch everything from Streamtime and build the index.

    The three search views have no dependency on each other and are fetched
    concurrently; the join waits for all of them.

    Args:
        client: StreamtimeClient
        sources: Relation paging settings

    Returns:
        WorkHistoryIndex, or None if the user directory could not be fetched.
    """
    with RunContext(kind="work-history"):
        logger.info("Fetching Streamtime data...")

        users = client.list_users()
        if users is None:
            logger.warning("Streamtime: could not fetch users")
            return None
        logger.info(f"Streamtime: {len(users)} users loaded")

        relations = sources.relations
        with ThreadPoolExecutor(max_workers=3) as executor:
            futures = {
                name: executor.submit(
                    client.search_all,
                    relations[name].search_view,
                    max_total=relations[name].max_total,
                    page_size=relations[name].page_size,
                )
                for name in ("jobs", "job_items", "job_item_users")
            }
            jobs = futures["jobs"].result()
            job_items = futures["job_items"].result()
            job_item_users = futures["job_item_users"].result()

        logger.info(
            f"Streamtime: {len(jobs)} jobs, {len(job_items)} job items, "
            f"{len(job_item_users)} job item users"
        )

        index = aggregate(users, jobs, job_items, job_item_users, today=today)
        logger.info(f"Streamtime: {len(index.people)} people matched to jobs")
        return index
