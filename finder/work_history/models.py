"""
Work history data models.

Raw Streamtime records are parsed into Identity, Engagement, WorkItem and
Assignment; the aggregator folds them into one PersonWorkHistory per person.
"""

from dataclasses import dataclass, field
from datetime import datetime

from ..names import full_name, normalize_name

# Assignment statuses that count as a current booking. Streamtime labels the
# active state "In Play".
BOOKED_STATUSES = frozenset({"Scheduled", "In Play", "In-Play"})


@dataclass(frozen=True)
class Identity:
    """A Streamtime user."""

    id: str
    first_name: str = ""
    last_name: str = ""
    display_name: str = ""
    role: str = ""
    archived: bool = False

    @property
    def full_name(self) -> str:
        return full_name(self.first_name, self.last_name)

    @property
    def key(self) -> str:
        """Normalized full name: the person key used across sources."""
        return normalize_name(self.full_name)


@dataclass(frozen=True)
class Engagement:
    """A Streamtime job."""

    id: str
    number: str = ""
    name: str = ""
    company_name: str = "Unknown client"
    status: str = ""
    person_ids: tuple[str, ...] = ()

    @property
    def label(self) -> str:
        return f"{self.number} {self.name}"


@dataclass(frozen=True)
class WorkItem:
    """A task within a job."""

    id: str
    name: str
    engagement_id: str


@dataclass(frozen=True)
class Assignment:
    """One person's involvement in one job item."""

    work_item_id: str
    person_id: str
    logged_minutes: float = 0.0
    status: str = ""
    earliest_start: str = ""
    latest_end: str = ""
    record_id: str = "?"

    @property
    def hours(self) -> float:
        return self.logged_minutes / 60

    def is_current(self, today: str) -> bool:
        """
        Scheduled or in play, and not yet finished.

        Args:
            today: ISO date (YYYY-MM-DD); compared lexically with latest_end.
        """
        if self.status not in BOOKED_STATUSES:
            return False
        return not self.latest_end or self.latest_end[:10] >= today


@dataclass
class EngagementSummary:
    """One person's involvement in one job, accumulated across task rows."""

    number: str
    name: str
    company_name: str
    status: str
    tasks: list[str] = field(default_factory=list)
    raw_hours: float = 0.0

    @classmethod
    def for_engagement(cls, engagement: Engagement) -> "EngagementSummary":
        return cls(
            number=engagement.number,
            name=engagement.name,
            company_name=engagement.company_name,
            status=engagement.status,
        )

    @property
    def label(self) -> str:
        return f"{self.number} {self.name}"

    @property
    def total_hours(self) -> float:
        return round(self.raw_hours, 1)

    def add_task(self, task_name: str, hours: float) -> None:
        """Record a task row. Task names stay unique; hours always add."""
        if task_name and task_name not in self.tasks:
            self.tasks.append(task_name)
        self.raw_hours += hours

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "name": self.name,
            "company_name": self.company_name,
            "status": self.status,
            "tasks": list(self.tasks),
            "total_hours": self.total_hours,
        }


@dataclass(frozen=True)
class Booking:
    """A scheduled or in-play assignment that has not ended."""

    engagement_label: str
    task_name: str
    start_date: str
    end_date: str
    status: str

    def to_dict(self) -> dict:
        return {
            "engagement_label": self.engagement_label,
            "task_name": self.task_name,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "status": self.status,
        }


@dataclass
class PersonWorkHistory:
    """Everything one person has worked on, plus what they're booked on now."""

    full_name: str
    display_name: str
    role: str
    engagements: dict[str, EngagementSummary] = field(default_factory=dict)
    current_bookings: list[Booking] = field(default_factory=list)

    @classmethod
    def for_identity(cls, identity: Identity) -> "PersonWorkHistory":
        return cls(
            full_name=identity.full_name,
            display_name=identity.display_name,
            role=identity.role,
        )

    @property
    def engagement_list(self) -> list[EngagementSummary]:
        """Engagements in first-seen order."""
        return list(self.engagements.values())

    def to_dict(self) -> dict:
        return {
            "full_name": self.full_name,
            "display_name": self.display_name,
            "role": self.role,
            "engagements": {k: v.to_dict() for k, v in self.engagements.items()},
            "current_bookings": [b.to_dict() for b in self.current_bookings],
        }


@dataclass(frozen=True)
class SkippedRecord:
    """A record the aggregator dropped, and why."""

    relation: str
    record_id: str
    reason: str


@dataclass
class WorkHistoryIndex:
    """Result of one aggregation run."""

    people: dict[str, PersonWorkHistory] = field(default_factory=dict)
    skipped: list[SkippedRecord] = field(default_factory=list)
    total_engagements: int = 0
    built_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def get(self, name: str) -> PersonWorkHistory | None:
        """Look up a person by any spelling of their name."""
        return self.people.get(normalize_name(name))

    def to_dict(self) -> dict:
        return {
            "people": {k: v.to_dict() for k, v in self.people.items()},
            "skipped": [
                {"relation": s.relation, "record_id": s.record_id, "reason": s.reason}
                for s in self.skipped
            ],
            "total_engagements": self.total_engagements,
        }
