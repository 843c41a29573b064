"""
Run scoping for aggregation and sync passes.

A run is one work-history aggregation or one team sync. Both can be in
flight at once (a cache refresh on one thread, a sync on another), so the
current run id lives in a ContextVar and the log formatters pick it up from
there. Leaving a run logs how long it took and whether it failed.
"""

import contextvars
import logging
import time
import uuid
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_current_run: contextvars.ContextVar[str | None] = contextvars.ContextVar("finder_run", default=None)


def get_run_id() -> str | None:
    """Run id of the innermost active run, or None outside any run."""
    return _current_run.get()


def generate_run_id(kind: str = "run") -> str:
    """kind plus 8 hex chars, e.g. 'team-sync-3f9a0c1d'."""
    return f"{kind}-{uuid.uuid4().hex[:8]}"


@dataclass
class RunContext:
    """
    Scope log lines to one run.

    Usage:
        with RunContext(kind="team-sync") as run:
            logger.info("Syncing")  # formatted with run.run_id

    Runs nest; leaving an inner run restores the outer id.
    """

    kind: str = "run"
    run_id: str = ""
    started_at: float | None = field(default=None, init=False)
    _token: contextvars.Token | None = field(default=None, init=False, repr=False)

    def __post_init__(self):
        if not self.run_id:
            self.run_id = generate_run_id(self.kind)

    @property
    def elapsed(self) -> float:
        """Seconds since the run was entered (0 before entry)."""
        if self.started_at is None:
            return 0.0
        return time.monotonic() - self.started_at

    def __enter__(self) -> "RunContext":
        self._token = _current_run.set(self.run_id)
        self.started_at = time.monotonic()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        # Logged before the reset so the line still carries this run's id
        if exc_type is None:
            logger.debug(f"{self.kind} finished in {self.elapsed:.2f}s")
        else:
            logger.warning(f"{self.kind} failed after {self.elapsed:.2f}s: {exc_val!r}")
        if self._token is not None:
            _current_run.reset(self._token)
            self._token = None
