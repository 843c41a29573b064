"""
FinderService - the one object the chat layer talks to.

Owns the Streamtime client, the Sheets store and the slot cache for the
lifetime of the process. Reads go through the cache; writes invalidate it.

Usage:
    service = FinderService.from_config()
    service.startup()
    text = service.work_history_prompt()
"""

import logging

from . import config
from .cache import ROSTER, TEAM, WORK_HISTORY, SlotCache
from .directory import (
    FeedbackTarget,
    ReconciliationResult,
    find_person,
    read_roster,
    read_team,
    resolve_tab_names,
    sync_team_directory,
    write_feedback,
)
from .errors import SheetsError
from .integrations import SheetsStore, SheetWriteResult, StreamtimeClient
from .sources import SourcesConfig, load_sources
from .work_history import (
    WorkHistoryIndex,
    collect_work_history,
    format_work_history_for_prompt,
)

logger = logging.getLogger(__name__)


class FinderService:
    """Cached access to work history and the people directories."""

    def __init__(
        self,
        client: StreamtimeClient | None,
        store: SheetsStore | None,
        cache: SlotCache | None = None,
        sources: SourcesConfig | None = None,
        roster_spreadsheet_id: str = "",
        team_spreadsheet_id: str = "",
    ):
        self.client = client
        self.store = store
        self.cache = cache or SlotCache()
        self.sources = sources or SourcesConfig()
        self.roster_spreadsheet_id = roster_spreadsheet_id
        self.team_spreadsheet_id = team_spreadsheet_id
        self.tabs = list(self.sources.freelancer_tabs)

    @classmethod
    def from_config(cls) -> "FinderService":
        """Build a service from environment config and sources.yaml."""
        store = SheetsStore() if (config.GOOGLE_SPREADSHEET_ID or config.GOOGLE_TEAM_SPREADSHEET_ID) else None
        return cls(
            client=StreamtimeClient.from_config(),
            store=store,
            sources=load_sources(),
            roster_spreadsheet_id=config.GOOGLE_SPREADSHEET_ID,
            team_spreadsheet_id=config.GOOGLE_TEAM_SPREADSHEET_ID,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def work_history(self) -> WorkHistoryIndex | None:
        """Aggregated Streamtime history, or None if Streamtime is unavailable."""
        if self.client is None:
            return None
        return self.cache.get_or_refresh(
            WORK_HISTORY, lambda: collect_work_history(self.client, self.sources)
        )

    def roster(self) -> list[dict[str, str]]:
        """All freelancers across the discipline tabs."""
        if self.store is None or not self.roster_spreadsheet_id:
            return []
        return self.cache.get_or_refresh(
            ROSTER, lambda: read_roster(self.store, self.roster_spreadsheet_id, self.tabs)
        )

    def team(self) -> list[dict[str, str]]:
        """Active internal team members. Empty if the sheet can't be read."""
        if self.store is None or not self.team_spreadsheet_id:
            return []

        def load():
            try:
                return read_team(self.store, self.team_spreadsheet_id, self.sources.team_range)
            except SheetsError as e:
                logger.warning(f"Could not read internal team sheet: {e}")
                return None

        return self.cache.get_or_refresh(TEAM, load) or []

    def work_history_prompt(self) -> str:
        """Work history text for the people on the roster or team sheet."""
        known = [p.get("Name", "") for p in self.roster()]
        known += [p.get("Name", "") for p in self.team()]
        return format_work_history_for_prompt(self.work_history(), known_names=known)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def sync_team(self, dry_run: bool = False) -> ReconciliationResult | None:
        """Reconcile the team sheet with Streamtime. None if either side is unconfigured."""
        if self.client is None or self.store is None or not self.team_spreadsheet_id:
            return None
        return sync_team_directory(
            self.client,
            self.store,
            self.cache,
            self.team_spreadsheet_id,
            range_=self.sources.team_range,
            dry_run=dry_run,
        )

    def find_person(self, name: str) -> list[FeedbackTarget]:
        if self.store is None:
            return []
        return find_person(
            self.store,
            name,
            self.roster_spreadsheet_id,
            self.tabs if self.roster_spreadsheet_id else [],
            self.team_spreadsheet_id or None,
            team_range=self.sources.team_range,
        )

    def record_feedback(self, target: FeedbackTarget, feedback: str) -> SheetWriteResult:
        if self.store is None:
            return SheetWriteResult(success=False, error="sheets not configured")
        return write_feedback(self.store, target, feedback, cache=self.cache)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def fix_tab_names(self) -> list[str]:
        """Align configured tab names with the roster spreadsheet's real tabs."""
        if self.store is None or not self.roster_spreadsheet_id:
            return self.tabs
        try:
            actual = self.store.list_tab_titles(self.roster_spreadsheet_id)
        except SheetsError as e:
            logger.warning(f"Could not sync tab names: {e}")
            return self.tabs
        self.tabs = resolve_tab_names(self.tabs, actual)
        self.cache.invalidate(ROSTER)
        return self.tabs

    def refresh(self) -> ReconciliationResult | None:
        """
        Sync the team sheet, then warm the caches.

        The sync runs first so the warm-up never races its invalidation.
        """
        result = self.sync_team()
        self.work_history()
        self.team()
        self.roster()
        return result

    def startup(self) -> None:
        """Fix tab names, log what's connected, then refresh."""
        self.fix_tab_names()
        logger.info(f"Using tabs: {', '.join(self.tabs)}")
        if not self.team_spreadsheet_id:
            logger.info("No internal team sheet configured (set GOOGLE_TEAM_SPREADSHEET_ID to enable)")
        if self.client is None:
            logger.info("Streamtime not configured (set STREAMTIME_API_KEY to enable job history)")
        self.refresh()
        index = self.cache.peek(WORK_HISTORY)
        if index is not None:
            logger.info(
                f"Streamtime connected: {index.total_engagements} jobs, {len(index.people)} people mapped"
            )
