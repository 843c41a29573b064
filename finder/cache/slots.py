"""
Slot cache with per-slot TTLs, explicit invalidation and single-flight refresh.

Features:
- Fixed, named slots, each with its own TTL
- Injected clock so expiry is testable without sleeping
- get_or_refresh() runs the loader at most once at a time per slot
- invalidate() clears a slot synchronously after a write
- Hit/miss/refresh statistics per slot
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from .. import config

logger = logging.getLogger(__name__)

T = TypeVar("T")

WORK_HISTORY = "work_history"
ROSTER = "roster"
TEAM = "team"


@dataclass
class SlotStats:
    """Per-slot statistics."""

    hits: int = 0
    misses: int = 0
    refreshes: int = 0
    invalidations: int = 0
    age: float | None = None

    def to_dict(self) -> dict:
        """Convert to dict."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "refreshes": self.refreshes,
            "invalidations": self.invalidations,
            "age": self.age,
        }


class _Slot:
    __slots__ = ("ttl", "entry", "lock", "stats")

    def __init__(self, ttl: float):
        self.ttl = ttl
        # (value, refreshed_at), replaced as a whole so readers never see half an update
        self.entry: tuple[Any, float] | None = None
        self.lock = threading.Lock()
        self.stats = SlotStats()


class SlotCache:
    """Thread-safe TTL cache over a fixed set of named slots."""

    def __init__(
        self,
        ttls: dict[str, float] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize slot cache.

        Args:
            ttls: Slot name -> TTL in seconds. Defaults to the work history,
                roster and team slots with TTLs from config.
            clock: Monotonic time source in seconds.
        """
        if ttls is None:
            ttls = {
                WORK_HISTORY: config.WORK_HISTORY_TTL_SECONDS,
                ROSTER: config.SHEET_TTL_SECONDS,
                TEAM: config.SHEET_TTL_SECONDS,
            }
        self._slots = {name: _Slot(ttl) for name, ttl in ttls.items()}
        self._clock = clock

    def _slot(self, name: str) -> _Slot:
        try:
            return self._slots[name]
        except KeyError:
            raise KeyError(f"Unknown cache slot: {name}") from None

    def _fresh(self, slot: _Slot, entry: tuple[Any, float] | None) -> bool:
        if entry is None:
            return False
        return self._clock() - entry[1] < slot.ttl

    def get_or_refresh(self, name: str, loader: Callable[[], T]) -> T:
        """
        Return the cached value, or load, store and return a fresh one.

        Concurrent callers during a miss wait on the slot lock; the first one
        loads and the rest see its result. A loader returning None is passed
        through but not cached, so the next read tries again.

        Args:
            name: Slot name
            loader: Zero-arg callable producing the value

        Returns:
            Cached or freshly loaded value
        """
        slot = self._slot(name)

        entry = slot.entry
        if self._fresh(slot, entry):
            slot.stats.hits += 1
            return entry[0]

        with slot.lock:
            # Another thread may have refreshed while we waited
            entry = slot.entry
            if self._fresh(slot, entry):
                slot.stats.hits += 1
                return entry[0]

            slot.stats.misses += 1
            value = loader()
            slot.stats.refreshes += 1

            if value is None:
                logger.debug(f"Cache slot {name}: loader returned None, not caching")
                return value

            slot.entry = (value, self._clock())
            return value

    def peek(self, name: str) -> Any | None:
        """Return the cached value if fresh, without loading."""
        slot = self._slot(name)
        entry = slot.entry
        return entry[0] if self._fresh(slot, entry) else None

    def invalidate(self, name: str) -> None:
        """Clear a slot so the next read reloads."""
        slot = self._slot(name)
        with slot.lock:
            slot.entry = None
            slot.stats.invalidations += 1
        logger.debug(f"Cache slot {name} invalidated")

    def invalidate_all(self) -> None:
        """Clear every slot."""
        for name in self._slots:
            self.invalidate(name)

    def age(self, name: str) -> float | None:
        """Seconds since the slot was refreshed, or None if empty."""
        entry = self._slot(name).entry
        if entry is None:
            return None
        return self._clock() - entry[1]

    def stats(self) -> dict[str, SlotStats]:
        """Get statistics for every slot."""
        result = {}
        for name, slot in self._slots.items():
            stats = SlotStats(**slot.stats.to_dict())
            stats.age = self.age(name)
            result[name] = stats
        return result
