"""
In-memory cache layer for freelancer-finder.

Provides:
- SlotCache: named slots with per-slot TTL, single-flight refresh and invalidation
- SlotStats: per-slot hit/miss statistics
- WORK_HISTORY, ROSTER, TEAM: the slot names used by the service
"""

from .slots import ROSTER, TEAM, WORK_HISTORY, SlotCache, SlotStats

__all__ = [
    "SlotCache",
    "SlotStats",
    "WORK_HISTORY",
    "ROSTER",
    "TEAM",
]
