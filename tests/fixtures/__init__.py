"""
Shared test fakes and Streamtime payload builders.

Usage:
    from tests.fixtures import FakeSheetsStore, st_user, st_job
"""

from .sheets import FakeSheetsStore
from .streamtime import (
    FakeStreamtimeClient,
    st_item,
    st_item_user,
    st_job,
    st_user,
)

__all__ = [
    "FakeSheetsStore",
    "FakeStreamtimeClient",
    "st_item",
    "st_item_user",
    "st_job",
    "st_user",
]
