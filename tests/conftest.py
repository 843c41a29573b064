"""
Test configuration: puts the repo root on sys.path and provides fakes.

This allows tests to import `finder` and `tests.fixtures` without installing
the package. No test talks to Streamtime or Google: HTTP is mocked and the
Sheets store is replaced by an in-memory fake that records every write.
"""

import sys
from pathlib import Path

import pytest

# Add repo root to sys.path so tests can import finder.*, tests.fixtures.*
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from tests.fixtures import FakeSheetsStore  # noqa: E402


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sheets():
    return FakeSheetsStore()
