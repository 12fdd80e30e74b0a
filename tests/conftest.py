"""
Test configuration: repo root on sys.path, plus a controllable clock and
a tracker bound to a temporary state file.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from services.tracker_service import TrackerService  # noqa: E402
from storage.state_store import StateStore  # noqa: E402


def at(hour: int, minute: int = 0, second: int = 0, day: int = 14) -> datetime:
    """Naive local wall-clock time on 2025-03-<day>."""
    return datetime(2025, 3, day, hour, minute, second)


def aware(hour: int, minute: int = 0, second: int = 0, day: int = 14) -> datetime:
    """Same as at(), in UTC; stored timestamps always carry an offset."""
    return at(hour, minute, second, day).replace(tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "daily" / "state.json"


@pytest.fixture
def store(state_file):
    return StateStore(state_file)


@pytest.fixture
def clock():
    return FakeClock(aware(9, 0))


@pytest.fixture
def tracker(store, clock):
    return TrackerService(store, clock=clock)
