"""
Tests for splitting active spans at local midnight.
"""

import time
from datetime import datetime, timedelta, timezone

import pytest

from conftest import at
from core.day_normalizer import midnight, normalize
from core.lifecycle import start_break, start_session, stop_session
from core.projection import today_summary
from domain.models import DayLog, TrackerState


def test_midnight_truncates():
    assert midnight(at(13, 45, 12, day=15)) == at(0, 0, day=15)


def test_session_across_midnight():
    state = TrackerState()
    start_session(state, at(23, 50, day=14), tags=["late"])

    closed = normalize(state, at(0, 5, day=15))

    assert len(closed) == 1
    assert closed[0].kind == "work"
    assert closed[0].day_key == "2025-03-14"
    assert closed[0].span.end == at(0, 0, day=15)

    prev = state.days["2025-03-14"]
    assert prev.total_work_seconds == 600
    assert prev.total_work_minutes == 10
    assert prev.sessions[0].tags == ["late"]
    assert state.active_session.start == at(0, 0, day=15)
    assert state.active_session.tags == ["late"]

    assert stop_session(state, at(0, 10, day=15)) == 10
    assert state.days["2025-03-15"].total_work_minutes == 10


def test_normalize_is_idempotent():
    state = TrackerState()
    start_session(state, at(23, 50, day=14))
    now = at(0, 5, day=15)

    normalize(state, now)
    assert normalize(state, now) == []
    assert state.days["2025-03-14"].total_work_seconds == 600
    assert len(state.days["2025-03-14"].sessions) == 1


def test_same_day_untouched():
    state = TrackerState()
    start_session(state, at(9, 0))

    assert normalize(state, at(17, 0)) == []
    assert state.active_session.start == at(9, 0)
    assert state.days == {}


def test_break_across_midnight():
    state = TrackerState()
    start_break(state, at(23, 30, day=14))

    closed = normalize(state, at(0, 20, day=15))

    assert [c.kind for c in closed] == ["break"]
    prev = state.days["2025-03-14"]
    assert prev.total_break_minutes == 30
    assert prev.break_count == 1
    assert state.active_break.start == at(0, 0, day=15)


def test_sub_second_remainder_not_recorded():
    state = TrackerState()
    start_session(state, at(23, 59, 59, day=14).replace(microsecond=500000))

    closed = normalize(state, at(0, 1, day=15))

    assert closed == []
    assert "2025-03-14" not in state.days
    # still rebased so the live span stays within today
    assert state.active_session.start == at(0, 0, day=15)


def test_short_break_remainder_not_recorded():
    state = TrackerState()
    start_break(state, at(23, 59, 30, day=14))

    assert normalize(state, at(0, 1, day=15)) == []
    assert "2025-03-14" not in state.days
    assert state.active_break.start == at(0, 0, day=15)


def test_span_older_than_a_day_credited_to_start_date():
    state = TrackerState()
    start_session(state, at(22, 0, day=12))

    normalize(state, at(8, 0, day=14))

    assert state.days["2025-03-12"].total_work_minutes == 26 * 60
    assert state.active_session.start == at(0, 0, day=14)


def test_legacy_minutes_upgraded_before_adding():
    state = TrackerState()
    state.days["2025-03-14"] = DayLog(date="2025-03-14", total_work_minutes=30)
    start_session(state, at(23, 50, day=14))

    normalize(state, at(0, 5, day=15))

    prev = state.days["2025-03-14"]
    assert prev.total_work_seconds == 1800 + 600
    assert prev.total_work_minutes == 40


def test_today_summary_right_after_split():
    state = TrackerState()
    start_session(state, at(23, 50, day=14))
    now = at(0, 10, day=15)

    closed = normalize(state, now)

    assert [(c.kind, c.day_key) for c in closed] == [("work", "2025-03-14")]
    prev = state.days["2025-03-14"]
    assert prev.total_work_minutes == 10
    assert prev.sessions[0].start == at(23, 50, day=14)
    assert prev.sessions[0].end == at(0, 0, day=15)
    assert state.active_session.start == at(0, 0, day=15)
    assert today_summary(state, now).work_minutes == 10


def _offset(hours: int) -> timezone:
    return timezone(timedelta(hours=hours))


@pytest.fixture
def new_york(monkeypatch):
    if not hasattr(time, "tzset"):
        pytest.skip("needs time.tzset")
    # POSIX rule string, so no tz database is required
    monkeypatch.setenv("TZ", "EST5EDT,M3.2.0,M11.1.0")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


class TestDaylightSaving:
    def test_midnight_uses_offset_in_force_at_midnight(self, new_york):
        noon = datetime(2025, 3, 9, 12, 0).astimezone()
        assert noon.utcoffset() == timedelta(hours=-4)
        assert midnight(noon) == datetime(2025, 3, 9, tzinfo=_offset(-5))

    def test_fixed_non_local_offset_truncated_in_place(self, new_york):
        ts = datetime(2025, 3, 9, 12, 0, tzinfo=timezone.utc)
        assert midnight(ts) == datetime(2025, 3, 9, tzinfo=timezone.utc)

    def test_spring_forward(self, new_york):
        state = TrackerState()
        start_session(state, datetime(2025, 3, 8, 23, 0).astimezone())
        now = datetime(2025, 3, 9, 12, 0).astimezone()

        closed = normalize(state, now)

        assert [c.day_key for c in closed] == ["2025-03-08"]
        assert state.days["2025-03-08"].total_work_minutes == 60
        assert state.active_session.start == datetime(2025, 3, 9, tzinfo=_offset(-5))
        assert today_summary(state, now).work_minutes == 11 * 60

    def test_fall_back(self, new_york):
        state = TrackerState()
        start_session(state, datetime(2025, 11, 1, 23, 0).astimezone())
        now = datetime(2025, 11, 2, 12, 0).astimezone()
        assert now.utcoffset() == timedelta(hours=-5)

        normalize(state, now)

        assert state.days["2025-11-01"].total_work_minutes == 60
        assert state.active_session.start == datetime(2025, 11, 2, tzinfo=_offset(-4))
        assert today_summary(state, now).work_minutes == 13 * 60

    def test_break_on_spring_forward(self, new_york):
        state = TrackerState()
        start_break(state, datetime(2025, 3, 8, 23, 30).astimezone())

        normalize(state, datetime(2025, 3, 9, 9, 0).astimezone())

        assert state.days["2025-03-08"].total_break_minutes == 30
        assert state.active_break.start == datetime(2025, 3, 9, tzinfo=_offset(-5))
