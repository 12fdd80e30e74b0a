"""
Tests for session and break transitions on an in-memory state.
"""

from datetime import timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from conftest import at
from core.lifecycle import start_break, start_session, stop_break, stop_session
from domain.errors import (
    AlreadyOnBreakError,
    AlreadyRunningError,
    ClockSkewError,
    NoActiveBreakError,
    NoActiveSessionError,
    ValidationError,
)
from domain.models import TrackerState


@pytest.fixture
def state():
    return TrackerState()


class TestSessions:
    def test_fifty_minute_session(self, state):
        start_session(state, at(9, 0))
        minutes = stop_session(state, at(9, 50))

        assert minutes == 50
        log = state.days["2025-03-14"]
        assert log.total_work_seconds == 3000
        assert log.total_work_minutes == 50
        assert len(log.sessions) == 1
        assert log.sessions[0].end == at(9, 50)
        assert state.active_session is None

    def test_tags_and_note_are_kept(self, state):
        start_session(state, at(9, 0), tags=["deep", "api"], note="refactor")
        stop_session(state, at(9, 30))

        sess = state.days["2025-03-14"].sessions[0]
        assert sess.tags == ["deep", "api"]
        assert sess.note == "refactor"

    def test_second_start_rejected(self, state):
        start_session(state, at(9, 0))
        with pytest.raises(AlreadyRunningError) as exc:
            start_session(state, at(9, 5))
        assert "9:00AM" in str(exc.value)
        assert state.active_session.start == at(9, 0)

    def test_stop_without_session(self, state):
        with pytest.raises(NoActiveSessionError):
            stop_session(state, at(9, 0))

    def test_stop_before_start_is_clock_skew(self, state):
        start_session(state, at(9, 0))
        with pytest.raises(ClockSkewError):
            stop_session(state, at(8, 59))
        # nothing was recorded
        assert state.active_session is not None
        assert state.days == {}

    def test_zero_length_stop_still_recorded(self, state):
        start_session(state, at(9, 0))
        assert stop_session(state, at(9, 0)) == 0

        log = state.days["2025-03-14"]
        assert len(log.sessions) == 1
        assert log.total_work_seconds == 0

    def test_sub_minute_seconds_accumulate(self, state):
        for start, end in [((9, 0, 0), (9, 0, 40)), ((9, 1, 0), (9, 1, 40))]:
            start_session(state, at(*start))
            assert stop_session(state, at(*end)) == 0

        log = state.days["2025-03-14"]
        assert log.total_work_seconds == 80
        assert log.total_work_minutes == 1

    def test_stop_credits_the_stop_date(self, state):
        start_session(state, at(23, 50, day=14))
        stop_session(state, at(0, 10, day=15))

        assert "2025-03-14" not in state.days
        assert state.days["2025-03-15"].total_work_minutes == 20

    def test_errors_are_validation_errors(self, state):
        with pytest.raises(ValidationError):
            stop_session(state, at(9, 0))
        with pytest.raises(ValueError):
            stop_break(state, at(9, 0))


class TestBreaks:
    def test_break_stops_running_session(self, state):
        start_session(state, at(9, 0))
        start_break(state, at(10, 0))

        assert state.active_session is None
        assert state.active_break.start == at(10, 0)
        assert state.days["2025-03-14"].total_work_minutes == 60

    def test_break_minutes_and_count(self, state):
        start_break(state, at(12, 0))
        assert stop_break(state, at(12, 15)) == 15

        log = state.days["2025-03-14"]
        assert log.total_break_minutes == 15
        assert log.break_count == 1
        assert log.total_work_minutes == 0

    def test_zero_minute_break_still_counted(self, state):
        start_break(state, at(12, 0))
        assert stop_break(state, at(12, 0, 30)) == 0
        assert state.days["2025-03-14"].break_count == 1

    def test_second_break_rejected(self, state):
        start_break(state, at(12, 0))
        with pytest.raises(AlreadyOnBreakError):
            start_break(state, at(12, 5))

    def test_stop_break_without_break(self, state):
        with pytest.raises(NoActiveBreakError):
            stop_break(state, at(12, 0))

    def test_break_end_before_start(self, state):
        start_break(state, at(12, 0))
        with pytest.raises(ClockSkewError):
            stop_break(state, at(11, 0))
        assert state.active_break is not None

    def test_session_may_start_during_break(self, state):
        start_break(state, at(12, 0))
        start_session(state, at(12, 5))

        assert state.active_break is not None
        assert state.active_session is not None


@given(
    st.lists(
        st.tuples(st.integers(min_value=0, max_value=600), st.integers(min_value=0, max_value=3600)),
        min_size=1,
        max_size=20,
    )
)
def test_stop_minutes_sum_to_day_total(pairs):
    state = TrackerState()
    now = at(0, 0)
    seconds = 0
    for gap, duration in pairs:
        now += timedelta(seconds=gap)
        start_session(state, now)
        now += timedelta(seconds=duration)
        stop_session(state, now)
        seconds += duration

    log = state.days["2025-03-14"]
    assert len(log.sessions) == len(pairs)
    assert log.total_work_seconds == seconds
    assert log.total_work_minutes == seconds // 60
