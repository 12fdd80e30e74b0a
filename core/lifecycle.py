# -*- coding: utf-8 -*-

from datetime import datetime
from typing import Iterable, Optional

from core.aggregator import add_break_minutes, add_work_span, date_key, elapsed_minutes, elapsed_seconds
from core.projection import clock_label
from domain.errors import (
    AlreadyOnBreakError,
    AlreadyRunningError,
    ClockSkewError,
    NoActiveBreakError,
    NoActiveSessionError,
)
from domain.models import Span, TrackerState


def start_session(
    state: TrackerState,
    now: datetime,
    tags: Optional[Iterable[str]] = None,
    note: str = "",
) -> Span:
    # an active break is not rejected here; start_break is the only
    # operation that enforces exclusivity
    if state.active_session is not None:
        raise AlreadyRunningError(
            f"session already running since {clock_label(state.active_session.start)}"
        )
    state.active_session = Span(start=now, tags=list(tags or []), note=note or "")
    return state.active_session


def stop_session(state: TrackerState, now: datetime) -> int:
    """
    Close the active session and credit it to the DayLog of `now`.
    Returns whole elapsed minutes.
    """
    active = state.active_session
    if active is None:
        raise NoActiveSessionError()
    if now < active.start:
        raise ClockSkewError("stop time is before start time")

    seconds = elapsed_seconds(active.start, now)
    add_work_span(
        state,
        active.start,
        now,
        tags=active.tags,
        note=active.note,
        key=date_key(now),
        keep_empty=True,
    )
    state.active_session = None
    return seconds // 60


def start_break(state: TrackerState, now: datetime) -> Span:
    if state.active_break is not None:
        raise AlreadyOnBreakError()
    if state.active_session is not None:
        stop_session(state, now)
    state.active_break = Span(start=now)
    return state.active_break


def stop_break(state: TrackerState, now: datetime) -> int:
    active = state.active_break
    if active is None:
        raise NoActiveBreakError()
    if now < active.start:
        raise ClockSkewError("break end before start")

    minutes = elapsed_minutes(active.start, now)
    add_break_minutes(state, minutes, date_key(now))
    state.active_break = None
    return minutes
