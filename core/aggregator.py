# -*- coding: utf-8 -*-

"""
Accumulation rules shared by every path that closes a span:
explicit stops and the midnight split.

Work is counted in seconds and total_work_minutes is always derived
from it. Breaks are counted in whole minutes only.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from domain.models import DayLog, Span, TrackerState


def date_key(ts: datetime) -> str:
    return ts.strftime("%Y-%m-%d")


def day_log(state: TrackerState, key: str) -> DayLog:
    log = state.days.get(key)
    if log is None:
        log = DayLog(date=key, goal_minutes=state.goal_minutes)
        state.days[key] = log
    return log


def _whole(start: datetime, end: datetime, unit: timedelta) -> int:
    # truncates toward zero
    if end < start:
        return -((start - end) // unit)
    return (end - start) // unit


def elapsed_seconds(start: datetime, end: datetime) -> int:
    return _whole(start, end, timedelta(seconds=1))


def elapsed_minutes(start: datetime, end: datetime) -> int:
    return _whole(start, end, timedelta(minutes=1))


def _upgrade_seconds(log: DayLog) -> None:
    # logs written before seconds tracking only carry minutes
    if log.total_work_seconds == 0 and log.total_work_minutes > 0:
        log.total_work_seconds = log.total_work_minutes * 60


def add_work_span(
    state: TrackerState,
    start: datetime,
    end: datetime,
    tags: Optional[List[str]] = None,
    note: str = "",
    key: Optional[str] = None,
    keep_empty: bool = False,
) -> int:
    """
    Record a closed work span on the DayLog for `key` (defaults to the
    start date). Returns the seconds added.

    Spans shorter than a second are skipped unless `keep_empty` is set;
    an explicit stop always leaves a record of the session.
    """
    seconds = elapsed_seconds(start, end)
    if seconds <= 0 and not keep_empty:
        return 0
    seconds = max(0, seconds)

    log = day_log(state, key or date_key(start))
    _upgrade_seconds(log)
    log.sessions.append(Span(start=start, end=end, tags=list(tags or []), note=note or ""))
    log.total_work_seconds += seconds
    log.total_work_minutes = log.total_work_seconds // 60
    log.goal_minutes = state.goal_minutes
    return seconds


def add_break_minutes(state: TrackerState, minutes: int, key: str) -> None:
    log = day_log(state, key)
    log.total_break_minutes += minutes
    log.break_count += 1
