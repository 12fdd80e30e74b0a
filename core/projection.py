# -*- coding: utf-8 -*-

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from core.aggregator import date_key, elapsed_minutes, elapsed_seconds
from domain.models import DEFAULT_GOAL_MINUTES, DayLog, Span, TrackerState


@dataclass(frozen=True)
class TodaySummary:
    work_minutes: int
    active_minutes: int


@dataclass
class DaySnapshot:
    day_key: str
    work_minutes: int
    work_seconds: int
    active_minutes: int  # running session, or running break when on_break
    active_seconds: int  # seconds part of the above
    goal_minutes: int
    break_interval_minutes: int
    break_minutes: int = 0
    break_count: int = 0
    active_since: Optional[datetime] = None
    on_break: bool = False
    sessions: List[Span] = field(default_factory=list)


@dataclass(frozen=True)
class WeekRow:
    day_key: str
    work_minutes: int
    break_minutes: int
    break_count: int
    bar: int


def human_minutes(total: int) -> str:
    if total < 60:
        return f"{total}m"
    hours, mins = divmod(total, 60)
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h{mins:02d}m"


def parse_goal_minutes(value: int) -> int:
    """Values up to 24 are hours, larger ones minutes; non-positive resets."""
    if value <= 0:
        return DEFAULT_GOAL_MINUTES
    if value <= 24:
        return value * 60
    return value


def today_summary(state: TrackerState, now: datetime) -> TodaySummary:
    work = 0
    active = 0
    log = state.days.get(date_key(now))
    if log is not None:
        work += log.total_work_minutes
    if state.active_session is not None:
        active = elapsed_minutes(state.active_session.start, now)
        work += active
    # breaks never count as work
    return TodaySummary(work_minutes=work, active_minutes=active)


def day_snapshot(state: TrackerState, now: datetime) -> DaySnapshot:
    summary = today_summary(state, now)
    key = date_key(now)
    snap = DaySnapshot(
        day_key=key,
        work_minutes=summary.work_minutes,
        work_seconds=0,
        active_minutes=summary.active_minutes,
        active_seconds=0,
        goal_minutes=state.goal_minutes,
        break_interval_minutes=state.break_interval_minutes,
    )

    if state.active_session is not None:
        snap.active_since = state.active_session.start
        snap.active_seconds = elapsed_seconds(state.active_session.start, now) % 60
    if state.active_break is not None:
        snap.on_break = True
        secs = elapsed_seconds(state.active_break.start, now)
        snap.active_minutes = secs // 60
        snap.active_seconds = secs % 60

    log = state.days.get(key)
    if log is not None:
        snap.sessions = list(log.sessions)
        snap.break_minutes = log.total_break_minutes
        snap.break_count = log.break_count
        if log.total_work_seconds > 0:
            snap.work_seconds = log.total_work_seconds
        else:
            snap.work_seconds = log.total_work_minutes * 60
    if snap.active_since is not None:
        snap.work_seconds += elapsed_seconds(snap.active_since, now)
    return snap


def history(state: TrackerState, days: int = 7) -> List[DayLog]:
    if days <= 0:
        days = 7
    keys = sorted(state.days, reverse=True)[:days]
    return [state.days[k] for k in keys]


def week(state: TrackerState, days: int = 7, bar_width: int = 24) -> List[WeekRow]:
    keys = sorted(state.days)[-days:] if days > 0 else []
    if not keys:
        return []
    max_work = max(state.days[k].total_work_minutes for k in keys) or 1

    rows: List[WeekRow] = []
    for k in keys:
        log = state.days[k]
        bar = int(log.total_work_minutes / max_work * bar_width)
        if bar < 1 and log.total_work_minutes > 0:
            bar = 1
        rows.append(
            WeekRow(
                day_key=k,
                work_minutes=log.total_work_minutes,
                break_minutes=log.total_break_minutes,
                break_count=log.break_count,
                bar=bar,
            )
        )
    return rows


def goal_percent(work_minutes: int, goal_minutes: int) -> int:
    if goal_minutes <= 0:
        return 100
    return max(0, min(100, work_minutes * 100 // goal_minutes))


def span_minutes(span: Span, now: datetime) -> int:
    """Display length of a span; running spans use `now`, never below 1."""
    end = span.end or now
    return max(1, elapsed_minutes(span.start, end))


def clock_label(ts: datetime) -> str:
    """Short wall-clock label, e.g. 9:05AM."""
    return ts.strftime("%I:%M%p").lstrip("0")
