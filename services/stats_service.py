# -*- coding: utf-8 -*-

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from core.milestones import Milestone, current_tier, next_milestone, progress_glyph, reached_milestone
from core.projection import (
    DaySnapshot,
    WeekRow,
    clock_label,
    day_snapshot,
    goal_percent,
    history,
    human_minutes,
    span_minutes,
    today_summary,
    week,
)
from domain.models import DayLog, TrackerState
from services.tracker_service import TrackerService


@dataclass(frozen=True)
class Progress:
    percent: int
    glyph: str
    tier: Milestone
    next_at: Optional[int]
    eta: str


class StatsService:
    """Read-only views shared by the CLI and the dashboard."""

    def __init__(self, tracker: TrackerService):
        self.tracker = tracker

    def _state(self, now: datetime) -> TrackerState:
        return self.tracker.snapshot(now)

    # ----- snapshots -----
    def today(self, now: Optional[datetime] = None) -> DaySnapshot:
        now = now or self.tracker.clock()
        return day_snapshot(self._state(now), now)

    def history(self, days: int = 7, now: Optional[datetime] = None) -> List[DayLog]:
        now = now or self.tracker.clock()
        return history(self._state(now), days)

    def week(self, days: int = 7, now: Optional[datetime] = None) -> List[WeekRow]:
        now = now or self.tracker.clock()
        return week(self._state(now), days)

    def progress(self, work_minutes: int, goal_minutes: int) -> Progress:
        nxt = next_milestone(work_minutes, goal_minutes)
        if nxt is None:
            eta = "all milestones reached"
        else:
            eta = f"next {human_minutes(nxt)} in {human_minutes(nxt - work_minutes)}"
        return Progress(
            percent=goal_percent(work_minutes, goal_minutes),
            glyph=progress_glyph(work_minutes, goal_minutes),
            tier=current_tier(work_minutes),
            next_at=nxt,
            eta=eta,
        )

    def milestone_notice(self, last_threshold: int, work_minutes: int) -> Optional[Milestone]:
        return reached_milestone(last_threshold, work_minutes)

    # ----- text views -----
    def status_lines(self, now: Optional[datetime] = None) -> List[str]:
        now = now or self.tracker.clock()
        st = self._state(now)
        summary = today_summary(st, now)

        first = f"Today: {human_minutes(summary.work_minutes)} logged"
        if summary.active_minutes > 0:
            first += f" (active {human_minutes(summary.active_minutes)})"
        lines = [first]
        if st.active_session is not None:
            lines.append(f"Running since {clock_label(st.active_session.start)}")
        if st.active_break is not None:
            lines.append(f"On break since {clock_label(st.active_break.start)}")
        lines.append(
            f"Goal: {human_minutes(st.goal_minutes)} | "
            f"Break interval: {human_minutes(st.break_interval_minutes)}"
        )
        return lines

    def today_lines(self, now: Optional[datetime] = None) -> List[str]:
        now = now or self.tracker.clock()
        st = self._state(now)
        snap = day_snapshot(st, now)

        lines = [f"Today: {snap.day_key}"]
        if not snap.sessions:
            lines.append("  no logged sessions yet")
        else:
            for i, sess in enumerate(snap.sessions, start=1):
                end = clock_label(sess.end) if sess.end else "--"
                line = (
                    f"  #{i} {clock_label(sess.start)} -> {end} "
                    f"({human_minutes(span_minutes(sess, now))})"
                )
                if sess.tags:
                    line += f" tags:{','.join(sess.tags)}"
                if sess.note:
                    line += f" note:{sess.note}"
                lines.append(line)
            log = st.days[snap.day_key]
            lines.append(f"  total: {human_minutes(log.total_work_minutes)}")
        if st.active_session is not None:
            lines.append(
                f"  active since {clock_label(st.active_session.start)} "
                f"({human_minutes(snap.active_minutes)} so far)"
            )
        return lines

    def history_lines(self, days: int = 7, now: Optional[datetime] = None) -> List[str]:
        logs = self.history(days, now)
        if not logs:
            return ["no history yet"]
        return [
            f"{log.date}  work: {human_minutes(log.total_work_minutes)}  "
            f"breaks: {human_minutes(log.total_break_minutes)} ({log.break_count})"
            for log in logs
        ]
