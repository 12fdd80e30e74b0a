# -*- coding: utf-8 -*-

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple

from core import lifecycle
from core.day_normalizer import normalize
from core.projection import clock_label, human_minutes, parse_goal_minutes
from domain.errors import InvalidSettingError
from domain.models import TrackerState
from storage.state_store import StateStore

logger = logging.getLogger(__name__)

MIN_GOAL_MINUTES = 30
MIN_BREAK_MINUTES = 5


def _local_now() -> datetime:
    return datetime.now().astimezone()


class TrackerService:
    """
    Runs one load -> normalize -> mutate -> save cycle per call.

    Nothing is cached between calls: every operation reloads the file so
    that other processes' writes are picked up.
    """

    def __init__(self, store: StateStore, clock: Callable[[], datetime] = _local_now):
        self.store = store
        self.clock = clock
        self._on_state_change: Optional[Callable[[TrackerState], None]] = None

    # ----- Callbacks -----
    def set_on_state_change(self, fn: Callable[[TrackerState], None]) -> None:
        self._on_state_change = fn

    def _emit_state_change(self, state: TrackerState) -> None:
        if self._on_state_change:
            self._on_state_change(state)

    # ----- Cycle -----
    def _load(self, now: datetime) -> Tuple[TrackerState, bool]:
        state = self.store.load()
        before = (
            state.active_session.start if state.active_session else None,
            state.active_break.start if state.active_break else None,
        )
        closed = normalize(state, now)
        after = (
            state.active_session.start if state.active_session else None,
            state.active_break.start if state.active_break else None,
        )
        for c in closed:
            logger.info("split %s span at midnight, credited %s", c.kind, c.day_key)
        return state, bool(closed) or before != after

    def _commit(self, state: TrackerState) -> None:
        self.store.save(state)
        self._emit_state_change(state)

    def snapshot(self, now: Optional[datetime] = None) -> TrackerState:
        """Current state, normalized to `now`. Persists only if the split changed it."""
        now = now or self.clock()
        state, changed = self._load(now)
        if changed:
            self._commit(state)
        return state

    # ----- Sessions -----
    def start(
        self,
        tags: Optional[Iterable[str]] = None,
        note: str = "",
        now: Optional[datetime] = None,
    ) -> str:
        now = now or self.clock()
        state, _ = self._load(now)
        lifecycle.start_session(state, now, tags, note)
        self._commit(state)
        logger.debug("session started at %s", now.isoformat())
        return f"Started at {clock_label(now)}"

    def stop(self, now: Optional[datetime] = None) -> Tuple[int, str]:
        now = now or self.clock()
        state, _ = self._load(now)
        minutes = lifecycle.stop_session(state, now)
        self._commit(state)
        logger.debug("session stopped, %d minutes", minutes)
        return minutes, f"Stopped ({human_minutes(minutes)})"

    def resume(self, now: Optional[datetime] = None) -> str:
        """End a running break (if any), then start working."""
        now = now or self.clock()
        state, _ = self._load(now)
        notes: List[str] = []
        if state.active_break is not None:
            minutes = lifecycle.stop_break(state, now)
            notes.append(f"Break ended ({human_minutes(minutes)})")
        lifecycle.start_session(state, now)
        self._commit(state)
        notes.append(f"Started at {clock_label(now)}")
        return ", ".join(notes)

    # ----- Breaks -----
    def start_break(self, now: Optional[datetime] = None) -> str:
        now = now or self.clock()
        state, _ = self._load(now)
        lifecycle.start_break(state, now)
        self._commit(state)
        return f"Break started {clock_label(now)}"

    def stop_break(self, now: Optional[datetime] = None) -> Tuple[int, str]:
        now = now or self.clock()
        state, _ = self._load(now)
        minutes = lifecycle.stop_break(state, now)
        self._commit(state)
        return minutes, f"Break ended ({human_minutes(minutes)})"

    def toggle_break(self, now: Optional[datetime] = None) -> str:
        now = now or self.clock()
        state, _ = self._load(now)
        if state.active_break is not None:
            minutes = lifecycle.stop_break(state, now)
            msg = f"Break ended ({human_minutes(minutes)})"
        else:
            lifecycle.start_break(state, now)
            msg = f"Break started {clock_label(now)}"
        self._commit(state)
        return msg

    # ----- Settings -----
    def set_goal(self, value: int, now: Optional[datetime] = None) -> str:
        now = now or self.clock()
        state, _ = self._load(now)
        state.goal_minutes = parse_goal_minutes(value)
        self._commit(state)
        return f"Daily goal set to {human_minutes(state.goal_minutes)}"

    def set_break_interval(self, minutes: int, now: Optional[datetime] = None) -> str:
        if minutes <= 0:
            raise InvalidSettingError("break interval must be > 0 minutes")
        now = now or self.clock()
        state, _ = self._load(now)
        state.break_interval_minutes = minutes
        self._commit(state)
        return f"Break reminder set to every {human_minutes(minutes)}"

    def change_goal(self, delta: int, now: Optional[datetime] = None) -> str:
        now = now or self.clock()
        state, _ = self._load(now)
        state.goal_minutes = max(MIN_GOAL_MINUTES, state.goal_minutes + delta)
        self._commit(state)
        return f"Goal set to {human_minutes(state.goal_minutes)}"

    def change_break_interval(self, delta: int, now: Optional[datetime] = None) -> str:
        now = now or self.clock()
        state, _ = self._load(now)
        state.break_interval_minutes = max(
            MIN_BREAK_MINUTES, state.break_interval_minutes + delta
        )
        self._commit(state)
        return f"Break every {human_minutes(state.break_interval_minutes)}"
