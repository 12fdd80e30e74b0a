# -*- coding: utf-8 -*-

import logging
import time
from typing import Callable, Iterable, Optional

from core.projection import human_minutes
from domain.errors import IdleProbeError, InvalidSettingError, NoActiveSessionError, TrackerError
from services.tracker_service import TrackerService

logger = logging.getLogger(__name__)

DEFAULT_IDLE_MINUTES = 10
DEFAULT_POLL_SECONDS = 30.0

DEFAULT_SPRINT_WORK = 50
DEFAULT_SPRINT_BREAK = 10
DEFAULT_SPRINT_CYCLES = 4

Notifier = Callable[[str, str], None]


def _no_notify(title: str, message: str) -> None:
    pass


class IdleWatcher:
    """
    Polls the idle probe and stops the running session once the user has
    been idle for `idle_minutes`. A probe failure ends the loop.
    """

    def __init__(
        self,
        tracker: TrackerService,
        probe: Callable[[], float],
        idle_minutes: int = DEFAULT_IDLE_MINUTES,
        interval: float = DEFAULT_POLL_SECONDS,
        notifier: Notifier = _no_notify,
        sleep: Callable[[float], None] = time.sleep,
        echo: Callable[[str], None] = print,
    ):
        if idle_minutes <= 0:
            raise InvalidSettingError("idle minutes must be > 0")
        self.tracker = tracker
        self.probe = probe
        self.idle_minutes = idle_minutes
        self.interval = interval
        self.notifier = notifier
        self.sleep = sleep
        self.echo = echo

    def poll_once(self) -> bool:
        """One tick. Returns True when the session was auto-paused."""
        now = self.tracker.clock()
        try:
            state = self.tracker.snapshot(now)
        except TrackerError as e:
            logger.warning("watch: load error: %s", e)
            return False
        if state.active_session is None:
            return False

        # IdleProbeError propagates and ends run()
        idle = self.probe()
        if idle < self.idle_minutes * 60:
            return False

        try:
            self.tracker.stop(now)
        except NoActiveSessionError:
            return False
        except TrackerError as e:
            logger.warning("watch: stop error: %s", e)
            return False

        label = human_minutes(self.idle_minutes)
        self.notifier("Daily", f"Auto-paused after {label} idle")
        self.echo(f"Auto-paused session after idle {label}")
        return True

    def run(self, max_polls: Optional[int] = None) -> None:
        polls = 0
        while max_polls is None or polls < max_polls:
            self.sleep(self.interval)
            try:
                self.poll_once()
            except IdleProbeError as e:
                logger.error("watch: idle check unsupported: %s", e)
                raise
            polls += 1


class SprintRunner:
    """Alternates work and break blocks, notifying at each switch."""

    def __init__(
        self,
        tracker: TrackerService,
        work_minutes: int = DEFAULT_SPRINT_WORK,
        break_minutes: int = DEFAULT_SPRINT_BREAK,
        cycles: int = DEFAULT_SPRINT_CYCLES,
        tags: Optional[Iterable[str]] = None,
        note: str = "",
        notifier: Notifier = _no_notify,
        sleep: Callable[[float], None] = time.sleep,
        echo: Callable[[str], None] = print,
    ):
        if work_minutes <= 0 or break_minutes <= 0 or cycles <= 0:
            raise InvalidSettingError("work, break, and cycles must be > 0")
        self.tracker = tracker
        self.work_minutes = work_minutes
        self.break_minutes = break_minutes
        self.cycles = cycles
        self.tags = list(tags or [])
        self.note = note
        self.notifier = notifier
        self.sleep = sleep
        self.echo = echo

    def run(self) -> None:
        for i in range(1, self.cycles + 1):
            self.tracker.start(self.tags, self.note)
            self.echo(f"Cycle {i}/{self.cycles}: work {self.work_minutes} min")
            self.notifier("Daily Sprint", f"Cycle {i} work started")
            self.sleep(self.work_minutes * 60)

            # someone may have stopped it from another process meanwhile
            if self.tracker.snapshot().active_session is not None:
                self.tracker.stop()
            self.notifier("Daily Sprint", f"Cycle {i} break")

            self.tracker.start_break()
            self.sleep(self.break_minutes * 60)
            if self.tracker.snapshot().active_break is not None:
                self.tracker.stop_break()

        self.notifier("Daily Sprint", "Sprint finished")
        self.echo("Sprint finished")
