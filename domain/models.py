# -*- coding: utf-8 -*-

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

DEFAULT_GOAL_MINUTES = 12 * 60
DEFAULT_BREAK_INTERVAL_MINUTES = 120


@dataclass
class Span:
    start: datetime
    end: Optional[datetime] = None  # None => still running
    tags: List[str] = field(default_factory=list)
    note: str = ""

    @property
    def is_running(self) -> bool:
        return self.end is None


@dataclass
class DayLog:
    date: str  # YYYY-MM-DD, local
    sessions: List[Span] = field(default_factory=list)  # closed work spans
    total_work_seconds: int = 0
    total_work_minutes: int = 0
    total_break_minutes: int = 0
    break_count: int = 0
    goal_minutes: int = 0  # goal snapshot at last work write


@dataclass
class TrackerState:
    goal_minutes: int = DEFAULT_GOAL_MINUTES
    break_interval_minutes: int = DEFAULT_BREAK_INTERVAL_MINUTES
    active_session: Optional[Span] = None
    active_break: Optional[Span] = None
    days: Dict[str, DayLog] = field(default_factory=dict)

    def ensure_defaults(self) -> None:
        if not self.goal_minutes:
            self.goal_minutes = DEFAULT_GOAL_MINUTES
        if not self.break_interval_minutes:
            self.break_interval_minutes = DEFAULT_BREAK_INTERVAL_MINUTES
        if self.days is None:
            self.days = {}


@dataclass(frozen=True)
class ClosedSpan:
    kind: str  # work | break
    day_key: str
    span: Span
