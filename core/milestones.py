# -*- coding: utf-8 -*-

from dataclasses import dataclass
from typing import Any, Optional, Sequence


@dataclass(frozen=True)
class Milestone:
    threshold: int  # minutes of work
    payload: Any


@dataclass(frozen=True)
class MilestoneTheme:
    name: str
    accent: str  # title / arrows / notice
    muted: str  # secondary text
    selected_bg: str  # selected action background


# Palette shifts by minutes worked today. Every surface (theme, progress
# glyph, ETA text) selects from this one list.
MILESTONES = [
    Milestone(0, MilestoneTheme("base", "#8aa788", "#6f7a70", "#2b312a")),
    Milestone(240, MilestoneTheme("deep-blue", "#7fb3ff", "#5c6b80", "#1f2b3a")),
    Milestone(360, MilestoneTheme("night-mode", "#dfe5dd", "#4a4f4a", "#151515")),
    Milestone(480, MilestoneTheme("deep-amber", "#FFA132", "#6f7a70", "#3a2b1f")),
    Milestone(600, MilestoneTheme("alert-red", "#ff4d4d", "#6f7a70", "#3a1f1f")),
]


def current_tier(minutes: int, milestones: Sequence[Milestone] = MILESTONES) -> Milestone:
    """Greatest threshold <= minutes; on equal thresholds the later entry wins."""
    best = milestones[0]
    for m in milestones:
        if minutes >= m.threshold and m.threshold >= best.threshold:
            best = m
    return best


def next_milestone(
    minutes: int,
    goal_minutes: int = 0,
    milestones: Sequence[Milestone] = MILESTONES,
) -> Optional[int]:
    """
    Smallest threshold above `minutes`, capped by the goal when the goal is
    still ahead and closer. None when nothing is left to reach.
    """
    upcoming = [m.threshold for m in milestones if m.threshold > minutes]
    nxt = min(upcoming) if upcoming else None
    if goal_minutes > minutes and (nxt is None or goal_minutes < nxt):
        return goal_minutes
    return nxt


def reached_milestone(
    last_threshold: int,
    minutes: int,
    milestones: Sequence[Milestone] = MILESTONES,
) -> Optional[Milestone]:
    """Highest milestone crossed since `last_threshold`, if any."""
    hit: Optional[Milestone] = None
    for m in milestones:
        if minutes >= m.threshold and m.threshold > last_threshold:
            if hit is None or m.threshold >= hit.threshold:
                hit = m
    return hit


def progress_glyph(minutes: int, goal_minutes: int, width: int = 20) -> str:
    if width <= 0:
        return ""
    if goal_minutes <= 0:
        filled = width
    else:
        filled = min(width, max(0, minutes) * width // goal_minutes)
    return "█" * filled + "░" * (width - filled)
