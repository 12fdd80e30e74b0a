# ui/cli.py
# -*- coding: utf-8 -*-

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from domain.errors import TrackerError
from services.desktop import idle_seconds, notify
from services.stats_service import StatsService
from services.tracker_service import TrackerService
from services.watch_service import (
    DEFAULT_IDLE_MINUTES,
    DEFAULT_POLL_SECONDS,
    DEFAULT_SPRINT_BREAK,
    DEFAULT_SPRINT_CYCLES,
    DEFAULT_SPRINT_WORK,
    IdleWatcher,
    SprintRunner,
)
from storage.paths import state_path
from storage.state_store import StateStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="daily", description="daily - track your work hours")
    parser.add_argument("--state", help="Path to state.json (default: per-user config dir)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="cmd")

    p = sub.add_parser("start", help="Start tracking")
    p.add_argument("--tag", action="append", default=[], help="Tag for the session (repeatable)")
    p.add_argument("--note", default="", help="Note for the session")

    sub.add_parser("stop", help="Stop current session")
    sub.add_parser("status", help="Show today status")
    sub.add_parser("today", help="Show today sessions")

    p = sub.add_parser("history", help="Show recent days summary")
    p.add_argument("days", nargs="?", type=int, default=7)

    p = sub.add_parser("sprint", help="Run work/break cycles with notifications")
    p.add_argument("--work", type=int, default=DEFAULT_SPRINT_WORK, help="Work minutes")
    p.add_argument("--break", dest="brk", type=int, default=DEFAULT_SPRINT_BREAK, help="Break minutes")
    p.add_argument("--cycles", type=int, default=DEFAULT_SPRINT_CYCLES)
    p.add_argument("--tag", action="append", default=[])
    p.add_argument("--note", default="")

    p = sub.add_parser("watch", help="Auto-pause active session when idle")
    p.add_argument("--idle", type=int, default=DEFAULT_IDLE_MINUTES, help="Idle minutes before auto-pause")
    p.add_argument("--interval", type=float, default=DEFAULT_POLL_SECONDS, help="Poll interval (seconds)")

    p = sub.add_parser("set-goal", help="Set daily goal in hours (<=24) or minutes")
    p.add_argument("value", type=int)

    p = sub.add_parser("set-breaks", help="Set break reminder interval (minutes)")
    p.add_argument("minutes", type=int)

    sub.add_parser("ui", help="Open the dashboard")
    return parser


def run_command(args: argparse.Namespace, tracker: TrackerService) -> int:
    stats = StatsService(tracker)

    if args.cmd == "start":
        msg = tracker.start(args.tag, args.note)
        if args.tag:
            msg += f" [tags: {','.join(args.tag)}]"
        if args.note:
            msg += f" note: {args.note}"
        print(msg)
    elif args.cmd == "stop":
        _, msg = tracker.stop()
        print(msg)
    elif args.cmd == "status":
        print("\n".join(stats.status_lines()))
    elif args.cmd == "today":
        print("\n".join(stats.today_lines()))
    elif args.cmd == "history":
        print("\n".join(stats.history_lines(args.days)))
    elif args.cmd == "sprint":
        SprintRunner(
            tracker,
            work_minutes=args.work,
            break_minutes=args.brk,
            cycles=args.cycles,
            tags=args.tag,
            note=args.note,
            notifier=notify,
        ).run()
    elif args.cmd == "watch":
        IdleWatcher(
            tracker,
            probe=idle_seconds,
            idle_minutes=args.idle,
            interval=args.interval,
            notifier=notify,
        ).run()
    elif args.cmd == "set-goal":
        print(tracker.set_goal(args.value))
    elif args.cmd == "set-breaks":
        print(tracker.set_break_interval(args.minutes))
    else:
        raise ValueError(f"unknown command: {args.cmd}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    tracker = TrackerService(StateStore(args.state or state_path()))

    if args.cmd in (None, "ui"):
        from ui.dashboard import Dashboard

        Dashboard(tracker).run()
        return 0

    try:
        return run_command(args, tracker)
    except TrackerError as e:
        print(f"error: {str(e).rstrip()}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
