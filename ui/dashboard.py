# -*- coding: utf-8 -*-

import tkinter as tk
from datetime import datetime
from tkinter import ttk
from typing import List, Optional

from tkinterweb import HtmlFrame

from core.milestones import MilestoneTheme
from core.projection import DaySnapshot, human_minutes
from domain.errors import TrackerError
from services.stats_service import StatsService
from services.tracker_service import TrackerService
from ui.report_renderer import DayReportRenderer

ACTION_START = "start"
ACTION_STOP = "stop"
ACTION_STATUS = "status"
ACTION_BREAK = "break"

ACTIONS = [ACTION_START, ACTION_STOP, ACTION_STATUS, ACTION_BREAK]

GOAL_STEP_MINUTES = 30
BREAK_STEP_MINUTES = 5
TICK_MS = 1000


class Dashboard:
    """
    Live dashboard. One tkinter loop serializes ticks and key/button
    events; every refresh reloads state from disk.
    """

    def __init__(self, tracker: TrackerService, stats: Optional[StatsService] = None):
        self.tracker = tracker
        self.stats = stats or StatsService(tracker)
        self.report = DayReportRenderer()

        self.root = tk.Tk()
        self.root.title("Daily")
        self.root.geometry("760x560")

        self.selected = 0
        self.view = "main"
        self.notice = ""
        self.error: Optional[str] = None
        self.last_milestone = 0
        self.last_day = ""
        self.snap: Optional[DaySnapshot] = None

        self._last_html = ""
        self._tick_job = None
        self._action_labels: List[ttk.Label] = []

        self._build_ui()
        self._bind_keys()
        self.reload()
        self._ensure_tick_loop()

    # ---------- UI ----------
    def _build_ui(self):
        self.style = ttk.Style(self.root)

        outer = ttk.Frame(self.root, padding=12)
        outer.pack(fill="both", expand=True)
        outer.columnconfigure(0, weight=1)
        outer.columnconfigure(1, weight=2)
        outer.rowconfigure(1, weight=1)

        self.title_var = tk.StringVar(value="DAILY")
        ttk.Label(outer, textvariable=self.title_var, style="Title.TLabel").grid(
            row=0, column=0, columnspan=2, sticky="w"
        )

        # LEFT: actions + settings
        left = ttk.Frame(outer)
        left.grid(row=1, column=0, sticky="nsew", padx=(0, 10), pady=(8, 0))

        for i, act in enumerate(ACTIONS):
            lbl = ttk.Label(left, text=act.upper(), anchor="center", width=14)
            lbl.grid(row=i, column=0, sticky="ew", pady=2)
            lbl.bind("<Button-1>", lambda e, idx=i: self._click_action(idx))
            self._action_labels.append(lbl)

        self.goal_var = tk.StringVar(value="")
        ttk.Label(left, textvariable=self.goal_var).grid(row=len(ACTIONS), column=0, sticky="w", pady=(12, 0))

        btns = ttk.Frame(left)
        btns.grid(row=len(ACTIONS) + 1, column=0, sticky="w", pady=(4, 0))
        ttk.Button(btns, text="Goal -", command=lambda: self._change_goal(-GOAL_STEP_MINUTES)).grid(row=0, column=0)
        ttk.Button(btns, text="Goal +", command=lambda: self._change_goal(GOAL_STEP_MINUTES)).grid(row=0, column=1)
        ttk.Button(btns, text="Break -", command=lambda: self._change_break(-BREAK_STEP_MINUTES)).grid(row=1, column=0)
        ttk.Button(btns, text="Break +", command=lambda: self._change_break(BREAK_STEP_MINUTES)).grid(row=1, column=1)

        self.progress_var = tk.StringVar(value="")
        self.eta_var = tk.StringVar(value="")
        ttk.Label(left, textvariable=self.progress_var, font=("Sans", 10)).grid(
            row=len(ACTIONS) + 2, column=0, sticky="w", pady=(12, 0)
        )
        ttk.Label(left, textvariable=self.eta_var, style="Muted.TLabel").grid(
            row=len(ACTIONS) + 3, column=0, sticky="w"
        )

        # RIGHT: today report / week
        self.report_view = HtmlFrame(outer, horizontal_scrollbar="auto")
        self.report_view.grid(row=1, column=1, sticky="nsew", pady=(8, 0))

        self.week_var = tk.StringVar(value="")
        self.week_label = ttk.Label(outer, textvariable=self.week_var, font=("Courier", 11), anchor="nw")

        # notice + status bar
        self.notice_var = tk.StringVar(value="")
        self.notice_label = ttk.Label(outer, textvariable=self.notice_var, style="Notice.TLabel")
        self.notice_label.grid(row=2, column=0, columnspan=2, sticky="w", pady=(8, 0))

        self.status_var = tk.StringVar(value="")
        ttk.Label(outer, textvariable=self.status_var, font=("Courier", 11, "bold")).grid(
            row=3, column=0, columnspan=2, sticky="w", pady=(4, 0)
        )

        ttk.Label(
            outer,
            text="↑/↓ move   ENTER select   +/- goal   [/] break   TAB week   q quit",
            style="Muted.TLabel",
        ).grid(row=4, column=0, columnspan=2, sticky="w", pady=(6, 0))

    def _bind_keys(self):
        r = self.root
        r.bind("<Up>", lambda e: self._move(-1))
        r.bind("<Down>", lambda e: self._move(1))
        r.bind("k", lambda e: self._move(-1))
        r.bind("j", lambda e: self._move(1))
        r.bind("<Return>", lambda e: self.execute())
        r.bind("<space>", lambda e: self.execute())
        r.bind("<Tab>", lambda e: self._toggle_week())
        r.bind("w", lambda e: self._toggle_week())
        r.bind("<Escape>", lambda e: self._show_main())
        r.bind("<plus>", lambda e: self._change_goal(GOAL_STEP_MINUTES))
        r.bind("<minus>", lambda e: self._change_goal(-GOAL_STEP_MINUTES))
        r.bind("<bracketleft>", lambda e: self._change_break(-BREAK_STEP_MINUTES))
        r.bind("<bracketright>", lambda e: self._change_break(BREAK_STEP_MINUTES))
        r.bind("q", lambda e: self.close())
        r.protocol("WM_DELETE_WINDOW", self.close)

    def run(self):
        self.root.mainloop()

    def close(self):
        self._stop_tick_loop()
        self.root.destroy()

    # ---------- actions ----------
    def _move(self, delta: int):
        self.selected = (self.selected + delta) % len(ACTIONS)
        self._render()

    def _click_action(self, idx: int):
        self.selected = idx
        self.execute()

    def execute(self, now: Optional[datetime] = None):
        now = now or self.tracker.clock()
        self.notice = ""
        self.error = None
        action = ACTIONS[self.selected]
        try:
            if action == ACTION_START:
                self.notice = self.tracker.resume(now=now)
            elif action == ACTION_STOP:
                _, self.notice = self.tracker.stop(now=now)
            elif action == ACTION_STATUS:
                if self.snap is not None:
                    self.notice = (
                        f"Today {human_minutes(self.snap.work_minutes)} "
                        f"(active {human_minutes(self.snap.active_minutes)})"
                    )
            elif action == ACTION_BREAK:
                self.notice = self.tracker.toggle_break(now=now)
        except TrackerError as e:
            self.error = str(e)
        self.reload(now)

    def _change_goal(self, delta: int):
        self._apply_setting(lambda: self.tracker.change_goal(delta))

    def _change_break(self, delta: int):
        self._apply_setting(lambda: self.tracker.change_break_interval(delta))

    def _apply_setting(self, fn):
        self.error = None
        try:
            self.notice = fn()
        except TrackerError as e:
            self.error = str(e)
        self.reload()

    def _toggle_week(self):
        self.view = "main" if self.view == "week" else "week"
        self._render()
        return "break"

    def _show_main(self):
        self.view = "main"
        self._render()

    # ---------- tick loop ----------
    def _ensure_tick_loop(self):
        if self._tick_job is None:
            self._tick_job = self.root.after(TICK_MS, self._tick_once)

    def _stop_tick_loop(self):
        if self._tick_job is not None:
            try:
                self.root.after_cancel(self._tick_job)
            except tk.TclError:
                pass
            self._tick_job = None

    def _tick_once(self):
        self._tick_job = None
        self.reload()
        self._ensure_tick_loop()

    # ---------- data ----------
    def reload(self, now: Optional[datetime] = None):
        now = now or self.tracker.clock()
        try:
            self.snap = self.stats.today(now)
        except TrackerError as e:
            self.error = str(e)
            self._render()
            return

        if self.snap.day_key != self.last_day:
            self.last_day = self.snap.day_key
            self.last_milestone = 0
        hit = self.stats.milestone_notice(self.last_milestone, self.snap.work_minutes)
        if hit is not None:
            self.last_milestone = hit.threshold
            if hit.threshold > 0:
                self.notice = f"Milestone reached: {human_minutes(hit.threshold)} ({hit.payload.name})"

        self._render(now)

    # ---------- render ----------
    def _apply_theme(self, theme: MilestoneTheme):
        self.style.configure("Title.TLabel", font=("Sans", 22, "bold"), foreground=theme.accent)
        self.style.configure("Notice.TLabel", foreground=theme.accent)
        self.style.configure("Muted.TLabel", foreground=theme.muted)
        self.style.configure("Selected.TLabel", background=theme.selected_bg, foreground=theme.accent)

    def _render(self, now: Optional[datetime] = None):
        if self.error:
            self.notice_var.set(f"error: {self.error}")
        else:
            self.notice_var.set(self.notice)

        snap = self.snap
        if snap is None:
            return

        progress = self.stats.progress(snap.work_minutes, snap.goal_minutes)
        self._apply_theme(progress.tier.payload)

        for i, lbl in enumerate(self._action_labels):
            text = ACTIONS[i].upper()
            if i == self.selected:
                lbl.configure(text=f"◀ {text} ▶", style="Selected.TLabel")
            else:
                lbl.configure(text=text, style="TLabel")

        self.goal_var.set(
            f"Goal {human_minutes(snap.goal_minutes)} · break every "
            f"{human_minutes(snap.break_interval_minutes)}"
        )
        self.progress_var.set(f"{progress.glyph} {progress.percent}%")
        self.eta_var.set(progress.eta)
        self.status_var.set(self._status_text(snap))

        if self.view == "week":
            self.report_view.grid_remove()
            self.week_var.set(self._week_text())
            self.week_label.grid(row=1, column=1, sticky="nsew", pady=(8, 0))
        else:
            self.week_label.grid_remove()
            self.report_view.grid()
            html = self.report.render_day(snap, now or self.tracker.clock())
            if html != self._last_html:
                self._last_html = html
                self.report_view.load_html(html)

    def _status_text(self, snap: DaySnapshot) -> str:
        if snap.on_break:
            status = "BREAK"
        elif snap.active_since is not None:
            status = "RUNNING"
        else:
            status = "PAUSED"
        hours = snap.work_seconds // 3600
        minutes = (snap.work_seconds % 3600) // 60
        seconds = snap.work_seconds % 60
        return (
            f"{status}  ^ {hours} HOURS  ^ {minutes} MIN  ~ {seconds:02d} SEC  "
            f"{snap.break_count} BREAKS"
        )

    def _week_text(self) -> str:
        rows = self.stats.week()
        if not rows:
            return "no history yet (TAB to main)"
        return "\n".join(
            f"{r.day_key} {'█' * r.bar:<24} {human_minutes(r.work_minutes)}  "
            f"{r.break_count} breaks  {human_minutes(r.break_minutes)} brk"
            for r in rows
        )
