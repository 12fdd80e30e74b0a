# ui/report_renderer.py
# -*- coding: utf-8 -*-

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from markdown import markdown

from core.milestones import MilestoneTheme, current_tier
from core.projection import DaySnapshot, clock_label, human_minutes, span_minutes


@dataclass(frozen=True)
class ReportTheme:
    text: str = "#dfe5dd"
    muted: str = "#6f7a70"
    border: str = "#2b312a"
    panel: str = "#111311"
    accent: str = "#8aa788"

    @classmethod
    def from_milestone(cls, theme: MilestoneTheme) -> "ReportTheme":
        return cls(muted=theme.muted, border=theme.selected_bg, accent=theme.accent)


def _cell(text: str) -> str:
    return (text or "").replace("|", "\\|").replace("\n", " ")


class DayReportRenderer:
    """
    Single responsibility:
    - Turn a day's sessions into markdown
    - Convert markdown -> HTML with CSS for tkinterweb

    Session notes are user text and may carry their own markdown; they are
    rendered as quotes under the session table.
    """

    def __init__(self, theme: Optional[ReportTheme] = None):
        self.theme = theme or ReportTheme()

    # ---------- markdown ----------
    def to_markdown(self, snap: DaySnapshot, now: datetime) -> str:
        out: List[str] = [f"## {snap.day_key}", ""]
        out.append(
            f"**Work** {human_minutes(snap.work_minutes)} of {human_minutes(snap.goal_minutes)}"
            f" · **Breaks** {human_minutes(snap.break_minutes)} ({snap.break_count})"
        )
        out.append("")

        if not snap.sessions:
            out.append("_No logged sessions yet._")
        else:
            out.append("| # | Start | End | Length | Tags |")
            out.append("|---|-------|-----|--------|------|")
            for i, s in enumerate(snap.sessions, start=1):
                end = clock_label(s.end) if s.end else "--"
                out.append(
                    f"| {i} | {clock_label(s.start)} | {end} | "
                    f"{human_minutes(span_minutes(s, now))} | {_cell(', '.join(s.tags))} |"
                )
            notes = [(i, s.note) for i, s in enumerate(snap.sessions, start=1) if s.note]
            if notes:
                out.append("")
                out.append("### Notes")
                for i, note in notes:
                    out.append("")
                    out.append(f"**#{i}**")
                    out.append("")
                    out.extend("> " + line for line in note.splitlines())

        if snap.active_since is not None:
            out.append("")
            out.append(
                f"Running since {clock_label(snap.active_since)} "
                f"({human_minutes(snap.active_minutes)} so far)"
            )
        elif snap.on_break:
            out.append("")
            out.append(f"On break ({human_minutes(snap.active_minutes)} so far)")
        return "\n".join(out)

    # ---------- extensions ----------
    def extensions(self) -> Tuple[List[str], Dict]:
        return ["extra", "sane_lists", "tables", "nl2br"], {}

    # ---------- CSS ----------
    def css(self) -> str:
        t = self.theme
        return f"""
        body {{
          font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Arial, sans-serif;
          margin: 12px;
          color: {t.text};
          background: {t.panel};
          font-size: 13px;
          line-height: 1.5;
        }}

        h2, h3 {{ color: {t.accent}; margin: 0.8em 0 0.4em; }}
        p {{ margin: 0.5em 0; }}
        em {{ color: {t.muted}; }}

        table {{
          border-collapse: collapse;
          width: 100%;
          margin: 0.6em 0;
        }}
        th, td {{
          border: 1px solid {t.border};
          padding: 4px 8px;
          text-align: left;
        }}
        th {{ color: {t.accent}; }}

        blockquote {{
          margin: 0.4em 0;
          padding: 0.2em 0 0.2em 0.8em;
          border-left: 3px solid {t.accent};
          color: {t.muted};
        }}
        """

    # ---------- render ----------
    def to_html(self, md_text: str) -> str:
        exts, cfg = self.extensions()
        body = markdown(
            md_text or "",
            extensions=exts,
            extension_configs=cfg,
            output_format="html5",
        )
        return f"""
        <html>
          <head>
            <meta charset="utf-8"/>
            <style>{self.css()}</style>
          </head>
          <body>{body}</body>
        </html>
        """

    def render_day(self, snap: DaySnapshot, now: datetime) -> str:
        self.theme = ReportTheme.from_milestone(current_tier(snap.work_minutes).payload)
        return self.to_html(self.to_markdown(snap, now))
