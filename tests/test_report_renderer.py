from conftest import at
from core.lifecycle import start_session, stop_session
from core.projection import day_snapshot
from domain.models import TrackerState
from ui.report_renderer import DayReportRenderer, ReportTheme


def _snap(running=False):
    state = TrackerState()
    start_session(state, at(9, 0), tags=["a|b"], note="line one\nline two")
    stop_session(state, at(9, 45))
    if running:
        start_session(state, at(10, 0))
    return day_snapshot(state, at(10, 30))


def test_markdown_table_and_notes():
    md = DayReportRenderer().to_markdown(_snap(), at(10, 30))
    assert md.startswith("## 2025-03-14")
    assert "**Work** 45m of 12h" in md
    assert "| 1 | 9:00AM | 9:45AM | 45m | a\\|b |" in md
    assert "> line one\n> line two" in md


def test_markdown_running_line():
    md = DayReportRenderer().to_markdown(_snap(running=True), at(10, 30))
    assert md.rstrip().endswith("Running since 10:00AM (30m so far)")


def test_markdown_empty_day():
    snap = day_snapshot(TrackerState(), at(8, 0))
    assert "_No logged sessions yet._" in DayReportRenderer().to_markdown(snap, at(8, 0))


def test_html_uses_theme():
    renderer = DayReportRenderer(ReportTheme(accent="#123456"))
    html = renderer.to_html("| a | b |\n|---|---|\n| 1 | 2 |")
    assert "<table>" in html
    assert "#123456" in html


def test_render_day_follows_milestone_palette():
    renderer = DayReportRenderer()
    html = renderer.render_day(_snap(), at(10, 30))
    assert "<blockquote>" in html
    assert renderer.theme.accent == "#8aa788"
