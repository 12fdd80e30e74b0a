# -*- coding: utf-8 -*-

from datetime import datetime, timezone
from typing import List

from core.aggregator import add_break_minutes, add_work_span, date_key, elapsed_minutes
from domain.models import ClosedSpan, Span, TrackerState


def midnight(ts: datetime) -> datetime:
    """
    00:00 of `ts`'s local date, with the offset in force at that midnight.

    Local timestamps from `datetime.now().astimezone()` carry a fixed offset
    with no DST rules; those are resolved through the system zone.
    """
    day = ts.replace(hour=0, minute=0, second=0, microsecond=0)
    if not isinstance(ts.tzinfo, timezone):
        return day
    if ts.astimezone().utcoffset() != ts.utcoffset():
        # fixed offset that is not local wall time (e.g. UTC)
        return day
    return datetime(ts.year, ts.month, ts.day).astimezone()


def normalize(state: TrackerState, now: datetime) -> List[ClosedSpan]:
    """
    Keep active spans inside today's date.

    An active session or break that started before today is split at
    today's midnight: [start, midnight) is recorded on the start date's
    log and the live span is rebased to midnight. Only one boundary is
    folded per call; calling again with the same `now` changes nothing.

    No I/O, no clock reads. Returns the closed portions that were recorded.
    """
    closed: List[ClosedSpan] = []
    mid = midnight(now)
    today = now.date()

    sess = state.active_session
    if sess is not None and sess.start.date() != today and mid > sess.start:
        key = date_key(sess.start)
        if add_work_span(state, sess.start, mid, tags=sess.tags, note=sess.note, key=key):
            closed.append(
                ClosedSpan(
                    kind="work",
                    day_key=key,
                    span=Span(start=sess.start, end=mid, tags=list(sess.tags), note=sess.note),
                )
            )
        sess.start = mid

    brk = state.active_break
    if brk is not None and brk.start.date() != today and mid > brk.start:
        key = date_key(brk.start)
        minutes = elapsed_minutes(brk.start, mid)
        if minutes > 0:
            add_break_minutes(state, minutes, key)
            closed.append(ClosedSpan(kind="break", day_key=key, span=Span(start=brk.start, end=mid)))
        brk.start = mid

    return closed
