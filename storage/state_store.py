# -*- coding: utf-8 -*-

"""
JSON persistence for the tracker state.

One document per user. Writes go to a temp file in the target directory
and are renamed over the destination, so the previous file survives any
failure mid-write.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from domain.errors import CorruptStateError, PersistenceError
from domain.models import DayLog, Span, TrackerState

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# RFC3339 fractions run from 1 to 9 digits; fromisoformat before 3.11
# only takes exactly 3 or 6
_FRACTION_RE = re.compile(r"\.(\d+)")


# ---------- encoding ----------
def _ts_out(ts: datetime) -> str:
    return ts.isoformat()


def _ts_in(raw: Any) -> datetime:
    if not isinstance(raw, str):
        raise ValueError(f"timestamp must be a string, got {raw!r}")
    s = raw.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    s = _FRACTION_RE.sub(lambda m: "." + (m.group(1) + "000000")[:6], s)
    ts = datetime.fromisoformat(s)
    if ts.tzinfo is None:
        raise ValueError(f"timestamp {raw!r} has no UTC offset")
    return ts


def span_to_dict(span: Span) -> Dict[str, Any]:
    out: Dict[str, Any] = {"start": _ts_out(span.start)}
    if span.end is not None:
        out["end"] = _ts_out(span.end)
    if span.tags:
        out["tags"] = list(span.tags)
    if span.note:
        out["note"] = span.note
    return out


def span_from_dict(d: Dict[str, Any]) -> Span:
    end = d.get("end")
    return Span(
        start=_ts_in(d["start"]),
        end=_ts_in(end) if end is not None else None,
        tags=[str(t) for t in (d.get("tags") or [])],
        note=str(d.get("note") or ""),
    )


def day_to_dict(log: DayLog) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "date": log.date,
        "sessions": [span_to_dict(s) for s in log.sessions],
        "total_work_minutes": log.total_work_minutes,
    }
    if log.total_work_seconds:
        out["total_work_seconds"] = log.total_work_seconds
    out["total_break_minutes"] = log.total_break_minutes
    out["break_count"] = log.break_count
    out["goal_minutes"] = log.goal_minutes
    return out


def day_from_dict(key: str, d: Dict[str, Any]) -> DayLog:
    return DayLog(
        date=str(d.get("date") or key),
        sessions=[span_from_dict(s) for s in (d.get("sessions") or [])],
        total_work_seconds=int(d.get("total_work_seconds") or 0),
        total_work_minutes=int(d.get("total_work_minutes") or 0),
        total_break_minutes=int(d.get("total_break_minutes") or 0),
        break_count=int(d.get("break_count") or 0),
        goal_minutes=int(d.get("goal_minutes") or 0),
    )


def state_to_dict(state: TrackerState) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "goal_minutes": state.goal_minutes,
        "break_interval_minutes": state.break_interval_minutes,
    }
    if state.active_session is not None:
        out["active_session"] = span_to_dict(state.active_session)
    if state.active_break is not None:
        out["active_break"] = span_to_dict(state.active_break)
    out["days"] = {k: day_to_dict(v) for k, v in state.days.items()}
    return out


def state_from_dict(d: Dict[str, Any]) -> TrackerState:
    if not isinstance(d, dict):
        raise ValueError("top-level value must be an object")
    sess = d.get("active_session")
    brk = d.get("active_break")
    days = d.get("days") or {}
    if not isinstance(days, dict):
        raise ValueError("'days' must be an object")

    st = TrackerState(
        goal_minutes=int(d.get("goal_minutes") or 0),
        break_interval_minutes=int(d.get("break_interval_minutes") or 0),
        active_session=span_from_dict(sess) if sess else None,
        active_break=span_from_dict(brk) if brk else None,
        days={str(k): day_from_dict(str(k), v) for k, v in days.items()},
    )
    st.ensure_defaults()
    return st


# ---------- file I/O ----------
def save_state(state: TrackerState, path: PathLike) -> None:
    path = Path(path)
    payload = json.dumps(state_to_dict(state), indent=2, ensure_ascii=False) + "\n"

    tmp: Optional[str] = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".tmp_", suffix=".json")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
        tmp = None
    except OSError as e:
        raise PersistenceError(f"could not save state to {path}: {e}") from e
    finally:
        if tmp is not None and os.path.exists(tmp):
            try:
                os.unlink(tmp)
            except OSError:
                logger.warning("could not remove temp file %s", tmp)
    logger.debug("saved state to %s", path)


def load_state(path: PathLike) -> TrackerState:
    """
    Read the state document. A missing file is replaced by defaults,
    which are written immediately.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info("no state at %s, creating defaults", path)
        st = TrackerState()
        save_state(st, path)
        return st
    except UnicodeDecodeError as e:
        raise CorruptStateError(path, str(e)) from e
    except OSError as e:
        raise PersistenceError(f"could not read state from {path}: {e}") from e

    try:
        return state_from_dict(json.loads(raw))
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        raise CorruptStateError(path, str(e)) from e


class StateStore:
    def __init__(self, path: PathLike):
        self.path = Path(path)

    def load(self) -> TrackerState:
        return load_state(self.path)

    def save(self, state: TrackerState) -> None:
        save_state(state, self.path)
