# -*- coding: utf-8 -*-

"""
Thin adapters over desktop tools: the idle-time probe and notifications.
"""

import logging
import subprocess
import sys

from domain.errors import IdleProbeError

logger = logging.getLogger(__name__)


def _run(cmd) -> str:
    try:
        out = subprocess.run(cmd, capture_output=True, text=True, check=True, timeout=5)
    except (OSError, subprocess.SubprocessError) as e:
        raise IdleProbeError(f"{cmd[0]} failed: {e}") from e
    return out.stdout


def _idle_darwin() -> float:
    # HIDIdleTime is reported in nanoseconds
    for line in _run(["ioreg", "-c", "IOHIDSystem"]).splitlines():
        if "HIDIdleTime" not in line:
            continue
        fields = line.split()
        if not fields:
            continue
        try:
            return int(fields[-1].strip(",")) / 1e9
        except ValueError:
            continue
    raise IdleProbeError("HIDIdleTime not found")


def _idle_linux() -> float:
    raw = _run(["xprintidle"]).strip()
    try:
        return int(raw) / 1000.0
    except ValueError as e:
        raise IdleProbeError(f"unexpected xprintidle output: {raw!r}") from e


def idle_seconds() -> float:
    """Seconds since the last user input. Raises IdleProbeError when unsupported."""
    if sys.platform == "darwin":
        return _idle_darwin()
    if sys.platform.startswith("linux"):
        return _idle_linux()
    raise IdleProbeError("idle detection not supported")


def notify(title: str, message: str) -> None:
    """Best-effort desktop notification; failures are only logged."""
    if sys.platform == "darwin":
        esc_msg = message.replace('"', '\\"')
        esc_title = title.replace('"', '\\"')
        cmd = ["osascript", "-e", f'display notification "{esc_msg}" with title "{esc_title}"']
    elif sys.platform.startswith("linux"):
        cmd = ["notify-send", title, message]
    else:
        return
    try:
        subprocess.run(cmd, capture_output=True, check=False, timeout=5)
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("notification skipped: %s", e)
