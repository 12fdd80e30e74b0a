# -*- coding: utf-8 -*-

import os
from pathlib import Path

APP_ENV_STATE = "DAILY_STATE_PATH"


def config_dir() -> Path:
    """
    Per-user config directory.
    Honors XDG_CONFIG_HOME, falls back to ~/.config.
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser() / "daily"
    return Path.home() / ".config" / "daily"


def state_path() -> Path:
    """
    Resolution order:
    1. DAILY_STATE_PATH env var (explicit override)
    2. <config_dir>/state.json
    """
    if os.environ.get(APP_ENV_STATE):
        return Path(os.environ[APP_ENV_STATE]).expanduser()
    return config_dir() / "state.json"
