"""Shared constants for hyprsession."""

import os
from pathlib import Path

__all__ = [
    "APPLICATION_DIRS",
    "CONFIG_FILE",
    "DEFAULT_INTERVAL",
    "DEFAULT_IPC_TIMEOUT",
    "DEFAULT_SHUTDOWN_TIMEOUT",
    "IPC_MAX_RETRIES",
    "IPC_RETRY_DELAY_MULTIPLIER",
    "SESSION_DIR",
    "SESSION_FILE",
    "SPECIAL_PREFIX",
]

_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
_xdg_data_home = Path(os.environ.get("XDG_DATA_HOME") or Path.home() / ".local" / "share")

CONFIG_FILE = _xdg_config_home / "hyprsession" / "config.toml"
SESSION_DIR = _xdg_data_home / "hyprsession"
SESSION_FILE = SESSION_DIR / "session.json"

# desktop entries searched for app images, in order
APPLICATION_DIRS = (_xdg_data_home / "applications", Path("/usr/share/applications"))

DEFAULT_INTERVAL = 60  # seconds between two snapshots
DEFAULT_IPC_TIMEOUT = 1.0
DEFAULT_SHUTDOWN_TIMEOUT = 3.0

# IPC retry settings
IPC_MAX_RETRIES = 3
IPC_RETRY_DELAY_MULTIPLIER = 0.5

SPECIAL_PREFIX = "special:"
