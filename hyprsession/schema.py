"""Configuration schema of the `[hyprsession]` section."""

from .constants import DEFAULT_INTERVAL, DEFAULT_IPC_TIMEOUT, DEFAULT_SHUTDOWN_TIMEOUT, SESSION_FILE
from .validation import ConfigField, ConfigItems

__all__ = ["SESSION_CONFIG_SCHEMA"]

SESSION_CONFIG_SCHEMA = ConfigItems(
    ConfigField("interval", int, default=DEFAULT_INTERVAL, description="Seconds between two snapshots"),
    ConfigField("auto_save", bool, default=True, description="Keep saving the session periodically"),
    ConfigField("silent", bool, default=False, description="Don't print progress messages"),
    ConfigField("debug", bool, default=False, description="Print debug logs"),
    ConfigField("session_file", str, default=str(SESSION_FILE), description="Where the session is stored"),
    ConfigField("ipc_timeout", (int, float), default=DEFAULT_IPC_TIMEOUT, description="Seconds to wait for a Hyprland reply"),
    ConfigField(
        "shutdown_timeout",
        (int, float),
        default=DEFAULT_SHUTDOWN_TIMEOUT,
        description="Seconds allowed for the final snapshot on exit",
    ),
)
