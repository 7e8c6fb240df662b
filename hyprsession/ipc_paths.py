"""Hyprland socket paths."""

import contextlib
import os
from pathlib import Path

__all__ = [
    "HYPRCTL",
    "HYPRLAND_INSTANCE_SIGNATURE",
    "IPC_FOLDER",
    "init_ipc_folder",
]

HYPRLAND_INSTANCE_SIGNATURE = os.environ.get("HYPRLAND_INSTANCE_SIGNATURE", "")

MAX_SOCKET_FILE_LEN = 15
MAX_SOCKET_PATH_LEN = 107

_runtime_dir = os.environ.get("XDG_RUNTIME_DIR", "")
_ORIGINAL_IPC_FOLDER = (
    f"{_runtime_dir}/hypr/{HYPRLAND_INSTANCE_SIGNATURE}"
    if _runtime_dir and Path(f"{_runtime_dir}/hypr/{HYPRLAND_INSTANCE_SIGNATURE}").exists()
    else f"/tmp/hypr/{HYPRLAND_INSTANCE_SIGNATURE}"  # noqa: S108
)

# AF_UNIX paths are limited to 107 bytes: use a short symlink when needed
if len(_ORIGINAL_IPC_FOLDER) >= MAX_SOCKET_PATH_LEN - MAX_SOCKET_FILE_LEN:
    IPC_FOLDER = f"/tmp/.hyprsession-{HYPRLAND_INSTANCE_SIGNATURE}"  # noqa: S108
else:
    IPC_FOLDER = _ORIGINAL_IPC_FOLDER

HYPRCTL = f"{IPC_FOLDER}/.socket.sock"


def init_ipc_folder() -> None:
    """Create the short symlink to the Hyprland folder if the real path is too long."""
    if HYPRLAND_INSTANCE_SIGNATURE and IPC_FOLDER != _ORIGINAL_IPC_FOLDER and not Path(IPC_FOLDER).exists():
        with contextlib.suppress(OSError):
            Path(IPC_FOLDER).symlink_to(_ORIGINAL_IPC_FOLDER)
