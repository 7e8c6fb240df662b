"""Common types: Hyprland client descriptors, session entries and errors."""

from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import NotRequired, TypedDict

__all__ = [
    "ClientInfo",
    "ConfigError",
    "Direction",
    "ExitCode",
    "HyprsessionError",
    "JSONResponse",
    "LaunchSpec",
    "PersistenceError",
    "ResolutionError",
    "SessionEntry",
    "SessionNotFoundError",
    "TransportError",
    "WindowState",
    "WorkspaceDf",
]

PlainTypes = float | str | dict[str, "PlainTypes"] | list["PlainTypes"]
JSONResponse = dict[str, PlainTypes] | list[dict[str, PlainTypes]] | PlainTypes


class WorkspaceDf(TypedDict):
    """Workspace definition."""

    id: int
    name: str


# "class" is a keyword, hence the functional syntax
ClientInfo = TypedDict(
    "ClientInfo",
    {
        "address": str,
        "mapped": bool,
        "hidden": bool,
        "at": list[int],
        "size": list[int],
        "workspace": WorkspaceDf,
        "floating": bool,
        "monitor": int,
        "class": str,
        "title": str,
        "initialClass": str,
        "initialTitle": str,
        "pid": int,
        "xwayland": bool,
        "pinned": bool,
        "fullscreen": int | bool,
        "grouped": list[str],
        "swallowing": str,
        "focusHistoryID": int,
    },
)
""" Client information as returned by Hyprland (`j/clients`) """


class SessionEntry(ClientInfo):
    """A saved client, with the means to start it again."""

    cmd: str
    appImage: NotRequired[str]
    flatpak: NotRequired[str]
    ppid: NotRequired[int]


@dataclass
class LaunchSpec:
    """How to start an application again."""

    cmd: str = ""
    app_image: str | None = None
    flatpak: str | None = None
    ppid: int | None = None

    @property
    def command(self) -> str:
        """The command line to run: app image, then flatpak, then the raw command."""
        if self.app_image:
            return self.app_image
        if self.flatpak:
            return f"flatpak run {self.flatpak}"
        return self.cmd

    @classmethod
    def from_entry(cls, entry: SessionEntry) -> "LaunchSpec":
        """Read the launch fields of a session entry."""
        return cls(
            cmd=entry.get("cmd") or "",
            app_image=entry.get("appImage") or None,
            flatpak=entry.get("flatpak") or None,
            ppid=entry.get("ppid"),
        )


class Direction(StrEnum):
    """Side used by `moveintogroup`."""

    LEFT = "l"
    RIGHT = "r"


class WindowState(StrEnum):
    """Steps of a saved window during a restore pass."""

    SEARCHING = "searching"
    FOUND = "found"
    LAUNCHING = "launching"
    PROPERTIES_APPLIED = "properties_applied"
    SKIPPED = "skipped"


class ExitCode(IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    SNAPSHOT_ERROR = 1  # session could not be captured or written
    CONFIG_ERROR = 2
    ENV_ERROR = 3  # not running under Hyprland


class HyprsessionError(Exception):
    """Base class for the errors raised by hyprsession."""


class TransportError(HyprsessionError):
    """The compositor socket is unreachable or did not answer."""


class SessionNotFoundError(HyprsessionError):
    """No session was saved yet."""


class ResolutionError(HyprsessionError):
    """No command is known to start a window again."""


class PersistenceError(HyprsessionError):
    """The session file can't be read or written."""


class ConfigError(HyprsessionError):
    """The configuration file is invalid."""
