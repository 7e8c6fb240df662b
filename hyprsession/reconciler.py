"""Restore a saved session into the live window set.

Saved windows are processed one at a time, biggest groups first so that the
first member of every group is placed before the others join it:

- a live window matching the saved one is moved, resized, regrouped...
- otherwise the application is started with window rules describing the
  saved state, applied by Hyprland when the window appears

Any failure stops the pass. Windows without a known command are skipped.
"""

__all__ = ["RestoreReport", "SessionReconciler", "build_launch_rules", "sort_by_group_size", "strip_special"]

from collections.abc import Iterable
from dataclasses import dataclass, field
from logging import Logger

from .constants import SPECIAL_PREFIX
from .groups import GroupTracker
from .ipc import get_controls
from .logging_setup import SUCCEED, get_logger
from .matcher import find_matching_window
from .models import ClientInfo, LaunchSpec, ResolutionError, SessionEntry, TransportError, WindowState


def sort_by_group_size(session: Iterable[SessionEntry]) -> list[SessionEntry]:
    """Order entries by descending group size, keeping the saved order otherwise."""
    return sorted(session, key=lambda entry: len(entry.get("grouped") or []), reverse=True)


def strip_special(workspace: str) -> str:
    """Remove the "special:" prefix of a workspace name."""
    return workspace.removeprefix(SPECIAL_PREFIX)


def _workspace_name(client: ClientInfo) -> str:
    return (client.get("workspace") or {}).get("name") or ""


def _name(entry: ClientInfo) -> str:
    return entry.get("initialClass") or entry.get("class") or entry.get("initialTitle") or "?"


def build_launch_rules(entry: SessionEntry, join_group: bool) -> list[str]:
    """Window rules reproducing the saved state of `entry` on a new window.

    Args:
        entry: the saved window
        join_group: True if a previous member of its group was already restored
    """
    floating = bool(entry.get("floating"))
    rules = ["float" if floating else "tile"]
    if floating:
        size = entry.get("size")
        if size:
            rules.append(f"size {size[0]} {size[1]}")
        pos = entry.get("at")
        if pos:
            rules.append(f"move {pos[0]} {pos[1]}")
    if entry.get("grouped"):
        rules.append("group invade" if join_group else "group set")
    if entry.get("fullscreen"):
        rules.append("fullscreen")
    workspace = _workspace_name(entry)
    if workspace:
        rules.append(f"workspace {workspace} silent")
    return rules


@dataclass
class RestoreReport:
    """Outcome of a restore pass."""

    windows: list[tuple[str, WindowState]] = field(default_factory=list)
    """ (name, path taken) for every processed entry """
    aborted: bool = False

    def count(self, state: WindowState) -> int:
        """Number of windows which went through `state`."""
        return sum(1 for _, st in self.windows if st == state)


class SessionReconciler:
    """Runs one restore pass at a time; the group bookkeeping lives in the pass."""

    def __init__(self, logger: Logger | None = None) -> None:
        self.log = logger or get_logger("reconciler")
        self.list_windows, self.dispatch = get_controls(self.log)

    async def restore(self, session: Iterable[SessionEntry]) -> RestoreReport:
        """Restore every window of `session`, stopping at the first failure."""
        report = RestoreReport()
        tracker = GroupTracker()
        claimed: set[str] = set()
        for entry in sort_by_group_size(session):
            name = _name(entry)
            self.log.info("Restoring %s...", name)
            try:
                path = await self.restore_window(entry, tracker, claimed)
            except ResolutionError as e:
                self.log.warning("Skipping %s: %s", name, e)
                path = WindowState.SKIPPED
            except Exception:  # pylint: disable=broad-except
                self.log.exception("Restoring %s failed, giving up", name)
                report.aborted = True
                break
            report.windows.append((name, path))
        return report

    async def restore_window(self, entry: SessionEntry, tracker: GroupTracker, claimed: set[str]) -> WindowState:
        """Locate or launch one saved window.

        Returns:
            FOUND or LAUNCHING, the path taken before the properties were applied
        """
        name = _name(entry)
        self.log.debug("%s: %s", name, WindowState.SEARCHING)
        live = find_matching_window(entry, await self.list_windows(), exclude=claimed)
        if live is not None:
            self.log.info("Found window for %s", name)
            claimed.add(live["address"])
            await self.set_window_properties(entry, live, tracker)
            path = WindowState.FOUND
        else:
            self.log.info("Starting application %s...", name)
            await self.launch(entry, tracker)
            path = WindowState.LAUNCHING
        self.log.debug("%s: %s", name, WindowState.PROPERTIES_APPLIED)
        self.log.info("Restored %s", name, extra=SUCCEED)
        return path

    async def _run(self, dispatcher: str, *args: str) -> None:
        """Dispatch a command, a missing reply being a failure."""
        if not await self.dispatch(dispatcher, *args):
            msg = f"no reply to {dispatcher}"
            raise TransportError(msg)

    async def set_window_properties(self, saved: SessionEntry, live: ClientInfo, tracker: GroupTracker) -> None:
        """Move `live` back to the saved state (floating, geometry, workspace, group)."""
        target = f"address:{live['address']}"
        floating = bool(saved.get("floating"))

        if floating and not live.get("floating"):
            await self._run("setfloating", target)
        elif not floating and live.get("floating"):
            await self._run("settiled", target)

        if floating:
            size = saved.get("size")
            if size and list(size) != list(live.get("size") or ()):
                await self._run("resizewindowpixel", f"exact {size[0]} {size[1]},{target}")
            pos = saved.get("at")
            if pos and list(pos) != list(live.get("at") or ()):
                await self._run("movewindowpixel", f"exact {pos[0]} {pos[1]},{target}")

        workspace = _workspace_name(saved)
        if workspace and workspace != _workspace_name(live):
            await self._run("movetoworkspacesilent", f"{strip_special(workspace)},{target}")

        members = saved.get("grouped") or []
        if members and not live.get("grouped"):
            # group dispatchers act on the active window
            await self._run("focuswindow", target)
            if tracker.observe(members, live["address"]):
                side = tracker.side_of(members, live, await self.list_windows())
                await self._run("moveintogroup", side)
            else:
                await self._run("togglegroup")

        if members and tracker.count(members) == len(members) and workspace.startswith(SPECIAL_PREFIX):
            await self._run("togglespecialworkspace", strip_special(workspace))

    async def launch(self, entry: SessionEntry, tracker: GroupTracker) -> None:
        """Start the application of `entry` with rules matching its saved state.

        Raises:
            ResolutionError: no command is known for this window
        """
        command = LaunchSpec.from_entry(entry).command
        if not command:
            msg = f"no command saved for {_name(entry)}"
            raise ResolutionError(msg)
        members = entry.get("grouped") or []
        rules = build_launch_rules(entry, join_group=bool(members) and tracker.is_known(members))
        if members:
            tracker.observe(members, None)
        await self._run("exec", f"[{'; '.join(rules)}] {command}")
