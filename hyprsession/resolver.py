"""Find out how a window's application can be started again.

Three sources, from the most to the least preferred at restore time:

- a desktop entry whose StartupWMClass matches the window class (app images)
- an installed flatpak matching the window
- the raw command line of the window's process
"""

__all__ = ["AppResolver", "list_flatpaks", "match_flatpak", "parse_flatpak_list", "read_cmdline", "read_ppid"]

import asyncio
import re
import shlex
from collections.abc import Iterable, Sequence
from logging import Logger
from pathlib import Path

import aiofiles
import aiofiles.os

from .constants import APPLICATION_DIRS
from .models import ClientInfo, LaunchSpec, ResolutionError

FlatpakList = list[tuple[str, str]]
""" (name, application id) pairs """

_STARTUP_WM_CLASS = re.compile(r"^StartupWMClass=(.+)$", re.MULTILINE)
_EXEC = re.compile(r"^Exec=(.+)$", re.MULTILINE)
_FIELD_CODE = re.compile(r"\s*%[a-zA-Z]")


async def read_cmdline(pid: int) -> str:
    """Return the command line of process `pid`, shell-quoted.

    Raises:
        ResolutionError: the process is gone or has no command line
    """
    try:
        async with aiofiles.open(f"/proc/{pid}/cmdline", "rb") as f:
            content = await f.read()
    except OSError as e:
        msg = f"can't read the command line of pid {pid}"
        raise ResolutionError(msg) from e
    parts = [part.decode("utf-8", errors="replace") for part in content.split(b"\0") if part]
    if not parts:
        msg = f"pid {pid} has an empty command line"
        raise ResolutionError(msg)
    return shlex.join(parts)


async def read_ppid(pid: int) -> int | None:
    """Return the parent pid of `pid`, None if unknown."""
    try:
        async with aiofiles.open(f"/proc/{pid}/stat", encoding="utf-8") as f:
            stat = await f.read()
    except OSError:
        return None
    # the process name (2nd field) may contain spaces and parenthesis
    fields = stat[stat.rfind(")") + 2 :].split()
    try:
        return int(fields[1])
    except (IndexError, ValueError):
        return None


def parse_flatpak_list(output: str) -> FlatpakList:
    """Parse the output of `flatpak list --columns=name,application`."""
    result: FlatpakList = []
    for line in output.splitlines():
        columns = [col.strip() for col in line.split("\t")]
        if len(columns) < 2 or not columns[0] or not columns[1]:  # noqa: PLR2004
            continue
        if columns[1] == "Application ID":  # header
            continue
        result.append((columns[0], columns[1]))
    return result


async def list_flatpaks(logger: Logger) -> FlatpakList:
    """Return the installed flatpaks, empty if flatpak isn't available."""
    try:
        proc = await asyncio.create_subprocess_exec(
            "flatpak",
            "list",
            "--columns=name,application",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except FileNotFoundError:
        logger.debug("flatpak is not installed")
        return []
    stdout, _ = await proc.communicate()
    if proc.returncode:
        logger.warning("flatpak list failed with code %s", proc.returncode)
        return []
    return parse_flatpak_list(stdout.decode("utf-8", errors="replace"))


def match_flatpak(client: ClientInfo, flatpaks: Iterable[tuple[str, str]]) -> str | None:
    """Return the application id of the flatpak running `client`, if any.

    The class is compared to the application id first, then the flatpak
    name is searched in the initial title.
    """
    flatpaks = list(flatpaks)
    classes = {(client.get(prop) or "").lower() for prop in ("initialClass", "class")} - {""}
    for _, app_id in flatpaks:
        if app_id.lower() in classes:
            return app_id
    title = (client.get("initialTitle") or "").lower()
    for name, app_id in flatpaks:
        if name.lower() in title:
            return app_id
    return None


class AppResolver:
    """Resolves the launch specification of live windows."""

    def __init__(self, logger: Logger, application_dirs: Sequence[Path] = APPLICATION_DIRS) -> None:
        self.log = logger
        self.application_dirs = application_dirs
        self._flatpaks: FlatpakList | None = None

    async def find_app_image(self, klass: str) -> str | None:
        """Return the `Exec` line of the desktop entry declaring `klass` as StartupWMClass."""
        if not klass:
            return None
        for folder in self.application_dirs:
            if not await aiofiles.os.path.isdir(folder):
                continue
            try:
                names = sorted(await aiofiles.os.listdir(folder))
            except OSError as e:
                self.log.debug("Can't list %s: %s", folder, e)
                continue
            for name in names:
                if klass not in name or not name.endswith(".desktop"):
                    continue
                try:
                    async with aiofiles.open(Path(folder) / name, encoding="utf-8", errors="replace") as f:
                        entry = await f.read()
                except OSError as e:
                    self.log.warning("Can't read %s: %s", name, e)
                    continue
                wm_class = _STARTUP_WM_CLASS.search(entry)
                exec_line = _EXEC.search(entry)
                if wm_class and exec_line and klass in wm_class.group(1):
                    return _FIELD_CODE.sub("", exec_line.group(1)).strip()
        return None

    async def resolve(self, client: ClientInfo) -> LaunchSpec:
        """Return the launch specification of `client`.

        The raw command line is always filled when the process still exists;
        a vanished process leaves it empty.
        """
        flatpaks = self._flatpaks if self._flatpaks is not None else await list_flatpaks(self.log)
        pid = client.get("pid", 0)
        try:
            cmd = await read_cmdline(pid)
        except ResolutionError as e:
            self.log.warning("%s (%s)", e, client.get("initialClass"))
            cmd = ""
        return LaunchSpec(
            cmd=cmd,
            app_image=await self.find_app_image(client.get("class") or ""),
            flatpak=match_flatpak(client, flatpaks),
            ppid=await read_ppid(pid),
        )

    async def resolve_all(self, clients: Sequence[ClientInfo]) -> list[LaunchSpec]:
        """Resolve every client concurrently, listing flatpaks only once."""
        self._flatpaks = await list_flatpaks(self.log)
        try:
            return list(await asyncio.gather(*(self.resolve(client) for client in clients)))
        finally:
            self._flatpaks = None
