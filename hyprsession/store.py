"""Session file persistence: a JSON array of session entries."""

__all__ = ["SessionStore", "make_entry"]

import json
from logging import Logger
from pathlib import Path
from typing import cast

import aiofiles
import aiofiles.os

from .models import ClientInfo, LaunchSpec, PersistenceError, SessionEntry, SessionNotFoundError


def make_entry(client: ClientInfo, spec: LaunchSpec) -> SessionEntry:
    """Merge a live client with its launch specification."""
    entry = cast("SessionEntry", {**client, "cmd": spec.cmd})
    if spec.app_image:
        entry["appImage"] = spec.app_image
    if spec.flatpak:
        entry["flatpak"] = spec.flatpak
    if spec.ppid is not None:
        entry["ppid"] = spec.ppid
    return entry


class SessionStore:
    """Reads and writes the whole session at once."""

    def __init__(self, path: Path | str, logger: Logger) -> None:
        self.path = Path(path)
        self.log = logger

    async def load(self) -> list[SessionEntry]:
        """Return the saved session.

        Raises:
            SessionNotFoundError: nothing was saved yet
            PersistenceError: the file can't be read or isn't a session
        """
        if not await aiofiles.os.path.exists(self.path):
            msg = f"no session at {self.path}"
            raise SessionNotFoundError(msg)
        try:
            async with aiofiles.open(self.path, encoding="utf-8") as f:
                session = json.loads(await f.read())
        except (OSError, json.JSONDecodeError) as e:
            self.log.critical("Can't read %s: %s", self.path, e)
            raise PersistenceError(str(e)) from e
        if not isinstance(session, list) or not all(isinstance(entry, dict) for entry in session):
            self.log.critical("%s doesn't contain a session", self.path)
            msg = f"invalid session file {self.path}"
            raise PersistenceError(msg)
        return cast("list[SessionEntry]", session)

    async def save(self, session: list[SessionEntry]) -> None:
        """Replace the saved session.

        Raises:
            PersistenceError: the file can't be written
        """
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        try:
            await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(session))
            await aiofiles.os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            self.log.critical("Can't write %s: %s", self.path, e)
            raise PersistenceError(str(e)) from e
        self.log.debug("Saved %d windows to %s", len(session), self.path)
