"""Hyprsession application: restore pass, periodic snapshots and shutdown."""

import asyncio
import contextlib
import signal

from . import ipc
from .config import Configuration
from .constants import DEFAULT_INTERVAL, DEFAULT_IPC_TIMEOUT, DEFAULT_SHUTDOWN_TIMEOUT
from .logging_setup import SUCCEED, get_logger
from .models import ExitCode, HyprsessionError, PersistenceError, SessionEntry, SessionNotFoundError, TransportError
from .reconciler import RestoreReport, SessionReconciler
from .resolver import AppResolver
from .store import SessionStore, make_entry

__all__ = ["HyprSession"]


class HyprSession:
    """Main app object.

    Restore passes and snapshots share one lock, so a snapshot never runs
    while windows are being restored.
    """

    def __init__(self, config: Configuration) -> None:
        self.config = config
        self.log = get_logger()
        ipc.configure(config.get_float("ipc_timeout", DEFAULT_IPC_TIMEOUT))
        self.store = SessionStore(config.get_str("session_file"), get_logger("store"))
        self.resolver = AppResolver(get_logger("resolver"))
        self.reconciler = SessionReconciler(get_logger("reconciler"))
        self.list_windows, _ = ipc.get_controls(self.log)
        self.lock = asyncio.Lock()
        self.restoring = False
        self.exit_requested = asyncio.Event()

    async def capture(self) -> list[SessionEntry]:
        """Return the live windows with their launch specification."""
        clients = await self.list_windows()
        specs = await self.resolver.resolve_all(clients)
        return [make_entry(client, spec) for client, spec in zip(clients, specs, strict=True)]

    async def store_session(self) -> None:
        """Save the current session.

        Raises:
            TransportError: the windows can't be listed
            PersistenceError: the session can't be written
        """
        async with self.lock:
            self.log.info("Saving current session...")
            await self.store.save(await self.capture())

    async def restore_session(self) -> RestoreReport | None:
        """Restore the last saved session, None if there is none.

        Raises:
            PersistenceError: the session file is unreadable
        """
        async with self.lock:
            self.log.info("Restoring last session...")
            try:
                session = await self.store.load()
            except SessionNotFoundError:
                self.log.info("No session found.")
                return None
            self.restoring = True
            try:
                report = await self.reconciler.restore(session)
            finally:
                self.restoring = False
        if report.aborted:
            self.log.error("Session partially restored")
        else:
            self.log.info("Session restored!", extra=SUCCEED)
        return report

    async def autosave(self) -> None:
        """Save the session forever, every `interval` seconds."""
        interval = max(1, self.config.get_int("interval", DEFAULT_INTERVAL))
        while True:
            await self.store_session()
            self.log.info("Saved current session. Waiting...")
            await asyncio.sleep(interval)

    async def run(self, restore_only: bool = False, save_only: bool = False) -> ExitCode:
        """Run the requested workflow.

        - save only: snapshot once, or periodically when auto-save is on
        - otherwise restore (snapshot instead when nothing was saved), then
          exit if restore only, else snapshot like above

        Args:
            restore_only: exit once the session is restored
            save_only: don't restore anything
        """
        try:
            if not save_only:
                report = await self.restore_session()
                if report is not None and restore_only:
                    return ExitCode.SUCCESS
            if restore_only or not self.config.get_bool("auto_save", True):
                await self.store_session()
                self.log.info("Saved current session", extra=SUCCEED)
                return ExitCode.SUCCESS
            await self.autosave()
        except (TransportError, PersistenceError) as e:
            self.log.critical("ERROR: %s", e)
            return ExitCode.SNAPSHOT_ERROR
        return ExitCode.SUCCESS

    def request_exit(self) -> None:
        """Signal handler."""
        self.log.debug("Exit requested")
        self.exit_requested.set()

    async def final_snapshot(self) -> None:
        """Save the session one last time, giving up after `shutdown_timeout`."""
        timeout = self.config.get_float("shutdown_timeout", DEFAULT_SHUTDOWN_TIMEOUT)
        try:
            await asyncio.wait_for(self.store_session(), timeout=timeout)
        except TimeoutError:
            self.log.warning("Final snapshot timed out after %ss", timeout)
        except HyprsessionError as e:
            self.log.error("Final snapshot failed: %s", e)
        else:
            self.log.info("Saved current session", extra=SUCCEED)

    async def serve(self, restore_only: bool = False, save_only: bool = False) -> ExitCode:
        """Run the workflow until it completes or SIGINT / SIGTERM is received.

        On a signal the workflow is cancelled and a final snapshot is taken,
        unless a restore pass was running: the saved session is then kept.
        """
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self.request_exit)
        main_task = asyncio.create_task(self.run(restore_only=restore_only, save_only=save_only))
        exit_task = asyncio.create_task(self.exit_requested.wait())
        try:
            await asyncio.wait({main_task, exit_task}, return_when=asyncio.FIRST_COMPLETED)
            if main_task.done():
                return main_task.result()

            interrupted_restore = self.restoring
            main_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await main_task
            if interrupted_restore:
                self.log.warning("Interrupted while restoring, keeping the saved session")
            else:
                await self.final_snapshot()
            return ExitCode.SUCCESS
        finally:
            exit_task.cancel()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.remove_signal_handler(sig)
