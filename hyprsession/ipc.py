"""Talk to Hyprland using its request socket.

Two calls are exposed to the rest of the code:

- `list_windows` fetches ``j/clients``, never cached
- `dispatch` sends one dispatcher and returns Hyprland's textual reply

A reply that does not come within the configured timeout completes the call
with an empty result instead of blocking.
"""

__all__ = [
    "configure",
    "dispatch",
    "format_command",
    "get_controls",
    "get_response",
    "hyprctl_connection",
    "list_windows",
]

import asyncio
import json
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from functools import partial, wraps
from logging import Logger
from typing import Any, cast

from . import ipc_paths
from .constants import DEFAULT_IPC_TIMEOUT, IPC_MAX_RETRIES, IPC_RETRY_DELAY_MULTIPLIER
from .models import ClientInfo, JSONResponse, TransportError


class _IpcSettings:
    """Mutable transport settings."""

    timeout: float = DEFAULT_IPC_TIMEOUT


def configure(timeout: float) -> None:
    """Set the reply timeout, in seconds."""
    _IpcSettings.timeout = timeout


def retry_on_reset(func: Callable) -> Callable:
    """Retry the call when Hyprland resets the connection."""

    @wraps(func)
    async def wrapper(*args, logger: Logger, **kwargs) -> Any:  # noqa: ANN401
        exc = None
        for count in range(IPC_MAX_RETRIES):
            try:
                return await func(*args, **kwargs, logger=logger)
            except ConnectionResetError as e:  # noqa: PERF203
                exc = e
                logger.warning("ipc connection problem, retrying...")
                await asyncio.sleep(IPC_RETRY_DELAY_MULTIPLIER * count)
        logger.error("ipc connection failed.")
        msg = "connection reset by Hyprland"
        raise TransportError(msg) from exc

    return wrapper


@asynccontextmanager
async def hyprctl_connection(logger: Logger) -> AsyncIterator[tuple[asyncio.StreamReader, asyncio.StreamWriter]]:
    """Open a connection to the request socket, closing it on exit.

    Raises:
        TransportError: the socket does not exist or refuses connections
    """
    try:
        reader, writer = await asyncio.open_unix_connection(ipc_paths.HYPRCTL)
    except (FileNotFoundError, ConnectionRefusedError) as e:
        logger.critical("hyprctl socket not found! is it running ?")
        msg = f"can't connect to {ipc_paths.HYPRCTL}"
        raise TransportError(msg) from e
    try:
        yield reader, writer
    finally:
        writer.close()
        await writer.wait_closed()


async def _read_reply(reader: asyncio.StreamReader, logger: Logger) -> bytes:
    """Read the whole reply, or return an empty one after the timeout."""
    try:
        return await asyncio.wait_for(reader.read(), timeout=_IpcSettings.timeout)
    except TimeoutError:
        logger.warning("No reply from Hyprland after %ss", _IpcSettings.timeout)
        return b""


async def get_response(command: bytes, logger: Logger) -> JSONResponse:
    """Send `command` and decode the JSON reply.

    Raises:
        TransportError: empty or invalid reply
    """
    async with hyprctl_connection(logger) as (reader, writer):
        writer.write(command)
        await writer.drain()
        reply = await _read_reply(reader, logger)

    if not reply:
        msg = f"empty reply to {command.decode()}"
        raise TransportError(msg)
    try:
        return cast("JSONResponse", json.loads(reply.decode("utf-8", errors="replace")))
    except json.JSONDecodeError as e:
        logger.error("Invalid reply to %s: %s", command.decode(), e)
        msg = f"invalid reply to {command.decode()}"
        raise TransportError(msg) from e


@retry_on_reset
async def list_windows(*, logger: Logger) -> list[ClientInfo]:
    """Return the live windows, as reported by Hyprland right now."""
    logger.debug("clients")
    ret = await get_response(b"-j/clients", logger)
    if not isinstance(ret, list):
        msg = "unexpected clients reply"
        raise TransportError(msg)
    return cast("list[ClientInfo]", ret)


def format_command(dispatcher: str, *args: str | int | float) -> str:
    """Format a dispatcher and its arguments.

    Eg.
        format_command("resizewindowpixel", "exact", 800, 600) == "resizewindowpixel exact 800 600"
    """
    return " ".join([dispatcher, *(str(arg) for arg in args)])


@retry_on_reset
async def dispatch(dispatcher: str, *args: str | int | float, logger: Logger) -> str:
    """Run a dispatcher and return Hyprland's reply ("ok" on success, "" on timeout).

    Args:
        dispatcher: dispatcher name (eg. "movetoworkspacesilent")
        args: dispatcher arguments, joined with spaces
        logger: logger to use in case of error
    """
    command = format_command(dispatcher, *args)
    logger.debug("dispatch %s", command)
    async with hyprctl_connection(logger) as (reader, writer):
        writer.write(f"/dispatch {command}".encode())
        await writer.drain()
        reply = (await _read_reply(reader, logger)).decode("utf-8", errors="replace").strip()

    if reply and reply != "ok":
        logger.warning("FAILED %s: %s", command, reply)
    return reply


def get_controls(logger: Logger) -> tuple[Callable, Callable]:
    """Return (list_windows, dispatch) configured for the given logger."""
    return (
        partial(list_windows, logger=logger),
        partial(dispatch, logger=logger),
    )
