import asyncio
import json
from unittest.mock import AsyncMock, Mock

import pytest

from hyprsession import ipc
from hyprsession.constants import DEFAULT_IPC_TIMEOUT
from hyprsession.models import TransportError

from .testtools import make_client


@pytest.fixture
def mock_open_connection(mocker):
    reader = AsyncMock()
    # StreamWriter.write and close are synchronous, drain and wait_closed are async
    writer = Mock()
    writer.drain = AsyncMock()
    writer.wait_closed = AsyncMock()

    mock_connect = mocker.patch("asyncio.open_unix_connection", return_value=(reader, writer))
    return mock_connect, reader, writer


@pytest.fixture
def short_timeout():
    ipc.configure(0.01)
    yield
    ipc.configure(DEFAULT_IPC_TIMEOUT)


@pytest.mark.asyncio
async def test_hyprctl_connection_context_manager(mock_open_connection):
    _, reader, writer = mock_open_connection
    logger = Mock()

    async with ipc.hyprctl_connection(logger) as (r, w):
        assert r == reader
        assert w == writer

    writer.close.assert_called_once()
    writer.wait_closed.assert_awaited_once()


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [FileNotFoundError, ConnectionRefusedError])
async def test_hyprctl_connection_error(mocker, error):
    mocker.patch("asyncio.open_unix_connection", side_effect=error)
    logger = Mock()

    with pytest.raises(TransportError):
        async with ipc.hyprctl_connection(logger):
            pass

    logger.critical.assert_called_with("hyprctl socket not found! is it running ?")


@pytest.mark.asyncio
async def test_get_response(mock_open_connection):
    _, reader, writer = mock_open_connection
    logger = Mock()
    reader.read.return_value = b'{"status": "ok"}'

    result = await ipc.get_response(b"command", logger)

    assert result == {"status": "ok"}
    writer.write.assert_called_with(b"command")
    writer.drain.assert_awaited_once()


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", [b"", b"not json"])
async def test_get_response_invalid(mock_open_connection, reply):
    _, reader, _ = mock_open_connection
    reader.read.return_value = reply

    with pytest.raises(TransportError):
        await ipc.get_response(b"command", Mock())


@pytest.mark.asyncio
async def test_list_windows(mock_open_connection):
    _, reader, writer = mock_open_connection
    clients = [make_client("kitty"), make_client("firefox", address="0x2")]
    reader.read.return_value = json.dumps(clients).encode()

    assert await ipc.list_windows(logger=Mock()) == clients
    writer.write.assert_called_with(b"-j/clients")


@pytest.mark.asyncio
async def test_list_windows_unexpected_reply(mock_open_connection):
    _, reader, _ = mock_open_connection
    reader.read.return_value = b'{"error": true}'

    with pytest.raises(TransportError):
        await ipc.list_windows(logger=Mock())


def test_format_command():
    assert ipc.format_command("resizewindowpixel", "exact", 800, 600) == "resizewindowpixel exact 800 600"
    assert ipc.format_command("togglegroup") == "togglegroup"


@pytest.mark.asyncio
async def test_dispatch(mock_open_connection):
    _, reader, writer = mock_open_connection
    logger = Mock()
    reader.read.return_value = b"ok\n"

    assert await ipc.dispatch("movetoworkspacesilent", "2,address:0xa", logger=logger) == "ok"
    writer.write.assert_called_with(b"/dispatch movetoworkspacesilent 2,address:0xa")
    logger.warning.assert_not_called()


@pytest.mark.asyncio
async def test_dispatch_failure(mock_open_connection):
    _, reader, _ = mock_open_connection
    logger = Mock()
    reader.read.return_value = b"Invalid dispatcher"

    assert await ipc.dispatch("nope", logger=logger) == "Invalid dispatcher"
    logger.warning.assert_called_with("FAILED %s: %s", "nope", "Invalid dispatcher")


@pytest.mark.asyncio
async def test_dispatch_timeout(mock_open_connection, short_timeout):
    _, reader, _ = mock_open_connection

    async def never_replies():
        await asyncio.sleep(10)

    reader.read.side_effect = never_replies

    assert await ipc.dispatch("togglegroup", logger=Mock()) == ""


@pytest.mark.asyncio
async def test_retry_on_reset(mocker):
    connect = mocker.patch("asyncio.open_unix_connection", side_effect=ConnectionResetError)
    sleep = mocker.patch("hyprsession.ipc.asyncio.sleep", AsyncMock())
    logger = Mock()

    with pytest.raises(TransportError):
        await ipc.dispatch("togglegroup", logger=logger)

    assert connect.call_count == 3
    assert sleep.await_count == 3
    logger.error.assert_called_with("ipc connection failed.")


@pytest.mark.asyncio
async def test_get_controls(mock_open_connection):
    _, reader, writer = mock_open_connection
    reader.read.return_value = b"ok"
    list_windows, dispatch = ipc.get_controls(Mock())

    assert await dispatch("togglegroup") == "ok"
    writer.write.assert_called_with(b"/dispatch togglegroup")
    assert list_windows.keywords.keys() == {"logger"}
