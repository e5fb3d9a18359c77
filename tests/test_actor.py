import asyncio
import contextlib
import sys
from pathlib import Path

import pytest

from klein.lsp.actor import (
    LspRequestError,
    LspServerNotification,
    spawn_actor,
)

FAKE_SERVER = r'''
import json
import os
import sys

log_path = sys.argv[1]
stdin = sys.stdin.buffer
stdout = sys.stdout.buffer


def read():
    length = None
    while True:
        line = stdin.readline()
        if not line:
            return None
        line = line.strip()
        if not line:
            break
        key, _, value = line.partition(b":")
        if key.strip().lower() == b"content-length":
            length = int(value)
    return json.loads(stdin.read(length))


def send(obj):
    body = json.dumps(obj).encode()
    stdout.write(b"Content-Length: %d\r\n\r\n" % len(body) + body)
    stdout.flush()


def record(name):
    with open(log_path, "a") as handle:
        handle.write(name + "\n")


while True:
    msg = read()
    if msg is None:
        break
    method = msg.get("method")
    record(method or "<response>")
    mid = msg.get("id")
    if method == "echo":
        send({"jsonrpc": "2.0", "id": mid, "result": msg["params"]})
    elif method == "cwd":
        send({"jsonrpc": "2.0", "id": mid, "result": os.getcwd()})
    elif method == "fail":
        send({"jsonrpc": "2.0", "id": mid, "error": {"code": 1, "message": "boom"}})
    elif method == "fail_silently":
        send({"jsonrpc": "2.0", "id": mid, "error": {"code": 1}})
    elif method == "ping":
        send({"jsonrpc": "2.0", "method": "pong", "params": msg["params"]})
    elif method == "ask":
        send({"jsonrpc": "2.0", "id": "srv-1", "method": "workspace/configuration", "params": {}})
        reply = read()
        send({"jsonrpc": "2.0", "id": mid, "result": reply})
    elif method == "crash":
        sys.exit(1)
    elif method == "shutdown":
        send({"jsonrpc": "2.0", "id": mid, "result": None})
    elif method == "exit":
        break
'''


async def _spawn(tmp_path: Path):
    script = tmp_path / "fake_server.py"
    script.write_text(FAKE_SERVER)
    log_file = tmp_path / "calls.log"
    events: asyncio.Queue = asyncio.Queue()
    spawned = await spawn_actor(
        sys.executable, [str(script), str(log_file)], tmp_path, "fake", events
    )
    return spawned, events, log_file


@contextlib.asynccontextmanager
async def running_server(tmp_path: Path):
    spawned, events, log_file = await _spawn(tmp_path)
    try:
        yield spawned, events, log_file
    finally:
        spawned.handle.request_shutdown()
        await asyncio.wait_for(spawned.task, 15)


@pytest.mark.asyncio
async def test_handle_identifies_server(tmp_path):
    async with running_server(tmp_path) as (spawned, _events, _log):
        assert spawned.handle.language_id == "fake"
        assert spawned.handle.server_name == sys.executable


@pytest.mark.asyncio
async def test_request_round_trip(tmp_path):
    async with running_server(tmp_path) as (spawned, _events, _log):
        params = {"text": "héllo", "items": [1, 2, 3]}
        result = await asyncio.wait_for(spawned.handle.send_request("echo", params), 10)
        assert result == params


@pytest.mark.asyncio
async def test_concurrent_requests_are_matched_by_id(tmp_path):
    async with running_server(tmp_path) as (spawned, _events, log_file):
        results = await asyncio.wait_for(
            asyncio.gather(
                spawned.handle.send_request("echo", {"n": 1}),
                spawned.handle.send_request("echo", {"n": 2}),
                spawned.handle.send_request("echo", {"n": 3}),
            ),
            10,
        )
        assert results == [{"n": 1}, {"n": 2}, {"n": 3}]
        assert log_file.read_text().split().count("echo") == 3


@pytest.mark.asyncio
async def test_server_runs_in_working_dir(tmp_path):
    async with running_server(tmp_path) as (spawned, _events, _log):
        result = await asyncio.wait_for(spawned.handle.send_request("cwd", None), 10)
        assert Path(result).resolve() == tmp_path.resolve()


@pytest.mark.asyncio
async def test_error_response_raises_with_message(tmp_path):
    async with running_server(tmp_path) as (spawned, _events, _log):
        with pytest.raises(LspRequestError, match="boom"):
            await asyncio.wait_for(spawned.handle.send_request("fail", {}), 10)


@pytest.mark.asyncio
async def test_error_without_message_is_unknown(tmp_path):
    async with running_server(tmp_path) as (spawned, _events, _log):
        with pytest.raises(LspRequestError, match="unknown error"):
            await asyncio.wait_for(spawned.handle.send_request("fail_silently", {}), 10)


@pytest.mark.asyncio
async def test_server_notification_reaches_event_queue(tmp_path):
    async with running_server(tmp_path) as (spawned, events, _log):
        spawned.handle.send_notification("ping", {"n": 7})
        event = await asyncio.wait_for(events.get(), 10)
        assert event == LspServerNotification(method="pong", params={"n": 7})


@pytest.mark.asyncio
async def test_server_initiated_request_gets_method_not_found(tmp_path):
    async with running_server(tmp_path) as (spawned, _events, _log):
        reply = await asyncio.wait_for(spawned.handle.send_request("ask", {}), 10)
        assert reply["id"] == "srv-1"
        assert reply["error"]["code"] == -32601
        assert reply["error"]["message"] == "Server-initiated requests are not supported by Klein"


@pytest.mark.asyncio
async def test_crash_fails_pending_and_reports(tmp_path):
    async with running_server(tmp_path) as (spawned, events, _log):
        with pytest.raises(LspRequestError, match="server crashed"):
            await asyncio.wait_for(spawned.handle.send_request("crash", {}), 10)
        event = await asyncio.wait_for(events.get(), 10)
        assert event.method == "klein/serverCrashed"
        assert event.params == {"server": sys.executable}
        await asyncio.wait_for(spawned.task, 10)
        with pytest.raises(LspRequestError, match="actor channel closed"):
            spawned.handle.send_notification("ping", {})


@pytest.mark.asyncio
async def test_shutdown_handshake_and_closed_channel(tmp_path):
    spawned, _events, log_file = await _spawn(tmp_path)
    assert await asyncio.wait_for(spawned.handle.send_request("echo", 1), 10) == 1

    spawned.handle.request_shutdown()
    await asyncio.wait_for(spawned.task, 15)

    assert log_file.read_text().split()[-2:] == ["shutdown", "exit"]
    assert spawned.process.returncode == 0
    with pytest.raises(LspRequestError, match="actor channel closed"):
        spawned.handle.send_notification("ping", {})
    with pytest.raises(LspRequestError, match="actor channel closed"):
        await spawned.handle.send_request("echo", {})


@pytest.mark.asyncio
async def test_spawn_failure_raises(tmp_path):
    missing = str(tmp_path / "no-such-server")
    with pytest.raises(LspRequestError, match="failed to spawn"):
        await spawn_actor(missing, [], tmp_path, "fake", asyncio.Queue())