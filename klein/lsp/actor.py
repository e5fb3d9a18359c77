"""One asyncio task per language server, owning the server's stdin and stdout.

Callers talk to the task through an ``ActorHandle``. Requests are answered
through futures. Notifications from the server go onto a shared event queue.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Union

from .codec import CodecError, decode, encode

log = logging.getLogger(__name__)

_SHUTDOWN_TIMEOUT = 5.0
_EXIT_GRACE = 2.0
_METHOD_NOT_FOUND = -32601
_WRITE_ERRORS = (OSError, RuntimeError)
_READ_ERRORS = (CodecError, ValueError, OSError)


class LspRequestError(Exception):
    """A language server could not be started or could not answer a request."""


@dataclass(frozen=True)
class LspServerNotification:
    """A notification sent by a server, or a synthetic event about the server."""

    method: str
    params: Any = None


@dataclass
class RequestMessage:
    """A request whose answer is delivered through ``response``."""

    method: str
    params: Any
    response: asyncio.Future


@dataclass
class NotificationMessage:
    """A notification to forward to the server."""

    method: str
    params: Any


@dataclass
class CancelMessage:
    """Cancel an outstanding request by its id."""

    id: int


@dataclass
class ShutdownMessage:
    """Run the shutdown handshake and stop the server."""


ActorMessage = Union[RequestMessage, NotificationMessage, CancelMessage, ShutdownMessage]


@dataclass
class _Mailbox:
    queue: asyncio.Queue = field(default_factory=asyncio.Queue)
    closed: bool = False


class ActorHandle:
    """Sends messages to one language-server actor."""

    def __init__(self, mailbox: _Mailbox, language_id: str, server_name: str) -> None:
        self._mailbox = mailbox
        self.language_id = language_id
        self.server_name = server_name

    def _post(self, message: ActorMessage) -> None:
        if self._mailbox.closed:
            raise LspRequestError("actor channel closed")
        self._mailbox.queue.put_nowait(message)

    async def send_request(self, method: str, params: Any) -> Any:
        """Send a request and return its result; raise LspRequestError on failure."""
        log.debug("[%s] sending request: %s", self.server_name, method)
        response = asyncio.get_running_loop().create_future()
        self._post(RequestMessage(method=method, params=params, response=response))
        return await response

    def send_notification(self, method: str, params: Any) -> None:
        """Queue a notification for the server."""
        log.debug("[%s] sending notification: %s", self.server_name, method)
        self._post(NotificationMessage(method=method, params=params))

    def request_shutdown(self) -> None:
        """Ask the actor to shut the server down; ignored once it has stopped."""
        try:
            self._post(ShutdownMessage())
        except LspRequestError:
            pass


@dataclass
class SpawnedActor:
    """A started server: its handle, the actor task and the process."""

    handle: ActorHandle
    task: asyncio.Task
    process: asyncio.subprocess.Process


async def spawn_actor(
    command: str,
    args: list[str] | tuple[str, ...],
    working_dir: str | os.PathLike,
    language_id: str,
    event_queue: asyncio.Queue,
) -> SpawnedActor:
    """Start a language server process and the task that talks to it."""
    log.info("spawning LSP server: %s %s", command, list(args))
    try:
        process = await asyncio.create_subprocess_exec(
            command,
            *args,
            cwd=os.fspath(working_dir),
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except OSError as exc:
        raise LspRequestError(f"failed to spawn {command}: {exc}") from exc

    if process.stdin is None or process.stdout is None:
        process.kill()
        await process.wait()
        raise LspRequestError("failed to capture server stdio")

    mailbox = _Mailbox()
    task = asyncio.create_task(_actor_loop(mailbox, process, event_queue, command))
    return SpawnedActor(
        handle=ActorHandle(mailbox, language_id, command),
        task=task,
        process=process,
    )


def _fail(future: asyncio.Future, message: str) -> None:
    if not future.done():
        future.set_exception(LspRequestError(message))


def _succeed(future: asyncio.Future, value: Any) -> None:
    if not future.done():
        future.set_result(value)


def _emit(event_queue: asyncio.Queue, event: LspServerNotification) -> None:
    try:
        event_queue.put_nowait(event)
    except asyncio.QueueFull:
        log.warning("event queue full, dropping %s", event.method)


async def _write(stdin: asyncio.StreamWriter, payload: Any) -> None:
    stdin.write(encode(payload))
    await stdin.drain()


def _is_server_request(msg: Any) -> bool:
    return isinstance(msg, dict) and "id" in msg and "method" in msg


def _handle_server_message(
    msg: Any,
    pending: dict[int, asyncio.Future],
    event_queue: asyncio.Queue,
    server_name: str,
) -> None:
    if not isinstance(msg, dict):
        return

    msg_id = msg.get("id")
    if isinstance(msg_id, int) and not isinstance(msg_id, bool):
        future = pending.pop(msg_id, None)
        if future is None:
            log.debug("[%s] <- orphan response #%s", server_name, msg_id)
        elif "error" in msg:
            error = msg["error"]
            message = error.get("message") if isinstance(error, dict) else None
            if not isinstance(message, str):
                message = "unknown error"
            log.debug("[%s] <- response #%s: error: %s", server_name, msg_id, message)
            _fail(future, message)
        else:
            log.debug("[%s] <- response #%s: ok", server_name, msg_id)
            _succeed(future, msg.get("result"))
        return

    method = msg.get("method")
    if isinstance(method, str):
        log.debug("[%s] <- notification: %s", server_name, method)
        _emit(event_queue, LspServerNotification(method=method, params=msg.get("params")))


async def _shutdown(
    stdin: asyncio.StreamWriter,
    stdout: asyncio.StreamReader,
    read_task: asyncio.Task | None,
    request_id: int,
    server_name: str,
) -> asyncio.Task | None:
    try:
        await _write(
            stdin,
            {"jsonrpc": "2.0", "id": request_id, "method": "shutdown", "params": None},
        )
    except _WRITE_ERRORS:
        return read_task

    if read_task is None or read_task.done():
        read_task = asyncio.ensure_future(decode(stdout))
    try:
        await asyncio.wait_for(asyncio.shield(read_task), _SHUTDOWN_TIMEOUT)
        log.debug("[%s] shutdown response received", server_name)
    except (asyncio.TimeoutError, *_READ_ERRORS):
        log.warning("[%s] shutdown response timed out", server_name)

    try:
        await _write(stdin, {"jsonrpc": "2.0", "method": "exit"})
    except _WRITE_ERRORS:
        pass
    return read_task


async def _stop_process(process: asyncio.subprocess.Process, graceful: bool) -> None:
    if process.stdin is not None and not process.stdin.is_closing():
        process.stdin.close()
    if graceful:
        try:
            await asyncio.wait_for(process.wait(), _EXIT_GRACE)
            return
        except asyncio.TimeoutError:
            pass
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
    await process.wait()


async def _finish_tasks(tasks: list[asyncio.Task | None]) -> None:
    live = [task for task in tasks if task is not None]
    for task in live:
        if not task.done():
            task.cancel()
    await asyncio.gather(*live, return_exceptions=True)


async def _actor_loop(
    mailbox: _Mailbox,
    process: asyncio.subprocess.Process,
    event_queue: asyncio.Queue,
    server_name: str,
) -> None:
    stdin = process.stdin
    stdout = process.stdout
    next_id = 1
    pending: dict[int, asyncio.Future] = {}
    inbox_task: asyncio.Task | None = None
    read_task: asyncio.Task | None = None
    graceful = False

    try:
        while True:
            if inbox_task is None:
                inbox_task = asyncio.ensure_future(mailbox.queue.get())
            if read_task is None:
                read_task = asyncio.ensure_future(decode(stdout))

            done, _ = await asyncio.wait(
                {inbox_task, read_task}, return_when=asyncio.FIRST_COMPLETED
            )

            if read_task in done:
                finished, read_task = read_task, None
                try:
                    msg = finished.result()
                except _READ_ERRORS as exc:
                    log.error("[%s] server read error (likely crashed): %s", server_name, exc)
                    for future in pending.values():
                        _fail(future, "server crashed")
                    pending.clear()
                    _emit(
                        event_queue,
                        LspServerNotification(
                            method="klein/serverCrashed", params={"server": server_name}
                        ),
                    )
                    break

                if _is_server_request(msg):
                    log.debug("[%s] <- server request #%s (unsupported)", server_name, msg["id"])
                    try:
                        await _write(
                            stdin,
                            {
                                "jsonrpc": "2.0",
                                "id": msg["id"],
                                "error": {
                                    "code": _METHOD_NOT_FOUND,
                                    "message": "Server-initiated requests are not supported by Klein",
                                },
                            },
                        )
                    except _WRITE_ERRORS:
                        pass
                else:
                    _handle_server_message(msg, pending, event_queue, server_name)

            if inbox_task in done:
                finished, inbox_task = inbox_task, None
                message = finished.result()

                if isinstance(message, RequestMessage):
                    request_id = next_id
                    next_id += 1
                    payload = {
                        "jsonrpc": "2.0",
                        "id": request_id,
                        "method": message.method,
                        "params": message.params,
                    }
                    try:
                        await _write(stdin, payload)
                    except _WRITE_ERRORS as exc:
                        log.error("[%s] stdin write failed: %s", server_name, exc)
                        _fail(message.response, f"write failed: {exc}")
                        break
                    pending[request_id] = message.response
                    log.debug("[%s] -> request #%s: %s", server_name, request_id, message.method)

                elif isinstance(message, NotificationMessage):
                    payload = {"jsonrpc": "2.0", "method": message.method, "params": message.params}
                    try:
                        await _write(stdin, payload)
                    except _WRITE_ERRORS as exc:
                        log.error("[%s] stdin write failed: %s", server_name, exc)
                        break
                    log.debug("[%s] -> notification: %s", server_name, message.method)

                elif isinstance(message, CancelMessage):
                    if pending.pop(message.id, None) is not None:
                        try:
                            await _write(
                                stdin,
                                {
                                    "jsonrpc": "2.0",
                                    "method": "$/cancelRequest",
                                    "params": {"id": message.id},
                                },
                            )
                        except _WRITE_ERRORS:
                            pass
                        log.debug("[%s] cancelled request #%s", server_name, message.id)

                elif isinstance(message, ShutdownMessage):
                    log.info("[%s] shutting down", server_name)
                    read_task = await _shutdown(stdin, stdout, read_task, next_id, server_name)
                    next_id += 1
                    graceful = True
                    break
    finally:
        mailbox.closed = True
        leftovers: list[ActorMessage] = []
        if inbox_task is not None and inbox_task.done() and not inbox_task.cancelled():
            leftovers.append(inbox_task.result())
        await _finish_tasks([inbox_task, read_task])
        while not mailbox.queue.empty():
            leftovers.append(mailbox.queue.get_nowait())
        for message in leftovers:
            if isinstance(message, RequestMessage):
                _fail(message.response, "actor dropped response sender")
        for future in pending.values():
            _fail(future, "actor dropped response sender")
        pending.clear()
        await _stop_process(process, graceful)
        log.info("[%s] actor loop exited", server_name)