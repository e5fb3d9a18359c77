"""Content-Length framing of JSON-RPC messages on a language-server stream."""

from __future__ import annotations

import asyncio
import json
from typing import Any


class CodecError(Exception):
    """A message could not be read from the stream."""


_CONTENT_LENGTH = b"content-length:"


def encode(msg: Any) -> bytes:
    """Frame a JSON value as ``Content-Length: N\\r\\n\\r\\n<body>``."""
    body = json.dumps(msg, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    header = f"Content-Length: {len(body)}\r\n\r\n".encode("ascii")
    return header + body


def _parse_length(value: bytes) -> int:
    text = value.strip()
    digits = text[1:] if text.startswith(b"+") else text
    if not digits or not digits.isdigit():
        raise CodecError(f"invalid Content-Length: {text.decode('utf-8', 'replace')!r}")
    return int(digits)


async def decode(reader: asyncio.StreamReader) -> Any:
    """Read one framed message from ``reader`` and return its JSON value.

    Raises CodecError on end of stream, malformed headers or invalid JSON.
    """
    content_length: int | None = None

    while True:
        line = await reader.readline()
        if not line:
            raise CodecError("EOF: language server connection closed")
        trimmed = line.strip()
        if not trimmed:
            break
        lower = trimmed.lower()
        if lower.startswith(_CONTENT_LENGTH):
            content_length = _parse_length(lower[len(_CONTENT_LENGTH):])

    if content_length is None:
        raise CodecError("missing Content-Length header")
    if content_length == 0:
        raise CodecError("Content-Length is 0")

    try:
        body = await reader.readexactly(content_length)
    except asyncio.IncompleteReadError as exc:
        raise CodecError("EOF while reading message body") from exc

    try:
        return json.loads(body)
    except (ValueError, UnicodeDecodeError) as exc:
        raise CodecError(f"invalid JSON in LSP message: {exc}") from exc