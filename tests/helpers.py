"""Shared helpers for driving the server over in-memory streams."""

import asyncio
import json
from typing import Any, Iterable, Optional


class MemoryWriter:
    """In-memory byte sink with the StreamWriter write/drain interface."""

    def __init__(self) -> None:
        self.buffer = bytearray()

    def write(self, data: bytes) -> None:
        self.buffer.extend(data)

    async def drain(self) -> None:
        return None

    def messages(self) -> list[dict[str, Any]]:
        """Decode every newline-terminated message written so far."""
        return [json.loads(line) for line in self.buffer.decode("utf-8").splitlines() if line]


def make_reader(chunks: Iterable[bytes], eof: bool = True) -> asyncio.StreamReader:
    """StreamReader pre-loaded with ``chunks``; must be called inside a loop."""
    reader = asyncio.StreamReader()
    for chunk in chunks:
        reader.feed_data(chunk)
    if eof:
        reader.feed_eof()
    return reader


def encode(*messages: dict[str, Any]) -> bytes:
    """Encode messages back-to-back, the way clients put them on the wire."""
    return b"".join(json.dumps(message).encode("utf-8") for message in messages)


def request(request_id: Any, method: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    message: dict[str, Any] = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        message["params"] = params
    return message


def notification(method: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    message: dict[str, Any] = {"jsonrpc": "2.0", "method": method}
    if params is not None:
        message["params"] = params
    return message


INITIALIZE = request(
    0,
    "initialize",
    {
        "protocolVersion": "2024-11-05",
        "capabilities": {},
        "clientInfo": {"name": "test-client", "version": "1.0.0"},
    },
)
