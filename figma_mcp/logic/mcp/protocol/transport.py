"""
MCP Stream Transport Layer

Carries JSON-RPC messages over a duplex byte stream (stdio by default).
Messages are back-to-back JSON values with no length prefix, so the reader
side tracks JSON nesting across chunk boundaries to find where each value
ends.
"""

import asyncio
import codecs
import json
import logging
import sys
from typing import Any, Optional, Protocol

from figma_mcp.lib.exceptions import MessageDecodeError

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 64 * 1024


class IncrementalJsonDecoder:
    """
    Splits a stream of text into complete top-level JSON values.

    Only objects and arrays are accepted at the top level; scanning keeps its
    position between ``feed`` calls, so each byte is inspected once.
    """

    def __init__(self) -> None:
        self._utf8 = codecs.getincrementaldecoder("utf-8")()
        self._buffer = ""
        self._pos = 0
        self._start: Optional[int] = None
        self._depth = 0
        self._in_string = False
        self._escaped = False

    def feed(self, data: bytes) -> None:
        """Append raw bytes; multi-byte UTF-8 sequences may span calls."""
        try:
            self._buffer += self._utf8.decode(data)
        except UnicodeDecodeError as e:
            raise MessageDecodeError(f"Invalid UTF-8 in input stream: {e}") from e

    def next_value(self) -> Optional[Any]:
        """Return the next complete value, or None if more input is needed.

        Raises:
            MessageDecodeError: On a top-level scalar or invalid JSON
        """
        buf = self._buffer
        pos = self._pos

        if self._start is None:
            while pos < len(buf) and buf[pos] in " \t\r\n":
                pos += 1
            if pos == len(buf):
                self._discard(pos)
                return None
            if buf[pos] not in "{[":
                raise MessageDecodeError(
                    "Expected a JSON object at top level",
                    fragment=buf[pos:pos + 80],
                )
            self._start = pos

        while pos < len(buf):
            ch = buf[pos]
            pos += 1
            if self._in_string:
                if self._escaped:
                    self._escaped = False
                elif ch == "\\":
                    self._escaped = True
                elif ch == '"':
                    self._in_string = False
            elif ch == '"':
                self._in_string = True
            elif ch in "{[":
                self._depth += 1
            elif ch in "}]":
                self._depth -= 1
                if self._depth == 0:
                    return self._complete(pos)

        self._pos = pos
        return None

    def close(self) -> None:
        """Signal end of input; raises if a value was left unfinished."""
        try:
            self._buffer += self._utf8.decode(b"", final=True)
        except UnicodeDecodeError as e:
            raise MessageDecodeError(f"Truncated UTF-8 sequence at end of stream: {e}") from e
        if self._start is not None or self._buffer[self._pos:].strip():
            raise MessageDecodeError(
                "Unexpected end of stream inside a message",
                fragment=self._buffer[self._pos if self._start is None else self._start:],
            )

    def _complete(self, end: int) -> Any:
        text = self._buffer[self._start:end]
        self._start = None
        self._discard(end)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise MessageDecodeError(f"Malformed JSON message: {e}", fragment=text) from e
        except RecursionError as e:
            raise MessageDecodeError("JSON message is nested too deeply", fragment=text[:80]) from e

    def _discard(self, upto: int) -> None:
        self._buffer = self._buffer[upto:]
        self._pos = 0


class ByteReader(Protocol):
    async def read(self, n: int = -1) -> bytes: ...


class ByteWriter(Protocol):
    def write(self, data: bytes) -> Any: ...

    async def drain(self) -> None: ...


class StreamTransport:
    """
    Stream transport layer for MCP protocol.

    Reads one JSON value at a time from ``reader`` and writes each outgoing
    message as compact JSON followed by a newline to ``writer``.
    """

    def __init__(self, reader: ByteReader, writer: ByteWriter):
        """
        Initialize stream transport.

        Args:
            reader: Source of request bytes (e.g. asyncio.StreamReader)
            writer: Sink for response bytes (e.g. asyncio.StreamWriter)
        """
        self.reader = reader
        self.writer = writer
        self._decoder = IncrementalJsonDecoder()
        self._eof = False

    async def read_message(self) -> Optional[Any]:
        """
        Read the next decoded JSON value.

        Returns:
            The decoded value, or None at end of stream

        Raises:
            MessageDecodeError: If the stream contains malformed data
        """
        while True:
            value = self._decoder.next_value()
            if value is not None:
                return value
            if self._eof:
                return None

            chunk = await self.reader.read(READ_CHUNK_SIZE)
            if not chunk:
                self._eof = True
                self._decoder.close()
                continue
            self._decoder.feed(chunk)

    async def send(self, payload: dict[str, Any]) -> None:
        """
        Encode and write one message.

        Args:
            payload: JSON-serializable message body
        """
        data = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        self.writer.write(data.encode("utf-8") + b"\n")
        await self.writer.drain()
        logger.debug(f"Sent message: {data[:200]}")


async def open_stdio_transport() -> StreamTransport:
    """Wire process stdin/stdout into a StreamTransport."""
    loop = asyncio.get_running_loop()

    reader = asyncio.StreamReader()
    reader_protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: reader_protocol, sys.stdin)

    writer_transport, writer_protocol = await loop.connect_write_pipe(
        lambda: asyncio.StreamReaderProtocol(asyncio.StreamReader()), sys.stdout
    )
    writer = asyncio.StreamWriter(writer_transport, writer_protocol, reader, loop)
    return StreamTransport(reader, writer)
