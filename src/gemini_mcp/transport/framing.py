"""
Message framing strategies.

A framing turns a raw byte stream into discrete JSON-RPC envelopes and
serializes outgoing envelopes back to bytes. One instance handles both
directions, so encoding always mirrors the framing used for decoding.

Two strategies exist:

- ``LineDelimitedFraming``: one JSON object per line (MCP stdio).
- ``ContentLengthFraming``: ``Content-Length: N`` header block, blank
  line, then exactly N bytes of JSON body.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import orjson

from gemini_mcp.transport.base import FramingError
from gemini_mcp.transport.types import FramingMode

logger = logging.getLogger(__name__)

CONTENT_LENGTH_HEADER = "content-length"
HEADER_TERMINATORS = (b"\r\n\r\n", b"\n\n")


class Framing(ABC):
    """Stateful decode/encode pair for one byte stream."""

    mode: FramingMode

    def __init__(self) -> None:
        self._buffer = bytearray()

    @property
    def buffered(self) -> int:
        """Number of bytes received but not yet consumed as a message."""
        return len(self._buffer)

    @abstractmethod
    def decode(self, data: bytes) -> list[dict[str, Any]]:
        """
        Feed received bytes and return every message now complete.

        Incomplete trailing data is kept until the next call. Malformed
        messages are logged and dropped; they never raise.
        """
        ...

    def finish(self) -> list[dict[str, Any]]:
        """Flush the buffer at end of stream. Partial frames are discarded."""
        if self._buffer.strip():
            logger.warning(f"Discarding {len(self._buffer)} bytes of incomplete frame at end of input")
        self._buffer.clear()
        return []

    @abstractmethod
    def encode(self, message: dict[str, Any]) -> bytes:
        """
        Serialize one message under this framing.

        Raises:
            FramingError: If the message is not JSON-serializable.
        """
        ...

    def _parse_body(self, body: bytes) -> dict[str, Any] | None:
        """Strictly parse one JSON object, logging and dropping failures."""
        try:
            message = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            logger.warning(f"Dropping unparseable message ({len(body)} bytes): {e}")
            return None
        if not isinstance(message, dict):
            logger.warning(f"Dropping message that is not a JSON object: {type(message).__name__}")
            return None
        if _id_overflowed(message.get("id")):
            # The response could not echo this id back unchanged
            logger.warning(f"Dropping message whose id exceeds the 64-bit integer range: {message['id']!r}")
            return None
        return message

    def _dumps(self, message: dict[str, Any]) -> bytes:
        try:
            return orjson.dumps(message)
        except TypeError as e:
            raise FramingError(f"Cannot encode message: {e}", cause=e)


class LineDelimitedFraming(Framing):
    """Newline-delimited JSON; whitespace-only lines are ignored."""

    mode = FramingMode.LINE

    def decode(self, data: bytes) -> list[dict[str, Any]]:
        self._buffer.extend(data)
        messages: list[dict[str, Any]] = []

        while True:
            newline = self._buffer.find(b"\n")
            if newline < 0:
                break
            line = bytes(self._buffer[:newline])
            del self._buffer[: newline + 1]

            message = self._parse_line(line)
            if message is not None:
                messages.append(message)

        return messages

    def finish(self) -> list[dict[str, Any]]:
        # A final line without a trailing newline is still a message
        line = bytes(self._buffer)
        self._buffer.clear()
        message = self._parse_line(line)
        return [message] if message is not None else []

    def encode(self, message: dict[str, Any]) -> bytes:
        # orjson never emits raw newlines, so one message is one line
        return self._dumps(message) + b"\n"

    def _parse_line(self, line: bytes) -> dict[str, Any] | None:
        line = line.strip()
        if not line:
            return None
        return self._parse_body(line)


class ContentLengthFraming(Framing):
    """Header block with a ``Content-Length`` field, blank line, body."""

    mode = FramingMode.CONTENT_LENGTH

    def decode(self, data: bytes) -> list[dict[str, Any]]:
        self._buffer.extend(data)
        messages: list[dict[str, Any]] = []

        while True:
            header_end = self._find_header_end()
            if header_end is None:
                break
            end, terminator_length = header_end
            header = bytes(self._buffer[:end])
            body_start = end + terminator_length

            length = self._parse_content_length(header)
            if length is None:
                # Resynchronize on whatever follows the bad header block
                del self._buffer[:body_start]
                continue

            if len(self._buffer) < body_start + length:
                break

            body = bytes(self._buffer[body_start : body_start + length])
            del self._buffer[: body_start + length]

            message = self._parse_body(body)
            if message is not None:
                messages.append(message)

        return messages

    def encode(self, message: dict[str, Any]) -> bytes:
        body = self._dumps(message)
        return b"Content-Length: %d\r\n\r\n" % len(body) + body

    def _find_header_end(self) -> tuple[int, int] | None:
        """Locate the earliest blank-line terminator in the buffer."""
        found: tuple[int, int] | None = None
        for terminator in HEADER_TERMINATORS:
            index = self._buffer.find(terminator)
            if index >= 0 and (found is None or index < found[0]):
                found = (index, len(terminator))
        return found

    def _parse_content_length(self, header: bytes) -> int | None:
        for raw_line in header.splitlines():
            name, sep, value = raw_line.decode("latin-1").partition(":")
            if not sep or name.strip().lower() != CONTENT_LENGTH_HEADER:
                continue
            value = value.strip()
            if value.isdigit():
                return int(value)
            logger.warning(f"Dropping frame with invalid Content-Length: {value!r}")
            return None
        logger.warning(f"Dropping header block without Content-Length: {header[:80]!r}")
        return None


def _id_overflowed(request_id: Any) -> bool:
    """
    True for an integral float outside the signed/unsigned 64-bit range.

    orjson decodes integers beyond 64 bits as floats, so such an id has
    already lost precision by the time it is seen here.
    """
    if not isinstance(request_id, float) or not request_id.is_integer():
        return False
    return not -(2**63) < request_id < 2**64


def create_framing(mode: FramingMode | str) -> Framing:
    """Build the framing strategy for a mode, fixed for the process lifetime."""
    if isinstance(mode, str):
        mode = FramingMode.parse(mode)
    if mode is FramingMode.LINE:
        return LineDelimitedFraming()
    return ContentLengthFraming()
