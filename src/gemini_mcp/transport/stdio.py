"""Stdio transport: framed JSON-RPC over standard input/output."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import AsyncIterator, Protocol

from gemini_mcp.transport.base import ConnectionClosedError, Transport
from gemini_mcp.transport.framing import Framing, create_framing
from gemini_mcp.transport.types import TransportConfig

logger = logging.getLogger(__name__)


class StreamWriter(Protocol):
    """The part of ``asyncio.StreamWriter`` the transport relies on."""

    def write(self, data: bytes) -> None: ...

    async def drain(self) -> None: ...


class StdioTransport(Transport):
    """
    Framed JSON-RPC over a reader/writer pair.

    By default the pair is bound to the process's stdin and stdout when
    ``connect()`` runs. Tests and embedders may pass their own
    ``asyncio.StreamReader`` and writer instead.

    Writes go through a single lock: responses produced concurrently
    are emitted whole, in the order they acquire the lock.
    """

    def __init__(
        self,
        config: TransportConfig | None = None,
        reader: asyncio.StreamReader | None = None,
        writer: StreamWriter | None = None,
    ):
        super().__init__(config or TransportConfig())
        self.framing: Framing = create_framing(self.config.framing)
        self._reader = reader
        self._writer = writer
        self._write_lock: asyncio.Lock | None = None
        self._connected: bool = False

    async def connect(self) -> None:
        """Bind to stdin/stdout unless streams were supplied."""
        if self._connected:
            return

        if self._reader is None or self._writer is None:
            self._reader, self._writer = await _open_stdio()

        self._write_lock = asyncio.Lock()
        self._connected = True
        logger.debug(f"Stdio transport open ({self.framing.mode.value} framing)")

    async def disconnect(self) -> None:
        """Stop accepting sends. The process owns stdin/stdout, so they stay open."""
        if not self._connected:
            return

        # Let a write already in progress finish its frame
        async with self._write_lock:
            self._connected = False
        logger.debug("Stdio transport closed")

    async def send(self, message: dict) -> None:
        """Encode and write one message, serialized with other writers."""
        if not self._connected:
            raise ConnectionClosedError("Transport not connected")

        frame = self.framing.encode(message)

        async with self._write_lock:
            self._writer.write(frame)
            await self._writer.drain()

    async def receive(self) -> AsyncIterator[dict]:
        """
        Yield decoded messages until end of input.

        One message is yielded at a time; the consumer decides whether to
        await its handling before pulling the next.
        """
        if not self._connected:
            raise ConnectionClosedError("Transport not connected")

        while True:
            chunk = await self._reader.read(self.config.read_chunk_size)
            if not chunk:
                for message in self.framing.finish():
                    yield message
                logger.debug("End of input")
                return

            for message in self.framing.decode(chunk):
                yield message

    def is_connected(self) -> bool:
        return self._connected


async def _open_stdio() -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Wrap the process's stdin/stdout in asyncio streams."""
    loop = asyncio.get_running_loop()

    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin.buffer)

    write_transport, write_protocol = await loop.connect_write_pipe(
        asyncio.streams.FlowControlMixin, sys.stdout.buffer
    )
    writer = asyncio.StreamWriter(write_transport, write_protocol, reader, loop)
    return reader, writer
