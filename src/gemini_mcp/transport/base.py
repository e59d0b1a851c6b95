"""Transport interface and its error types."""

from abc import ABC, abstractmethod
from typing import AsyncIterator

from gemini_mcp.transport.types import TransportConfig


class TransportError(Exception):
    """Reading or writing the protocol channel failed."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class ConnectionClosedError(TransportError):
    """Send or receive on a transport that is not open."""


class FramingError(TransportError):
    """An outgoing message has no encoding under the active framing."""


class Transport(ABC):
    """
    Byte channel carrying framed envelopes between client and server.

    The server opens it with ``async with``, drains ``receive()`` until end
    of input and calls ``send()`` from many tasks at once; implementations
    keep concurrent frames whole.
    """

    def __init__(self, config: TransportConfig):
        self.config = config

    @abstractmethod
    async def connect(self) -> None:
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Stop sending. Calling it twice is harmless."""
        ...

    @abstractmethod
    async def send(self, message: dict) -> None:
        """
        Write one envelope.

        Raises:
            ConnectionClosedError: If the transport is not open.
            FramingError: If the envelope cannot be encoded.
        """
        ...

    @abstractmethod
    def receive(self) -> AsyncIterator[dict]:
        """Decoded envelopes in arrival order, ending at end of input."""
        ...

    async def __aenter__(self) -> "Transport":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()
