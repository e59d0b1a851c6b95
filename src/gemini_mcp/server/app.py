"""The serve loop: read envelopes, dispatch concurrently, write responses."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from gemini_mcp.config import ServerConfig
from gemini_mcp.conversation.store import ConversationStore, InMemoryConversationStore
from gemini_mcp.protocol.errors import INTERNAL_ERROR
from gemini_mcp.protocol.messages import JSONRPCResponse, error_response
from gemini_mcp.provider.base import ModelGateway
from gemini_mcp.provider.gemini import GeminiGateway
from gemini_mcp.server.router import RequestRouter
from gemini_mcp.tools.handlers import build_registry
from gemini_mcp.transport.base import FramingError, Transport, TransportError
from gemini_mcp.transport.stdio import StdioTransport
from gemini_mcp.transport.types import TransportConfig

logger = logging.getLogger(__name__)


class MCPServer:
    """
    Serves one transport until its input ends.

    Each envelope is dispatched in its own task, so a slow provider call
    never holds up reading the next message. Responses are written in
    completion order and correlate to requests only by ``id``. There is
    no cancellation and no timeout of in-flight work.
    """

    def __init__(self, router: RequestRouter, transport: Transport):
        self.router = router
        self.transport = transport
        self._in_flight: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        """Number of envelopes dispatched but not yet answered."""
        return len(self._in_flight)

    async def serve(self) -> None:
        """Run until end of input, then wait for in-flight requests."""
        async with self.transport:
            logger.info(f"Serving {len(self.router.registry)} tools: {self.router.registry.names()}")

            async for message in self.transport.receive():
                self._spawn(message)

            if self._in_flight:
                logger.info(f"Input closed; waiting for {len(self._in_flight)} in-flight requests")
                await asyncio.gather(*self._in_flight, return_exceptions=True)

        logger.info("Server stopped")

    def _spawn(self, message: dict[str, Any]) -> None:
        task = asyncio.create_task(
            self._process(message),
            name=f"mcp-{message.get('method')}-{message.get('id')}",
        )
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _process(self, message: dict[str, Any]) -> None:
        response = await self.router.dispatch(message)
        if response is not None:
            await self._send(response)

    async def _send(self, response: JSONRPCResponse) -> None:
        try:
            await self.transport.send(response.to_dict())
        except FramingError as e:
            # The result was not serializable; the request still gets an answer
            logger.error(f"Cannot encode response for id={response.id}: {e}")
            fallback = error_response(response.id, INTERNAL_ERROR, f"Response could not be encoded: {e}")
            await self._send_or_log(fallback)
        except (TransportError, OSError) as e:
            # e.g. BrokenPipeError once the client has gone away
            logger.error(f"Failed to write response for id={response.id}: {e!r}")

    async def _send_or_log(self, response: JSONRPCResponse) -> None:
        try:
            await self.transport.send(response.to_dict())
        except (TransportError, OSError) as e:
            logger.error(f"Failed to write response for id={response.id}: {e!r}")


def build_server(
    config: ServerConfig,
    gateway: ModelGateway | None = None,
    store: ConversationStore | None = None,
    transport: Transport | None = None,
) -> MCPServer:
    """Wire the default components for a configuration."""
    if gateway is None:
        gateway = GeminiGateway(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
        )
    registry = build_registry(
        gateway,
        store if store is not None else InMemoryConversationStore(),
        default_model=config.default_model,
    )
    transport = transport or StdioTransport(TransportConfig(framing=config.framing))
    return MCPServer(RequestRouter(registry), transport)


async def run(config: ServerConfig) -> None:
    """Serve stdin/stdout with a Gemini gateway until input ends."""
    async with GeminiGateway(
        api_key=config.api_key,
        base_url=config.base_url,
        timeout=config.timeout,
    ) as gateway:
        server = build_server(config, gateway=gateway)
        await server.serve()
