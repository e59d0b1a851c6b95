"""Pytest configuration and fixtures."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from gemini_mcp.conversation.store import InMemoryConversationStore
from gemini_mcp.provider.types import (
    EmbeddingResult,
    GenerationResult,
    TokenCountResult,
    UsageMetadata,
)
from gemini_mcp.server.router import RequestRouter
from gemini_mcp.tools.handlers import GeminiTools
from gemini_mcp.tools.registry import ToolRegistry


class MemoryWriter:
    """Collects written frames in place of stdout."""

    def __init__(self, yield_on_drain: bool = False):
        self.chunks: list[bytes] = []
        self.yield_on_drain = yield_on_drain

    def write(self, data: bytes) -> None:
        self.chunks.append(data)

    async def drain(self) -> None:
        if self.yield_on_drain:
            await asyncio.sleep(0)

    @property
    def data(self) -> bytes:
        return b"".join(self.chunks)


@pytest.fixture
def gateway():
    """Model gateway double with canned successful results."""
    gateway = AsyncMock()
    gateway.generate.return_value = GenerationResult(
        text="Hello from Gemini",
        model="gemini-2.5-flash",
        usage=UsageMetadata(prompt_tokens=10, candidates_tokens=32, total_tokens=42),
        finish_reason="STOP",
    )
    gateway.count_tokens.return_value = TokenCountResult(total_tokens=7, model="gemini-2.5-flash")
    gateway.embed.return_value = EmbeddingResult(values=[0.1, 0.2, 0.3], model="text-embedding-004")
    return gateway


@pytest.fixture
def store():
    return InMemoryConversationStore()


@pytest.fixture
def tools(gateway, store):
    return GeminiTools(gateway, store)


@pytest.fixture
def registry(tools):
    return ToolRegistry(tools.descriptors())


@pytest.fixture
def router(registry):
    return RequestRouter(registry)


@pytest.fixture
def writer():
    return MemoryWriter()


@pytest.fixture
def slow_writer():
    """Writer whose drain() yields to the event loop."""
    return MemoryWriter(yield_on_drain=True)


@pytest.fixture
def make_reader():
    """Factory for a StreamReader pre-fed with data and EOF.

    Must be called from inside a running event loop.
    """

    def factory(*chunks: bytes) -> asyncio.StreamReader:
        reader = asyncio.StreamReader()
        for chunk in chunks:
            reader.feed_data(chunk)
        reader.feed_eof()
        return reader

    return factory
