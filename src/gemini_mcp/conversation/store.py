"""Keyed conversation history shared by ``generate`` calls."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncContextManager, Protocol

from gemini_mcp.conversation.types import ConversationTurn

logger = logging.getLogger(__name__)


class ConversationStore(Protocol):
    """
    Session id -> ordered turn history.

    Handlers read with ``get`` and write with ``append`` while holding
    ``lock(session_id)``, so read-then-append is atomic per session.
    A retention policy can be layered on top through ``evict``.
    """

    def get(self, session_id: str) -> list[ConversationTurn]:
        ...

    def append(self, session_id: str, *turns: ConversationTurn) -> None:
        ...

    def evict(self, session_id: str) -> bool:
        ...

    def lock(self, session_id: str) -> AsyncContextManager[None]:
        ...

    def __contains__(self, session_id: object) -> bool:
        ...

    def __len__(self) -> int:
        ...


class InMemoryConversationStore:
    """
    Process-lifetime conversation store.

    Sessions are created on first append and are never pruned
    automatically: there is no size cap, no expiry and no persistence.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, list[ConversationTurn]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, session_id: str) -> list[ConversationTurn]:
        """Return a copy of the session's turns; empty for unknown sessions."""
        return list(self._sessions.get(session_id, ()))

    def append(self, session_id: str, *turns: ConversationTurn) -> None:
        """Append turns in order, creating the session if needed."""
        history = self._sessions.setdefault(session_id, [])
        history.extend(turns)
        logger.debug(f"Session {session_id!r} now holds {len(history)} turns")

    def evict(self, session_id: str) -> bool:
        """
        Forget a session's history.

        Returns:
            True if the session existed.
        """
        existed = self._sessions.pop(session_id, None) is not None
        lock = self._locks.get(session_id)
        if lock is not None and not lock.locked():
            del self._locks[session_id]
        return existed

    def lock(self, session_id: str) -> asyncio.Lock:
        """The mutex serializing history access for one session."""
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()
        return lock

    def session_ids(self) -> list[str]:
        return list(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
