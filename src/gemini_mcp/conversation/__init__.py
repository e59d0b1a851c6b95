"""Per-session conversation history."""

from gemini_mcp.conversation.types import (
    ConversationTurn,
    InlineDataPart,
    Part,
    Role,
    TextPart,
)
from gemini_mcp.conversation.store import ConversationStore, InMemoryConversationStore

__all__ = [
    "ConversationTurn",
    "InlineDataPart",
    "Part",
    "Role",
    "TextPart",
    "ConversationStore",
    "InMemoryConversationStore",
]
