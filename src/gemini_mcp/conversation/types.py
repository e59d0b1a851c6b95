"""Conversation turn types."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class Role(str, Enum):
    """Author of a conversation turn."""

    USER = "user"
    MODEL = "model"


@dataclass(frozen=True)
class TextPart:
    """Plain text fragment."""

    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text}


@dataclass(frozen=True)
class InlineDataPart:
    """Inline binary fragment, base64-encoded, with its mime type."""

    mime_type: str
    data: str

    def to_dict(self) -> dict[str, Any]:
        return {"inlineData": {"mimeType": self.mime_type, "data": self.data}}


Part = Union[TextPart, InlineDataPart]


@dataclass(frozen=True)
class ConversationTurn:
    """One message in a conversation: a role and its ordered parts."""

    role: Role
    parts: tuple[Part, ...]

    @classmethod
    def user(cls, *parts: Part | str) -> "ConversationTurn":
        return cls(role=Role.USER, parts=_as_parts(parts))

    @classmethod
    def model(cls, *parts: Part | str) -> "ConversationTurn":
        return cls(role=Role.MODEL, parts=_as_parts(parts))

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(p.text for p in self.parts if isinstance(p, TextPart))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the provider's ``Content`` wire shape."""
        return {
            "role": self.role.value,
            "parts": [p.to_dict() for p in self.parts],
        }


def _as_parts(parts: tuple[Part | str, ...]) -> tuple[Part, ...]:
    return tuple(TextPart(p) if isinstance(p, str) else p for p in parts)
