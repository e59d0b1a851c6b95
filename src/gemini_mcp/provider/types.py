"""Normalized call shapes exchanged with the model gateway."""

from dataclasses import dataclass, field
from typing import Any

from gemini_mcp.conversation.types import ConversationTurn


@dataclass(frozen=True)
class SafetyThreshold:
    """Blocking threshold for one harm category."""

    category: str
    threshold: str

    def to_dict(self) -> dict[str, str]:
        return {"category": self.category, "threshold": self.threshold}


@dataclass
class GenerationConfig:
    """Sampling and output controls for one generation."""

    temperature: float | None = None
    max_output_tokens: int | None = None
    top_k: int | None = None
    top_p: float | None = None
    response_mime_type: str | None = None
    response_schema: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Wire shape with unset controls omitted."""
        fields = {
            "temperature": self.temperature,
            "maxOutputTokens": self.max_output_tokens,
            "topK": self.top_k,
            "topP": self.top_p,
            "responseMimeType": self.response_mime_type,
            "responseSchema": self.response_schema,
        }
        return {k: v for k, v in fields.items() if v is not None}


@dataclass
class GenerateRequest:
    """One content-generation call."""

    model: str
    contents: list[ConversationTurn]
    config: GenerationConfig = field(default_factory=GenerationConfig)
    system_instruction: str | None = None
    safety: list[SafetyThreshold] = field(default_factory=list)
    grounding: bool = False


@dataclass
class UsageMetadata:
    """Token accounting reported by the provider."""

    prompt_tokens: int | None = None
    candidates_tokens: int | None = None
    total_tokens: int | None = None


@dataclass
class GenerationResult:
    """Normalized outcome of a generation call."""

    text: str
    model: str
    usage: UsageMetadata = field(default_factory=UsageMetadata)
    finish_reason: str | None = None
    candidates_count: int = 1

    def as_turn(self) -> ConversationTurn:
        """The model turn to record in conversation history."""
        return ConversationTurn.model(self.text)


@dataclass
class TokenCountResult:
    total_tokens: int
    model: str


@dataclass
class EmbeddingResult:
    values: list[float]
    model: str

    @property
    def dimensions(self) -> int:
        return len(self.values)
