"""Static Gemini model catalog and capability filters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

# Capability tags
THINKING = "thinking"
FUNCTION_CALLING = "function_calling"
STRUCTURED_OUTPUT = "structured_output"
GROUNDING = "grounding"
SYSTEM_INSTRUCTIONS = "system_instructions"
VISION = "vision"


@dataclass(frozen=True)
class ModelInfo:
    """One generative model and what it supports."""

    name: str
    description: str = ""
    features: frozenset[str] = field(default_factory=frozenset)
    context_window: int | None = None

    @property
    def thinking(self) -> bool:
        return THINKING in self.features

    def supports(self, feature: str) -> bool:
        return feature in self.features

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "features": sorted(self.features),
            "contextWindow": self.context_window,
            "thinking": self.thinking,
        }


def _model(name: str, description: str, features: Iterable[str], context_window: int) -> ModelInfo:
    return ModelInfo(name, description, frozenset(features), context_window)


GEMINI_MODELS: tuple[ModelInfo, ...] = (
    # 2.5 series, with an intermediate reasoning phase
    _model(
        "gemini-2.5-pro",
        "Most capable thinking model, best for complex reasoning and coding",
        [THINKING, FUNCTION_CALLING, STRUCTURED_OUTPUT, GROUNDING, SYSTEM_INSTRUCTIONS, VISION],
        2_000_000,
    ),
    _model(
        "gemini-2.5-flash",
        "Fast thinking model with best price/performance ratio",
        [THINKING, FUNCTION_CALLING, STRUCTURED_OUTPUT, GROUNDING, SYSTEM_INSTRUCTIONS, VISION],
        1_000_000,
    ),
    _model(
        "gemini-2.5-flash-lite",
        "Ultra-fast, cost-efficient thinking model for high-throughput tasks",
        [THINKING, FUNCTION_CALLING, STRUCTURED_OUTPUT, SYSTEM_INSTRUCTIONS],
        1_000_000,
    ),
    # 2.0 series
    _model(
        "gemini-2.0-flash",
        "Fast, efficient model with 1M context window",
        [FUNCTION_CALLING, STRUCTURED_OUTPUT, GROUNDING, SYSTEM_INSTRUCTIONS, VISION],
        1_000_000,
    ),
    _model(
        "gemini-2.0-flash-lite",
        "Most cost-efficient model for simple tasks",
        [FUNCTION_CALLING, STRUCTURED_OUTPUT, SYSTEM_INSTRUCTIONS],
        1_000_000,
    ),
    _model(
        "gemini-2.0-pro-experimental",
        "Experimental model with 2M context, excellent for coding",
        [FUNCTION_CALLING, STRUCTURED_OUTPUT, GROUNDING, SYSTEM_INSTRUCTIONS],
        2_000_000,
    ),
    # Legacy
    _model(
        "gemini-1.5-pro",
        "Previous generation pro model",
        [FUNCTION_CALLING, STRUCTURED_OUTPUT, SYSTEM_INSTRUCTIONS],
        2_000_000,
    ),
    _model(
        "gemini-1.5-flash",
        "Previous generation fast model",
        [FUNCTION_CALLING, STRUCTURED_OUTPUT, SYSTEM_INSTRUCTIONS],
        1_000_000,
    ),
)

EMBEDDING_MODELS: tuple[str, ...] = ("text-embedding-004", "text-multilingual-embedding-002")

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_EMBEDDING_MODEL = "text-embedding-004"

NO_FILTER = "all"

# list-models filter value -> required capability tag
MODEL_FILTERS: dict[str, str] = {
    "supports-structured-output": STRUCTURED_OUTPUT,
    "supports-grounding": GROUNDING,
    "supports-extended-reasoning": THINKING,
    "supports-vision": VISION,
}


# Short filter names accepted from older clients
FILTER_ALIASES: dict[str, str] = {
    "thinking": "supports-extended-reasoning",
    "vision": "supports-vision",
    "grounding": "supports-grounding",
    "json_mode": "supports-structured-output",
}


def resolve_filter(name: str | None) -> str:
    """Normalize a filter value to its canonical name; unknown values mean no filter."""
    name = FILTER_ALIASES.get(name, name)
    if name in MODEL_FILTERS:
        return name
    return NO_FILTER


def filter_models(catalog: Iterable[ModelInfo], name: str | None) -> list[ModelInfo]:
    """Models matching a named capability filter, in catalog order."""
    effective = resolve_filter(name)
    if effective == NO_FILTER:
        return list(catalog)
    feature = MODEL_FILTERS[effective]
    return [m for m in catalog if m.supports(feature)]
