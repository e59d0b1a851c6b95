"""Model gateway: the seam between tool handlers and the Gemini API."""

from gemini_mcp.provider.base import ModelGateway, ProviderError
from gemini_mcp.provider.gemini import DEFAULT_BASE_URL, GeminiGateway
from gemini_mcp.provider.types import (
    EmbeddingResult,
    GenerateRequest,
    GenerationConfig,
    GenerationResult,
    SafetyThreshold,
    TokenCountResult,
    UsageMetadata,
)

__all__ = [
    "ModelGateway",
    "ProviderError",
    "GeminiGateway",
    "DEFAULT_BASE_URL",
    "EmbeddingResult",
    "GenerateRequest",
    "GenerationConfig",
    "GenerationResult",
    "SafetyThreshold",
    "TokenCountResult",
    "UsageMetadata",
]
