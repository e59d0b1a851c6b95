"""Model gateway interface."""

from __future__ import annotations

from typing import Protocol

from gemini_mcp.provider.types import (
    EmbeddingResult,
    GenerateRequest,
    GenerationResult,
    TokenCountResult,
)


class ProviderError(Exception):
    """
    A model-provider call failed.

    Raised by gateways for transport failures, HTTP error statuses and
    unusable response bodies. Handlers let it propagate to the router.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.cause = cause


class ModelGateway(Protocol):
    """
    Protocol for model-provider operations.

    Defines the three calls the tool handlers need, each returning a
    normalized result regardless of the provider's wire format.
    """

    async def generate(self, request: GenerateRequest) -> GenerationResult:
        """
        Generate content for a conversation.

        Args:
            request: Model, ordered contents and generation controls.

        Returns:
            Normalized generation result.

        Raises:
            ProviderError: If the provider call fails.
        """
        ...

    async def count_tokens(self, model: str, text: str) -> TokenCountResult:
        """Count the tokens ``text`` occupies for ``model``."""
        ...

    async def embed(self, model: str, text: str) -> EmbeddingResult:
        """Compute the embedding vector of ``text``."""
        ...
