"""Gemini REST adapter implementing the model gateway."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from gemini_mcp.conversation.types import ConversationTurn
from gemini_mcp.provider.base import ProviderError
from gemini_mcp.provider.types import (
    EmbeddingResult,
    GenerateRequest,
    GenerationResult,
    TokenCountResult,
    UsageMetadata,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiGateway:
    """
    Adapts the Gemini ``generativelanguage`` REST API to ``ModelGateway``.

    Translates internal call shapes into ``models/{model}:<method>``
    requests and normalizes responses and failures. Retries and rate
    limiting are left to the provider.
    """

    API_KEY_HEADER = "x-goog-api-key"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize adapter.

        Args:
            api_key: Gemini API key.
            base_url: API root, without a trailing slash.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        if not api_key:
            raise ValueError("api_key is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._api_key = api_key
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the HTTP client. Called lazily by the first request."""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={
                self.API_KEY_HEADER: self._api_key,
                "Content-Type": "application/json",
            },
            transport=self._transport,
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def generate(self, request: GenerateRequest) -> GenerationResult:
        body: dict[str, Any] = {
            "contents": [turn.to_dict() for turn in request.contents],
        }
        generation_config = request.config.to_dict()
        if generation_config:
            body["generationConfig"] = generation_config
        if request.system_instruction:
            body["systemInstruction"] = {"parts": [{"text": request.system_instruction}]}
        if request.safety:
            body["safetySettings"] = [s.to_dict() for s in request.safety]
        if request.grounding:
            body["tools"] = [{"googleSearch": {}}]

        data = await self._post(request.model, "generateContent", body)

        candidates = data.get("candidates") or []
        first = candidates[0] if candidates else {}
        parts = (first.get("content") or {}).get("parts") or []
        text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))

        finish_reason = first.get("finishReason")
        if not candidates:
            # The prompt itself was blocked; report why instead of failing
            finish_reason = (data.get("promptFeedback") or {}).get("blockReason")

        usage = data.get("usageMetadata") or {}
        return GenerationResult(
            text=text,
            model=request.model,
            usage=UsageMetadata(
                prompt_tokens=usage.get("promptTokenCount"),
                candidates_tokens=usage.get("candidatesTokenCount"),
                total_tokens=usage.get("totalTokenCount"),
            ),
            finish_reason=finish_reason,
            candidates_count=len(candidates) or 1,
        )

    async def count_tokens(self, model: str, text: str) -> TokenCountResult:
        body = {"contents": [ConversationTurn.user(text).to_dict()]}
        data = await self._post(model, "countTokens", body)

        total = data.get("totalTokens")
        if not isinstance(total, int):
            raise ProviderError(f"countTokens response has no totalTokens: {data}")
        return TokenCountResult(total_tokens=total, model=model)

    async def embed(self, model: str, text: str) -> EmbeddingResult:
        body = {
            "model": f"models/{model}",
            "content": {"parts": [{"text": text}]},
        }
        data = await self._post(model, "embedContent", body)

        values = (data.get("embedding") or {}).get("values")
        if not isinstance(values, list):
            raise ProviderError("embedContent response has no embedding values")
        return EmbeddingResult(values=values, model=model)

    async def _post(self, model: str, method: str, body: dict[str, Any]) -> dict[str, Any]:
        """POST to ``models/{model}:{method}`` and return the decoded body."""
        await self.connect()
        url = f"{self.base_url}/models/{model}:{method}"
        logger.debug(f"POST {url}")

        try:
            response = await self._client.post(url, json=body)
        except httpx.TimeoutException as e:
            raise ProviderError(f"Gemini {method} timed out: {e}", cause=e)
        except httpx.HTTPError as e:
            raise ProviderError(f"Gemini {method} failed: {e}", cause=e)

        if response.status_code >= 400:
            raise ProviderError(
                f"Gemini {method} returned HTTP {response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(f"Gemini {method} returned invalid JSON: {e}", cause=e)
        if not isinstance(data, dict):
            raise ProviderError(f"Gemini {method} returned unexpected body: {data!r}")
        return data

    async def __aenter__(self) -> "GeminiGateway":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


def _error_message(response: httpx.Response) -> str:
    """Extract ``error.message`` from a Google API error body if present."""
    try:
        error = response.json().get("error") or {}
        message = error.get("message")
    except (ValueError, AttributeError):
        message = None
    return message or response.text[:500]
