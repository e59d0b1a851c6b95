"""Tests for the Gemini REST gateway."""

import json

import httpx
import pytest

from gemini_mcp.conversation import ConversationTurn, InlineDataPart
from gemini_mcp.provider import (
    GeminiGateway,
    GenerateRequest,
    GenerationConfig,
    ProviderError,
    SafetyThreshold,
)

BASE = "https://gemini.test/v1beta"


class Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last_body(self):
        return json.loads(self.requests[-1].content)


def gateway_for(recorder: Recorder) -> GeminiGateway:
    return GeminiGateway("test-key", base_url=BASE + "/", transport=httpx.MockTransport(recorder))


GENERATE_OK = {
    "candidates": [
        {
            "content": {"role": "model", "parts": [{"text": "Hello "}, {"text": "world"}]},
            "finishReason": "STOP",
        }
    ],
    "usageMetadata": {"promptTokenCount": 3, "candidatesTokenCount": 2, "totalTokenCount": 5},
}


class TestGenerate:
    @pytest.mark.asyncio
    async def test_request_shape(self):
        recorder = Recorder(httpx.Response(200, json=GENERATE_OK))
        request = GenerateRequest(
            model="gemini-2.5-pro",
            contents=[
                ConversationTurn.user("hi"),
                ConversationTurn.model("hello"),
                ConversationTurn.user("look", InlineDataPart("image/png", "AAAA")),
            ],
            config=GenerationConfig(temperature=0.2, max_output_tokens=64),
            system_instruction="Be brief",
            safety=[SafetyThreshold("HARM_CATEGORY_HATE_SPEECH", "BLOCK_ONLY_HIGH")],
            grounding=True,
        )

        async with gateway_for(recorder) as gateway:
            await gateway.generate(request)

        sent = recorder.requests[0]
        assert sent.method == "POST"
        assert str(sent.url) == f"{BASE}/models/gemini-2.5-pro:generateContent"
        assert sent.headers["x-goog-api-key"] == "test-key"
        assert recorder.last_body == {
            "contents": [
                {"role": "user", "parts": [{"text": "hi"}]},
                {"role": "model", "parts": [{"text": "hello"}]},
                {
                    "role": "user",
                    "parts": [{"text": "look"}, {"inlineData": {"mimeType": "image/png", "data": "AAAA"}}],
                },
            ],
            "generationConfig": {"temperature": 0.2, "maxOutputTokens": 64},
            "systemInstruction": {"parts": [{"text": "Be brief"}]},
            "safetySettings": [{"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_ONLY_HIGH"}],
            "tools": [{"googleSearch": {}}],
        }

    @pytest.mark.asyncio
    async def test_optional_sections_omitted(self):
        recorder = Recorder(httpx.Response(200, json=GENERATE_OK))
        async with gateway_for(recorder) as gateway:
            await gateway.generate(GenerateRequest(model="m", contents=[ConversationTurn.user("x")]))
        assert set(recorder.last_body) == {"contents"}

    @pytest.mark.asyncio
    async def test_response_normalized(self):
        recorder = Recorder(httpx.Response(200, json=GENERATE_OK))
        async with gateway_for(recorder) as gateway:
            result = await gateway.generate(GenerateRequest(model="m", contents=[ConversationTurn.user("x")]))

        assert result.text == "Hello world"
        assert result.model == "m"
        assert result.usage.total_tokens == 5
        assert result.usage.prompt_tokens == 3
        assert result.finish_reason == "STOP"
        assert result.candidates_count == 1
        assert result.as_turn() == ConversationTurn.model("Hello world")

    @pytest.mark.asyncio
    async def test_blocked_prompt_reports_reason(self):
        recorder = Recorder(httpx.Response(200, json={"promptFeedback": {"blockReason": "SAFETY"}}))
        async with gateway_for(recorder) as gateway:
            result = await gateway.generate(GenerateRequest(model="m", contents=[ConversationTurn.user("x")]))
        assert result.text == ""
        assert result.finish_reason == "SAFETY"
        assert result.usage.total_tokens is None


class TestCountTokensAndEmbed:
    @pytest.mark.asyncio
    async def test_count_tokens(self):
        recorder = Recorder(httpx.Response(200, json={"totalTokens": 12}))
        async with gateway_for(recorder) as gateway:
            result = await gateway.count_tokens("gemini-2.5-flash", "count me")

        assert recorder.requests[0].url.path == "/v1beta/models/gemini-2.5-flash:countTokens"
        assert recorder.last_body == {"contents": [{"role": "user", "parts": [{"text": "count me"}]}]}
        assert result.total_tokens == 12
        assert result.model == "gemini-2.5-flash"

    @pytest.mark.asyncio
    async def test_count_tokens_missing_total(self):
        recorder = Recorder(httpx.Response(200, json={}))
        async with gateway_for(recorder) as gateway:
            with pytest.raises(ProviderError, match="totalTokens"):
                await gateway.count_tokens("m", "x")

    @pytest.mark.asyncio
    async def test_embed(self):
        recorder = Recorder(httpx.Response(200, json={"embedding": {"values": [0.5, -0.25]}}))
        async with gateway_for(recorder) as gateway:
            result = await gateway.embed("text-embedding-004", "embed me")

        assert recorder.requests[0].url.path == "/v1beta/models/text-embedding-004:embedContent"
        assert recorder.last_body == {
            "model": "models/text-embedding-004",
            "content": {"parts": [{"text": "embed me"}]},
        }
        assert result.values == [0.5, -0.25]
        assert result.dimensions == 2

    @pytest.mark.asyncio
    async def test_embed_missing_values(self):
        recorder = Recorder(httpx.Response(200, json={"embedding": {}}))
        async with gateway_for(recorder) as gateway:
            with pytest.raises(ProviderError, match="no embedding values"):
                await gateway.embed("m", "x")


class TestFailures:
    @pytest.mark.asyncio
    async def test_http_error_status(self):
        body = {"error": {"code": 429, "message": "Resource has been exhausted", "status": "RESOURCE_EXHAUSTED"}}
        recorder = Recorder(httpx.Response(429, json=body))
        async with gateway_for(recorder) as gateway:
            with pytest.raises(ProviderError) as exc_info:
                await gateway.count_tokens("m", "x")

        assert exc_info.value.status_code == 429
        assert "HTTP 429" in exc_info.value.message
        assert "Resource has been exhausted" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_http_error_without_json_body(self):
        recorder = Recorder(httpx.Response(502, text="Bad Gateway"))
        async with gateway_for(recorder) as gateway:
            with pytest.raises(ProviderError, match="HTTP 502: Bad Gateway"):
                await gateway.embed("m", "x")

    @pytest.mark.asyncio
    async def test_connection_failure(self):
        recorder = Recorder(httpx.ConnectError("connection refused"))
        async with gateway_for(recorder) as gateway:
            with pytest.raises(ProviderError, match="failed") as exc_info:
                await gateway.count_tokens("m", "x")
        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_timeout(self):
        recorder = Recorder(httpx.ReadTimeout("too slow"))
        async with gateway_for(recorder) as gateway:
            with pytest.raises(ProviderError, match="timed out"):
                await gateway.count_tokens("m", "x")

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        recorder = Recorder(httpx.Response(200, text="<html>"))
        async with gateway_for(recorder) as gateway:
            with pytest.raises(ProviderError, match="invalid JSON"):
                await gateway.count_tokens("m", "x")


class TestLifecycle:
    def test_api_key_required(self):
        with pytest.raises(ValueError, match="api_key"):
            GeminiGateway("")

    @pytest.mark.asyncio
    async def test_client_created_lazily_and_closed(self):
        recorder = Recorder(httpx.Response(200, json={"totalTokens": 1}))
        gateway = gateway_for(recorder)
        assert gateway._client is None

        await gateway.count_tokens("m", "x")
        assert gateway._client is not None

        await gateway.aclose()
        assert gateway._client is None
        await gateway.aclose()
