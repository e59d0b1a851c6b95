"""
The Gemini tool set.

Five tools proxy to the model gateway:

- generate:        text generation, optionally within a conversation session
- vision-analyze:  prompt plus one image, by reference or inline data
- token-count:     token count of a text for a model
- list-models:     the static model catalog, optionally filtered
- embed:           embedding vector of a text

Handlers receive arguments that already passed schema validation and
let provider failures propagate to the router.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable

import orjson

from gemini_mcp.conversation.store import ConversationStore
from gemini_mcp.conversation.types import ConversationTurn, InlineDataPart, TextPart
from gemini_mcp.provider.base import ModelGateway
from gemini_mcp.provider.types import (
    GenerateRequest,
    GenerationConfig,
    GenerationResult,
    SafetyThreshold,
)
from gemini_mcp.tools.models import (
    DEFAULT_EMBEDDING_MODEL,
    DEFAULT_MODEL,
    EMBEDDING_MODELS,
    FILTER_ALIASES,
    GEMINI_MODELS,
    GROUNDING,
    MODEL_FILTERS,
    NO_FILTER,
    VISION,
    ModelInfo,
    filter_models,
    resolve_filter,
)
from gemini_mcp.tools.registry import ToolRegistry
from gemini_mcp.tools.types import ToolDescriptor, ToolResult

logger = logging.getLogger(__name__)

# Generation defaults
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2048
DEFAULT_TOP_K = 40
DEFAULT_TOP_P = 0.95

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"
DATA_URI = re.compile(r"^data:([^;,]+);base64,(.+)$", re.DOTALL)

HARM_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
]
BLOCK_THRESHOLDS = [
    "BLOCK_NONE",
    "BLOCK_ONLY_HIGH",
    "BLOCK_MEDIUM_AND_ABOVE",
    "BLOCK_LOW_AND_ABOVE",
]


def parse_image_data(value: str) -> InlineDataPart:
    """
    Split ``data:<mime>;base64,<payload>`` into mime type and payload.

    Bare payloads without the prefix are assumed to be JPEG.
    """
    match = DATA_URI.match(value)
    if match:
        return InlineDataPart(mime_type=match.group(1), data=match.group(2))
    return InlineDataPart(mime_type=DEFAULT_IMAGE_MIME_TYPE, data=value)


def _model_property(description: str, names: list[str], default: str) -> dict[str, Any]:
    prop: dict[str, Any] = {"type": "string", "description": description, "default": default}
    if names:
        prop["enum"] = names
    return prop


def _dumps(value: Any, indent: bool = False) -> str:
    return orjson.dumps(value, option=orjson.OPT_INDENT_2 if indent else None).decode()


class GeminiTools:
    """
    Handlers for the Gemini tool set and the descriptors advertising them.

    Holds the gateway, the conversation store and the model catalog; the
    catalog also drives the model enumerations in each input schema.
    """

    def __init__(
        self,
        gateway: ModelGateway,
        store: ConversationStore,
        catalog: Iterable[ModelInfo] = GEMINI_MODELS,
        default_model: str = DEFAULT_MODEL,
        default_embedding_model: str = DEFAULT_EMBEDDING_MODEL,
        embedding_models: Iterable[str] = EMBEDDING_MODELS,
    ):
        self.gateway = gateway
        self.store = store
        self.catalog: list[ModelInfo] = list(catalog)
        self.default_model = default_model
        self.default_embedding_model = default_embedding_model
        self.embedding_models = list(embedding_models)
        self._models = {m.name: m for m in self.catalog}

    @property
    def vision_models(self) -> list[str]:
        return [m.name for m in self.catalog if m.supports(VISION)]

    @property
    def default_vision_model(self) -> str:
        vision = self.vision_models
        if self.default_model in vision or not vision:
            return self.default_model
        return vision[0]

    def descriptors(self) -> list[ToolDescriptor]:
        """Descriptors for all five tools, bound to this instance."""
        model_names = [m.name for m in self.catalog]

        return [
            ToolDescriptor(
                name="generate",
                description="Generate text using Google Gemini with advanced features",
                properties={
                    "prompt": {"type": "string", "description": "The prompt to send to Gemini"},
                    "model": _model_property("Specific Gemini model to use", model_names, self.default_model),
                    "systemInstruction": {
                        "type": "string",
                        "description": "System instruction to guide model behavior",
                    },
                    "temperature": {
                        "type": "number",
                        "description": "Temperature for generation (0-2)",
                        "default": DEFAULT_TEMPERATURE,
                        "minimum": 0,
                        "maximum": 2,
                    },
                    "maxTokens": {
                        "type": "integer",
                        "description": "Maximum tokens to generate",
                        "default": DEFAULT_MAX_TOKENS,
                        "minimum": 1,
                    },
                    "topK": {
                        "type": "integer",
                        "description": "Top-k sampling parameter",
                        "default": DEFAULT_TOP_K,
                        "minimum": 1,
                    },
                    "topP": {
                        "type": "number",
                        "description": "Top-p (nucleus) sampling parameter",
                        "default": DEFAULT_TOP_P,
                        "minimum": 0,
                        "maximum": 1,
                    },
                    "structuredOutput": {
                        "type": "boolean",
                        "description": "Return JSON instead of free text",
                        "default": False,
                    },
                    "outputSchema": {
                        "type": "object",
                        "description": "JSON schema for structured output (when structuredOutput is true)",
                    },
                    "grounding": {
                        "type": "boolean",
                        "description": "Enable Google Search grounding for up-to-date information",
                        "default": False,
                    },
                    "safetyThresholds": {
                        "type": "array",
                        "description": "Safety settings for content filtering",
                        "items": {
                            "type": "object",
                            "properties": {
                                "category": {"type": "string", "enum": HARM_CATEGORIES},
                                "threshold": {"type": "string", "enum": BLOCK_THRESHOLDS},
                            },
                            "required": ["category", "threshold"],
                        },
                    },
                    "sessionId": {
                        "type": "string",
                        "description": "ID for maintaining conversation context across calls",
                    },
                },
                required=("prompt",),
                handler=self.generate,
                tags=frozenset({"generation", "conversation"}),
            ),
            ToolDescriptor(
                name="vision-analyze",
                description="Analyze images using Gemini vision capabilities",
                properties={
                    "prompt": {"type": "string", "description": "Question or instruction about the image"},
                    "imageRef": {"type": "string", "description": "URL of the image to analyze"},
                    "imageData": {
                        "type": "string",
                        "description": "Base64 image data, optionally as data:<mimeType>;base64,<payload>",
                    },
                    "model": _model_property(
                        "Vision-capable Gemini model", self.vision_models, self.default_vision_model
                    ),
                },
                required=("prompt",),
                exactly_one_of=(("imageRef", "imageData"),),
                handler=self.analyze_image,
                tags=frozenset({"generation", VISION}),
            ),
            ToolDescriptor(
                name="token-count",
                description="Count tokens for a given text with a specific model",
                properties={
                    "text": {"type": "string", "description": "Text to count tokens for"},
                    "model": _model_property("Model to use for token counting", model_names, self.default_model),
                },
                required=("text",),
                handler=self.count_tokens,
                tags=frozenset({"utility"}),
            ),
            ToolDescriptor(
                name="list-models",
                description="List all available Gemini models and their capabilities",
                properties={
                    "filter": {
                        "type": "string",
                        "description": (
                            "Filter models by capability: "
                            + ", ".join([NO_FILTER, *MODEL_FILTERS, *FILTER_ALIASES])
                            + ". Other values list every model."
                        ),
                    },
                },
                handler=self.list_models,
                tags=frozenset({"catalog"}),
            ),
            ToolDescriptor(
                name="embed",
                description="Generate embeddings for text using Gemini embedding models",
                properties={
                    "text": {"type": "string", "description": "Text to generate embeddings for"},
                    "model": _model_property(
                        "Embedding model to use", self.embedding_models, self.default_embedding_model
                    ),
                },
                required=("text",),
                handler=self.embed,
                tags=frozenset({"embedding"}),
            ),
        ]

    async def generate(self, args: dict[str, Any]) -> ToolResult:
        model = args.get("model", self.default_model)
        request = GenerateRequest(
            model=model,
            contents=[],
            config=self._generation_config(args),
            system_instruction=args.get("systemInstruction"),
            safety=[SafetyThreshold(s["category"], s["threshold"]) for s in args.get("safetyThresholds", [])],
            grounding=self._grounding(model, args.get("grounding", False)),
        )
        user_turn = ConversationTurn.user(args["prompt"])

        session_id = args.get("sessionId")
        if session_id is None:
            request.contents = [user_turn]
            result = await self.gateway.generate(request)
            return self._generation_result(result)

        async with self.store.lock(session_id):
            history = self.store.get(session_id)
            request.contents = [*history, user_turn]
            result = await self.gateway.generate(request)
            # Only reached on success: a failed call leaves history untouched
            self.store.append(session_id, user_turn, result.as_turn())

        return self._generation_result(
            result,
            sessionId=session_id,
            turnCount=len(history) + 2,
        )

    async def analyze_image(self, args: dict[str, Any]) -> ToolResult:
        model = args.get("model", self.default_vision_model)

        if "imageRef" in args:
            # Remote images are not fetched; the model sees the reference
            image_part: TextPart | InlineDataPart = TextPart(f"[Image URL: {args['imageRef']}]")
        else:
            image_part = parse_image_data(args["imageData"])

        request = GenerateRequest(
            model=model,
            contents=[ConversationTurn.user(TextPart(args["prompt"]), image_part)],
        )
        result = await self.gateway.generate(request)
        return self._generation_result(result)

    async def count_tokens(self, args: dict[str, Any]) -> ToolResult:
        model = args.get("model", self.default_model)
        result = await self.gateway.count_tokens(model, args["text"])
        return ToolResult.text(
            f"Token count: {result.total_tokens}",
            tokenCount=result.total_tokens,
            model=result.model,
        )

    async def list_models(self, args: dict[str, Any]) -> ToolResult:
        effective = resolve_filter(args.get("filter"))
        models = filter_models(self.catalog, effective)
        return ToolResult.text(
            _dumps([m.to_dict() for m in models], indent=True),
            count=len(models),
            filter=effective,
        )

    async def embed(self, args: dict[str, Any]) -> ToolResult:
        model = args.get("model", self.default_embedding_model)
        result = await self.gateway.embed(model, args["text"])
        return ToolResult.text(
            _dumps({"embedding": result.values, "model": result.model}),
            model=result.model,
            dimensions=result.dimensions,
        )

    def _generation_config(self, args: dict[str, Any]) -> GenerationConfig:
        config = GenerationConfig(
            temperature=args.get("temperature", DEFAULT_TEMPERATURE),
            max_output_tokens=args.get("maxTokens", DEFAULT_MAX_TOKENS),
            top_k=args.get("topK", DEFAULT_TOP_K),
            top_p=args.get("topP", DEFAULT_TOP_P),
        )
        if args.get("structuredOutput"):
            config.response_mime_type = "application/json"
            config.response_schema = args.get("outputSchema")
        return config

    def _grounding(self, model: str, requested: bool) -> bool:
        if not requested:
            return False
        info = self._models.get(model)
        if info is None or not info.supports(GROUNDING):
            logger.warning(f"Grounding requested but not supported by {model}; ignoring")
            return False
        return True

    def _generation_result(self, result: GenerationResult, **extra: Any) -> ToolResult:
        return ToolResult.text(
            result.text,
            model=result.model,
            tokensUsed=result.usage.total_tokens,
            candidatesCount=result.candidates_count,
            finishReason=result.finish_reason,
            **extra,
        )


def build_registry(
    gateway: ModelGateway,
    store: ConversationStore,
    **options: Any,
) -> ToolRegistry:
    """Registry holding the Gemini tool set. ``options`` go to ``GeminiTools``."""
    tools = GeminiTools(gateway, store, **options)
    return ToolRegistry(tools.descriptors())
