"""
Tool catalog, argument validation and the Gemini tool handlers.
"""

from gemini_mcp.tools.types import (
    TextContent,
    ToolDescriptor,
    ToolHandler,
    ToolResult,
    ValidArguments,
    ValidationFailure,
    ValidationOutcome,
)
from gemini_mcp.tools.schema import validate_arguments
from gemini_mcp.tools.registry import ToolRegistry
from gemini_mcp.tools.models import (
    GEMINI_MODELS,
    EMBEDDING_MODELS,
    MODEL_FILTERS,
    ModelInfo,
    filter_models,
)
from gemini_mcp.tools.handlers import GeminiTools, build_registry, parse_image_data

__all__ = [
    "TextContent",
    "ToolDescriptor",
    "ToolHandler",
    "ToolResult",
    "ValidArguments",
    "ValidationFailure",
    "ValidationOutcome",
    "validate_arguments",
    "ToolRegistry",
    "GEMINI_MODELS",
    "EMBEDDING_MODELS",
    "MODEL_FILTERS",
    "ModelInfo",
    "filter_models",
    "GeminiTools",
    "build_registry",
    "parse_image_data",
]
