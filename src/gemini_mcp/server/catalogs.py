"""Static resource and prompt catalogs advertised by the server."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Resource:
    uri: str
    name: str
    description: str
    mime_type: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "uri": self.uri,
            "name": self.name,
            "description": self.description,
            "mimeType": self.mime_type,
        }


@dataclass(frozen=True)
class PromptArgument:
    name: str
    description: str
    required: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "required": self.required}


@dataclass(frozen=True)
class Prompt:
    name: str
    description: str
    arguments: tuple[PromptArgument, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "arguments": [a.to_dict() for a in self.arguments],
        }


RESOURCES: tuple[Resource, ...] = (
    Resource(
        uri="gemini://models",
        name="Available Gemini Models",
        description="List of all available Gemini models and their capabilities",
        mime_type="application/json",
    ),
    Resource(
        uri="gemini://capabilities",
        name="API Capabilities",
        description="Detailed information about Gemini API capabilities",
        mime_type="text/markdown",
    ),
)

PROMPTS: tuple[Prompt, ...] = (
    Prompt(
        name="code_review",
        description="Comprehensive code review with Gemini 2.5 Pro",
        arguments=(
            PromptArgument("code", "Code to review", required=True),
            PromptArgument("language", "Programming language"),
        ),
    ),
    Prompt(
        name="explain_with_thinking",
        description="Deep explanation using Gemini 2.5 thinking capabilities",
        arguments=(
            PromptArgument("topic", "Topic to explain", required=True),
            PromptArgument("level", "Explanation level (beginner/intermediate/expert)"),
        ),
    ),
    Prompt(
        name="creative_writing",
        description="Creative writing with style control",
        arguments=(
            PromptArgument("prompt", "Writing prompt", required=True),
            PromptArgument("style", "Writing style"),
            PromptArgument("length", "Desired length"),
        ),
    ),
)
