"""Tool descriptor and result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Awaitable, Callable, Union

from jsonschema import Draft7Validator

ToolHandler = Callable[[dict[str, Any]], Awaitable["ToolResult"]]


@dataclass
class ToolDescriptor:
    """
    A tool as data: advertised schema, capability tags, bound handler.

    ``input_schema`` is derived from ``properties``, ``required`` and
    ``exactly_one_of``; each exactly-one-of group becomes a ``oneOf``
    of single-field ``required`` clauses.
    """

    name: str
    description: str
    properties: dict[str, dict[str, Any]]
    handler: ToolHandler = field(repr=False)
    required: tuple[str, ...] = ()
    exactly_one_of: tuple[tuple[str, ...], ...] = ()
    tags: frozenset[str] = frozenset()

    @cached_property
    def input_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "type": "object",
            "properties": self.properties,
        }
        if self.required:
            schema["required"] = list(self.required)

        groups = [{"oneOf": [{"required": [name]} for name in group]} for group in self.exactly_one_of]
        if len(groups) == 1:
            schema.update(groups[0])
        elif groups:
            schema["allOf"] = groups
        return schema

    @cached_property
    def validator(self) -> Draft7Validator:
        return Draft7Validator(self.input_schema)

    def to_dict(self) -> dict[str, Any]:
        """Wire shape for ``tools/list``."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass
class TextContent:
    """Human-readable content block."""

    text: str
    type: str = "text"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass
class ToolResult:
    """Successful tool output: content blocks plus optional metadata."""

    content: list[TextContent]
    metadata: dict[str, Any] | None = None

    @classmethod
    def text(cls, text: str, **metadata: Any) -> "ToolResult":
        return cls(content=[TextContent(text)], metadata=metadata or None)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"content": [c.to_dict() for c in self.content]}
        if self.metadata is not None:
            result["metadata"] = self.metadata
        return result


@dataclass(frozen=True)
class ValidArguments:
    """Arguments that satisfied the tool's schema."""

    arguments: dict[str, Any]
    ok = True


@dataclass(frozen=True)
class ValidationFailure:
    """Every schema violation found in the arguments."""

    errors: list[str]
    ok = False


ValidationOutcome = Union[ValidArguments, ValidationFailure]
