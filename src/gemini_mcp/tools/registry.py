"""Tool registry: listing and schema-checked invocation."""

from __future__ import annotations

import logging
from typing import Any

from gemini_mcp.protocol.errors import MCPError, ToolValidationError
from gemini_mcp.tools.schema import check_descriptor, validate_arguments
from gemini_mcp.tools.types import ToolDescriptor, ToolResult, ValidationFailure

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Catalog of tool descriptors keyed by name.

    ``call`` validates arguments before any handler runs; handlers only
    ever see arguments that satisfied their schema.
    """

    def __init__(self, descriptors: list[ToolDescriptor] | None = None):
        self._tools: dict[str, ToolDescriptor] = {}
        for descriptor in descriptors or []:
            self.register(descriptor)

    def register(self, descriptor: ToolDescriptor) -> None:
        """
        Register a tool.

        Raises:
            ValueError: If the name is empty or already taken.
            jsonschema.SchemaError: If the input schema is malformed.
        """
        if not descriptor.name:
            raise ValueError("ToolDescriptor has no name")
        if descriptor.name in self._tools:
            raise ValueError(f"Tool already registered: {descriptor.name}")
        check_descriptor(descriptor)
        self._tools[descriptor.name] = descriptor
        logger.info(f"Registered tool: {descriptor.name}")

    def get(self, name: str) -> ToolDescriptor | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def list_tools(self, tag: str | None = None) -> list[ToolDescriptor]:
        """Registered tools in registration order, optionally by capability tag."""
        tools = list(self._tools.values())
        if tag is not None:
            tools = [t for t in tools if tag in t.tags]
        return tools

    async def call(self, name: str, arguments: Any) -> ToolResult:
        """
        Validate arguments and run the named tool.

        Raises:
            MCPError: If no tool has that name.
            ToolValidationError: If the arguments violate the schema.
            Exception: Whatever the handler raises, unchanged.
        """
        descriptor = self._tools.get(name)
        if descriptor is None:
            raise MCPError.unknown_tool(name, self.names())

        outcome = validate_arguments(descriptor, arguments)
        if isinstance(outcome, ValidationFailure):
            raise ToolValidationError(name, outcome.errors)

        return await descriptor.handler(outcome.arguments)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
