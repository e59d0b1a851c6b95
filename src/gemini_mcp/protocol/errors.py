"""Protocol error types and error codes."""

from dataclasses import dataclass
from typing import Any

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Error code to message mapping
ERROR_MESSAGES = {
    PARSE_ERROR: "Parse error",
    INVALID_REQUEST: "Invalid Request",
    METHOD_NOT_FOUND: "Method not found",
    INVALID_PARAMS: "Invalid params",
    INTERNAL_ERROR: "Internal error",
}


@dataclass
class MCPError(Exception):
    """
    MCP protocol error.

    Raised anywhere below the request router; the router turns it into a
    JSON-RPC error object carrying the same code, message and data.
    """

    code: int
    message: str
    data: dict[str, Any] | None = None

    def __post_init__(self):
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-RPC error object."""
        error = {
            "code": self.code,
            "message": self.message,
        }
        if self.data is not None:
            error["data"] = self.data
        return error

    @classmethod
    def invalid_request(cls, details: str | None = None) -> "MCPError":
        """Create an invalid request error."""
        return cls(
            code=INVALID_REQUEST,
            message=ERROR_MESSAGES[INVALID_REQUEST],
            data={"details": details} if details else None,
        )

    @classmethod
    def method_not_found(cls, method: str) -> "MCPError":
        """Create a method not found error."""
        return cls(
            code=METHOD_NOT_FOUND,
            message=f"Method not found: {method}",
            data={"method": method},
        )

    @classmethod
    def internal_error(cls, details: str | None = None) -> "MCPError":
        """Create an internal error."""
        return cls(
            code=INTERNAL_ERROR,
            message=details or ERROR_MESSAGES[INTERNAL_ERROR],
        )

    @classmethod
    def unknown_tool(cls, name: str, available: list[str]) -> "MCPError":
        """Create the error for a tools/call naming an unregistered tool."""
        return cls(
            code=INTERNAL_ERROR,
            message=f"Unknown tool: {name}",
            data={"tool": name, "available": available},
        )

    def __str__(self) -> str:
        base = f"MCPError({self.code}): {self.message}"
        if self.data:
            base += f" {self.data}"
        return base

    def __repr__(self) -> str:
        return f"MCPError(code={self.code}, message={self.message!r}, data={self.data})"


class ToolValidationError(MCPError):
    """Tool arguments did not satisfy the tool's input schema."""

    def __init__(self, tool: str, errors: list[str]):
        summary = "; ".join(errors)
        super().__init__(
            code=INTERNAL_ERROR,
            message=f"Invalid arguments for tool '{tool}': {summary}",
            data={"tool": tool, "errors": errors},
        )
        self.tool = tool
        self.errors = errors
