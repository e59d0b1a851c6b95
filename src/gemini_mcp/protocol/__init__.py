"""
MCP Protocol Core.

JSON-RPC 2.0 envelope types, error codes and the capability descriptor
answered from ``initialize``.
"""

from gemini_mcp.protocol.messages import (
    JSONRPCRequest,
    JSONRPCNotification,
    JSONRPCError,
    JSONRPCSuccess,
    JSONRPCErrorResponse,
    JSONRPCResponse,
    success,
    error_response,
    parse_message,
)
from gemini_mcp.protocol.errors import (
    MCPError,
    ToolValidationError,
    PARSE_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    INVALID_PARAMS,
    INTERNAL_ERROR,
)
from gemini_mcp.protocol.capabilities import (
    PROTOCOL_VERSION,
    InitializeResult,
    ServerCapabilities,
    ServerInfo,
)

__all__ = [
    # Messages
    "JSONRPCRequest",
    "JSONRPCNotification",
    "JSONRPCError",
    "JSONRPCSuccess",
    "JSONRPCErrorResponse",
    "JSONRPCResponse",
    "success",
    "error_response",
    "parse_message",
    # Errors
    "MCPError",
    "ToolValidationError",
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    # Capabilities
    "PROTOCOL_VERSION",
    "InitializeResult",
    "ServerCapabilities",
    "ServerInfo",
]
