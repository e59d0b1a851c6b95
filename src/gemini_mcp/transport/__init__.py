"""
MCP Transport Layer.

Framed JSON-RPC over standard input/output, newline-delimited or
``Content-Length`` prefixed.
"""

from gemini_mcp.transport.types import FramingMode, TransportConfig
from gemini_mcp.transport.base import Transport, TransportError, ConnectionClosedError, FramingError
from gemini_mcp.transport.framing import (
    Framing,
    LineDelimitedFraming,
    ContentLengthFraming,
    create_framing,
)
from gemini_mcp.transport.stdio import StdioTransport

__all__ = [
    "Transport",
    "TransportConfig",
    "TransportError",
    "ConnectionClosedError",
    "FramingError",
    "FramingMode",
    "Framing",
    "LineDelimitedFraming",
    "ContentLengthFraming",
    "create_framing",
    "StdioTransport",
]
