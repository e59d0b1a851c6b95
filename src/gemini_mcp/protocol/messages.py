"""JSON-RPC 2.0 message types for MCP protocol."""

from dataclasses import dataclass, field
from typing import Any, Union

from gemini_mcp.protocol.errors import MCPError

RequestId = Union[str, int, float, None]


@dataclass
class JSONRPCRequest:
    """
    JSON-RPC 2.0 request message.

    Requests carry an ``id`` key and expect exactly one response with
    the same ``id``.
    """

    method: str
    id: RequestId
    params: dict[str, Any] | None = None
    jsonrpc: str = "2.0"

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        msg: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
            "id": self.id,
        }
        if self.params is not None:
            msg["params"] = self.params
        return msg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JSONRPCRequest":
        """Create from JSON dict."""
        return cls(
            method=data["method"],
            id=data["id"],
            params=data.get("params"),
            jsonrpc=data.get("jsonrpc", "2.0"),
        )

    def __str__(self) -> str:
        return f"Request({self.method}, id={self.id})"


@dataclass
class JSONRPCNotification:
    """
    JSON-RPC 2.0 notification message.

    Notifications do not expect a response (no id field).
    """

    method: str
    params: dict[str, Any] | None = None
    jsonrpc: str = "2.0"

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        msg: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
        }
        if self.params is not None:
            msg["params"] = self.params
        return msg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JSONRPCNotification":
        """Create from JSON dict."""
        return cls(
            method=data["method"],
            params=data.get("params"),
            jsonrpc=data.get("jsonrpc", "2.0"),
        )

    def __str__(self) -> str:
        return f"Notification({self.method})"


@dataclass
class JSONRPCError:
    """JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        error: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.data is not None:
            error["data"] = self.data
        return error

    @classmethod
    def from_exception(cls, error: MCPError) -> "JSONRPCError":
        return cls(code=error.code, message=error.message, data=error.data)


@dataclass(frozen=True)
class JSONRPCSuccess:
    """Response carrying a result. Has no error field."""

    id: RequestId
    result: Any
    jsonrpc: str = field(default="2.0", init=False)

    is_error = False

    def to_dict(self) -> dict[str, Any]:
        return {"jsonrpc": self.jsonrpc, "id": self.id, "result": self.result}

    def __str__(self) -> str:
        return f"Response(id={self.id}, success)"


@dataclass(frozen=True)
class JSONRPCErrorResponse:
    """Response carrying an error. Has no result field."""

    id: RequestId
    error: JSONRPCError
    jsonrpc: str = field(default="2.0", init=False)

    is_error = True

    def to_dict(self) -> dict[str, Any]:
        return {"jsonrpc": self.jsonrpc, "id": self.id, "error": self.error.to_dict()}

    def __str__(self) -> str:
        return f"Response(id={self.id}, error={self.error.code})"


# A response is exactly one of the two; there is no type holding both fields.
JSONRPCResponse = Union[JSONRPCSuccess, JSONRPCErrorResponse]


def success(id: RequestId, result: Any) -> JSONRPCSuccess:
    """Create a success response."""
    return JSONRPCSuccess(id=id, result=result)


def error_response(
    id: RequestId,
    code: int,
    message: str,
    data: Any = None,
) -> JSONRPCErrorResponse:
    """Create an error response."""
    return JSONRPCErrorResponse(id=id, error=JSONRPCError(code=code, message=message, data=data))


def parse_message(data: Any) -> JSONRPCRequest | JSONRPCNotification:
    """
    Parse a decoded JSON value into a request or a notification.

    The presence of the ``id`` key, not its value, decides between the two.

    Args:
        data: Decoded JSON-RPC message.

    Returns:
        JSONRPCRequest if ``id`` is present, JSONRPCNotification otherwise.

    Raises:
        MCPError: If the value is not an object with a string ``method``.
    """
    if not isinstance(data, dict):
        raise MCPError.invalid_request("message must be a JSON object")

    method = data.get("method")
    if not isinstance(method, str):
        raise MCPError.invalid_request("message has no method")

    params = data.get("params")
    if params is not None and not isinstance(params, dict):
        raise MCPError.invalid_request("params must be an object")

    if is_notification(data):
        return JSONRPCNotification.from_dict(data)
    return JSONRPCRequest.from_dict(data)


def is_request(data: dict[str, Any]) -> bool:
    """Check if message is a request (has id and method)."""
    return "id" in data and "method" in data


def is_notification(data: dict[str, Any]) -> bool:
    """Check if message is a notification (has method, no id)."""
    return "method" in data and "id" not in data
