"""Method routing and the uniform error boundary."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Iterable

from gemini_mcp.protocol.capabilities import InitializeResult
from gemini_mcp.protocol.errors import ERROR_MESSAGES, INTERNAL_ERROR, MCPError
from gemini_mcp.protocol.messages import (
    JSONRPCError,
    JSONRPCErrorResponse,
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResponse,
    error_response,
    parse_message,
    success,
)
from gemini_mcp.server.catalogs import PROMPTS, RESOURCES, Prompt, Resource
from gemini_mcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

# Type aliases for handlers
RequestHandler = Callable[[dict[str, Any] | None], Awaitable[Any]]
NotificationHandler = Callable[[dict[str, Any] | None], Awaitable[None]]


class RequestRouter:
    """
    Dispatches decoded envelopes to method handlers.

    ``dispatch`` is the single catch point below the transport: every
    exception raised by a handler becomes an error response, so one
    failing request can never stop the server or block later messages.
    Notifications are never answered.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        initialize_result: InitializeResult | None = None,
        resources: Iterable[Resource] = RESOURCES,
        prompts: Iterable[Prompt] = PROMPTS,
    ):
        self.registry = registry
        self.initialize_result = initialize_result or InitializeResult()
        self.resources = list(resources)
        self.prompts = list(prompts)

        self._request_handlers: dict[str, RequestHandler] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
            "resources/list": self._list_resources,
            "prompts/list": self._list_prompts,
        }
        self._notification_handlers: dict[str, NotificationHandler] = {
            "notifications/initialized": self._on_initialized,
            "notifications/cancelled": self._on_cancelled,
        }

    @property
    def methods(self) -> list[str]:
        return list(self._request_handlers)

    def on_request(self, method: str, handler: RequestHandler) -> None:
        """
        Register or replace the handler for a request method.

        Args:
            method: The method name to handle.
            handler: Async function receiving params, returning result.
        """
        self._request_handlers[method] = handler

    def on_notification(self, method: str, handler: NotificationHandler) -> None:
        """
        Register handler for a client notification.

        Args:
            method: The method name to handle.
            handler: Async function receiving params.
        """
        self._notification_handlers[method] = handler

    async def dispatch(self, message: Any) -> JSONRPCResponse | None:
        """
        Route one decoded envelope.

        Returns:
            The response for a request, or None for notifications and
            envelopes that carry nothing routable.
        """
        try:
            envelope = parse_message(message)
        except MCPError as e:
            return self._reject(message, e)

        if isinstance(envelope, JSONRPCNotification):
            await self._handle_notification(envelope)
            return None
        return await self._handle_request(envelope)

    async def _handle_request(self, request: JSONRPCRequest) -> JSONRPCResponse:
        logger.debug(f"Handling {request}")
        handler = self._request_handlers.get(request.method)

        if handler is None:
            error = MCPError.method_not_found(request.method)
            return JSONRPCErrorResponse(id=request.id, error=JSONRPCError.from_exception(error))

        try:
            result = await handler(request.params)
            return success(request.id, result)
        except MCPError as e:
            logger.warning(f"{request} failed: {e.message}")
            return JSONRPCErrorResponse(id=request.id, error=JSONRPCError.from_exception(e))
        except Exception as e:
            logger.exception(f"Handler error for {request.method}")
            return error_response(
                id=request.id,
                code=INTERNAL_ERROR,
                message=str(e) or ERROR_MESSAGES[INTERNAL_ERROR],
            )

    async def _handle_notification(self, notification: JSONRPCNotification) -> None:
        handler = self._notification_handlers.get(notification.method)
        if handler is None:
            logger.debug(f"Ignoring {notification}")
            return

        try:
            await handler(notification.params)
        except Exception as e:
            logger.exception(f"Notification handler error for {notification.method}: {e}")

    def _reject(self, message: Any, error: MCPError) -> JSONRPCResponse | None:
        """Answer a malformed request if it can be correlated, else drop it."""
        if isinstance(message, dict) and "id" in message and isinstance(message.get("method"), str):
            logger.warning(f"Rejecting malformed request {message['method']}: {error.data}")
            return JSONRPCErrorResponse(id=message["id"], error=JSONRPCError.from_exception(error))

        logger.warning(f"Dropping envelope that cannot be routed: {error.data}")
        return None

    async def _initialize(self, params: dict[str, Any] | None) -> dict[str, Any]:
        client = (params or {}).get("clientInfo") or {}
        logger.info(f"Initialize from {client.get('name', 'unknown client')} {client.get('version', '')}".rstrip())
        return self.initialize_result.to_dict()

    async def _ping(self, params: dict[str, Any] | None) -> dict[str, Any]:
        return {}

    async def _list_tools(self, params: dict[str, Any] | None) -> dict[str, Any]:
        return {"tools": [t.to_dict() for t in self.registry.list_tools()]}

    async def _call_tool(self, params: dict[str, Any] | None) -> dict[str, Any]:
        params = params or {}
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise MCPError.internal_error("tools/call requires a tool name")

        result = await self.registry.call(name, params.get("arguments"))
        return result.to_dict()

    async def _list_resources(self, params: dict[str, Any] | None) -> dict[str, Any]:
        return {"resources": [r.to_dict() for r in self.resources]}

    async def _list_prompts(self, params: dict[str, Any] | None) -> dict[str, Any]:
        return {"prompts": [p.to_dict() for p in self.prompts]}

    async def _on_initialized(self, params: dict[str, Any] | None) -> None:
        logger.info("Client finished initialization")

    async def _on_cancelled(self, params: dict[str, Any] | None) -> None:
        request_id = (params or {}).get("requestId")
        logger.info(f"Client cancelled request {request_id}; in-flight calls run to completion")
