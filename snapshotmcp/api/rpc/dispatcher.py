"""
MCP protocol handler.

Request lifecycle: Received -> MethodResolved -> HandlerInvoked ->
ResponseReady, or Failed at method resolution (unknown method / tool).
Faults inside a tool handler never become protocol errors: they are
returned as an error-shaped tool result with `isError` set.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

from loguru import logger

from snapshotmcp import __version__
from snapshotmcp.api.rpc.envelope import RpcRequest, error_response, peek_id, success_response
from snapshotmcp.context import GatewayContext
from snapshotmcp.tools.base import error_result
from snapshotmcp.tools.validation import validate_arguments
from snapshotmcp.utils.exceptions import (
    GatewayError,
    UnknownMethodError,
    UnknownToolError,
    ValidationError,
    render_error,
    sanitize_error_message,
)

INITIALIZED_NOTIFICATION = "notifications/initialized"


def tool_content(payload: Any, *, is_error: bool = False) -> dict[str, Any]:
    """Wrap a result as MCP text content."""
    result: dict[str, Any] = {"content": [{"type": "text", "text": json.dumps(payload, indent=2)}]}
    if is_error:
        result["isError"] = True
    return result


class McpDispatcher:
    """Route decoded JSON-RPC envelopes to protocol methods and catalog tools."""

    def __init__(self, ctx: GatewayContext, *, tool_timeout: Optional[float] = None):
        self.ctx = ctx
        self.tool_timeout = (
            tool_timeout if tool_timeout is not None else ctx.config.server.tool_call_timeout_seconds
        )

    async def handle(self, payload: Any) -> Optional[dict[str, Any]]:
        """
        Process one envelope.

        Returns the response envelope, or None when nothing must be sent back
        (the initialized notification).
        """
        try:
            request = RpcRequest.decode(payload)
        except GatewayError as exc:
            logger.warning("Rejected request: {}", exc.render())
            return error_response(peek_id(payload), exc)

        try:
            result = await self.dispatch(request.method, request.params or {})
        except GatewayError as exc:
            logger.warning("MCP {} failed [{}]: {}", request.method, exc.code, exc.render())
            return error_response(request.id, exc)
        except Exception as exc:
            logger.exception("MCP {} raised: {}", request.method, sanitize_error_message(str(exc)))
            return error_response(request.id, exc)

        if result is None:
            return None
        return success_response(request.id, result)

    async def dispatch(self, method: str, params: dict[str, Any]) -> Any:
        logger.debug("MCP method {}", method)
        if method == "initialize":
            return self.initialize()
        if method == INITIALIZED_NOTIFICATION:
            return None
        if method == "tools/list":
            return {"tools": self.ctx.catalog.get_definitions()}
        if method == "tools/call":
            return await self.call_tool(params.get("name"), params.get("arguments"))
        raise UnknownMethodError(method)

    def initialize(self) -> dict[str, Any]:
        server = self.ctx.config.server
        return {
            "protocolVersion": server.protocol_version,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": server.server_name, "version": __version__},
        }

    async def call_tool(self, name: Any, arguments: Any) -> dict[str, Any]:
        op = self.ctx.catalog.get(name)
        if op is None:
            raise UnknownToolError(name)

        try:
            args = validate_arguments(op.input_schema, arguments)
        except ValidationError as exc:
            logger.debug("Tool {} rejected: {}", name, exc.message)
            payload = {
                **error_result(exc.render()),
                "error_code": exc.code,
                "field": exc.details.get("field"),
                "tool": name,
            }
            return tool_content(payload, is_error=True)

        try:
            result = await asyncio.wait_for(op.handler(self.ctx, args), timeout=self.tool_timeout)
        except asyncio.TimeoutError:
            logger.warning("Tool {} timed out after {}s", name, self.tool_timeout)
            return self._fault(name, args, f"Tool '{name}' timed out after {self.tool_timeout}s")
        except Exception as exc:
            logger.exception("Tool {} raised outside its result boundary", name)
            return self._fault(name, args, render_error(exc))

        logger.debug("Tool {} -> {}", name, result.get("status") if isinstance(result, dict) else "?")
        return tool_content(result)

    @staticmethod
    def _fault(name: str, args: Any, error: str) -> dict[str, Any]:
        return tool_content({"status": "error", "error": error, "tool": name, "args": args}, is_error=True)
