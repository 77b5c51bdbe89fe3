"""JSON-RPC envelope codec and MCP dispatcher."""

from snapshotmcp.api.rpc.dispatcher import McpDispatcher, tool_content
from snapshotmcp.api.rpc.envelope import RpcRequest, error_response, success_response

__all__ = ["McpDispatcher", "RpcRequest", "error_response", "success_response", "tool_content"]
