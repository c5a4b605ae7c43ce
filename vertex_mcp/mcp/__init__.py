"""MCP (Model Context Protocol) implementation with JSON-RPC 2.0."""

from vertex_mcp.mcp.models import (
    JsonRpcRequest,
    JsonRpcResponse,
    JsonRpcError,
    Tool,
    TextContent,
    CallToolResult,
)
from vertex_mcp.mcp.registry import ToolRegistry
from vertex_mcp.mcp.errors import (
    METHOD_NOT_FOUND,
    INTERNAL_ERROR,
    DispatchError,
    UnknownToolError,
    InvalidArgumentError,
    InvalidParamsError,
)

__all__ = [
    "JsonRpcRequest",
    "JsonRpcResponse",
    "JsonRpcError",
    "Tool",
    "TextContent",
    "CallToolResult",
    "ToolRegistry",
    "METHOD_NOT_FOUND",
    "INTERNAL_ERROR",
    "DispatchError",
    "UnknownToolError",
    "InvalidArgumentError",
    "InvalidParamsError",
]
