"""MCP method handlers for JSON-RPC requests."""

import logging
from enum import Enum
from typing import Any

from pydantic import ValidationError

from vertex_mcp.config.loader import get_settings
from vertex_mcp.mcp.dispatcher import ToolDispatcher
from vertex_mcp.mcp.errors import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    DispatchError,
    InvalidParamsError,
    make_error_data,
)
from vertex_mcp.mcp.models import (
    Capabilities,
    InitializeResult,
    ServerInfo,
    ToolCallParams,
    ToolsListResult,
)
from vertex_mcp.mcp.registry import ToolRegistry

logger = logging.getLogger(__name__)

# MCP protocol version we support
PROTOCOL_VERSION = "2025-06-18"


class McpMethod(str, Enum):
    """The closed set of MCP methods this server understands."""

    INITIALIZE = "initialize"
    INITIALIZED = "notifications/initialized"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"

    @classmethod
    def parse(cls, method: str) -> "McpMethod | None":
        """Map a wire method name to a member, or None if unsupported."""
        try:
            return cls(method)
        except ValueError:
            return None

    @property
    def is_notification(self) -> bool:
        """Whether the method never produces a JSON-RPC response body."""
        return self is McpMethod.INITIALIZED


class MCPHandlers:
    """Handlers for MCP protocol methods."""

    def __init__(self, dispatcher: ToolDispatcher):
        self.dispatcher = dispatcher

    @property
    def registry(self) -> ToolRegistry:
        return self.dispatcher.registry

    async def handle_initialize(self, params: Any) -> dict[str, Any]:
        """Handle the initialize request; client params are not inspected."""
        settings = get_settings()
        result = InitializeResult(
            protocolVersion=PROTOCOL_VERSION,
            capabilities=Capabilities(tools={}),
            serverInfo=ServerInfo(
                name=settings.server_name,
                version=settings.server_version,
            ),
        )
        return result.model_dump()

    async def handle_initialized(self, params: Any) -> None:
        """Handle the notifications/initialized notification (no response)."""
        logger.info("Client confirmed initialization")
        return None

    async def handle_tools_list(self, params: Any) -> dict[str, Any]:
        """Handle the tools/list request."""
        result = ToolsListResult(tools=self.registry.list_tools())
        return result.model_dump(mode="json")

    async def handle_tools_call(self, params: Any) -> dict[str, Any]:
        """Handle the tools/call request."""
        if params is None:
            raise InvalidParamsError("params are required")
        try:
            call_params = ToolCallParams.model_validate(params)
        except ValidationError as e:
            raise InvalidParamsError(str(e)) from e

        logger.info(f"Calling tool: {call_params.name}")
        result = await self.dispatcher.execute(call_params.name, call_params.arguments)
        return result.model_dump()

    async def dispatch(
        self, method: str, params: Any
    ) -> tuple[Any | None, dict[str, Any] | None]:
        """
        Dispatch a method call to the appropriate handler.

        Returns (result, error) tuple. One will be None.
        """
        mcp_method = McpMethod.parse(method)

        try:
            if mcp_method is McpMethod.INITIALIZE:
                return await self.handle_initialize(params), None
            if mcp_method is McpMethod.INITIALIZED:
                return await self.handle_initialized(params), None
            if mcp_method is McpMethod.TOOLS_LIST:
                return await self.handle_tools_list(params), None
            if mcp_method is McpMethod.TOOLS_CALL:
                return await self.handle_tools_call(params), None
        except DispatchError as e:
            logger.info(f"Rejected {method}: {e}")
            return None, make_error_data(INTERNAL_ERROR, str(e))
        except Exception as e:
            logger.exception(f"Error handling method {method}")
            return None, make_error_data(
                INTERNAL_ERROR, f"Error processing request: {str(e)}"
            )

        return None, make_error_data(METHOD_NOT_FOUND, f"Method not found: {method}")
