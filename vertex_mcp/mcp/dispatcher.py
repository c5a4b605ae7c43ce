"""Tool dispatch: route validated calls to handlers and shape their results."""

import logging
from typing import Any, Mapping

from vertex_mcp.mcp.errors import UnknownToolError
from vertex_mcp.mcp.models import CallToolResult
from vertex_mcp.mcp.registry import ToolRegistry
from vertex_mcp.tools.base import BackendError, TextGenerator, ToolHandler

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """Execute registered tools against an injected text generator.

    Two failure channels are kept apart:

    - Unknown tools and malformed arguments raise DispatchError. The router
      turns these into JSON-RPC error envelopes.
    - A BackendError during an otherwise valid call becomes a soft result
      with ``isError`` set, returned in a normal success envelope.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        generator: TextGenerator,
        handlers: Mapping[str, ToolHandler] | None = None,
    ):
        if handlers is None:
            from vertex_mcp.tools.gemini.tools import tool_handlers

            handlers = tool_handlers()

        missing = [name for name in registry.names if name not in handlers]
        if missing:
            raise ValueError(f"No handler for registered tools: {', '.join(missing)}")

        self.registry = registry
        self.generator = generator
        self._handlers = dict(handlers)

    async def execute(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        """
        Run a tool and wrap its outcome.

        Args:
            name: Registered tool name.
            arguments: Decoded argument mapping; keys outside the schema are ignored.

        Returns:
            The tool result, with ``isError`` set on backend failure.

        Raises:
            UnknownToolError: If no tool with that name is registered.
            InvalidArgumentError: If a required argument is missing or mistyped.
        """
        if name not in self.registry:
            raise UnknownToolError(name)
        handler = self._handlers[name]

        try:
            text = await handler(self.generator, arguments or {})
        except BackendError as e:
            logger.warning(f"Tool {name} failed: {e}")
            return CallToolResult.from_error(f"Error: {e}")

        return CallToolResult.from_text(text)
