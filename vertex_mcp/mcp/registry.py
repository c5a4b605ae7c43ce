"""Tool registry: the static catalog of MCP tool descriptors."""

import logging
from functools import lru_cache
from typing import Iterable, Iterator

from vertex_mcp.mcp.models import Tool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Read-only catalog of tool descriptors, kept in definition order.

    The registry is filled once at construction and never mutated, so a
    single instance is safely shared by all concurrent requests.
    """

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        registered: dict[str, Tool] = {}
        for descriptor in tools:
            if descriptor.name in registered:
                raise ValueError(f"Tool '{descriptor.name}' already registered")
            registered[descriptor.name] = descriptor
            logger.debug(f"Registered tool: {descriptor.name}")
        self._tools = registered

    def get(self, name: str) -> Tool | None:
        """Get a tool descriptor by name."""
        return self._tools.get(name)

    def list_tools(self) -> list[Tool]:
        """List all registered tools in definition order."""
        return list(self._tools.values())

    @property
    def names(self) -> tuple[str, ...]:
        """Return the registered tool names in definition order."""
        return tuple(self._tools)

    @property
    def tool_count(self) -> int:
        """Return the number of registered tools."""
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)


def build_default_registry() -> ToolRegistry:
    """Build the registry holding the Gemini tool descriptors."""
    from vertex_mcp.tools.gemini.tools import tool_definitions

    return ToolRegistry(tool_definitions())


@lru_cache
def get_registry() -> ToolRegistry:
    """Get the process-wide tool registry, building it on first use."""
    return build_default_registry()
