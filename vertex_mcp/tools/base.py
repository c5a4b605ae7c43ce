"""Backend capability interface, tool decorator and argument helpers."""

import functools
from typing import Any, Awaitable, Callable, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from vertex_mcp.mcp.errors import InvalidArgumentError
from vertex_mcp.mcp.models import InputSchema, Tool


class BackendError(Exception):
    """Text generation failed (timeout, quota, transport, empty response)."""


class SamplingConfig(BaseModel):
    """Fixed generation parameters, chosen once at startup."""

    model_config = ConfigDict(frozen=True)

    temperature: float = 0.7
    top_p: float = 0.95
    max_output_tokens: int = 8192
    include_thoughts: bool = False


@runtime_checkable
class TextGenerator(Protocol):
    """Generate text from a prompt under a fixed sampling configuration."""

    async def generate(self, prompt: str) -> str:
        """Return generated text, or raise BackendError."""
        ...


# Tool handlers take the injected generator and the raw argument mapping
# and return the generated text.
ToolHandler = Callable[[TextGenerator, dict[str, Any]], Awaitable[str]]


def tool(
    name: str,
    description: str,
    input_schema: dict[str, Any],
) -> Callable[[ToolHandler], ToolHandler]:
    """
    Decorator to mark a function as an MCP tool.

    Usage:
        @tool(
            name="gemini_query",
            description="Query Gemini",
            input_schema={"type": "object", "properties": {...}, "required": ["prompt"]},
        )
        async def query(generator: TextGenerator, arguments: dict) -> str:
            return await generator.generate(require_string(arguments, "prompt"))

    The decorated function will have _tool_metadata attached as a Tool model.
    """
    descriptor = Tool(
        name=name,
        description=description,
        inputSchema=InputSchema.model_validate(input_schema),
    )

    def decorator(func: ToolHandler) -> ToolHandler:
        @functools.wraps(func)
        async def wrapper(generator: TextGenerator, arguments: dict[str, Any]) -> str:
            return await func(generator, arguments)

        # Attach metadata for registration
        wrapper._tool_metadata = descriptor  # type: ignore
        return wrapper

    return decorator


def get_tool_metadata(func: Callable) -> Tool | None:
    """Get tool metadata from a decorated function."""
    return getattr(func, "_tool_metadata", None)


# =============================================================================
# Argument Helpers
# =============================================================================


def require_string(arguments: dict[str, Any], field: str) -> str:
    """Return a required string argument or raise InvalidArgumentError."""
    value = arguments.get(field)
    if not isinstance(value, str):
        raise InvalidArgumentError(field)
    return value


def optional_string(arguments: dict[str, Any], field: str, default: str = "") -> str:
    """Return an optional string argument, falling back when absent or mistyped."""
    value = arguments.get(field)
    if isinstance(value, str):
        return value
    return default
