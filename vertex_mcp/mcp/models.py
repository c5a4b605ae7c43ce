"""Pydantic models for MCP JSON-RPC 2.0 protocol."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# JSON-RPC 2.0 Base Models
# =============================================================================


class JsonRpcRequest(BaseModel):
    """JSON-RPC 2.0 request object.

    ``id`` is opaque and echoed back unchanged; it is absent for notifications.
    ``params`` stays undecoded until the target method interprets it.
    """

    jsonrpc: str = "2.0"
    id: Any = None
    method: str = ""
    params: Any = None


class JsonRpcError(BaseModel):
    """JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """JSON-RPC 2.0 response object."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: Any = None
    result: Any = None
    error: JsonRpcError | None = None

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        """Serialize with exactly one of ``result`` or ``error``."""
        data: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            data["error"] = self.error.model_dump(exclude_none=True)
        else:
            data["result"] = self.result
        return data


# =============================================================================
# MCP Content Types
# =============================================================================


class TextContent(BaseModel):
    """Text content returned by tools."""

    type: Literal["text"] = "text"
    text: str


# =============================================================================
# MCP Tool Models
# =============================================================================


class SchemaProperty(BaseModel):
    """A single property in a tool input schema."""

    model_config = ConfigDict(frozen=True)

    type: str
    description: str


class InputSchema(BaseModel):
    """Declarative JSON-Schema-like input descriptor for a tool."""

    model_config = ConfigDict(frozen=True)

    type: Literal["object"] = "object"
    properties: dict[str, SchemaProperty] = Field(default_factory=dict)
    required: tuple[str, ...] = ()


class Tool(BaseModel):
    """MCP tool definition."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Tool name (lowercase with underscores)")
    description: str = Field(..., description="Human-readable description")
    inputSchema: InputSchema = Field(..., description="Input schema for the tool")


class CallToolResult(BaseModel):
    """Result of a tool call."""

    content: list[TextContent]
    isError: bool = False

    @classmethod
    def from_text(cls, text: str) -> "CallToolResult":
        """Wrap successful tool output as a single text block."""
        return cls(content=[TextContent(text=text)])

    @classmethod
    def from_error(cls, message: str) -> "CallToolResult":
        """Build a soft tool error result."""
        return cls(content=[TextContent(text=message)], isError=True)

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        """Serialize, omitting ``isError`` unless the call failed."""
        data: dict[str, Any] = {
            "content": [block.model_dump() for block in self.content],
        }
        if self.isError:
            data["isError"] = True
        return data


# =============================================================================
# MCP Protocol Models
# =============================================================================


class ServerInfo(BaseModel):
    """Server information returned during initialization."""

    name: str
    version: str


class Capabilities(BaseModel):
    """Server capabilities."""

    tools: dict[str, Any] = Field(default_factory=dict)


class InitializeResult(BaseModel):
    """Result of initialize request."""

    protocolVersion: str
    capabilities: Capabilities
    serverInfo: ServerInfo


class ToolsListResult(BaseModel):
    """Result of tools/list request."""

    tools: list[Tool]


class ToolCallParams(BaseModel):
    """Parameters for tools/call request."""

    name: str = ""
    arguments: dict[str, Any] | None = None
