"""JSON-RPC 2.0 message processing."""

import json
import logging

from pydantic import ValidationError

from vertex_mcp.mcp.handlers import MCPHandlers, McpMethod
from vertex_mcp.mcp.models import JsonRpcError, JsonRpcRequest, JsonRpcResponse

logger = logging.getLogger(__name__)


def _reject_constant(constant: str) -> None:
    """Refuse NaN and Infinity, which json accepts but JSON does not."""
    raise ValueError(f"invalid JSON constant {constant}")


class JsonRpcProcessor:
    """Process JSON-RPC 2.0 messages."""

    def __init__(self, handlers: MCPHandlers):
        self.handlers = handlers

    def parse_request(self, raw_data: str | bytes) -> tuple[JsonRpcRequest | None, str | None]:
        """
        Parse a JSON-RPC request from raw data.

        Returns (request, error) tuple. One will be None. The error is a
        plain message: framing failures are reported by the transport, not
        as JSON-RPC envelopes, since no request id is known yet.
        """
        try:
            if isinstance(raw_data, bytes):
                raw_data = raw_data.decode("utf-8")
            data = json.loads(raw_data, parse_constant=_reject_constant)
        except (UnicodeDecodeError, ValueError) as e:
            return None, f"Invalid JSON: {e}"

        if not isinstance(data, dict):
            return None, f"Invalid JSON: expected an object, got {type(data).__name__}"

        try:
            return JsonRpcRequest.model_validate(data), None
        except ValidationError as e:
            return None, f"Invalid JSON: {e}"

    async def process_request(
        self, request: JsonRpcRequest
    ) -> JsonRpcResponse | None:
        """
        Process a decoded JSON-RPC request.

        Returns None for notifications, whatever their id.
        """
        logger.info(f"Received request: method={request.method}")

        result, error = await self.handlers.dispatch(request.method, request.params)

        method = McpMethod.parse(request.method)
        if method is not None and method.is_notification:
            return None

        if error is not None:
            return JsonRpcResponse(
                id=request.id,
                error=JsonRpcError(**error),
            )
        return JsonRpcResponse(
            id=request.id,
            result=result,
        )
