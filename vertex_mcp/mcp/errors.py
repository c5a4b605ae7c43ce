"""JSON-RPC 2.0 error codes, dispatch faults and error response helpers."""

from typing import Any

# JSON-RPC 2.0 error codes emitted by this server
METHOD_NOT_FOUND = -32601  # The method does not exist / is not available
INTERNAL_ERROR = -32603  # Internal JSON-RPC error, also used for dispatch faults


def error_message(code: int) -> str:
    """Get the standard message for a JSON-RPC error code."""
    messages = {
        METHOD_NOT_FOUND: "Method not found",
        INTERNAL_ERROR: "Internal error",
    }
    return messages.get(code, "Unknown error")


def make_error_data(code: int, message: str | None = None, data: Any = None) -> dict[str, Any]:
    """Create an error object for JSON-RPC response."""
    error: dict[str, Any] = {
        "code": code,
        "message": message or error_message(code),
    }
    if data is not None:
        error["data"] = data
    return error


# =============================================================================
# Dispatch Faults
# =============================================================================


class DispatchError(Exception):
    """A hard fault raised while dispatching a tool call.

    Dispatch faults are client errors at the protocol level: they surface as
    JSON-RPC error envelopes with code INTERNAL_ERROR, never as soft
    ``isError`` tool results.
    """


class UnknownToolError(DispatchError):
    """The requested tool name is not in the registry."""

    def __init__(self, name: str):
        super().__init__(f"unknown tool: {name}")
        self.name = name


class InvalidArgumentError(DispatchError):
    """A required tool argument is missing or has the wrong type."""

    def __init__(self, field: str, expected: str = "a string"):
        super().__init__(f"{field} must be {expected}")
        self.field = field


class InvalidParamsError(DispatchError):
    """The tools/call params could not be decoded into a name and arguments."""

    def __init__(self, detail: str):
        super().__init__(f"invalid params: {detail}")
