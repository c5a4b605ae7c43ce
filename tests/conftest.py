"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from httpx import AsyncClient, ASGITransport

from vertex_mcp.main import create_app
from vertex_mcp.mcp.dispatcher import ToolDispatcher
from vertex_mcp.mcp.registry import build_default_registry
from vertex_mcp.tools.base import BackendError


class StubGenerator:
    """Text generator that records prompts and returns a canned reply."""

    def __init__(self, reply: str = "stub reply"):
        self.reply = reply
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


class FailingGenerator:
    """Text generator that always fails like an unreachable backend."""

    def __init__(self, cause: str = "failed to generate content: quota exceeded"):
        self.cause = cause
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        raise BackendError(self.cause)


@pytest.fixture
def generator():
    """Backend stub returning a fixed reply."""
    return StubGenerator()


@pytest.fixture
def failing_generator():
    """Backend stub that always fails."""
    return FailingGenerator()


@pytest.fixture
def registry():
    """Get a fresh tool registry."""
    return build_default_registry()


@pytest.fixture
def dispatcher(registry, generator):
    """Tool dispatcher wired to the stub backend."""
    return ToolDispatcher(registry, generator)


@pytest.fixture
def app(generator):
    """FastAPI app wired to the stub backend."""
    return create_app(generator)


@pytest.fixture
def client(app):
    """Synchronous test client for FastAPI app."""
    return TestClient(app)


@pytest.fixture
def failing_client(failing_generator):
    """Test client whose backend always fails."""
    return TestClient(create_app(failing_generator))


@pytest.fixture
async def async_client(app):
    """Async test client for FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_jsonrpc_request():
    """Sample JSON-RPC request factory."""
    def _make_request(method: str, params: dict = None, id: int = 1):
        return {
            "jsonrpc": "2.0",
            "id": id,
            "method": method,
            "params": params or {},
        }
    return _make_request
