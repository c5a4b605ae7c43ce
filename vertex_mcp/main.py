"""FastAPI MCP Server - Main application entrypoint."""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Awaitable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from vertex_mcp.config.loader import ConfigError, get_settings, resolve_vertex_config
from vertex_mcp.mcp.dispatcher import ToolDispatcher
from vertex_mcp.mcp.handlers import MCPHandlers
from vertex_mcp.mcp.jsonrpc import JsonRpcProcessor
from vertex_mcp.mcp.registry import ToolRegistry, get_registry
from vertex_mcp.tools.base import SamplingConfig, TextGenerator
from vertex_mcp.utils.logging import setup_logging, set_request_id, get_logger

logger = logging.getLogger(__name__)

# Headers stamped on every response, preflight or not
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# How often an in-flight call checks whether its client went away
DISCONNECT_POLL_INTERVAL = 0.5


class ClientDisconnected(Exception):
    """The client closed the connection before the response was ready."""


async def run_until_disconnect(request: Request, awaitable: Awaitable[Any]) -> Any:
    """
    Await a call, cancelling it if the client disconnects first.

    Raises:
        ClientDisconnected: If the client went away and the call was cancelled.
    """
    task = asyncio.ensure_future(awaitable)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_INTERVAL)
            if done:
                return task.result()
            if await request.is_disconnected():
                task.cancel()
                raise ClientDisconnected()
    finally:
        if not task.done():
            task.cancel()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    log = get_logger("startup")
    registry: ToolRegistry = app.state.registry
    log.info("MCP server ready", tool_count=registry.tool_count, tools=list(registry.names))

    yield

    log.info("Shutting down MCP server")


def create_app(generator: TextGenerator, registry: ToolRegistry | None = None) -> FastAPI:
    """
    Build the FastAPI app around an already-validated text generator.

    Args:
        generator: Backend used by every tool call.
        registry: Tool catalog. Defaults to the process-wide registry.
    """
    settings = get_settings()
    registry = registry or get_registry()
    processor = JsonRpcProcessor(MCPHandlers(ToolDispatcher(registry, generator)))

    app = FastAPI(
        title="Vertex AI MCP Server",
        description="MCP server exposing Gemini on Vertex AI as tools",
        version=settings.server_version,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.registry = registry
    app.state.processor = processor

    # Answers browser preflights before they reach the MCP endpoint
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Added last so it wraps CORS and stamps every response, preflights included
    @app.middleware("http")
    async def add_request_id_middleware(request: Request, call_next):
        """Add request ID and CORS headers to all responses."""
        request_id = request.headers.get("X-Request-ID") or set_request_id()
        set_request_id(request_id)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        response.headers.update(CORS_HEADERS)
        return response

    @app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def mcp_endpoint(request: Request) -> Response:
        """
        JSON-RPC endpoint.

        POST carries one request. OPTIONS is answered with 200, other
        methods with 405. Malformed JSON is a plain-text 400.
        """
        if request.method == "OPTIONS":
            return Response(status_code=200)
        if request.method != "POST":
            return PlainTextResponse("Method not allowed", status_code=405)

        body = await request.body()
        rpc_request, parse_error = processor.parse_request(body)
        if parse_error is not None:
            return PlainTextResponse(parse_error, status_code=400)

        try:
            response = await run_until_disconnect(
                request, processor.process_request(rpc_request)  # type: ignore[arg-type]
            )
        except ClientDisconnected:
            logger.warning(f"Client disconnected during {rpc_request.method}, call cancelled")  # type: ignore[union-attr]
            return Response(status_code=499)

        if response is None:
            # Notification - no response body
            return Response(status_code=204)

        return JSONResponse(content=response.model_dump())

    return app


# =============================================================================
# Main Entry Point
# =============================================================================


def main() -> None:
    """Validate configuration, build the Gemini backend and run the server."""
    import uvicorn

    from vertex_mcp.tools.gemini.client import GeminiClient

    settings = get_settings()
    setup_logging()
    log = get_logger("startup")
    log.info("Starting Vertex AI MCP Server")

    try:
        vertex_config = resolve_vertex_config(settings)
    except ConfigError as e:
        log.error("Invalid configuration", error=str(e))
        sys.exit(1)

    log.info(
        "Configuration",
        project_id=vertex_config.project_id,
        location=vertex_config.location,
        model=vertex_config.model_name,
        port=settings.port,
    )

    sampling = SamplingConfig(
        temperature=settings.temperature,
        top_p=settings.top_p,
        max_output_tokens=settings.max_output_tokens,
        include_thoughts=settings.include_thoughts,
    )
    try:
        generator = GeminiClient(
            vertex_config, sampling=sampling, timeout=settings.generation_timeout
        )
    except Exception as e:
        log.error("Failed to create Vertex AI client", error=str(e))
        sys.exit(1)
    log.info("Vertex AI client initialized")

    app = create_app(generator)
    log.info("Server listening", url=f"http://{settings.host}:{settings.port}")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        timeout_keep_alive=settings.keep_alive_timeout,
        timeout_graceful_shutdown=settings.shutdown_timeout,
    )


if __name__ == "__main__":
    main()
