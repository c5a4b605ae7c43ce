"""Configuration loading and management."""

from vertex_mcp.config.loader import (
    ConfigError,
    Settings,
    VertexConfig,
    get_settings,
    resolve_vertex_config,
)

__all__ = ["ConfigError", "Settings", "VertexConfig", "get_settings", "resolve_vertex_config"]
