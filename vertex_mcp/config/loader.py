"""Configuration loading from environment and .env files."""

import logging
from functools import lru_cache

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "global"
DEFAULT_MODEL = "gemini-3-pro-preview"

# Gemini 3 preview models are only served from the global endpoint
GLOBAL_ONLY_MODELS = frozenset({"gemini-3-pro-preview", "gemini-3-flash-preview"})

KNOWN_MODELS = frozenset({
    "gemini-1.5-flash",
    "gemini-1.5-pro",
    "gemini-2.0-flash",
    "gemini-3-pro-preview",
    "gemini-3-flash-preview",
})


class ConfigError(Exception):
    """Startup configuration is missing or invalid."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Vertex AI
    google_cloud_project: str = ""
    google_cloud_location: str = DEFAULT_LOCATION
    gemini_model: str = DEFAULT_MODEL
    google_application_credentials: str = ""

    # Sampling (fixed for the lifetime of the process)
    temperature: float = 0.7
    top_p: float = 0.95
    max_output_tokens: int = 8192
    include_thoughts: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    # Timeouts (seconds)
    generation_timeout: float = 90.0
    shutdown_timeout: int = 10
    keep_alive_timeout: int = 120

    # Server info
    server_name: str = "vertex-mcp-server"
    server_version: str = "1.0.0"

    # Host and port
    host: str = "0.0.0.0"
    port: int = 8080

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )


class VertexConfig(BaseModel):
    """Validated Vertex AI target, handed to the Gemini client."""

    model_config = ConfigDict(frozen=True)

    project_id: str
    location: str = DEFAULT_LOCATION
    model_name: str = DEFAULT_MODEL


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def resolve_vertex_config(settings: Settings) -> VertexConfig:
    """
    Validate settings and resolve the Vertex AI target.

    Args:
        settings: Loaded application settings.

    Returns:
        The Vertex AI project, location and model to use.

    Raises:
        ConfigError: If GOOGLE_CLOUD_PROJECT is not set.
    """
    project_id = settings.google_cloud_project.strip()
    if not project_id:
        raise ConfigError("GOOGLE_CLOUD_PROJECT is required")

    location = settings.google_cloud_location.strip() or DEFAULT_LOCATION
    model_name = settings.gemini_model.strip() or DEFAULT_MODEL

    if model_name in GLOBAL_ONLY_MODELS and location != DEFAULT_LOCATION:
        logger.warning(
            f"Model {model_name} requires '{DEFAULT_LOCATION}' location. "
            f"Overriding configured location '{location}' to '{DEFAULT_LOCATION}'."
        )
        location = DEFAULT_LOCATION

    if model_name not in KNOWN_MODELS:
        logger.warning(
            f"Model '{model_name}' is not in the known tested list. "
            "Ensure it exists in your region."
        )

    if not settings.google_application_credentials:
        logger.warning(
            "GOOGLE_APPLICATION_CREDENTIALS not set. Using application default credentials."
        )

    return VertexConfig(project_id=project_id, location=location, model_name=model_name)
