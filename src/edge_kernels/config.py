"""
Edge Kernels Configuration
==========================

This module handles configuration loading for the edge kernels service.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    EDGE_CONFIG_PATH     -> location of the config file
    RATE_LIMIT           -> rate_limit.limit
    RATE_WINDOW_SECONDS  -> rate_limit.window_seconds
    EDGE_LOG_LEVEL       -> logging.level
    EDGE_LOG_FORMAT      -> logging.format
    EDGE_PORT            -> server.port
    PORT                 -> server.port (takes precedence over EDGE_PORT)

Example:
    from edge_kernels.config import settings

    print(settings.service.name)
    print(settings.rate_limit.limit)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class ServiceConfig(BaseModel):
    """Service identification configuration."""

    name: str = Field(default="edge-kernels", description="Service name")
    version: str = Field(default="v0.1.0", description="Service version")


class RateLimitConfig(BaseModel):
    """
    Fixed-window rate limit defaults.

    Passed to WindowCounter at construction; every call site that does not
    override the values uses these.
    """

    limit: int = Field(
        default=10,
        ge=1,
        description="Requests admitted per client per window",
    )
    window_seconds: int = Field(
        default=60,
        ge=1,
        description="Window length in seconds (also the store TTL)",
    )
    api_key_header: str = Field(
        default="X-API-Key",
        description="Header identifying a client by API key",
    )


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8787, ge=1, le=65535, description="Bind port")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the edge kernels service.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, uses EDGE_CONFIG_PATH
            or searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        config_path = os.environ.get("EDGE_CONFIG_PATH")

    # Find config file
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    # Load from YAML if exists
    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    # Apply environment variable overrides
    _apply_env_overrides(config_data)

    # Build settings object
    settings = Settings.model_validate(config_data)

    return settings


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Rate limit settings (unprefixed, as in the Workers deployment)
    if env_limit := os.environ.get("RATE_LIMIT"):
        config_data.setdefault("rate_limit", {})["limit"] = int(env_limit)
    if env_window := os.environ.get("RATE_WINDOW_SECONDS"):
        config_data.setdefault("rate_limit", {})["window_seconds"] = int(env_window)

    # Server settings
    if env_port := os.environ.get("PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)
    elif env_port := os.environ.get("EDGE_PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)

    # Logging settings
    if env_log := os.environ.get("EDGE_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_fmt := os.environ.get("EDGE_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_fmt


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
