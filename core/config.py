"""
Configuration Management Module

This module handles loading, validating, and providing access to application configuration
from environment variables (.env file).

Uses Pydantic Settings for automatic validation and type conversion.

Key Features:
- Loads configuration from .env file
- PORT is required; the process refuses to start without it
- Validates cache timings, upstream URL and log level on startup
- Handles optional settings with sensible defaults

Usage:
    from core.config import settings

    # Access configuration values
    print(settings.port)
    print(settings.upstream_url)
"""

from typing import Optional
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigurationError


class Settings(BaseSettings):
    """
    Application Settings

    This class defines all configuration parameters for the application.
    Values are automatically loaded from environment variables or .env file.

    Attributes:
        port: Port number for the HTTP server (required)
        host: Host address for the HTTP server
        upstream_url: Endpoint returning the full time-series catalog
        upstream_timeout: Optional total timeout for the upstream call in seconds
        cache_ttl: Time-to-live applied to every cached series, in seconds
        cache_check_period: Interval between background expiry sweeps, in seconds
        log_level: Logging level
        log_dir: Directory for error.log / combined.log (empty = console only)
    """

    # ============================================
    # Server Configuration
    # ============================================

    port: int = Field(
        ...,
        description="HTTP server port (required)"
    )

    host: str = Field(
        default="0.0.0.0",
        description="HTTP server host address"
    )

    # ============================================
    # Upstream API Configuration
    # ============================================

    upstream_url: str = Field(
        default="http://localhost:4000/timeseries",
        description="Upstream endpoint returning every known series"
    )

    upstream_timeout: Optional[float] = Field(
        default=None,
        description="Total timeout for the upstream request (unset = transport default)"
    )

    # ============================================
    # Caching Configuration
    # ============================================

    cache_ttl: int = Field(
        default=600,
        description="Cache TTL in seconds (0 = never expires)"
    )

    cache_check_period: int = Field(
        default=120,
        description="Seconds between background sweeps of expired keys"
    )

    # ============================================
    # Logging Configuration
    # ============================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_dir: str = Field(
        default="",
        description="Directory for error.log and combined.log (empty = stdout only)"
    )

    # ============================================
    # Pydantic Settings Configuration
    # ============================================

    model_config = SettingsConfigDict(
        # Look for .env file in the project root
        env_file=".env",
        # Ignore extra fields in .env that aren't defined here
        extra="ignore",
        # Case-insensitive environment variable matching
        case_sensitive=False
    )


# ============================================
# Settings Loading
# ============================================

def load_settings(**overrides) -> Settings:
    """
    Build a Settings instance, translating a missing PORT into a readable error.

    Args:
        **overrides: Explicit values taking precedence over the environment

    Returns:
        Settings: Loaded configuration

    Raises:
        ConfigurationError: If PORT is missing or any value fails type conversion
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        missing = [
            str(err["loc"][0]).upper()
            for err in e.errors()
            if err.get("type") == "missing" and err.get("loc")
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variable: {', '.join(missing)}"
            ) from e
        raise ConfigurationError(f"Invalid configuration: {e}") from e


# ============================================
# Global Settings Instance
# ============================================

# Loaded once at import so a missing PORT stops the process before the server starts
settings = load_settings()


# ============================================
# Configuration Validation
# ============================================

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def validate_configuration(config: Optional[Settings] = None) -> None:
    """
    Validate critical configuration settings on application startup.

    Args:
        config: Settings to check (defaults to the global instance)

    Raises:
        ValueError: If required configuration is missing or invalid
    """
    # Import logger here to avoid circular import
    # (logging.py imports config.py, so we can't import at module level)
    from core.logging import logger

    config = config or settings

    # Validate port number
    if not (1 <= config.port <= 65535):
        raise ValueError(f"Invalid port number: {config.port}. Must be between 1 and 65535")

    # Validate upstream URL
    if not config.upstream_url.startswith(("http://", "https://")):
        raise ValueError(
            f"Invalid UPSTREAM_URL: '{config.upstream_url}'. Must start with http:// or https://"
        )

    if config.upstream_timeout is not None and config.upstream_timeout <= 0:
        raise ValueError(f"UPSTREAM_TIMEOUT must be positive, got {config.upstream_timeout}")

    # Validate cache timings
    if config.cache_ttl < 0:
        raise ValueError(f"CACHE_TTL cannot be negative: {config.cache_ttl}")
    if config.cache_check_period <= 0:
        raise ValueError(f"CACHE_CHECK_PERIOD must be positive: {config.cache_check_period}")

    # Validate log level
    if config.log_level.upper() not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid LOG_LEVEL: '{config.log_level}'. "
            f"Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    # Log successful validation
    logger.info("Configuration validated successfully")
    logger.info(f"Server: {config.host}:{config.port}")
    logger.info(f"Upstream API: {config.upstream_url}")
    logger.info(f"Cache: TTL {config.cache_ttl}s, sweep every {config.cache_check_period}s")
    logger.info(f"Log level: {config.log_level.upper()}")
