"""
Unified Logging Configuration

This module sets up a centralized logging system for the entire application.
All modules should import and use the logger from this module instead of
using print() statements.

Usage:
    from core.logging import logger, get_logger

    logger.info("Backend is running")

    log = get_logger(__name__)
    log.warning("Cache miss for key: AAPL-1min")

Outputs:
    - stdout, always
    - <LOG_DIR>/error.log (ERROR and above) and <LOG_DIR>/combined.log
      (everything) when LOG_DIR is configured

Configuration:
    Log level is controlled by the LOG_LEVEL setting in .env file (default INFO).
"""

import logging
import os
import sys
from typing import List, Optional

LOGGER_NAME = "tsbackend"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s %(message)s"


def setup_logging(
    log_level: str = "INFO",
    log_format: Optional[str] = None,
    log_dir: Optional[str] = None
) -> logging.Logger:
    """
    Configure and return the application logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Custom log format string (uses default if None)
        log_dir: Directory for error.log and combined.log; console only if empty

    Returns:
        logging.Logger: Configured logger instance

    Example:
        >>> logger = setup_logging(log_level="DEBUG")
        >>> logger.info("Application started")
        2024-01-01 12:00:00 [INFO] tsbackend Application started
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = logging.Formatter(log_format or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

        error_handler = logging.FileHandler(os.path.join(log_dir, "error.log"))
        error_handler.setLevel(logging.ERROR)
        handlers.append(error_handler)

        handlers.append(logging.FileHandler(os.path.join(log_dir, "combined.log")))

    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True  # Override any existing configuration
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    return logger


# ============================================
# Initialize Logger with Settings
# ============================================

from core.config import settings  # noqa: E402

logger = setup_logging(log_level=settings.log_level, log_dir=settings.log_dir)


# ============================================
# Convenience Functions
# ============================================

def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module or component.

    Args:
        name: Name for the logger (typically __name__)

    Returns:
        logging.Logger: Logger instance named "tsbackend.<name>"

    Example:
        # In services/timeseries_service.py:
        logger = get_logger(__name__)  # "tsbackend.services.timeseries_service"
    """
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


# ============================================
# Log Helper Functions
# ============================================

def log_api_request(url: str) -> None:
    """
    Log an upstream API request with consistent formatting.

    Example:
        >>> log_api_request("http://localhost:4000/timeseries")
        [DEBUG] API Request: GET http://localhost:4000/timeseries
    """
    logger.debug(f"API Request: GET {url}")


def log_api_response(url: str, status: int, response_time: Optional[float] = None) -> None:
    """
    Log an upstream API response with status and timing information.

    Example:
        >>> log_api_response("http://localhost:4000/timeseries", 200, 0.342)
        [DEBUG] API Response: GET http://localhost:4000/timeseries | Status: 200 | Time: 0.342s
    """
    time_str = f" | Time: {response_time:.3f}s" if response_time else ""
    logger.debug(f"API Response: GET {url} | Status: {status}{time_str}")


logger.debug("Logging system initialized")
