import logging
import os
from typing import Optional

from dotenv import load_dotenv

"""
Configuration settings for the PokeAPI data-access layer.

This module loads environment variables, defines constants for the client's
operation, and validates the configuration to ensure stability. It handles
the upstream API endpoint, cache lifetime, batch fetching and logging.
"""

load_dotenv()

logger = logging.getLogger("pokedex.config")


def _read_float(name: str, default: Optional[float]) -> Optional[float]:
    """
    Read a numeric environment variable.

    Args:
        name: Environment variable name.
        default: Value used when the variable is unset or blank.

    Returns:
        Parsed float or the default.

    Raises:
        ValueError: If the variable is set but not numeric.
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"❌ {name} must be a number (got {raw!r})")


def _read_int(name: str, default: int) -> int:
    """
    Read an integer environment variable.

    Raises:
        ValueError: If the variable is set but not a whole number.
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"❌ {name} must be an integer (got {raw!r})")


# API Configuration
POKEAPI_URL = os.getenv("POKEAPI_URL", "https://pokeapi.co/api/v2").rstrip("/")
USER_AGENT = os.getenv("USER_AGENT", "Pokedex-Data-Client/1.0")

# Cache Configuration
CACHE_DURATION = _read_float("CACHE_DURATION", 5 * 60)  # Seconds

# Batch Fetching
DEFAULT_BATCH_SIZE = _read_int("DEFAULT_BATCH_SIZE", 5)

# Pokemon List Pagination
DEFAULT_LIST_LIMIT = 151
DEFAULT_LIST_OFFSET = 0
LIST_LIMIT_MIN = 1
LIST_LIMIT_MAX = 1000

# HTTP Transport
# No timeout unless one is configured; a hung request only blocks its own call.
API_REQUEST_TIMEOUT = _read_float("API_REQUEST_TIMEOUT", None)
CONNECTION_POOL_LIMIT = 100  # Total connections across all hosts
CONNECTION_POOL_LIMIT_PER_HOST = 30  # Max connections per host
CONNECTION_KEEPALIVE_TIMEOUT = 30  # Seconds to keep idle connections

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def validate_settings():
    """
    Validate all configuration settings to catch errors at startup.

    Raises:
        ValueError: If any configuration value is invalid (e.g., a negative
            cache duration or an empty batch window).
    """
    if not POKEAPI_URL.startswith(("http://", "https://")):
        raise ValueError("POKEAPI_URL must be an http(s) URL")

    # Validate cache settings
    if CACHE_DURATION <= 0:
        raise ValueError("CACHE_DURATION must be positive")

    # Validate batch settings
    if DEFAULT_BATCH_SIZE < 1:
        raise ValueError("DEFAULT_BATCH_SIZE must be at least 1")

    # Validate list settings
    if not LIST_LIMIT_MIN <= DEFAULT_LIST_LIMIT <= LIST_LIMIT_MAX:
        raise ValueError(
            f"DEFAULT_LIST_LIMIT must be between {LIST_LIMIT_MIN} and {LIST_LIMIT_MAX}"
        )

    # Validate transport settings
    if API_REQUEST_TIMEOUT is not None and API_REQUEST_TIMEOUT <= 0:
        raise ValueError("API_REQUEST_TIMEOUT must be positive when set")

    logger.info("✅ Configuration validation completed successfully")
