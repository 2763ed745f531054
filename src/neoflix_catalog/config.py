"""
Configuration constants for the neoflix catalog query layer.

This module centralizes connection settings, paging limits and the sort
allow-lists. Values can be overridden via environment variables.
"""
import os
import logging

logger = logging.getLogger(__name__)


def _get_float_env(key: str, default: float, min_val: float = 0) -> float:
    """
    Safely parse float from environment variable with validation.

    Args:
        key: Environment variable name
        default: Default value if not set or invalid
        min_val: Minimum allowed value

    Returns:
        Validated float value
    """
    try:
        val = float(os.environ.get(key, default))
        if val < min_val:
            logger.warning(f"{key}={val} is below minimum {min_val}, using {min_val}")
            return min_val
        return val
    except ValueError:
        logger.warning(f"Invalid {key}='{os.environ.get(key)}', using default {default}")
        return default


def _get_int_env(key: str, default: int, min_val: int = 1) -> int:
    """
    Safely parse integer from environment variable with validation.

    Args:
        key: Environment variable name
        default: Default value if not set or invalid
        min_val: Minimum allowed value

    Returns:
        Validated integer value
    """
    try:
        val = int(os.environ.get(key, default))
        if val < min_val:
            logger.warning(f"{key}={val} is below minimum {min_val}, using {min_val}")
            return min_val
        return val
    except ValueError:
        logger.warning(f"Invalid {key}='{os.environ.get(key)}', using default {default}")
        return default


# Database Configuration
NEO4J_URI = os.environ.get("NEO4J_URI", "neo4j://localhost:7687")
NEO4J_USERNAME = os.environ.get("NEO4J_USERNAME", "neo4j")
NEO4J_PASSWORD = os.environ.get("NEO4J_PASSWORD", "neo")
NEO4J_DATABASE = os.environ.get("NEO4J_DATABASE") or None  # None = server default

MAX_CONNECTION_POOL_SIZE = _get_int_env("NEOFLIX_MAX_CONNECTION_POOL_SIZE", 50, min_val=1)
QUERY_TIMEOUT = _get_float_env("NEOFLIX_QUERY_TIMEOUT", 30.0, min_val=0.1)  # seconds per transaction

# Paging
DEFAULT_LIMIT = _get_int_env("NEOFLIX_DEFAULT_LIMIT", 6, min_val=1)
MAX_LIMIT = _get_int_env("NEOFLIX_MAX_LIMIT", 100, min_val=1)
if DEFAULT_LIMIT > MAX_LIMIT:
    logger.warning(f"NEOFLIX_DEFAULT_LIMIT={DEFAULT_LIMIT} exceeds NEOFLIX_MAX_LIMIT={MAX_LIMIT}, capping")
    DEFAULT_LIMIT = MAX_LIMIT

# Sortable properties per entity kind. Only these names are ever placed
# into query text.
MOVIE_SORT_FIELDS = ("title", "released", "imdbRating")
PERSON_SORT_FIELDS = ("name", "born", "tmdbId")
RATING_SORT_FIELDS = ("rating", "timestamp")

DEFAULT_MOVIE_SORT = "title"
DEFAULT_PERSON_SORT = "name"
DEFAULT_RATING_SORT = "timestamp"

# Genres that exist in the dataset only as placeholders
EXCLUDED_GENRE = "(no genres listed)"
