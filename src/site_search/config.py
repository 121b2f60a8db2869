"""Environment-variable-based configuration."""

import os
from pathlib import Path


def get_db_path() -> Path:
    """Return the database file path from SEARCH_DB_PATH."""
    raw = os.environ.get("SEARCH_DB_PATH", "~/.local/share/site_search/content.db")
    return Path(raw).expanduser()


def get_log_level() -> str:
    """Return the logging level from SEARCH_LOG_LEVEL."""
    return os.environ.get("SEARCH_LOG_LEVEL", "WARNING")


def get_default_limit() -> int:
    """Return the default result limit from SEARCH_DEFAULT_LIMIT."""
    return int(os.environ.get("SEARCH_DEFAULT_LIMIT", "20"))


def get_default_threshold() -> float:
    """Return the default relevance threshold from SEARCH_DEFAULT_THRESHOLD."""
    return float(os.environ.get("SEARCH_DEFAULT_THRESHOLD", "0.3"))


def get_recall_multiplier() -> int:
    """Return how many candidates to recall per requested result (SEARCH_RECALL_MULTIPLIER)."""
    return int(os.environ.get("SEARCH_RECALL_MULTIPLIER", "3"))


def get_cache_ttl() -> float:
    """Return the result cache TTL in seconds from SEARCH_CACHE_TTL. 0 disables caching."""
    return float(os.environ.get("SEARCH_CACHE_TTL", "0"))


def get_cache_max_entries() -> int:
    """Return the result cache capacity from SEARCH_CACHE_MAX_ENTRIES."""
    return int(os.environ.get("SEARCH_CACHE_MAX_ENTRIES", "256"))


def is_partial_results() -> bool:
    """Return True if SEARCH_PARTIAL_RESULTS is set to TRUE."""
    return os.environ.get("SEARCH_PARTIAL_RESULTS", "").upper() == "TRUE"
