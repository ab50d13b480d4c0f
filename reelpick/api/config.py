"""
API configuration loaded from environment or defaults.
"""

import os
from pathlib import Path

from reelpick.core.suggest.engine import SuggestConfig


def get_database_path() -> str:
    """Get database file path from env or default."""
    return os.getenv("DATABASE_URL", "sqlite:///").replace("sqlite:///", "") or str(
        Path(__file__).resolve().parents[2] / "data" / "reelpick.db"
    )


def get_log_level() -> str:
    """Get log level from env or default."""
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_api_host() -> str:
    """Get API host for binding."""
    return os.getenv("API_HOST", "0.0.0.0")


def get_api_port() -> int:
    """Get API port."""
    return int(os.getenv("API_PORT", "8000"))


def get_omdb_api_key() -> str:
    """Get OMDb API key; empty disables enrichment."""
    return os.getenv("OMDB_API_KEY", "")


def get_omdb_base_url() -> str:
    """Get OMDb endpoint."""
    return os.getenv("OMDB_BASE_URL", "https://www.omdbapi.com/")


def get_omdb_timeout() -> float:
    """Get per-request OMDb timeout in seconds."""
    return float(os.getenv("OMDB_TIMEOUT", "5"))


def get_suggest_config() -> SuggestConfig:
    """Build engine thresholds from env, falling back to SuggestConfig defaults."""
    defaults = SuggestConfig()
    return SuggestConfig(
        min_votes=int(os.getenv("SUGGEST_MIN_VOTES", defaults.min_votes)),
        start_result_limit=int(os.getenv("SUGGEST_START_LIMIT", defaults.start_result_limit)),
        result_limit=int(os.getenv("SUGGEST_RESULT_LIMIT", defaults.result_limit)),
        fallback_limit=int(os.getenv("SUGGEST_FALLBACK_LIMIT", defaults.fallback_limit)),
        actors_per_movie=defaults.actors_per_movie,
        enrichment_workers=int(os.getenv("SUGGEST_ENRICHMENT_WORKERS", defaults.enrichment_workers)),
        candidate_pool_factor=int(os.getenv("SUGGEST_CANDIDATE_POOL_FACTOR", defaults.candidate_pool_factor)),
    )
