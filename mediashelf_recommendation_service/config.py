"""Application configuration"""

import json
import os
from pathlib import Path

from mediashelf_recommendation_service.matching.overlap_scorer import ScoringWeights


def _get_config_value(key: str, default: str | None = None) -> str | None:
    """
    Get configuration value from environment or local.settings.json.

    Priority:
    1. Environment variable
    2. local.settings.json (Values.key)
    3. Default value

    Args:
        key: Configuration key name
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    # Try environment variable first
    value = os.getenv(key)
    if value:
        return value

    # Try local.settings.json
    project_root = Path(__file__).resolve().parent.parent
    local_settings_path = project_root / "local.settings.json"

    if local_settings_path.exists():
        try:
            with open(local_settings_path) as f:
                settings = json.load(f)
                value = settings.get("Values", {}).get(key)
                if value:
                    return value
        except (json.JSONDecodeError, KeyError):
            pass

    return default


def _get_float_value(key: str, default: float) -> float:
    """Read a numeric setting, failing with the key name when it does not parse."""
    raw = _get_config_value(key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None


def get_scoring_weights() -> ScoringWeights:
    """
    Build the scoring weights record from config.

    Returns:
        ScoringWeights with any configured overrides applied
    """
    defaults = ScoringWeights()
    return ScoringWeights(
        exact_genre_match=_get_float_value(
            "RECOMMENDATION_EXACT_GENRE_WEIGHT", defaults.exact_genre_match
        ),
        partial_genre_match=_get_float_value(
            "RECOMMENDATION_PARTIAL_GENRE_WEIGHT", defaults.partial_genre_match
        ),
        tag_match=_get_float_value("RECOMMENDATION_TAG_WEIGHT", defaults.tag_match),
        popularity_bonus=_get_float_value(
            "RECOMMENDATION_POPULARITY_BONUS", defaults.popularity_bonus
        ),
    )


def get_tmdb_api_key() -> str | None:
    """Get the TMDB API key, if configured."""
    return _get_config_value("TMDB_API_KEY")


def get_google_books_api_key() -> str | None:
    """Get the Google Books API key, if configured (the API works without one)."""
    return _get_config_value("GOOGLE_BOOKS_API_KEY")


def get_tmdb_base_url() -> str | None:
    """
    Get the TMDB API base URL.

    Returns:
        Base URL (default: https://api.themoviedb.org/3)
    """
    return _get_config_value("TMDB_BASE_URL", default="https://api.themoviedb.org/3")


def get_google_books_base_url() -> str | None:
    """
    Get the Google Books API base URL.

    Returns:
        Base URL (default: https://www.googleapis.com/books/v1)
    """
    return _get_config_value(
        "GOOGLE_BOOKS_BASE_URL", default="https://www.googleapis.com/books/v1"
    )
