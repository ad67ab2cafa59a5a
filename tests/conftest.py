"""Shared test fixtures and configuration for pytest."""
import json
from typing import Callable, List

import pytest

from mediashelf_recommendation_service.matching.overlap_scorer import ScoringWeights
from mediashelf_recommendation_service.models import ConsumableItem, HistoryEntry, MediaType
from mediashelf_recommendation_service.services.ranking_service import RecommendationEngine


# ===== Item Factories =====

@pytest.fixture
def make_book() -> Callable[..., ConsumableItem]:
    """Factory for book items."""
    def _make(item_id: str, title: str = "", genres=(), tags=()) -> ConsumableItem:
        return ConsumableItem(
            id=item_id,
            title=title or f"Book {item_id}",
            media_type=MediaType.BOOK,
            genres=list(genres),
            tags=list(tags),
        )
    return _make


@pytest.fixture
def make_show() -> Callable[..., ConsumableItem]:
    """Factory for TV show items."""
    def _make(item_id: str, title: str = "", genres=(), tags=()) -> ConsumableItem:
        return ConsumableItem(
            id=item_id,
            title=title or f"Show {item_id}",
            media_type=MediaType.SHOW,
            genres=list(genres),
            tags=list(tags),
        )
    return _make


@pytest.fixture
def history_of() -> Callable[..., List[HistoryEntry]]:
    """Wrap items as history entries."""
    def _wrap(*items: ConsumableItem) -> List[HistoryEntry]:
        return [HistoryEntry(item=item, added_at=1700000000000 + i) for i, item in enumerate(items)]
    return _wrap


# ===== Sample Data Fixtures =====

@pytest.fixture
def dune(make_book) -> ConsumableItem:
    """Dune, as a history book."""
    return make_book("book-dune", "Dune", genres=["Science Fiction", "Adventure"])


@pytest.fixture
def breaking_bad(make_show) -> ConsumableItem:
    """Breaking Bad, as a history show."""
    return make_show("tv-1396", "Breaking Bad", genres=["Crime", "Drama"])


@pytest.fixture
def sample_book_candidates(make_book) -> List[ConsumableItem]:
    """Small pool of candidate books."""
    return [
        make_book("book-foundation", "Foundation", genres=["Science Fiction", "Politics"]),
        make_book("book-romance", "Romance Novel", genres=["Romance"]),
        make_book("book-hyperion", "Hyperion", genres=["Science Fiction", "Adventure"],
                  tags=["Space Opera"]),
    ]


@pytest.fixture
def sample_show_records() -> List[dict]:
    """Raw show records as sent over the wire."""
    return [
        {"show": {"id": "tv-1396", "title": "Breaking Bad", "genres": ["Crime", "Drama"], "tags": []},
         "addedAt": 1700000000000, "status": "watched", "rating": 5},
    ]


@pytest.fixture
def sample_book_records() -> List[dict]:
    """Raw candidate book records."""
    return [
        {"id": "book-1", "title": "Gone Girl", "genres": ["Mystery"], "tags": []},
        {"id": "book-2", "title": "Death of a Salesman", "genres": ["Drama"], "tags": []},
        {"id": "book-3", "title": "Cookbook", "genres": ["Cooking"]},
    ]


# ===== Engine Fixtures =====

@pytest.fixture
def default_weights() -> ScoringWeights:
    """Default scoring weights."""
    return ScoringWeights()


@pytest.fixture
def engine(default_weights) -> RecommendationEngine:
    """Engine with default weights, independent of config."""
    return RecommendationEngine(weights=default_weights)


# ===== Configuration Fixtures =====

@pytest.fixture
def clean_config(monkeypatch):
    """Remove configuration that would leak in from the environment."""
    for key in (
        "RECOMMENDATION_EXACT_GENRE_WEIGHT",
        "RECOMMENDATION_PARTIAL_GENRE_WEIGHT",
        "RECOMMENDATION_TAG_WEIGHT",
        "RECOMMENDATION_POPULARITY_BONUS",
        "TMDB_API_KEY",
        "GOOGLE_BOOKS_API_KEY",
        "TMDB_BASE_URL",
        "GOOGLE_BOOKS_BASE_URL",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def mock_local_settings(tmp_path):
    """Write a local.settings.json file and return its directory."""
    settings = {
        "Values": {
            "RECOMMENDATION_TAG_WEIGHT": "4",
            "TMDB_API_KEY": "settings-key"
        }
    }

    settings_file = tmp_path / "local.settings.json"
    with open(settings_file, 'w') as f:
        json.dump(settings, f)

    return tmp_path
