"""Service to load candidate books and TV shows from the metadata providers"""
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence
import logging
import math
import requests

from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from mediashelf_recommendation_service.config import (
    get_google_books_api_key,
    get_google_books_base_url,
    get_tmdb_api_key,
    get_tmdb_base_url,
)
from mediashelf_recommendation_service.matching.genre_mapper import mapped_search_genres
from mediashelf_recommendation_service.models import ConsumableItem, HistoryEntry, MediaType

logger = logging.getLogger(__name__)

MAX_SEARCH_GENRES = 3

# Genre labels whose Google Books subject term differs from the lower-cased label
SUBJECT_TERMS = {
    "Non-Fiction": "nonfiction",
    "Science Fiction": "science fiction",
    "Self-Help": "self-help",
}


class CatalogConfigurationError(RuntimeError):
    """A provider cannot be queried because its configuration is missing."""


def book_from_volume(volume: Mapping[str, Any]) -> ConsumableItem:
    """
    Convert a Google Books volume into a candidate book.

    Categories become genres and subjects become tags; absent lists are empty.
    """
    info = volume.get("volumeInfo") or {}
    return ConsumableItem(
        id=f"book-{volume['id']}",
        title=info.get("title") or "",
        media_type=MediaType.BOOK,
        genres=info.get("categories") or [],
        tags=info.get("subjects") or [],
    )


def show_from_tmdb(show: Mapping[str, Any]) -> ConsumableItem:
    """
    Convert TMDB TV show details into a candidate show.

    Genre names become genres and keyword names (from
    ``append_to_response=keywords``) become tags.
    """
    keywords = (show.get("keywords") or {}).get("results") or []
    return ConsumableItem(
        id=f"tv-{show['id']}",
        title=show.get("name") or "",
        media_type=MediaType.SHOW,
        genres=[g["name"] for g in show.get("genres") or [] if g.get("name")],
        tags=[k["name"] for k in keywords if k.get("name")],
    )


def build_candidate_pool(
        *sources: Iterable[ConsumableItem],
        exclude_ids: Iterable[str] = ()
) -> List[ConsumableItem]:
    """
    Merge candidate sources into one pool.

    Duplicates (by id) keep their first occurrence and items the user
    already has are dropped. Source order is preserved, which the ranking
    relies on for tie-breaking.

    Args:
        sources: Candidate lists, in priority order
        exclude_ids: Ids to leave out

    Returns:
        Deduplicated candidate list
    """
    seen = set(exclude_ids)
    pool = []
    for source in sources:
        for item in source:
            if item.id in seen:
                continue
            seen.add(item.id)
            pool.append(item)
    return pool


class CatalogLoader:
    """Load candidate items from Google Books and TMDB."""

    def __init__(
            self,
            google_books_base_url: Optional[str] = None,
            tmdb_base_url: Optional[str] = None,
            google_books_api_key: Optional[str] = None,
            tmdb_api_key: Optional[str] = None
    ):
        self.google_books_base_url = google_books_base_url or get_google_books_base_url()
        self.tmdb_base_url = tmdb_base_url or get_tmdb_base_url()
        self.google_books_api_key = google_books_api_key or get_google_books_api_key()
        self.tmdb_api_key = tmdb_api_key or get_tmdb_api_key()

        # Configure session with retries
        self.session = requests.Session()
        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504]
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    # ===== BOOKS =====

    def get_books_by_genre(self, genres: List[str], limit: int = 20) -> List[ConsumableItem]:
        """
        Search books for up to three genres.

        A failing genre search is logged and skipped.

        Args:
            genres: Book genres to search (only the first three are used)
            limit: Approximate total number of books to fetch

        Returns:
            Candidate books in search order
        """
        search_genres = genres[:MAX_SEARCH_GENRES]
        if not search_genres:
            return []

        per_genre = math.ceil(limit / len(search_genres))
        books: List[ConsumableItem] = []

        for genre in search_genres:
            subject = SUBJECT_TERMS.get(genre, genre.lower())
            params: Dict[str, Any] = {"q": f"subject:{subject}", "maxResults": per_genre}
            if self.google_books_api_key:
                params["key"] = self.google_books_api_key

            try:
                response = self.session.get(
                    f"{self.google_books_base_url}/volumes", params=params, timeout=10
                )
                response.raise_for_status()
            except requests.RequestException as e:
                logger.warning(f"Book search failed for genre {genre}: {e}")
                continue

            volumes = response.json().get("items") or []
            books.extend(book_from_volume(v) for v in volumes if v.get("id"))

        logger.info(f"Loaded {len(books)} books for genres {search_genres}")
        return books

    # ===== SHOWS =====

    def _require_tmdb_key(self) -> str:
        if not self.tmdb_api_key:
            raise CatalogConfigurationError(
                "TMDB API key is not configured. Set TMDB_API_KEY."
            )
        return self.tmdb_api_key

    def get_show_details(self, show_id: int) -> ConsumableItem:
        """Fetch a single show with its keywords."""
        api_key = self._require_tmdb_key()
        url = f"{self.tmdb_base_url}/tv/{show_id}"
        params = {"api_key": api_key, "append_to_response": "keywords"}
        response = self.session.get(url, params=params, timeout=10)
        response.raise_for_status()
        return show_from_tmdb(response.json())

    def get_popular_shows(self, limit: int = 30) -> List[ConsumableItem]:
        """
        Fetch popular shows as recommendation candidates.

        Shows whose details cannot be fetched are skipped.

        Args:
            limit: Maximum number of shows

        Returns:
            Candidate shows in popularity order
        """
        api_key = self._require_tmdb_key()
        response = self.session.get(
            f"{self.tmdb_base_url}/tv/popular", params={"api_key": api_key}, timeout=10
        )
        response.raise_for_status()

        shows = []
        for result in (response.json().get("results") or [])[:limit]:
            try:
                shows.append(self.get_show_details(result["id"]))
            except requests.RequestException as e:
                logger.warning(f"Failed to load details for show {result['id']}: {e}")

        logger.info(f"Loaded {len(shows)} popular shows")
        return shows

    # ===== CANDIDATE POOL =====

    def load_candidates(
            self,
            history: Sequence[HistoryEntry],
            source: MediaType,
            target: MediaType,
            limit: int = 20,
            exclude_ids: Iterable[str] = ()
    ) -> List[ConsumableItem]:
        """
        Fetch a candidate pool for a user's history.

        Books are searched by genre: the history's own genres for a book
        history, or its genres mapped through the TV-to-book table for a show
        history. Shows come from the popular list.

        Args:
            history: User's list entries
            source: Media type of the history
            target: Media type to recommend
            limit: Approximate number of candidates to fetch
            exclude_ids: Further ids the user already owns in the target domain

        Returns:
            Deduplicated candidate pool without history items
        """
        genres = [genre for entry in history for genre in entry.item.genres]

        if target == MediaType.BOOK:
            if source == MediaType.SHOW:
                search_genres = mapped_search_genres(genres, source, MAX_SEARCH_GENRES)
            else:
                search_genres = list(dict.fromkeys(genres))[:MAX_SEARCH_GENRES]
            fetched = self.get_books_by_genre(search_genres, limit)
        else:
            fetched = self.get_popular_shows(limit)

        owned = [entry.item.id for entry in history] + list(exclude_ids)
        pool = build_candidate_pool(fetched, exclude_ids=owned)

        logger.info(
            f"Candidate pool for {target.value} recommendations from {source.value} history: "
            f"{len(pool)} of {len(fetched)} fetched"
        )
        return pool
