"""Unit tests for CatalogLoader service."""

import pytest
from requests.exceptions import HTTPError

from mediashelf_recommendation_service.models import ConsumableItem, MediaType
from mediashelf_recommendation_service.services.catalog_loader_service import (
    CatalogConfigurationError,
    CatalogLoader,
    book_from_volume,
    build_candidate_pool,
    show_from_tmdb,
)

BOOKS_URL = "http://books-api"
TMDB_URL = "http://tmdb-api"


@pytest.fixture
def loader(clean_config) -> CatalogLoader:
    """Loader pointed at fake provider URLs."""
    return CatalogLoader(
        google_books_base_url=BOOKS_URL,
        tmdb_base_url=TMDB_URL,
        tmdb_api_key="tmdb-key"
    )


def _volume(volume_id: str, title: str, categories=None, subjects=None) -> dict:
    info = {"title": title}
    if categories is not None:
        info["categories"] = categories
    if subjects is not None:
        info["subjects"] = subjects
    return {"id": volume_id, "volumeInfo": info}


class TestBookFromVolume:
    """Tests for book_from_volume function."""

    def test_book_from_volume_maps_fields(self):
        """Test categories/subjects mapping and id prefix."""
        # Act
        book = book_from_volume(_volume("abc", "Dune", ["Fiction"], ["Desert"]))

        # Assert
        assert book == ConsumableItem(
            id="book-abc", title="Dune", media_type=MediaType.BOOK,
            genres=["Fiction"], tags=["Desert"]
        )

    def test_book_from_volume_missing_lists(self):
        """Test that absent categories/subjects become empty."""
        # Act
        book = book_from_volume({"id": "abc"})

        # Assert
        assert book.title == ""
        assert book.genres == ()
        assert book.tags == ()


class TestShowFromTmdb:
    """Tests for show_from_tmdb function."""

    def test_show_from_tmdb_maps_fields(self):
        """Test genre and keyword names."""
        # Act
        show = show_from_tmdb({
            "id": 1396,
            "name": "Breaking Bad",
            "genres": [{"id": 18, "name": "Drama"}, {"id": 80, "name": "Crime"}],
            "keywords": {"results": [{"id": 1, "name": "drug dealer"}]},
        })

        # Assert
        assert show.id == "tv-1396"
        assert show.media_type == MediaType.SHOW
        assert show.genres == ("Drama", "Crime")
        assert show.tags == ("drug dealer",)

    def test_show_from_tmdb_without_keywords(self):
        """Test that missing keywords give no tags."""
        # Act
        show = show_from_tmdb({"id": 1, "name": "Lost", "genres": []})

        # Assert
        assert show.tags == ()
        assert show.genres == ()


class TestBuildCandidatePool:
    """Tests for build_candidate_pool function."""

    def test_build_candidate_pool_dedupes_and_excludes(self, make_book):
        """Test first-occurrence dedupe and exclusion of owned ids."""
        # Arrange
        genre_books = [make_book("1"), make_book("2"), make_book("3")]
        popular_books = [make_book("3"), make_book("4"), make_book("2", "Other Copy")]

        # Act
        pool = build_candidate_pool(genre_books, popular_books, exclude_ids={"1"})

        # Assert
        assert [b.id for b in pool] == ["2", "3", "4"]
        assert pool[0].title == "Book 2"

    def test_build_candidate_pool_no_sources(self):
        """Test that no sources give an empty pool."""
        # Act & Assert
        assert build_candidate_pool() == []


class TestCatalogLoaderInit:
    """Tests for CatalogLoader initialization."""

    def test_init_reads_config(self, clean_config, monkeypatch):
        """Test defaults from config."""
        # Arrange
        monkeypatch.setenv("TMDB_API_KEY", "env-key")

        # Act
        loader = CatalogLoader()

        # Assert
        assert loader.tmdb_base_url == "https://api.themoviedb.org/3"
        assert loader.google_books_base_url == "https://www.googleapis.com/books/v1"
        assert loader.tmdb_api_key == "env-key"
        assert loader.google_books_api_key is None

    def test_init_configures_retry_strategy(self, loader):
        """Test that adapters are mounted on the session."""
        # Act
        adapter = loader.session.get_adapter("https://test.com")

        # Assert
        assert adapter.max_retries.total == 3


class TestGetBooksByGenre:
    """Tests for get_books_by_genre method."""

    def test_get_books_by_genre_queries_each_genre(self, loader, requests_mock):
        """Test one subject search per genre."""
        # Arrange
        requests_mock.get(f"{BOOKS_URL}/volumes", json={"items": [_volume("a", "Dune", ["Fiction"])]})

        # Act
        books = loader.get_books_by_genre(["Science Fiction", "Fantasy"], limit=20)

        # Assert
        assert len(books) == 2
        assert requests_mock.call_count == 2
        first_query = requests_mock.request_history[0].qs
        assert first_query["q"] == ["subject:science fiction"]
        assert first_query["maxresults"] == ["10"]
        assert requests_mock.request_history[1].qs["q"] == ["subject:fantasy"]

    def test_get_books_by_genre_uses_at_most_three_genres(self, loader, requests_mock):
        """Test that only the first three genres are searched."""
        # Arrange
        requests_mock.get(f"{BOOKS_URL}/volumes", json={"items": []})

        # Act
        loader.get_books_by_genre(["Fiction", "Drama", "Humor", "Horror"])

        # Assert
        assert requests_mock.call_count == 3

    def test_get_books_by_genre_subject_terms(self, loader, requests_mock):
        """Test provider-specific subject terms."""
        # Arrange
        requests_mock.get(f"{BOOKS_URL}/volumes", json={})

        # Act
        loader.get_books_by_genre(["Non-Fiction"])

        # Assert
        assert requests_mock.request_history[0].qs["q"] == ["subject:nonfiction"]

    def test_get_books_by_genre_skips_failed_genre(self, loader, requests_mock, caplog):
        """Test that a failing genre search is logged and skipped."""
        # Arrange
        requests_mock.get(f"{BOOKS_URL}/volumes", json={"items": [_volume("a", "Dune")]})
        requests_mock.get(f"{BOOKS_URL}/volumes?q=subject:horror", status_code=500)

        # Act
        books = loader.get_books_by_genre(["Horror", "Fantasy"])

        # Assert
        assert [b.id for b in books] == ["book-a"]
        assert "Book search failed for genre Horror" in caplog.text

    def test_get_books_by_genre_sends_api_key(self, clean_config, requests_mock):
        """Test that the Google Books key is passed when configured."""
        # Arrange
        loader = CatalogLoader(google_books_base_url=BOOKS_URL, google_books_api_key="books-key")
        requests_mock.get(f"{BOOKS_URL}/volumes", json={})

        # Act
        loader.get_books_by_genre(["Fiction"])

        # Assert
        assert requests_mock.request_history[0].qs["key"] == ["books-key"]

    def test_get_books_by_genre_no_genres(self, loader, requests_mock):
        """Test that no genres means no requests."""
        # Act
        books = loader.get_books_by_genre([])

        # Assert
        assert books == []
        assert requests_mock.call_count == 0


class TestGetPopularShows:
    """Tests for get_popular_shows and get_show_details methods."""

    def test_get_show_details(self, loader, requests_mock):
        """Test fetching one show with keywords."""
        # Arrange
        requests_mock.get(
            f"{TMDB_URL}/tv/1396",
            json={"id": 1396, "name": "Breaking Bad", "genres": [{"name": "Drama"}]}
        )

        # Act
        show = loader.get_show_details(1396)

        # Assert
        assert show.id == "tv-1396"
        assert requests_mock.request_history[0].qs["append_to_response"] == ["keywords"]

    def test_get_popular_shows_skips_failed_details(self, loader, requests_mock):
        """Test that shows whose details fail are skipped."""
        # Arrange
        requests_mock.get(f"{TMDB_URL}/tv/popular", json={"results": [{"id": 1}, {"id": 2}, {"id": 3}]})
        requests_mock.get(f"{TMDB_URL}/tv/1", json={"id": 1, "name": "Lost"})
        requests_mock.get(f"{TMDB_URL}/tv/2", status_code=404)
        requests_mock.get(f"{TMDB_URL}/tv/3", json={"id": 3, "name": "Dark"})

        # Act
        shows = loader.get_popular_shows(limit=3)

        # Assert
        assert [s.id for s in shows] == ["tv-1", "tv-3"]

    def test_get_popular_shows_respects_limit(self, loader, requests_mock):
        """Test the limit on detail lookups."""
        # Arrange
        requests_mock.get(f"{TMDB_URL}/tv/popular", json={"results": [{"id": 1}, {"id": 2}]})
        requests_mock.get(f"{TMDB_URL}/tv/1", json={"id": 1, "name": "Lost"})

        # Act
        shows = loader.get_popular_shows(limit=1)

        # Assert
        assert [s.id for s in shows] == ["tv-1"]

    def test_get_popular_shows_raises_on_list_error(self, loader, requests_mock):
        """Test that a failing popular list propagates."""
        # Arrange
        requests_mock.get(f"{TMDB_URL}/tv/popular", status_code=500)

        # Act & Assert
        with pytest.raises(HTTPError):
            loader.get_popular_shows()

    def test_get_popular_shows_requires_api_key(self, clean_config):
        """Test the configuration error without a TMDB key."""
        # Arrange
        loader = CatalogLoader(tmdb_base_url=TMDB_URL)

        # Act & Assert
        with pytest.raises(CatalogConfigurationError, match="TMDB_API_KEY"):
            loader.get_popular_shows()


class TestLoadCandidates:
    """Tests for load_candidates method."""

    def test_load_candidates_books_from_show_history(self, loader, breaking_bad, history_of, requests_mock):
        """Test mapped genre searches, dedupe and exclusion of owned books."""
        # Arrange
        requests_mock.get(f"{BOOKS_URL}/volumes?q=subject:mystery",
                          json={"items": [_volume("gg", "Gone Girl", ["Mystery"])]})
        requests_mock.get(f"{BOOKS_URL}/volumes?q=subject:thriller",
                          json={"items": [_volume("gg", "Gone Girl", ["Mystery"]), _volume("own", "Owned")]})
        requests_mock.get(f"{BOOKS_URL}/volumes?q=subject:crime",
                          json={"items": [_volume("ic", "In Cold Blood", ["Crime"])]})

        # Act
        pool = loader.load_candidates(
            history_of(breaking_bad), source=MediaType.SHOW, target=MediaType.BOOK,
            exclude_ids=["book-own"]
        )

        # Assert
        assert [b.id for b in pool] == ["book-gg", "book-ic"]
        assert [r.qs["q"] for r in requests_mock.request_history] == [
            ["subject:mystery"], ["subject:thriller"], ["subject:crime"]
        ]

    def test_load_candidates_books_from_book_history(self, loader, dune, history_of, requests_mock):
        """Test that a book history searches its own genres and drops its items."""
        # Arrange
        requests_mock.get(f"{BOOKS_URL}/volumes",
                          json={"items": [_volume("dune", "Dune"), _volume("hyp", "Hyperion")]})

        # Act
        pool = loader.load_candidates(history_of(dune), source=MediaType.BOOK, target=MediaType.BOOK)

        # Assert
        assert [b.id for b in pool] == ["book-hyp"]
        assert [r.qs["q"] for r in requests_mock.request_history] == [
            ["subject:science fiction"], ["subject:adventure"]
        ]

    def test_load_candidates_shows(self, loader, dune, history_of, requests_mock):
        """Test that show candidates come from the popular list."""
        # Arrange
        requests_mock.get(f"{TMDB_URL}/tv/popular", json={"results": [{"id": 1}, {"id": 2}]})
        requests_mock.get(f"{TMDB_URL}/tv/1", json={"id": 1, "name": "Dune: Prophecy"})
        requests_mock.get(f"{TMDB_URL}/tv/2", json={"id": 2, "name": "Foundation"})

        # Act
        pool = loader.load_candidates(
            history_of(dune), source=MediaType.BOOK, target=MediaType.SHOW, limit=2
        )

        # Assert
        assert [s.id for s in pool] == ["tv-1", "tv-2"]

    def test_load_candidates_feeds_engine(self, loader, engine, breaking_bad, history_of, requests_mock):
        """Test ranking a fetched pool."""
        # Arrange
        requests_mock.get(f"{BOOKS_URL}/volumes", json={"items": [
            _volume("cb", "Cookbook", ["Cooking"]),
            _volume("gg", "Gone Girl", ["Mystery"]),
        ]})
        history = history_of(breaking_bad)

        # Act
        pool = loader.load_candidates(history, source=MediaType.SHOW, target=MediaType.BOOK)
        result = engine.recommend_books_from_shows(history, pool)

        # Assert
        assert [r.item.id for r in result] == ["book-gg"]
        assert result[0].reasons == ["From your TV shows: Similar genres: Mystery"]
