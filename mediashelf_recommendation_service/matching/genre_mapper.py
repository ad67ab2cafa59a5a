"""
Static genre tables bridging TV genres and book subjects.

The tables are deliberately many-to-many and lossy: several TV genres land in
the same book bucket (and vice versa) so cross-media recommendations find
candidates even when the two taxonomies barely overlap.
"""
from types import MappingProxyType
from typing import Iterable, List, Mapping, Tuple

from mediashelf_recommendation_service.matching.genre_normalizer import normalize_label
from mediashelf_recommendation_service.models import MediaType

DEFAULT_BOOK_GENRES: Tuple[str, ...] = ("Fiction",)
DEFAULT_TV_GENRES: Tuple[str, ...] = ("Drama",)

_TV_TO_BOOK = {
    "Drama": ("Fiction", "Drama"),
    "Comedy": ("Fiction", "Humor"),
    "Action": ("Fiction", "Thriller", "Adventure"),
    "Action & Adventure": ("Fiction", "Thriller", "Adventure"),
    "Adventure": ("Fiction", "Adventure"),
    "Crime": ("Mystery", "Thriller", "Crime"),
    "Mystery": ("Mystery", "Thriller"),
    "Thriller": ("Thriller", "Mystery"),
    "Sci-Fi & Fantasy": ("Science Fiction", "Fantasy"),
    "Sci-Fi": ("Science Fiction",),
    "Science Fiction": ("Science Fiction",),
    "Fantasy": ("Fantasy", "Fiction"),
    "Horror": ("Horror", "Thriller"),
    "Romance": ("Romance", "Fiction"),
    "Documentary": ("Non-Fiction", "History", "Biography"),
    "History": ("History", "Non-Fiction"),
    "War & Politics": ("History", "Non-Fiction", "Politics"),
    "Western": ("Westerns", "Fiction"),
    "Animation": ("Fiction", "Children"),
    "Family": ("Fiction", "Children"),
    "Kids": ("Fiction", "Children"),
}

_BOOK_TO_TV = {
    "Fiction": ("Drama",),
    "Drama": ("Drama",),
    "Humor": ("Comedy",),
    "Comedy": ("Comedy",),
    "Adventure": ("Action & Adventure", "Adventure"),
    "Thriller": ("Thriller", "Crime", "Mystery"),
    "Mystery": ("Mystery", "Crime"),
    "Crime": ("Crime", "Mystery"),
    "Detective and Mystery Stories": ("Mystery", "Crime"),
    "Science Fiction": ("Sci-Fi & Fantasy", "Science Fiction"),
    "Fantasy": ("Sci-Fi & Fantasy", "Fantasy"),
    "Horror": ("Horror", "Thriller"),
    "Romance": ("Romance", "Drama"),
    "Non-Fiction": ("Documentary",),
    "History": ("History", "Documentary", "War & Politics"),
    "Biography": ("Documentary", "History"),
    "Biography & Autobiography": ("Documentary", "History"),
    "Politics": ("War & Politics", "Documentary"),
    "Political Science": ("War & Politics", "Documentary"),
    "Westerns": ("Western",),
    "Children": ("Kids", "Family", "Animation"),
    "Juvenile Fiction": ("Kids", "Family", "Animation"),
}


def _keyed(table: Mapping[str, Tuple[str, ...]]) -> Mapping[str, Tuple[str, ...]]:
    return MappingProxyType({normalize_label(k): v for k, v in table.items()})


TV_TO_BOOK_GENRES = _keyed(_TV_TO_BOOK)
BOOK_TO_TV_GENRES = _keyed(_BOOK_TO_TV)


def map_genre(genre: str, source: MediaType = MediaType.SHOW) -> List[str]:
    """
    Translate a genre into the other domain's vocabulary.

    Args:
        genre: Genre label from the source domain
        source: Domain the label comes from (SHOW maps to book subjects,
                BOOK maps to TV genres)

    Returns:
        Ordered list of target-domain labels; the default bucket for
        unrecognized labels
    """
    if source == MediaType.SHOW:
        table, default = TV_TO_BOOK_GENRES, DEFAULT_BOOK_GENRES
    else:
        table, default = BOOK_TO_TV_GENRES, DEFAULT_TV_GENRES

    return list(table.get(normalize_label(genre), default))


def mapped_search_genres(
    genres: Iterable[str],
    source: MediaType = MediaType.SHOW,
    max_genres: int = 3
) -> List[str]:
    """
    Collect the distinct mapped labels for a set of source genres.

    Used to seed candidate fetches for cross-media recommendations.

    Args:
        genres: Source-domain genres (e.g. every genre across watched shows)
        source: Domain the genres come from
        max_genres: Maximum labels to return

    Returns:
        First ``max_genres`` unique mapped labels, in mapping order
    """
    unique: List[str] = []
    for genre in genres:
        for mapped in map_genre(genre, source):
            if mapped not in unique:
                unique.append(mapped)

    return unique[:max_genres]
