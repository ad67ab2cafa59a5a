"""Weighted genre/tag overlap between a history item and a candidate."""
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from mediashelf_recommendation_service.matching.genre_mapper import map_genre
from mediashelf_recommendation_service.matching.genre_normalizer import (
    normalize_label,
    normalize_labels,
    normalized_set,
)
from mediashelf_recommendation_service.matching.reason_generator import is_related_title
from mediashelf_recommendation_service.models import ConsumableItem, MediaType

GENRE_WEIGHT = 10
PARTIAL_GENRE_MATCH = 5
TAG_WEIGHT = 3
POPULARITY_BONUS = 2

# Words this short never count as a partial genre match ("&", "and", "of")
MIN_PARTIAL_WORD_LENGTH = 4


@dataclass(frozen=True)
class ScoringWeights:
    """Weights applied to each kind of match."""
    exact_genre_match: float = GENRE_WEIGHT
    partial_genre_match: float = PARTIAL_GENRE_MATCH
    tag_match: float = TAG_WEIGHT
    popularity_bonus: float = POPULARITY_BONUS

    @property
    def adaptation_bonus(self) -> float:
        """Bonus for a title match across media."""
        return self.popularity_bonus * 2


DEFAULT_WEIGHTS = ScoringWeights()


def count_overlap(reference: Iterable[str], candidate: Iterable[str]) -> int:
    """
    Count candidate labels that also appear in the reference.

    The full candidate list is scanned, so a label repeated in the candidate
    counts once per repetition.

    Args:
        reference: Labels of the history item
        candidate: Labels of the candidate item

    Returns:
        Number of matching candidate labels
    """
    reference_set = normalized_set(reference)
    return sum(1 for label in normalize_labels(candidate) if label in reference_set)


def score(
    reference_genres: Iterable[str],
    reference_tags: Iterable[str],
    candidate_genres: Iterable[str],
    candidate_tags: Iterable[str]
) -> Tuple[int, int]:
    """
    Exact-match overlap counts for one (reference, candidate) pair.

    Returns:
        (genre_overlap_count, tag_overlap_count) tuple
    """
    return (
        count_overlap(reference_genres, candidate_genres),
        count_overlap(reference_tags, candidate_tags),
    )


def weighted_score(
    reference: ConsumableItem,
    candidate: ConsumableItem,
    weights: ScoringWeights = DEFAULT_WEIGHTS
) -> float:
    """Same-domain score: genre matches and tag matches, weighted."""
    genre_overlap, tag_overlap = score(
        reference.genres, reference.tags, candidate.genres, candidate.tags
    )
    return genre_overlap * weights.exact_genre_match + tag_overlap * weights.tag_match


@dataclass
class CrossDomainMatch:
    """Result of scoring one history item against a candidate from the other domain."""
    score: float = 0.0
    matched_genres: List[str] = field(default_factory=list)
    title_related: bool = False


def _has_partial_match(mapped_genre: str, candidate_genres: List[str]) -> bool:
    words = [w for w in mapped_genre.split() if len(w) >= MIN_PARTIAL_WORD_LENGTH]
    return any(word in genre for genre in candidate_genres for word in words)


def score_across_domains(
    reference: ConsumableItem,
    candidate: ConsumableItem,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    source: Optional[MediaType] = None
) -> CrossDomainMatch:
    """
    Score a candidate against a history item from the other media domain.

    Each reference genre is translated through the genre tables. Every mapped
    label then earns the exact weight when it equals a candidate genre, or the
    partial weight when one of its significant words appears inside a
    candidate genre. Tags must match exactly. A related title earns the
    adaptation bonus.

    Args:
        reference: Item from the user's history
        candidate: Candidate item from the other domain
        weights: Scoring weights
        source: Domain of the reference genres (default: reference.media_type)

    Returns:
        CrossDomainMatch with score, matched mapped genres and title flag
    """
    source = source or reference.media_type
    candidate_genres = normalize_labels(candidate.genres)
    match = CrossDomainMatch()

    for genre in reference.genres:
        for mapped_genre in map_genre(genre, source):
            normalized = normalize_label(mapped_genre)
            if normalized in candidate_genres:
                match.score += weights.exact_genre_match
            elif _has_partial_match(normalized, candidate_genres):
                match.score += weights.partial_genre_match
            else:
                continue
            if mapped_genre not in match.matched_genres:
                match.matched_genres.append(mapped_genre)

    match.score += count_overlap(reference.tags, candidate.tags) * weights.tag_match

    if is_related_title(reference.title, candidate.title):
        match.score += weights.adaptation_bonus
        match.title_related = True

    return match
