"""Genre/tag matching: normalization, genre tables, overlap scoring and reasons"""

from mediashelf_recommendation_service.matching.genre_mapper import map_genre, mapped_search_genres
from mediashelf_recommendation_service.matching.genre_normalizer import normalize_label
from mediashelf_recommendation_service.matching.overlap_scorer import (
    ScoringWeights,
    score,
    score_across_domains,
    weighted_score,
)
from mediashelf_recommendation_service.matching.reason_generator import (
    dedupe_reasons,
    generate_reasons,
    title_similarity,
)

__all__ = [
    "ScoringWeights",
    "dedupe_reasons",
    "generate_reasons",
    "map_genre",
    "mapped_search_genres",
    "normalize_label",
    "score",
    "score_across_domains",
    "title_similarity",
    "weighted_score",
]
