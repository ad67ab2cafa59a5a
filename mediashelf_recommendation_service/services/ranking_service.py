"""Service for content-based book and TV show recommendations."""
from typing import List, Optional, Sequence

import logging
import numpy as np

from mediashelf_recommendation_service.config import get_scoring_weights
from mediashelf_recommendation_service.matching.overlap_scorer import (
    ScoringWeights,
    score,
    score_across_domains,
)
from mediashelf_recommendation_service.matching.reason_generator import (
    MAX_SHARED_GENRES,
    dedupe_reasons,
    generate_reasons,
)
from mediashelf_recommendation_service.models import (
    ConsumableItem,
    HistoryEntry,
    MediaType,
    ScoredCandidate,
)

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20
DEFAULT_CROSS_DOMAIN_LIMIT = 15

# Nominal score given to every candidate when cross-domain matching finds nothing
FALLBACK_SCORE = 0.1

READING_HISTORY_REASON = "Based on your reading history"
VIEWING_HISTORY_REASON = "Based on your viewing history"
WATCHED_SHOWS_REASON = "Based on shows you've watched"
READ_BOOKS_REASON = "Based on books you've read"

FROM_SHOWS_PREFIX = "From your TV shows: "
FROM_BOOKS_PREFIX = "From your books: "
RELATED_SHOW_REASON = "Related to a show you watched"
RELATED_BOOK_REASON = "Related to a book you read"


def rank_candidates(scored: List[ScoredCandidate], limit: int) -> List[ScoredCandidate]:
    """
    Sort candidates by descending score and keep the top ``limit``.

    The sort is stable: candidates with equal scores keep their pool order.

    Args:
        scored: Scored candidates in pool order
        limit: Maximum number to return

    Returns:
        Ranked, truncated list
    """
    if limit < 1 or not scored:
        return []

    scores = np.array([candidate.score for candidate in scored], dtype=float)
    order = np.argsort(-scores, kind="stable")

    return [scored[idx] for idx in order[:limit]]


class RecommendationEngine:
    """
    Deterministic, explainable recommendations from a user's history.

    Candidates are scored on genre/tag overlap with every item the user
    already has. Book-to-book and show-to-show matching compares labels
    directly; books-from-shows and shows-from-books translate genres through
    the cross-domain genre tables first. The engine keeps no state between
    calls.
    """

    def __init__(self, weights: Optional[ScoringWeights] = None):
        """
        Initialize the engine.

        Args:
            weights: Scoring weights (None = read from config)
        """
        self.weights = weights if weights is not None else get_scoring_weights()

        logger.info(
            f"Initialized RecommendationEngine - Genre: {self.weights.exact_genre_match}, "
            f"Partial genre: {self.weights.partial_genre_match}, Tag: {self.weights.tag_match}, "
            f"Popularity bonus: {self.weights.popularity_bonus}"
        )

    # ===== SAME DOMAIN =====

    def recommend_same_domain(
            self,
            history: Sequence[HistoryEntry],
            candidates: Sequence[ConsumableItem],
            limit: int = DEFAULT_LIMIT,
            fallback_reason: str = READING_HISTORY_REASON
    ) -> List[ScoredCandidate]:
        """
        Recommend items of the same media type as the history.

        Items already in the history are never recommended and candidates
        with no overlap at all are dropped.

        Args:
            history: User's list entries
            candidates: Candidate pool, in fetch order
            limit: Maximum recommendations
            fallback_reason: Reason used when overlap produced none

        Returns:
            Ranked list of scored candidates
        """
        reference_items = [entry.item for entry in history]
        exclude_ids = {item.id for item in reference_items}

        scored = []
        for candidate in candidates:
            if candidate.id in exclude_ids:
                continue

            total_score = 0.0
            all_reasons: List[str] = []

            for reference in reference_items:
                genre_overlap, tag_overlap = score(
                    reference.genres, reference.tags, candidate.genres, candidate.tags
                )
                total_score += (
                    genre_overlap * self.weights.exact_genre_match +
                    tag_overlap * self.weights.tag_match
                )

                if genre_overlap > 0 or tag_overlap > 0:
                    all_reasons.extend(generate_reasons(reference, candidate))

            logger.debug(f"Candidate {candidate.id} scored {total_score}")
            if total_score <= 0:
                continue

            scored.append(ScoredCandidate(
                item=candidate,
                score=total_score,
                reasons=dedupe_reasons(all_reasons) or [fallback_reason]
            ))

        recommendations = rank_candidates(scored, limit)

        logger.info(
            f"Same-domain ranking: {len(candidates)} candidates, "
            f"{len(scored)} with overlap, returning {len(recommendations)}"
        )
        return recommendations

    def recommend_books(
            self,
            history: Sequence[HistoryEntry],
            candidates: Sequence[ConsumableItem],
            limit: int = DEFAULT_LIMIT
    ) -> List[ScoredCandidate]:
        """Recommend books based on the user's books."""
        return self.recommend_same_domain(
            history, candidates, limit, fallback_reason=READING_HISTORY_REASON
        )

    def recommend_shows(
            self,
            history: Sequence[HistoryEntry],
            candidates: Sequence[ConsumableItem],
            limit: int = DEFAULT_LIMIT
    ) -> List[ScoredCandidate]:
        """Recommend TV shows based on the user's shows."""
        return self.recommend_same_domain(
            history, candidates, limit, fallback_reason=VIEWING_HISTORY_REASON
        )

    # ===== CROSS DOMAIN =====

    def recommend_cross_domain(
            self,
            history: Sequence[HistoryEntry],
            candidates: Sequence[ConsumableItem],
            source: MediaType,
            limit: int = DEFAULT_CROSS_DOMAIN_LIMIT
    ) -> List[ScoredCandidate]:
        """
        Recommend items of the other media type than the history.

        An empty history yields an empty result. When no candidate scores
        above zero, the pool itself is returned (up to ``limit``) with a
        nominal score and a generic reason, so a non-empty history and pool
        always produce recommendations.

        Args:
            history: User's list entries from the source domain
            candidates: Candidate pool from the other domain, in fetch order
            source: Media type of the history
            limit: Maximum recommendations

        Returns:
            Ranked list of scored candidates
        """
        if not history:
            logger.info("Cross-domain ranking skipped: empty history")
            return []

        if source == MediaType.SHOW:
            prefix, title_reason, fallback_reason = (
                FROM_SHOWS_PREFIX, RELATED_SHOW_REASON, WATCHED_SHOWS_REASON
            )
        else:
            prefix, title_reason, fallback_reason = (
                FROM_BOOKS_PREFIX, RELATED_BOOK_REASON, READ_BOOKS_REASON
            )

        reference_items = [entry.item for entry in history]

        scored = []
        for candidate in candidates:
            total_score = 0.0
            all_reasons: List[str] = []
            matched_genres: List[str] = []

            for reference in reference_items:
                match = score_across_domains(reference, candidate, self.weights, source)
                total_score += match.score

                if match.title_related:
                    all_reasons.append(title_reason)
                for genre in match.matched_genres:
                    if genre not in matched_genres:
                        matched_genres.append(genre)

            if matched_genres:
                genre_list = ", ".join(matched_genres[:MAX_SHARED_GENRES])
                all_reasons.append(f"Similar genres: {genre_list}")

            logger.debug(f"Candidate {candidate.id} scored {total_score} across domains")
            reasons = [f"{prefix}{reason}" for reason in dedupe_reasons(all_reasons)]
            scored.append(ScoredCandidate(
                item=candidate,
                score=total_score,
                reasons=reasons or [fallback_reason]
            ))

        matched = [candidate for candidate in scored if candidate.score > 0]

        if not matched and scored:
            logger.info(
                f"Cross-domain ranking found no overlap in {len(scored)} candidates, "
                f"falling back to pool order"
            )
            fallback = [
                ScoredCandidate(item=candidate.item, score=FALLBACK_SCORE, reasons=[fallback_reason])
                for candidate in scored
            ]
            return rank_candidates(fallback, limit)

        recommendations = rank_candidates(matched, limit)

        logger.info(
            f"Cross-domain ranking ({source.value} history): {len(candidates)} candidates, "
            f"{len(matched)} with overlap, returning {len(recommendations)}"
        )
        return recommendations

    def recommend_books_from_shows(
            self,
            history: Sequence[HistoryEntry],
            candidates: Sequence[ConsumableItem],
            limit: int = DEFAULT_CROSS_DOMAIN_LIMIT
    ) -> List[ScoredCandidate]:
        """Recommend books based on the user's TV shows."""
        return self.recommend_cross_domain(history, candidates, MediaType.SHOW, limit)

    def recommend_shows_from_books(
            self,
            history: Sequence[HistoryEntry],
            candidates: Sequence[ConsumableItem],
            limit: int = DEFAULT_CROSS_DOMAIN_LIMIT
    ) -> List[ScoredCandidate]:
        """Recommend TV shows based on the user's books."""
        return self.recommend_cross_domain(history, candidates, MediaType.BOOK, limit)
