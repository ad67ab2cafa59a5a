"""Human-readable reasons explaining why a candidate was recommended."""
from typing import Iterable, List, Sequence

from mediashelf_recommendation_service.matching.genre_normalizer import normalize_label, normalized_set
from mediashelf_recommendation_service.models import ConsumableItem

TITLE_SIMILARITY_THRESHOLD = 0.5
MAX_REASONS = 3
MAX_SHARED_GENRES = 3
MAX_SHARED_TAGS = 2

RELATED_TITLE_REASON = "Related series or adaptation"


def title_similarity(title1: str, title2: str) -> float:
    """
    Coarse title similarity for spotting series and adaptations.

    Counts words longer than 3 characters that appear in both titles,
    divided by the word count of the longer title. Generic long titles can
    produce false positives; it is only meant to catch same-franchise pairs.

    Args:
        title1: First title
        title2: Second title

    Returns:
        Ratio in [0, 1]
    """
    words1 = title1.lower().split()
    words2 = title2.lower().split()

    longest = max(len(words1), len(words2))
    if longest == 0:
        return 0.0

    common_words = [w for w in words1 if w in words2 and len(w) > 3]
    return len(common_words) / longest


def is_related_title(title1: str, title2: str) -> bool:
    """True when two titles look like the same franchise."""
    return title_similarity(title1, title2) > TITLE_SIMILARITY_THRESHOLD


def shared_labels(reference: Sequence[str], candidate: Iterable[str], limit: int) -> List[str]:
    """
    First ``limit`` reference labels that also appear in the candidate.

    Labels keep the reference item's original casing.
    """
    candidate_set = normalized_set(candidate)
    return [label for label in reference if normalize_label(label) in candidate_set][:limit]


def generate_reasons(reference: ConsumableItem, candidate: ConsumableItem) -> List[str]:
    """
    Explain the overlap between a history item and a candidate.

    Args:
        reference: Item from the user's history
        candidate: Candidate item known to overlap with it

    Returns:
        Up to 3 reasons: shared genres, shared themes, related title
    """
    reasons = []

    shared_genres = shared_labels(reference.genres, candidate.genres, MAX_SHARED_GENRES)
    if shared_genres:
        reasons.append(f"Shares genres: {', '.join(shared_genres)}")

    shared_tags = shared_labels(reference.tags, candidate.tags, MAX_SHARED_TAGS)
    if shared_tags:
        reasons.append(f"Similar themes: {', '.join(shared_tags)}")

    if is_related_title(reference.title, candidate.title):
        reasons.append(RELATED_TITLE_REASON)

    return reasons


def dedupe_reasons(reasons: Iterable[str], limit: int = MAX_REASONS) -> List[str]:
    """
    Drop repeated reasons, keeping first occurrences, and truncate.

    Args:
        reasons: Reasons gathered across the whole history
        limit: Maximum reasons to keep

    Returns:
        Ordered list of distinct reasons
    """
    return list(dict.fromkeys(reasons))[:limit]
