"""Normalization of genre and tag labels for comparison."""
from typing import Iterable, List, Set

import pandas as pd


def normalize_label(label: object) -> str:
    """
    Normalize a genre/tag label for equality comparison.

    Args:
        label: Raw label (can be None, NaN or any other value)

    Returns:
        Case-folded label with surrounding whitespace removed
    """
    if label is None or (pd.api.types.is_scalar(label) and pd.isna(label)):
        return ""

    return str(label).strip().casefold()


def normalize_labels(labels: Iterable[str]) -> List[str]:
    """
    Normalize every label in a collection, keeping order and duplicates.

    Args:
        labels: Raw labels

    Returns:
        List of normalized labels
    """
    return [normalize_label(label) for label in labels]


def normalized_set(labels: Iterable[str]) -> Set[str]:
    """Set of normalized labels, for membership tests."""
    return set(normalize_labels(labels))
