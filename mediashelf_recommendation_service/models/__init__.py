"""Engine data types"""

from mediashelf_recommendation_service.models.consumable_item import (
    ConsumableItem,
    HistoryEntry,
    MediaType,
    ScoredCandidate,
)

__all__ = [
    "ConsumableItem",
    "HistoryEntry",
    "MediaType",
    "ScoredCandidate",
]
