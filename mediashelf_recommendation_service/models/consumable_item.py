"""Plain data types exchanged with the recommendation engine."""
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Tuple

import pandas as pd


class MediaType(str, Enum):
    """Media domain an item belongs to."""
    BOOK = "book"
    SHOW = "show"


def _is_missing(value: Any) -> bool:
    """True for None and for scalar NaN/NA values; collections are never missing."""
    return value is None or (pd.api.types.is_scalar(value) and pd.isna(value))


def _string_tuple(value: Any, field_name: str) -> Tuple[str, ...]:
    """
    Freeze a genre/tag collection, treating absent values as empty.

    Any iterable other than a string or mapping is accepted. Sets have no
    order, so they are frozen in sorted order to keep reason text stable.
    """
    if isinstance(value, str):
        return (value,)
    if _is_missing(value):
        return ()
    if isinstance(value, Iterable) and not isinstance(value, (Mapping, bytes)):
        labels = [str(v) for v in value if not _is_missing(v)]
        if isinstance(value, (set, frozenset)):
            labels.sort()
        return tuple(labels)
    raise ValueError(f"{field_name} must be a list of strings, got {type(value).__name__}")


@dataclass(frozen=True)
class ConsumableItem:
    """A book or TV show as seen by the engine: identity, title, genres and tags."""
    id: str
    title: str
    media_type: MediaType
    genres: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "genres", _string_tuple(self.genres, "genres"))
        object.__setattr__(self, "tags", _string_tuple(self.tags, "tags"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], media_type: MediaType) -> "ConsumableItem":
        """
        Build an item from a plain mapping.

        Args:
            data: Mapping with keys id, title, genres, tags
            media_type: Domain of the item

        Returns:
            ConsumableItem

        Raises:
            ValueError: If the mapping has no id
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"item must be an object, got {type(data).__name__}")

        item_id = data.get("id")
        if _is_missing(item_id) or item_id == "":
            raise ValueError("item is missing an id")

        title = data.get("title")
        if _is_missing(title):
            title = ""

        return cls(
            id=str(item_id),
            title=str(title),
            media_type=media_type,
            genres=data.get("genres"),
            tags=data.get("tags"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "media_type": self.media_type.value,
            "genres": list(self.genres),
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class HistoryEntry:
    """An item from the user's list, with the time it was added (epoch ms)."""
    item: ConsumableItem
    added_at: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], media_type: MediaType) -> "HistoryEntry":
        """
        Build a history entry from a list-store record.

        Accepts ``{"item": {...}, "addedAt": ...}`` as well as the
        ``{"book": {...}}`` / ``{"show": {...}}`` shapes of the user list.
        Status, rating and review fields are ignored.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"history entry must be an object, got {type(data).__name__}")

        raw_item = next(
            (data[key] for key in ("item", media_type.value) if isinstance(data.get(key), Mapping)),
            None
        )
        if raw_item is None:
            raise ValueError(f"history entry has no '{media_type.value}' or 'item' field")

        added_at = data.get("addedAt", data.get("added_at"))
        if _is_missing(added_at):
            added_at = 0

        return cls(
            item=ConsumableItem.from_dict(raw_item, media_type),
            added_at=int(added_at),
        )


@dataclass
class ScoredCandidate:
    """A recommended item with its score and explanation."""
    item: ConsumableItem
    score: float
    reasons: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item": self.item.to_dict(),
            "score": self.score,
            "reasons": list(self.reasons),
        }
