"""Collaborative filtering placeholder."""
from typing import List

from mediashelf_recommendation_service.models import MediaType


# noinspection PyUnusedLocal
def get_collaborative_recommendations(
    item_id: str,
    media_type: MediaType,
    limit: int = 10
) -> List[str]:
    """
    Ids of items that users who have ``item_id`` also have.

    Args:
        item_id: Source item ID
        media_type: Media type of the source item
        limit: Maximum ids to return

    Returns:
        Always empty until usage data is collected
    """
    return []
