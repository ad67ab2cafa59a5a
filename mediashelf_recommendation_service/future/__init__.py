"""
Future extensions for collaborative recommendations.

The collaborative entry point is stubbed and returns nothing until usage
data exists. Candidates for that data:

- Manual curation of related titles
- External "similar items" endpoints from the metadata providers
- Aggregated "users who kept X also kept Y" counts

Current recommendations are purely content-based (genre/tag overlap).
"""

from mediashelf_recommendation_service.future.collaborative import get_collaborative_recommendations

__all__ = ["get_collaborative_recommendations"]
