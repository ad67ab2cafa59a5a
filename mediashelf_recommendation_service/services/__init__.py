"""Service classes"""

from .catalog_loader_service import CatalogConfigurationError, CatalogLoader, build_candidate_pool
from .ranking_service import RecommendationEngine

__all__ = ["CatalogConfigurationError", "CatalogLoader", "RecommendationEngine", "build_candidate_pool"]
