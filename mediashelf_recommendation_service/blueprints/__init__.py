"""Azure Functions blueprints"""

from mediashelf_recommendation_service.blueprints.recommendations_bp import bp as recommendations_blueprint

__all__ = ["recommendations_blueprint"]
