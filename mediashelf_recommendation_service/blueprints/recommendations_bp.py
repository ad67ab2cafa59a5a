"""Rank candidate books/shows against a user's history."""
import azure.functions as func
import logging
import json

from mediashelf_recommendation_service.models import ConsumableItem, HistoryEntry, MediaType
from mediashelf_recommendation_service.services import RecommendationEngine

# Initialize blueprint
bp = func.Blueprint()

# Initialize engine (singleton pattern)
recommendation_engine = RecommendationEngine()

logger = logging.getLogger(__name__)

MAX_LIMIT = 50

# kind -> (history media type, candidate media type, engine method)
RECOMMENDATION_KINDS = {
    "books": (MediaType.BOOK, MediaType.BOOK, "recommend_books"),
    "shows": (MediaType.SHOW, MediaType.SHOW, "recommend_shows"),
    "books-from-shows": (MediaType.SHOW, MediaType.BOOK, "recommend_books_from_shows"),
    "shows-from-books": (MediaType.BOOK, MediaType.SHOW, "recommend_shows_from_books"),
}


def _error(message: str, status_code: int) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps({"error": message}),
        status_code=status_code,
        mimetype="application/json"
    )


@bp.route(route="recommendations/{kind}", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
def get_recommendations(req: func.HttpRequest) -> func.HttpResponse:
    """
    Rank a candidate pool against a user's history.

    Route Parameters:
        - kind: books, shows, books-from-shows or shows-from-books

    Body:
        - history: List of list entries ({"book": {...}} / {"show": {...}} / {"item": {...}})
        - candidates: List of items ({"id", "title", "genres", "tags"})
        - limit: Maximum recommendations (optional, 1-50)
    """
    try:
        kind = req.route_params.get('kind')

        if kind not in RECOMMENDATION_KINDS:
            return _error(
                f"kind must be one of: {', '.join(RECOMMENDATION_KINDS)}", 400
            )

        history_type, candidate_type, method_name = RECOMMENDATION_KINDS[kind]

        try:
            body = req.get_json()
        except ValueError:
            return _error("Request body must be valid JSON", 400)

        if not isinstance(body, dict):
            return _error("Request body must be a JSON object", 400)

        history_data = body.get('history', [])
        candidate_data = body.get('candidates', [])

        if not isinstance(history_data, list) or not isinstance(candidate_data, list):
            return _error("history and candidates must be lists", 400)

        limit = body.get('limit')
        if limit is not None and (
            not isinstance(limit, int) or isinstance(limit, bool) or limit < 1 or limit > MAX_LIMIT
        ):
            return _error(f"limit must be an integer between 1 and {MAX_LIMIT}", 400)

        try:
            history = [HistoryEntry.from_dict(entry, history_type) for entry in history_data]
            candidates = [ConsumableItem.from_dict(item, candidate_type) for item in candidate_data]
        except ValueError as e:
            return _error(str(e), 400)

        rank = getattr(recommendation_engine, method_name)
        if limit is None:
            recommendations = rank(history, candidates)
        else:
            recommendations = rank(history, candidates, limit)

        response = {
            "kind": kind,
            "count": len(recommendations),
            "recommendations": [rec.to_dict() for rec in recommendations]
        }

        return func.HttpResponse(
            json.dumps(response),
            status_code=200,
            mimetype="application/json"
        )

    except Exception as e:
        logger.error(f"Error getting recommendations: {str(e)}", exc_info=True)
        return _error("Internal server error", 500)


# noinspection PyUnusedLocal
@bp.route(route="recommendations/health", methods=["GET"])
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint."""
    return func.HttpResponse(
        json.dumps({
            "status": "healthy",
            "service": "mediashelf-recommendation-service",
            "version": "1.0.0"
        }),
        status_code=200,
        mimetype="application/json"
    )
