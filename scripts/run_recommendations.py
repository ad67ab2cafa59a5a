"""
Rank a candidate pool against a user's history, from JSON files or provider fetches.

Usage:
    # Books from books
    python scripts/run_recommendations.py --kind books \
        --history data/history.json --candidates data/candidates.json

    # Books from TV shows, top 5
    python scripts/run_recommendations.py --kind books-from-shows \
        --history data/shows.json --candidates data/books.json --limit 5

    # Books from TV shows, candidates fetched from Google Books
    python scripts/run_recommendations.py --kind books-from-shows \
        --history data/shows.json --fetch
"""

import sys
from pathlib import Path

# Add parent directory to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import logging
import argparse
import json
import pandas as pd
from typing import Dict, List, Optional

from mediashelf_recommendation_service.models import (
    ConsumableItem,
    HistoryEntry,
    MediaType,
    ScoredCandidate,
)
from mediashelf_recommendation_service.services import CatalogLoader, RecommendationEngine

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

# kind -> (history media type, candidate media type)
KIND_MEDIA_TYPES = {
    'books': (MediaType.BOOK, MediaType.BOOK),
    'shows': (MediaType.SHOW, MediaType.SHOW),
    'books-from-shows': (MediaType.SHOW, MediaType.BOOK),
    'shows-from-books': (MediaType.BOOK, MediaType.SHOW),
}


def load_records(path: Path) -> List[Dict]:
    """
    Load a JSON array of objects.

    Args:
        path: JSON file path

    Returns:
        List of record dicts (missing fields come back as NaN)
    """
    df = pd.read_json(path, orient='records', dtype=False, convert_dates=False)
    logger.info(f"Loaded {len(df)} records from {path}")
    return df.to_dict(orient='records')


def run_recommendations(
    kind: str,
    history_path: Path,
    candidates_path: Optional[Path],
    limit: int = None,
    engine: RecommendationEngine = None,
    loader: CatalogLoader = None
) -> List[ScoredCandidate]:
    """
    Load history and candidates and rank them.

    Args:
        kind: books, shows, books-from-shows or shows-from-books
        history_path: JSON file with history entries
        candidates_path: JSON file with candidate items (None = fetch from providers)
        limit: Maximum recommendations (None = engine default)
        engine: Engine to use (default: configured from settings)
        loader: Catalog loader used when no candidates file is given

    Returns:
        Ranked recommendations
    """
    history_type, candidate_type = KIND_MEDIA_TYPES[kind]

    history = [
        HistoryEntry.from_dict(record, history_type)
        for record in load_records(history_path)
    ]
    if candidates_path is None:
        loader = loader or CatalogLoader()
        candidates = loader.load_candidates(history, source=history_type, target=candidate_type)
    else:
        candidates = [
            ConsumableItem.from_dict(record, candidate_type)
            for record in load_records(candidates_path)
        ]

    engine = engine or RecommendationEngine()
    rank = {
        'books': engine.recommend_books,
        'shows': engine.recommend_shows,
        'books-from-shows': engine.recommend_books_from_shows,
        'shows-from-books': engine.recommend_shows_from_books,
    }[kind]

    if limit is None:
        return rank(history, candidates)
    return rank(history, candidates, limit)


def main():
    """Main execution function."""
    parser = argparse.ArgumentParser(
        description='Rank candidate books/shows against a user history'
    )
    parser.add_argument(
        '--kind',
        choices=sorted(KIND_MEDIA_TYPES),
        required=True,
        help='Recommendation kind'
    )
    parser.add_argument(
        '--history',
        type=str,
        required=True,
        help='JSON file with history entries'
    )
    candidate_source = parser.add_mutually_exclusive_group(required=True)
    candidate_source.add_argument(
        '--candidates',
        type=str,
        help='JSON file with candidate items'
    )
    candidate_source.add_argument(
        '--fetch',
        action='store_true',
        help='Fetch candidates from Google Books / TMDB instead of a file'
    )
    parser.add_argument(
        '--limit',
        type=int,
        default=None,
        help='Maximum recommendations (default: 20 same-domain, 15 cross-domain)'
    )

    args = parser.parse_args()

    try:
        recommendations = run_recommendations(
            kind=args.kind,
            history_path=Path(args.history),
            candidates_path=Path(args.candidates) if args.candidates else None,
            limit=args.limit
        )
    except Exception as e:
        logger.error(f"Error ranking recommendations: {str(e)}", exc_info=True)
        sys.exit(1)

    print(json.dumps([rec.to_dict() for rec in recommendations], indent=2))


if __name__ == '__main__':
    main()
