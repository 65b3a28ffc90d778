"""Pure helpers: request params, error mapping, response formatting."""

from typing import Dict, List

from fastapi import HTTPException

from shelfwise.models import (
    DeadlineExceededError,
    NotFoundError,
    RecommendationError,
    RecommendationExplanation,
    RecommendedBook,
)
from shelfwise.providers import BookCatalogProvider

# Query params that are routing, not algorithm config
_RESERVED_PARAMS = {"format"}


def query_overrides(params) -> Dict[str, str]:
    """
    Raw query params as config overrides.

    Values stay strings; RecommendationConfig coerces them and substitutes
    defaults for anything malformed.
    """
    return {k: v for k, v in params.items() if k not in _RESERVED_PARAMS}


def status_for(error: RecommendationError) -> int:
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, DeadlineExceededError):
        return 504
    return 500


def http_error(error: RecommendationError) -> HTTPException:
    return HTTPException(status_code=status_for(error), detail=str(error) or type(error).__name__)


def explanations_to_books(
    explanations: List[RecommendationExplanation],
    catalog: BookCatalogProvider,
) -> List[RecommendedBook]:
    """Single-path results as response rows; scores are the path's raw scores."""
    books = []
    for explanation in explanations:
        book = catalog.find_by_id(explanation.book_id)
        if book is None:
            continue
        books.append(
            RecommendedBook(
                book_id=book.id,
                title=book.title,
                author=book.author,
                category=book.category,
                available_count=book.available_count,
                score=explanation.score,
                reason=explanation.reason,
                ai_enhanced=explanation.ai_enhanced,
                paths=explanation.paths,
            )
        )
    return books
