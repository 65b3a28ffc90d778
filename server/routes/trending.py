"""Trending books endpoint."""

from fastapi import APIRouter

from ..models import TrendingBookItem, TrendingResponse
from ..state import get_state

router = APIRouter()


@router.get("", response_model=TrendingResponse)
def trending(topN: int = 10):
    """Most borrowed books in the trending window; admin borrows excluded."""
    state = get_state()
    items = [
        TrendingBookItem(
            book_id=t.book.id,
            title=t.book.title,
            author=t.book.author,
            category=t.book.category,
            available_count=t.book.available_count,
            borrow_count=t.borrow_count,
        )
        for t in state.engine.trending_books(topN)
    ]
    return TrendingResponse(
        books=items, total=len(items), window_days=state.engine.trending.window_days
    )
