"""Recommendation, trending and similar-user responses."""

from typing import List, Optional

from shelfwise.models import RecommendedBook

from .common import CamelModel


class RecommendationListResponse(CamelModel):
    books: List[RecommendedBook]
    total: int
    strategy: str
    user_id: int


class TrendingBookItem(CamelModel):
    book_id: int
    title: str
    author: str
    category: Optional[str] = None
    available_count: int
    borrow_count: int


class TrendingResponse(CamelModel):
    books: List[TrendingBookItem]
    total: int
    window_days: int


class SimilarUserItem(CamelModel):
    user_id: int
    username: str
    similarity: float
    common_books: int


class SimilarUsersResponse(CamelModel):
    users: List[SimilarUserItem]
    total: int
