"""
Trending books: borrow counts over a recent window.

Admin borrows are excluded; ties break by ascending book id. Also serves as
the cold-start sample source for the profile builder.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from pydantic import BaseModel

from ..models.book import Book
from ..providers.catalog import BookCatalogProvider
from ..providers.history import BorrowHistoryProvider
from ..providers.users import UserDirectory, admin_ids
from ..utils.scores import utc_now

logger = logging.getLogger(__name__)

DEFAULT_TRENDING_TOP_N = 10
MAX_TRENDING_TOP_N = 100
DEFAULT_WINDOW_DAYS = 30


class TrendingBook(BaseModel):
    book: Book
    borrow_count: int


class TrendingService:
    def __init__(
        self,
        history: BorrowHistoryProvider,
        catalog: BookCatalogProvider,
        users: Optional[UserDirectory] = None,
        window_days: int = DEFAULT_WINDOW_DAYS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.history = history
        self.catalog = catalog
        self.users = users
        self.window_days = window_days
        self.clock = clock

    def top_books(self, top_n: int = DEFAULT_TRENDING_TOP_N, now: Optional[datetime] = None) -> List[TrendingBook]:
        """Most borrowed catalog books in the window, most borrowed first."""
        if top_n <= 0:
            top_n = DEFAULT_TRENDING_TOP_N
        top_n = min(top_n, MAX_TRENDING_TOP_N)
        since = (now or self.clock()) - timedelta(days=self.window_days)
        counts = self.history.borrow_counts(since=since, exclude_user_ids=admin_ids(self.users))
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))

        results: List[TrendingBook] = []
        for book_id, count in ranked:
            book = self.catalog.find_by_id(book_id)
            if book is None:
                continue
            results.append(TrendingBook(book=book, borrow_count=count))
            if len(results) >= top_n:
                break
        logger.info(
            "[trending] TOP window_days=%s books_in_window=%s returned=%s",
            self.window_days, len(counts), len(results),
        )
        return results

    def top_book_ids(self, top_n: int = DEFAULT_TRENDING_TOP_N, now: Optional[datetime] = None) -> List[int]:
        return [t.book.id for t in self.top_books(top_n, now=now)]
