"""
Semantic profile builder.

Aggregates embeddings of the user's most recent K borrows into one taste
vector. MEAN feeds plain semantic recall; TIME_DECAYED feeds deep match with
weight = max(0.1, 1 - days_ago / 180).

Cold start (no records, or none with an embedding): average a sample of K
catalog books, trending first when a TrendingService is wired.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from ..embedding.store import EmbeddingStore
from ..models.errors import NotFoundError
from ..models.profile import ProfileMode, UserProfile
from ..providers.catalog import BookCatalogProvider
from ..providers.history import BorrowHistoryProvider
from ..utils.scores import days_between, linear_recency_weight, utc_now
from .constants import RECENCY_FLOOR, RECENCY_HORIZON_DAYS, TOP_CATEGORY_COUNT
from .trending import TrendingService

logger = logging.getLogger(__name__)

PROFILE_NOT_FOUND = "cannot build profile"


def _weighted_mean(vectors: List[np.ndarray], weights: List[float]) -> Optional[np.ndarray]:
    """Weighted mean over vectors sharing the first vector's dimension."""
    if not vectors:
        return None
    dim = vectors[0].shape[0]
    kept = [(v, w) for v, w in zip(vectors, weights) if v.shape[0] == dim]
    if len(kept) < len(vectors):
        logger.warning(
            "[profile] DIM_MISMATCH dropped=%s dim=%s", len(vectors) - len(kept), dim
        )
    stacked = np.vstack([v for v, _ in kept])
    w = np.asarray([w for _, w in kept], dtype=np.float64)
    total = w.sum()
    if total <= 0:
        return stacked.mean(axis=0)
    return (stacked * w[:, None]).sum(axis=0) / total


def _top_categories(categories: List[str]) -> List[str]:
    """Most frequent first; ties go to the category seen most recently."""
    counts = Counter(categories)
    first_seen = {}
    for i, c in enumerate(categories):
        first_seen.setdefault(c, i)
    ranked = sorted(counts, key=lambda c: (-counts[c], first_seen[c]))
    return ranked[:TOP_CATEGORY_COUNT]


class SemanticProfileBuilder:
    def __init__(
        self,
        history: BorrowHistoryProvider,
        catalog: BookCatalogProvider,
        embeddings: EmbeddingStore,
        trending: Optional[TrendingService] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.history = history
        self.catalog = catalog
        self.embeddings = embeddings
        self.trending = trending
        self.clock = clock

    def _cold_start_sample(self, k: int) -> List[int]:
        book_ids: List[int] = []
        if self.trending is not None:
            book_ids = self.trending.top_book_ids(k)
        if not book_ids:
            book_ids = [b.id for b in self.catalog.search(limit=k, offset=0)]
        return book_ids

    def _cold_start(self, user_id: int, k: int) -> UserProfile:
        vectors = []
        for book_id in self._cold_start_sample(k):
            vector = self.embeddings.get_embedding(book_id)
            if vector is not None:
                vectors.append(vector)
        profile_vector = _weighted_mean(vectors, [1.0] * len(vectors))
        if profile_vector is None:
            logger.info("[profile] NONE user_id=%s no history and no sample embeddings", user_id)
            raise NotFoundError(PROFILE_NOT_FOUND)
        logger.info("[profile] COLD_START user_id=%s sample=%s", user_id, len(vectors))
        return UserProfile(vector=profile_vector, cold_start=True)

    def build(
        self,
        user_id: int,
        k: int,
        mode: ProfileMode = ProfileMode.MEAN,
        now: Optional[datetime] = None,
    ) -> UserProfile:
        """
        Build the user's profile from their K most recent borrows.

        Raises:
            NotFoundError: neither the history nor the cold-start sample has embeddings.
        """
        now = now or self.clock()
        records = self.history.find_recent_by_user_id(user_id, k)
        if not records:
            return self._cold_start(user_id, k)

        vectors: List[np.ndarray] = []
        weights: List[float] = []
        categories: List[str] = []
        contributing: List[int] = []
        for record in records:
            vector = self.embeddings.get_embedding(record.book_id)
            if vector is None:
                continue
            vectors.append(vector)
            if mode == ProfileMode.TIME_DECAYED:
                age = days_between(record.borrow_time, now)
                weights.append(linear_recency_weight(age, RECENCY_HORIZON_DAYS, RECENCY_FLOOR))
            else:
                weights.append(1.0)
            contributing.append(record.book_id)
            book = self.catalog.find_by_id(record.book_id)
            if book is not None and book.category:
                categories.append(book.category)

        if not vectors:
            logger.info("[profile] NO_EMBEDDINGS user_id=%s records=%s", user_id, len(records))
            return self._cold_start(user_id, k)

        profile = UserProfile(
            vector=_weighted_mean(vectors, weights),
            top_categories=_top_categories(categories),
            source_count=len(vectors),
            recent_book_ids=contributing,
        )
        logger.info(
            "[profile] BUILT user_id=%s mode=%s sources=%s categories=%s",
            user_id, mode.value, profile.source_count, profile.top_categories,
        )
        return profile
