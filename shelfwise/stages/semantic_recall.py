"""
Plain semantic recall: nearest books to the user's mean profile vector.
"""

import logging
from datetime import datetime
from typing import List, Optional

from ..embedding.store import EmbeddingStore
from ..models.errors import NotFoundError
from ..models.explanation import ExplanationPath, PathType, RecommendationExplanation
from ..models.profile import ProfileMode, UserProfile
from ..providers.catalog import BookCatalogProvider
from ..providers.history import BorrowHistoryProvider
from ..utils.deadline import Deadline
from .constants import RECALL_OVERFETCH
from .profile import SemanticProfileBuilder

logger = logging.getLogger(__name__)

DEFAULT_SEMANTIC_TOP_N = 10
DEFAULT_SEMANTIC_PROFILE_K = 5


class SemanticRecall:
    def __init__(
        self,
        history: BorrowHistoryProvider,
        catalog: BookCatalogProvider,
        embeddings: EmbeddingStore,
        profiles: SemanticProfileBuilder,
    ):
        self.history = history
        self.catalog = catalog
        self.embeddings = embeddings
        self.profiles = profiles

    def _reason(self, profile: UserProfile) -> str:
        if profile.cold_start or not profile.recent_book_ids:
            return "Semantically similar to popular books"
        recent = self.catalog.find_by_id(profile.recent_book_ids[0])
        if recent is not None:
            return f"Semantically close to your recent borrow \"{recent.title}\""
        return "Semantically similar to your borrowing history"

    def recommend(
        self,
        user_id: int,
        top_n: int = DEFAULT_SEMANTIC_TOP_N,
        profile_k: int = DEFAULT_SEMANTIC_PROFILE_K,
        now: Optional[datetime] = None,
        deadline: Optional[Deadline] = None,
    ) -> List[RecommendationExplanation]:
        """
        Up to top_n available, unborrowed books in descending similarity order.

        Raises:
            NotFoundError: no profile, or nothing left after filtering.
        """
        profile = self.profiles.build(user_id, profile_k, ProfileMode.MEAN, now=now)

        # --- 1. Over-fetch neighbours of the profile ---
        hits = self.embeddings.query_similar(
            profile.vector, RECALL_OVERFETCH * top_n, deadline=deadline
        )
        if not hits:
            raise NotFoundError("no semantically similar books")

        # --- 2. Drop borrowed and unavailable books, keep similarity order ---
        borrowed = {r.book_id for r in self.history.find_by_user_id(user_id)}
        reason = self._reason(profile)
        results: List[RecommendationExplanation] = []
        for book_id, similarity in hits:
            if len(results) >= top_n:
                break
            if book_id in borrowed:
                continue
            book = self.catalog.find_by_id(book_id)
            if book is None or not book.is_available:
                continue
            explanation = RecommendationExplanation(book_id=book_id, score=similarity, reason=reason)
            explanation.add_path(
                ExplanationPath(
                    type=PathType.SEMANTIC,
                    source_book_id=profile.recent_book_ids[0] if profile.recent_book_ids else None,
                    target_book_id=book_id,
                    contribution=similarity,
                )
            )
            results.append(explanation)

        if not results:
            raise NotFoundError("no suitable books")
        logger.info(
            "[semantic] RECALLED user_id=%s hits=%s returned=%s", user_id, len(hits), len(results)
        )
        return results
