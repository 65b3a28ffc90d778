"""
DeepMatch scoring (AI-enhanced path).

For a profile vector and a candidate book:
    cosine            = cos(profile, book)
    category_match    = 1.0 hit / 0.3 miss / 0.5 no category history
    deep_interaction  = sigmoid((dot + mean(profile * book)) / 2)
    match             = sigmoid(2 * (0.5*cosine + 0.2*category + 0.3*deep) - 1)
    diversity_boost   = 0.15 new category / 0.1 no history / 0
    final             = match * (1 + diversity_boost)

The blend is a fixed bilinear heuristic standing in for a learned matching
layer; see constants.py.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

import numpy as np
from pydantic import BaseModel

from ..embedding.store import EmbeddingStore
from ..models.book import Book
from ..models.errors import NotFoundError
from ..models.explanation import ExplanationPath, PathType, RecommendationExplanation
from ..models.profile import ProfileMode, UserProfile
from ..providers.catalog import BookCatalogProvider
from ..providers.history import BorrowHistoryProvider
from ..utils.deadline import Deadline, resolve_deadline
from ..utils.similarity import as_vector, cosine_similarity, sigmoid
from . import constants as C
from .profile import SemanticProfileBuilder

logger = logging.getLogger(__name__)

DEFAULT_AI_TOP_N = 10
DEFAULT_AI_PROFILE_K = 10


class DeepMatchScore(BaseModel):
    book_id: int
    cosine: float
    category_match: float
    deep_interaction: float
    match_score: float
    diversity_boost: float
    final_score: float


class DeepMatchScorer:
    """Stateless scorer; all inputs come from the profile and the candidate."""

    @staticmethod
    def category_match(category: Optional[str], top_categories: Sequence[str]) -> float:
        if not category or not top_categories:
            return C.CATEGORY_UNKNOWN
        return C.CATEGORY_HIT if category in top_categories else C.CATEGORY_MISS

    @staticmethod
    def deep_interaction(profile_vector: np.ndarray, book_vector: np.ndarray) -> float:
        products = profile_vector * book_vector
        return sigmoid((float(products.sum()) + float(products.mean())) / 2.0)

    @staticmethod
    def diversity_boost(category: Optional[str], top_categories: Sequence[str]) -> float:
        if not category or not top_categories:
            return C.DIVERSITY_NO_HISTORY
        return C.DIVERSITY_NEW_CATEGORY if category not in top_categories else 0.0

    def score(self, profile: UserProfile, book: Book, embedding) -> Optional[DeepMatchScore]:
        """Score one candidate; None when its embedding cannot be compared."""
        book_vector = as_vector(embedding)
        if book_vector.shape[0] != profile.dimension or book_vector.size == 0:
            logger.warning(
                "[deep_match] DIM_MISMATCH book_id=%s profile_dim=%s book_dim=%s",
                book.id, profile.dimension, book_vector.shape[0],
            )
            return None
        cosine = cosine_similarity(profile.vector, book_vector)
        category = self.category_match(book.category, profile.top_categories)
        deep = self.deep_interaction(profile.vector, book_vector)
        blended = (
            C.COSINE_WEIGHT * cosine
            + C.CATEGORY_WEIGHT * category
            + C.DEEP_INTERACTION_WEIGHT * deep
        )
        match = sigmoid(C.REBIAS_SCALE * blended + C.REBIAS_SHIFT)
        boost = self.diversity_boost(book.category, profile.top_categories)
        return DeepMatchScore(
            book_id=book.id,
            cosine=cosine,
            category_match=category,
            deep_interaction=deep,
            match_score=match,
            diversity_boost=boost,
            final_score=match * (1.0 + boost),
        )


def ai_reason(profile: UserProfile, book: Book, scored: DeepMatchScore) -> str:
    """Template explanation for a deep-match recommendation."""
    parts: List[str] = []
    if profile.top_categories and book.category in profile.top_categories:
        parts.append(f"You often read {book.category} books")
    if scored.match_score > C.STRONG_MATCH:
        parts.append("highly matches your reading preferences")
    elif scored.match_score > C.GOOD_MATCH:
        parts.append("fits your reading interests")
    if scored.diversity_boost > C.DIVERSITY_NO_HISTORY:
        parts.append("a quality pick in a different style for you")
    if not parts:
        return f"Personalized AI recommendation, {scored.match_score * 100:.1f}% match"
    sentence = "; ".join(parts)
    return sentence[0].upper() + sentence[1:] + "."


class DeepMatchRecall:
    """AI-enhanced path: time-decayed profile, catalog sample, deep-match ranking."""

    def __init__(
        self,
        history: BorrowHistoryProvider,
        catalog: BookCatalogProvider,
        embeddings: EmbeddingStore,
        profiles: SemanticProfileBuilder,
        scorer: Optional[DeepMatchScorer] = None,
    ):
        self.history = history
        self.catalog = catalog
        self.embeddings = embeddings
        self.profiles = profiles
        self.scorer = scorer or DeepMatchScorer()

    def candidates(self, user_id: int, top_n: int) -> List[Book]:
        """Catalog sample of CANDIDATE_MULTIPLIER * top_n minus borrowed and unavailable books."""
        borrowed = {r.book_id for r in self.history.find_by_user_id(user_id)}
        sample = self.catalog.search(limit=C.CANDIDATE_MULTIPLIER * top_n, offset=0)
        return [b for b in sample if b.id not in borrowed and b.is_available]

    def recommend(
        self,
        user_id: int,
        top_n: int = DEFAULT_AI_TOP_N,
        profile_k: int = DEFAULT_AI_PROFILE_K,
        now: Optional[datetime] = None,
        deadline: Optional[Deadline] = None,
    ) -> List[RecommendationExplanation]:
        """
        Raises:
            NotFoundError: no profile, no candidates, or no candidate could be scored.
        """
        deadline = resolve_deadline(deadline)
        profile = self.profiles.build(user_id, profile_k, ProfileMode.TIME_DECAYED, now=now)

        # --- 1. Candidate sample ---
        candidates = self.candidates(user_id, top_n)
        if not candidates:
            raise NotFoundError("no candidate books")

        # --- 2. Score; candidates without a usable embedding are skipped ---
        scored = []
        skipped = 0
        for book in candidates:
            deadline.check("deep_match")
            embedding = self.embeddings.get_embedding(book.id)
            if embedding is None:
                skipped += 1
                continue
            result = self.scorer.score(profile, book, embedding)
            if result is None:
                skipped += 1
                continue
            scored.append((book, result))
        if not scored:
            raise NotFoundError("no suitable books")

        # --- 3. Rank and explain ---
        scored.sort(key=lambda pair: (-pair[1].final_score, pair[0].id))
        results = []
        for book, result in scored[:top_n]:
            explanation = RecommendationExplanation(
                book_id=book.id,
                score=result.final_score,
                reason=ai_reason(profile, book, result),
                ai_enhanced=True,
            )
            explanation.add_path(
                ExplanationPath(
                    type=PathType.SEMANTIC,
                    target_book_id=book.id,
                    contribution=result.match_score,
                )
            )
            results.append(explanation)

        logger.info(
            "[deep_match] RANKED user_id=%s candidates=%s skipped=%s returned=%s",
            user_id, len(candidates), skipped, len(results),
        )
        return results
