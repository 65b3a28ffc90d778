"""
Recommendation fusion: graph path + semantic path into one ranked list.

Each path runs independently and may fail alone. Per book:
    total = graph_weight * clamp(graph_score) + semantic_weight * clamp(semantic_score)
The top-N totals are rescaled into the [0, 10] display range.
Graph and profile are rebuilt on every call; nothing is cached between requests.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from ..models.config import RecommendationConfig, SemanticMode, resolve_config
from ..models.errors import DeadlineExceededError, NotFoundError, RecommendationError, ServerError
from ..models.explanation import RecommendationExplanation, RecommendedBook
from ..providers.catalog import BookCatalogProvider
from ..utils.deadline import Deadline
from ..utils.scores import clamp, normalize_display_scores
from .deep_match import DeepMatchRecall
from .graph_recall import GraphRecall
from .semantic_recall import SemanticRecall

logger = logging.getLogger(__name__)

PathResult = Tuple[List[RecommendationExplanation], Optional[RecommendationError]]


class _Fused:
    __slots__ = ("book_id", "score", "reason", "paths", "ai_enhanced")

    def __init__(self, book_id: int):
        self.book_id = book_id
        self.score = 0.0
        self.reason = ""
        self.paths = []
        self.ai_enhanced = False


def _run_path(name: str, user_id: int, fn: Callable[[], List[RecommendationExplanation]]) -> PathResult:
    """Run one recall path; its failure is returned, not raised."""
    try:
        return fn(), None
    except DeadlineExceededError:
        raise
    except NotFoundError as e:
        logger.info("[fusion] PATH_EMPTY path=%s user_id=%s reason=%s", name, user_id, e)
        return [], e
    except Exception as e:
        logger.exception("[fusion] PATH_FAILED path=%s user_id=%s", name, user_id)
        return [], ServerError(f"{name} recommendation failed", cause=e)


class RecommendationFusion:
    def __init__(
        self,
        graph: GraphRecall,
        semantic: SemanticRecall,
        deep_match: DeepMatchRecall,
        catalog: BookCatalogProvider,
    ):
        self.graph = graph
        self.semantic = semantic
        self.deep_match = deep_match
        self.catalog = catalog

    def _semantic_side(
        self,
        user_id: int,
        config: RecommendationConfig,
        now: Optional[datetime],
        deadline: Optional[Deadline],
        ai_profile_k: Optional[int] = None,
    ) -> PathResult:
        if config.semantic_mode == SemanticMode.SEMANTIC:
            return _run_path(
                "semantic", user_id,
                lambda: self.semantic.recommend(
                    user_id, top_n=config.top_n, profile_k=config.user_profile_k,
                    now=now, deadline=deadline,
                ),
            )
        return _run_path(
            "ai", user_id,
            lambda: self.deep_match.recommend(
                user_id, top_n=config.top_n, profile_k=ai_profile_k or config.ai_profile_k,
                now=now, deadline=deadline,
            ),
        )

    def recommend(
        self,
        user_id: int,
        config: Optional[RecommendationConfig] = None,
        now: Optional[datetime] = None,
        deadline: Optional[Deadline] = None,
        ai_profile_k: Optional[int] = None,
    ) -> List[RecommendedBook]:
        """
        Fused top-N with display scores in [0, 10].

        ai_profile_k overrides config.ai_profile_k for the deep-match profile.
        A path whose weight is 0 contributes no books.

        Raises:
            RecommendationError: both paths came back empty; the graph path's
                error wins, then the semantic path's, else NotFoundError.
        """
        config = resolve_config(config)

        # --- 1. Run both paths ---
        graph_results, graph_error = _run_path(
            "graph", user_id,
            lambda: self.graph.recommend(
                user_id, config=config, top_n=config.top_n, now=now, deadline=deadline
            ),
        )
        semantic_results, semantic_error = self._semantic_side(
            user_id, config, now, deadline, ai_profile_k=ai_profile_k
        )

        # a zero-weight path adds no books of its own
        if config.graph_weight <= 0:
            graph_results = []
        if config.semantic_weight <= 0:
            semantic_results = []
        if not graph_results and not semantic_results:
            raise graph_error or semantic_error or NotFoundError("no recommendations")

        # --- 2. Accumulate weighted, clamped path scores per book ---
        fused: Dict[int, _Fused] = {}
        for item in graph_results:
            entry = fused.setdefault(item.book_id, _Fused(item.book_id))
            entry.score += config.graph_weight * clamp(item.score)
            entry.reason = item.reason
            entry.paths.extend(item.paths)
        for item in semantic_results:
            entry = fused.setdefault(item.book_id, _Fused(item.book_id))
            entry.score += config.semantic_weight * clamp(item.score)
            if not entry.reason:
                entry.reason = item.reason
            entry.paths.extend(item.paths)
            entry.ai_enhanced = entry.ai_enhanced or item.ai_enhanced

        # --- 3. Rank, resolve books, take top-N ---
        ranked = sorted(fused.values(), key=lambda e: (-e.score, e.book_id))
        selected = []
        for entry in ranked:
            book = self.catalog.find_by_id(entry.book_id)
            if book is None:
                continue
            selected.append((entry, book))
            if len(selected) >= config.top_n:
                break

        # --- 4. Display normalization ---
        display = normalize_display_scores([entry.score for entry, _ in selected])
        results = [
            RecommendedBook(
                book_id=book.id,
                title=book.title,
                author=book.author,
                category=book.category,
                available_count=book.available_count,
                score=score,
                reason=entry.reason,
                ai_enhanced=entry.ai_enhanced,
                paths=entry.paths,
            )
            for (entry, book), score in zip(selected, display)
        ]
        logger.info(
            "[fusion] FUSED user_id=%s graph=%s semantic=%s mode=%s returned=%s",
            user_id, len(graph_results), len(semantic_results),
            config.semantic_mode.value, len(results),
        )
        return results
