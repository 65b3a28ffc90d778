"""
Shelfwise Recommendation Engine

Thin facade that wires the recall paths over one set of collaborators:
- graph: InteractionGraphBuilder + PersonalizedPageRankEngine
- semantic: SemanticProfileBuilder + SemanticRecall / DeepMatchRecall
- fusion: RecommendationFusion
- trending and similar users

All implementation lives in models/, graph/, embedding/ and stages/.
"""

from datetime import datetime
from typing import Callable, List, Optional

from .embedding.store import EmbeddingStore
from .models.config import RecommendationConfig, resolve_config
from .models.explanation import RecommendationExplanation, RecommendedBook
from .providers.catalog import BookCatalogProvider
from .providers.history import BorrowHistoryProvider
from .providers.users import InMemoryUserDirectory, UserDirectory
from .stages.deep_match import DEFAULT_AI_PROFILE_K, DEFAULT_AI_TOP_N, DeepMatchRecall
from .stages.fusion import RecommendationFusion
from .stages.graph_recall import DEFAULT_GRAPH_TOP_N, GraphRecall
from .stages.profile import SemanticProfileBuilder
from .stages.semantic_recall import DEFAULT_SEMANTIC_PROFILE_K, DEFAULT_SEMANTIC_TOP_N, SemanticRecall
from .stages.similar_users import SimilarUser, find_similar_users
from .stages.trending import DEFAULT_TRENDING_TOP_N, TrendingBook, TrendingService
from .utils.deadline import Deadline
from .utils.scores import utc_now


def _is_set(overrides: dict, field: str) -> bool:
    """True when the caller supplied a valid value for field."""
    return field in RecommendationConfig.from_dict(overrides).model_fields_set


class RecommendationEngine:
    """
    One engine per set of stores. Holds no per-user state; every call rebuilds
    its graph and profile.
    """

    def __init__(
        self,
        history: BorrowHistoryProvider,
        catalog: BookCatalogProvider,
        embeddings: EmbeddingStore,
        users: Optional[UserDirectory] = None,
        config: Optional[RecommendationConfig] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.history = history
        self.catalog = catalog
        self.embeddings = embeddings
        self.users = users if users is not None else InMemoryUserDirectory()
        self.config = resolve_config(config)
        self.clock = clock

        self.trending = TrendingService(
            history, catalog, self.users, window_days=self.config.trending_window_days, clock=clock
        )
        self.profiles = SemanticProfileBuilder(history, catalog, embeddings, self.trending, clock=clock)
        self.graph = GraphRecall(history, catalog, clock=clock)
        self.semantic = SemanticRecall(history, catalog, embeddings, self.profiles)
        self.deep_match = DeepMatchRecall(history, catalog, embeddings, self.profiles)
        self.fusion = RecommendationFusion(self.graph, self.semantic, self.deep_match, catalog)

    def _config(self, overrides: Optional[dict]) -> RecommendationConfig:
        return self.config.merged(overrides)

    def recommend(
        self,
        user_id: int,
        overrides: Optional[dict] = None,
        deadline: Optional[Deadline] = None,
    ) -> List[RecommendedBook]:
        overrides = overrides or {}
        config = self._config(overrides)
        # userProfileK applies to whichever semantic side runs
        ai_profile_k = config.user_profile_k if _is_set(overrides, "user_profile_k") else None
        return self.fusion.recommend(user_id, config, deadline=deadline, ai_profile_k=ai_profile_k)

    def recommend_graph(
        self,
        user_id: int,
        overrides: Optional[dict] = None,
        deadline: Optional[Deadline] = None,
    ) -> List[RecommendationExplanation]:
        overrides = overrides or {}
        top_n = self._path_top_n(overrides, DEFAULT_GRAPH_TOP_N)
        return self.graph.recommend(user_id, self._config(overrides), top_n=top_n, deadline=deadline)

    def recommend_semantic(
        self,
        user_id: int,
        overrides: Optional[dict] = None,
        deadline: Optional[Deadline] = None,
    ) -> List[RecommendationExplanation]:
        overrides = overrides or {}
        config = self._config(overrides)
        top_n = self._path_top_n(overrides, DEFAULT_SEMANTIC_TOP_N)
        profile_k = config.user_profile_k if _is_set(overrides, "user_profile_k") else DEFAULT_SEMANTIC_PROFILE_K
        return self.semantic.recommend(user_id, top_n=top_n, profile_k=profile_k, deadline=deadline)

    def recommend_ai(
        self,
        user_id: int,
        overrides: Optional[dict] = None,
        deadline: Optional[Deadline] = None,
    ) -> List[RecommendationExplanation]:
        overrides = overrides or {}
        config = self._config(overrides)
        top_n = self._path_top_n(overrides, DEFAULT_AI_TOP_N)
        profile_k = config.user_profile_k if _is_set(overrides, "user_profile_k") else DEFAULT_AI_PROFILE_K
        return self.deep_match.recommend(user_id, top_n=top_n, profile_k=profile_k, deadline=deadline)

    def trending_books(self, top_n: int = DEFAULT_TRENDING_TOP_N) -> List[TrendingBook]:
        return self.trending.top_books(top_n)

    def similar_users(self, user_id: int, top_n: int = 10) -> List[SimilarUser]:
        return find_similar_users(user_id, self.history, self.users, top_n=top_n)

    def _path_top_n(self, overrides: dict, default: int) -> int:
        """Single-path calls default to their own top_n unless the caller set one."""
        if _is_set(overrides, "top_n"):
            return self._config(overrides).top_n
        return default
