"""
Shelfwise: hybrid book recommender.

Single entry point for the package:
- models/: RecommendationConfig, Book, BorrowRecord, RecommendedBook, errors
- graph/: interaction subgraph and Personalized PageRank
- embedding/: EmbeddingStore and its backends
- stages/: profile, recall paths, fusion, trending
"""

from .embedding import EmbeddingStore, create_embedding_backend
from .graph import InteractionGraphBuilder, PersonalizedPageRankEngine
from .models import (
    DEFAULT_CONFIG,
    Book,
    BorrowRecord,
    NotFoundError,
    RecommendationConfig,
    RecommendationError,
    RecommendedBook,
    ServerError,
)
from .recommendation_engine import RecommendationEngine
from .stages import (
    DeepMatchScorer,
    RecommendationFusion,
    SemanticProfileBuilder,
    TrendingService,
)

__version__ = "1.0.0"

__all__ = [
    "Book",
    "BorrowRecord",
    "DEFAULT_CONFIG",
    "DeepMatchScorer",
    "EmbeddingStore",
    "InteractionGraphBuilder",
    "NotFoundError",
    "PersonalizedPageRankEngine",
    "RecommendationConfig",
    "RecommendationEngine",
    "RecommendationError",
    "RecommendationFusion",
    "RecommendedBook",
    "SemanticProfileBuilder",
    "ServerError",
    "TrendingService",
    "create_embedding_backend",
]
