"""
Recall and ranking stages:
- profile: semantic taste vector (mean or time-decayed)
- graph_recall: PPR path
- semantic_recall / deep_match: semantic paths
- fusion: weighted merge and display normalization
- trending, similar_users: popularity and reader-overlap helpers
"""

from .deep_match import DeepMatchRecall, DeepMatchScore, DeepMatchScorer, ai_reason
from .fusion import RecommendationFusion
from .graph_recall import GraphRecall
from .profile import SemanticProfileBuilder
from .semantic_recall import SemanticRecall
from .similar_users import SimilarUser, find_similar_users, jaccard
from .trending import TrendingBook, TrendingService

__all__ = [
    "DeepMatchRecall",
    "DeepMatchScore",
    "DeepMatchScorer",
    "GraphRecall",
    "RecommendationFusion",
    "SemanticProfileBuilder",
    "SemanticRecall",
    "SimilarUser",
    "TrendingBook",
    "TrendingService",
    "ai_reason",
    "find_similar_users",
    "jaccard",
]
