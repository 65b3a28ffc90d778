"""Pydantic request/response models for the API."""

from .common import CamelModel, ErrorResponse
from .embeddings import EmbeddingResponse, UpsertEmbeddingRequest
from .recommendations import (
    RecommendationListResponse,
    SimilarUserItem,
    SimilarUsersResponse,
    TrendingBookItem,
    TrendingResponse,
)

__all__ = [
    "CamelModel",
    "EmbeddingResponse",
    "ErrorResponse",
    "RecommendationListResponse",
    "SimilarUserItem",
    "SimilarUsersResponse",
    "TrendingBookItem",
    "TrendingResponse",
    "UpsertEmbeddingRequest",
]
