"""Book embedding storage: the store facade and its backend strategies."""

from .backends import (
    DEFAULT_SCAN_LIMIT,
    ArrayEmbeddingBackend,
    EmbeddingBackend,
    QdrantEmbeddingBackend,
    check_qdrant_available,
    create_embedding_backend,
)
from .store import DEFAULT_MODEL_NAME, EmbeddingStore

__all__ = [
    "ArrayEmbeddingBackend",
    "DEFAULT_MODEL_NAME",
    "DEFAULT_SCAN_LIMIT",
    "EmbeddingBackend",
    "EmbeddingStore",
    "QdrantEmbeddingBackend",
    "check_qdrant_available",
    "create_embedding_backend",
]
