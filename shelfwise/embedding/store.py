"""
EmbeddingStore: the one entry point the recommender uses for book vectors.

Thin facade over an EmbeddingBackend chosen at construction. Dimension
mismatches are logged and scored as no match, never raised.
"""

import logging
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..utils.deadline import Deadline
from ..utils.similarity import as_vector
from .backends import ArrayEmbeddingBackend, EmbeddingBackend

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "all-MiniLM-L6-v2"


class EmbeddingStore:
    """
    Book embeddings with similarity search.

    Usage:
        store = EmbeddingStore(create_embedding_backend(qdrant_url))
        store.upsert(42, vector, "all-MiniLM-L6-v2")
        store.query_similar(profile_vector, top_k=20)
    """

    def __init__(self, backend: Optional[EmbeddingBackend] = None):
        self.backend = backend if backend is not None else ArrayEmbeddingBackend()

    @property
    def backend_name(self) -> str:
        return self.backend.name

    @property
    def is_exact(self) -> bool:
        """False when searches go through the capped (approximate) linear scan."""
        return not isinstance(self.backend, ArrayEmbeddingBackend)

    def upsert(
        self,
        book_id: int,
        vector: Union[Sequence[float], np.ndarray],
        model_name: str = DEFAULT_MODEL_NAME,
    ) -> None:
        arr = as_vector(vector)
        if arr.size == 0:
            raise ValueError(f"Empty embedding for book {book_id}")
        self.backend.upsert(book_id, arr, model_name)
        logger.info(
            "[embedding] UPSERT book_id=%s model=%s dim=%s", book_id, model_name, arr.shape[0]
        )

    def get_embedding(self, book_id: int) -> Optional[np.ndarray]:
        return self.backend.get(book_id)

    def query_similar(
        self,
        query_vector: Union[Sequence[float], np.ndarray],
        top_k: int,
        deadline: Optional[Deadline] = None,
    ) -> List[Tuple[int, float]]:
        """
        Up to top_k (book_id, similarity) pairs by descending cosine similarity.

        With the array backend only the first scan_limit rows are considered,
        so results are approximate on large corpora.
        """
        if top_k <= 0:
            return []
        results = self.backend.query_similar(as_vector(query_vector), top_k, deadline=deadline)
        logger.info(
            "[embedding] QUERY backend=%s top_k=%s found=%s", self.backend_name, top_k, len(results)
        )
        return results

    def __len__(self) -> int:
        return self.backend.count()
