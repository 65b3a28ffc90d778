"""
Embedding backends.

Backing stores for book embeddings behind one EmbeddingBackend protocol:

- QdrantEmbeddingBackend: exact cosine index in Qdrant (server or in-process).
- ArrayEmbeddingBackend: vectors held in process; similarity search is a
  bounded linear scan over the first `scan_limit` rows. That scan is
  APPROXIMATE: rows past the cap are never considered.

create_embedding_backend() probes for Qdrant once and picks the implementation.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol, Tuple

import numpy as np
from qdrant_client import QdrantClient
from qdrant_client.http import models

from ..utils.deadline import Deadline, resolve_deadline
from ..utils.similarity import as_vector, cosine_similarity

logger = logging.getLogger(__name__)

# Rows examined by the linear-scan fallback per query.
DEFAULT_SCAN_LIMIT = 1000
# Deadline is checked every this many scanned rows.
SCAN_CHECK_EVERY = 100

COLLECTION_NAME = "book_embeddings"


@dataclass(frozen=True)
class StoredEmbedding:
    """One current vector per book. The array is read-only once stored."""

    book_id: int
    vector: np.ndarray
    model_name: str
    updated_at: str


def _frozen(vector) -> np.ndarray:
    arr = np.array(vector, dtype=np.float64).reshape(-1)
    arr.setflags(write=False)
    return arr


def _rank(hits: List[Tuple[int, float]], top_k: int) -> List[Tuple[int, float]]:
    hits.sort(key=lambda h: (-h[1], h[0]))
    return hits[: max(0, top_k)]


class EmbeddingBackend(Protocol):
    """Protocol for embedding storage and similarity search."""

    name: str

    def upsert(self, book_id: int, vector: np.ndarray, model_name: str) -> None:
        """Insert or replace the book's current vector (last write wins)."""
        ...

    def get(self, book_id: int) -> Optional[np.ndarray]:
        """Current vector for the book, or None."""
        ...

    def query_similar(
        self,
        query_vector: np.ndarray,
        top_k: int,
        deadline: Optional[Deadline] = None,
    ) -> List[Tuple[int, float]]:
        """(book_id, cosine similarity) pairs, most similar first, ties by book id."""
        ...

    def count(self) -> int:
        ...


class ArrayEmbeddingBackend:
    """
    In-process embedding rows with a capped linear-scan similarity search.

    Writers copy the row map, update the copy and swap it in under a lock.
    Readers never lock and iterate whichever snapshot was current.
    """

    name = "array"

    def __init__(self, scan_limit: int = DEFAULT_SCAN_LIMIT):
        if scan_limit <= 0:
            raise ValueError("scan_limit must be positive")
        self.scan_limit = scan_limit
        self._rows: Dict[int, StoredEmbedding] = {}
        self._write_lock = threading.Lock()

    def upsert(self, book_id: int, vector: np.ndarray, model_name: str) -> None:
        entry = StoredEmbedding(
            book_id=book_id,
            vector=_frozen(vector),
            model_name=model_name,
            updated_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._write_lock:
            updated = dict(self._rows)
            updated[book_id] = entry
            self._rows = updated

    def get(self, book_id: int) -> Optional[np.ndarray]:
        entry = self._rows.get(book_id)
        return entry.vector if entry is not None else None

    def get_entry(self, book_id: int) -> Optional[StoredEmbedding]:
        return self._rows.get(book_id)

    def query_similar(
        self,
        query_vector: np.ndarray,
        top_k: int,
        deadline: Optional[Deadline] = None,
    ) -> List[Tuple[int, float]]:
        deadline = resolve_deadline(deadline)
        query = as_vector(query_vector)
        # snapshot, then cap: the same first rows a "LIMIT n" table read returns
        snapshot = self._rows
        rows = list(snapshot.values())[: self.scan_limit]
        hits: List[Tuple[int, float]] = []
        skipped = 0
        for i, entry in enumerate(rows):
            if i % SCAN_CHECK_EVERY == 0:
                deadline.check("embedding_scan")
            if entry.vector.shape[0] != query.shape[0]:
                skipped += 1
                continue
            hits.append((entry.book_id, cosine_similarity(query, entry.vector)))
        if skipped:
            logger.warning(
                "[embedding] SCAN_DIM_MISMATCH skipped=%s query_dim=%s", skipped, query.shape[0]
            )
        logger.debug(
            "[embedding] LINEAR_SCAN scanned=%s total=%s top_k=%s",
            len(rows), len(snapshot), top_k,
        )
        return _rank(hits, top_k)

    def count(self) -> int:
        return len(self._rows)


class QdrantEmbeddingBackend:
    """
    Exact cosine similarity search in a Qdrant collection.

    Qdrant normalizes vectors stored under cosine distance, so the raw vector
    is kept in the payload and returned by get().
    """

    name = "qdrant"

    def __init__(
        self,
        client: QdrantClient,
        collection_name: str = COLLECTION_NAME,
        dimensions: Optional[int] = None,
    ):
        self.client = client
        self.collection_name = collection_name
        self._dimensions = dimensions
        self._lock = threading.Lock()
        if dimensions:
            self._ensure_collection(dimensions)

    def _collection_exists(self) -> bool:
        collections = self.client.get_collections().collections
        return any(c.name == self.collection_name for c in collections)

    def _ensure_collection(self, dimensions: int) -> None:
        with self._lock:
            if self._collection_exists():
                info = self.client.get_collection(self.collection_name)
                params = info.config.params.vectors
                self._dimensions = getattr(params, "size", dimensions)
                return
            self.client.create_collection(
                collection_name=self.collection_name,
                vectors_config=models.VectorParams(
                    size=dimensions,
                    distance=models.Distance.COSINE,
                ),
            )
            self._dimensions = dimensions
            logger.info(
                "[embedding] QDRANT_COLLECTION_CREATED name=%s dim=%s",
                self.collection_name, dimensions,
            )

    def upsert(self, book_id: int, vector: np.ndarray, model_name: str) -> None:
        arr = as_vector(vector)
        if self._dimensions is None:
            self._ensure_collection(int(arr.shape[0]))
        if arr.shape[0] != self._dimensions:
            raise ValueError(
                f"Embedding for book {book_id} has {arr.shape[0]} dims, collection expects {self._dimensions}"
            )
        self.client.upsert(
            collection_name=self.collection_name,
            points=[
                models.PointStruct(
                    id=int(book_id),
                    vector=arr.tolist(),
                    payload={
                        "book_id": int(book_id),
                        "model_name": model_name,
                        "raw_vector": arr.tolist(),
                        "updated_at": datetime.now(timezone.utc).isoformat(),
                    },
                )
            ],
            wait=True,
        )

    def get(self, book_id: int) -> Optional[np.ndarray]:
        if self._dimensions is None:
            return None
        points = self.client.retrieve(
            collection_name=self.collection_name,
            ids=[int(book_id)],
            with_payload=True,
            with_vectors=False,
        )
        if not points:
            return None
        raw = (points[0].payload or {}).get("raw_vector")
        return _frozen(raw) if raw is not None else None

    def query_similar(
        self,
        query_vector: np.ndarray,
        top_k: int,
        deadline: Optional[Deadline] = None,
    ) -> List[Tuple[int, float]]:
        resolve_deadline(deadline).check("embedding_index")
        query = as_vector(query_vector)
        if self._dimensions is None or top_k <= 0:
            return []
        if query.shape[0] != self._dimensions:
            logger.warning(
                "[embedding] INDEX_DIM_MISMATCH query_dim=%s index_dim=%s",
                query.shape[0], self._dimensions,
            )
            return []
        response = self.client.query_points(
            collection_name=self.collection_name,
            query=query.tolist(),
            limit=top_k,
            search_params=models.SearchParams(exact=True),
            with_payload=True,
        )
        hits = [
            (int((p.payload or {}).get("book_id", p.id)), float(p.score))
            for p in response.points
        ]
        return _rank(hits, top_k)

    def count(self) -> int:
        if self._dimensions is None:
            return 0
        return self.client.count(collection_name=self.collection_name, exact=True).count


def check_qdrant_available(client: QdrantClient) -> Tuple[bool, str]:
    """Capability probe: can this client list collections?"""
    try:
        client.get_collections()
        return True, "Qdrant reachable"
    except Exception as e:
        return False, f"Qdrant not reachable: {e}"


def create_embedding_backend(
    qdrant_url: Optional[str] = None,
    scan_limit: int = DEFAULT_SCAN_LIMIT,
    dimensions: Optional[int] = None,
    timeout: float = 5.0,
) -> EmbeddingBackend:
    """
    Pick the backend once, at construction time.

    qdrant_url=":memory:" uses Qdrant's in-process mode. Without a URL, or when
    the probe fails, the array backend with the capped linear scan is used.
    """
    if qdrant_url:
        if qdrant_url == ":memory:":
            client = QdrantClient(location=":memory:")
        else:
            client = QdrantClient(url=qdrant_url, timeout=int(timeout))
        ok, message = check_qdrant_available(client)
        if ok:
            logger.info("[embedding] BACKEND_SELECTED backend=qdrant url=%s", qdrant_url)
            return QdrantEmbeddingBackend(client, dimensions=dimensions)
        logger.warning("[embedding] QDRANT_PROBE_FAILED %s, using linear scan", message)
    logger.info("[embedding] BACKEND_SELECTED backend=array scan_limit=%s", scan_limit)
    return ArrayEmbeddingBackend(scan_limit=scan_limit)
