"""
Embedding store tests.

Array backend: last-write-wins upserts, ordered cosine search, the capped
linear scan (approximate beyond scan_limit), dimension mismatches skipped.
Qdrant backend runs in-process (":memory:") so no server is needed.
"""

import threading

import numpy as np
import pytest

from shelfwise.embedding import (
    ArrayEmbeddingBackend,
    EmbeddingStore,
    QdrantEmbeddingBackend,
    create_embedding_backend,
)
from shelfwise.models import DeadlineExceededError
from shelfwise.utils import Deadline


class TestArrayBackend:
    def test_upsert_and_get(self):
        store = EmbeddingStore(ArrayEmbeddingBackend())
        store.upsert(1, [1.0, 2.0, 3.0], "m")
        assert store.get_embedding(1).tolist() == [1.0, 2.0, 3.0]
        assert store.get_embedding(2) is None
        assert len(store) == 1

    def test_last_write_wins(self):
        store = EmbeddingStore(ArrayEmbeddingBackend())
        store.upsert(1, [1.0, 0.0], "m")
        store.upsert(1, [0.0, 1.0], "m2")
        assert store.get_embedding(1).tolist() == [0.0, 1.0]
        assert len(store) == 1

    def test_upsert_swaps_in_new_row_map(self):
        backend = ArrayEmbeddingBackend()
        backend.upsert(1, [1.0, 0.0], "m")
        snapshot = backend._rows
        backend.upsert(2, [0.0, 1.0], "m")
        backend.upsert(1, [0.5, 0.5], "m")
        # a reader still iterating the old map sees it unchanged
        assert list(snapshot) == [1]
        assert snapshot[1].vector.tolist() == [1.0, 0.0]
        assert backend.get(1).tolist() == [0.5, 0.5]
        assert backend.count() == 2

    def test_returned_vector_is_read_only(self, embedding_store):
        vector = embedding_store.get_embedding(1)
        with pytest.raises(ValueError):
            vector[0] = 5.0

    def test_query_ordering(self, embedding_store):
        results = embedding_store.query_similar([1.0, 0.0, 0.0], top_k=4)
        assert [book_id for book_id, _ in results] == [1, 4, 2, 3]
        sims = [s for _, s in results]
        assert sims == sorted(sims, reverse=True)
        assert sims[0] == pytest.approx(1.0)

    def test_ties_ordered_by_book_id(self):
        store = EmbeddingStore(ArrayEmbeddingBackend())
        store.upsert(9, [1.0, 0.0], "m")
        store.upsert(3, [2.0, 0.0], "m")
        assert [b for b, _ in store.query_similar([1.0, 0.0], top_k=2)] == [3, 9]

    def test_mismatched_rows_skipped(self, embedding_store, caplog):
        embedding_store.upsert(50, [1.0, 0.0], "short")
        with caplog.at_level("WARNING"):
            results = embedding_store.query_similar([1.0, 0.0, 0.0], top_k=20)
        assert 50 not in [b for b, _ in results]
        assert len(results) == 8
        assert "SCAN_DIM_MISMATCH" in caplog.text

    def test_scan_is_capped(self):
        store = EmbeddingStore(ArrayEmbeddingBackend(scan_limit=3))
        for book_id in range(1, 6):
            store.upsert(book_id, [1.0, float(book_id)], "m")
        results = store.query_similar([1.0, 5.0], top_k=10)
        # only the first three rows are ever considered
        assert sorted(b for b, _ in results) == [1, 2, 3]
        assert not store.is_exact

    def test_empty_vector_rejected(self):
        store = EmbeddingStore(ArrayEmbeddingBackend())
        with pytest.raises(ValueError):
            store.upsert(1, [], "m")

    def test_non_positive_top_k(self, embedding_store):
        assert embedding_store.query_similar([1.0, 0.0, 0.0], top_k=0) == []

    def test_cancelled_scan(self, embedding_store):
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(DeadlineExceededError):
            embedding_store.query_similar(
                [1.0, 0.0, 0.0], top_k=3, deadline=Deadline(cancel_event=cancel)
            )

    def test_invalid_scan_limit(self):
        with pytest.raises(ValueError):
            ArrayEmbeddingBackend(scan_limit=0)


class TestQdrantBackend:
    @pytest.fixture
    def store(self):
        store = EmbeddingStore(create_embedding_backend(":memory:"))
        store.upsert(1, [1.0, 0.0, 0.0], "m")
        store.upsert(2, [0.9, 0.1, 0.0], "m")
        store.upsert(3, [0.0, 0.0, 2.0], "m")
        return store

    def test_backend_selected(self, store):
        assert isinstance(store.backend, QdrantEmbeddingBackend)
        assert store.backend_name == "qdrant"
        assert store.is_exact

    def test_get_returns_raw_vector(self, store):
        assert store.get_embedding(3).tolist() == [0.0, 0.0, 2.0]
        assert store.get_embedding(99) is None

    def test_query_ordering(self, store):
        results = store.query_similar([1.0, 0.0, 0.0], top_k=3)
        assert [b for b, _ in results] == [1, 2, 3]
        assert results[0][1] == pytest.approx(1.0, abs=1e-5)

    def test_last_write_wins(self, store):
        store.upsert(1, [0.0, 0.0, 1.0], "m2")
        assert np.allclose(store.get_embedding(1), [0.0, 0.0, 1.0])
        assert len(store) == 3

    def test_query_dimension_mismatch_is_empty(self, store):
        assert store.query_similar([1.0, 0.0], top_k=3) == []

    def test_upsert_dimension_mismatch_rejected(self, store):
        with pytest.raises(ValueError):
            store.upsert(4, [1.0, 0.0], "m")


class TestBackendSelection:
    def test_no_url_uses_array(self):
        assert isinstance(create_embedding_backend(None), ArrayEmbeddingBackend)

    def test_unreachable_qdrant_falls_back(self, caplog):
        with caplog.at_level("WARNING"):
            backend = create_embedding_backend("http://127.0.0.1:1", scan_limit=7, timeout=1)
        assert isinstance(backend, ArrayEmbeddingBackend)
        assert backend.scan_limit == 7
        assert "QDRANT_PROBE_FAILED" in caplog.text
