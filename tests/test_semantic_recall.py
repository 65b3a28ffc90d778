"""
Plain semantic recall tests.

A reader whose only borrow is Sapiens [0,0,1] should get Cosmos first, then
The Hobbit, with Sapiens itself (borrowed) and Hyperion (no copies) dropped.
"""

import pytest

from shelfwise.models import NotFoundError, PathType
from shelfwise.providers import InMemoryBorrowHistory
from shelfwise.stages import SemanticProfileBuilder, SemanticRecall


@pytest.fixture
def history_reader(now):
    return InMemoryBorrowHistory([{"user_id": 10, "book_id": 7, "borrow_time": now}])


@pytest.fixture
def recall(history_reader, catalog, embedding_store, clock):
    profiles = SemanticProfileBuilder(history_reader, catalog, embedding_store, clock=clock)
    return SemanticRecall(history_reader, catalog, embedding_store, profiles)


class TestSemanticRecall:
    def test_nearest_books_in_similarity_order(self, recall):
        results = recall.recommend(10, top_n=3)
        assert [r.book_id for r in results] == [8, 6, 1]
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)
        assert scores[0] == pytest.approx(0.5 ** 0.5)

    def test_excludes_borrowed_and_unavailable(self, recall):
        ids = [r.book_id for r in recall.recommend(10, top_n=10)]
        assert 7 not in ids
        assert 4 not in ids

    def test_reason_names_recent_borrow(self, recall):
        result = recall.recommend(10, top_n=1)[0]
        assert "Sapiens" in result.reason
        assert result.paths[0].type == PathType.SEMANTIC
        assert result.paths[0].source_book_id == 7
        assert not result.ai_enhanced

    def test_cold_start_reason(self, history, catalog, embedding_store, clock):
        profiles = SemanticProfileBuilder(history, catalog, embedding_store, clock=clock)
        recall = SemanticRecall(history, catalog, embedding_store, profiles)
        results = recall.recommend(5, top_n=2)
        assert results
        assert results[0].reason == "Semantically similar to popular books"

    def test_everything_filtered_is_not_found(self, now, catalog, embedding_store, clock):
        history = InMemoryBorrowHistory(
            [{"user_id": 10, "book_id": b, "borrow_time": now} for b in (1, 2, 3, 5, 6, 7, 8)]
        )
        profiles = SemanticProfileBuilder(history, catalog, embedding_store, clock=clock)
        recall = SemanticRecall(history, catalog, embedding_store, profiles)
        with pytest.raises(NotFoundError, match="no suitable books"):
            recall.recommend(10, top_n=5)
