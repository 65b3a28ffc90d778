"""
DeepMatch scoring tests.

Scorer: component values and the blended formula on hand-checkable vectors.
Recall: alice (SciFi + Mystery reader) ranked over the available, unborrowed
catalog; every result is AI-enhanced with a readable reason.
"""

import numpy as np
import pytest

from shelfwise.models import Book, NotFoundError, PathType, UserProfile
from shelfwise.stages import (
    DeepMatchRecall,
    DeepMatchScore,
    DeepMatchScorer,
    SemanticProfileBuilder,
    ai_reason,
)
from shelfwise.utils import sigmoid


def _profile(vector, categories=None):
    return UserProfile(vector=np.asarray(vector, dtype=float), top_categories=categories or [])


def _score(match, boost, final=None):
    return DeepMatchScore(
        book_id=1,
        cosine=0.0,
        category_match=0.5,
        deep_interaction=0.5,
        match_score=match,
        diversity_boost=boost,
        final_score=final if final is not None else match * (1 + boost),
    )


class TestDeepMatchScorer:
    def test_category_match(self):
        assert DeepMatchScorer.category_match("SciFi", ["SciFi"]) == 1.0
        assert DeepMatchScorer.category_match("History", ["SciFi"]) == 0.3
        assert DeepMatchScorer.category_match("History", []) == 0.5
        assert DeepMatchScorer.category_match(None, ["SciFi"]) == 0.5

    def test_diversity_boost(self):
        assert DeepMatchScorer.diversity_boost("SciFi", ["SciFi"]) == 0.0
        assert DeepMatchScorer.diversity_boost("History", ["SciFi"]) == 0.15
        assert DeepMatchScorer.diversity_boost("History", []) == 0.1

    def test_blended_formula(self):
        profile = _profile([1.0, 0.0], ["SciFi"])
        book = Book(id=1, title="Dune", category="SciFi", available_count=1)
        scored = DeepMatchScorer().score(profile, book, [1.0, 0.0])
        deep = sigmoid((1.0 + 0.5) / 2)
        expected = sigmoid(2 * (0.5 * 1.0 + 0.2 * 1.0 + 0.3 * deep) - 1)
        assert scored.cosine == pytest.approx(1.0)
        assert scored.deep_interaction == pytest.approx(deep)
        assert scored.match_score == pytest.approx(expected)
        assert scored.final_score == pytest.approx(expected)

    def test_new_category_is_boosted(self):
        profile = _profile([1.0, 0.0], ["SciFi"])
        book = Book(id=2, title="Sapiens", category="History", available_count=1)
        scored = DeepMatchScorer().score(profile, book, [1.0, 0.0])
        assert scored.final_score == pytest.approx(scored.match_score * 1.15)

    def test_dimension_mismatch_is_skipped(self):
        profile = _profile([1.0, 0.0, 0.0])
        book = Book(id=3, title="Odd", available_count=1)
        assert DeepMatchScorer().score(profile, book, [1.0, 0.0]) is None


class TestAiReason:
    def test_category_and_strong_match(self):
        profile = _profile([1.0], ["SciFi"])
        book = Book(id=1, category="SciFi")
        reason = ai_reason(profile, book, _score(0.85, 0.0))
        assert reason == "You often read SciFi books; highly matches your reading preferences."

    def test_good_match_only(self):
        profile = _profile([1.0], ["SciFi"])
        book = Book(id=1, category="History")
        reason = ai_reason(profile, book, _score(0.65, 0.0))
        assert reason == "Fits your reading interests."

    def test_diversity_pick(self):
        profile = _profile([1.0], ["SciFi"])
        book = Book(id=1, category="History")
        assert ai_reason(profile, book, _score(0.4, 0.15)) == "A quality pick in a different style for you."

    def test_fallback_shows_match_percentage(self):
        profile = _profile([1.0])
        book = Book(id=1, category="History")
        assert ai_reason(profile, book, _score(0.42, 0.1)) == "Personalized AI recommendation, 42.0% match"


class TestDeepMatchRecall:
    @pytest.fixture
    def recall(self, history, catalog, embedding_store, clock):
        profiles = SemanticProfileBuilder(history, catalog, embedding_store, clock=clock)
        return DeepMatchRecall(history, catalog, embedding_store, profiles)

    def test_candidates_exclude_borrowed_and_unavailable(self, recall):
        ids = {b.id for b in recall.candidates(1, top_n=10)}
        assert ids == {2, 3, 6, 7, 8}

    def test_ranked_and_ai_enhanced(self, recall, now):
        results = recall.recommend(1, top_n=10, now=now)
        assert {r.book_id for r in results} == {2, 3, 6, 7, 8}
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)
        assert all(r.ai_enhanced for r in results)
        assert all(r.paths[0].type == PathType.SEMANTIC for r in results)
        # Neuromancer sits closest to alice's Dune-leaning profile
        assert results[0].book_id == 3
        assert results[0].reason.startswith("You often read SciFi books")

    def test_top_n(self, recall, now):
        assert len(recall.recommend(1, top_n=2, now=now)) == 2

    def test_candidates_without_embeddings_skipped(self, history, catalog, embedding_store, clock, now):
        catalog.upsert({"id": 20, "title": "No Vector", "category": "SciFi", "available_count": 1})
        profiles = SemanticProfileBuilder(history, catalog, embedding_store, clock=clock)
        recall = DeepMatchRecall(history, catalog, embedding_store, profiles)
        ids = [r.book_id for r in recall.recommend(1, top_n=10, now=now)]
        assert 20 not in ids

    def test_no_candidates(self, now, catalog, embedding_store, clock):
        from shelfwise.providers import InMemoryBorrowHistory

        history = InMemoryBorrowHistory(
            [{"user_id": 10, "book_id": b, "borrow_time": now} for b in (1, 2, 3, 5, 6, 7, 8)]
        )
        profiles = SemanticProfileBuilder(history, catalog, embedding_store, clock=clock)
        recall = DeepMatchRecall(history, catalog, embedding_store, profiles)
        with pytest.raises(NotFoundError, match="no candidate books"):
            recall.recommend(10, top_n=5, now=now)
