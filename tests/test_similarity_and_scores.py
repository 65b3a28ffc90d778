"""
Vector and score helper tests.

Covers cosine similarity bounds and symmetry, the dimension-mismatch rule
(score 0, never raise), time decay, and display normalization into [0, 10].
"""

import math

import numpy as np
import pytest

from shelfwise.utils.scores import (
    DISPLAY_FLOOR,
    clamp,
    days_between,
    exponential_decay,
    linear_recency_weight,
    normalize_display_scores,
)
from shelfwise.utils.similarity import cosine_similarity, dot_product, sigmoid


class TestCosineSimilarity:
    def test_self_similarity_is_one(self):
        v = [0.3, -1.2, 4.0]
        assert cosine_similarity(v, v) == pytest.approx(1.0)

    def test_symmetric_and_bounded(self):
        rng = np.random.default_rng(7)
        for _ in range(20):
            a = rng.normal(size=8)
            b = rng.normal(size=8)
            ab = cosine_similarity(a, b)
            assert ab == pytest.approx(cosine_similarity(b, a))
            assert -1.0 <= ab <= 1.0

    def test_opposite_vectors(self):
        assert cosine_similarity([1, 0], [-1, 0]) == pytest.approx(-1.0)

    def test_dimension_mismatch_scores_zero(self, caplog):
        with caplog.at_level("WARNING"):
            assert cosine_similarity([1, 0, 0], [1, 0]) == 0.0
        assert "DIM_MISMATCH" in caplog.text

    def test_zero_vector_scores_zero(self):
        assert cosine_similarity([0, 0, 0], [1, 2, 3]) == 0.0

    def test_dot_product_mismatch_is_zero(self):
        assert dot_product([1, 2], [1, 2, 3]) == 0.0
        assert dot_product([1, 2], [3, 4]) == 11.0


class TestSigmoid:
    def test_midpoint(self):
        assert sigmoid(0.0) == 0.5

    def test_extremes_do_not_overflow(self):
        assert sigmoid(1000.0) == pytest.approx(1.0)
        assert sigmoid(-1000.0) == pytest.approx(0.0)


class TestTimeDecay:
    def test_today_is_full_weight(self):
        assert exponential_decay(0, 0.05) == 1.0

    def test_decay_value(self):
        assert exponential_decay(10, 0.05) == pytest.approx(math.exp(-0.5))

    def test_linear_recency_floor(self):
        assert linear_recency_weight(0) == 1.0
        assert linear_recency_weight(90) == pytest.approx(0.5)
        assert linear_recency_weight(400) == 0.1

    def test_days_between_never_negative(self, now):
        from datetime import timedelta

        assert days_between(now + timedelta(days=3), now) == 0
        assert days_between(now - timedelta(days=3, hours=5), now) == 3


class TestDisplayNormalization:
    def test_max_maps_to_ten_and_min_to_zero(self):
        out = normalize_display_scores([0.9, 0.5, 0.1])
        assert out[0] == pytest.approx(10.0)
        assert out[-1] == pytest.approx(0.0)
        assert all(0.0 <= s <= 10.0 for s in out)

    def test_flat_batch_uses_scaled_score(self):
        out = normalize_display_scores([0.42, 0.4205])
        assert out == pytest.approx([4.2, 4.205])

    def test_flat_batch_floor(self):
        assert normalize_display_scores([0.0, 0.0]) == [DISPLAY_FLOOR, DISPLAY_FLOOR]

    def test_single_item(self):
        assert normalize_display_scores([0.7]) == pytest.approx([7.0])

    def test_flat_batch_clamped_to_ten(self):
        assert normalize_display_scores([3.0]) == [10.0]

    def test_empty(self):
        assert normalize_display_scores([]) == []

    def test_clamp(self):
        assert clamp(1.7) == 1.0
        assert clamp(-0.2) == 0.0
        assert clamp(0.3) == 0.3
