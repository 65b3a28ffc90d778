"""
RecommendationConfig tests.

Malformed request parameters never fail a request: each bad value is
replaced by its default and the rest of the request is honoured.
"""

from shelfwise.models.config import DEFAULT_CONFIG, RecommendationConfig, SemanticMode


class TestDefaults:
    def test_default_values(self):
        c = RecommendationConfig()
        assert c.top_n == 20
        assert c.lambda_ == 0.05
        assert c.behavior_weight == 1.0
        assert c.restart_probability == 0.15
        assert c.max_iterations == 30
        assert c.user_profile_k == 5
        assert c.ai_profile_k == 10
        assert c.graph_weight == 0.6
        assert c.semantic_weight == 0.4
        assert c.semantic_mode == SemanticMode.AI
        assert c.max_co_borrowers_per_book == 50
        assert c.max_books_per_neighbor == 50


class TestFromDict:
    def test_camel_case_request_params(self):
        c = RecommendationConfig.from_dict(
            {"topN": "7", "lambda": "0.1", "graphWeight": "1", "semanticWeight": "0", "semanticMode": "semantic"}
        )
        assert c.top_n == 7
        assert c.lambda_ == 0.1
        assert c.graph_weight == 1.0
        assert c.semantic_weight == 0.0
        assert c.semantic_mode == SemanticMode.SEMANTIC

    def test_nested_groups(self):
        c = RecommendationConfig.from_dict(
            {"ppr": {"restart_probability": 0.3, "max_iterations": 5}, "fusion": {"graph_weight": 0.9}}
        )
        assert c.restart_probability == 0.3
        assert c.max_iterations == 5
        assert c.graph_weight == 0.9

    def test_non_positive_top_n_uses_default(self):
        assert RecommendationConfig.from_dict({"topN": 0}).top_n == 20
        assert RecommendationConfig.from_dict({"topN": -3}).top_n == 20

    def test_non_numeric_uses_default(self, caplog):
        with caplog.at_level("WARNING"):
            c = RecommendationConfig.from_dict({"maxIterations": "many", "topN": "5"})
        assert c.max_iterations == 30
        assert c.top_n == 5
        assert "INVALID_PARAM" in caplog.text

    def test_restart_probability_out_of_range(self):
        assert RecommendationConfig.from_dict({"restartProbability": 1.5}).restart_probability == 0.15
        assert RecommendationConfig.from_dict({"restartProbability": 0}).restart_probability == 0.15

    def test_non_finite_uses_default(self):
        assert RecommendationConfig.from_dict({"lambda": "nan"}).lambda_ == 0.05

    def test_unknown_semantic_mode_uses_default(self):
        assert RecommendationConfig.from_dict({"semanticMode": "llm"}).semantic_mode == SemanticMode.AI

    def test_unknown_keys_ignored(self):
        assert RecommendationConfig.from_dict({"colour": "blue"}) == DEFAULT_CONFIG


class TestMerged:
    def test_overrides_apply_over_base(self):
        base = RecommendationConfig(top_n=12, graph_weight=0.5)
        merged = base.merged({"semanticWeight": "0.2"})
        assert merged.top_n == 12
        assert merged.graph_weight == 0.5
        assert merged.semantic_weight == 0.2

    def test_invalid_override_keeps_base_value(self):
        base = RecommendationConfig(top_n=12)
        assert base.merged({"topN": "-1"}).top_n == 12

    def test_no_overrides_returns_same_config(self):
        assert DEFAULT_CONFIG.merged(None) is DEFAULT_CONFIG
