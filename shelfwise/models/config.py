"""
Recommendation configuration: graph, semantic, deep-match and fusion parameters.

RecommendationConfig defaults are defined here. The server passes request query
parameters as a dict; from_dict() merges nested groups over these defaults.
Malformed values are replaced by their defaults instead of failing the request.
"""

import logging
import math
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, model_validator

logger = logging.getLogger(__name__)


class SemanticMode(str, Enum):
    """Which scorer feeds the semantic side of fusion."""

    SEMANTIC = "semantic"
    AI = "ai"


# field -> predicate a value must satisfy; anything else falls back to the default
_VALID = {
    "top_n": lambda v: v > 0,
    "lambda_": lambda v: v >= 0,
    "behavior_weight": lambda v: 0 < v,
    "restart_probability": lambda v: 0 < v < 1,
    "max_iterations": lambda v: v > 0,
    "user_profile_k": lambda v: v > 0,
    "ai_profile_k": lambda v: v > 0,
    "graph_weight": lambda v: v >= 0,
    "semantic_weight": lambda v: v >= 0,
    "max_co_borrowers_per_book": lambda v: v > 0,
    "max_books_per_neighbor": lambda v: v > 0,
    "trending_window_days": lambda v: v > 0,
}

_INT_FIELDS = {
    "top_n",
    "max_iterations",
    "user_profile_k",
    "ai_profile_k",
    "max_co_borrowers_per_book",
    "max_books_per_neighbor",
    "trending_window_days",
}

# camelCase request keys accepted by from_dict
_ALIASES = {
    "topN": "top_n",
    "lambda": "lambda_",
    "behaviorWeight": "behavior_weight",
    "restartProbability": "restart_probability",
    "maxIterations": "max_iterations",
    "userProfileK": "user_profile_k",
    "graphWeight": "graph_weight",
    "semanticWeight": "semantic_weight",
    "semanticMode": "semantic_mode",
}


class RecommendationConfig(BaseModel):
    """Configuration for one recommendation call."""

    # -------------------------------------------------------------------------
    # Output size
    # -------------------------------------------------------------------------

    # Number of fused results. Single-path services use their own default (10).
    top_n: int = 20

    # -------------------------------------------------------------------------
    # Interaction graph
    # weight = behavior_weight * exp(-lambda_ * age_days)
    # -------------------------------------------------------------------------

    # Time decay per day of borrow age. 0.05 halves a borrow's weight in ~14 days.
    lambda_: float = 0.05
    # Weight of one borrow interaction. Clamped to (0, 1] when building edges.
    behavior_weight: float = 1.0
    # Hop-2 fan-out: co-borrowers expanded per seed book.
    max_co_borrowers_per_book: int = 50
    # Hop-3 fan-out: most recent books pulled in per co-borrower.
    max_books_per_neighbor: int = 50

    # -------------------------------------------------------------------------
    # Personalized PageRank
    # -------------------------------------------------------------------------

    # Probability of teleporting back to the seed user each step.
    restart_probability: float = 0.15
    # Exact number of power iterations. There is no convergence early exit.
    max_iterations: int = 30

    # -------------------------------------------------------------------------
    # Semantic profile
    # -------------------------------------------------------------------------

    # Recent borrows averaged into the plain semantic profile.
    user_profile_k: int = 5
    # Recent borrows used by the time-decayed AI profile.
    ai_profile_k: int = 10

    # -------------------------------------------------------------------------
    # Fusion
    # total = graph_weight * clamp(graph) + semantic_weight * clamp(semantic)
    # -------------------------------------------------------------------------

    graph_weight: float = 0.6
    semantic_weight: float = 0.4
    semantic_mode: SemanticMode = SemanticMode.AI

    # -------------------------------------------------------------------------
    # Trending (cold-start sample source)
    # -------------------------------------------------------------------------

    trending_window_days: int = 30

    @model_validator(mode="before")
    @classmethod
    def substitute_defaults(cls, data: Any) -> Any:
        """Replace missing, non-numeric or out-of-range values with defaults."""
        if not isinstance(data, dict):
            return data
        cleaned: Dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                continue
            check = _VALID.get(key)
            if check is None:
                cleaned[key] = value
                continue
            try:
                number = int(value) if key in _INT_FIELDS else float(value)
            except (TypeError, ValueError):
                logger.warning("[config] INVALID_PARAM key=%s value=%r, using default", key, value)
                continue
            if isinstance(number, float) and not math.isfinite(number):
                logger.warning("[config] INVALID_PARAM key=%s value=%r, using default", key, value)
                continue
            if not check(number):
                logger.warning("[config] OUT_OF_RANGE key=%s value=%r, using default", key, value)
                continue
            cleaned[key] = number
        mode = cleaned.get("semantic_mode")
        if mode is not None and mode not in {m.value for m in SemanticMode} and not isinstance(mode, SemanticMode):
            logger.warning("[config] INVALID_PARAM key=semantic_mode value=%r, using default", mode)
            cleaned.pop("semantic_mode")
        return cleaned

    @classmethod
    def from_dict(cls, config_dict: Dict) -> "RecommendationConfig":
        """Create config from a dict of request params or a nested JSON config."""
        flat: Dict[str, Any] = {}
        for group in ("graph", "ppr", "semantic", "fusion", "trending"):
            if isinstance(config_dict.get(group), dict):
                flat.update(config_dict[group])
        flat.update({k: v for k, v in config_dict.items() if not isinstance(v, dict)})
        renamed = {_ALIASES.get(k, k): v for k, v in flat.items()}
        allowed = set(cls.model_fields)
        return cls.model_validate({k: v for k, v in renamed.items() if k in allowed})

    def merged(self, overrides: Optional[Dict[str, Any]]) -> "RecommendationConfig":
        """Return a copy with request overrides applied (invalid ones ignored)."""
        if not overrides:
            return self
        base = self.model_dump()
        base.update(RecommendationConfig.from_dict(overrides).model_dump(exclude_unset=True))
        return RecommendationConfig.model_validate(base)


DEFAULT_CONFIG = RecommendationConfig()


def resolve_config(config: Optional["RecommendationConfig"]) -> "RecommendationConfig":
    """Return config or DEFAULT_CONFIG when none is provided."""
    return config if config is not None else DEFAULT_CONFIG
