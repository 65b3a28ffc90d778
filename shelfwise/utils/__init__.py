"""Shared utilities for similarity, scoring and deadlines."""

from .deadline import Deadline, resolve_deadline
from .scores import (
    clamp,
    days_between,
    exponential_decay,
    linear_recency_weight,
    normalize_display_scores,
    utc_now,
)
from .similarity import as_vector, cosine_similarity, dot_product, sigmoid

__all__ = [
    "Deadline",
    "as_vector",
    "clamp",
    "cosine_similarity",
    "days_between",
    "dot_product",
    "exponential_decay",
    "linear_recency_weight",
    "normalize_display_scores",
    "resolve_deadline",
    "sigmoid",
    "utc_now",
]
