"""
Vector helpers: cosine similarity, dot products and the sigmoid squash.

A dimension mismatch is never an error here: the comparison scores 0 and is
logged, so one bad row cannot sink a whole candidate batch.
"""

import logging
import math
from typing import Sequence, Union

import numpy as np

logger = logging.getLogger(__name__)

VectorLike = Union[Sequence[float], np.ndarray]


def as_vector(v: VectorLike) -> np.ndarray:
    """Float64 1-d array view of a vector."""
    return np.asarray(v, dtype=np.float64).reshape(-1)


def dimensions_match(v1: np.ndarray, v2: np.ndarray) -> bool:
    if v1.shape[0] != v2.shape[0]:
        logger.warning(
            "[embedding] DIM_MISMATCH left=%s right=%s, scoring 0",
            v1.shape[0], v2.shape[0],
        )
        return False
    return True


def cosine_similarity(v1: VectorLike, v2: VectorLike) -> float:
    """Compute cosine similarity between two vectors."""
    a = as_vector(v1)
    b = as_vector(v2)
    if a.size == 0 or b.size == 0 or not dimensions_match(a, b):
        return 0.0
    norm_product = np.linalg.norm(a) * np.linalg.norm(b)
    if norm_product == 0:
        return 0.0
    # rounding can push |cos| a hair past 1
    return float(np.clip(np.dot(a, b) / norm_product, -1.0, 1.0))


def dot_product(v1: VectorLike, v2: VectorLike) -> float:
    a = as_vector(v1)
    b = as_vector(v2)
    if not dimensions_match(a, b):
        return 0.0
    return float(np.dot(a, b))


def sigmoid(x: float) -> float:
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)
