"""
Score helpers: time decay, clamping and display normalization.
"""

import math
from datetime import datetime, timezone
from typing import List, Optional

# Below this spread a batch is treated as flat for display rescaling.
SCORE_RANGE_EPSILON = 1e-3
DISPLAY_MAX = 10.0
DISPLAY_FLOOR = 0.1


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def days_between(then: datetime, now: Optional[datetime] = None) -> int:
    """Whole days from then to now, never negative. Naive datetimes are taken as UTC."""
    now = now or utc_now()
    if then.tzinfo is None:
        then = then.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return max(0, (now - then).days)


def exponential_decay(age_days: int, lambda_val: float = 0.05) -> float:
    """exp(-lambda * age); 1.0 for a borrow made today."""
    return math.exp(-lambda_val * age_days)


def linear_recency_weight(age_days: int, horizon_days: float = 180.0, floor: float = 0.1) -> float:
    """max(floor, 1 - age/horizon): used by the time-decayed profile."""
    return max(floor, 1.0 - (age_days / horizon_days))


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def normalize_display_scores(scores: List[float]) -> List[float]:
    """
    Rescale a ranked batch into [0, 10] using the batch min/max.

    Flat batches (spread below SCORE_RANGE_EPSILON) use score * 10 with a floor
    of DISPLAY_FLOOR so the display never collapses to all zeros.
    """
    if not scores:
        return []
    high = max(scores)
    low = min(scores)
    spread = high - low
    out = []
    for s in scores:
        if spread > SCORE_RANGE_EPSILON:
            value = (s - low) / spread * DISPLAY_MAX
        else:
            value = max(s * DISPLAY_MAX, DISPLAY_FLOOR)
        out.append(clamp(value, 0.0, DISPLAY_MAX))
    return out
