"""
Deep-match heuristics.

Hand-tuned values, not learned parameters. Kept in one place so they can be
moved into RecommendationConfig later without touching the scorer.
TODO: expose these through RecommendationConfig once product signs off on tuning them.
"""

# match = sigmoid(REBIAS_SCALE * (w_cos*cos + w_cat*cat + w_deep*deep) + REBIAS_SHIFT)
COSINE_WEIGHT = 0.5
CATEGORY_WEIGHT = 0.2
DEEP_INTERACTION_WEIGHT = 0.3
REBIAS_SCALE = 2.0
REBIAS_SHIFT = -1.0

# category_match
CATEGORY_HIT = 1.0
CATEGORY_MISS = 0.3
CATEGORY_UNKNOWN = 0.5

# diversity_boost
DIVERSITY_NEW_CATEGORY = 0.15
DIVERSITY_NO_HISTORY = 0.1

# candidate sample = CANDIDATE_MULTIPLIER * top_n catalog books
CANDIDATE_MULTIPLIER = 5
# semantic recall over-fetches before filtering borrowed/unavailable books
RECALL_OVERFETCH = 2

# AI reason thresholds
STRONG_MATCH = 0.8
GOOD_MATCH = 0.6

TOP_CATEGORY_COUNT = 3
RECENCY_HORIZON_DAYS = 180.0
RECENCY_FLOOR = 0.1
