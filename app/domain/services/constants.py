# Constants for the purchase-history recommendation pipeline.
MAX_RECOMMENDATIONS = 5  # Final list cap (AI path, backfill and fallback)
PROMPT_TOP_CATEGORIES = 3  # Categories shown to the LLM

# Confidence scorer weights (sum to 1.0)
WEIGHT_CATEGORY_MATCH = 0.35
WEIGHT_PRICE_MATCH = 0.25
WEIGHT_RATING_MATCH = 0.20
WEIGHT_PURCHASE_FREQUENCY = 0.15
WEIGHT_RECENCY = 0.05

# No per-category purchase timestamps are tracked, recency is a fixed sub-score
RECENCY_SCORE = 0.8

# Sub-score used when there is nothing to normalise against
NEUTRAL_SCORE = 0.5

MAX_RATING = 5.0

# Confidence is remapped into [MIN_CONFIDENCE, MAX_CONFIDENCE]
MIN_CONFIDENCE = 0.5
MAX_CONFIDENCE = 1.0

# Relevance labels returned by the LLM
RELEVANCE_HIGH = "high"
RELEVANCE_MEDIUM = "medium"
RELEVANCE_LOW = "low"

RELEVANCE_MULTIPLIERS = {
    RELEVANCE_HIGH: 1.2,
    RELEVANCE_MEDIUM: 1.0,
    RELEVANCE_LOW: 0.8,
}

# Reason generator: price fits when within this share of the observed range width
PRICE_FIT_TOLERANCE = 0.2
