# app/domain/services/scoring.py
"""
Deterministic confidence scorer.

Used to rank AI suggestions (after the relevance multiplier), the no-AI
fallback list and the backfill candidates.
"""
from typing import Dict, Optional

from app.domain.models.product import ProductFeature
from app.domain.models.profile import PreferenceProfile
from app.domain.services.constants import (
    MAX_CONFIDENCE,
    MAX_RATING,
    MIN_CONFIDENCE,
    NEUTRAL_SCORE,
    RECENCY_SCORE,
    RELEVANCE_MULTIPLIERS,
    WEIGHT_CATEGORY_MATCH,
    WEIGHT_PRICE_MATCH,
    WEIGHT_PURCHASE_FREQUENCY,
    WEIGHT_RATING_MATCH,
    WEIGHT_RECENCY,
)

CategoryWeightMap = Dict[str, int]


def _clamp(value: float, low: float = MIN_CONFIDENCE, high: float = MAX_CONFIDENCE) -> float:
    return min(high, max(low, value))


def category_match_score(product: ProductFeature, weights: CategoryWeightMap) -> float:
    max_weight = max(weights.values(), default=0)
    if max_weight <= 0:
        return NEUTRAL_SCORE
    return weights.get(product.category, 0) / max_weight


def price_match_score(product: ProductFeature, profile: PreferenceProfile) -> float:
    price_range = profile.price_range
    diff = abs(product.price - price_range.midpoint)
    return max(0.0, 1 - diff / max(1.0, price_range.width))


def rating_match_score(product: ProductFeature, profile: PreferenceProfile) -> float:
    diff = abs(product.rating - profile.average_rating)
    return max(0.0, 1 - diff / MAX_RATING)


def purchase_frequency_score(product: ProductFeature, weights: CategoryWeightMap) -> float:
    total = sum(weights.values())
    if total <= 0:
        return NEUTRAL_SCORE
    return weights.get(product.category, 0) / total


def confidence_score(
    product: ProductFeature,
    profile: PreferenceProfile,
    weights: CategoryWeightMap,
) -> float:
    """
    Weighted sum of the five sub-scores, remapped from [0, 1] to [0.5, 1.0].
    """
    weighted = (
        WEIGHT_CATEGORY_MATCH * category_match_score(product, weights)
        + WEIGHT_PRICE_MATCH * price_match_score(product, profile)
        + WEIGHT_RATING_MATCH * rating_match_score(product, profile)
        + WEIGHT_PURCHASE_FREQUENCY * purchase_frequency_score(product, weights)
        + WEIGHT_RECENCY * RECENCY_SCORE
    )
    # float noise on the weight sum can push past 1.0
    return _clamp(MIN_CONFIDENCE + weighted * 0.5)


def relevance_multiplier(relevance: Optional[str]) -> float:
    return RELEVANCE_MULTIPLIERS.get((relevance or "").strip().lower(), 1.0)


def adjust_for_relevance(score: float, relevance: Optional[str]) -> float:
    """Apply the LLM relevance multiplier and clamp back into [0.5, 1.0]."""
    return _clamp(score * relevance_multiplier(relevance))
