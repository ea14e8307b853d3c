from typing import List, Optional

from app.domain.models.product import ProductFeature
from app.domain.models.profile import PreferenceProfile
from app.domain.services.constants import PRICE_FIT_TOLERANCE
from app.domain.services.scoring import CategoryWeightMap


def generate_reasons(
    product: ProductFeature,
    profile: PreferenceProfile,
    weights: CategoryWeightMap,
    explanation: Optional[str] = None,
) -> List[str]:
    """
    Human-readable reasons for a recommendation.
    The LLM explanation, if any, goes after the generated ones.
    """
    reasons: List[str] = []

    if weights.get(product.category, 0) > 0:
        reasons.append(f"Matches your {product.category} category preference")

    price_range = profile.price_range
    if abs(product.price - price_range.midpoint) <= price_range.width * PRICE_FIT_TOLERANCE:
        reasons.append("Price matches your typical purchase range")

    if product.rating >= profile.average_rating:
        reasons.append("High-rated product matching your preferences")

    if explanation and explanation.strip():
        reasons.append(explanation.strip())
    return reasons
