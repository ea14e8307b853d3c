import logging
import math
from typing import Dict, Optional, Sequence, Set

from app.domain.models.profile import PreferenceProfile, PriceRange
from app.domain.models.purchase import PurchaseRecord
from app.domain.services.scoring import CategoryWeightMap

logger = logging.getLogger(__name__)


def build_preference_profile(history: Sequence[PurchaseRecord]) -> Optional[PreferenceProfile]:
    """
    Fold a user's purchase records (newest first) into a PreferenceProfile.
    Returns None when there is no history: callers answer with an empty list.
    """
    if not history:
        return None

    categories: Dict[str, int] = {}
    min_price, max_price = math.inf, 0.0
    rating_sum = 0.0
    rated_count = 0

    for record in history:
        for item in record.items:
            categories[item.category] = categories.get(item.category, 0) + item.quantity
            min_price = min(min_price, item.price)
            max_price = max(max_price, item.price)
            if item.rating is not None:
                rating_sum += item.rating
                rated_count += 1

    profile = PreferenceProfile(
        categories=categories,
        price_range=PriceRange(min=min_price, max=max_price),
        average_rating=rating_sum / rated_count if rated_count else 0.0,
        rated_count=rated_count,
    )
    logger.debug(
        "profile built records=%s categories=%s price=[%s, %s] avg_rating=%.2f rated=%s",
        len(history), categories, min_price, max_price, profile.average_rating, rated_count,
    )
    return profile


def category_weights(profile: PreferenceProfile) -> CategoryWeightMap:
    """Fresh category -> quantity map for the scorer (never shared across requests)."""
    return dict(profile.categories)


def purchased_product_ids(history: Sequence[PurchaseRecord]) -> Set[str]:
    ids = {item.product_id for record in history for item in record.items}
    ids.update(pid for record in history for pid in record.unscored_product_ids)
    return ids
