# app/domain/services/fallback.py
import logging
from typing import Iterable, List, Optional, Sequence

from app.domain.models.product import ProductFeature, Recommendation
from app.domain.models.profile import PreferenceProfile
from app.domain.services.constants import MAX_RECOMMENDATIONS
from app.domain.services.reasons import generate_reasons
from app.domain.services.scoring import CategoryWeightMap, confidence_score

logger = logging.getLogger(__name__)


def to_recommendation(
    product: ProductFeature,
    profile: PreferenceProfile,
    weights: CategoryWeightMap,
    *,
    confidence: Optional[float] = None,
    explanation: Optional[str] = None,
) -> Recommendation:
    """Score (unless a confidence is given) and attach reasons."""
    if confidence is None:
        confidence = confidence_score(product, profile, weights)
    return Recommendation(
        product_id=product.product_id,
        name=product.name,
        category=product.category,
        price=product.price,
        rating=product.rating,
        confidence=confidence,
        reasons=generate_reasons(product, profile, weights, explanation),
    )


def _score_all(
    products: Iterable[ProductFeature],
    profile: PreferenceProfile,
    weights: CategoryWeightMap,
) -> List[Recommendation]:
    # One bad product must not sink the whole list
    out: List[Recommendation] = []
    for p in products:
        try:
            out.append(to_recommendation(p, profile, weights))
        except (ArithmeticError, TypeError, ValueError) as e:
            logger.warning("skipping product_id=%s during scoring: %s", p.product_id, e)
    return out


def fallback_rank(
    profile: PreferenceProfile,
    candidates: Sequence[ProductFeature],
    weights: CategoryWeightMap,
    limit: int = MAX_RECOMMENDATIONS,
) -> List[Recommendation]:
    """
    Deterministic ranking used when the LLM is unusable.

    Keeps candidates from categories the user bought, priced inside the observed
    range; sorts by confidence desc, then category weight desc.
    """
    eligible = [
        p for p in candidates
        if weights.get(p.category, 0) > 0 and profile.price_range.contains(p.price)
    ]
    scored = _score_all(eligible, profile, weights)
    scored.sort(key=lambda r: (-r.confidence, -weights.get(r.category, 0)))
    logger.debug("fallback eligible=%s/%s returned=%s", len(eligible), len(candidates), min(limit, len(scored)))
    return scored[:limit]


def backfill(
    selected: Sequence[Recommendation],
    candidates: Sequence[ProductFeature],
    profile: PreferenceProfile,
    weights: CategoryWeightMap,
    limit: int = MAX_RECOMMENDATIONS,
) -> List[Recommendation]:
    """
    Pad an AI-derived list up to `limit` with raw-confidence picks from the
    candidates not already selected. No relevance multiplier here.
    """
    missing = limit - len(selected)
    if missing <= 0:
        return list(selected)
    used = {r.product_id for r in selected}
    extra = _score_all((p for p in candidates if p.product_id not in used), profile, weights)
    extra.sort(key=lambda r: r.confidence, reverse=True)
    logger.debug("backfill selected=%s added=%s", len(selected), min(missing, len(extra)))
    return list(selected) + extra[:missing]


def assemble(recommendations: Iterable[Recommendation], limit: int = MAX_RECOMMENDATIONS) -> List[Recommendation]:
    """Final list: first occurrence per product id, stable sort by confidence desc, capped."""
    seen: set = set()
    unique: List[Recommendation] = []
    for r in recommendations:
        if r.product_id in seen:
            continue
        seen.add(r.product_id)
        unique.append(r)
    unique.sort(key=lambda r: r.confidence, reverse=True)
    return unique[:limit]
