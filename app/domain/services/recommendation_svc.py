import logging
import time
from typing import Dict, List, Optional, Protocol, Sequence

from app.domain.models.product import ProductFeature, Recommendation
from app.domain.models.profile import PreferenceProfile
from app.domain.models.purchase import PurchaseRecord
from app.domain.services.candidates_svc import select_candidates
from app.domain.services.constants import MAX_RECOMMENDATIONS
from app.domain.services.decoder import DecodeFailure, DecodedSuggestions, decode_suggestions
from app.domain.services.fallback import assemble, backfill, fallback_rank, to_recommendation
from app.domain.services.profile_svc import build_preference_profile, category_weights, purchased_product_ids
from app.domain.services.prompts import build_recommendation_request
from app.domain.services.scoring import CategoryWeightMap, adjust_for_relevance, confidence_score

logger = logging.getLogger(__name__)


class PurchaseHistoryReader(Protocol):
    async def fetch_history(self, user_id: str) -> List[PurchaseRecord]: ...


class CatalogReader(Protocol):
    async def fetch_all_products(self) -> List[ProductFeature]: ...


class InferenceClient(Protocol):
    async def infer(self, request_text: str) -> str: ...


def rank_ai_suggestions(
    decoded: DecodedSuggestions,
    candidates: Sequence[ProductFeature],
    profile: PreferenceProfile,
    weights: CategoryWeightMap,
) -> List[Recommendation]:
    """
    Score the LLM picks (relevance-adjusted), keep the best MAX_RECOMMENDATIONS,
    then backfill from the untouched candidates.
    """
    by_id: Dict[str, ProductFeature] = {p.product_id: p for p in candidates}
    picked: List[Recommendation] = []
    for s in decoded.entries:
        product = by_id.get(s.product_id)
        if product is None:
            continue
        try:
            confidence = adjust_for_relevance(confidence_score(product, profile, weights), s.relevance)
            picked.append(
                to_recommendation(product, profile, weights, confidence=confidence, explanation=s.explanation)
            )
        except (ArithmeticError, TypeError, ValueError) as e:
            logger.warning("skipping AI suggestion product_id=%s: %s", s.product_id, e)
    picked.sort(key=lambda r: r.confidence, reverse=True)
    picked = picked[:MAX_RECOMMENDATIONS]
    return assemble(backfill(picked, candidates, profile, weights))


class RecommendationEngine:
    """
    Purchase-history recommender: LLM ranking with a deterministic fallback.

    Stateless per call: profile, weights and candidates are rebuilt from the
    readers every time, and nothing is written anywhere.
    """

    def __init__(
        self,
        history_reader: PurchaseHistoryReader,
        catalog_reader: CatalogReader,
        inference: Optional[InferenceClient] = None,
    ):
        self.history_reader = history_reader
        self.catalog_reader = catalog_reader
        self.inference = inference

    async def generate_recommendations(self, user_id: str, *, use_llm: bool = True) -> List[Recommendation]:
        """
        End-to-end flow:
          1) Load history; no history -> [] (catalog and LLM untouched).
          2) Load catalog; empty catalog -> CatalogEmptyError.
          3) Drop already-purchased products; nothing left -> [].
          4) Build the preference profile and category weights.
          5) Ask the LLM (single attempt) and decode its reply.
          6) Usable reply -> AI ranking + backfill; otherwise fallback ranking.
        """
        t0 = time.perf_counter()
        logger.info(f"Starting recommendations: user_id={user_id}, use_llm={use_llm}")

        # ---- 1) History ------------------------------------------------------
        history = await self.history_reader.fetch_history(user_id)
        profile = build_preference_profile(history)
        if profile is None:
            logger.info(f"No purchase history for user_id={user_id}")
            return []

        # ---- 2-3) Catalog & candidates ----------------------------------------
        catalog = await self.catalog_reader.fetch_all_products()
        candidates = select_candidates(catalog, purchased_product_ids(history))
        if not candidates:
            logger.info(f"No candidates left for user_id={user_id} (catalog={len(catalog)})")
            return []

        # ---- 4) Request-scoped weights -----------------------------------------
        weights = category_weights(profile)

        # ---- 5-6) LLM or fallback ----------------------------------------------
        items: Optional[List[Recommendation]] = None
        if use_llm and self.inference is not None:
            items = await self._ai_recommendations(user_id, profile, candidates, weights)
        if items is None:
            items = assemble(fallback_rank(profile, candidates, weights))
            logger.info(f"Fallback ranking used for user_id={user_id}, items={len(items)}")

        dt = time.perf_counter() - t0
        logger.info(f"Recommendations done user_id={user_id}, items={len(items)}, time={dt:.3f}s")
        return items

    async def _ai_recommendations(
        self,
        user_id: str,
        profile: PreferenceProfile,
        candidates: Sequence[ProductFeature],
        weights: CategoryWeightMap,
    ) -> Optional[List[Recommendation]]:
        """None means the LLM path is unusable and the caller must fall back."""
        request_text = build_recommendation_request(profile, candidates)
        try:
            raw = await self.inference.infer(request_text)
        except Exception as e:
            # Any upstream failure (transport, timeout, empty reply) -> fallback, no retry
            logger.error(f"LLM call failed for user_id={user_id}: {e}")
            return None

        decoded = decode_suggestions(raw, [p.product_id for p in candidates])
        if isinstance(decoded, DecodeFailure):
            logger.warning(f"LLM reply unusable for user_id={user_id}: {decoded.reason}")
            return None

        items = rank_ai_suggestions(decoded, candidates, profile, weights)
        logger.info(f"LLM ranking applied for user_id={user_id}, suggested={len(decoded.entries)}, items={len(items)}")
        return items
