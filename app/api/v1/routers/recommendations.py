# app/api/v1/routers/recommendations.py
from fastapi import APIRouter, Depends, HTTPException, Query
import time
import logging

from app.api.deps import get_engine
from app.api.v1.schemas.reco import (
    MSG_NO_RECOMMENDATIONS,
    MSG_RECOMMENDATIONS_OK,
    ErrorDetail,
    RecommendationOut,
    RecommendationsOut,
)
from app.core.errors import CatalogEmptyError
from app.domain.services.recommendation_svc import RecommendationEngine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recommendations"])

@router.get(
    "/recommendations/{user_id}",
    response_model=RecommendationsOut,
    responses={404: {"model": ErrorDetail, "description": "Product catalog is empty"}},
)
async def get_recommendations(
    user_id: str,
    use_llm: bool = Query(True, description="Rank with the LLM (falls back to heuristics on failure)"),
    engine: RecommendationEngine = Depends(get_engine),
) -> RecommendationsOut:
    """
    Up to 5 products the user has not bought yet, best first.
    Pipeline: purchase history → preference profile → candidates → LLM rank (or fallback) → backfill.
    """
    logger.info("Request: recommendations user_id=%s, use_llm=%s", user_id, use_llm)
    start_time = time.perf_counter()

    try:
        items = await engine.generate_recommendations(user_id, use_llm=use_llm)
    except CatalogEmptyError as e:
        logger.error("Catalog empty while recommending for user_id=%s", user_id)
        raise HTTPException(
            status_code=404,
            detail=ErrorDetail(message=e.message, errors=e.errors).model_dump(),
        )

    elapsed_time = time.perf_counter() - start_time
    logger.info(
        "Response: recommendations user_id=%s, count=%s, elapsed_time=%.4fs",
        user_id, len(items), elapsed_time,
    )
    return RecommendationsOut(
        recommendations=[RecommendationOut.model_validate(r.model_dump()) for r in items],
        count=len(items),
        message=MSG_RECOMMENDATIONS_OK if items else MSG_NO_RECOMMENDATIONS,
    )
