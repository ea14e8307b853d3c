# app/api/deps.py
from fastapi import HTTPException, Request
from app.domain.services.recommendation_svc import RecommendationEngine

# Dependency for injecting the recommendation engine built at startup (see core/lifespan.py)
def get_engine(request: Request) -> RecommendationEngine:
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Recommendation engine not initialized")
    return engine
