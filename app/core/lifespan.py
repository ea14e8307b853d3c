# app/core/lifespan.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from app.db import mongo
from app.core.config import get_settings
from app.domain.repositories.product_repo import ProductRepo
from app.domain.repositories.purchase_history_repo import PurchaseHistoryRepo
from app.domain.services.llm_svc import OpenAIInferenceClient
from app.domain.services.recommendation_svc import RecommendationEngine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # --- Startup ---
    # Missing OpenAI key is a ConfigurationError: fail here, not at request time
    inference = OpenAIInferenceClient.from_settings(settings)

    if not settings.MONGO_URI:
        logger.warning("No MONGO_URI provided, skipping Mongo connection")
        yield
        return

    await mongo.connect()
    db = mongo.get_db()
    app.state.engine = RecommendationEngine(
        history_reader=PurchaseHistoryRepo(db, settings.purchase_history_collection),
        catalog_reader=ProductRepo(db, settings.products_collection),
        inference=inference,
    )
    logger.info(f"Recommendation engine ready (model={settings.OPENAI_RECO_MODEL})")

    # Application runs
    try:
        yield
    finally:
        # --- Shutdown ---
        await mongo.disconnect()
        logger.info("Mongo disconnected")
