from fastapi import FastAPI
from app.core.config import get_settings
from app.core.lifespan import lifespan
from app.api.v1.routers.health import router as health_router
from app.api.v1.routers.recommendations import router as recommendations_router
from app.core.logging import configure_logging

from fastapi.middleware.cors import CORSMiddleware
import logging, os

settings = get_settings()
configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# ------- CORS -------
# ALLOWED_ORIGINS is a CSV list, e.g. "https://shop.example.com,https://admin.example.com"
allowed_origins_env = os.getenv("ALLOWED_ORIGINS", "")
allowed_origins = [o.strip() for o in allowed_origins_env.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins or ["http://localhost:3000"],
    allow_credentials=False,                        # keeps preflight simple
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
    max_age=86400,
)

# ------- Routes -------
app.include_router(health_router)
app.include_router(recommendations_router)
