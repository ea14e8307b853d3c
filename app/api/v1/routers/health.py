# app/api/v1/routers/health.py
import time
import subprocess
from fastapi import APIRouter
from app.core.config import get_settings
from app.db import mongo

router = APIRouter(tags=["health"])
START_TIME = time.time()


def _git_sha(short: bool = True) -> str:
    try:
        cmd = ["git", "rev-parse", "--short" if short else "HEAD"]
        return subprocess.check_output(cmd, stderr=subprocess.DEVNULL).decode().strip()
    except (OSError, subprocess.CalledProcessError):
        return "unknown"


@router.get("/health")
async def health():
    """
    Tolerant health check:
    - ping Mongo via Motor (async)
    - OpenAI: only checks that the key is set
    - exposes basic app info + global status
    """
    settings = get_settings()
    checks: dict[str, object] = {
        "app_name": settings.APP_NAME,
        "env": settings.APP_ENV,
        "debug": settings.DEBUG,
        "version": settings.GIT_SHA if settings.GIT_SHA != "unknown" else _git_sha(),
        "uptime_seconds": int(time.time() - START_TIME),
    }

    # --- Mongo ---
    try:
        db = mongo.get_db()
        await db.command("ping")
        checks["mongodb"] = "ok"
    except Exception as e:
        checks["mongodb"] = f"error: {e}"

    checks["openai_api_key_set"] = bool(settings.OPENAI_API_KEY)

    # --- Global status: only real health checks count
    def _is_ok(v):
        return v == "ok" or v is True

    health_keys = ("mongodb", "openai_api_key_set")
    status = "ok" if all(_is_ok(checks.get(k)) for k in health_keys) else "error"

    return {"status": status, "checks": checks, "timestamp": int(time.time())}
