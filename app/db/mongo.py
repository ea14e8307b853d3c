# app/db/mongo.py
import logging
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from app.core.config import get_settings
import certifi

logger = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None
_db: AsyncIOMotorDatabase | None = None


def get_client() -> AsyncIOMotorClient:
    assert _client is not None, "Mongo client not initialized"
    return _client


def get_db() -> AsyncIOMotorDatabase:
    assert _db is not None, "Mongo DB not initialized"
    return _db


async def connect():
    """
    Create Motor client with explicit CA bundle.
    A failed startup ping does not crash the app: the client stays lazy and
    the first real query retries the connection.
    """
    global _client, _db
    settings = get_settings()

    def _new_client() -> AsyncIOMotorClient:
        return AsyncIOMotorClient(
            settings.MONGO_URI,                 # e.g. mongodb+srv://.../...
            tls=settings.MONGO_URI.startswith("mongodb+srv"),
            tlsCAFile=certifi.where(),          # critical on containers
            uuidRepresentation="standard",
            serverSelectionTimeoutMS=6000,
            connectTimeoutMS=6000,
        )

    try:
        _client = _new_client()
        _db = _client[settings.MONGO_DB]
        await _client.admin.command("ping")
        logger.info("Mongo connected (ping ok)")
    except Exception as e:
        logger.warning(f"Mongo ping at startup failed: {e}; will attempt lazy connection on first query")


async def disconnect():
    global _client, _db
    if _client:
        _client.close()
    _client = None
    _db = None
