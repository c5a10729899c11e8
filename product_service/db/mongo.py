# product_service/db/mongo.py
import logging
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from product_service.core.config import get_settings
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


def _new_client() -> AsyncIOMotorClient:
    settings = get_settings()
    tls_opts = {"tls": True, "tlsCAFile": certifi.where()} if settings.MONGO_TLS else {}
    return AsyncIOMotorClient(
        settings.MONGO_URI,
        uuidRepresentation="standard",
        tz_aware=True,                          # datetimes come back as UTC-aware
        serverSelectionTimeoutMS=6000,
        connectTimeoutMS=6000,
        **tls_opts,
    )


async def connect():
    """
    Create the Motor client and ping the server.
    A failed ping is logged but not fatal: the client connects lazily, so
    requests succeed as soon as the server becomes reachable.
    """
    global _client, _db
    settings = get_settings()

    _client = _new_client()
    _db = _client[settings.MONGO_DB]
    try:
        await _client.admin.command("ping")
        logger.info("Mongo connected (ping ok) db=%s", settings.MONGO_DB)
    except Exception as e:
        logger.warning("Mongo ping at startup failed, will connect lazily: %s", e)


async def disconnect():
    global _client, _db
    if _client:
        _client.close()
    _client = None
    _db = None
