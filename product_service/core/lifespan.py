# product_service/core/lifespan.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from product_service.db import mongo, redis as r
from product_service.db.indexes import ensure_indexes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    await mongo.connect()
    try:
        await ensure_indexes(mongo.get_db())
    except Exception as e:
        # unique slug index matters; surface it but keep serving reads
        logger.error("Index creation failed: %s", e)

    # Redis optional
    await r.connect()

    yield

    # --- Shutdown ---
    await r.disconnect()
    await mongo.disconnect()
    logger.info("Connections closed")
