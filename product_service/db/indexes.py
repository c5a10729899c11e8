# product_service/db/indexes.py
import logging
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, TEXT

logger = logging.getLogger(__name__)


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Idempotent; safe to run on every startup."""
    products = db["products"]
    await products.create_index([("slug", ASCENDING)], unique=True)
    await products.create_index([("category", ASCENDING)])
    await products.create_index(
        [("name", TEXT), ("description", TEXT), ("material", TEXT), ("fit", TEXT)],
        weights={"name": 5, "description": 1, "material": 2, "fit": 2},
        name="product_text_search",
    )

    categories = db["categories"]
    await categories.create_index([("slug", ASCENDING)], unique=True)
    await categories.create_index([("parent", ASCENDING)])

    interactions = db["interactions"]
    await interactions.create_index([("user", ASCENDING), ("type", ASCENDING)])
    await interactions.create_index([("product", ASCENDING), ("type", ASCENDING)])
    await interactions.create_index([("created_at", DESCENDING)])

    logger.info("Mongo indexes ensured")
