import logging
import time
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from product_service.core.config import get_settings
from product_service.domain.models.product import Product
from product_service.domain.services.constants import DEFAULT_LIMIT, POPULARITY_INTERACTION_TYPES
from product_service.utils.cache import cache_get, cache_key, cache_set

logger = logging.getLogger(__name__)


async def get_popular_products(
    interactions,
    limit: int = DEFAULT_LIMIT,
    *,
    redis=None,
    window_days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[Product]:
    """
    Products ranked by view + purchase interactions over the last `window_days`.
    Only products with at least one qualifying interaction are returned; there
    is no backfill when fewer than `limit` qualify.

    When a Redis client is given the ranked list is cached for
    `POPULARITY_CACHE_TTL` seconds. Cache errors never fail the call.
    """
    start_time = time.perf_counter()
    settings = get_settings()
    window_days = window_days if window_days is not None else settings.POPULARITY_WINDOW_DAYS
    key = cache_key("popular", f"{window_days}d", limit)

    if redis is not None:
        try:
            cached = await cache_get(redis, key)
        except Exception as e:
            logger.warning("popular redis.get error key=%s err=%s", key, e)
            cached = None
        if cached is not None:
            logger.info("popular cache_hit key=%s items=%s", key, len(cached))
            return [Product.model_validate(doc) for doc in cached]
        logger.info("popular cache_miss key=%s", key)

    since = (now or datetime.now(timezone.utc)) - timedelta(days=window_days)
    db_t0 = time.perf_counter()
    items = await interactions.most_engaged_products(POPULARITY_INTERACTION_TYPES, since, limit)
    logger.info("popular db_ok items=%s db_time=%.3fs", len(items), time.perf_counter() - db_t0)

    if redis is not None:
        try:
            await cache_set(
                redis, key, [p.model_dump(mode="json") for p in items], ex=settings.POPULARITY_CACHE_TTL
            )
        except Exception as e:
            logger.warning("popular redis.set error key=%s err=%s", key, e)

    logger.info("popular done items=%s total_time=%.3fs", len(items), time.perf_counter() - start_time)
    return items
