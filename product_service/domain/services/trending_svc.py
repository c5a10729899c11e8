import logging
import time
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from product_service.core.config import get_settings
from product_service.domain.models.product import TrendingProduct

logger = logging.getLogger(__name__)


async def get_trending_products(products, limit: int = 10, now: Optional[datetime] = None) -> List[TrendingProduct]:
    """Products ranked by the engagement score computed in `trending_pipeline`."""
    t0 = time.perf_counter()
    recent_since = (now or datetime.now(timezone.utc)) - timedelta(days=get_settings().TRENDING_RECENT_DAYS)
    items = await products.trending(limit, recent_since)
    logger.info("trending done items=%s time=%.3fs", len(items), time.perf_counter() - t0)
    return items
