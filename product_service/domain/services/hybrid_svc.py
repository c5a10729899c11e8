import logging
import time
from typing import List, Optional

from product_service.domain.models.product import RecommendationResult, ScoredProduct
from product_service.domain.services.constants import (
    DEFAULT_LIMIT,
    POPULARITY_SCORE,
    SIMILARITY_BLEND,
    SOURCE_POPULARITY,
    SOURCE_SIMILARITY,
)
from product_service.domain.services.popularity_svc import get_popular_products
from product_service.domain.services.similarity_svc import get_similar_products

logger = logging.getLogger(__name__)


def merge_candidates(candidates: List[ScoredProduct], limit: int) -> List[ScoredProduct]:
    """
    Drop repeated products (first occurrence wins), then sort by score
    descending and keep `limit`. Ties keep their input order.
    """
    seen = set()
    unique: List[ScoredProduct] = []
    for item in candidates:
        if item.product.id in seen:
            continue
        seen.add(item.product.id)
        unique.append(item)
    return sorted(unique, key=lambda s: s.score, reverse=True)[:limit]


class HybridRecommendationService:
    """
    Blends content similarity and popularity into one ranked list.

    Repositories are injected so the service can run against Mongo in the app
    and against in-memory fakes in tests.
    """

    def __init__(self, products, interactions, redis=None):
        self.products = products
        self.interactions = interactions
        self.redis = redis

    async def _popular(self, limit: int) -> List[ScoredProduct]:
        popular = await get_popular_products(self.interactions, limit, redis=self.redis)
        return [ScoredProduct(product=p, score=POPULARITY_SCORE, source=SOURCE_POPULARITY) for p in popular]

    async def get_hybrid_recommendations(
        self,
        product_id: Optional[str] = None,
        limit: int = DEFAULT_LIMIT,
    ) -> RecommendationResult:
        """
        1) similar products (when product_id is given), score * 0.7
        2) popular products, flat 0.3
        3) concatenate, dedupe (similarity first, so it wins), sort, truncate.
        Any failure degrades to popularity only; the result says so.
        """
        t0 = time.perf_counter()
        logger.info("hybrid start product_id=%s limit=%s", product_id, limit)
        try:
            candidates: List[ScoredProduct] = []
            if product_id:
                similar = await get_similar_products(self.products, product_id)
                candidates += [
                    ScoredProduct(product=s.product, score=s.score * SIMILARITY_BLEND, source=SOURCE_SIMILARITY)
                    for s in similar
                ]
            candidates += await self._popular(limit)
            items = merge_candidates(candidates, limit)
        except Exception as e:
            logger.exception("hybrid failed product_id=%s, falling back to popularity", product_id)
            fallback = await self._popular(limit)
            return RecommendationResult(
                status="degraded",
                items=fallback,
                fallback_reason=f"{type(e).__name__}: {e}",
            )

        logger.info(
            "hybrid done product_id=%s items=%s time=%.3fs",
            product_id, len(items), time.perf_counter() - t0,
        )
        return RecommendationResult(items=items)

    async def get_personalized_recommendations(
        self,
        user_id: str,
        limit: int = DEFAULT_LIMIT,
    ) -> RecommendationResult:
        # The user's history is not used yet; same result as the anonymous call.
        logger.info("personalized user_id=%s delegating to anonymous hybrid", user_id)
        return await self.get_hybrid_recommendations(None, limit)
