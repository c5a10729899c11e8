# product_service/api/v1/routers/recommendations.py
from fastapi import APIRouter, Depends, Query, Response
from typing import List, Optional
import time
import logging

from product_service.api.deps import product_repo, recommendation_service
from product_service.domain.models.product import Product, RecommendationResult
from product_service.domain.services.constants import DEFAULT_LIMIT
from product_service.domain.services.similarity_svc import get_similar_products

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["recommendations"])

STATUS_HEADER = "X-Recommendation-Status"


def _products(res: RecommendationResult, response: Response) -> List[Product]:
    response.headers[STATUS_HEADER] = res.status
    if res.degraded:
        logger.warning("Response: degraded recommendations reason=%s", res.fallback_reason)
    return res.products


@router.get("/recommendations", response_model=List[Product])
async def homepage_recommendations(
    response: Response,
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=50),
    svc = Depends(recommendation_service),
):
    """Popularity-only recommendations (no source product)."""
    res = await svc.get_hybrid_recommendations(None, limit)
    return _products(res, response)


@router.get("/recommendations/users/{user_id}", response_model=List[Product])
async def user_recommendations(
    user_id: str,
    response: Response,
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=50),
    svc = Depends(recommendation_service),
):
    res = await svc.get_personalized_recommendations(user_id, limit)
    return _products(res, response)


@router.get("/recommendations/{product_id}", response_model=List[Product])
async def product_page_recommendations(
    product_id: str,
    response: Response,
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=50),
    svc = Depends(recommendation_service),
):
    """Similar + popular products for a product page, deduplicated and ranked."""
    t0 = time.perf_counter()
    res = await svc.get_hybrid_recommendations(product_id, limit)
    logger.info(
        "Response: recommendations product_id=%s status=%s count=%s elapsed_time=%.4fs",
        product_id, res.status, len(res.items), time.perf_counter() - t0,
    )
    return _products(res, response)


@router.get("/{product_id}/similar")
async def similar_products(
    product_id: str,
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=50),
    w_category: Optional[float] = Query(None, ge=0, le=1),
    w_material: Optional[float] = Query(None, ge=0, le=1),
    w_price: Optional[float] = Query(None, ge=0, le=1),
    w_colors: Optional[float] = Query(None, ge=0, le=1),
    products = Depends(product_repo),
):
    """Content-similar products with their scores. Unknown product -> empty list."""
    weights = {"category": w_category, "material": w_material, "price": w_price, "colors": w_colors}
    items = await get_similar_products(products, product_id, weights, limit)
    return {"source_product_id": product_id, "items": items, "count": len(items)}
