# product_service/api/v1/routers/products.py

from fastapi import APIRouter, Depends, Query, status
from typing import Optional
import time

from product_service.api.deps import category_repo, product_repo
from product_service.api.v1.schemas.products import (
    CartAdditionIn,
    ProductIn,
    ProductUpdate,
    PurchasesUpdateIn,
    RatingIn,
    RatingOut,
)
from product_service.domain.services import product_svc, search_svc
from product_service.domain.services.ratings_svc import update_product_ratings
from product_service.domain.services.trending_svc import get_trending_products

import logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductIn,
    products = Depends(product_repo),
    categories = Depends(category_repo),
):
    """Create a product. `category` is the slug of an existing category."""
    product = await product_svc.create_product(products, categories, body.model_dump())
    return {"success": True, "message": "Product created successfully", "data": product}


@router.get("")
async def list_products(
    category: Optional[str] = Query(None, description="Category id"),
    search: Optional[str] = Query(None, description="Full-text query"),
    products = Depends(product_repo),
):
    items = await product_svc.list_products(products, category_id=category, search=search)
    return {"success": True, "data": items}


@router.get("/search")
async def search(
    q: Optional[str] = Query(None),
    products = Depends(product_repo),
    categories = Depends(category_repo),
):
    """Regex search over product and category names/descriptions (min 2 chars)."""
    t0 = time.perf_counter()
    data = await search_svc.search_catalog(products, categories, q)
    logger.info("Response: search q=%r in %.4fs", q, time.perf_counter() - t0)
    return {"success": True, "data": data}


@router.get("/suggestions")
async def suggestions(
    q: Optional[str] = Query(None),
    products = Depends(product_repo),
    categories = Depends(category_repo),
):
    data = await search_svc.suggest(products, categories, q)
    return {"success": True, "data": data}


@router.get("/trending")
async def trending(
    limit: int = Query(10, ge=1, le=100),
    products = Depends(product_repo),
):
    return await get_trending_products(products, limit)


@router.get("/slug/{slug}")
async def get_by_slug(slug: str, products = Depends(product_repo)):
    return {"success": True, "data": await product_svc.get_product_by_slug(products, slug)}


@router.get("/find/{product_id}")
async def get_by_id(product_id: str, products = Depends(product_repo)):
    return {"success": True, "data": await product_svc.get_product(products, product_id)}


@router.put("/{product_id}")
async def update_product(
    product_id: str,
    body: ProductUpdate,
    products = Depends(product_repo),
    categories = Depends(category_repo),
):
    fields = body.model_dump(exclude_unset=True, exclude_none=True)
    product = await product_svc.update_product(products, categories, product_id, fields)
    return {"success": True, "data": product}


@router.delete("/{product_id}")
async def delete_product(product_id: str, products = Depends(product_repo)):
    await product_svc.delete_product(products, product_id)
    return {"success": True, "message": "Product deleted successfully"}


# ----- Engagement counters ---------------------------------------------------

@router.post("/{product_id}/view")
async def record_view(product_id: str, products = Depends(product_repo)):
    return await product_svc.record_view(products, product_id)


@router.patch("/{product_id}/cart-addition")
async def cart_addition(
    product_id: str,
    body: Optional[CartAdditionIn] = None,
    products = Depends(product_repo),
):
    increment = body.increment if body else 1
    return await product_svc.add_cart_additions(products, product_id, increment)


@router.post("/update-purchases")
async def update_purchases(body: PurchasesUpdateIn, products = Depends(product_repo)):
    result = await product_svc.add_purchases(products, body.product_ids, body.increment)
    return {"success": True, **result}


@router.post("/update-ratings")
async def update_ratings(body: RatingIn, products = Depends(product_repo)):
    """Transactional running-average update. Errors carry an `error_code`."""
    logger.info("Request: update_ratings product_id=%s rating=%s weight=%s", body.product_id, body.rating, body.weight)
    data = await update_product_ratings(products, body.product_id, body.rating, body.weight)
    return {
        "success": True,
        "message": "Product ratings updated successfully",
        "data": RatingOut(**data),
    }
