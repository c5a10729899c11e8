import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from product_service.core.exceptions import (
    CategoryNotFoundError,
    InvalidProductIdError,
    InvalidRequestError,
    ProductNotFoundError,
)
from product_service.domain.models.product import Product
from product_service.utils.ids import is_valid_id

logger = logging.getLogger(__name__)


def _require_id(product_id: str) -> None:
    if not is_valid_id(product_id):
        raise InvalidProductIdError(product_id)


async def create_product(products, categories, data: Dict[str, Any]) -> Product:
    """
    Create a product. `data["category"]` is a category slug; it is resolved to
    the category id before insert.
    """
    category_slug = data["category"]
    category = await categories.get_by_slug(category_slug)
    if category is None:
        raise CategoryNotFoundError(category_slug, available=await categories.list_summaries())

    product = await products.create({**data, "category": category.id})
    logger.info("product created id=%s slug=%s category=%s", product.id, product.slug, category.slug)
    return product


async def list_products(products, category_id: Optional[str] = None, search: Optional[str] = None) -> List[Product]:
    items = await products.list(category_id=category_id, search=search)
    logger.info("products list category=%s search=%s items=%s", category_id, search, len(items))
    return items


async def get_product(products, product_id: str) -> Product:
    _require_id(product_id)
    product = await products.get_by_id(product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return product


async def get_product_by_slug(products, slug: str) -> Product:
    product = await products.get_by_slug(slug)
    if product is None:
        raise ProductNotFoundError(slug)
    return product


async def list_category_products(products, categories, slug: str) -> List[Product]:
    category = await categories.get_by_slug(slug)
    if category is None:
        raise CategoryNotFoundError(slug)
    return await products.list(category_id=category.id)


async def update_product(products, categories, product_id: str, fields: Dict[str, Any]) -> Product:
    _require_id(product_id)
    if not fields:
        raise InvalidRequestError("No fields to update")
    changes = dict(fields)
    if "category" in changes:
        category = await categories.get_by_slug(changes["category"])
        if category is None:
            raise CategoryNotFoundError(changes["category"], available=await categories.list_summaries())
        changes["category"] = category.id
    product = await products.update(product_id, changes)
    if product is None:
        raise ProductNotFoundError(product_id)
    logger.info("product updated id=%s fields=%s", product_id, sorted(changes))
    return product


async def delete_product(products, product_id: str) -> None:
    _require_id(product_id)
    if not await products.delete(product_id):
        raise ProductNotFoundError(product_id)
    logger.info("product deleted id=%s", product_id)


# ----- Engagement counters ---------------------------------------------------

async def record_view(products, product_id: str) -> Product:
    _require_id(product_id)
    product = await products.record_view(product_id, datetime.now(timezone.utc))
    if product is None:
        raise ProductNotFoundError(product_id)
    return product


async def add_cart_additions(products, product_id: str, increment: int = 1) -> Product:
    _require_id(product_id)
    product = await products.add_cart_additions(product_id, increment)
    if product is None:
        raise ProductNotFoundError(product_id)
    return product


async def add_purchases(products, product_ids: Iterable[str], increment: int = 1) -> Dict[str, int]:
    ids = list(product_ids)
    bad = [pid for pid in ids if not is_valid_id(pid)]
    if not ids or bad:
        raise InvalidRequestError("Invalid product IDs", details={"invalid": bad})
    matched, modified = await products.add_purchases(ids, increment)
    logger.info("purchases updated requested=%s matched=%s modified=%s", len(ids), matched, modified)
    return {"matched": matched, "modified": modified}
