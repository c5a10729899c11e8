import logging
from typing import Any, Dict, Optional

from product_service.core.exceptions import InvalidRequestError
from product_service.domain.services.constants import (
    SEARCH_CATEGORY_LIMIT,
    SEARCH_MIN_QUERY_LEN,
    SEARCH_PRODUCT_LIMIT,
    SUGGEST_CATEGORY_LIMIT,
    SUGGEST_PRODUCT_LIMIT,
)

logger = logging.getLogger(__name__)


def _clean(q: Optional[str]) -> Optional[str]:
    q = (q or "").strip()
    return q if len(q) >= SEARCH_MIN_QUERY_LEN else None


async def search_catalog(products, categories, q: Optional[str]) -> Dict[str, Any]:
    """Case-insensitive literal match on names/descriptions of products and categories."""
    term = _clean(q)
    if term is None:
        raise InvalidRequestError(f"Search query must be at least {SEARCH_MIN_QUERY_LEN} characters long")

    found_products = await products.search_text(term, SEARCH_PRODUCT_LIMIT)
    found_categories = await categories.search_text(term, SEARCH_CATEGORY_LIMIT)
    logger.info("search q=%r products=%s categories=%s", term, len(found_products), len(found_categories))
    return {
        "products": found_products,
        "categories": found_categories,
        "meta": {
            "product_count": len(found_products),
            "category_count": len(found_categories),
        },
    }


async def suggest(products, categories, q: Optional[str]) -> Dict[str, Any]:
    """Type-ahead on names. Short queries yield empty lists, not an error."""
    term = _clean(q)
    if term is None:
        return {"products": [], "categories": []}
    return {
        "products": await products.suggest_by_name(term, SUGGEST_PRODUCT_LIMIT),
        "categories": await categories.suggest_by_name(term, SUGGEST_CATEGORY_LIMIT),
    }
