# product_service/api/v1/routers/categories.py
from fastapi import APIRouter, Depends, status
import logging

from product_service.api.deps import category_repo, product_repo
from product_service.api.v1.schemas.categories import CategoryIn
from product_service.domain.services import category_svc
from product_service.domain.services.product_svc import list_category_products

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("")
async def category_tree(categories = Depends(category_repo)):
    """All categories as a tree (built from a single query)."""
    return {"success": True, "data": await category_svc.get_category_tree(categories)}


@router.get("/slug/{slug}")
async def get_category(slug: str, categories = Depends(category_repo)):
    return {"success": True, "data": await category_svc.get_category(categories, slug)}


@router.get("/{slug}/products")
async def category_products(
    slug: str,
    products = Depends(product_repo),
    categories = Depends(category_repo),
):
    return {"success": True, "data": await list_category_products(products, categories, slug)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_category(body: CategoryIn, categories = Depends(category_repo)):
    created = await category_svc.create_category(
        categories, body.name, body.slug, body.parentslug, body.filters
    )
    return {"success": True, "message": "Category created successfully", "data": created}
