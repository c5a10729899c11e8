# product_service/api/v1/routers/interactions.py
from fastapi import APIRouter, Depends, status
import logging

from product_service.api.deps import interaction_repo, product_repo
from product_service.api.v1.schemas.interactions import InteractionIn
from product_service.domain.services.interaction_svc import record_interaction

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/interactions", tags=["interactions"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_interaction(
    body: InteractionIn,
    products = Depends(product_repo),
    interactions = Depends(interaction_repo),
):
    """Append a user action (view/cart/purchase/wishlist) to the interaction log."""
    entry = await record_interaction(
        products,
        interactions,
        user_id=body.user_id,
        product_id=body.product_id,
        interaction_type=body.type,
        metadata=body.metadata.model_dump() if body.metadata else None,
    )
    return {"success": True, "data": entry}
