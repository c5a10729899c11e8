import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from product_service.core.exceptions import InvalidProductIdError, ProductNotFoundError
from product_service.domain.models.interaction import Interaction, InteractionType
from product_service.utils.ids import is_valid_id

logger = logging.getLogger(__name__)


async def record_interaction(
    products,
    interactions,
    *,
    user_id: str,
    product_id: str,
    interaction_type: InteractionType,
    metadata: Optional[Dict[str, Any]] = None,
) -> Interaction:
    """Append one entry to the interaction log. The product must exist."""
    if not is_valid_id(product_id):
        raise InvalidProductIdError(product_id)
    if await products.get_by_id(product_id) is None:
        raise ProductNotFoundError(product_id)

    entry = await interactions.add({
        "user": user_id,
        "product": product_id,
        "type": InteractionType(interaction_type).value,
        "metadata": metadata,
        "created_at": datetime.now(timezone.utc),
    })
    logger.info("interaction recorded user=%s product=%s type=%s", user_id, product_id, entry.type.value)
    return entry
