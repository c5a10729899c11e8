# product_service/api/v1/schemas/interactions.py
from pydantic import BaseModel, Field
from typing import Optional

from product_service.domain.models.interaction import InteractionMetadata, InteractionType


class InteractionIn(BaseModel):
    user_id: str = Field(min_length=1)
    product_id: str
    type: InteractionType
    metadata: Optional[InteractionMetadata] = None
