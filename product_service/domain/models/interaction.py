from enum import Enum
from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class InteractionType(str, Enum):
    VIEW = "view"
    CART = "cart"
    PURCHASE = "purchase"
    WISHLIST = "wishlist"


class InteractionMetadata(BaseModel):
    referral_source: Optional[str] = None
    device_type: Optional[str] = None


class Interaction(BaseModel):
    id: str
    user: str
    product: str
    type: InteractionType
    metadata: Optional[InteractionMetadata] = None
    created_at: datetime

    model_config = {"frozen": True}  # append-only log entry
