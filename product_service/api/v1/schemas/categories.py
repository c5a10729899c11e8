# product_service/api/v1/schemas/categories.py
from pydantic import BaseModel
from typing import Any, Dict, List, Optional


class CategoryIn(BaseModel):
    # name/slug are checked by the service so a missing one is a 400, not a 422
    name: Optional[str] = None
    slug: Optional[str] = None
    parentslug: Optional[str] = None
    filters: List[Dict[str, Any]] = []
