from __future__ import annotations
from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from datetime import datetime


class Category(BaseModel):
    id: str
    name: str
    slug: str
    parent: Optional[str] = None
    parentslug: Optional[str] = None
    filters: List[Dict[str, Any]] = []
    created_at: Optional[datetime] = None


class CategoryNode(BaseModel):
    id: str
    name: str
    slug: str
    parentslug: Optional[str] = None
    filters: List[Dict[str, Any]] = []
    subcategories: List[CategoryNode] = []


CategoryNode.model_rebuild()
