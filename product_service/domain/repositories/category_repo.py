# product_service/domain/repositories/category_repo.py

from __future__ import annotations
import re
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from product_service.core.exceptions import SlugTakenError
from product_service.domain.models.category import Category
from product_service.utils.ids import from_mongo, to_object_id


def _to_category(doc: dict) -> Category:
    return Category.model_validate(from_mongo(doc, "parent"))


class CategoryRepo:
    """
    Category repository backed by the 'categories' collection.
    Categories form a tree through the optional `parent` reference.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "categories"):
        self.col = db[collection_name]

    async def get_by_slug(self, slug: str) -> Optional[Category]:
        doc = await self.col.find_one({"slug": slug})
        return _to_category(doc) if doc else None

    async def list_all(self) -> List[Category]:
        # one round-trip; the tree is assembled in memory by the caller
        cursor = self.col.find({})
        return [_to_category(doc) async for doc in cursor]

    async def list_summaries(self) -> List[Dict[str, str]]:
        cursor = self.col.find({}, {"_id": 0, "slug": 1, "name": 1})
        return [doc async for doc in cursor]

    async def search_text(self, term: str, limit: int) -> List[Category]:
        rx = {"$regex": re.escape(term), "$options": "i"}
        cursor = self.col.find({"$or": [{"name": rx}, {"description": rx}]}).limit(limit)
        return [_to_category(doc) async for doc in cursor]

    async def suggest_by_name(self, term: str, limit: int) -> List[Category]:
        cursor = self.col.find({"name": {"$regex": re.escape(term), "$options": "i"}}).limit(limit)
        return [_to_category(doc) async for doc in cursor]

    async def create(self, data: Dict[str, Any]) -> Category:
        doc = {
            **data,
            "parent": to_object_id(data["parent"]) if data.get("parent") else None,
            "created_at": datetime.now(timezone.utc),
        }
        try:
            res = await self.col.insert_one(doc)
        except DuplicateKeyError as e:
            raise SlugTakenError("Category", doc["slug"]) from e
        doc["_id"] = res.inserted_id
        return _to_category(doc)
