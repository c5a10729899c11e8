# product_service/domain/repositories/product_repo.py

from __future__ import annotations
import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from product_service.core.exceptions import ProductNotFoundError, SlugTakenError
from product_service.domain.models.product import Product, ProductRatings, TrendingProduct
from product_service.domain.services.constants import (
    TRENDING_CART_WEIGHT,
    TRENDING_PURCHASE_WEIGHT,
    TRENDING_RECENT_BONUS,
    TRENDING_VIEW_WEIGHT,
)
from product_service.utils.ids import from_mongo, to_object_id

RatingsMutation = Callable[[Optional[ProductRatings]], ProductRatings]


def _to_product(doc: dict) -> Product:
    return Product.model_validate(from_mongo(doc, "category"))


def _regex(term: str) -> Dict[str, str]:
    # user input is matched literally, case-insensitive
    return {"$regex": re.escape(term), "$options": "i"}


def trending_pipeline(limit: int, recent_since: datetime) -> List[Dict[str, Any]]:
    """
    Engagement ranking over the products collection:
      score = purchases*5 + cart_additions*3 + views (+10 if viewed since `recent_since`)
    joined with the category name.
    """
    return [
        {"$addFields": {
            "trending_score": {"$add": [
                {"$multiply": [{"$ifNull": ["$purchases", 0]}, TRENDING_PURCHASE_WEIGHT]},
                {"$multiply": [{"$ifNull": ["$cart_additions", 0]}, TRENDING_CART_WEIGHT]},
                {"$multiply": [{"$ifNull": ["$views", 0]}, TRENDING_VIEW_WEIGHT]},
            ]},
            "recent_activity": {
                "$cond": [{"$gt": ["$last_viewed", recent_since]}, TRENDING_RECENT_BONUS, 0]
            },
        }},
        {"$addFields": {"final_score": {"$add": ["$trending_score", "$recent_activity"]}}},
        {"$sort": {"final_score": -1}},
        {"$limit": limit},
        {"$lookup": {
            "from": "categories",
            "localField": "category",
            "foreignField": "_id",
            "as": "category",
        }},
        {"$unwind": "$category"},
        {"$project": {
            "name": 1,
            "slug": 1,
            "price": 1,
            "image_url": 1,
            "views": 1,
            "purchases": 1,
            "cart_additions": 1,
            "category_name": "$category.name",
            "final_score": 1,
        }},
    ]


class ProductRepo:
    """
    Product repository backed by the 'products' collection.
    Category references are stored as ObjectId and exposed as hex strings.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "products"):
        self.col = db[collection_name]
        self.client = db.client

    async def _find(self, query: dict, limit: int = 0) -> List[Product]:
        cursor = self.col.find(query).limit(limit)
        return [_to_product(doc) async for doc in cursor]

    # ----- Lookups -----------------------------------------------------------

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        oid = to_object_id(product_id)
        if oid is None:
            return None
        doc = await self.col.find_one({"_id": oid})
        return _to_product(doc) if doc else None

    async def get_by_slug(self, slug: str) -> Optional[Product]:
        doc = await self.col.find_one({"slug": slug.strip().lower()})
        return _to_product(doc) if doc else None

    async def list(self, category_id: Optional[str] = None, search: Optional[str] = None) -> List[Product]:
        query: Dict[str, Any] = {}
        if category_id:
            oid = to_object_id(category_id)
            if oid is None:
                return []
            query["category"] = oid
        if search:
            query["$text"] = {"$search": search}
        return await self._find(query)

    async def find_in_category(self, category_id: str, *, exclude_id: str, limit: int) -> List[Product]:
        return await self._find(
            {"_id": {"$ne": to_object_id(exclude_id)}, "category": to_object_id(category_id)},
            limit,
        )

    async def find_outside_category(self, category_id: str, *, exclude_id: str, limit: int) -> List[Product]:
        return await self._find(
            {"_id": {"$ne": to_object_id(exclude_id)}, "category": {"$ne": to_object_id(category_id)}},
            limit,
        )

    async def search_text(self, term: str, limit: int) -> List[Product]:
        rx = _regex(term)
        return await self._find({"$or": [{"name": rx}, {"description": rx}]}, limit)

    async def suggest_by_name(self, term: str, limit: int) -> List[Product]:
        return await self._find({"name": _regex(term)}, limit)

    async def trending(self, limit: int, recent_since: datetime) -> List[TrendingProduct]:
        cursor = self.col.aggregate(trending_pipeline(limit, recent_since))
        return [TrendingProduct.model_validate(from_mongo(doc)) async for doc in cursor]

    # ----- Writes ------------------------------------------------------------

    async def create(self, data: Dict[str, Any]) -> Product:
        now = datetime.now(timezone.utc)
        doc = {
            "views": 0,
            "purchases": 0,
            "cart_additions": 0,
            **data,
            "slug": data["slug"].strip().lower(),
            "category": to_object_id(data["category"]),
            "created_at": now,
            "updated_at": now,
        }
        try:
            res = await self.col.insert_one(doc)
        except DuplicateKeyError as e:
            raise SlugTakenError("Product", doc["slug"]) from e
        doc["_id"] = res.inserted_id
        return _to_product(doc)

    async def update(self, product_id: str, fields: Dict[str, Any]) -> Optional[Product]:
        oid = to_object_id(product_id)
        if oid is None:
            return None
        changes = dict(fields)
        if "slug" in changes:
            changes["slug"] = changes["slug"].strip().lower()
        if "category" in changes:
            changes["category"] = to_object_id(changes["category"])
        changes["updated_at"] = datetime.now(timezone.utc)
        try:
            doc = await self.col.find_one_and_update(
                {"_id": oid}, {"$set": changes}, return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError as e:
            raise SlugTakenError("Product", changes["slug"]) from e
        return _to_product(doc) if doc else None

    async def delete(self, product_id: str) -> bool:
        oid = to_object_id(product_id)
        if oid is None:
            return False
        res = await self.col.delete_one({"_id": oid})
        return res.deleted_count == 1

    # ----- Engagement counters -----------------------------------------------

    async def record_view(self, product_id: str, at: datetime) -> Optional[Product]:
        doc = await self.col.find_one_and_update(
            {"_id": to_object_id(product_id)},
            {"$inc": {"views": 1}, "$set": {"last_viewed": at}},
            return_document=ReturnDocument.AFTER,
        )
        return _to_product(doc) if doc else None

    async def add_cart_additions(self, product_id: str, increment: int) -> Optional[Product]:
        doc = await self.col.find_one_and_update(
            {"_id": to_object_id(product_id)},
            {"$inc": {"cart_additions": increment}},
            return_document=ReturnDocument.AFTER,
        )
        return _to_product(doc) if doc else None

    async def add_purchases(self, product_ids: Iterable[str], increment: int) -> Tuple[int, int]:
        oids = [oid for oid in (to_object_id(pid) for pid in product_ids) if oid is not None]
        res = await self.col.update_many({"_id": {"$in": oids}}, {"$inc": {"purchases": increment}})
        return res.matched_count, res.modified_count

    # ----- Ratings (transactional) -------------------------------------------

    async def update_ratings(self, product_id: str, mutate: RatingsMutation) -> ProductRatings:
        """
        Read-modify-write of the `ratings` subdocument inside one transaction.
        Any exception (including ProductNotFoundError) aborts it; leaving the
        transaction block normally commits.
        """
        oid = to_object_id(product_id)
        async with await self.client.start_session() as session:
            async with session.start_transaction():
                doc = await self.col.find_one({"_id": oid}, {"ratings": 1}, session=session)
                if not doc:
                    raise ProductNotFoundError(product_id)
                current = ProductRatings.model_validate(doc["ratings"]) if doc.get("ratings") else None
                updated = mutate(current)
                await self.col.update_one(
                    {"_id": oid},
                    {"$set": {"ratings": updated.model_dump(), "updated_at": datetime.now(timezone.utc)}},
                    session=session,
                )
                return updated
