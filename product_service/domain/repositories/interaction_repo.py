# product_service/domain/repositories/interaction_repo.py

from __future__ import annotations
from typing import Any, Dict, Iterable, List
from datetime import datetime
from motor.motor_asyncio import AsyncIOMotorDatabase

from product_service.domain.models.interaction import Interaction, InteractionType
from product_service.domain.models.product import Product
from product_service.utils.ids import from_mongo, to_object_id


def popularity_pipeline(
    types: Iterable[InteractionType],
    since: datetime,
    limit: int,
    products_collection: str = "products",
) -> List[Dict[str, Any]]:
    """
    Count qualifying interactions per product since `since`, keep the top
    `limit`, and join back to the full product documents. Products without
    interactions in the window never appear.
    """
    return [
        {"$match": {
            "type": {"$in": [t.value for t in types]},
            "created_at": {"$gt": since},
        }},
        {"$group": {"_id": "$product", "count": {"$sum": 1}}},
        {"$sort": {"count": -1}},
        {"$limit": limit},
        {"$lookup": {
            "from": products_collection,
            "localField": "_id",
            "foreignField": "_id",
            "as": "product",
        }},
        {"$unwind": "$product"},
        {"$replaceRoot": {"newRoot": "$product"}},
    ]


class InteractionRepo:
    """
    Append-only interaction log ('interactions' collection).
    Entries are inserted once and only read back in bulk by aggregations.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "interactions"):
        self.col = db[collection_name]

    async def add(self, data: Dict[str, Any]) -> Interaction:
        doc = {**data, "product": to_object_id(data["product"])}
        res = await self.col.insert_one(doc)
        doc["_id"] = res.inserted_id
        return Interaction.model_validate(from_mongo(doc, "product"))

    async def most_engaged_products(
        self,
        types: Iterable[InteractionType],
        since: datetime,
        limit: int,
    ) -> List[Product]:
        cursor = self.col.aggregate(popularity_pipeline(types, since, limit))
        return [Product.model_validate(from_mongo(doc, "category")) async for doc in cursor]
