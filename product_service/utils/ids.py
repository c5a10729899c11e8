# product_service/utils/ids.py
from typing import Any, Optional
from bson import ObjectId


def is_valid_id(value: Any) -> bool:
    """True for a 24-char hex ObjectId string (what the API hands out)."""
    return isinstance(value, str) and len(value) == 24 and ObjectId.is_valid(value)


def to_object_id(value: Any) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    return ObjectId(value) if is_valid_id(value) else None


def from_mongo(doc: dict, *ref_fields: str) -> dict:
    """
    Map a raw Mongo document to the API shape:
      _id -> id (str), and each ObjectId reference field -> str.
    """
    out = dict(doc)
    if "_id" in out:
        out["id"] = str(out.pop("_id"))
    for field in ref_fields:
        if isinstance(out.get(field), ObjectId):
            out[field] = str(out[field])
    return out
