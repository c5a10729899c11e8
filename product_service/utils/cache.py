# product_service/utils/cache.py
import json
from typing import Any, Optional
from redis.asyncio import Redis


def cache_key(namespace: str, *parts: Any) -> str:
    """e.g. cache_key("popular", "30d", 6) -> "popular:30d:6" """
    return ":".join([namespace, *(str(p) for p in parts)])


async def cache_get(redis: Optional[Redis], key: str):
    """Decoded JSON value, or None on a miss or when no Redis is configured."""
    if redis is None:
        return None
    if val := await redis.get(key):
        return json.loads(val)
    return None


async def cache_set(redis: Optional[Redis], key: str, value, ex: int = 60) -> None:
    if redis is None:
        return
    # datetimes (last_viewed, created_at) are stored as ISO strings
    await redis.set(key, json.dumps(value, default=str), ex=ex)
