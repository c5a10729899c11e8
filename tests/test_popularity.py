"""Tests for popularity aggregation over the interaction log."""
import json
from datetime import datetime, timedelta, timezone

import pytest

from product_service.domain.models.interaction import InteractionType
from product_service.domain.repositories.interaction_repo import popularity_pipeline
from product_service.domain.services.popularity_svc import get_popular_products

from fakes import FakeRedis, InMemoryInteractionRepo, InMemoryProductRepo, make_product

NOW = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def catalog():
    return [make_product(name=n) for n in ("a", "b", "c")]


@pytest.fixture
def log(catalog):
    repo = InMemoryInteractionRepo(InMemoryProductRepo(catalog))
    return repo


@pytest.mark.asyncio
async def test_ranks_by_view_and_purchase_count(catalog, log):
    a, b, c = catalog
    for _ in range(3):
        log.log(b.id, "view", NOW - timedelta(days=1))
    log.log(a.id, "purchase", NOW - timedelta(days=2))
    log.log(a.id, "view", NOW - timedelta(days=2))
    log.log(c.id, "view", NOW - timedelta(days=3))

    popular = await get_popular_products(log, limit=10, now=NOW)

    assert [p.name for p in popular] == ["b", "a", "c"]


@pytest.mark.asyncio
async def test_ignores_cart_wishlist_and_old_events(catalog, log):
    a, b, _ = catalog
    log.log(a.id, "cart", NOW - timedelta(days=1))
    log.log(a.id, "wishlist", NOW - timedelta(days=1))
    log.log(b.id, "view", NOW - timedelta(days=31))

    assert await get_popular_products(log, limit=10, now=NOW) == []


@pytest.mark.asyncio
async def test_no_backfill_beyond_qualifying_products(catalog, log):
    log.log(catalog[0].id, "view", NOW - timedelta(hours=1))

    popular = await get_popular_products(log, limit=10, now=NOW)

    assert [p.id for p in popular] == [catalog[0].id]


@pytest.mark.asyncio
async def test_respects_limit(catalog, log):
    for p in catalog:
        log.log(p.id, "view", NOW - timedelta(hours=1))

    assert len(await get_popular_products(log, limit=2, now=NOW)) == 2


@pytest.mark.asyncio
async def test_cache_is_filled_then_served(catalog, log):
    redis = FakeRedis()
    log.log(catalog[0].id, "view", NOW - timedelta(hours=1))

    first = await get_popular_products(log, limit=5, redis=redis, now=NOW)
    assert len(redis.store) == 1
    cached = json.loads(next(iter(redis.store.values())))
    assert cached[0]["id"] == catalog[0].id

    # new events are not visible until the cache entry expires
    log.log(catalog[1].id, "view", NOW - timedelta(hours=1))
    log.log(catalog[1].id, "view", NOW - timedelta(hours=1))
    second = await get_popular_products(log, limit=5, redis=redis, now=NOW)
    assert [p.id for p in second] == [p.id for p in first]


@pytest.mark.asyncio
async def test_broken_cache_falls_through_to_database(catalog, log):
    log.log(catalog[2].id, "purchase", NOW - timedelta(hours=1))

    popular = await get_popular_products(log, limit=5, redis=FakeRedis(broken=True), now=NOW)

    assert [p.id for p in popular] == [catalog[2].id]


def test_pipeline_shape():
    since = NOW - timedelta(days=30)
    pipeline = popularity_pipeline([InteractionType.VIEW, InteractionType.PURCHASE], since, 7)

    assert pipeline[0] == {"$match": {"type": {"$in": ["view", "purchase"]}, "created_at": {"$gt": since}}}
    assert pipeline[1] == {"$group": {"_id": "$product", "count": {"$sum": 1}}}
    assert pipeline[2] == {"$sort": {"count": -1}}
    assert pipeline[3] == {"$limit": 7}
    assert pipeline[4]["$lookup"]["from"] == "products"
    assert pipeline[-1] == {"$replaceRoot": {"newRoot": "$product"}}
