"""Tests for content similarity scoring and candidate selection."""
import itertools

import pytest

from product_service.domain.models.product import SimilarityWeights
from product_service.domain.services.similarity_svc import (
    calculate_similarity,
    color_jaccard,
    get_similar_products,
    merge_weights,
    price_proximity,
)

from fakes import InMemoryProductRepo, make_product, new_id


def test_reference_scenario_scores_093():
    target = make_product(price=100, category="A", material="cotton", colors=["red", "blue"])
    candidate = make_product(price=120, category="A", material="cotton", colors=["red"])

    assert calculate_similarity(target, candidate) == pytest.approx(0.93)


def test_score_is_symmetric_and_bounded():
    catalog = [
        make_product(price=10, category="A", material="cotton", colors=[]),
        make_product(price=95, category="A", material="linen", colors=["red"]),
        make_product(price=400, category="B", material="cotton", colors=["red", "green"]),
        make_product(price=180, category="B", material="wool", colors=["green", "blue", "red"]),
    ]
    for a, b in itertools.product(catalog, repeat=2):
        ab = calculate_similarity(a, b)
        assert ab == pytest.approx(calculate_similarity(b, a))
        assert 0.0 <= ab <= 1.0


def test_price_proximity_clamps_at_normalization_constant():
    assert price_proximity(50, 50, 200) == 1
    assert price_proximity(0, 100, 200) == pytest.approx(0.5)
    assert price_proximity(0, 200, 200) == 0
    assert price_proximity(0, 1000, 200) == 0


def test_price_normalization_is_configurable():
    a = make_product(price=0, category="A", material="x", colors=[])
    b = make_product(price=100, category="B", material="y", colors=["red"])

    assert calculate_similarity(a, b, max_price_diff=200) == pytest.approx(0.1)
    assert calculate_similarity(a, b, max_price_diff=400) == pytest.approx(0.15)


def test_color_jaccard_edges():
    assert color_jaccard([], []) == 0
    assert color_jaccard([], ["red"]) == 0
    assert color_jaccard(["red", "blue"], ["blue", "red"]) == 1
    assert color_jaccard(["red", "blue"], ["red", "green"]) == pytest.approx(1 / 3)


def test_identical_colors_contribute_full_weight():
    a = make_product(price=0, category="A", material="x", colors=["red"])
    b = make_product(price=1000, category="B", material="y", colors=["red"])
    assert calculate_similarity(a, b) == pytest.approx(0.1)


def test_merge_weights_overlays_partial_overrides():
    merged = merge_weights({"price": 0.5, "colors": None})
    assert merged == SimilarityWeights(category=0.4, material=0.3, price=0.5, colors=0.1)
    assert merge_weights(None) == SimilarityWeights()


@pytest.mark.asyncio
async def test_missing_target_returns_empty_list():
    repo = InMemoryProductRepo([make_product()])
    assert await get_similar_products(repo, new_id()) == []


@pytest.mark.asyncio
async def test_ranks_descending_excludes_target_and_truncates():
    target = make_product(price=100, category="A", material="cotton", colors=["red"])
    close = make_product(name="close", price=100, category="A", material="cotton", colors=["red"])
    mid = make_product(name="mid", price=150, category="A", material="linen", colors=["red"])
    far = make_product(name="far", price=500, category="B", material="wool", colors=["black"])
    repo = InMemoryProductRepo([target, far, mid, close])

    ranked = await get_similar_products(repo, target.id, limit=2, max_price_diff=200)

    assert [s.product.name for s in ranked] == ["close", "mid"]
    assert all(s.source == "similarity" for s in ranked)
    assert ranked[0].score >= ranked[1].score
    assert target.id not in {s.product.id for s in ranked}


@pytest.mark.asyncio
async def test_other_categories_only_fetched_when_pool_is_thin():
    target = make_product(category="A")
    same = [make_product(category="A") for _ in range(4)]
    other = make_product(category="B")
    repo = InMemoryProductRepo([target, *same, other])

    # 4 same-category candidates >= 2 * limit(2): no cross-category top-up
    ranked = await get_similar_products(repo, target.id, limit=2)
    assert other.id not in {s.product.id for s in ranked}

    # 4 < 2 * limit(6): other categories are added to the pool
    ranked = await get_similar_products(repo, target.id, limit=6)
    assert other.id in {s.product.id for s in ranked}


@pytest.mark.asyncio
async def test_ties_keep_fetch_order():
    target = make_product(category="A", material="m", colors=["red"], price=10)
    twins = [make_product(name=f"twin{i}", category="A", material="m", colors=["red"], price=10) for i in range(3)]
    repo = InMemoryProductRepo([target, *twins])

    ranked = await get_similar_products(repo, target.id, limit=3)
    assert [s.product.name for s in ranked] == ["twin0", "twin1", "twin2"]
