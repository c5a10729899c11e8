"""
Content similarity between products.

Each candidate gets a weighted sum of four signals, each in [0, 1]:
  - category match (1/0)
  - material match (1/0)
  - price proximity: 1 - min(|Δprice| / max_price_diff, 1)
  - color overlap: Jaccard index of the two color sets
With the default weights (0.4/0.3/0.2/0.1) the total stays in [0, 1].
"""
import logging
import time
from typing import Iterable, List, Mapping, Optional

from product_service.core.config import get_settings
from product_service.domain.models.product import Product, ScoredProduct, SimilarityWeights
from product_service.domain.services.constants import (
    DEFAULT_LIMIT,
    OTHER_CATEGORY_CANDIDATES,
    SAME_CATEGORY_CANDIDATES,
    SOURCE_SIMILARITY,
)

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS = SimilarityWeights()


def merge_weights(overrides: Optional[Mapping[str, float]] = None) -> SimilarityWeights:
    """Overlay a partial weight mapping onto the defaults; None values are ignored."""
    if not overrides:
        return DEFAULT_WEIGHTS
    set_values = {k: v for k, v in overrides.items() if v is not None}
    return DEFAULT_WEIGHTS.model_copy(update=set_values)


def color_jaccard(colors_a: Iterable[str], colors_b: Iterable[str]) -> float:
    a, b = set(colors_a), set(colors_b)
    union = a | b
    return len(a & b) / len(union) if union else 0.0


def price_proximity(price_a: float, price_b: float, max_price_diff: float) -> float:
    return 1 - min(abs(price_a - price_b) / max_price_diff, 1)


def calculate_similarity(
    a: Product,
    b: Product,
    weights: SimilarityWeights = DEFAULT_WEIGHTS,
    max_price_diff: float = 200.0,
) -> float:
    score = 0.0
    if a.category == b.category:
        score += weights.category
    if a.material == b.material:
        score += weights.material
    score += weights.price * price_proximity(a.price, b.price, max_price_diff)
    score += weights.colors * color_jaccard(a.colors, b.colors)
    return score


async def get_similar_products(
    products,
    product_id: str,
    weights: Optional[Mapping[str, float]] = None,
    limit: int = DEFAULT_LIMIT,
    *,
    max_price_diff: Optional[float] = None,
) -> List[ScoredProduct]:
    """
    Rank up to `limit` products by similarity to `product_id`.
    Returns [] when the target does not exist (no error).
    """
    t0 = time.perf_counter()
    target = await products.get_by_id(product_id)
    if target is None:
        logger.info("similar target_missing product_id=%s", product_id)
        return []

    final_weights = merge_weights(weights)
    if max_price_diff is None:
        max_price_diff = get_settings().SIMILARITY_MAX_PRICE_DIFF

    candidates = await products.find_in_category(
        target.category, exclude_id=target.id, limit=SAME_CATEGORY_CANDIDATES
    )
    if len(candidates) < limit * 2:
        candidates += await products.find_outside_category(
            target.category, exclude_id=target.id, limit=OTHER_CATEGORY_CANDIDATES
        )

    scored = [
        ScoredProduct(
            product=c,
            score=calculate_similarity(target, c, final_weights, max_price_diff),
            source=SOURCE_SIMILARITY,
        )
        for c in candidates
    ]
    # sorted() is stable: equal scores keep the fetch order
    ranked = sorted(scored, key=lambda s: s.score, reverse=True)[:limit]

    logger.info(
        "similar done product_id=%s candidates=%s returned=%s time=%.3fs",
        product_id, len(candidates), len(ranked), time.perf_counter() - t0,
    )
    return ranked
