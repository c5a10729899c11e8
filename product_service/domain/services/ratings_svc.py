"""
Running rating statistics for a product.

The update is a read-modify-write of the product's `ratings` subdocument and
runs inside a database transaction (see ProductRepo.update_ratings). The
arithmetic lives in `apply_rating` so it can be reasoned about on its own:

  average   <- (average * count + rating) / (count + 1)
  count     <- count + 1
  distribution[rating] += 1

For a non-default weight (verified purchase) the verified running mean is
updated the same way, and the weighted average becomes

  (verified.avg * verified.count * 1.2 + average * unverified)
  / (verified.count * 1.2 + unverified)
"""
import logging
from typing import Any, Dict, Optional

from product_service.core.exceptions import (
    InvalidProductIdError,
    InvalidRatingError,
    ProductServiceError,
    RatingUpdateError,
)
from product_service.domain.models.product import ProductRatings
from product_service.domain.services.constants import MAX_RATING, MIN_RATING, VERIFIED_RATING_WEIGHT
from product_service.utils.ids import is_valid_id

logger = logging.getLogger(__name__)


def apply_rating(current: Optional[ProductRatings], rating: int, weight: float = 1.0) -> ProductRatings:
    """Return the statistics after adding one rating. `current` is not modified."""
    stats = current.model_copy(deep=True) if current else ProductRatings()

    old_count = stats.count
    new_count = old_count + 1
    stats.distribution[str(rating)] = stats.distribution.get(str(rating), 0) + 1
    stats.average = (stats.average * old_count + rating) / new_count
    stats.count = new_count

    if weight != 1.0:
        verified = stats.verified_purchases
        old_verified = verified.count
        verified.average = (verified.average * old_verified + rating) / (old_verified + 1)
        verified.count = old_verified + 1

        unverified = new_count - verified.count
        stats.weighted_average = (
            verified.average * verified.count * VERIFIED_RATING_WEIGHT + stats.average * unverified
        ) / (verified.count * VERIFIED_RATING_WEIGHT + unverified)

    return stats


async def update_product_ratings(products, product_id: Any, rating: Any, weight: float = 1.0) -> Dict[str, Any]:
    if not is_valid_id(product_id):
        raise InvalidProductIdError(product_id)
    if (
        not isinstance(rating, (int, float))
        or isinstance(rating, bool)
        or not MIN_RATING <= rating <= MAX_RATING
        or rating != int(rating)
    ):
        raise InvalidRatingError(rating)
    rating = int(rating)

    try:
        stats = await products.update_ratings(product_id, lambda cur: apply_rating(cur, rating, weight))
    except ProductServiceError:
        raise
    except Exception as e:
        logger.exception("ratings update failed product_id=%s", product_id)
        raise RatingUpdateError(product_id, e) from e

    logger.info(
        "ratings updated product_id=%s rating=%s weight=%s average=%.3f count=%s",
        product_id, rating, weight, stats.average, stats.count,
    )
    return {
        "average_rating": stats.average,
        "rating_count": stats.count,
        "weighted_average": stats.weighted_average,
    }
