"""Domain exceptions for the product service.

Every error the service raises on purpose carries the HTTP status and the
machine-readable code the API returns for it. The handler registered in
``main.py`` renders them; anything else becomes a generic 500.
"""

from typing import Any, Dict, List, Optional


class ProductServiceError(Exception):
    """Base exception for product service errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}


class InvalidRequestError(ProductServiceError):
    """Raised when a request is well-formed JSON but semantically unusable."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, error_code="INVALID_REQUEST", details=details)


class InvalidProductIdError(ProductServiceError):
    def __init__(self, product_id: Any):
        super().__init__(
            "Invalid product ID",
            status_code=400,
            error_code="INVALID_PRODUCT_ID",
            details={"product_id": str(product_id)},
        )


class InvalidRatingError(ProductServiceError):
    def __init__(self, rating: Any):
        super().__init__(
            "Rating must be between 1 and 5",
            status_code=400,
            error_code="INVALID_RATING",
            details={"rating": rating},
        )


class ProductNotFoundError(ProductServiceError):
    def __init__(self, product_id: str):
        super().__init__(
            "Product not found",
            status_code=404,
            error_code="PRODUCT_NOT_FOUND",
            details={"product_id": product_id},
        )


class CategoryNotFoundError(ProductServiceError):
    """Raised when a category (or a parent category) slug does not resolve.

    ``available`` lists the existing categories so the client can correct
    the request without another round-trip.
    """

    def __init__(self, slug: str, available: Optional[List[Dict[str, str]]] = None, parent: bool = False):
        kind = "Parent category" if parent else "Category"
        details: Dict[str, Any] = {"slug": slug}
        if available is not None:
            details["available_categories"] = available
        super().__init__(
            f"{kind} with slug '{slug}' not found",
            status_code=404,
            error_code="CATEGORY_NOT_FOUND",
            details=details,
        )


class SlugTakenError(ProductServiceError):
    def __init__(self, kind: str, slug: str):
        super().__init__(
            f"{kind} with slug '{slug}' already exists",
            status_code=409,
            error_code="SLUG_TAKEN",
            details={"slug": slug},
        )


class RatingUpdateError(ProductServiceError):
    """Raised when the rating transaction fails for a non-validation reason."""

    def __init__(self, product_id: str, error: Exception):
        super().__init__(
            "Failed to update product ratings",
            status_code=500,
            error_code="RATING_UPDATE_FAILED",
            details={
                "product_id": product_id,
                "error_type": type(error).__name__,
            },
        )
