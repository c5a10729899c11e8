from pydantic import BaseModel, Field
from typing import Dict, Literal, Optional, List
from datetime import datetime


def _empty_distribution() -> Dict[str, int]:
    return {str(star): 0 for star in range(1, 6)}


class VerifiedRatings(BaseModel):
    average: float = 0.0
    count: int = 0


class ProductRatings(BaseModel):
    average: float = 0.0
    count: int = 0
    distribution: Dict[str, int] = Field(default_factory=_empty_distribution)
    weighted_average: float = 0.0
    verified_purchases: VerifiedRatings = Field(default_factory=VerifiedRatings)


class Product(BaseModel):
    id: str
    name: str
    slug: str
    description: str = ""
    price: float = Field(ge=0)
    category: str
    sizes: List[str] = []
    colors: List[str] = []
    fit: str = ""
    material: str = ""
    image_url: Optional[str] = None
    views: int = 0
    purchases: int = 0
    cart_additions: int = 0
    last_viewed: Optional[datetime] = None
    ratings: Optional[ProductRatings] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SimilarityWeights(BaseModel):
    category: float = 0.4
    material: float = 0.3
    price: float = 0.2
    colors: float = 0.1

    model_config = {"frozen": True}


RecoSource = Literal["similarity", "popularity"]


class ScoredProduct(BaseModel):
    product: Product
    score: float = Field(ge=0)
    source: RecoSource
    model_config = {"frozen": True}


class RecommendationResult(BaseModel):
    """
    Outcome of a hybrid recommendation call.
    status == "degraded" means the hybrid path failed and `items` holds the
    popularity fallback; `fallback_reason` says why.
    """
    status: Literal["ok", "degraded"] = "ok"
    items: List[ScoredProduct]
    fallback_reason: Optional[str] = None
    model_config = {"frozen": True}

    @property
    def degraded(self) -> bool:
        return self.status == "degraded"

    @property
    def products(self) -> List[Product]:
        return [item.product for item in self.items]


class TrendingProduct(BaseModel):
    id: str
    name: str
    slug: str
    price: float
    image_url: Optional[str] = None
    views: int = 0
    purchases: int = 0
    cart_additions: int = 0
    category_name: Optional[str] = None
    final_score: float
