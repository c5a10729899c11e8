# product_service/api/v1/schemas/products.py
from pydantic import BaseModel, Field
from typing import List, Optional


class ProductIn(BaseModel):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    description: str = ""
    price: float = Field(ge=0)
    category: str = Field(description="Category slug")
    sizes: List[str]
    colors: List[str]
    fit: str
    material: str
    image_url: str


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    slug: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = Field(default=None, description="Category slug")
    sizes: Optional[List[str]] = None
    colors: Optional[List[str]] = None
    fit: Optional[str] = None
    material: Optional[str] = None
    image_url: Optional[str] = None


class CartAdditionIn(BaseModel):
    increment: int = 1


class PurchasesUpdateIn(BaseModel):
    product_ids: List[str]
    increment: int = 1


class RatingIn(BaseModel):
    product_id: str
    rating: float
    weight: float = Field(default=1.0, description="!= 1.0 marks a verified purchase")


class RatingOut(BaseModel):
    average_rating: float
    rating_count: int
    weighted_average: float
