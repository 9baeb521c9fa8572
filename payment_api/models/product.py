"""Catalog models for the payment API"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductCategory(str, Enum):
    BANGLES = "bangles"
    NECKLACES = "necklaces"
    EARRINGS = "earrings"
    RINGS = "rings"
    BRACELETS = "bracelets"


class ProductVariant(BaseModel):
    """Color/style option of a product"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    color: str
    color_code: str = Field(alias="colorCode")
    images: list[str] = []
    stock: int = Field(ge=0, default=0)
    price: float = 0.0


class Product(BaseModel):
    """Product in the catalog"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    base_price: float = Field(gt=0)
    category: ProductCategory
    sizes: list[str] = []
    materials: list[str] = []
    features: list[str] = []
    care_instructions: Optional[str] = None
    tags: list[str] = []
    variants: list[ProductVariant] = []
    is_featured: bool = False
    average_rating: float = 0.0
    total_reviews: int = 0

    def get_variant(self, variant_id: str) -> Optional[ProductVariant]:
        return next((v for v in self.variants if v.id == variant_id), None)

    @property
    def in_stock(self) -> bool:
        return any(v.stock > 0 for v in self.variants)


class ProductListResponse(BaseModel):
    """Response from product listing"""
    products: list[Product]
    total: int
    limit: int
    offset: int
