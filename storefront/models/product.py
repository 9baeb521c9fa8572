"""Catalog models as seen by the storefront"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Variant(BaseModel):
    """A purchasable color/style option of a product"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    color: str
    color_code: Optional[str] = Field(default=None, alias="colorCode")
    images: tuple[str, ...] = ()
    stock: int = Field(ge=0, default=0)
    # Signed adjustment added to the product base price
    price: float = 0.0


class Product(BaseModel):
    """Product in the catalog (read-only to the cart)"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    base_price: float = Field(ge=0)
    category: str
    description: str = ""
    sizes: tuple[str, ...] = ()
    materials: tuple[str, ...] = ()
    variants: tuple[Variant, ...] = ()
    average_rating: float = 0.0
    total_reviews: int = 0
    is_featured: bool = False

    def get_variant(self, variant_id: str) -> Optional[Variant]:
        """Look up one of this product's variants"""
        return next((v for v in self.variants if v.id == variant_id), None)
