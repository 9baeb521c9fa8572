"""Read-only catalog routes"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.errors import NotFoundError
from ..database.products import ProductDatabase, get_product_db
from ..models.product import Product, ProductCategory, ProductListResponse

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=ProductListResponse)
async def list_products(
    category: Optional[ProductCategory] = Query(None, description="Filter by category"),
    featured: bool = Query(False, description="Only featured products"),
    in_stock_only: bool = Query(False, description="Only products with a variant in stock"),
    limit: int = Query(20, ge=1, le=100, description="Max results"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
    products: ProductDatabase = Depends(get_product_db),
):
    """List products in the catalog"""
    results, total = products.list_products(
        category=category,
        featured_only=featured,
        in_stock_only=in_stock_only,
        limit=limit,
        offset=offset,
    )
    return ProductListResponse(products=results, total=total, limit=limit, offset=offset)


@router.get("/categories", response_model=list[str])
async def list_categories():
    """List all product categories"""
    return [c.value for c in ProductCategory]


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: str,
    products: ProductDatabase = Depends(get_product_db),
):
    """Get a product with its variants"""
    product = products.get_product(product_id)
    if not product:
        raise NotFoundError(f"Product {product_id} not found")
    return product
