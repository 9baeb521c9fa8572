"""Jewelry product catalog"""

from typing import Optional

from ..models.product import Product, ProductCategory, ProductVariant

# Catalog used until a product store is configured
PRODUCTS: dict[str, Product] = {
    "1": Product(
        id="1",
        name="Golden Rose Bangle",
        description="Elegant gold-plated bangle with intricate rose patterns perfect for special occasions.",
        base_price=2500,
        category=ProductCategory.BANGLES,
        variants=[
            ProductVariant(
                id="v1",
                color="Rose Gold",
                color_code="#E8B4B8",
                images=[
                    "https://images.unsplash.com/photo-1515562141207-7a88fb7ce338?w=400",
                    "https://images.unsplash.com/photo-1605100804763-247f67b3557e?w=400",
                ],
                stock=15,
                price=0,
            ),
            ProductVariant(
                id="v2",
                color="Classic Gold",
                color_code="#FFD700",
                images=[
                    "https://images.unsplash.com/photo-1611591437281-460bfbe1220a?w=400",
                    "https://images.unsplash.com/photo-1599643478518-a784e5dc4c8f?w=400",
                ],
                stock=12,
                price=0,
            ),
        ],
        sizes=["2.1", "2.2", "2.3", "2.4", "2.5", "2.6", "2.7", "2.8"],
        materials=["18K Gold Plated", "Brass"],
        features=["Adjustable Size", "Lightweight", "Tarnish Resistant"],
        care_instructions="Clean with soft cloth. Avoid water and chemicals.",
        tags=["traditional", "wedding", "gold", "elegant"],
        is_featured=True,
        average_rating=4.5,
        total_reviews=23,
    ),
    "2": Product(
        id="2",
        name="Silver Lotus Bangle",
        description="Premium silver bangle with lotus flower engravings, symbolizing purity and elegance.",
        base_price=1800,
        category=ProductCategory.BANGLES,
        variants=[
            ProductVariant(
                id="v3",
                color="Oxidized Silver",
                color_code="#8C8C8C",
                images=["https://images.unsplash.com/photo-1573408301185-9146fe634ad0?w=400"],
                stock=20,
                price=0,
            ),
            ProductVariant(
                id="v4",
                color="Bright Silver",
                color_code="#C0C0C0",
                images=["https://images.unsplash.com/photo-1602751584552-8ba73aad10e1?w=400"],
                stock=0,
                price=200,
            ),
        ],
        sizes=["2.2", "2.4", "2.6", "2.8"],
        materials=["925 Sterling Silver"],
        features=["Adjustable Size", "Oxidized Finish"],
        care_instructions="Store in an airtight pouch. Polish gently with a silver cloth.",
        tags=["silver", "lotus", "everyday"],
        average_rating=4.2,
        total_reviews=15,
    ),
    "3": Product(
        id="3",
        name="Pearl Drop Earrings",
        description="Freshwater pearl drops on gold-plated hooks, light enough for all-day wear.",
        base_price=1200,
        category=ProductCategory.EARRINGS,
        variants=[
            ProductVariant(
                id="v5",
                color="Ivory Pearl",
                color_code="#FFFFF0",
                images=["https://images.unsplash.com/photo-1535632066927-ab7c9ab60908?w=400"],
                stock=30,
                price=0,
            ),
            ProductVariant(
                id="v6",
                color="Blush Pearl",
                color_code="#F4C2C2",
                images=["https://images.unsplash.com/photo-1630019852942-f89202989a59?w=400"],
                stock=8,
                price=150,
            ),
        ],
        sizes=["One Size"],
        materials=["Freshwater Pearl", "Gold Plated Brass"],
        features=["Hypoallergenic Hooks", "Lightweight"],
        care_instructions="Wipe pearls with a damp cloth after wear.",
        tags=["pearl", "classic", "gift"],
        is_featured=True,
        average_rating=4.8,
        total_reviews=41,
    ),
    "4": Product(
        id="4",
        name="Kundan Choker Necklace",
        description="Statement kundan choker with matching drop earrings for festive evenings.",
        base_price=4500,
        category=ProductCategory.NECKLACES,
        variants=[
            ProductVariant(
                id="v7",
                color="Emerald Green",
                color_code="#50C878",
                images=["https://images.unsplash.com/photo-1599643477877-530eb83abc8e?w=400"],
                stock=6,
                price=500,
            ),
            ProductVariant(
                id="v8",
                color="Ruby Red",
                color_code="#9B111E",
                images=["https://images.unsplash.com/photo-1601121141461-9d6647bca1ed?w=400"],
                stock=4,
                price=500,
            ),
        ],
        sizes=[],
        materials=["Kundan", "Gold Plated Alloy"],
        features=["Adjustable Dori", "Matching Earrings"],
        care_instructions="Keep away from perfume and moisture.",
        tags=["kundan", "festive", "bridal"],
        average_rating=4.6,
        total_reviews=9,
    ),
    "5": Product(
        id="5",
        name="Solitaire Promise Ring",
        description="Minimal band with a single cubic zirconia solitaire, engravable on the inside.",
        base_price=999,
        category=ProductCategory.RINGS,
        variants=[
            ProductVariant(
                id="v9",
                color="Silver",
                color_code="#C0C0C0",
                images=["https://images.unsplash.com/photo-1605100804763-247f67b3557e?w=400"],
                stock=25,
                price=0,
            ),
            ProductVariant(
                id="v10",
                color="Rose Gold",
                color_code="#B76E79",
                images=["https://images.unsplash.com/photo-1603561591411-07134e71a2a9?w=400"],
                stock=18,
                price=100,
            ),
        ],
        sizes=["6", "7", "8", "9", "10"],
        materials=["925 Sterling Silver", "Cubic Zirconia"],
        features=["Personalized Engraving", "Hypoallergenic"],
        care_instructions="Remove before washing hands.",
        tags=["ring", "promise", "personalized"],
        average_rating=4.4,
        total_reviews=27,
    ),
}


class ProductDatabase:
    """In-memory product catalog"""

    def __init__(self, products: Optional[dict[str, Product]] = None):
        source = products if products is not None else PRODUCTS
        self.products = {pid: p.model_copy(deep=True) for pid, p in source.items()}

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    def list_products(
        self,
        category: Optional[ProductCategory] = None,
        featured_only: bool = False,
        in_stock_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Product], int]:
        """
        List products with filters.

        Returns:
            Tuple of (matching products, total count)
        """
        results = list(self.products.values())

        if category:
            results = [p for p in results if p.category == category]

        if featured_only:
            results = [p for p in results if p.is_featured]

        if in_stock_only:
            results = [p for p in results if p.in_stock]

        total = len(results)
        return results[offset : offset + limit], total

    def get_stock(self, product_id: str, variant_id: str) -> Optional[int]:
        product = self.products.get(product_id)
        variant = product.get_variant(variant_id) if product else None
        return variant.stock if variant else None

    def update_stock(self, product_id: str, variant_id: str, quantity_change: int) -> bool:
        """
        Update variant stock.

        Args:
            product_id: Product to update
            variant_id: Variant of the product
            quantity_change: Positive to add, negative to remove

        Returns:
            True if successful
        """
        product = self.products.get(product_id)
        if not product:
            return False

        variant = product.get_variant(variant_id)
        if not variant:
            return False

        new_quantity = variant.stock + quantity_change
        if new_quantity < 0:
            return False

        variant.stock = new_quantity
        return True


# Singleton instance
product_db = ProductDatabase()


def get_product_db() -> ProductDatabase:
    return product_db
