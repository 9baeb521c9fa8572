# Storefront Models

from .product import Product, Variant
from .cart import (
    CartItem,
    CartState,
    CartAction,
    CartActionType,
    AddItem,
    UpdateQuantity,
    RemoveItem,
    ClearCart,
    ToggleCart,
    SetCartOpen,
)
from .order import (
    OrderStatus,
    PaymentStatus,
    CustomerInfo,
    OrderLine,
    OrderRequest,
    CreateOrderResult,
    PaymentAttempt,
    OrderStatusResponse,
    FlatResponse,
    EnvelopedResponse,
    BackendResponse,
)

__all__ = [
    "Product",
    "Variant",
    "CartItem",
    "CartState",
    "CartAction",
    "CartActionType",
    "AddItem",
    "UpdateQuantity",
    "RemoveItem",
    "ClearCart",
    "ToggleCart",
    "SetCartOpen",
    "OrderStatus",
    "PaymentStatus",
    "CustomerInfo",
    "OrderLine",
    "OrderRequest",
    "CreateOrderResult",
    "PaymentAttempt",
    "OrderStatusResponse",
    "FlatResponse",
    "EnvelopedResponse",
    "BackendResponse",
]
