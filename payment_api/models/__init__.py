# Payment API Models

from .product import Product, ProductCategory, ProductVariant, ProductListResponse
from .payment import (
    OrderItemRef,
    CreatePaymentRequest,
    OrderStatusRequest,
    PaymentSession,
    OrderRecord,
    OrderRecordStatus,
    envelope,
)
from .webhook import (
    WebhookEventKind,
    WebhookPayload,
    WebhookData,
    WebhookOutcome,
    EVENT_TYPES,
)

__all__ = [
    "Product",
    "ProductCategory",
    "ProductVariant",
    "ProductListResponse",
    "OrderItemRef",
    "CreatePaymentRequest",
    "OrderStatusRequest",
    "PaymentSession",
    "OrderRecord",
    "OrderRecordStatus",
    "envelope",
    "WebhookEventKind",
    "WebhookPayload",
    "WebhookData",
    "WebhookOutcome",
    "EVENT_TYPES",
]
