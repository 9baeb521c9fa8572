"""
Order builder

Turns a cart and the customer's contact details into a gateway-agnostic
OrderRequest. Performs no I/O.
"""

import random
import time
from typing import Optional

from ..errors import ValidationError
from ..models.cart import CartState
from ..models.order import CustomerInfo, OrderLine, OrderRequest

ORDER_ID_PREFIX = "ORDER"
CUSTOMER_ID_PREFIX = "CUST"
# Cashfree rejects order tag values longer than this
ORDER_TAG_MAX_LENGTH = 255


def _now_millis() -> int:
    return int(time.time() * 1000)


def generate_order_id(prefix: str = ORDER_ID_PREFIX) -> str:
    """
    Generate an order identifier without a central counter.

    Format: <prefix>_<epoch millis>_<random 0..999>
    """
    return f"{prefix}_{_now_millis()}_{random.randint(0, 999)}"


def generate_customer_id() -> str:
    return f"{CUSTOMER_ID_PREFIX}_{_now_millis()}"


def order_lines(cart: CartState) -> list[OrderLine]:
    return [
        OrderLine(
            item_id=item.id,
            product_id=item.product.id,
            variant_id=item.variant.id,
            name=item.product.name,
            quantity=item.quantity,
            price=item.price,
            size=item.size,
        )
        for item in cart.items
    ]


def fit_tag(entries: list[str], limit: int = ORDER_TAG_MAX_LENGTH) -> str:
    """
    Join entries with commas, keeping only whole entries that fit in limit.

    Dropped entries are counted in a trailing "+N more".
    """
    for kept in range(len(entries), -1, -1):
        dropped = len(entries) - kept
        parts = entries[:kept] + ([f"+{dropped} more"] if dropped else [])
        summary = ",".join(parts)
        if len(summary) <= limit:
            return summary
    return summary[:limit]


def item_summary(cart: CartState) -> str:
    """Cart lines as product/variant x quantity entries, short enough for an order tag"""
    return fit_tag([f"{item.product.id}/{item.variant.id}x{item.quantity}" for item in cart.items])


def build_order_request(
    cart: CartState,
    customer: CustomerInfo,
    currency: str = "INR",
    return_url: Optional[str] = None,
    notify_url: Optional[str] = None,
    note: Optional[str] = None,
    source: str = "website",
    platform: str = "web",
) -> OrderRequest:
    """
    Build an order request for the current cart.

    Raises:
        ValidationError: If the cart is empty or customer details are missing
    """
    if cart.is_empty:
        raise ValidationError("Cannot create an order from an empty cart", user_message="Your cart is empty")

    if cart.total <= 0:
        raise ValidationError(f"Order amount must be positive, got {cart.total}")

    missing = customer.missing_fields()
    if missing:
        raise ValidationError(
            f"Missing customer details: {', '.join(missing)}",
            user_message="Please fill in all customer details",
        )

    return OrderRequest(
        order_id=generate_order_id(),
        amount=cart.total,
        currency=currency,
        customer_id=customer.customer_id or generate_customer_id(),
        customer_name=customer.name.strip(),
        customer_email=customer.email.strip(),
        customer_phone=customer.phone.strip(),
        note=note or f"Luxe & Lush Order - {len(cart.items)} items",
        return_url=return_url,
        notify_url=notify_url,
        tags={
            "source": source,
            "platform": platform,
            "items": item_summary(cart),
        },
        items=order_lines(cart),
    )
