"""Payment API routes: order creation and order status"""

import logging
import random
import re
import time
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from fastapi import APIRouter, Depends, Request

from ..core.config import Settings, get_settings
from ..core.errors import BadRequestError, NotFoundError, UpstreamError
from ..database.orders import OrderDatabase, get_order_db
from ..dependencies import get_cashfree_client
from ..models.payment import CreatePaymentRequest, OrderItemRef, OrderStatusRequest, PaymentSession, envelope
from ..services.cashfree_client import CashfreeAPIError, CashfreeClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Payments"])

# Cashfree accepts alphanumerics, "_" and "-" up to 45 characters
ORDER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{3,45}$")
# Cashfree rejects order tag values longer than this
ORDER_TAG_MAX_LENGTH = 255


def generate_order_id() -> str:
    return f"ORDER_{int(time.time() * 1000)}_{random.randint(0, 999)}"


def resolve_order_id(requested: Optional[str], orders: OrderDatabase) -> str:
    """Accept the storefront's order id when it is well formed and unused, else issue one"""
    if requested and ORDER_ID_PATTERN.match(requested) and not orders.exists(requested):
        return requested
    order_id = generate_order_id()
    if requested:
        logger.info(f"Reissued order id {requested!r} as {order_id}")
    return order_id


def with_order_id(url: str, order_id: str) -> str:
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query) if k != "order_id"]
    query.append(("order_id", order_id))
    return urlunsplit(parts._replace(query=urlencode(query)))


def _items_tag(items: list[OrderItemRef]) -> str:
    entries = [f"{item.product_id}/{item.variant_id}x{item.quantity}" for item in items]
    for kept in range(len(entries), 0, -1):
        dropped = len(entries) - kept
        summary = ",".join(entries[:kept] + ([f"+{dropped} more"] if dropped else []))
        if len(summary) <= ORDER_TAG_MAX_LENGTH:
            return summary
    return f"+{len(entries)} more" if entries else "unknown"


def _order_tags(body: CreatePaymentRequest) -> dict[str, str]:
    tags = {"source": "website", "platform": "web"}
    tags.update(body.order_tags)
    if "items" not in tags:
        tags["items"] = _items_tag(body.items)
    for name, value in tags.items():
        if len(value) > ORDER_TAG_MAX_LENGTH:
            logger.warning(f"Order tag {name!r} truncated from {len(value)} characters")
            tags[name] = value[:ORDER_TAG_MAX_LENGTH]
    return tags


@router.post("/payment")
async def create_payment(
    body: CreatePaymentRequest,
    request: Request,
    settings: Settings = Depends(get_settings),
    cashfree: CashfreeClient = Depends(get_cashfree_client),
    orders: OrderDatabase = Depends(get_order_db),
):
    """
    Create a payment order with the gateway.

    Returns the payment session the storefront hands to hosted checkout.
    """
    currency = body.order_currency or settings.default_currency
    if currency != settings.default_currency:
        raise BadRequestError(f"Unsupported currency: {currency}")

    order_id = resolve_order_id(body.order_id, orders)
    origin = (request.headers.get("origin") or settings.storefront_origin).rstrip("/")
    return_url = with_order_id(body.return_url or f"{origin}{settings.payment_success_path}", order_id)
    if settings.api_base_url:
        notify_url = f"{settings.api_base_url.rstrip('/')}/api/webhook"
    else:
        notify_url = body.notify_url or f"{origin}/api/webhook"
    customer_id = body.customer_id or f"CUST_{int(time.time() * 1000)}"

    order_data = {
        "order_id": order_id,
        "order_amount": body.order_amount,
        "order_currency": currency,
        "customer_details": {
            "customer_id": customer_id,
            "customer_name": body.customer_name,
            "customer_email": body.customer_email,
            "customer_phone": body.customer_phone,
        },
        "order_meta": {
            "return_url": return_url,
            "notify_url": notify_url,
        },
        "order_note": body.order_note or settings.default_order_note,
        "order_tags": _order_tags(body),
    }

    try:
        created = await cashfree.create_order(order_data)
    except CashfreeAPIError as e:
        raise UpstreamError(f"Order creation failed: {e.message}")

    if not isinstance(created, dict) or not created.get("payment_session_id"):
        logger.error(f"[Order: {order_id}] Cashfree response without payment_session_id: {created}")
        raise UpstreamError("Order creation failed: gateway response missing payment_session_id")

    orders.create_order(
        order_id=created.get("order_id", order_id),
        amount=body.order_amount,
        currency=currency,
        customer_id=customer_id,
        customer_email=body.customer_email,
        items=body.items,
        cf_order_id=str(created["cf_order_id"]) if created.get("cf_order_id") is not None else None,
    )

    logger.info(f"[Order: {order_id}] Payment session created: {body.order_amount} {currency}")

    return envelope(
        PaymentSession(
            order_id=created.get("order_id", order_id),
            payment_session_id=created["payment_session_id"],
            order_status=created.get("order_status", "ACTIVE"),
            order_amount=created.get("order_amount", body.order_amount),
            order_currency=created.get("order_currency", currency),
        )
    )


# Statuses the storefront understands; anything else the gateway reports is
# folded into the nearest one that never reads as paid
ORDER_STATUSES = {"ACTIVE", "PAID", "EXPIRED", "CANCELLED"}
ORDER_STATUS_ALIASES = {"TERMINATED": "CANCELLED", "TERMINATION_REQUESTED": "CANCELLED"}
PAYMENT_STATUSES = {"SUCCESS", "FAILED", "PENDING", "USER_DROPPED"}
PAYMENT_STATUS_ALIASES = {"CANCELLED": "FAILED", "VOID": "FAILED", "NOT_ATTEMPTED": "PENDING"}


def normalize_status(status: Optional[str], known: set[str], aliases: dict[str, str], fallback: str) -> str:
    if status in known:
        return status
    normalized = aliases.get(status, fallback)
    logger.debug(f"Gateway status {status!r} reported as {normalized}")
    return normalized


def _payment_summary(payment: dict) -> dict:
    return {
        "cf_payment_id": payment.get("cf_payment_id"),
        "payment_status": normalize_status(
            payment.get("payment_status"), PAYMENT_STATUSES, PAYMENT_STATUS_ALIASES, "PENDING"
        ),
        "gateway_payment_status": payment.get("payment_status"),
        "payment_amount": payment.get("payment_amount"),
        "payment_currency": payment.get("payment_currency"),
        "payment_message": payment.get("payment_message"),
        "payment_time": payment.get("payment_time"),
        "payment_group": payment.get("payment_group"),
    }


@router.post("/order-status")
async def get_order_status(
    body: OrderStatusRequest,
    cashfree: CashfreeClient = Depends(get_cashfree_client),
):
    """Current order status with its payment attempts, oldest first"""
    try:
        order = await cashfree.get_order(body.order_id)
        payments = await cashfree.get_order_payments(body.order_id)
    except CashfreeAPIError as e:
        if e.status_code == 404:
            raise NotFoundError(f"Order {body.order_id} not found")
        raise UpstreamError(f"Failed to fetch order status: {e.message}")

    return envelope(
        {
            "order_id": order.get("order_id", body.order_id),
            "order_status": normalize_status(order.get("order_status"), ORDER_STATUSES, ORDER_STATUS_ALIASES, "ACTIVE"),
            "gateway_order_status": order.get("order_status"),
            "order_amount": order.get("order_amount"),
            "order_currency": order.get("order_currency"),
            "payment_link": order.get("payment_link"),
            "customer_details": order.get("customer_details"),
            "payments": [_payment_summary(p) for p in payments],
        }
    )
