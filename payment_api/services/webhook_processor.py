"""
Webhook processing

Classifies provider notifications and applies their side effects exactly
once per (order_id, event kind). Each side effect is recorded on its own,
so a retry after a delivery that failed partway only runs what is left.
"""

import logging
from typing import Any, Callable, Optional

from ..database.orders import OrderDatabase
from ..database.products import ProductDatabase
from ..database.webhook_events import WebhookEventStore
from ..models.payment import OrderRecordStatus
from ..models.webhook import EVENT_TYPES, WebhookEventKind, WebhookOutcome, WebhookPayload
from .notifications import OrderNotifier

logger = logging.getLogger(__name__)


def classify_event(event_type: Optional[str]) -> WebhookEventKind:
    """Map a provider event type to exactly one event kind"""
    if not event_type:
        return WebhookEventKind.UNRECOGNIZED
    return EVENT_TYPES.get(event_type, WebhookEventKind.UNRECOGNIZED)


def _payment_id(payment: dict[str, Any]) -> Optional[str]:
    payment_id = payment.get("cf_payment_id")
    return str(payment_id) if payment_id is not None else None


class WebhookProcessor:
    """Applies payment outcomes reported by the provider"""

    def __init__(
        self,
        orders: OrderDatabase,
        products: ProductDatabase,
        events: WebhookEventStore,
        notifier: OrderNotifier,
    ):
        self.orders = orders
        self.products = products
        self.events = events
        self.notifier = notifier
        self._handlers: dict[WebhookEventKind, Callable[[str, dict, dict], None]] = {
            WebhookEventKind.PAYMENT_SUCCEEDED: self._handle_success,
            WebhookEventKind.PAYMENT_FAILED: self._handle_failure,
            WebhookEventKind.PAYMENT_USER_DROPPED: self._handle_dropped,
        }

    def process(self, payload: WebhookPayload) -> WebhookOutcome:
        """Apply a webhook notification unless it was already applied"""
        kind = classify_event(payload.type)

        if kind == WebhookEventKind.UNRECOGNIZED:
            logger.info(f"Unhandled webhook type: {payload.type}")
            return WebhookOutcome.IGNORED

        order_id = payload.order_id
        if not order_id:
            logger.warning(f"Webhook {payload.type} without order_id ignored")
            return WebhookOutcome.IGNORED

        if self.events.is_applied(order_id, kind.value):
            logger.info(f"[Order: {order_id}] Duplicate {kind.value} webhook skipped")
            return WebhookOutcome.DUPLICATE

        self._handlers[kind](order_id, payload.data.order, payload.data.payment)
        self.events.mark_applied(order_id, kind.value)
        return WebhookOutcome.APPLIED

    def _once(self, order_id: str, kind: WebhookEventKind, step: str, action: Callable[[], None]) -> None:
        """Run one side effect of an event unless an earlier delivery already completed it"""
        key = f"{kind.value}:{step}"
        if self.events.is_applied(order_id, key):
            logger.info(f"[Order: {order_id}] {key} already done on an earlier delivery")
            return
        action()
        self.events.mark_applied(order_id, key)

    def _handle_success(self, order_id: str, order: dict, payment: dict) -> None:
        logger.info(
            f"[Order: {order_id}] Payment successful: amount={order.get('order_amount')}, "
            f"payment_id={payment.get('cf_payment_id')}"
        )

        record = self.orders.get_order(order_id)
        if record is None:
            logger.warning(f"[Order: {order_id}] Paid order not found in ledger; stock not adjusted")
            return

        def mark_paid() -> None:
            self.orders.update_status(order_id, OrderRecordStatus.PAID, _payment_id(payment))
            for item in record.items:
                if not self.products.update_stock(item.product_id, item.variant_id, -item.quantity):
                    logger.warning(
                        f"[Order: {order_id}] Could not decrement stock for "
                        f"{item.product_id}/{item.variant_id} by {item.quantity} (oversold or unknown)"
                    )

        kind = WebhookEventKind.PAYMENT_SUCCEEDED
        self._once(order_id, kind, "ledger", mark_paid)
        self._once(
            order_id,
            kind,
            "notify",
            lambda: self.notifier.order_confirmed(order_id, record.customer_email, record.amount),
        )

    def _handle_failure(self, order_id: str, order: dict, payment: dict) -> None:
        reason = payment.get("payment_message")
        logger.info(f"[Order: {order_id}] Payment failed: {reason}")

        record = self.orders.get_order(order_id)
        if record is None:
            logger.warning(f"[Order: {order_id}] Failed order not found in ledger")
            return
        if record.status == OrderRecordStatus.PAID:
            logger.info(f"[Order: {order_id}] Already paid; failed attempt recorded only")
            return

        kind = WebhookEventKind.PAYMENT_FAILED
        self._once(
            order_id,
            kind,
            "ledger",
            lambda: self.orders.update_status(order_id, OrderRecordStatus.FAILED, _payment_id(payment)),
        )
        self._once(
            order_id,
            kind,
            "notify",
            lambda: self.notifier.payment_failed(order_id, record.customer_email, reason),
        )

    def _handle_dropped(self, order_id: str, order: dict, payment: dict) -> None:
        logger.info(f"[Order: {order_id}] Payment dropped by user: amount={order.get('order_amount')}")

        record = self.orders.get_order(order_id)
        if record is None:
            logger.warning(f"[Order: {order_id}] Dropped order not found in ledger")
            return
        if record.status == OrderRecordStatus.PAID:
            return

        self.orders.update_status(order_id, OrderRecordStatus.ABANDONED)
