"""Customer notifications triggered by payment outcomes"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class OrderNotifier:
    """
    Sends order notifications.

    Records what was sent; delivery is logged until a mail provider is
    configured.
    """

    def __init__(self):
        self.sent: list[dict] = []

    def _send(self, kind: str, order_id: str, email: Optional[str], details: dict) -> None:
        message = {"kind": kind, "order_id": order_id, "email": email, **details}
        self.sent.append(message)
        logger.info(f"[Order: {order_id}] Notification '{kind}' queued for {email or 'unknown recipient'}")

    def order_confirmed(self, order_id: str, email: Optional[str], amount: Optional[float]) -> None:
        self._send("order_confirmed", order_id, email, {"amount": amount})

    def payment_failed(self, order_id: str, email: Optional[str], reason: Optional[str]) -> None:
        self._send("payment_failed", order_id, email, {"reason": reason})


# Singleton instance
order_notifier = OrderNotifier()


def get_order_notifier() -> OrderNotifier:
    return order_notifier
