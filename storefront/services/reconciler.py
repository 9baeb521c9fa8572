"""
Order status reconciliation

Best-effort confirmation shown to the customer after returning from hosted
checkout. The provider's webhook remains the source of truth.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional
from urllib.parse import urlencode

from ..errors import GatewayError, ProtocolError
from ..models.order import OrderStatus, OrderStatusResponse, PaymentStatus
from .payment_client import PaymentBackendClient

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_REASON = "Payment was not completed successfully"

DECLINED_ORDER_STATUSES = {OrderStatus.EXPIRED, OrderStatus.CANCELLED}
DECLINED_PAYMENT_STATUSES = {PaymentStatus.FAILED, PaymentStatus.USER_DROPPED}


class PaymentOutcome(str, Enum):
    """What the storefront can tell the customer after checkout"""
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    PENDING = "pending"
    UNVERIFIED = "unverified"


@dataclass(frozen=True)
class PaymentReturn:
    """Query parameters carried by the return URL"""
    order_id: Optional[str] = None
    reason: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def failure_reason(self) -> str:
        return self.reason or DEFAULT_FAILURE_REASON


@dataclass(frozen=True)
class ReconciliationResult:
    outcome: PaymentOutcome
    order_id: Optional[str] = None
    order: Optional[OrderStatusResponse] = None
    message: Optional[str] = None
    error_code: Optional[str] = None
    redirect_url: Optional[str] = None

    @property
    def verified(self) -> bool:
        return self.outcome == PaymentOutcome.CONFIRMED


def parse_return_params(query: Mapping[str, str]) -> PaymentReturn:
    """Read order_id, reason and error_code from return URL parameters"""
    return PaymentReturn(
        order_id=query.get("order_id") or None,
        reason=query.get("reason") or None,
        error_code=query.get("error_code") or None,
    )


def is_payment_verified(status: OrderStatusResponse) -> bool:
    """
    Decide whether an order counts as paid.

    The order must be PAID and, when payment attempts are listed, the most
    recent attempt must have succeeded.
    """
    if status.order_status != OrderStatus.PAID:
        return False

    latest = status.latest_payment
    if latest is None:
        return True
    return latest.payment_status == PaymentStatus.SUCCESS


def classify_status(status: OrderStatusResponse) -> PaymentOutcome:
    if is_payment_verified(status):
        return PaymentOutcome.CONFIRMED

    if status.order_status in DECLINED_ORDER_STATUSES:
        return PaymentOutcome.DECLINED

    latest = status.latest_payment
    if latest is not None and latest.payment_status in DECLINED_PAYMENT_STATUSES:
        return PaymentOutcome.DECLINED

    return PaymentOutcome.PENDING


class OrderStatusReconciler:
    """Confirms payment state for the customer after hosted checkout"""

    def __init__(self, client: PaymentBackendClient, failed_url: Optional[str] = None):
        self.client = client
        self.failed_url = failed_url

    def failure_redirect(self, order_id: str, reason: str, error_code: Optional[str] = None) -> Optional[str]:
        """URL of the payment-failed page carrying order_id, reason and error_code"""
        if not self.failed_url:
            return None
        params = {"order_id": order_id, "reason": reason}
        if error_code:
            params["error_code"] = error_code
        separator = "&" if "?" in self.failed_url else "?"
        return f"{self.failed_url}{separator}{urlencode(params)}"

    async def get_order_status(self, order_id: str) -> OrderStatusResponse:
        return await self.client.get_order_status(order_id)

    async def verify_payment(self, order_id: str) -> bool:
        """
        Check whether an order has been paid.

        Returns False for orders that are not (yet) paid.

        Raises:
            GatewayError: If the status query itself fails
        """
        status = await self.client.get_order_status(order_id)
        verified = is_payment_verified(status)
        logger.info(f"Order {order_id} verification: {'paid' if verified else status.order_status.value}")
        return verified

    async def reconcile(self, payment_return: PaymentReturn) -> ReconciliationResult:
        """
        Turn a return from hosted checkout into a customer-facing outcome.

        DECLINED means the payment is known to have failed; UNVERIFIED means
        the storefront could not find out.
        """
        order_id = payment_return.order_id
        if not order_id:
            logger.warning("Payment return without order_id")
            return ReconciliationResult(
                outcome=PaymentOutcome.UNVERIFIED,
                message="We couldn't verify your payment. Please contact support if you believe this is an error.",
            )

        try:
            status = await self.client.get_order_status(order_id)
        except ProtocolError as e:
            logger.error(f"Order {order_id}: status response violated the backend contract: {e}")
            return ReconciliationResult(
                outcome=PaymentOutcome.UNVERIFIED,
                order_id=order_id,
                message=e.user_message,
            )
        except GatewayError as e:
            logger.warning(f"Order {order_id}: status query failed: {e}")
            return ReconciliationResult(
                outcome=PaymentOutcome.UNVERIFIED,
                order_id=order_id,
                message=e.user_message,
            )

        outcome = classify_status(status)
        message = None
        redirect_url = None
        if outcome == PaymentOutcome.DECLINED:
            latest = status.latest_payment
            message = payment_return.reason or (latest.payment_message if latest else None) or DEFAULT_FAILURE_REASON
            redirect_url = self.failure_redirect(order_id, message, payment_return.error_code)

        return ReconciliationResult(
            outcome=outcome,
            order_id=order_id,
            order=status,
            message=message,
            error_code=payment_return.error_code,
            redirect_url=redirect_url,
        )
