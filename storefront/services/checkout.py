"""
Checkout flow

Builds the order for a session's cart, creates it on the payment backend
and hands the customer off to hosted checkout. A failed attempt leaves the
cart untouched so the customer can correct it and retry.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.config import Settings
from ..core.session import ShoppingSession
from ..errors import (
    GatewayError,
    IntegrationError,
    ProtocolError,
    StorefrontError,
    ValidationError,
)
from ..models.order import CreateOrderResult, CustomerInfo
from .hosted_checkout import HostedCheckout, with_order_id
from .order_builder import build_order_request
from .payment_client import PaymentBackendClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutAttempt:
    """Outcome of starting a checkout"""
    started: bool
    order_id: Optional[str] = None
    result: Optional[CreateOrderResult] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None


class CheckoutService:
    """Starts hosted checkout for a shopping session"""

    def __init__(
        self,
        settings: Settings,
        client: PaymentBackendClient,
        hosted_checkout: HostedCheckout,
    ):
        self.settings = settings
        self.client = client
        self.hosted_checkout = hosted_checkout

    def _failed(self, session: ShoppingSession, error: StorefrontError) -> CheckoutAttempt:
        if isinstance(error, ValidationError):
            logger.info(f"Session {session.session_id}: checkout rejected: {error.message}")
        elif isinstance(error, ProtocolError):
            logger.error(f"Session {session.session_id}: payment backend contract violation: {error.message}")
        elif isinstance(error, IntegrationError):
            logger.error(f"Session {session.session_id}: hosted checkout unavailable: {error.message}")
        else:
            logger.warning(f"Session {session.session_id}: payment could not be started: {error.message}")

        return CheckoutAttempt(
            started=False,
            error=error.user_message,
            error_kind=type(error).__name__,
        )

    async def start_checkout(self, session: ShoppingSession, customer: CustomerInfo) -> CheckoutAttempt:
        """
        Start hosted checkout for the session's cart.

        Clearing the cart after a successful handoff is left to the caller.
        """
        try:
            order = build_order_request(
                session.cart,
                customer,
                currency=self.settings.currency,
                return_url=self.settings.payment_return_url,
                source=self.settings.order_source,
                platform=self.settings.order_platform,
            )
            result = await self.client.create_order(order)
            self.hosted_checkout.redirect_to_payment(
                result.payment_session_id,
                with_order_id(self.settings.payment_return_url, result.order_id),
            )
        except (ValidationError, GatewayError, ProtocolError, IntegrationError) as e:
            return self._failed(session, e)

        logger.info(f"Session {session.session_id}: handed off order {result.order_id} to hosted checkout")
        return CheckoutAttempt(started=True, order_id=result.order_id, result=result)
