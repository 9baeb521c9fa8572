"""
Hosted checkout handoff

Hands browser control to the payment provider's hosted checkout. The
handoff is fire-and-forget: once the customer is on the provider's page
the result only comes back through the return URL and the webhook.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import urlencode, urlsplit, urlunsplit, parse_qsl

from ..errors import IntegrationError

logger = logging.getLogger(__name__)

CHECKOUT_MODES = ("sandbox", "production")


@dataclass(frozen=True)
class CheckoutOptions:
    """Options passed to the provider's checkout library"""
    payment_session_id: str
    return_url: str
    redirect_target: str = "_self"
    mode: str = "production"


# Binding to the provider's client library; performs the navigation
CheckoutLauncher = Callable[[CheckoutOptions], None]


def with_order_id(url: str, order_id: str) -> str:
    """Add the order_id query parameter to a return URL"""
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query) if k != "order_id"]
    query.append(("order_id", order_id))
    return urlunsplit(parts._replace(query=urlencode(query)))


class HostedCheckout:
    """
    Provider hosted-checkout handoff.

    Usage:
        checkout = HostedCheckout(default_return_url="https://shop/payment/success")
        checkout.initialize(launcher)
        checkout.redirect_to_payment(session_id, return_url)
    """

    def __init__(
        self,
        default_return_url: str,
        mode: str = "production",
        launcher: Optional[CheckoutLauncher] = None,
    ):
        if mode not in CHECKOUT_MODES:
            raise ValueError(f"Unsupported checkout mode: {mode}")
        self.default_return_url = default_return_url
        self.mode = mode
        self._launcher = launcher

    @property
    def is_initialized(self) -> bool:
        return self._launcher is not None

    def initialize(self, launcher: CheckoutLauncher) -> None:
        """Bind the provider's checkout library once it has loaded"""
        self._launcher = launcher
        logger.info(f"Hosted checkout initialized in {self.mode} mode")

    def _launch(self, options: CheckoutOptions) -> None:
        if self._launcher is None:
            logger.error("Hosted checkout library not loaded; cannot hand off to payment page")
            raise IntegrationError("Payment provider checkout library is not loaded or initialized")
        logger.info(f"Handing off to hosted checkout (target={options.redirect_target})")
        self._launcher(options)

    def redirect_to_payment(self, payment_session_id: str, return_url: Optional[str] = None) -> None:
        """
        Send the customer to the provider's hosted checkout.

        Raises:
            IntegrationError: If the provider library is not initialized
        """
        self._launch(
            CheckoutOptions(
                payment_session_id=payment_session_id,
                return_url=return_url or self.default_return_url,
                redirect_target="_self",
                mode=self.mode,
            )
        )

    def render_in_frame(
        self,
        payment_session_id: str,
        frame_name: str,
        return_url: Optional[str] = None,
    ) -> None:
        """Render the hosted checkout inside a named frame"""
        self._launch(
            CheckoutOptions(
                payment_session_id=payment_session_id,
                return_url=return_url or self.default_return_url,
                redirect_target=frame_name,
                mode=self.mode,
            )
        )
