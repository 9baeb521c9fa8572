"""Wiring of storefront services around one explicit settings object"""

from dataclasses import dataclass
from typing import Optional

import httpx

from ..services.catalog_client import CatalogClient
from ..services.checkout import CheckoutService
from ..services.hosted_checkout import CheckoutLauncher, HostedCheckout
from ..services.payment_client import PaymentBackendClient
from ..services.reconciler import OrderStatusReconciler
from .config import Settings
from .session import CartStore, SessionManager


@dataclass
class StorefrontContext:
    """Everything a presentation layer needs, passed around explicitly"""
    settings: Settings
    sessions: SessionManager
    payments: PaymentBackendClient
    catalog: CatalogClient
    hosted_checkout: HostedCheckout
    checkout: CheckoutService
    reconciler: OrderStatusReconciler

    async def aclose(self) -> None:
        await self.payments.close()
        await self.catalog.close()


def create_context(
    settings: Settings,
    store: Optional[CartStore] = None,
    launcher: Optional[CheckoutLauncher] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> StorefrontContext:
    """
    Build the storefront services.

    Args:
        settings: Storefront settings
        store: Cart persistence (in-memory when omitted)
        launcher: Binding to the provider's checkout library, if already loaded
        transport: Optional httpx transport shared by the backend clients
    """
    payments = PaymentBackendClient(
        settings.backend_url,
        timeout=settings.request_timeout_seconds,
        transport=transport,
    )
    catalog = CatalogClient(
        settings.backend_url,
        timeout=settings.request_timeout_seconds,
        transport=transport,
    )
    hosted_checkout = HostedCheckout(
        default_return_url=settings.payment_return_url,
        mode=settings.checkout_mode,
        launcher=launcher,
    )
    return StorefrontContext(
        settings=settings,
        sessions=SessionManager(store),
        payments=payments,
        catalog=catalog,
        hosted_checkout=hosted_checkout,
        checkout=CheckoutService(settings, payments, hosted_checkout),
        reconciler=OrderStatusReconciler(payments, failed_url=settings.payment_failed_url),
    )
