"""FastAPI dependencies shared by the payment API routes"""

from typing import Optional

from fastapi import Depends, Request

from .core.config import Settings, get_settings
from .core.errors import ConfigurationError
from .database import (
    OrderDatabase,
    ProductDatabase,
    WebhookEventStore,
    get_order_db,
    get_product_db,
    get_webhook_event_store,
)
from .security.webhook_signature import WebhookSignatureVerifier
from .services.cashfree_client import CashfreeClient
from .services.notifications import OrderNotifier, get_order_notifier
from .services.webhook_processor import WebhookProcessor


def get_cashfree_client(request: Request) -> CashfreeClient:
    """Cashfree client created at startup; missing when credentials are not configured"""
    client = getattr(request.app.state, "cashfree_client", None)
    if client is None:
        raise ConfigurationError("Cashfree credentials not configured")
    return client


def get_signature_verifier(settings: Settings = Depends(get_settings)) -> Optional[WebhookSignatureVerifier]:
    secret = settings.get_webhook_secret()
    if not secret:
        return None
    return WebhookSignatureVerifier(secret=secret, max_age_seconds=settings.webhook_max_age_seconds)


def get_webhook_processor(
    orders: OrderDatabase = Depends(get_order_db),
    products: ProductDatabase = Depends(get_product_db),
    events: WebhookEventStore = Depends(get_webhook_event_store),
    notifier: OrderNotifier = Depends(get_order_notifier),
) -> WebhookProcessor:
    return WebhookProcessor(orders=orders, products=products, events=events, notifier=notifier)
