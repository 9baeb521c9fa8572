# Database modules

from .products import product_db, ProductDatabase, get_product_db
from .orders import order_db, OrderDatabase, get_order_db
from .webhook_events import webhook_event_store, WebhookEventStore, get_webhook_event_store

__all__ = [
    "product_db",
    "ProductDatabase",
    "get_product_db",
    "order_db",
    "OrderDatabase",
    "get_order_db",
    "webhook_event_store",
    "WebhookEventStore",
    "get_webhook_event_store",
]
