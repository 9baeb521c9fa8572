# API Routes

from .products import router as products_router
from .payment import router as payment_router
from .webhook import router as webhook_router

__all__ = ["products_router", "payment_router", "webhook_router"]
