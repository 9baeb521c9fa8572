"""
Payment API Application

Trusted backend for the Luxe & Lush storefront. Creates payment orders with
Cashfree, reports order status and receives payment webhooks.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

from .core.config import get_settings
from .core.errors import BadRequestError, PaymentAPIError
from .routes import products_router, payment_router, webhook_router
from .services.cashfree_client import CashfreeClient

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "config", ".env"))

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Payment API starting up...")
    if settings.cashfree_configured:
        app.state.cashfree_client = CashfreeClient(
            app_id=settings.cashfree_app_id,
            secret_key=settings.cashfree_secret_key,
            environment=settings.cashfree_environment,
            api_version=settings.cashfree_api_version,
            timeout=settings.request_timeout_seconds,
        )
    else:
        app.state.cashfree_client = None
        logger.warning("Cashfree credentials not configured - payment endpoints disabled")
    logger.info(f"Webhook signatures: {'enabled' if settings.get_webhook_secret() else 'not configured'}")

    yield

    logger.info("Payment API shutting down...")
    if app.state.cashfree_client:
        await app.state.cashfree_client.close()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Payment backend for the Luxe & Lush jewelry storefront",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PaymentAPIError)
async def payment_api_error_handler(request: Request, exc: PaymentAPIError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = sorted({".".join(str(part) for part in err["loc"][1:]) for err in exc.errors()} - {""}) or ["body"]
    error = BadRequestError(f"Missing or invalid fields: {', '.join(fields)}")
    return JSONResponse(status_code=error.status_code, content=error.to_body())


# Include API routers
app.include_router(products_router)
app.include_router(payment_router)
app.include_router(webhook_router)


@app.get("/")
async def home():
    return {
        "message": "Luxe & Lush Payment API",
        "docs": "/docs",
        "endpoints": {
            "products": "/api/products",
            "payment": "/api/payment",
            "order_status": "/api/order-status",
            "webhook": "/api/webhook",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "payment-api",
        "cashfree_configured": settings.cashfree_configured,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "payment_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
