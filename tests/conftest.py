import json
from typing import Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from payment_api.core.config import Settings as APISettings, get_settings as get_api_settings
from payment_api.database import (
    OrderDatabase,
    ProductDatabase,
    WebhookEventStore,
    get_order_db,
    get_product_db,
    get_webhook_event_store,
)
from payment_api.dependencies import get_cashfree_client
from payment_api.main import app
from payment_api.services.cashfree_client import CashfreeClient
from payment_api.services.notifications import OrderNotifier, get_order_notifier
from storefront.core.config import Settings as StorefrontSettings
from storefront.models import CartState, Product, Variant


# ==================== Storefront fixtures ====================


@pytest.fixture
def red():
    return Variant(id="v-red", color="Ruby Red", color_code="#9B111E", stock=5, price=0)


@pytest.fixture
def gold():
    return Variant(id="v-gold", color="Classic Gold", color_code="#FFD700", stock=3, price=250)


@pytest.fixture
def sold_out():
    return Variant(id="v-none", color="Onyx", color_code="#000000", stock=0, price=0)


@pytest.fixture
def bangle(red, gold, sold_out):
    return Product(
        id="prod-bangle",
        name="Golden Rose Bangle",
        base_price=2500,
        category="bangles",
        sizes=("S", "M", "L"),
        variants=(red, gold, sold_out),
    )


@pytest.fixture
def earrings():
    return Product(
        id="prod-earrings",
        name="Pearl Drop Earrings",
        base_price=1200,
        category="earrings",
        sizes=("One Size",),
        variants=(Variant(id="v-pearl", color="Ivory", stock=10, price=100),),
    )


@pytest.fixture
def empty_cart():
    return CartState()


@pytest.fixture
def storefront_settings():
    return StorefrontSettings(
        _env_file=None,
        backend_url="http://backend.test",
        public_origin="https://shop.test",
        currency="INR",
        checkout_mode="sandbox",
    )


def json_response(status_code: int, body) -> httpx.Response:
    return httpx.Response(status_code, json=body)


# ==================== Payment API fixtures ====================


class FakeCashfree:
    """Stand-in for the Cashfree PG orders API"""

    def __init__(self):
        self.orders: dict[str, dict] = {}
        self.payments: dict[str, list[dict]] = {}
        self.requests: list[httpx.Request] = []
        self.create_error: Optional[httpx.Response] = None
        self.omit_session = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "POST" and path == "/pg/orders":
            if self.create_error is not None:
                return self.create_error
            body = json.loads(request.content)
            order = {
                "cf_order_id": 1000 + len(self.orders),
                "order_id": body["order_id"],
                "order_amount": body["order_amount"],
                "order_currency": body["order_currency"],
                "order_status": "ACTIVE",
                "customer_details": body["customer_details"],
                "order_meta": body["order_meta"],
                "order_tags": body.get("order_tags"),
                "payment_link": f"https://payments.test/{body['order_id']}",
            }
            if not self.omit_session:
                order["payment_session_id"] = f"session_{body['order_id']}"
            self.orders[body["order_id"]] = order
            return json_response(200, order)

        parts = path.split("/")
        if request.method == "GET" and len(parts) >= 4 and parts[2] == "orders":
            order_id = parts[3]
            order = self.orders.get(order_id)
            if order is None:
                return json_response(404, {"message": "order not found", "code": "order_not_found"})
            if len(parts) == 5 and parts[4] == "payments":
                return json_response(200, self.payments.get(order_id, []))
            return json_response(200, order)

        return json_response(404, {"message": "unknown endpoint"})


@pytest.fixture
def fake_cashfree():
    return FakeCashfree()


@pytest.fixture
def api_settings():
    return APISettings(
        _env_file=None,
        cashfree_app_id="app-id",
        cashfree_secret_key="client-secret",
        cashfree_environment="sandbox",
        cashfree_webhook_secret="webhook-secret",
        storefront_origin="https://shop.test",
        api_base_url="https://api.shop.test",
    )


@pytest.fixture
def order_db():
    return OrderDatabase()


@pytest.fixture
def product_db():
    return ProductDatabase()


@pytest.fixture
def event_store():
    return WebhookEventStore()


@pytest.fixture
def notifier():
    return OrderNotifier()


@pytest.fixture
def client(api_settings, fake_cashfree, order_db, product_db, event_store, notifier):
    cashfree = CashfreeClient(
        app_id=api_settings.cashfree_app_id,
        secret_key=api_settings.cashfree_secret_key,
        environment=api_settings.cashfree_environment,
        transport=httpx.MockTransport(fake_cashfree.handler),
    )
    app.dependency_overrides[get_api_settings] = lambda: api_settings
    app.dependency_overrides[get_cashfree_client] = lambda: cashfree
    app.dependency_overrides[get_order_db] = lambda: order_db
    app.dependency_overrides[get_product_db] = lambda: product_db
    app.dependency_overrides[get_webhook_event_store] = lambda: event_store
    app.dependency_overrides[get_order_notifier] = lambda: notifier

    yield TestClient(app)

    app.dependency_overrides.clear()
