import json

import httpx
import pytest

from storefront.errors import GatewayError, ProtocolError
from storefront.models import CustomerInfo, EnvelopedResponse, FlatResponse, OrderStatus, PaymentStatus
from storefront.models import AddItem
from storefront.services.cart import apply
from storefront.services.order_builder import build_order_request
from storefront.services.payment_client import (
    PaymentBackendClient,
    parse_backend_response,
    unwrap_response,
)

BACKEND = "http://backend.test"


@pytest.fixture
def order(empty_cart, bangle, red):
    cart = apply(empty_cart, AddItem(product=bangle, variant=red, quantity=1, size="M"))
    customer = CustomerInfo(name="Asha Rao", email="asha@example.com", phone="9876543210")
    return build_order_request(cart, customer)


def backend(handler):
    return PaymentBackendClient(BACKEND, transport=httpx.MockTransport(handler))


class TestResponseShapes:
    def test_enveloped(self):
        response = parse_backend_response({"success": True, "data": {"order_id": "A"}})

        assert isinstance(response, EnvelopedResponse)
        assert unwrap_response(response) == {"order_id": "A"}

    def test_flat(self):
        response = parse_backend_response({"order_id": "A", "payment_session_id": "s"})

        assert isinstance(response, FlatResponse)
        assert unwrap_response(response)["payment_session_id"] == "s"

    def test_envelope_reporting_failure(self):
        response = parse_backend_response({"success": False, "message": "order rejected"})

        with pytest.raises(GatewayError, match="order rejected"):
            unwrap_response(response)

    def test_non_object_body(self):
        with pytest.raises(ProtocolError):
            parse_backend_response(["not", "an", "object"])


class TestCreateOrder:
    async def test_enveloped_success(self, order):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"success": True, "data": {"order_id": order.order_id, "payment_session_id": "session_1"}},
            )

        async with backend(handler) as client:
            result = await client.create_order(order)

        assert result.order_id == order.order_id
        assert result.payment_session_id == "session_1"
        assert seen["path"] == "/api/payment"
        assert seen["body"]["order_amount"] == 2500
        assert seen["body"]["customer_email"] == "asha@example.com"

    async def test_flat_success(self, order):
        def handler(request):
            return httpx.Response(200, json={"order_id": order.order_id, "payment_session_id": "session_2"})

        async with backend(handler) as client:
            result = await client.create_order(order)

        assert result.payment_session_id == "session_2"

    async def test_backend_may_reissue_order_id(self, order):
        def handler(request):
            return httpx.Response(200, json={"order_id": "ORDER_1_1", "payment_session_id": "s"})

        async with backend(handler) as client:
            result = await client.create_order(order)

        assert result.order_id == "ORDER_1_1"

    @pytest.mark.parametrize("payment_session_id", [None, ""])
    async def test_missing_session_is_protocol_error(self, order, payment_session_id):
        def handler(request):
            body = {"order_id": order.order_id}
            if payment_session_id is not None:
                body["payment_session_id"] = payment_session_id
            return httpx.Response(200, json={"success": True, "data": body})

        async with backend(handler) as client:
            with pytest.raises(ProtocolError):
                await client.create_order(order)

    async def test_error_status_carries_backend_message(self, order):
        def handler(request):
            return httpx.Response(400, json={"success": False, "message": "customer_phone is invalid"})

        async with backend(handler) as client:
            with pytest.raises(GatewayError) as exc_info:
                await client.create_order(order)

        assert exc_info.value.status_code == 400
        assert "customer_phone is invalid" in exc_info.value.message

    async def test_error_status_without_json_uses_generic_text(self, order):
        def handler(request):
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        async with backend(handler) as client:
            with pytest.raises(GatewayError) as exc_info:
                await client.create_order(order)

        assert exc_info.value.status_code == 502
        assert "Unknown error" in exc_info.value.message

    async def test_network_failure_is_gateway_error(self, order):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with backend(handler) as client:
            with pytest.raises(GatewayError) as exc_info:
                await client.create_order(order)

        assert exc_info.value.status_code is None

    async def test_timeout_is_gateway_error(self, order):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with backend(handler) as client:
            with pytest.raises(GatewayError, match="timed out"):
                await client.create_order(order)

    async def test_non_json_success_is_protocol_error(self, order):
        def handler(request):
            return httpx.Response(200, text="ok")

        async with backend(handler) as client:
            with pytest.raises(ProtocolError):
                await client.create_order(order)


class TestOrderStatus:
    async def test_status_with_payments(self):
        def handler(request):
            assert json.loads(request.content) == {"order_id": "ORDER_1_1"}
            return httpx.Response(
                200,
                json={
                    "success": True,
                    "data": {
                        "order_id": "ORDER_1_1",
                        "order_status": "PAID",
                        "order_amount": 2500,
                        "payments": [
                            {"cf_payment_id": 1, "payment_status": "FAILED"},
                            {"cf_payment_id": 2, "payment_status": "SUCCESS"},
                        ],
                    },
                },
            )

        async with backend(handler) as client:
            status = await client.get_order_status("ORDER_1_1")

        assert status.order_status == OrderStatus.PAID
        assert status.latest_payment.cf_payment_id == 2

    async def test_provider_only_statuses_are_read_as_unpaid(self):
        def handler(request):
            return httpx.Response(
                200,
                json={
                    "order_id": "ORDER_1_1",
                    "order_status": "TERMINATED",
                    "payments": [
                        {"cf_payment_id": 1, "payment_status": "VOID"},
                        {"cf_payment_id": 2, "payment_status": "SOMETHING_NEW"},
                    ],
                },
            )

        async with backend(handler) as client:
            status = await client.get_order_status("ORDER_1_1")

        assert status.order_status == OrderStatus.CANCELLED
        assert [p.payment_status for p in status.payments] == [PaymentStatus.FAILED, PaymentStatus.PENDING]

    async def test_missing_status_is_protocol_error(self):
        def handler(request):
            return httpx.Response(200, json={"order_id": "ORDER_1_1", "order_status": None})

        async with backend(handler) as client:
            with pytest.raises(ProtocolError):
                await client.get_order_status("ORDER_1_1")

    async def test_not_found(self):
        def handler(request):
            return httpx.Response(404, json={"success": False, "error": "not_found", "message": "Order not found"})

        async with backend(handler) as client:
            with pytest.raises(GatewayError) as exc_info:
                await client.get_order_status("ORDER_1_1")

        assert exc_info.value.status_code == 404
