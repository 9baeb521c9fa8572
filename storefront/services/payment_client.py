"""
Payment Backend Client

HTTP client for the trusted payment backend. The storefront never calls the
payment provider directly: the provider's secret only lives on the backend.
"""

import logging
from typing import Any, Optional

import httpx
import pydantic

from ..errors import GatewayError, ProtocolError
from ..models.order import (
    BackendResponse,
    CreateOrderResult,
    EnvelopedResponse,
    FlatResponse,
    OrderRequest,
    OrderStatusResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Unknown error"


def parse_backend_response(body: Any) -> BackendResponse:
    """
    Classify a backend body as enveloped or flat.

    A body is enveloped when it carries a "success" flag together with a
    "data" object, or a false "success" flag on its own. Anything else
    shaped like an object is flat.
    """
    if not isinstance(body, dict):
        raise ProtocolError(f"Expected a JSON object from the payment backend, got {type(body).__name__}")

    if "success" in body and (isinstance(body.get("data"), dict) or body["success"] is False):
        return EnvelopedResponse(
            success=bool(body["success"]),
            payload=body.get("data") or {},
            message=body.get("message"),
        )

    return FlatResponse(payload=body)


def unwrap_response(response: BackendResponse) -> dict[str, Any]:
    """Return the canonical payload of a backend response"""
    if isinstance(response, EnvelopedResponse):
        if not response.success:
            raise GatewayError(
                f"Payment backend reported failure: {response.message or DEFAULT_ERROR_MESSAGE}"
            )
        return response.payload
    return response.payload


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return DEFAULT_ERROR_MESSAGE
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return DEFAULT_ERROR_MESSAGE


class PaymentBackendClient:
    """
    Client for the storefront's payment backend.

    Usage:
        client = PaymentBackendClient("https://shop.example.com")
        result = await client.create_order(order_request)
        status = await client.get_order_status(result.order_id)
    """

    def __init__(
        self,
        backend_url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the backend client.

        Args:
            backend_url: Base URL of the payment backend
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used to stub the backend)
        """
        self.base_url = backend_url.rstrip("/")
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def __aenter__(self) -> "PaymentBackendClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _post(self, path: str, body: dict, action: str) -> dict[str, Any]:
        """POST to the backend and return the unwrapped payload"""
        url = f"{self.base_url}{path}"

        try:
            response = await self._http_client.post(
                url,
                json=body,
                headers={"Accept": "application/json"},
            )
        except httpx.TimeoutException as e:
            logger.warning(f"{action} timed out: {e}")
            raise GatewayError(f"{action} failed: request timed out") from e
        except httpx.HTTPError as e:
            logger.warning(f"{action} failed: {e}")
            raise GatewayError(f"{action} failed: {e}") from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(f"{action} failed: {response.status_code} - {message}")
            raise GatewayError(
                f"{action} failed: {response.reason_phrase} - {message}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"{action}: backend returned a non-JSON body")
            raise ProtocolError(f"{action}: backend returned a non-JSON body") from e

        return unwrap_response(parse_backend_response(body))

    async def create_order(self, order: OrderRequest) -> CreateOrderResult:
        """
        Create an order on the backend and obtain a payment session.

        Raises:
            GatewayError: Non-success status or network failure
            ProtocolError: Malformed body or missing payment_session_id
        """
        payload = await self._post("/api/payment", order.to_backend_payload(), "Order creation")

        try:
            result = CreateOrderResult.model_validate(payload)
        except pydantic.ValidationError as e:
            logger.error(f"Order creation: unexpected backend response for {order.order_id}: {e}")
            raise ProtocolError(f"Order creation: malformed backend response: {e}") from e

        logger.info(f"Order {result.order_id} created, session ready for hosted checkout")
        return result

    async def get_order_status(self, order_id: str) -> OrderStatusResponse:
        """
        Fetch the current status of an order.

        Raises:
            GatewayError: Non-success status or network failure
            ProtocolError: Malformed body
        """
        payload = await self._post("/api/order-status", {"order_id": order_id}, "Order status query")

        try:
            status = OrderStatusResponse.model_validate(payload)
        except pydantic.ValidationError as e:
            logger.error(f"Order status query: unexpected backend response for {order_id}: {e}")
            raise ProtocolError(f"Order status query: malformed backend response: {e}") from e

        logger.debug(f"Order {order_id} status: {status.order_status.value}")
        return status
