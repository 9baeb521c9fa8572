"""
Cashfree Payment Gateway Client

Server-side HTTP client for the Cashfree PG orders API. Holds the client
secret, so it must only ever run inside the payment API.
"""

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

SANDBOX_BASE_URL = "https://sandbox.cashfree.com/pg"
PRODUCTION_BASE_URL = "https://api.cashfree.com/pg"


class CashfreeAPIError(Exception):
    """Cashfree rejected a request or could not be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class CashfreeClient:
    """
    Client for the Cashfree PG orders API.

    Usage:
        client = CashfreeClient(app_id="...", secret_key="...", environment="sandbox")
        order = await client.create_order(order_data)
        status = await client.get_order(order["order_id"])
    """

    def __init__(
        self,
        app_id: str,
        secret_key: str,
        environment: str = "production",
        api_version: str = "2023-08-01",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Cashfree client.

        Args:
            app_id: Cashfree client id
            secret_key: Cashfree client secret
            environment: "sandbox" or "production"
            api_version: Value of the x-api-version header
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used to stub Cashfree)
        """
        self.environment = environment
        self.base_url = PRODUCTION_BASE_URL if environment == "production" else SANDBOX_BASE_URL
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "x-api-version": api_version,
            "x-client-id": app_id,
            "x-client-secret": secret_key,
        }
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)
        logger.info(f"Cashfree client initialized for {environment} ({self.base_url})")

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def _request(self, method: str, path: str, body: Optional[dict] = None) -> Any:
        """Make an authenticated request to Cashfree"""
        url = f"{self.base_url}{path}"

        try:
            response = await self._http_client.request(
                method=method,
                url=url,
                headers=self._headers,
                json=body,
            )
        except httpx.HTTPError as e:
            logger.error(f"Cashfree request {method} {path} failed: {e}")
            raise CashfreeAPIError(f"Cashfree unreachable: {e}") from e

        if response.status_code >= 400:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {}
            message = error_data.get("message") if isinstance(error_data, dict) else None
            logger.error(f"Cashfree API error: {response.status_code} - {error_data}")
            raise CashfreeAPIError(
                f"{response.reason_phrase} - {message or 'Unknown error'}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise CashfreeAPIError("Cashfree returned a non-JSON body", status_code=response.status_code) from e

    # ==================== Order APIs ====================

    async def create_order(self, order_data: dict) -> dict:
        """Create an order and obtain its payment session"""
        logger.info(f"Creating Cashfree order {order_data.get('order_id')}")
        return await self._request("POST", "/orders", body=order_data)

    async def get_order(self, order_id: str) -> dict:
        """Get order details"""
        return await self._request("GET", f"/orders/{order_id}")

    async def get_order_payments(self, order_id: str) -> list[dict]:
        """Get the payment attempts made against an order, oldest first"""
        payments = await self._request("GET", f"/orders/{order_id}/payments")
        if not isinstance(payments, list):
            return []
        return sorted(payments, key=lambda p: p.get("payment_time") or "")
