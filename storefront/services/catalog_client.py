"""Catalog lookup over the backend's read-only product endpoints"""

import logging
from typing import Any, Optional

import httpx
import pydantic

from ..errors import GatewayError, ProtocolError
from ..models.product import Product

logger = logging.getLogger(__name__)


class CatalogClient:
    """Read-only access to products and their variants"""

    def __init__(
        self,
        backend_url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = backend_url.rstrip("/")
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        await self._http_client.aclose()

    async def _get(self, path: str, params: Optional[dict] = None) -> Optional[Any]:
        try:
            response = await self._http_client.get(f"{self.base_url}{path}", params=params)
        except httpx.HTTPError as e:
            raise GatewayError(f"Catalog request failed: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise GatewayError(
                f"Catalog request failed: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProtocolError("Catalog returned a non-JSON body") from e

    async def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product with its variants, or None if it does not exist"""
        body = await self._get(f"/api/products/{product_id}")
        if body is None:
            return None
        try:
            return Product.model_validate(body)
        except pydantic.ValidationError as e:
            logger.error(f"Malformed catalog entry for {product_id}: {e}")
            raise ProtocolError(f"Malformed catalog entry for {product_id}") from e

    async def list_products(self, category: Optional[str] = None, featured_only: bool = False) -> list[Product]:
        params: dict[str, Any] = {}
        if category:
            params["category"] = category
        if featured_only:
            params["featured"] = "true"

        body = await self._get("/api/products", params=params)
        if body is None:
            return []
        try:
            return [Product.model_validate(p) for p in body.get("products", [])]
        except (pydantic.ValidationError, AttributeError) as e:
            logger.error(f"Malformed catalog listing: {e}")
            raise ProtocolError("Malformed catalog listing") from e
