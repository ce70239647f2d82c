"""
Inventory Lookup Client

Reads product descriptions and stock counts from the storefront API:
- GET products/{id} -> Product
- GET stock/{id}    -> Stock

Every failure (transport error, non-2xx status, malformed payload) is
raised as InventoryError; callers do not distinguish between them.
"""
from typing import Optional, Protocol

import httpx
from pydantic import ValidationError

from rocketcart.cart.models import Product, ProductId, Stock
from rocketcart.errors import InventoryError
from rocketcart.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)


class InventoryLookup(Protocol):
    """Remote catalog and stock reads consumed by the cart store."""

    async def get_product(self, product_id: ProductId) -> Product:
        ...

    async def get_stock(self, product_id: ProductId) -> Stock:
        ...


class InventoryClient:
    """httpx-based InventoryLookup."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self._transport = transport
        # HTTP client (lazy init)
        self._http_client: httpx.AsyncClient | None = None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
                transport=self._transport,
            )
        return self._http_client

    async def _get_json(self, path: str) -> object:
        client = await self._get_http_client()
        try:
            response = await client.get(path)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Inventory API returned %s for %s", e.response.status_code, path)
            raise InventoryError(f"Inventory API error {e.response.status_code} for {path}") from e
        except httpx.RequestError as e:
            logger.warning("Inventory API network error for %s: %s", path, e)
            raise InventoryError(f"Failed to reach inventory API: {e!s}") from e
        except ValueError as e:
            # response.json() on a non-JSON body
            raise InventoryError(f"Inventory API sent invalid JSON for {path}") from e

    async def get_product(self, product_id: ProductId) -> Product:
        """
        Fetch a product description.

        Raises:
            InventoryError: product not found, service down or bad payload
        """
        path = f"products/{product_id}"
        data = await self._get_json(path)
        try:
            return Product.model_validate(data)
        except ValidationError as e:
            logger.warning(
                "Malformed product payload for %s: %s",
                sanitize_id_for_logging(product_id),
                e.error_count(),
            )
            raise InventoryError(f"Malformed product payload for {path}") from e

    async def get_stock(self, product_id: ProductId) -> Stock:
        """
        Fetch the stock record of a product.

        Raises:
            InventoryError: stock not found, service down or bad payload
        """
        path = f"stock/{product_id}"
        data = await self._get_json(path)
        try:
            return Stock.model_validate(data)
        except ValidationError as e:
            logger.warning(
                "Malformed stock payload for %s: %s",
                sanitize_id_for_logging(product_id),
                e.error_count(),
            )
            raise InventoryError(f"Malformed stock payload for {path}") from e

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None


__all__ = ["InventoryLookup", "InventoryClient"]
