"""Commerce Client: WooCommerce REST calls for products, tags and categories.

Invariants:
    - Non-2xx answers raise RemoteRejectedError with the status code
    - Connection/timeout errors and unreadable bodies raise RemoteTransportError
    - Creation calls return the id the storefront assigned
"""

import logging

import httpx

from catalog_sync.core.domain_types import (
    ProductId, RemoteCategoryId, RemoteService, RemoteTagId,
)
from catalog_sync.core.errors import RemoteRejectedError, RemoteTransportError
from catalog_sync.schemas.commerce import NamedItem, ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


class CommerceClient:
    """CommercePlatform over httpx."""

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    async def create_product(self, payload: ProductCreate) -> ProductId:
        data = await self._send(
            "create_product", "POST", "/products",
            payload.model_dump(mode="json", exclude_none=True),
        )
        return ProductId(self._read_id("create_product", data))

    async def update_product(
        self, product_id: ProductId, payload: ProductUpdate,
    ) -> None:
        await self._send(
            "update_product", "PUT", f"/products/{product_id}",
            payload.model_dump(mode="json", exclude_none=True),
        )

    async def create_tag(self, name: str) -> RemoteTagId:
        data = await self._send(
            "create_tag", "POST", "/products/tags",
            NamedItem(name=name).model_dump(mode="json"),
        )
        return RemoteTagId(self._read_id("create_tag", data))

    async def create_category(self, name: str) -> RemoteCategoryId:
        data = await self._send(
            "create_category", "POST", "/products/categories",
            NamedItem(name=name).model_dump(mode="json"),
        )
        return RemoteCategoryId(self._read_id("create_category", data))

    async def aclose(self) -> None:
        await self.http.aclose()

    async def _send(self, operation: str, method: str, url: str, body: dict) -> dict:
        try:
            response = await self.http.request(method, url, json=body)
        except httpx.HTTPError as e:
            logger.error(f"Commerce {operation} transport failure: {e}")
            raise RemoteTransportError(RemoteService.COMMERCE, operation, str(e))
        if not response.is_success:
            logger.warning(
                f"Commerce {operation} rejected: {response.text[:500]}",
                extra={"status_code": response.status_code},
            )
            raise RemoteRejectedError(
                RemoteService.COMMERCE, operation, response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise RemoteTransportError(
                RemoteService.COMMERCE, operation, f"invalid JSON body: {e}",
            )

    @staticmethod
    def _read_id(operation: str, data: dict) -> int:
        try:
            return int(data["id"])
        except (KeyError, TypeError, ValueError):
            raise RemoteTransportError(
                RemoteService.COMMERCE, operation, "response has no id",
            )
