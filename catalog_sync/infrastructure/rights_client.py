"""Rights Client: licensing-service calls for sale simulation, sale, download, metadata.

Invariants:
    - Sale and download calls return the raw RemoteResponse whatever the status
    - Only transport failures raise (RemoteTransportError)
    - fetch_publication_metadata raises RemoteRejectedError on non-200
"""

import logging

import httpx
from pydantic import ValidationError

from catalog_sync.core.domain_types import RemoteService
from catalog_sync.core.errors import RemoteRejectedError, RemoteTransportError
from catalog_sync.schemas.rights import (
    PublicationMetadata, RemoteResponse, SaleRequest, SaleSimulationQuery,
)

logger = logging.getLogger(__name__)


class RightsClient:
    """RightsService over httpx."""

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    async def simulate_sale(
        self, isbn: str, query: SaleSimulationQuery,
    ) -> RemoteResponse:
        return await self._send(
            "simulate_sale", "GET", f"/publications/{isbn}/simulate_sale",
            params=query.model_dump(exclude_none=True),
        )

    async def register_sale(self, isbn: str, request: SaleRequest) -> RemoteResponse:
        return await self._send(
            "register_sale", "POST", f"/publications/{isbn}/sales",
            json=request.model_dump(mode="json", exclude_none=True),
        )

    async def get_download_url(
        self, customer: str, order_id: str, sku: str, fmt: str, username: str,
    ) -> RemoteResponse:
        return await self._send(
            "get_download_url", "GET",
            f"/customers/{customer}/orders/{order_id}/publications/{sku}/download_url",
            params={"format": fmt, "uname": username},
        )

    async def fetch_publication_metadata(self, isbn: str) -> PublicationMetadata:
        response = await self._send(
            "fetch_publication_metadata", "GET", f"/publications/{isbn}",
        )
        if response.status_code != 200:
            raise RemoteRejectedError(
                RemoteService.RIGHTS, "fetch_publication_metadata",
                response.status_code,
            )
        try:
            return PublicationMetadata.model_validate_json(response.body)
        except ValidationError as e:
            raise RemoteTransportError(
                RemoteService.RIGHTS, "fetch_publication_metadata",
                f"invalid metadata payload: {e.error_count()} errors",
            )

    async def aclose(self) -> None:
        await self.http.aclose()

    async def _send(self, operation: str, method: str, url: str, **kwargs) -> RemoteResponse:
        try:
            response = await self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Rights {operation} transport failure: {e}")
            raise RemoteTransportError(RemoteService.RIGHTS, operation, str(e))
        return RemoteResponse(status_code=response.status_code, body=response.text)
