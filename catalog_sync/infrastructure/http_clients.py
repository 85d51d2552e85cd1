"""HTTP Clients: httpx.AsyncClient construction and the process-wide remote clients.

Invariants:
    - One AsyncClient per remote service, created on startup, closed on shutdown
    - Timeouts come from settings; there is no retry layer

Design Decisions:
    - Singletons initialized in the FastAPI lifespan, same as db_manager
"""

import logging

import httpx

from catalog_sync.config import Settings
from catalog_sync.infrastructure.commerce_client import CommerceClient
from catalog_sync.infrastructure.rights_client import RightsClient

logger = logging.getLogger(__name__)

USER_AGENT = "catalog-sync/1.0"


def build_async_client(
    base_url: str,
    timeout_seconds: float,
    *,
    auth: httpx.Auth | None = None,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Create an httpx.AsyncClient with the service defaults."""
    headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(timeout_seconds),
        auth=auth,
        headers=headers,
    )


# Singletons (initialized on startup)
commerce_client: CommerceClient | None = None
rights_client: RightsClient | None = None


def init_remote_clients(settings: Settings) -> None:
    global commerce_client, rights_client
    commerce_client = CommerceClient(build_async_client(
        settings.commerce_base_url,
        settings.http_timeout_seconds,
        auth=httpx.BasicAuth(
            settings.commerce_consumer_key, settings.commerce_consumer_secret,
        ),
    ))
    rights_client = RightsClient(build_async_client(
        settings.rights_base_url,
        settings.http_timeout_seconds,
        extra_headers={"X-Api-Key": settings.rights_api_key},
    ))
    logger.info("Remote clients initialized")


async def close_remote_clients() -> None:
    global commerce_client, rights_client
    for client in (commerce_client, rights_client):
        if client is not None:
            await client.aclose()
    commerce_client = None
    rights_client = None


def get_commerce_client() -> CommerceClient:
    if not commerce_client:
        raise RuntimeError("Commerce client not initialized")
    return commerce_client


def get_rights_client() -> RightsClient:
    if not rights_client:
        raise RuntimeError("Rights client not initialized")
    return rights_client
