"""Download Authorizer: one-time, time-bound download URLs.

Invariants:
    - Inside the window -> URL returned, sale marked downloaded
    - Window boundary is inclusive
    - Expired or already downloaded -> error, downloaded unchanged
    - Rights service failure -> error, downloaded stays False
    - Log lines name the sale token; formatted output keeps only its prefix
"""

import json
import logging
from datetime import datetime, timedelta, timezone

import pytest

from catalog_sync.core.errors import (
    RemoteRejectedError, ResourceNotFoundError, SaleAlreadyDownloadedError,
    SaleTokenExpiredError,
)
from catalog_sync.core.sync_config import SyncConfig
from catalog_sync.infrastructure.observability import JSONFormatter
from catalog_sync.models import Sale
from catalog_sync.schemas.rights import RemoteResponse
from catalog_sync.schemas.sales import OrderRequest
from catalog_sync.services.catalog_publisher import CatalogPublisher
from catalog_sync.services.download_authorizer import DownloadAuthorizer
from catalog_sync.services.metadata_refresher import MetadataRefresher
from catalog_sync.services.sale_registrar import SaleRegistrar

from tests.services.catalog_builders import make_publication

CREATED = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
TOKEN = "1709294400000-7f9c0a4e-0000-4000-8000-000000000001"


def _authorizer(rights, scope, now):
    return DownloadAuthorizer(rights, scope, SyncConfig(), clock=lambda: now)


@pytest.fixture
async def sale(seed):
    await seed(Sale(
        order_id="order-1", token=TOKEN, customer="ana", sku="9789990000042",
        format="epub", currency="BOB", price=100.0, created_at=CREATED,
    ))


async def test_download_inside_window(rights, scope, sale, load_sale):
    authorizer = _authorizer(rights, scope, CREATED + timedelta(minutes=1))

    url = await authorizer.authorize_download(TOKEN, "ana")

    assert url == "https://downloads.test/file.epub"
    assert rights.calls_to("get_download_url")[0] == (
        "ana", "order-1", "9789990000042", "epub", "ana",
    )
    assert (await load_sale("order-1")).downloaded is True


async def test_download_at_window_boundary(rights, scope, sale):
    authorizer = _authorizer(rights, scope, CREATED + timedelta(minutes=5))
    assert await authorizer.authorize_download(TOKEN, "ana")


async def test_second_download_is_refused(rights, scope, sale):
    authorizer = _authorizer(rights, scope, CREATED + timedelta(minutes=1))
    await authorizer.authorize_download(TOKEN, "ana")

    with pytest.raises(SaleAlreadyDownloadedError):
        await authorizer.authorize_download(TOKEN, "ana")

    assert len(rights.calls_to("get_download_url")) == 1


async def test_expired_token(rights, scope, sale, load_sale):
    authorizer = _authorizer(rights, scope, CREATED + timedelta(minutes=6))

    with pytest.raises(SaleTokenExpiredError) as exc:
        await authorizer.authorize_download(TOKEN, "ana")

    assert exc.value.expired_at == CREATED + timedelta(minutes=5)
    assert rights.calls == []
    assert (await load_sale("order-1")).downloaded is False


async def test_unknown_token(rights, scope, sale):
    authorizer = _authorizer(rights, scope, CREATED)
    with pytest.raises(ResourceNotFoundError):
        await authorizer.authorize_download("nope", "ana")


async def test_unknown_token_is_not_echoed(rights, scope, sale):
    authorizer = _authorizer(rights, scope, CREATED)
    forged = "1709294400000-00000000-dead-4000-8000-000000000000"

    with pytest.raises(ResourceNotFoundError) as exc:
        await authorizer.authorize_download(forged, "ana")

    assert "dead" not in exc.value.message
    assert exc.value.resource_id == "1709294400000-***"


async def test_download_logs_carry_masked_token(rights, scope, sale, caplog):
    caplog.set_level(logging.INFO, logger="catalog_sync.services.download_authorizer")
    authorizer = _authorizer(rights, scope, CREATED + timedelta(minutes=1))

    await authorizer.authorize_download(TOKEN, "ana")
    with pytest.raises(SaleAlreadyDownloadedError):
        await authorizer.authorize_download(TOKEN, "ana")

    issued, refused = [
        r for r in caplog.records if r.name == "catalog_sync.services.download_authorizer"
    ]
    assert issued.sale_token == TOKEN
    assert refused.sale_token == TOKEN
    assert refused.error_code == "SALE_ALREADY_DOWNLOADED"
    line = json.loads(JSONFormatter().format(issued))
    assert line["sale_token"] == "1709294400000-***"
    assert line["order_id"] == "order-1"
    assert TOKEN not in JSONFormatter().format(refused)


@pytest.mark.parametrize("response", [
    RemoteResponse(status_code=500, body="error"),
    RemoteResponse(status_code=200, body="   "),
])
async def test_rights_failure_keeps_sale_downloadable(rights, scope, sale, load_sale, response):
    rights.download_response = response
    authorizer = _authorizer(rights, scope, CREATED + timedelta(minutes=1))

    with pytest.raises(RemoteRejectedError):
        await authorizer.authorize_download(TOKEN, "ana")

    assert (await load_sale("order-1")).downloaded is False


async def test_url_is_stripped(rights, scope, sale):
    rights.download_response = RemoteResponse(status_code=200, body="https://d.test/x\n")
    authorizer = _authorizer(rights, scope, CREATED)
    assert await authorizer.authorize_download(TOKEN, "ana") == "https://d.test/x"


async def test_register_then_download_end_to_end(commerce, rights, scope, seed, load_sale):
    await seed(make_publication(
        "pub-42", isbn="9789990000042", product_id=42, currency="BOB",
        migrated=True, subject_codes=None,
    ))
    config = SyncConfig()
    registrar = SaleRegistrar(
        rights, CatalogPublisher(commerce, config), MetadataRefresher(rights),
        scope, config, clock=lambda: CREATED,
    )
    token = await registrar.register_sale(
        OrderRequest(product_id=42, order_id="order-9", username="ana"),
    )

    url = await _authorizer(rights, scope, CREATED + timedelta(minutes=2)).authorize_download(
        token, "ana",
    )

    assert url == "https://downloads.test/file.epub"
    assert (await load_sale("order-9")).downloaded is True
