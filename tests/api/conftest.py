"""API test fixtures: the FastAPI app wired to the test DB and fake remotes.

Design Decisions:
    - ASGITransport does not run the lifespan; services come from dependency_overrides
"""

from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from catalog_sync.api.dependencies import (
    get_download_authorizer, get_sale_registrar, get_sync_orchestrator,
)
from catalog_sync.core.sync_config import SyncConfig
from catalog_sync.main import app
from catalog_sync.services.catalog_publisher import CatalogPublisher
from catalog_sync.services.download_authorizer import DownloadAuthorizer
from catalog_sync.services.metadata_refresher import MetadataRefresher
from catalog_sync.services.sale_registrar import SaleRegistrar
from catalog_sync.services.sync_orchestrator import SyncOrchestrator
from catalog_sync.services.tag_category_reconciler import TagCategoryReconciler

from tests.services.fake_remotes import FakeCommerce, FakeRights

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def commerce():
    return FakeCommerce()


@pytest.fixture
def rights():
    return FakeRights()


@pytest.fixture
async def client(scope, commerce, rights):
    config = SyncConfig()
    publisher = CatalogPublisher(commerce, config)
    app.dependency_overrides[get_sync_orchestrator] = lambda: SyncOrchestrator(
        TagCategoryReconciler(commerce, scope), publisher, scope,
    )
    app.dependency_overrides[get_sale_registrar] = lambda: SaleRegistrar(
        rights, publisher, MetadataRefresher(rights), scope, config, clock=lambda: NOW,
    )
    app.dependency_overrides[get_download_authorizer] = lambda: DownloadAuthorizer(
        rights, scope, config, clock=lambda: NOW,
    )
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
