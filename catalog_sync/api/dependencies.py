"""Service Dependencies: builds the orchestration services from the process singletons.

Invariants:
    - Services are assembled per request from shared clients and db_manager
    - Tests replace these via app.dependency_overrides
"""

from catalog_sync.config import get_settings
from catalog_sync.core.sync_config import SyncConfig
from catalog_sync.infrastructure.catalog_store import store_scope
from catalog_sync.infrastructure.database import get_db_manager
from catalog_sync.infrastructure.http_clients import (
    get_commerce_client, get_rights_client,
)
from catalog_sync.services.catalog_publisher import CatalogPublisher
from catalog_sync.services.download_authorizer import DownloadAuthorizer
from catalog_sync.services.metadata_refresher import MetadataRefresher
from catalog_sync.services.sale_registrar import SaleRegistrar
from catalog_sync.services.sync_orchestrator import SyncOrchestrator
from catalog_sync.services.tag_category_reconciler import TagCategoryReconciler


def get_sync_config() -> SyncConfig:
    return get_settings().sync_config()


def get_sync_orchestrator() -> SyncOrchestrator:
    scope = store_scope(get_db_manager())
    commerce = get_commerce_client()
    return SyncOrchestrator(
        TagCategoryReconciler(commerce, scope),
        CatalogPublisher(commerce, get_sync_config()),
        scope,
    )


def get_sale_registrar() -> SaleRegistrar:
    config = get_sync_config()
    rights = get_rights_client()
    return SaleRegistrar(
        rights,
        CatalogPublisher(get_commerce_client(), config),
        MetadataRefresher(rights),
        store_scope(get_db_manager()),
        config,
    )


def get_download_authorizer() -> DownloadAuthorizer:
    return DownloadAuthorizer(
        get_rights_client(), store_scope(get_db_manager()), get_sync_config(),
    )
