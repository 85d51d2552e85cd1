"""Boundary Protocols: contracts between the orchestration services and the outside world.

Invariants:
    - Services depend on these Protocols, never on httpx or SQLAlchemy directly
    - Implementations provided by infrastructure/ via dependency injection
    - Commerce methods raise RemoteRejectedError / RemoteTransportError on failure
    - Rights methods return the raw RemoteResponse; only transport failures raise

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Entity and payload types referenced under TYPE_CHECKING so core stays import-free
"""

from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Callable, Mapping, Protocol

from catalog_sync.core.domain_types import (
    OrderId, ProductId, RemoteCategoryId, RemoteTagId, SaleToken, SubjectCode,
)

if TYPE_CHECKING:
    from catalog_sync.models import Category, Publication, Publisher, Sale
    from catalog_sync.schemas.commerce import ProductCreate, ProductUpdate
    from catalog_sync.schemas.rights import (
        PublicationMetadata, RemoteResponse, SaleRequest, SaleSimulationQuery,
    )

CategoryIndex = Mapping[SubjectCode, RemoteCategoryId]


class CommercePlatform(Protocol):
    """Contract for the storefront product API."""
    async def create_product(self, payload: "ProductCreate") -> ProductId: ...
    async def update_product(
        self, product_id: ProductId, payload: "ProductUpdate",
    ) -> None: ...
    async def create_tag(self, name: str) -> RemoteTagId: ...
    async def create_category(self, name: str) -> RemoteCategoryId: ...


class RightsService(Protocol):
    """Contract for the licensing service (sale simulation, sale, download)."""
    async def simulate_sale(
        self, isbn: str, query: "SaleSimulationQuery",
    ) -> "RemoteResponse": ...
    async def register_sale(
        self, isbn: str, request: "SaleRequest",
    ) -> "RemoteResponse": ...
    async def get_download_url(
        self, customer: str, order_id: str, sku: str, fmt: str, username: str,
    ) -> "RemoteResponse": ...
    async def fetch_publication_metadata(
        self, isbn: str,
    ) -> "PublicationMetadata": ...


class CatalogStore(Protocol):
    """Contract for catalog and sale persistence within one transaction."""
    async def find_pending_synchronization(self) -> list["Publication"]: ...
    async def find_by_product_id(
        self, product_id: ProductId,
    ) -> "Publication | None": ...
    async def find_publishers_pending(self) -> list["Publisher"]: ...
    async def find_categories(
        self, codes: list[SubjectCode],
    ) -> list["Category"]: ...
    async def load_category_index(self) -> dict[SubjectCode, RemoteCategoryId]: ...
    async def find_sale_by_token(self, token: SaleToken) -> "Sale | None": ...
    async def find_sale_by_order_id(self, order_id: OrderId) -> "Sale | None": ...
    async def persist(self, *entities: object) -> None: ...
    # SAVEPOINT scope: on exception only the block's changes are rolled back
    def item_transaction(self) -> AbstractAsyncContextManager[None]: ...


# Opens one transaction and yields a store bound to it. Commits on clean exit,
# rolls back when the block raises.
StoreScope = Callable[[], AbstractAsyncContextManager[CatalogStore]]
