"""Sale Registrar: validates and registers purchases against the rights service.

Invariants:
    - simulate_sale and register_sale each own one transaction: commit or rollback, never both
    - A 400 from the sale simulation means stale metadata: refresh, republish, answer ok=False
    - A Sale row exists only after the rights service answered 201
    - One sale per order_id; tokens are "<epoch-millis>-<uuid4>"
    - Unmappable catalog codes or amounts fail as InvalidCatalogDataError before any remote call
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable
from uuid import uuid4

from catalog_sync.core.domain_types import OrderId, ProductId, RemoteService, SaleToken
from catalog_sync.core.errors import (
    CatalogSyncError, DuplicateSaleError, ErrorContext, InvalidCatalogDataError,
    RemoteRejectedError, ResourceNotFoundError, StaleMetadataError,
)
from catalog_sync.core.message_strings import MessageKey, get_message
from catalog_sync.core.onix_codes import primary_format, protection_scheme
from catalog_sync.core.price_conversion import to_minor_units
from catalog_sync.core.repository_protocols import (
    CatalogStore, RightsService, StoreScope,
)
from catalog_sync.core.sale_token import generate_sale_token, utc_now
from catalog_sync.core.sync_config import SyncConfig
from catalog_sync.models import Publication, Sale
from catalog_sync.schemas.rights import (
    RemoteResponse, SaleRequest, SaleSimulationQuery,
)
from catalog_sync.schemas.sales import OrderRequest
from catalog_sync.services.catalog_publisher import (
    CatalogPublisher, publication_context,
)
from catalog_sync.services.metadata_refresher import MetadataRefresher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaleSimulation:
    ok: bool
    message: str
    product_id: int
    price: float


class SaleRegistrar:
    """simulate_sale / register_sale for one storefront product."""

    def __init__(
        self,
        rights: RightsService,
        publisher: CatalogPublisher,
        refresher: MetadataRefresher,
        scope: StoreScope,
        config: SyncConfig,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.rights = rights
        self.publisher = publisher
        self.refresher = refresher
        self.scope = scope
        self.config = config
        self.clock = clock

    # ─── Simulation ─────────────────────────────────────────────

    async def simulate_sale(
        self, product_id: ProductId, price: float | None = None,
    ) -> SaleSimulation:
        try:
            async with self.scope() as store:
                publication = await self._find_publication(store, product_id)
                response = await self.rights.simulate_sale(
                    publication.isbn, self._simulation_query(publication),
                )
                try:
                    self._check_simulation(response, publication)
                except StaleMetadataError:
                    logger.warning(
                        f"Update the publication {publication.id}",
                        extra=publication_context(publication).as_log_extra(),
                    )
                    return await self._refresh_and_republish(store, publication)

                current = self.publisher.storefront_price(publication)
                if price is not None and price != current:
                    logger.warning(
                        f"Storefront price {price} differs from catalog price {current}",
                        extra=publication_context(publication).as_log_extra(),
                    )
                return SaleSimulation(
                    ok=True, message=response.body,
                    product_id=publication.product_id, price=current,
                )
        except CatalogSyncError as e:
            logger.error(
                f"Error on simulate a Sale. {e.message}",
                extra={
                    "error_code": e.code, "product_id": product_id,
                    **e.context.as_log_extra(),
                },
            )
            raise

    @staticmethod
    def _sale_terms(publication: Publication) -> tuple[str, int, str]:
        """(format, cost in cents, protection) as the rights service names them."""
        try:
            return (
                primary_format(publication.product_form_detail),
                to_minor_units(publication.price.amount),
                protection_scheme(publication.technical_protection),
            )
        except ValueError as e:
            raise InvalidCatalogDataError(
                publication.isbn, str(e), publication_context(publication),
            ) from e

    def _simulation_query(self, publication: Publication) -> SaleSimulationQuery:
        price = publication.price
        fmt, cost, protection = self._sale_terms(publication)
        return SaleSimulationQuery(
            format=fmt,
            cost=cost,
            protection=protection,
            country=price.country_code,
            currency=price.currency_code,
            price_type=price.price_type,
        )

    @staticmethod
    def _check_simulation(response: RemoteResponse, publication: Publication) -> None:
        if response.status_code == 200:
            return
        context = publication_context(publication)
        if response.status_code == 400:
            raise StaleMetadataError(publication.isbn, context)
        raise RemoteRejectedError(
            RemoteService.RIGHTS, "simulate_sale", response.status_code,
            MessageKey.SIMULATION_REJECTED, context,
        )

    async def _refresh_and_republish(
        self, store: CatalogStore, publication: Publication,
    ) -> SaleSimulation:
        await self.refresher.refresh(publication)
        category_index = await store.load_category_index()
        await self.publisher.publish(publication, category_index)
        await store.persist(publication)
        return SaleSimulation(
            ok=False,
            message=get_message(MessageKey.PRODUCT_DATA_UPDATED, self.config.locale),
            product_id=publication.product_id,
            price=self.publisher.storefront_price(publication),
        )

    # ─── Registration ───────────────────────────────────────────

    async def register_sale(self, order: OrderRequest) -> SaleToken:
        try:
            async with self.scope() as store:
                publication = await self._find_publication(store, order.product_id)
                context = publication_context(publication)
                context.order_id = order.order_id

                if await store.find_sale_by_order_id(OrderId(order.order_id)) is not None:
                    raise DuplicateSaleError(order.order_id, context)

                request = self._sale_request(publication, order)
                response = await self.rights.register_sale(publication.isbn, request)
                if response.status_code != 201:
                    raise RemoteRejectedError(
                        RemoteService.RIGHTS, "register_sale", response.status_code,
                        MessageKey.SALE_NOT_REGISTERED, context,
                    )

                now = self.clock()
                token = generate_sale_token(int(now.timestamp() * 1000), uuid4())
                await store.persist(Sale(
                    order_id=order.order_id,
                    token=token,
                    customer=order.username,
                    sku=publication.isbn,
                    format=request.format,
                    currency=request.currency,
                    price=publication.price.amount,
                    quantity=1,
                    downloaded=False,
                    created_at=now,
                ))
                logger.info(
                    f"Registered sale for order {order.order_id}",
                    extra={"sale_token": token, **context.as_log_extra()},
                )
                return token
        except CatalogSyncError as e:
            logger.error(
                f"Error on selling a publication. {e.message}",
                extra={
                    "error_code": e.code, "order_id": order.order_id,
                    **e.context.as_log_extra(),
                },
            )
            raise

    def _sale_request(self, publication: Publication, order: OrderRequest) -> SaleRequest:
        price = publication.price
        fmt, cost, protection = self._sale_terms(publication)
        return SaleRequest(
            cost=cost,
            country=price.country_code,
            format=fmt,
            customer_id=order.username,
            price_type=price.price_type,
            protection=protection,
            currency=price.currency_code,
            sale_state=self.config.sale_state,
            transaction_id=order.order_id,
        )

    @staticmethod
    async def _find_publication(store: CatalogStore, product_id: int) -> Publication:
        publication = await store.find_by_product_id(ProductId(product_id))
        if publication is None or publication.price is None:
            raise ResourceNotFoundError(
                "Publication", str(product_id), ErrorContext(product_id=product_id),
            )
        return publication
