"""Catalog Publisher: creates or updates the storefront product of one publication.

Invariants:
    - A migrated price never triggers create_product (skip, no remote call)
    - No product_id -> create; product_id -> update; both end with price.migrated True
    - Local state is mutated only after the remote call returned successfully
    - Remote failures propagate; the caller decides whether they are fatal
"""

import logging

from catalog_sync.core.domain_types import (
    AUTOMATIC_PRICE_ROLE, PublishOutcome, ReferenceKind, split_subject_codes,
)
from catalog_sync.core.errors import ErrorContext, UnreconciledReferenceError
from catalog_sync.core.price_conversion import convert_price, format_price
from catalog_sync.core.repository_protocols import CategoryIndex, CommercePlatform
from catalog_sync.core.sync_config import SyncConfig
from catalog_sync.models import Publication
from catalog_sync.schemas.commerce import (
    ImageRef, ItemRef, ProductCreate, ProductUpdate,
)

logger = logging.getLogger(__name__)


def publication_context(publication: Publication) -> ErrorContext:
    return ErrorContext(
        publication_id=publication.id,
        isbn=publication.isbn,
        product_id=publication.product_id,
    )


def resolve_categories(
    publication: Publication, index: CategoryIndex,
) -> tuple[ItemRef, ...]:
    """Storefront category refs for the publication's subject codes, de-duplicated."""
    ids: dict[int, None] = {}
    for code in split_subject_codes(publication.subject_codes):
        category_id = index.get(code)
        if category_id is None:
            raise UnreconciledReferenceError(
                ReferenceKind.CATEGORY, code, publication_context(publication),
            )
        ids.setdefault(category_id, None)
    return tuple(ItemRef(id=category_id) for category_id in ids)


def resolve_tags(publication: Publication) -> tuple[ItemRef, ...]:
    publisher = publication.publisher
    if publisher is None:
        return ()
    if publisher.tag_id is None:
        raise UnreconciledReferenceError(
            ReferenceKind.TAG, publisher.name, publication_context(publication),
        )
    return (ItemRef(id=publisher.tag_id),)


class CatalogPublisher:
    """Pushes one publication to the storefront."""

    def __init__(self, commerce: CommercePlatform, config: SyncConfig):
        self.commerce = commerce
        self.config = config

    def storefront_price(self, publication: Publication) -> float:
        price = publication.price
        return convert_price(price.amount, price.currency_code, self.config)

    async def publish(
        self, publication: Publication, category_index: CategoryIndex,
    ) -> PublishOutcome:
        price = publication.price
        if price is None or price.migrated:
            logger.warning(
                f"Publication {publication.id} was not synchronized: "
                "price missing or already migrated",
                extra=publication_context(publication).as_log_extra(),
            )
            return PublishOutcome.SKIPPED

        regular_price = format_price(self.storefront_price(publication))
        categories = resolve_categories(publication, category_index)
        tags = resolve_tags(publication)

        if publication.product_id:
            return await self._update(publication, regular_price, categories, tags)
        return await self._create(publication, regular_price, categories, tags)

    async def _update(self, publication, regular_price, categories, tags):
        await self.commerce.update_product(
            publication.product_id,
            ProductUpdate(
                description=publication.description,
                short_description=publication.author,
                name=publication.title,
                regular_price=regular_price,
                categories=categories,
                tags=tags,
            ),
        )
        publication.updated = True
        publication.price.migrated = True
        logger.info(
            f"Updated product {publication.product_id} ({regular_price})",
            extra=publication_context(publication).as_log_extra(),
        )
        return PublishOutcome.UPDATED

    async def _create(self, publication, regular_price, categories, tags):
        price = publication.price
        images = (ImageRef(src=publication.media.path),) if publication.media else ()
        product_id = await self.commerce.create_product(
            ProductCreate(
                description=publication.description,
                short_description=publication.author,
                name=publication.title,
                sku=publication.isbn,
                regular_price=regular_price,
                images=images,
                categories=categories,
                tags=tags,
            ),
        )
        if not self.config.is_native(price.currency_code):
            publication.exchange_rate = self.config.exchange_rate
        price.migrated = True
        publication.updated = price.role is None or price.role == AUTOMATIC_PRICE_ROLE
        publication.product_id = product_id
        logger.info(
            f"Created product {product_id} ({regular_price})",
            extra=publication_context(publication).as_log_extra(),
        )
        return PublishOutcome.CREATED
