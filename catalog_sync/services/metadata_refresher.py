"""Metadata Refresher: pulls current publication data from the rights service.

Invariants:
    - Applies title, author, description and price fields as the rights service reports them
    - Always resets price.migrated so the next publish pushes an update
    - Never touches product_id, publisher or subject codes
"""

import logging

from catalog_sync.core.repository_protocols import RightsService
from catalog_sync.models import Price, Publication

logger = logging.getLogger(__name__)


class MetadataRefresher:

    def __init__(self, rights: RightsService):
        self.rights = rights

    async def refresh(self, publication: Publication) -> bool:
        """Apply fresh metadata in place. Returns True when the price changed."""
        metadata = await self.rights.fetch_publication_metadata(publication.isbn)

        publication.title = metadata.title
        if metadata.author is not None:
            publication.author = metadata.author
        if metadata.description is not None:
            publication.description = metadata.description

        price = publication.price
        if price is None:
            price = Price(amount=metadata.price_amount, currency_code=metadata.currency)
            publication.price = price
            price_changed = True
        else:
            price_changed = (
                price.amount != metadata.price_amount
                or price.currency_code != metadata.currency
            )
        price.amount = metadata.price_amount
        price.currency_code = metadata.currency
        if metadata.country is not None:
            price.country_code = metadata.country
        if metadata.price_type is not None:
            price.price_type = metadata.price_type
        price.migrated = False

        logger.info(
            f"Refreshed metadata of publication {publication.id}"
            + (" (price changed)" if price_changed else ""),
            extra={"publication_id": publication.id, "isbn": publication.isbn},
        )
        return price_changed
