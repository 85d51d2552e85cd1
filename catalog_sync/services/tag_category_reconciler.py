"""Tag & Category Reconciler: makes sure storefront tags and categories exist before products.

Invariants:
    - Runs in its own transaction, which commits after the pass even if entities failed
    - Each entity is written in its own SAVEPOINT; a failed call or write never discards
      ids already obtained for other entities
    - Publisher.tag_id and Category.category_id are only ever set, never overwritten
    - Any failed entity raises ReconciliationError after the commit
"""

import logging

from catalog_sync.core.domain_types import ReferenceKind, distinct_subject_codes
from catalog_sync.core.errors import ReconciliationError
from catalog_sync.core.repository_protocols import (
    CatalogStore, CommercePlatform, StoreScope,
)
from catalog_sync.core.sync_results import ItemFailure, ReconciliationReport

logger = logging.getLogger(__name__)


class TagCategoryReconciler:
    """Creates missing publisher tags and subject categories on the storefront."""

    def __init__(self, commerce: CommercePlatform, scope: StoreScope):
        self.commerce = commerce
        self.scope = scope

    async def reconcile(self) -> ReconciliationReport:
        report = ReconciliationReport()
        async with self.scope() as store:
            await self._reconcile_tags(store, report)
            await self._reconcile_categories(store, report)

        logger.info(
            f"Reconciliation: {len(report.tags_created)} tags, "
            f"{len(report.categories_created)} categories created",
            extra={"error_count": len(report.failed)},
        )
        if report.failed:
            raise ReconciliationError(
                [(kind, failure.key) for kind, failure in report.failed],
            )
        return report

    async def _reconcile_tags(
        self, store: CatalogStore, report: ReconciliationReport,
    ) -> None:
        publishers = await store.find_publishers_pending()
        logger.info(f"# Publishers to publish: {len(publishers)}")
        for publisher in publishers:
            name = publisher.name
            try:
                async with store.item_transaction():
                    publisher.tag_id = await self.commerce.create_tag(name)
            except Exception as e:
                logger.error(
                    f"Error creating tag for publisher {name}: {e}", exc_info=True,
                )
                report.failed.append((ReferenceKind.TAG, ItemFailure(name, e)))
                continue
            report.tags_created.append(name)

    async def _reconcile_categories(
        self, store: CatalogStore, report: ReconciliationReport,
    ) -> None:
        pending = await store.find_pending_synchronization()
        codes = distinct_subject_codes([p.subject_codes for p in pending])
        categories = await store.find_categories(codes)

        known = {c.code for c in categories}
        report.unknown_codes = [code for code in codes if code not in known]
        if report.unknown_codes:
            logger.warning(
                f"Subject codes without category: {', '.join(report.unknown_codes)}",
            )

        missing = [c for c in categories if c.category_id is None]
        logger.info(f"# Categories: {len(missing)}")
        for category in missing:
            code = category.code
            try:
                async with store.item_transaction():
                    category.category_id = await self.commerce.create_category(
                        category.description,
                    )
            except Exception as e:
                logger.error(f"Error creating category {code}: {e}", exc_info=True)
                report.failed.append((ReferenceKind.CATEGORY, ItemFailure(code, e)))
                continue
            report.categories_created.append(code)
