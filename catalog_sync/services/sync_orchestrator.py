"""Sync Orchestrator: pushes every pending publication to the storefront.

Invariants:
    - Reconciliation strictly precedes publishing; its failure aborts the run
    - One transaction for the whole batch, committed after the loop whatever the error count
    - Each publication publishes and writes inside its own SAVEPOINT, released before the next
    - One failing publication never stops the others, whether the storefront call or the
      write fails; each failure is counted and logged
    - Returns a SyncReport; partial failure is reported, not raised
"""

import logging

from catalog_sync.core.domain_types import PublicationId
from catalog_sync.core.repository_protocols import StoreScope
from catalog_sync.core.sync_results import ItemFailure, SyncReport
from catalog_sync.services.catalog_publisher import (
    CatalogPublisher, publication_context,
)
from catalog_sync.services.tag_category_reconciler import TagCategoryReconciler

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """Batch synchronization run: reconcile, then publish item by item."""

    def __init__(
        self,
        reconciler: TagCategoryReconciler,
        publisher: CatalogPublisher,
        scope: StoreScope,
    ):
        self.reconciler = reconciler
        self.publisher = publisher
        self.scope = scope

    async def synchronize(self) -> SyncReport:
        try:
            await self.reconciler.reconcile()
        except Exception as e:
            logger.error(f"Error in synchronization of parameters: {e}")
            raise

        report = SyncReport()
        async with self.scope() as store:
            publications = await store.find_pending_synchronization()
            logger.info(f"# Publications to publish: {len(publications)}")
            category_index = await store.load_category_index()

            for publication in publications:
                # Captured up front: a rolled-back savepoint expires the instance
                publication_id = PublicationId(publication.id)
                context = publication_context(publication)
                try:
                    async with store.item_transaction():
                        outcome = await self.publisher.publish(publication, category_index)
                except Exception as e:
                    report.failed.append(ItemFailure(publication_id, e))
                    logger.error(
                        f"Error on publishing product: {publication_id} - Error: {e}",
                        exc_info=True,
                        extra=context.as_log_extra(),
                    )
                    continue
                report.record(publication_id, outcome)

        self._log_report(report)
        return report

    @staticmethod
    def _log_report(report: SyncReport) -> None:
        summary = report.summary()
        if report.fully_synchronized:
            logger.info(
                f"Catalog fully synchronized: {summary['created']} created, "
                f"{summary['updated']} updated, {summary['skipped']} skipped",
            )
        else:
            logger.error(
                f"Total Errors: {report.error_count} of {report.total} publications",
                extra={"error_count": report.error_count},
            )
