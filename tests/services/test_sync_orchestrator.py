"""Sync Orchestrator: batch publish with per-item failure isolation.

Invariants:
    - N pending with K failing -> N-K published, error_count == K
    - Successful items are committed even when others fail
    - A write failure on one item (duplicate storefront id) fails that item only
    - Reconciliation failure aborts before any product call
    - Already migrated publications are not pending
"""

import pytest

from catalog_sync.core.domain_types import PublishOutcome
from catalog_sync.core.errors import DatabaseError, ReconciliationError
from catalog_sync.core.sync_config import SyncConfig
from catalog_sync.services.catalog_publisher import CatalogPublisher
from catalog_sync.services.sync_orchestrator import SyncOrchestrator
from catalog_sync.services.tag_category_reconciler import TagCategoryReconciler

from tests.services.catalog_builders import (
    make_category, make_publication, make_publisher,
)


@pytest.fixture
def orchestrator(commerce, scope):
    return SyncOrchestrator(
        TagCategoryReconciler(commerce, scope),
        CatalogPublisher(commerce, SyncConfig()),
        scope,
    )


async def test_publishes_every_pending_publication(
    orchestrator, seed, commerce, load_publication,
):
    kipus = make_publisher("Kipus")
    await seed(
        kipus, make_category("FA"), make_category("FB"),
        make_publication("pub-1", isbn="9780000000001", publisher=kipus),
        make_publication("pub-2", isbn="9780000000002", product_id=42, currency="BOB"),
    )

    report = await orchestrator.synchronize()

    assert report.fully_synchronized
    assert report.published == {
        "pub-1": PublishOutcome.CREATED, "pub-2": PublishOutcome.UPDATED,
    }
    created = await load_publication("pub-1")
    assert created.product_id is not None
    assert created.price.migrated is True
    assert created.exchange_rate == 6.96
    updated = await load_publication("pub-2")
    assert updated.product_id == 42
    assert updated.updated is True


async def test_failing_items_do_not_stop_the_batch(
    orchestrator, seed, commerce, load_publication,
):
    await seed(
        make_category("FA"), make_category("FB"),
        make_publication("pub-1", isbn="9780000000001"),
        make_publication("pub-2", isbn="9780000000002"),
        make_publication("pub-3", isbn="9780000000003"),
    )
    commerce.failing_keys.add("9780000000002")

    report = await orchestrator.synchronize()

    assert report.total == 3
    assert report.error_count == 1
    assert not report.fully_synchronized
    assert [f.key for f in report.failed] == ["pub-2"]
    assert set(report.published) == {"pub-1", "pub-3"}
    assert (await load_publication("pub-1")).price.migrated is True
    assert (await load_publication("pub-3")).price.migrated is True
    failed = await load_publication("pub-2")
    assert failed.price.migrated is False
    assert failed.product_id is None


async def test_second_run_finds_nothing_pending(orchestrator, seed, commerce):
    await seed(make_category("FA"), make_category("FB"), make_publication("pub-1"))

    await orchestrator.synchronize()
    report = await orchestrator.synchronize()

    assert report.total == 0
    assert len(commerce.calls_to("create_product")) == 1


async def test_reconciliation_failure_aborts_publishing(orchestrator, seed, commerce):
    await seed(
        make_publisher("Broken"), make_category("FA"), make_category("FB"),
        make_publication("pub-1"),
    )
    commerce.failing_keys.add("Broken")

    with pytest.raises(ReconciliationError):
        await orchestrator.synchronize()

    assert commerce.calls_to("create_product") == []


async def test_transport_outage_is_counted_per_item(orchestrator, seed, commerce):
    await seed(make_category("FA", 1), make_category("FB", 2), make_publication("pub-1"))
    commerce.transport_down = True

    report = await orchestrator.synchronize()

    assert report.error_count == 1
    assert report.summary()["failed"][0]["publication_id"] == "pub-1"


async def test_duplicate_storefront_id_fails_only_that_item(
    orchestrator, seed, commerce, load_publication,
):
    await seed(
        make_category("FA", 1), make_category("FB", 2),
        make_publication("pub-1", isbn="9780000000001"),
        make_publication("pub-2", isbn="9780000000002"),
        make_publication("pub-3", isbn="9780000000003", product_id=42),
    )
    commerce.fixed_product_id = 500

    report = await orchestrator.synchronize()

    assert report.published == {
        "pub-1": PublishOutcome.CREATED, "pub-3": PublishOutcome.UPDATED,
    }
    [failure] = report.failed
    assert failure.key == "pub-2"
    assert isinstance(failure.error, DatabaseError)
    first = await load_publication("pub-1")
    assert first.product_id == 500
    assert first.price.migrated is True
    second = await load_publication("pub-2")
    assert second.product_id is None
    assert second.price.migrated is False
    assert (await load_publication("pub-3")).updated is True
