"""Tag & Category Reconciler: remote ids for publishers and subject categories.

Invariants:
    - Publishers without tag_id and pending categories without category_id get one
    - One failure never discards ids obtained for other entities (committed)
    - Any failure raises ReconciliationError after the commit
    - Unknown subject codes are reported, not created
"""

import pytest
from sqlalchemy import select

from catalog_sync.core.domain_types import ReferenceKind
from catalog_sync.core.errors import ReconciliationError
from catalog_sync.models import Category, Publisher
from catalog_sync.services.tag_category_reconciler import TagCategoryReconciler

from tests.services.catalog_builders import (
    make_category, make_publication, make_publisher,
)


async def _publishers(db_manager) -> dict[str, Publisher]:
    async with db_manager.session() as session:
        result = await session.execute(select(Publisher))
        return {p.name: p for p in result.scalars()}


async def _categories(db_manager) -> dict[str, Category]:
    async with db_manager.session() as session:
        result = await session.execute(select(Category))
        return {c.code: c for c in result.scalars()}


async def test_creates_missing_tags_and_categories(db_manager, scope, seed, commerce):
    kipus = make_publisher("Kipus")
    tagged = make_publisher("Plural", tag_id=5)
    await seed(
        kipus, tagged,
        make_category("FA"), make_category("FB", category_id=9), make_category("YX"),
        make_publication("pub-1", subject_codes="FA|FB", publisher=kipus),
    )

    report = await TagCategoryReconciler(commerce, scope).reconcile()

    assert report.tags_created == ["Kipus"]
    assert report.categories_created == ["FA"]
    assert commerce.calls_to("create_tag") == ["Kipus"]
    assert commerce.calls_to("create_category") == ["Subject FA"]
    publishers = await _publishers(db_manager)
    assert publishers["Kipus"].tag_id is not None
    assert publishers["Plural"].tag_id == 5
    categories = await _categories(db_manager)
    assert categories["FA"].category_id is not None
    assert categories["FB"].category_id == 9
    # YX is not referenced by any pending publication
    assert categories["YX"].category_id is None


async def test_partial_failure_keeps_successes(db_manager, scope, seed, commerce):
    await seed(
        make_publisher("Kipus"), make_publisher("Broken"),
        make_category("FA"),
        make_publication("pub-1", subject_codes="FA"),
    )
    commerce.failing_keys.add("Broken")

    with pytest.raises(ReconciliationError) as exc:
        await TagCategoryReconciler(commerce, scope).reconcile()

    assert exc.value.failed == [(ReferenceKind.TAG, "Broken")]
    publishers = await _publishers(db_manager)
    assert publishers["Kipus"].tag_id is not None
    assert publishers["Broken"].tag_id is None
    assert (await _categories(db_manager))["FA"].category_id is not None


async def test_unknown_codes_are_reported(scope, seed, commerce):
    await seed(make_publication("pub-1", subject_codes="FA|QQ"), make_category("FA", 3))

    report = await TagCategoryReconciler(commerce, scope).reconcile()

    assert report.unknown_codes == ["QQ"]
    assert report.succeeded
    assert commerce.calls_to("create_category") == []


async def test_migrated_publications_do_not_drive_categories(scope, seed, commerce):
    await seed(make_category("FA"), make_publication("pub-1", subject_codes="FA", migrated=True))

    report = await TagCategoryReconciler(commerce, scope).reconcile()

    assert report.categories_created == []
