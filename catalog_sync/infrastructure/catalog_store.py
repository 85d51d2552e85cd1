"""SQL Catalog Store: CatalogStore implementation over one AsyncSession.

Invariants:
    - A store never commits or rolls back; the transaction scope that created it does
    - persist() flushes, so constraint violations surface inside the operation
    - item_transaction() is a SAVEPOINT: a failing item rolls back alone and leaves as
      DatabaseError, the enclosing transaction carries on
    - find_sale_by_token locks the row (FOR UPDATE) until the transaction ends
    - Pending synchronization == publication has a price and the price is not migrated
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_sync.core.domain_types import (
    OrderId, ProductId, RemoteCategoryId, SaleToken, SubjectCode,
)
from catalog_sync.core.repository_protocols import StoreScope
from catalog_sync.infrastructure.database import (
    DatabaseSessionManager, translate_db_error,
)
from catalog_sync.models import Category, Price, Publication, Publisher, Sale

logger = logging.getLogger(__name__)


class SqlCatalogStore:
    """Catalog and sale queries bound to one session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_pending_synchronization(self) -> list[Publication]:
        result = await self.session.execute(
            select(Publication)
            .join(Price, Price.publication_id == Publication.id)
            .where(Price.migrated.is_(False))
            .order_by(Publication.id)
        )
        return list(result.scalars().all())

    async def find_by_product_id(self, product_id: ProductId) -> Publication | None:
        result = await self.session.execute(
            select(Publication).where(Publication.product_id == product_id),
        )
        return result.scalar_one_or_none()

    async def find_publishers_pending(self) -> list[Publisher]:
        result = await self.session.execute(
            select(Publisher)
            .where(Publisher.tag_id.is_(None))
            .order_by(Publisher.id)
        )
        return list(result.scalars().all())

    async def find_categories(self, codes: list[SubjectCode]) -> list[Category]:
        if not codes:
            return []
        result = await self.session.execute(
            select(Category)
            .where(Category.code.in_(codes))
            .order_by(Category.code)
        )
        return list(result.scalars().all())

    async def load_category_index(self) -> dict[SubjectCode, RemoteCategoryId]:
        result = await self.session.execute(
            select(Category.code, Category.category_id)
            .where(Category.category_id.isnot(None)),
        )
        return {
            SubjectCode(code): RemoteCategoryId(category_id)
            for code, category_id in result.all()
        }

    async def find_sale_by_token(self, token: SaleToken) -> Sale | None:
        result = await self.session.execute(
            select(Sale).where(Sale.token == token).with_for_update(),
        )
        return result.scalar_one_or_none()

    async def find_sale_by_order_id(self, order_id: OrderId) -> Sale | None:
        return await self.session.get(Sale, order_id)

    async def persist(self, *entities: object) -> None:
        self.session.add_all(entities)
        await self.session.flush()

    @asynccontextmanager
    async def item_transaction(self) -> AsyncGenerator[None, None]:
        """Changes made in the block are flushed and released together, or not at all."""
        try:
            async with self.session.begin_nested():
                yield
        except SQLAlchemyError as e:
            raise translate_db_error(e) from e


def store_scope(manager: DatabaseSessionManager) -> StoreScope:
    """Bind SqlCatalogStore to manager.transaction() for the services."""

    @asynccontextmanager
    async def scope() -> AsyncGenerator[SqlCatalogStore, None]:
        async with manager.transaction() as session:
            yield SqlCatalogStore(session)

    return scope
