"""Root conftest: shared test configuration and the async SQLite database.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - db_manager is a real DatabaseSessionManager bound to the test engine
    - seed() commits entities in its own transaction, like an earlier request would

Design Decisions:
    - StaticPool: every session shares the single in-memory connection
    - Same SAVEPOINT handling as the application engine
"""

import os

# Ensure tests never reach real services
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("COMMERCE_BASE_URL", "http://commerce.test")
os.environ.setdefault("RIGHTS_BASE_URL", "http://rights.test")
os.environ.setdefault("LOCALE", "es")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

import catalog_sync.models  # noqa: E402,F401
from catalog_sync.db.base import Base  # noqa: E402
from catalog_sync.infrastructure.catalog_store import store_scope  # noqa: E402
from catalog_sync.infrastructure.database import (  # noqa: E402
    DatabaseSessionManager, enable_sqlite_savepoints,
)
from catalog_sync.models import Publication, Sale  # noqa: E402


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )
    return manager


@pytest.fixture
def scope(db_manager):
    return store_scope(db_manager)


@pytest.fixture
def seed(db_manager):
    async def _seed(*entities):
        async with db_manager.transaction() as session:
            session.add_all(entities)
    return _seed


@pytest.fixture
def load_publication(db_manager):
    async def _load(pub_id: str) -> Publication | None:
        async with db_manager.session() as session:
            return await session.get(Publication, pub_id)
    return _load


@pytest.fixture
def load_sale(db_manager):
    async def _load(order_id: str) -> Sale | None:
        async with db_manager.session() as session:
            return await session.get(Sale, order_id)
    return _load
