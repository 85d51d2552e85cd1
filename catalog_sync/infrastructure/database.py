"""Database Session Manager: async engine, per-operation transactions and health checks.

Invariants:
    - transaction() ends in exactly one outcome: commit on clean exit, rollback on exception
    - A session that raises is rolled back before the error leaves session()
    - SQLAlchemy exceptions leave as DatabaseError; every other exception passes unchanged
    - Duplicate keys (order_id, sale token) surface as DatabaseError(operation="commit")
    - A failed SAVEPOINT rolls back to the savepoint only; the outer transaction stays usable

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: services read committed entities after their scope closes
    - SQLite URLs (tests, local runs) skip the pool arguments asyncpg needs
    - SQLite connections leave BEGIN to SQLAlchemy so SAVEPOINTs nest correctly
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from catalog_sync.core.errors import DatabaseError

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError are DBAPIErrors
_ERROR_MAP: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Duplicate or inconsistent catalog data", "commit"),
    (OperationalError, "Database connection lost or unavailable", "execute"),
    (DBAPIError, "Database driver rejected the statement", "query"),
    (SQLAlchemyError, "Database operation failed", "unknown"),
)


def translate_db_error(error: SQLAlchemyError) -> DatabaseError:
    for error_type, message, operation in _ERROR_MAP:
        if isinstance(error, error_type):
            return DatabaseError(message, operation)
    return DatabaseError("Database operation failed", "unknown")


def enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """Stop the sqlite driver from managing transactions itself; SQLAlchemy emits BEGIN."""

    @event.listens_for(engine.sync_engine, "connect")
    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")


class DatabaseSessionManager:
    """Owns the engine; hands out sessions and transaction scopes."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        sqlite = database_url.startswith("sqlite")
        engine_options: dict = {"pool_pre_ping": True}
        if not sqlite:
            engine_options.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_options)
        if sqlite:
            enable_sqlite_savepoints(self.engine)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            error = translate_db_error(e)
            logger.error(
                f"{error.message}: {e}", extra={"error_code": error.code},
            )
            raise error from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """One transaction: commits when the block exits cleanly, rolls back if it raises."""
        async with self.session() as session:
            async with session.begin():
                yield session

    async def health_check(self) -> bool:
        """SELECT 1 round trip, for the readiness check."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    logger.info("Database engine initialized")
    return db_manager


def get_db_manager() -> DatabaseSessionManager:
    if not db_manager:
        raise RuntimeError("Database not initialized")
    return db_manager
