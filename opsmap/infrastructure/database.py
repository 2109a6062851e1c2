"""Database Session Manager — async engine for the local board file.

Invariants:
    - A session that raises is rolled back before the error leaves session()
    - Every SQLAlchemy exception surfaces as SnapshotStoreError (core/errors.py)
    - SQLite connections wait on a locked file (busy_timeout) instead of failing at once,
      since another process may be writing the same board

Design Decisions:
    - Singleton db_manager set by init_db() from opsmap.main.board_runtime
    - Error classification is a table (most specific class first), not a chain of excepts
    - expire_on_commit=False: rows stay readable after the session closes
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from opsmap.core.errors import SnapshotStoreError
from opsmap.db.base import Base
from opsmap.models.board_snapshot import BoardSnapshotRecord  # noqa: F401

logger = logging.getLogger(__name__)

SQLITE_BUSY_TIMEOUT_MS = 5000

# (exception class, user-facing message, operation); first match wins.
_ERROR_TABLE: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Board file is unavailable or locked", "execute"),
    (DBAPIError, "Database driver error", "query"),
)


def _classify(exc: SQLAlchemyError) -> tuple[str, str]:
    for exc_type, message, operation in _ERROR_TABLE:
        if isinstance(exc, exc_type):
            return message, operation
    return "Database operation failed", "unknown"


class DatabaseSessionManager:
    """Owns the async engine and hands out rollback-safe sessions."""

    def __init__(
        self,
        database_url: str,
        pool_size: int | None = None,
        max_overflow: int | None = None,
    ):
        options: dict = {"pool_pre_ping": True}
        # SQLite pools reject sizing arguments; pass them only when configured.
        if pool_size is not None:
            options["pool_size"] = pool_size
        if max_overflow is not None:
            options["max_overflow"] = max_overflow

        self.engine = create_async_engine(database_url, **options)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _set_sqlite_pragmas)
        self._sessions = async_sessionmaker(self.engine, expire_on_commit=False)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self._sessions() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                message, operation = _classify(e)
                logger.error(
                    f"Snapshot database error ({type(e).__name__}): {e}",
                    extra={"operation": operation, "error_code": "SNAPSHOT_STORE_ERROR"},
                )
                raise SnapshotStoreError(message, operation) from e

    async def init_models(self) -> None:
        """Create missing tables so a fresh board file works without alembic."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
        except SnapshotStoreError:
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


def _set_sqlite_pragmas(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute(f"PRAGMA busy_timeout = {SQLITE_BUSY_TIMEOUT_MS}")
    cursor.close()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager
