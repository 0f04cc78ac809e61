"""Database connection and transaction management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from worksync.errors import StorageError, WorkSyncError
from worksync.models import Base

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


class Database:
    """Owns the engine and session factory for one WorkSync store.

    Construct it explicitly, hand it to the services that need it, and
    call ``dispose()`` on shutdown. ``transaction()`` is the only
    multi-collection write boundary: everything executed inside it
    commits together or not at all.
    """

    def __init__(self, url: str, *, echo: bool = False, **engine_kwargs: Any):
        if url.startswith("postgresql"):
            engine_kwargs.setdefault("pool_pre_ping", True)
            engine_kwargs.setdefault("pool_size", 10)
            engine_kwargs.setdefault("max_overflow", 20)
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def create_schema(self) -> None:
        """Create all tables and indexes that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()

    async def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.warning("Database ping failed", exc_info=True)
            return False
        return True

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a session for reads. Nothing is committed."""
        async with self.session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as exc:
                raise StorageError(f"Database read failed: {exc}") from exc

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a session inside a transaction.

        Commits when the block exits normally and rolls back on any
        exception. Domain errors propagate unchanged; driver failures are
        raised as StorageError.
        """
        async with self.session_factory() as session:
            try:
                async with session.begin():
                    yield session
            except WorkSyncError:
                raise
            except SQLAlchemyError as exc:
                logger.warning("Transaction rolled back: %s", exc)
                raise StorageError(f"Transaction failed: {exc}") from exc
