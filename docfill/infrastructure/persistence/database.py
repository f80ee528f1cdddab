"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Database owns one engine per process. Schema is created with
Base.metadata.create_all (create_tables). Every read or write goes through
unit_of_work(), which opens a session, begins a transaction and yields the
repository bundle; it commits on success and rolls back on exception.

SQLite allows a single writer, so units of work are serialized with an
asyncio.Lock when the datastore is SQLite. Keep units of work short: render
and write files outside them.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from docfill.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from docfill.core.config import Settings
    from docfill.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Engine, session factory and unit-of-work entry point."""

    def __init__(self, database_url: str, *, echo: bool = False) -> None:
        self.database_url = database_url
        self.is_sqlite = database_url.startswith("sqlite")
        engine_kwargs: dict[str, Any] = {"echo": echo}
        if self.is_sqlite:
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in database_url:
                # One shared connection, otherwise every checkout sees an empty database.
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs.update(pool_pre_ping=True, pool_recycle=3600)
        self.engine: AsyncEngine = create_async_engine(database_url, **engine_kwargs)
        if self.is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self._write_lock = asyncio.Lock() if self.is_sqlite else None

    @classmethod
    def from_settings(cls, settings: Settings) -> Database:
        """Build a Database from application settings."""
        return cls(settings.database_url, echo=settings.database_echo)

    async def create_tables(self) -> None:
        """Create all tables registered on Base.metadata (idempotent)."""
        # Register models on Base.metadata.
        import docfill.infrastructure.persistence.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured for %s", self.engine.url.render_as_string())

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session inside one transaction (commit on success, rollback on error)."""
        if self._write_lock is None:
            async with self.session_factory() as session:
                async with session.begin():
                    yield session
            return
        async with self._write_lock:
            async with self.session_factory() as session:
                async with session.begin():
                    yield session

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[SqlAlchemyUnitOfWork]:
        """Yield the repository bundle bound to one transactional session."""
        from docfill.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork

        async with self.session() as session:
            yield SqlAlchemyUnitOfWork(session)
