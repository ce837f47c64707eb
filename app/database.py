"""
Database Configuration
SQLAlchemy async setup with PostgreSQL (SQLite for local runs and tests).
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import MetaData, event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


# Convert sync PostgreSQL URL to async
def get_async_database_url(url: str) -> str:
    """Convert postgresql:// to postgresql+asyncpg://"""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


# Base class for models
class Base(DeclarativeBase):
    """Base class for all database models."""
    metadata = MetaData(
        naming_convention={
            "ix": "ix_%(column_0_label)s",
            "uq": "uq_%(table_name)s_%(column_0_name)s",
            "ck": "ck_%(table_name)s_%(constraint_name)s",
            "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
            "pk": "pk_%(table_name)s"
        }
    )


def _enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """Let SQLAlchemy own BEGIN so SAVEPOINT works on aiosqlite."""

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")


class Database:
    """
    Owns the async engine and session factory.

    Constructed once by the process entry point, which is also responsible
    for calling init() and close().
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        self.url = get_async_database_url(url)
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self.session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    async def init(self, create_tables: bool = True) -> None:
        """Create the engine and (optionally) the tables."""
        if self.engine is not None:
            return

        engine_kwargs = {"echo": self.echo, "pool_pre_ping": True}
        if not self.is_sqlite:
            engine_kwargs["pool_size"] = self.pool_size
            engine_kwargs["max_overflow"] = self.max_overflow

        self.engine = create_async_engine(self.url, **engine_kwargs)
        if self.is_sqlite:
            _enable_sqlite_savepoints(self.engine)

        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

        if create_tables:
            await self.create_all()
        logger.info(f"Database initialized ({self.engine.url.get_backend_name()})")

    async def create_all(self) -> None:
        # Register models on Base.metadata
        import app.models  # noqa: F401

        async with self._require_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        import app.models  # noqa: F401

        async with self._require_engine().begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Database connections closed")
        self.engine = None
        self.session_maker = None

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Session scope: commit on success, roll back on error."""
        if self.session_maker is None:
            raise RuntimeError("Database not initialized. Call init() first.")

        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    def _require_engine(self) -> AsyncEngine:
        if self.engine is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self.engine


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Dependency for getting database session."""
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
