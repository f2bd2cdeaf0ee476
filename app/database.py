"""
Database connection and session management.
Wraps the async SQLAlchemy engine and its bounded connection pool in an explicit Database object.
"""

from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import text, DateTime, Uuid, func
from fastapi import Request
from app.config import Settings
import logging
import uuid
from datetime import datetime
from typing import AsyncIterator, Optional

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all database models.
    Includes common fields: id, created_at, updated_at.
    """

    # Primary key with UUID
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True
    )

    # Timestamp fields with automatic management
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        """String representation of the model."""
        return f"<{self.__class__.__name__}(id={self.id})>"


class Database:
    """
    Owns the async engine and the session factory bound to it.

    The engine pool holds at most ``pool_size`` connections (no overflow).
    When every connection is checked out, new acquisitions wait in a queue,
    for at most ``pool_timeout`` seconds or forever when it is ``None``.
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 10,
        pool_timeout: Optional[float] = None,
        echo: bool = False
    ):
        engine_kwargs = {
            "echo": echo,
            "pool_size": pool_size,
            "max_overflow": 0,
            "pool_timeout": pool_timeout,
            "pool_pre_ping": True,
            "pool_recycle": 3600,
        }
        if url.startswith("postgresql"):
            engine_kwargs["connect_args"] = {
                "server_settings": {"application_name": "property_listing"}
            }

        self.url = url
        self.pool_size = pool_size
        self.pool_timeout = pool_timeout
        self.engine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a Database from application settings."""
        return cls(
            settings.sqlalchemy_url,
            pool_size=settings.db_pool_size,
            pool_timeout=settings.db_pool_timeout,
            echo=settings.debug,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Plain session scope for reads and single-statement writes.
        Rolls back on error and always returns the connection to the pool.
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        Transaction scope on a dedicated pooled connection.

        Commits when the block exits normally. On any exception the
        transaction is rolled back and the original exception re-raised;
        a failing rollback is logged and swallowed. The session is closed,
        releasing its connection, on every path.
        """
        session = self.session_factory()
        try:
            await session.begin()
            yield session
            await session.commit()
        except BaseException:
            try:
                await session.rollback()
            except Exception as rollback_error:
                logger.error(f"Transaction rollback failed: {rollback_error}", exc_info=True)
            raise
        finally:
            await session.close()

    async def ping(self) -> bool:
        """
        Test database connectivity.
        Returns True if connection is successful, False otherwise.
        """
        try:
            async with self.session() as session:
                result = await session.execute(text("SELECT 1 + 1"))
                value = result.scalar()
                logger.info(f"Database test query result: {value}")
                return value == 2
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return False

    async def create_tables(self) -> None:
        """Create all database tables."""
        # Models must be imported so their tables are registered on Base.metadata
        import app.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created successfully")

    async def drop_tables(self) -> None:
        """Drop all database tables."""
        import app.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            logger.info("Database tables dropped successfully")

    async def dispose(self) -> None:
        """
        Close pooled connections.
        This should be called during application shutdown.
        """
        await self.engine.dispose()
        logger.info("Database connections closed")

    def pool_status(self) -> dict:
        """Connection pool counters for health reporting."""
        pool = self.engine.pool
        return {
            "pool_size": pool.size(),
            "checked_in_connections": pool.checkedin(),
            "checked_out_connections": pool.checkedout(),
        }


def get_database(request: Request) -> Database:
    """Dependency returning the Database created for this application."""
    return request.app.state.database


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    Dependency to get database session.
    Yields an async database session and ensures it's closed after use.
    """
    async with get_database(request).session() as session:
        yield session
