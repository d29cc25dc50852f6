"""
Database connection configuration using SQLAlchemy 2.0 async.

The local store is an embedded SQLite file accessed through ``aiosqlite``;
any other async URL SQLAlchemy understands works as well.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from comicshelf.providers.settings import get_settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def get_database_url() -> str:
    """Return the async database URL from settings."""
    return get_settings().database_url


def ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return
    database = url.database
    if not database or database == ":memory:":
        return
    Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def create_standalone_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Create an async engine owned by the caller.

    Args:
        database_url: Async SQLAlchemy URL (defaults to settings)
    """
    url = database_url or get_database_url()
    ensure_sqlite_directory(url)
    return create_async_engine(
        url,
        pool_pre_ping=True,  # Verify connections before using them
        echo=False,  # Set to True for SQL debugging
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Build a session maker that keeps objects usable after commit."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@asynccontextmanager
async def get_standalone_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Async context manager for database sessions.

    Commits on success, rolls back and re-raises on any error.

    Usage:
        async with get_standalone_session(maker) as session:
            result = await session.execute(select(Model))
    """
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(engine: AsyncEngine) -> None:
    """
    Initialize the database by creating all tables.
    Should be called on application startup.
    """
    # Register every model on Base.metadata
    from comicshelf.database import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    """
    Close the database connection.
    Should be called on application shutdown.
    """
    await engine.dispose()
