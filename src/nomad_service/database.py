"""Async database engine and session management."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from .config import get_settings
from .exceptions import DatabaseNotInitializedError

logger = logging.getLogger("database")


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""
    pass


# Engine and session factory
_engine: Optional[AsyncEngine] = None
_async_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        options: dict = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live per connection, share one across the pool
        if ":memory:" in url or url.rstrip("/").endswith("://"):
            options["poolclass"] = StaticPool
        return options
    return {"pool_size": 10, "max_overflow": 20}


async def init_database(
    url: Optional[str] = None,
    echo: Optional[bool] = None,
    create_tables: bool = True,
) -> AsyncEngine:
    """Initialize the engine and session factory.

    Defaults come from settings; tests pass an in-memory SQLite URL.
    """
    global _engine, _async_session_factory

    settings = get_settings()
    url = url or settings.database_url
    _engine = create_async_engine(
        url,
        echo=settings.database_echo if echo is None else echo,
        **_engine_options(url),
    )
    _async_session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    if create_tables:
        # Register every model on the metadata before create_all
        from . import models  # noqa: F401

        async with _engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    logger.info("Database initialized: %s", _engine.url.render_as_string(hide_password=True))
    return _engine


async def close_database() -> None:
    """Dispose the engine."""
    global _engine, _async_session_factory
    if _engine:
        await _engine.dispose()
    _engine = None
    _async_session_factory = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory created by init_database()."""
    if not _async_session_factory:
        raise DatabaseNotInitializedError("Database not initialized. Call init_database() first.")
    return _async_session_factory


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session."""
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
