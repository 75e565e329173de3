"""
Database Session Management Module.

This module creates the async SQLAlchemy engine and the session factory that the
blob store borrows connections through.

Key features:
- Bounded, pre-pinged connection pool shared by the whole process
- Async sessions so store calls never block the event loop
- Plain `postgresql://` URLs are switched to the asyncpg driver

Usage:
- Build the engine once at startup, hand `build_session_factory(engine)` to
  the blob store, and dispose of the engine on shutdown.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine


def to_async_url(database_url: str) -> str:
    """
    Rewrite a plain PostgreSQL URL to use the asyncpg driver.

    URLs that already name a driver are returned unchanged.
    """
    for prefix in ("postgresql://", "postgres://"):
        if database_url.startswith(prefix):
            return "postgresql+asyncpg://" + database_url[len(prefix):]
    return database_url


def build_engine(
    database_url: str,
    *,
    pool_size: int = 10,
    max_overflow: int = 20,
    pool_recycle: int = 300,
    echo: bool = False,
) -> AsyncEngine:
    """
    Create the process-wide async engine.

    Args:
        database_url: SQLAlchemy database URL
        pool_size: Connections kept open in the pool
        max_overflow: Additional connections allowed under load
        pool_recycle: Seconds after which a pooled connection is replaced
        echo: Log emitted SQL

    Returns:
        AsyncEngine: The configured engine; no connection is opened yet.
    """
    return create_async_engine(
        to_async_url(database_url),
        pool_pre_ping=True,  # Check connection before using it
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_recycle=pool_recycle,
        echo=echo,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create the async session factory bound to `engine`."""
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )
