"""
Database connection management.

Provides SQLAlchemy engines and the async session factory shared by the
document store. One pool per process; every store call checks a session out
and returns it on exit.

Dependencies: sqlalchemy, pgvector, asyncpg, persona_rag.configs
System role: Database connection lifecycle management
"""

from pgvector.asyncpg import register_vector
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.pool import QueuePool
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker

from persona_rag.configs import get_settings
from persona_rag.configs.database import DatabaseSettings


def get_engine(db_config: DatabaseSettings | None = None) -> Engine:
    """
    Create synchronous SQLAlchemy engine (used for schema bootstrap).

    pool_pre_ping=True verifies connections before use to detect
    stale/broken connections early.

    Args:
        db_config: Database settings (uses application settings if None)

    Returns:
        Engine: Configured SQLAlchemy engine with active pooling

    Raises:
        ConfigurationError: If no connection string is configured
    """
    db_config = db_config or get_settings().database

    return create_engine(
        db_config.database_url,
        echo=db_config.echo_sql,
        poolclass=QueuePool,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,  # Verify connections before using
    )


def get_async_engine(db_config: DatabaseSettings | None = None) -> AsyncEngine:
    """
    Create async SQLAlchemy engine with connection pooling.

    Args:
        db_config: Database settings (uses application settings if None)

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Raises:
        ConfigurationError: If no connection string is configured

    Usage:
        engine = get_async_engine()
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
    """
    db_config = db_config or get_settings().database

    engine = create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )

    # asyncpg needs the pgvector codec on every new connection
    @event.listens_for(engine.sync_engine, "connect")
    def _register_vector(dbapi_connection, connection_record) -> None:
        dbapi_connection.run_async(register_vector)

    return engine


def get_async_session_factory(engine: AsyncEngine | None = None) -> async_sessionmaker:
    """
    Create async session factory for database operations.

    Returns async_sessionmaker with autoflush=False and expire_on_commit=False
    for explicit transaction control and predictable behavior.

    Args:
        engine: Engine to bind (creates one from settings if None)

    Returns:
        async_sessionmaker: Async session factory

    Usage:
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            async with session.begin():
                await session.execute(stmt)
    """
    return async_sessionmaker(
        bind=engine or get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )
