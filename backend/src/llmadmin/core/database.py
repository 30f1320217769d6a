"""
Database connection and session management for the LLM admin backend.

This module provides database connection management, session handling,
and the unit-of-work helper used by every mutating operation.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from .config import get_settings_instance
from .exceptions import DatabaseConnectionError, DatabaseSessionError, LLMAdminException
from .logging import get_logger

logger = get_logger(__name__)

# Create declarative base
Base = declarative_base()

# Global async engine and session factory - lazy initialization
_async_engine: AsyncEngine | None = None
_AsyncSessionLocal: async_sessionmaker | None = None


def _mask_url(database_url: str) -> str:
    """Strip credentials from a database URL for logging."""
    if "@" in database_url:
        return database_url.split("@", 1)[1]
    return database_url


def get_database_url() -> str:
    try:
        settings = get_settings_instance()
    except Exception as e:
        logger.error("Could not determine database URL from settings", exc_info=True)
        raise DatabaseConnectionError(
            "Could not determine database URL. Please set LLMADMIN_DATABASE_URL."
        ) from e
    return settings.database_url


def get_async_engine() -> AsyncEngine:
    global _async_engine  # noqa: PLW0603
    if _async_engine is None:
        database_url = get_database_url()
        settings = get_settings_instance()
        logger.debug(f"Database configuration: {_mask_url(database_url)}")

        engine_kwargs = {"pool_pre_ping": True, "echo": False}
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
                pool_timeout=settings.database_pool_timeout,
                pool_recycle=settings.database_pool_recycle,
            )
        try:
            _async_engine = create_async_engine(database_url, **engine_kwargs)
        except Exception as e:
            logger.error(f"Failed to create async database engine: {e}")
            raise DatabaseConnectionError(f"engine creation: {e}") from e
    return _async_engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create the session factory used for request-scoped sessions."""
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )


def get_async_session_local() -> async_sessionmaker:
    global _AsyncSessionLocal  # noqa: PLW0603
    if _AsyncSessionLocal is None:
        _AsyncSessionLocal = build_session_factory(get_async_engine())
    return _AsyncSessionLocal


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    session_local = get_async_session_local()
    async with session_local() as session:
        try:
            yield session
        except SQLAlchemyError as e:
            logger.error(f"Database session error: {e}")
            await session.rollback()
            raise DatabaseSessionError(f"session operation: {e}") from e


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """Run a block as one transaction: commit on success, roll back on error.

    Domain exceptions propagate unchanged after the rollback; raw SQLAlchemy
    failures are wrapped in DatabaseSessionError.
    """
    try:
        yield session
        await session.commit()
    except LLMAdminException:
        await session.rollback()
        raise
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Transaction failed: {e}")
        raise DatabaseSessionError(f"transaction execution: {e}") from e
    except Exception:
        await session.rollback()
        raise


async def init_db() -> None:
    """Create all tables for the registered models."""
    from ..models import register_all_models

    register_all_models()
    engine = get_async_engine()
    logger.debug(f"Initializing database tables: {_mask_url(get_database_url())}")
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except SQLAlchemyError as e:
        logger.error(f"Database initialization failed: {e}")
        raise DatabaseSessionError(f"database initialization: {e}") from e
    logger.info("Database tables initialized successfully")


async def close_db() -> None:
    global _async_engine, _AsyncSessionLocal  # noqa: PLW0603
    if _async_engine is None:
        return
    try:
        await _async_engine.dispose()
        logger.debug("Database connections closed")
    except SQLAlchemyError as e:
        logger.error(f"Error closing database connections: {e}")
    finally:
        _async_engine = None
        _AsyncSessionLocal = None


async def check_db_connection(session: AsyncSession) -> bool:
    """Check if database connection is working."""
    try:
        await session.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection check failed: {e}")
        return False
