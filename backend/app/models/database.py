"""
Async SQLAlchemy engine & session factory for PostGIS.

Engine Lifecycle
----------------
Nothing is created at import time.  ``create_engine_from_settings``
builds the pooled ``AsyncEngine`` during the FastAPI lifespan startup
phase; the engine and its session factory are stored on ``app.state``
and the engine is disposed on shutdown.  Every request reaches the pool
through that handle, never through a module global.

Session Lifecycle
-----------------
The ``get_db`` dependency yields an ``AsyncSession`` bound to the
application's session factory.  The IRIS search is read-only, so there
is no commit; the session is rolled back on error and closed in the
``finally`` block regardless.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.config import Settings

logger = logging.getLogger(__name__)


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Build the pooled asyncpg engine described by *settings*."""
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        connect_args=settings.ssl_connect_args,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    FastAPI dependency — yields an async DB session from the factory
    held on ``request.app.state``.

    On error the session is rolled back and the exception re-raised.
    """
    session = request.app.state.session_factory()
    try:
        yield session
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Database error: %s", exc, exc_info=True)
        raise
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
