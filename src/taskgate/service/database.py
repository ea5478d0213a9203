"""
Database utilities for Taskgate.

Provides the async engine whose pool backs every call; created once at
startup and disposed at shutdown.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from ..config import Settings


logger = logging.getLogger(__name__)


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database."""
    connect_args: dict[str, Any] = {}
    if settings.DB_SSL or settings.is_production:
        # Managed Postgres with self-signed certificates: encrypt, don't verify
        connect_args["ssl"] = "require"

    url = make_url(settings.DATABASE_URL)
    logger.info(f"Connecting to database {url.render_as_string(hide_password=True)}")

    return create_async_engine(
        url,
        echo=settings.SQL_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


async def close_engine(engine: AsyncEngine) -> None:
    """Close database connections."""
    await engine.dispose()
    logger.info("Database connections closed")
