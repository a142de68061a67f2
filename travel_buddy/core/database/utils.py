"""
Engine and session helpers.

PostgreSQL (asyncpg) is the production database; SQLite (aiosqlite) serves
local runs and tests, so both URL families are accepted here.
"""

from __future__ import annotations

import re
from typing import Any, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .base import Base

_POSTGRES_SCHEME = re.compile(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://")


def normalize_url(db_url: str) -> str:
    """Point any PostgreSQL URL (``postgres://``, ``postgresql+psycopg2://`` ...) at asyncpg."""
    return _POSTGRES_SCHEME.sub("postgresql+asyncpg://", db_url, count=1)


def create_engine(db_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for ``db_url``.

    An in-memory SQLite database lives as long as its connection, so it is
    pinned to a single shared connection.

    Args:
        db_url: Database connection URL
        echo: Echo SQL statements to the log

    Returns:
        Configured AsyncEngine instance
    """
    url = normalize_url(db_url)
    options: Dict[str, Any] = {"echo": echo}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url:
            options["poolclass"] = StaticPool
    else:
        options["pool_pre_ping"] = True
    return create_async_engine(url, **options)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Entities stay readable after commit; services return them to the routers
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create every missing table. Deployed databases are migrated with Alembic."""
    # Register every table on the metadata before creating it
    from . import entities  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
