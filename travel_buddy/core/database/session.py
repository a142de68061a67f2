"""
Process-wide engine and the request session dependency.

The engine is built once from ``DATABASE_URL``; every request gets its own
``AsyncSession`` from ``get_session`` and the tests override that dependency.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from travel_buddy.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

logger = logging.getLogger(__name__)

engine = create_engine(settings.database.url, echo=settings.database.echo)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session that is closed when the request finishes."""
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """Create missing tables at startup; tables created by Alembic are left as they are."""
    logger.info(f"Ensuring database tables exist on {engine.url.render_as_string(hide_password=True)}")
    await create_all(engine)
