"""Tests for the engine and session helpers."""

import pytest
from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from travel_buddy.core.database.utils import create_all, create_engine, create_sessionmaker, normalize_url


@pytest.mark.parametrize(
    "url",
    [
        "postgres://u:p@db:5432/travel",
        "postgresql://u:p@db:5432/travel",
        "postgresql+psycopg2://u:p@db:5432/travel",
        "postgresql+asyncpg://u:p@db:5432/travel",
    ],
)
def test_postgres_urls_use_asyncpg(url):
    assert normalize_url(url) == "postgresql+asyncpg://u:p@db:5432/travel"


def test_sqlite_url_untouched():
    assert normalize_url("sqlite+aiosqlite:///./travel.db") == "sqlite+aiosqlite:///./travel.db"


async def test_in_memory_sqlite_shares_one_connection():
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    try:
        assert isinstance(engine.pool, StaticPool)

        await create_all(engine)
        async with engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
    finally:
        await engine.dispose()

    assert {"users", "swipes", "matches", "messages", "travel_groups", "marketplace_listings"} <= tables


async def test_sessions_keep_attributes_after_commit():
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    try:
        await create_all(engine)
        factory = create_sessionmaker(engine)
        async with factory() as session:
            assert session.sync_session.expire_on_commit is False
    finally:
        await engine.dispose()
