from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel.pool import StaticPool

from travel_buddy.core.database.base import utc_now
from travel_buddy.core.database.entities.users import User, default_travel_preferences
from travel_buddy.core.database.utils import create_all, create_sessionmaker
from travel_buddy.core.security import create_access_token, hash_password

# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
DEFAULT_PASSWORD = "password123"

# Hashing is deliberately slow, so every factory user shares one hash
_DEFAULT_PASSWORD_HASH = hash_password(DEFAULT_PASSWORD)

UserFactory = Callable[..., Awaitable[User]]


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine) -> async_sessionmaker:
    return create_sessionmaker(test_engine)


@pytest_asyncio.fixture(name="session")
async def session_fixture(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def user_factory(session: AsyncSession) -> UserFactory:
    """Create users directly in the database.

    Keyword arguments override entity fields; ``preferences`` is merged over
    the default travel preferences.
    """
    counter = {"n": 0}

    async def _create(**overrides: Any) -> User:
        counter["n"] += 1
        preferences: Dict[str, Any] = default_travel_preferences()
        preferences.update(overrides.pop("preferences", {}))
        fields: Dict[str, Any] = {
            "name": f"Traveller {counter['n']}",
            "email": f"traveller{counter['n']}@example.com",
            "password_hash": _DEFAULT_PASSWORD_HASH,
            "travel_preferences": preferences,
            "last_active": utc_now(),
        }
        fields.update(overrides)
        user = User(**fields)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _create


@pytest.fixture
def auth_headers() -> Callable[[User], Dict[str, str]]:
    def _headers(user: User) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers


@pytest_asyncio.fixture(name="client")
async def client_fixture(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with the database dependency overridden."""
    from travel_buddy.core.database import get_session
    from travel_buddy.server.api.v1.realtime import get_session_factory
    from travel_buddy.server.main import app
    from travel_buddy.server.services.deps import close_score_cache
    from travel_buddy.server.services.rate_limit import reset_all_limiters

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()
    await reset_all_limiters()
    await close_score_cache()


class FakeWebSocket:
    """Records the frames sent to it instead of talking to a client."""

    def __init__(self, fail_on_send: bool = False) -> None:
        self.sent: List[Dict[str, Any]] = []
        self.closed = False
        self.fail_on_send = fail_on_send

    async def send_json(self, data: Dict[str, Any]) -> None:
        if self.fail_on_send:
            raise RuntimeError("socket is gone")
        self.sent.append(data)

    async def close(self, code: int = 1000) -> None:
        self.closed = True

    def events(self, name: str) -> List[Dict[str, Any]]:
        return [frame["data"] for frame in self.sent if frame["event"] == name]


@pytest.fixture
def fake_websocket_cls():
    return FakeWebSocket
