"""Unit tests for the sliding window rate limiter and its dependencies."""

from types import SimpleNamespace

import pytest

from travel_buddy.core.exceptions import RateLimitExceeded
from travel_buddy.server.services import rate_limit
from travel_buddy.server.services.rate_limit import SlidingWindowRateLimiter


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(max_requests=3, window_seconds=60, message="Slow down", clock=clock)


class TestSlidingWindowRateLimiter:
    async def test_counts_down_remaining_hits(self, limiter):
        assert [await limiter.hit("user:1") for _ in range(3)] == [2, 1, 0]

    async def test_rejects_over_the_limit(self, limiter, clock):
        for _ in range(3):
            await limiter.hit("user:1")
        clock.now = 20

        with pytest.raises(RateLimitExceeded) as exc_info:
            await limiter.hit("user:1")

        assert exc_info.value.message == "Slow down"
        assert exc_info.value.status_code == 429
        assert exc_info.value.retry_after == 40

    async def test_keys_are_independent(self, limiter):
        for _ in range(3):
            await limiter.hit("user:1")

        assert await limiter.hit("user:2") == 2

    async def test_window_slides(self, limiter, clock):
        await limiter.hit("user:1")
        clock.now = 30
        await limiter.hit("user:1")
        await limiter.hit("user:1")

        clock.now = 60
        # The first hit left the window
        assert await limiter.hit("user:1") == 0

        with pytest.raises(RateLimitExceeded):
            await limiter.hit("user:1")

    async def test_retry_after_is_at_least_one_second(self, limiter, clock):
        for _ in range(3):
            await limiter.hit("user:1")
        clock.now = 59.9

        with pytest.raises(RateLimitExceeded) as exc_info:
            await limiter.hit("user:1")

        assert exc_info.value.retry_after == 1

    async def test_idle_keys_are_forgotten(self, limiter, clock):
        await limiter.hit("user:1")
        clock.now = 30
        await limiter.hit("user:2")

        clock.now = 70
        await limiter.hit("user:3")

        assert set(limiter._hits) == {"user:2", "user:3"}
        assert await limiter.hit("user:1") == 2

    async def test_reset(self, limiter):
        for _ in range(3):
            await limiter.hit("user:1")

        await limiter.reset()

        assert await limiter.hit("user:1") == 2


class TestDependencies:
    @pytest.fixture
    def enabled(self, monkeypatch):
        monkeypatch.setattr(rate_limit, "_enabled", lambda: True)

    @pytest.fixture(autouse=True)
    async def _clean_limiters(self):
        yield
        await rate_limit.reset_all_limiters()

    async def test_disabled_limits_never_raise(self, monkeypatch):
        monkeypatch.setattr(rate_limit, "_enabled", lambda: False)
        monkeypatch.setattr(rate_limit.swipe_limiter, "max_requests", 0)

        await rate_limit.swipe_rate_limit(user=SimpleNamespace(id=1))

    async def test_swipe_limit_is_per_user(self, enabled, monkeypatch):
        monkeypatch.setattr(rate_limit.swipe_limiter, "max_requests", 1)

        await rate_limit.swipe_rate_limit(user=SimpleNamespace(id=1))
        await rate_limit.swipe_rate_limit(user=SimpleNamespace(id=2))
        with pytest.raises(RateLimitExceeded, match="Swipe limit reached"):
            await rate_limit.swipe_rate_limit(user=SimpleNamespace(id=1))

    async def test_auth_limit_is_per_client_host(self, enabled, monkeypatch):
        monkeypatch.setattr(rate_limit.auth_limiter, "max_requests", 1)
        request = SimpleNamespace(client=SimpleNamespace(host="10.0.0.1"))

        await rate_limit.auth_rate_limit(request)
        with pytest.raises(RateLimitExceeded, match="Too many login attempts"):
            await rate_limit.auth_rate_limit(request)

    async def test_sensitive_limit_uses_user_then_host(self, enabled, monkeypatch):
        monkeypatch.setattr(rate_limit.sensitive_limiter, "max_requests", 1)
        request = SimpleNamespace(client=SimpleNamespace(host="10.0.0.2"))

        await rate_limit.sensitive_rate_limit(request, user=SimpleNamespace(id=5))
        # Anonymous callers from the same host have their own budget
        await rate_limit.sensitive_rate_limit(request, user=None)
        with pytest.raises(RateLimitExceeded):
            await rate_limit.sensitive_rate_limit(request, user=None)
