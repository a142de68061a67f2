"""
Unit tests for FastAPI application lifespan management.

Tests verify that the application startup and shutdown events are properly
handled, including schema creation and releasing real-time resources.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI

from travel_buddy.server import main


@pytest.fixture
def connection_manager():
    manager = MagicMock()
    manager.close_all = AsyncMock()
    with patch.object(main, "get_connection_manager", return_value=manager):
        yield manager


class TestLifespan:
    async def test_startup_initializes_database(self, connection_manager):
        with patch.object(main, "init_db", new_callable=AsyncMock) as init_db, patch.object(
            main, "close_score_cache", new_callable=AsyncMock
        ):
            async with main.lifespan(FastAPI()):
                init_db.assert_awaited_once()
                connection_manager.close_all.assert_not_awaited()

    async def test_shutdown_releases_connections_and_cache(self, connection_manager):
        with patch.object(main, "init_db", new_callable=AsyncMock), patch.object(
            main, "close_score_cache", new_callable=AsyncMock
        ) as close_cache:
            async with main.lifespan(FastAPI()):
                pass

        connection_manager.close_all.assert_awaited_once()
        close_cache.assert_awaited_once()

    async def test_startup_failure_propagates(self, connection_manager):
        with patch.object(main, "init_db", new_callable=AsyncMock, side_effect=RuntimeError("db down")):
            with pytest.raises(RuntimeError, match="db down"):
                async with main.lifespan(FastAPI()):
                    pass

        connection_manager.close_all.assert_not_awaited()


class TestApplication:
    def test_routes_are_mounted(self):
        paths = {route.path for route in main.app.routes}

        assert {"/health", "/version"} <= paths
        assert "/api/v1/auth/login" in paths
        assert "/api/v1/matches/conversations/" in paths
        assert "/api/v1/ws" in paths
        assert "/uploads" in paths

    def test_run_uses_configured_keepalive(self):
        with patch("uvicorn.run") as run:
            main.run()

        kwargs = run.call_args.kwargs
        assert run.call_args.args == ("travel_buddy.server.main:app",)
        assert kwargs["port"] == main.settings.server_port
        assert kwargs["ws_ping_interval"] == main.settings.websocket.ping_interval_seconds
