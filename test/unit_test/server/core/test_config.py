"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds environment variables and that the
grouped configuration views expose the same values.
"""

import pytest

from travel_buddy.server.core.config import (
    AuthConfig,
    CORSConfig,
    MatchingConfig,
    RateLimitConfig,
    Settings,
)

ENV_KEYS = (
    "DATABASE_URL",
    "JWT_SECRET",
    "RATE_LIMIT_ENABLED",
    "TRAVEL_BUDDY_ENV",
    "TRAVEL_BUDDY_LOG_LEVEL",
    "UPLOAD_DIR",
)


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def load_settings() -> Settings:
    return Settings(_env_file=None)


class TestSettingsDefaults:
    def test_defaults(self, clean_env):
        settings = load_settings()

        assert settings.server_port == 8000
        assert settings.environment == "development"
        assert settings.is_production is False
        assert settings.database_url.startswith("postgresql+asyncpg://")
        assert settings.rate_limit_enabled is True
        assert settings.upload_dir == "uploads"

    def test_auth_defaults(self, clean_env):
        auth = load_settings().auth

        assert isinstance(auth, AuthConfig)
        assert auth.cookie_name == "jwt"
        assert auth.jwt_expires_in_days == 7
        assert auth.max_login_attempts == 5
        assert auth.lock_minutes == 5
        assert auth.password_reset_expires_minutes == 10


class TestSettingsBinding:
    @pytest.mark.parametrize(
        "env_key,env_value,attr,expected",
        [
            ("TRAVEL_BUDDY_SERVER_PORT", "9001", "server_port", 9001),
            ("TRAVEL_BUDDY_ENV", "production", "is_production", True),
            ("JWT_EXPIRES_IN_DAYS", "30", "jwt_expires_in_days", 30),
            ("RATE_LIMIT_ENABLED", "false", "rate_limit_enabled", False),
            ("MATCH_CACHE_TTL_SECONDS", "120", "match_cache_ttl_seconds", 120.0),
        ],
    )
    def test_env_binding(self, clean_env, env_key, env_value, attr, expected):
        clean_env.setenv(env_key, env_value)

        assert getattr(load_settings(), attr) == expected

    def test_list_values_from_json(self, clean_env):
        clean_env.setenv("CORS_ORIGINS", '["https://travelbuddy.app", "http://localhost:3000"]')

        cors = load_settings().cors

        assert isinstance(cors, CORSConfig)
        assert cors.origins == ["https://travelbuddy.app", "http://localhost:3000"]


class TestGroupedConfigs:
    def test_rate_limit_view(self, clean_env):
        clean_env.setenv("RATE_LIMIT_SWIPE_MAX", "10")
        clean_env.setenv("RATE_LIMIT_SWIPE_WINDOW", "30")

        rate_limit = load_settings().rate_limit

        assert isinstance(rate_limit, RateLimitConfig)
        assert (rate_limit.swipe_max, rate_limit.swipe_window_seconds) == (10, 30)
        assert rate_limit.sensitive_window_seconds == 3600

    def test_matching_view(self, clean_env):
        clean_env.setenv("MATCH_MODEL_VERSION", "2.0.0")

        matching = load_settings().matching

        assert isinstance(matching, MatchingConfig)
        assert matching.model_version == "2.0.0"
        assert matching.cache_refresh_seconds < matching.cache_ttl_seconds

    def test_database_and_upload_views(self, clean_env):
        clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
        clean_env.setenv("UPLOAD_MAX_BYTES", "1024")

        settings = load_settings()

        assert settings.database.url == "sqlite+aiosqlite:///:memory:"
        assert settings.upload.max_bytes == 1024
        assert settings.websocket.ping_interval_seconds == 25
