"""
Unit tests for server exception handlers.

Tests cover the mapping of domain errors to HTTP responses and the global
handler for unexpected exceptions.
"""

import json
from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from travel_buddy.core.exceptions import (
    AccountLocked,
    AuthenticationFailed,
    Conflict,
    NotFound,
    PermissionDenied,
    RateLimitExceeded,
    TravelBuddyError,
    ValidationFailed,
)
from travel_buddy.server.exception_handlers import setup_exception_handlers
from travel_buddy.server.exception_handlers.global_handler import (
    global_exception_handler,
    travel_buddy_error_handler,
)


@pytest.fixture
def mock_request():
    """Create a mock request object."""
    request = Mock(spec=Request)
    request.method = "GET"
    request.url.path = "/api/v1/test"
    request.query_params = {"page": "2"}
    request.client = Mock()
    request.client.host = "127.0.0.1"
    return request


class TestDomainErrorHandler:
    @pytest.mark.parametrize(
        "exc, status",
        [
            (ValidationFailed("bad"), 400),
            (Conflict("twice"), 400),
            (AuthenticationFailed("who"), 401),
            (PermissionDenied("no"), 403),
            (NotFound("gone"), 404),
            (AccountLocked("wait"), 423),
            (RateLimitExceeded("slow"), 429),
            (TravelBuddyError("custom", status_code=418), 418),
        ],
    )
    async def test_status_follows_error(self, mock_request, exc, status):
        response = await travel_buddy_error_handler(mock_request, exc)

        assert response.status_code == status
        body = json.loads(response.body.decode())
        assert body == {"detail": exc.message, "error_type": type(exc).__name__}

    async def test_rate_limit_sets_retry_after(self, mock_request):
        response = await travel_buddy_error_handler(mock_request, RateLimitExceeded("slow", retry_after=12))

        assert response.headers["Retry-After"] == "12"

    async def test_other_errors_have_no_retry_after(self, mock_request):
        response = await travel_buddy_error_handler(mock_request, NotFound("gone"))

        assert "Retry-After" not in response.headers


class TestGlobalExceptionHandler:
    """Test suite for global exception handler."""

    async def test_exception_handler_logs_error(self, mock_request):
        exc = ValueError("Test error")

        with patch("travel_buddy.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, exc)

            mock_logger.error.assert_called_once()
            call_args = mock_logger.error.call_args
            assert "Unhandled exception" in call_args[0][0]
            assert call_args[1]["extra"]["error_type"] == "ValueError"
            assert call_args[1]["extra"]["query_params"] == {"page": "2"}

    async def test_exception_handler_returns_500_json(self, mock_request):
        exc = RuntimeError("Test error")

        with patch("travel_buddy.server.exception_handlers.global_handler.logger") as mock_logger:
            response = await global_exception_handler(mock_request, exc)

        assert isinstance(response, JSONResponse)
        assert response.status_code == 500
        body = json.loads(response.body.decode())
        assert body["detail"] == "Internal server error"
        assert len(body["error_id"]) == 32
        assert body["error_id"] == mock_logger.error.call_args[1]["extra"]["error_id"]
        assert body["error_type"] == "RuntimeError"

    async def test_exception_handler_reports_to_monitoring(self, mock_request):
        exc = KeyError("missing")

        with patch("travel_buddy.server.exception_handlers.global_handler.log_error") as mock_log_error:
            await global_exception_handler(mock_request, exc)

        mock_log_error.assert_called_once()
        assert mock_log_error.call_args[0][0] == "KeyError"

    async def test_client_without_host(self, mock_request):
        mock_request.client = None

        with patch("travel_buddy.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, RuntimeError("x"))

        assert mock_logger.error.call_args[1]["extra"]["client"] == "unknown"


def test_setup_registers_both_handlers():
    app = FastAPI()

    setup_exception_handlers(app)

    assert app.exception_handlers[TravelBuddyError] is travel_buddy_error_handler
    assert app.exception_handlers[Exception] is global_exception_handler
