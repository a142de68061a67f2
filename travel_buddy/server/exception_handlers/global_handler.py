"""
Exception Handlers for the FastAPI Application.

Domain errors raised by services are mapped to their HTTP status with a
``{"detail", "error_type"}`` body. Anything else is logged with its request
context and answered with a 500 that carries an error ID clients can quote.
"""

import traceback
import uuid
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from travel_buddy.core.exceptions import RateLimitExceeded, TravelBuddyError
from travel_buddy.core.logging_config import get_logger
from travel_buddy.core.monitoring import log_error

logger = get_logger(__name__)


async def travel_buddy_error_handler(request: Request, exc: TravelBuddyError) -> JSONResponse:
    """
    Map a domain error to its HTTP response.

    Args:
        request: The HTTP request that raised the error
        exc: The domain error

    Returns:
        JSONResponse with the error message and type
    """
    headers = {}
    if isinstance(exc, RateLimitExceeded) and exc.retry_after is not None:
        headers["Retry-After"] = str(exc.retry_after)

    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {type(exc).__name__}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error_type": type(exc).__name__},
        headers=headers or None,
    )


def _request_context(request: Request) -> Dict[str, Any]:
    return {
        "method": request.method,
        "path": request.url.path,
        "query_params": dict(request.query_params),
        "client": request.client.host if request.client else "unknown",
    }


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Answer any unhandled exception with a 500.

    The full traceback is logged under a fresh error ID; the client only gets
    the ID and the error type, which is enough to find the log entry.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with the error ID
    """
    error_id = uuid.uuid4().hex
    context = _request_context(request)

    logger.error(
        f"Unhandled exception [{error_id}] in {context['method']} {context['path']}: {exc}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
            **context,
        },
    )
    log_error(type(exc).__name__, str(exc), {"error_id": error_id, "path": context["path"]})

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error_id": error_id, "error_type": type(exc).__name__},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the domain error handler and the catch-all 500 handler on ``app``."""
    app.add_exception_handler(TravelBuddyError, travel_buddy_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered")
