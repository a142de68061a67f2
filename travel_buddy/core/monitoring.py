"""
Logfire monitoring for the Travel Buddy backend.

Logfire is optional (``pip install 'travel-buddy[monitoring]'``) and off unless
``LOGFIRE_ENABLED`` and ``LOGFIRE_TOKEN`` are both set. When on, FastAPI and
SQLAlchemy are instrumented and the matching events below are sent as
structured logfire records; when off, they become debug log lines.
"""

import logging
import os
from typing import Any, Dict, Optional, Tuple

from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


LOGFIRE_ENABLED = _env_flag("LOGFIRE_ENABLED", "false")
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN", "")
LOGFIRE_PROJECT_NAME = os.getenv("LOGFIRE_PROJECT_NAME", "travel-buddy")
LOGFIRE_ENVIRONMENT = os.getenv("LOGFIRE_ENVIRONMENT", "development")
LOGFIRE_SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "travel-buddy-backend")
LOGFIRE_SERVICE_VERSION = os.getenv("LOGFIRE_SERVICE_VERSION", "1.0.0")

LOGFIRE_TRACE_SQLALCHEMY = _env_flag("LOGFIRE_TRACE_SQLALCHEMY", "true")
LOGFIRE_TRACE_FASTAPI = _env_flag("LOGFIRE_TRACE_FASTAPI", "true")


def _instrument(logfire, app: Optional[FastAPI]) -> None:
    targets = []
    if LOGFIRE_TRACE_SQLALCHEMY:
        targets.append(("SQLAlchemy", logfire.instrument_sqlalchemy, {}))
    if LOGFIRE_TRACE_FASTAPI and app is not None:
        targets.append(("FastAPI", logfire.instrument_fastapi, {"app": app}))

    for name, instrument, kwargs in targets:
        try:
            instrument(**kwargs)
        except Exception as e:
            logger.warning(f"Logfire: {name} instrumentation failed: {e}")
        else:
            logger.info(f"Logfire: {name} instrumentation enabled")


def initialize_logfire(app: Optional[FastAPI] = None) -> bool:
    """
    Configure Logfire and instrument the application.

    Args:
        app: Application to instrument; SQLAlchemy is instrumented regardless.

    Returns:
        True when Logfire is active.
    """
    if not LOGFIRE_ENABLED:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False
    if not LOGFIRE_TOKEN:
        logger.warning("Logfire is enabled but LOGFIRE_TOKEN is not set; monitoring stays off.")
        return False

    try:
        import logfire
    except ImportError:
        logger.warning("Logfire is enabled but not installed. Install 'travel-buddy[monitoring]'.")
        return False

    try:
        logfire.configure(
            token=LOGFIRE_TOKEN,
            service_name=LOGFIRE_SERVICE_NAME,
            service_version=LOGFIRE_SERVICE_VERSION,
            environment=LOGFIRE_ENVIRONMENT,
        )
    except Exception as e:
        logger.error(f"Failed to configure Logfire: {e}", exc_info=True)
        return False

    _instrument(logfire, app)
    logger.info(
        f"Logfire monitoring initialized: project={LOGFIRE_PROJECT_NAME}, "
        f"environment={LOGFIRE_ENVIRONMENT}, service={LOGFIRE_SERVICE_NAME}"
    )
    return True


def _send(level: str, message: str, attributes: Dict[str, Any]) -> bool:
    """Send a record to Logfire; False means the caller should log it locally."""
    if not LOGFIRE_ENABLED:
        return False
    try:
        import logfire

        getattr(logfire, level)(message, **attributes)
    except Exception as e:
        logger.debug(f"Logfire record '{message}' not sent: {e}")
        return False
    return True


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """Record a finished HTTP request and its duration."""
    attributes = {"method": method, "path": path, "status_code": status_code, "duration_ms": duration_ms}
    if not _send("info", "API request completed", attributes):
        logger.debug(f"{method} {path} -> {status_code} ({duration_ms:.2f}ms)")


def log_swipe(swiper_id: int, swiped_id: int, action: str) -> None:
    if not _send("info", "Swipe recorded", {"swiper_id": swiper_id, "swiped_id": swiped_id, "action": action}):
        logger.debug(f"Swipe recorded: {swiper_id} {action} {swiped_id}")


def log_match_created(match_id: int, user_ids: Tuple[int, int], match_score: int) -> None:
    attributes = {"match_id": match_id, "users": list(user_ids), "match_score": match_score}
    if not _send("info", "Match created", attributes):
        logger.debug(f"Match {match_id} created for users {user_ids} with score {match_score}")


def log_error(error_type: str, error_message: str, context: Optional[Dict[str, Any]] = None) -> None:
    """
    Record a handled error.

    Args:
        error_type: Error class name
        error_message: Message returned to the client
        context: Extra attributes such as the request path
    """
    if not _send("error", f"{error_type}: {error_message}", context or {}):
        logger.debug(f"{error_type}: {error_message} {context or {}}")
