"""
Logging Configuration Module.

Console (and optionally file) logging for the Travel Buddy backend, built with
``logging.config.dictConfig``. Three formats are available:

- ``simple``: level, logger and message
- ``detailed``: adds time and source location
- ``json``: one JSON object per line for log shippers

Levels, format and file output come from the server settings
(``TRAVEL_BUDDY_LOG_LEVEL``, ``LOG_FORMAT``, ``LOG_FILE_DIR`` and
``ENABLE_FILE_LOGGING``) and can be overridden per call.
"""

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional

from travel_buddy.server.core.config import settings

LOG_LEVEL = settings.log_level.upper()
LOG_FORMAT = settings.log_format
LOG_FILE_DIR = settings.log_file_dir
ENABLE_FILE_LOGGING = settings.enable_file_logging
LOG_FILE_NAME = "travel_buddy.log"

SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)

FORMATS = {"simple": SIMPLE_FORMAT, "detailed": DETAILED_FORMAT, "json": JSON_FORMAT}

# Matching and request handling are chatty on purpose; the drivers are not
MODULE_LOG_LEVELS = {
    "travel_buddy.core": "INFO",
    "travel_buddy.core.database": "INFO",
    "travel_buddy.matching": "DEBUG",
    "travel_buddy.matching.cache": "INFO",
    "travel_buddy.server": "INFO",
    "travel_buddy.server.api": "DEBUG",
    "travel_buddy.server.services": "DEBUG",
    "travel_buddy.server.middleware": "INFO",
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "aiosqlite": "WARNING",
    "asyncpg": "WARNING",
    "httpx": "WARNING",
    "asyncio": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}


def build_logging_config(level: str, fmt: str, log_file: Optional[Path] = None) -> Dict[str, Any]:
    """Build the ``dictConfig`` mapping for the given level and format.

    The root logger accepts everything and each handler filters on its own
    level; the file handler, when present, always records DEBUG.
    """
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "default",
        }
    }
    if log_file is not None:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "level": "DEBUG",
            "formatter": "default",
            "filename": str(log_file),
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": FORMATS.get(fmt, DETAILED_FORMAT), "datefmt": "%Y-%m-%d %H:%M:%S"},
        },
        "handlers": handlers,
        "root": {"level": "DEBUG", "handlers": list(handlers)},
        "loggers": {name: {"level": module_level} for name, module_level in MODULE_LOG_LEVELS.items()},
    }


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Console level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format override (simple, detailed, json)
        enable_file: Also write to ``LOG_FILE_DIR`` when file logging is enabled in the settings
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT

    log_file = None
    if enable_file and ENABLE_FILE_LOGGING:
        log_dir = Path(LOG_FILE_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / LOG_FILE_NAME

    logging.config.dictConfig(build_logging_config(level, fmt, log_file))
    logging.getLogger(__name__).info(f"Logging configured: level={level}, format={fmt}, log_file={log_file}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module, typically ``get_logger(__name__)``."""
    return logging.getLogger(name)
