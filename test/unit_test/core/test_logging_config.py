"""Unit tests for logging configuration module.

Tests verify that the logging configuration functions work correctly with different
scenarios including various log levels, formats, and file logging options.
"""

import logging
from unittest.mock import patch

import pytest

from travel_buddy.core import logging_config
from travel_buddy.core.logging_config import (
    DETAILED_FORMAT,
    JSON_FORMAT,
    MODULE_LOG_LEVELS,
    SIMPLE_FORMAT,
    get_logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_root_handlers():
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def console_handler() -> logging.Handler:
    return next(h for h in logging.getLogger().handlers if type(h) is logging.StreamHandler)


class TestSetupLoggingLogLevels:
    @pytest.mark.parametrize(
        "log_level,expected_level",
        [
            ("DEBUG", logging.DEBUG),
            ("WARNING", logging.WARNING),
            ("error", logging.ERROR),
        ],
    )
    def test_console_level(self, log_level, expected_level):
        setup_logging(log_level=log_level, enable_file=False)

        assert console_handler().level == expected_level
        assert logging.getLogger().level == logging.DEBUG

    def test_previous_handlers_are_replaced(self):
        setup_logging(enable_file=False)
        setup_logging(enable_file=False)

        assert len(logging.getLogger().handlers) == 1


class TestSetupLoggingFormats:
    @pytest.mark.parametrize(
        "log_format,expected_format",
        [
            ("simple", SIMPLE_FORMAT),
            ("detailed", DETAILED_FORMAT),
            ("json", JSON_FORMAT),
            ("unknown", DETAILED_FORMAT),
        ],
    )
    def test_format(self, log_format, expected_format):
        setup_logging(log_format=log_format, enable_file=False)

        assert console_handler().formatter._fmt == expected_format


class TestFileLogging:
    def test_file_handler_added_when_enabled(self, tmp_path):
        with patch.object(logging_config, "ENABLE_FILE_LOGGING", True), patch.object(
            logging_config, "LOG_FILE_DIR", str(tmp_path)
        ):
            setup_logging(enable_file=True)

        file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].baseFilename == str(tmp_path / "travel_buddy.log")
        file_handlers[0].close()

    def test_no_file_handler_when_disabled_by_settings(self):
        with patch.object(logging_config, "ENABLE_FILE_LOGGING", False):
            setup_logging(enable_file=True)

        assert not any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)


def test_module_levels_are_applied():
    setup_logging(enable_file=False)

    for name, level in MODULE_LOG_LEVELS.items():
        assert logging.getLogger(name).level == logging.getLevelName(level)
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_get_logger_returns_named_logger():
    logger = get_logger("travel_buddy.matching.service")

    assert logger is logging.getLogger("travel_buddy.matching.service")
