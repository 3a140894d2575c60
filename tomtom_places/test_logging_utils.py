"""
Tests for logging configuration, dood!
"""

import logging
from logging.handlers import TimedRotatingFileHandler

import pytest

from tomtom_places.logging_utils import configureLogger, getLogLevelByStr, initLogging


@pytest.mark.parametrize(
    "levelStr, expected",
    [
        ("debug", logging.DEBUG),
        ("INFO", logging.INFO),
        ("Warning", logging.WARNING),
        ("ERROR", logging.ERROR),
    ],
)
def test_get_log_level_by_str(levelStr, expected):
    """Test level names are case insensitive"""
    assert getLogLevelByStr(levelStr) == expected


def test_get_log_level_by_str_invalid():
    """Test an unknown level returns the default"""
    assert getLogLevelByStr("chatty") is None
    assert getLogLevelByStr("chatty", logging.INFO) == logging.INFO


def test_configure_logger_console():
    """Test console handler, levels and propagation"""
    localLogger = logging.getLogger("tomtom_places.tests.console")

    configureLogger(localLogger, {"level": "DEBUG", "console": True, "console-level": "ERROR", "propagate": False})

    assert localLogger.level == logging.DEBUG
    assert localLogger.propagate is False
    assert len(localLogger.handlers) == 1
    assert localLogger.handlers[0].level == logging.ERROR

    # Reconfiguring replaces the handlers
    configureLogger(localLogger, {"console": True})
    assert len(localLogger.handlers) == 1
    assert localLogger.handlers[0].level == logging.DEBUG

    configureLogger(localLogger, {})
    assert localLogger.handlers == []


def test_configure_logger_file(tmp_path):
    """Test file handlers, with and without rotation"""
    localLogger = logging.getLogger("tomtom_places.tests.file")
    logFile = tmp_path / "logs" / "places.log"

    configureLogger(localLogger, {"level": "INFO", "file": str(logFile), "file-level": "WARNING", "propagate": False})
    localLogger.warning("written")
    localLogger.info("filtered")
    for handler in localLogger.handlers:
        handler.flush()

    content = logFile.read_text()
    assert "written" in content
    assert "filtered" not in content

    configureLogger(localLogger, {"file": str(logFile), "rotate": True})
    assert isinstance(localLogger.handlers[0], TimedRotatingFileHandler)

    configureLogger(localLogger, {})


def test_init_logging():
    """Test root and per-logger configuration, third-party loggers are quieted"""
    initLogging(
        {
            "level": "DEBUG",
            "logger": {"tomtom_places.client": {"level": "ERROR"}},
        }
    )

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
    assert logging.getLogger("tomtom_places.client").level == logging.ERROR

    logging.getLogger("tomtom_places.client").setLevel(logging.NOTSET)
