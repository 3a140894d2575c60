"""
Pytest configuration and common fixtures for tomtom_places tests.

Lives at the repository root so it applies to the test modules beside the code
as well as to tests/.

All fixtures follow camelCase naming convention.
"""

import logging

import pytest

from tests.utils import FakeTomTomApi

# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture
def noApiKeyEnv(monkeypatch):
    """Remove TOMTOM_API_KEY from the process environment, restored after the test."""
    monkeypatch.setenv("TOMTOM_API_KEY", "")
    monkeypatch.delenv("TOMTOM_API_KEY")


# ============================================================================
# Fake API Fixtures
# ============================================================================


@pytest.fixture
def fakeApi() -> FakeTomTomApi:
    """Fake API always answering with VALID_RESPONSE."""
    return FakeTomTomApi()


@pytest.fixture(autouse=True)
def resetLogging():
    """Restore root logger level and handlers changed by initLogging()."""
    rootLogger = logging.getLogger()
    level = rootLogger.level
    handlers = rootLogger.handlers[:]
    yield
    for handler in rootLogger.handlers[:]:
        if handler not in handlers:
            rootLogger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in rootLogger.handlers:
            rootLogger.addHandler(handler)
    rootLogger.setLevel(level)
