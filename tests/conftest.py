"""
Shared pytest fixtures for rangestream tests.
"""

import pytest

from rangestream import StreamSettings, configure_logging, reset_settings


@pytest.fixture
def numbers():
    """0..79 as a list."""
    return list(range(80))


@pytest.fixture
def small():
    return [1, 2, 3, 4]


@pytest.fixture
def quiet_logging():
    """
    Restore the default (silent) logging configuration after a test that
    reconfigures it.
    """
    yield
    reset_settings()
    configure_logging(StreamSettings(), force=True)
