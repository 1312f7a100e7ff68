"""Shared pytest fixtures for all tests."""

import logging
from datetime import date, timedelta

import pytest

from config import Config
from services.base import Services


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary directory.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "cashpath",
        log_level="DEBUG",
        log_dir=tmp_path / "cashpath" / "logs",
        recurrence_cache_enabled=True,
        default_window_days=30,
    )


@pytest.fixture
def services(test_config):
    """Create a Services container for testing.

    Args:
        test_config: Test configuration fixture.

    Returns:
        Services: Services container for testing.
    """
    return Services(test_config)


@pytest.fixture
def day():
    """Return a helper mapping a day offset to a date (day 0 is 2024-01-01)."""
    start = date(2024, 1, 1)

    def _day(offset: int) -> date:
        return start + timedelta(days=offset)

    return _day


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers added by setup_logging so tests don't share them."""
    yield
    logger = logging.getLogger("cashpath")
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
