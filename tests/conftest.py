import pytest

from strategic_logger.core import StrategicLogger


@pytest.fixture(autouse=True)
def reset_default_logger():
    """Reset the default instance before and after each test."""
    StrategicLogger.reset()
    yield
    StrategicLogger.reset()


@pytest.fixture
def logger():
    """A fresh, explicitly constructed logger, closed after the test."""
    log = StrategicLogger()
    yield log
    log.close()
