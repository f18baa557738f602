# tests/conftest.py
import pytest

from patternbus.core import log
from patternbus.core import metrics


@pytest.fixture(scope="session", autouse=True)
def _bootstrap_logging():
    # reads LOG_LEVEL / LOG_JSON / .env if available
    log.setup()
    yield
    metrics.stop_exporter()


@pytest.fixture(autouse=True)
def _fresh_metrics():
    metrics.reset()
    yield


class Recorder:
    """Callable that remembers every call's positional args."""
    def __init__(self, name="rec"):
        self.__name__ = name
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)


@pytest.fixture
def rec():
    return Recorder
