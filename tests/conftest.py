"""Shared pytest fixtures."""

import pytest

from riskgate.common.config import reset_config
from riskgate.storage.memory import InMemoryKeyValueStore


class FakeClock:
    """Manually advanced epoch-seconds clock for TTL tests."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture(autouse=True)
def _fresh_config():
    reset_config()
    yield
    reset_config()
