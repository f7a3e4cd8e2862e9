"""Root test configuration."""

from __future__ import annotations

import logging

import pytest
import structlog


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


class FakeClock:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self, start: float = 1000.0) -> None:
        self.start = start
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    @property
    def elapsed(self) -> float:
        return self.now - self.start


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep HUBACTIONS_* variables, .env files and GITHUB_OUTPUT out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("HUBACTIONS_") or key == "GITHUB_OUTPUT":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)

    from hubactions.config.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
