"""
Shared pytest fixtures for the smp test suite.

This module provides:
- Providers with controllable behaviour (recording, failing, slow)
- A factory for SMP instances bound to a provider
- A guard that restores the ``smp`` logger after tests that configure it
"""

import asyncio
import logging
from typing import Any

import pytest

import smp


class RecordingProvider:
    """Provider backed by a dict that records every lookup and tracks concurrency."""

    def __init__(self, values: dict[str, float], delay: float = 0.0):
        self.values = values
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_value(self, name: str) -> float:
        self.calls.append(name)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            return self.values[name]
        finally:
            self.in_flight -= 1


class FailingProvider:
    """Provider that raises ``error`` for names in ``failing`` and blocks on ``slow`` names."""

    def __init__(
        self,
        error: Exception,
        failing: set[str],
        values: dict[str, float] | None = None,
        slow: set[str] | None = None,
    ):
        self.error = error
        self.failing = failing
        self.values = values or {}
        self.slow = slow or set()
        self.cancelled: list[str] = []

    async def get_value(self, name: str) -> float:
        if name in self.failing:
            raise self.error
        if name in self.slow:
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                self.cancelled.append(name)
                raise
        return self.values[name]


@pytest.fixture
def recording_provider():
    """Factory for RecordingProvider instances."""
    def _factory(values: dict[str, float], delay: float = 0.0) -> RecordingProvider:
        return RecordingProvider(values, delay)
    return _factory


@pytest.fixture
def failing_provider():
    """Factory for FailingProvider instances."""
    def _factory(error: Exception, failing: set[str], **kwargs: Any) -> FailingProvider:
        return FailingProvider(error, failing, **kwargs)
    return _factory


@pytest.fixture
def make_smp():
    """Factory for SMP instances bound to a provider."""
    def _factory(provider: Any = None, **kwargs: Any) -> smp.SMP:
        return smp.create(provider, **kwargs)
    return _factory


@pytest.fixture
def restore_smp_logger():
    """Restore the ``smp`` logger configuration changed by setup_logging()."""
    logger = logging.getLogger("smp")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate

    yield logger

    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate
