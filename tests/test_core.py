"""Tests for configuration and logging."""

import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
from pydantic import ValidationError

import smp
from smp import instance
from smp.core.config import Settings
from smp.core.logging import StructuredFormatter, get_context_logger, setup_logging


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Test default values."""
        for name in ("SMP_LOG_LEVEL", "SMP_LOG_FORMAT", "SMP_MAX_CONCURRENT_LOOKUPS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.LOG_LEVEL == "WARNING"
        assert settings.LOG_FORMAT == "text"
        assert settings.MAX_CONCURRENT_LOOKUPS is None
        assert settings.CACHE_FALLBACK == 0.0

    def test_environment_prefix(self, monkeypatch):
        """Test values are read from SMP_ variables."""
        monkeypatch.setenv("SMP_MAX_CONCURRENT_LOOKUPS", "4")
        monkeypatch.setenv("SMP_CACHE_FALLBACK", "1.5")

        settings = Settings(_env_file=None)

        assert settings.MAX_CONCURRENT_LOOKUPS == 4
        assert settings.CACHE_FALLBACK == 1.5

    def test_concurrency_limit_must_be_positive(self, monkeypatch):
        """Test validation of the lookup bound."""
        monkeypatch.setenv("SMP_MAX_CONCURRENT_LOOKUPS", "0")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_explicit_arguments_override_settings(self, make_smp):
        """Test create() arguments win over configuration."""
        calc = make_smp(max_concurrent_lookups=3, cache_fallback=7.0)
        assert calc.max_concurrent_lookups == 3
        assert calc.cache_fallback == 7.0

    @pytest.mark.parametrize("limit", [0, -1])
    def test_non_positive_concurrency_limit_rejected(self, make_smp, limit):
        """Test create() validates the lookup bound up front."""
        with pytest.raises(ValueError, match="must be positive"):
            make_smp(smp.MapVariableValueProvider(values={"x": 1.0}), max_concurrent_lookups=limit)

    def test_default_instance_is_shared(self):
        """Test the default instance is created once."""
        assert smp.default_instance() is smp.default_instance()
        assert isinstance(smp.default_instance().provider, smp.NoOpVariableValueProvider)

    def test_default_instance_built_once_across_threads(self, monkeypatch):
        """Test racing threads all receive the same default instance."""
        monkeypatch.setattr(instance, "_default_instance", None)
        built = []
        real_create = instance.create

        def slow_create():
            built.append(real_create())
            time.sleep(0.01)
            return built[-1]

        monkeypatch.setattr(instance, "create", slow_create)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: instance.default_instance(), range(8)))

        assert len(built) == 1
        assert all(result is built[0] for result in results)


class TestLogging:
    """Test log formatting and setup."""

    def test_structured_formatter_includes_extra_data(self):
        """Test JSON output with context fields."""
        record = logging.LogRecord("smp.resolver", logging.WARNING, __file__, 1, "Lookup failed", None, None)
        record.extra_data = {"variable": "x"}

        data = json.loads(StructuredFormatter().format(record))

        assert data["level"] == "WARNING"
        assert data["logger"] == "smp.resolver"
        assert data["message"] == "Lookup failed"
        assert data["variable"] == "x"

    def test_context_logger_merges_context(self, caplog):
        """Test permanent and per-call context are combined."""
        logger = get_context_logger("tests.context", component="resolver")

        with caplog.at_level(logging.INFO, logger="tests.context"):
            logger.info("Resolved", extra_data={"lookups": 2})

        assert caplog.records[0].extra_data == {"component": "resolver", "lookups": 2}

    def test_setup_logging(self, restore_smp_logger):
        """Test handlers are installed on the smp logger."""
        setup_logging(Settings(_env_file=None, LOG_FORMAT="json"), level="debug")

        assert restore_smp_logger.level == logging.DEBUG
        assert len(restore_smp_logger.handlers) == 1
        assert isinstance(restore_smp_logger.handlers[0].formatter, StructuredFormatter)

    def test_setup_logging_is_idempotent(self, restore_smp_logger):
        """Test repeated setup does not stack handlers."""
        settings = Settings(_env_file=None)
        setup_logging(settings)
        setup_logging(settings)

        assert len(restore_smp_logger.handlers) == 1
