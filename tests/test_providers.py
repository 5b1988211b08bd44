"""Tests for the stock variable value providers and cache-only computes."""

import pytest
from pydantic import ValidationError

import smp
from smp.providers import CachedValueProvider, VariableValueProvider


class TestMapVariableValueProvider:
    """Test the mapping-backed provider."""

    def test_values_coerced_to_float(self):
        """Test integer values are stored as floats."""
        provider = smp.MapVariableValueProvider(values={"x": 5})
        assert provider.values == {"x": 5.0}
        assert isinstance(provider.values["x"], float)

    def test_rejects_non_numeric_values(self):
        """Test validation of table values."""
        with pytest.raises(ValidationError):
            smp.MapVariableValueProvider(values={"x": "five"})

    def test_frozen(self):
        """Test the table cannot be replaced."""
        provider = smp.MapVariableValueProvider(values={"x": 1.0})
        with pytest.raises(ValidationError):
            provider.values = {}

    @pytest.mark.asyncio
    async def test_get_value(self):
        """Test lookups read the table."""
        provider = smp.MapVariableValueProvider(values={"x": 1.5})
        assert await provider.get_value("x") == 1.5

    @pytest.mark.asyncio
    async def test_missing_name(self):
        """Test absent names raise KeyError."""
        provider = smp.MapVariableValueProvider(values={})
        with pytest.raises(KeyError):
            await provider.get_value("x")

    def test_from_yaml(self, tmp_path):
        """Test loading the table from a YAML file."""
        path = tmp_path / "variables.yaml"
        path.write_text("x: 5\nrate: 0.25\n")

        provider = smp.MapVariableValueProvider.from_yaml(path)

        assert provider.values == {"x": 5.0, "rate": 0.25}

    def test_from_empty_yaml(self, tmp_path):
        """Test an empty file gives an empty table."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert smp.MapVariableValueProvider.from_yaml(path).values == {}

    def test_protocols(self):
        """Test the provider satisfies both provider protocols."""
        provider = smp.MapVariableValueProvider()
        assert isinstance(provider, VariableValueProvider)
        assert isinstance(provider, CachedValueProvider)


class TestNoOpVariableValueProvider:
    """Test the default provider."""

    @pytest.mark.asyncio
    async def test_rejects_lookup(self):
        """Test every lookup fails."""
        with pytest.raises(smp.UnsupportedVariableError):
            await smp.NoOpVariableValueProvider().get_value("x")

    def test_holds_no_cached_values(self):
        """Test there is nothing cached."""
        assert smp.NoOpVariableValueProvider().get_cached_value("x") is None


class TestComputeCacheOnly:
    """Test computing with cached values and a fallback."""

    def test_uses_cached_values(self, make_smp):
        """Test values held by the provider are used."""
        calc = make_smp(smp.MapVariableValueProvider(values={"x": 4.0}))
        assert calc.compute_cache_only("x*2") == 8.0

    def test_fallback_for_missing_values(self, make_smp):
        """Test names the provider does not hold take the fallback."""
        calc = make_smp(smp.MapVariableValueProvider(values={"x": 4.0}))
        assert calc.compute_cache_only("x+y", fallback=10.0) == 14.0

    def test_default_fallback_is_zero(self):
        """Test the default fallback with the default instance."""
        assert smp.compute_cache_only("x+1") == 1.0

    def test_instance_fallback(self, make_smp):
        """Test the instance-level default fallback."""
        calc = make_smp(cache_fallback=2.0)
        assert calc.parse("x*x").compute_cache_only() == 4.0

    def test_provider_without_cache(self, make_smp, recording_provider):
        """Test a provider with no cache is never awaited."""
        provider = recording_provider({"x": 100.0})
        calc = make_smp(provider)

        assert calc.compute_cache_only("x+1", fallback=1.0) == 2.0
        assert provider.calls == []
