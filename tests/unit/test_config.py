"""
Unit tests for clusterdensity configuration.
"""

import pytest

from clusterdensity.config import DEFAULT_MIN_STD_DEV, DensityConfig
from clusterdensity.errors import ConfigurationError


class TestDensityConfig:
    """Tests for DensityConfig."""

    def test_defaults(self):
        """Test default values."""
        config = DensityConfig()
        assert config.min_std_dev == DEFAULT_MIN_STD_DEV == 1e-6
        assert config.report_precision == 4

    def test_from_env(self, monkeypatch):
        """Test environment overrides."""
        monkeypatch.setenv("CLUSTERDENSITY_MIN_STD_DEV", "0.001")
        monkeypatch.setenv("CLUSTERDENSITY_REPORT_PRECISION", "2")

        config = DensityConfig.from_env()
        assert config.min_std_dev == 0.001
        assert config.report_precision == 2

    def test_from_env_without_overrides(self, monkeypatch):
        """Test that unset variables keep the defaults."""
        monkeypatch.delenv("CLUSTERDENSITY_MIN_STD_DEV", raising=False)
        monkeypatch.delenv("CLUSTERDENSITY_REPORT_PRECISION", raising=False)
        assert DensityConfig.from_env() == DensityConfig()

    def test_from_env_invalid(self, monkeypatch):
        """Test that invalid environment values are rejected."""
        monkeypatch.setenv("CLUSTERDENSITY_MIN_STD_DEV", "-1")
        with pytest.raises(ConfigurationError):
            DensityConfig.from_env()

    def test_validate_precision(self):
        """Test that report precision must be non-negative."""
        with pytest.raises(ConfigurationError):
            DensityConfig(report_precision=-1).validate()
