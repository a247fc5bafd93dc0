"""
clusterdensity Configuration Management

Centralized defaults for density estimation, overridable from the environment.
"""

from dataclasses import dataclass
import math
import os

from clusterdensity.errors import ConfigurationError


DEFAULT_MIN_STD_DEV = 1e-6


@dataclass
class DensityConfig:
    """Settings shared by cluster density models."""

    # Floor applied to every fitted standard deviation
    min_std_dev: float = DEFAULT_MIN_STD_DEV

    # Decimal places used in human-readable reports
    report_precision: int = 4

    def validate(self) -> None:
        """Raise ConfigurationError if any setting is unusable."""
        if not math.isfinite(self.min_std_dev) or self.min_std_dev <= 0:
            raise ConfigurationError(
                f"min_std_dev must be a positive finite number, got {self.min_std_dev}"
            )
        if self.report_precision < 0:
            raise ConfigurationError(
                f"report_precision must be non-negative, got {self.report_precision}"
            )

    @classmethod
    def from_env(cls) -> "DensityConfig":
        """Create config from environment variables."""
        config = cls()

        if min_std_dev := os.environ.get("CLUSTERDENSITY_MIN_STD_DEV"):
            config.min_std_dev = float(min_std_dev)

        if precision := os.environ.get("CLUSTERDENSITY_REPORT_PRECISION"):
            config.report_precision = int(precision)

        config.validate()
        return config


# Default config instance
config = DensityConfig()
