"""
Gaussian parameter estimation from sufficient statistics.

Numeric attributes are summarized per cluster by a running sum and sum of
squares; finalizing yields the maximum-likelihood mean and standard deviation.
The standard deviation is floored so a cluster whose values are all equal
does not produce a zero-width Gaussian.
"""

from __future__ import annotations

from dataclasses import dataclass
import math

NORM_CONST = math.sqrt(2 * math.pi)
LOG_NORM_CONST = math.log(NORM_CONST)


def normal_density(x: float, mean: float, std_dev: float) -> float:
    """Density of N(mean, std_dev^2) at x."""
    diff = x - mean
    return (1.0 / (NORM_CONST * std_dev)) * math.exp(-(diff * diff) / (2.0 * std_dev * std_dev))


def log_normal_density(x: float, mean: float, std_dev: float) -> float:
    """Natural log of normal_density, finite for any finite x."""
    diff = x - mean
    return -LOG_NORM_CONST - math.log(std_dev) - (diff * diff) / (2.0 * std_dev * std_dev)


@dataclass(frozen=True)
class GaussianParams:
    """Fitted mean and standard deviation of one numeric attribute in one cluster."""

    mean: float
    std_dev: float

    def density(self, x: float) -> float:
        return normal_density(x, self.mean, self.std_dev)

    def log_density(self, x: float) -> float:
        return log_normal_density(x, self.mean, self.std_dev)

    def to_string(self, precision: int = 4) -> str:
        return (
            f"Normal Distribution. Mean = {self.mean:.{precision}f} "
            f"StdDev = {self.std_dev:.{precision}f}"
        )

    def __str__(self) -> str:
        return self.to_string()


@dataclass
class GaussianAccumulator:
    """
    Running sum and sum of squares for one numeric attribute.

    Example:
        >>> acc = GaussianAccumulator()
        >>> for v in (1.0, 2.0, 3.0):
        ...     acc.add(v)
        >>> acc.finalize(count=3, min_std_dev=1e-6).mean
        2.0
    """

    total: float = 0.0
    total_sq: float = 0.0

    def add(self, value: float) -> None:
        self.total += value
        self.total_sq += value * value

    def finalize(self, count: float, min_std_dev: float) -> GaussianParams:
        """
        Compute the mean and floored standard deviation.

        Args:
            count: Number of instances the statistics are divided by (> 0)
            min_std_dev: Lower bound for the standard deviation

        Returns:
            GaussianParams with std_dev >= min_std_dev
        """
        if count <= 0:
            raise ValueError(f"Cannot finalize a Gaussian over count={count}")

        mean = self.total / count
        variance = (self.total_sq - self.total * self.total / count) / count

        # Cancellation can leave a tiny negative variance
        std_dev = math.sqrt(max(variance, 0.0)) if not math.isnan(variance) else math.nan
        if not math.isfinite(std_dev) or std_dev <= min_std_dev:
            std_dev = min_std_dev

        return GaussianParams(mean=mean, std_dev=std_dev)
