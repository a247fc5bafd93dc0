"""
clusterdensity Estimators Module

Per-cluster, per-attribute statistical estimators.

Key structures:
- DiscreteFrequencyEstimator: Add-one smoothed distribution for symbolic attributes
- GaussianAccumulator / GaussianParams: Normal fit for numeric attributes
"""

from clusterdensity.estimators.discrete import DiscreteFrequencyEstimator
from clusterdensity.estimators.gaussian import (
    GaussianAccumulator,
    GaussianParams,
    normal_density,
    log_normal_density,
)

__all__ = [
    "DiscreteFrequencyEstimator",
    "GaussianAccumulator",
    "GaussianParams",
    "normal_density",
    "log_normal_density",
]
