"""
clusterdensity Clustering Module

Hard clusterers and the density model that wraps them.

Key components:
- HardClusterer: Protocol any wrapped clusterer satisfies
- KMeansClusterer: Mini-Batch K-Means over encoded datasets
- FeatureEncoder: Mixed-type datasets to dense feature matrices
- ClusterDensityModel: Per-cluster estimators for density and posterior queries
"""

from clusterdensity.clustering.protocols import HardClusterer, PartitionResult
from clusterdensity.clustering.features import FeatureEncoder
from clusterdensity.clustering.clusterer import KMeansClusterer
from clusterdensity.clustering.density import ClusterDensityModel, FittedState

__all__ = [
    "HardClusterer",
    "PartitionResult",
    "FeatureEncoder",
    "KMeansClusterer",
    "ClusterDensityModel",
    "FittedState",
]
