"""
clusterdensity - Probabilistic overlay for hard clustering

Wraps any clusterer that assigns each point to exactly one cluster and fits
per-cluster statistical models, turning it into a density estimator with
posterior cluster probabilities.

Modules:
- ingest: Attribute schemas, instances, datasets and loading
- estimators: Smoothed discrete distributions and Gaussians
- clustering: Hard clusterers and the cluster density model
- config: Defaults and environment overrides
- errors: Exception taxonomy
"""

__version__ = "0.1.0"

# Re-export key classes for convenience
from clusterdensity.ingest import (
    Attribute,
    AttributeKind,
    DatasetSchema,
    Dataset,
    Instance,
    DatasetLoader,
    load_dataset,
)
from clusterdensity.estimators import (
    DiscreteFrequencyEstimator,
    GaussianAccumulator,
    GaussianParams,
    normal_density,
)
from clusterdensity.clustering import (
    HardClusterer,
    PartitionResult,
    FeatureEncoder,
    KMeansClusterer,
    ClusterDensityModel,
)
from clusterdensity.config import DensityConfig
from clusterdensity.errors import (
    DensityModelError,
    ConfigurationError,
    ClustererNotSetError,
    SchemaMismatchError,
    SymbolOutOfRangeError,
    DegenerateEstimationError,
    InvalidPartitionError,
    ModelNotFittedError,
)

__all__ = [
    # Version
    "__version__",
    # Ingest
    "Attribute",
    "AttributeKind",
    "DatasetSchema",
    "Dataset",
    "Instance",
    "DatasetLoader",
    "load_dataset",
    # Estimators
    "DiscreteFrequencyEstimator",
    "GaussianAccumulator",
    "GaussianParams",
    "normal_density",
    # Clustering
    "HardClusterer",
    "PartitionResult",
    "FeatureEncoder",
    "KMeansClusterer",
    "ClusterDensityModel",
    # Config
    "DensityConfig",
    # Errors
    "DensityModelError",
    "ConfigurationError",
    "ClustererNotSetError",
    "SchemaMismatchError",
    "SymbolOutOfRangeError",
    "DegenerateEstimationError",
    "InvalidPartitionError",
    "ModelNotFittedError",
]
