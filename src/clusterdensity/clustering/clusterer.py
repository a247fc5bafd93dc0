"""
K-means hard clusterer.

Partitions mixed symbolic/numeric datasets with Mini-Batch K-Means after
encoding them through FeatureEncoder. Satisfies the HardClusterer protocol,
so it can be wrapped by ClusterDensityModel.
"""

from __future__ import annotations

from typing import Optional
import logging

import numpy as np
from sklearn.cluster import MiniBatchKMeans

from clusterdensity.clustering.features import FeatureEncoder
from clusterdensity.clustering.protocols import PartitionResult
from clusterdensity.errors import ModelNotFittedError
from clusterdensity.ingest import Dataset, Instance

logger = logging.getLogger(__name__)


class KMeansClusterer:
    """
    K-means clusterer built on scikit-learn's MiniBatchKMeans.

    Mini-Batch K-Means is faster and uses less memory than full K-Means.
    A fixed random_state makes partitions reproducible.

    Example:
        >>> clusterer = KMeansClusterer(n_clusters=3)
        >>> result = clusterer.partition(dataset)
        >>> clusterer.assign_cluster(dataset.instance(0))
    """

    def __init__(
        self,
        n_clusters: int = 2,
        batch_size: int = 100,
        max_iter: int = 100,
        n_init: int = 3,
        random_state: Optional[int] = 42,
        normalize: bool = True,
    ):
        """
        Initialize the k-means clusterer.

        Args:
            n_clusters: Number of clusters (k)
            batch_size: Mini-batch size
            max_iter: Maximum iterations
            n_init: Number of random initializations
            random_state: Seed for reproducible partitions
            normalize: Standardize encoded features before clustering
        """
        if n_clusters < 1:
            raise ValueError(f"n_clusters must be positive, got {n_clusters}")

        self.n_clusters = n_clusters
        self.batch_size = batch_size
        self.max_iter = max_iter
        self.n_init = n_init
        self.random_state = random_state
        self.normalize = normalize

        self._encoder: Optional[FeatureEncoder] = None
        self._clusterer: Optional[MiniBatchKMeans] = None

    def partition(self, dataset: Dataset) -> PartitionResult:
        """
        Fit k-means to the dataset and return the cluster of every instance.

        Args:
            dataset: Training dataset with at least n_clusters instances

        Returns:
            PartitionResult with labels 0 to k-1
        """
        if len(dataset) < self.n_clusters:
            raise ValueError(
                f"Cannot form {self.n_clusters} clusters from {len(dataset)} instances"
            )

        logger.info(
            f"Running MiniBatchKMeans with n_clusters={self.n_clusters} "
            f"on {len(dataset)} instances"
        )

        encoder = FeatureEncoder(normalize=self.normalize)
        X = encoder.fit_transform(dataset)
        clusterer = MiniBatchKMeans(
            n_clusters=self.n_clusters,
            batch_size=self.batch_size,
            max_iter=self.max_iter,
            n_init=self.n_init,
            random_state=self.random_state,
        )
        labels = clusterer.fit_predict(X)

        # Encoder and model are replaced together, only after both have fitted
        self._encoder = encoder
        self._clusterer = clusterer

        result = PartitionResult(n_clusters=self.n_clusters, labels=labels)
        logger.info(f"K-means complete: cluster sizes {result.cluster_sizes()}")
        return result

    def assign_cluster(self, instance: Instance) -> int:
        """
        Assign a new instance to its nearest centroid.

        Args:
            instance: Instance in the training dataset's layout

        Returns:
            Cluster index
        """
        if self._clusterer is None:
            raise ModelNotFittedError("KMeansClusterer.partition() has not been called")
        x = self._encoder.transform_values(instance.values)
        return int(self._clusterer.predict(x)[0])

    @property
    def cluster_centers(self) -> np.ndarray:
        """Get cluster centroids in encoded feature space."""
        if self._clusterer is None:
            raise ModelNotFittedError("KMeansClusterer.partition() has not been called")
        return self._clusterer.cluster_centers_

    def __str__(self) -> str:
        return (
            f"KMeansClusterer(n_clusters={self.n_clusters}, "
            f"normalize={self.normalize}, random_state={self.random_state})"
        )
