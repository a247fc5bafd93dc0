"""
Capability protocol for hard clusterers.

Any object that can partition a training dataset into a fixed number of
disjoint clusters and assign a cluster index to a new instance can be wrapped
by ClusterDensityModel. It does not need to inherit from anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Protocol, runtime_checkable

import numpy as np

from clusterdensity.ingest import Dataset, Instance


@dataclass
class PartitionResult:
    """
    Hard cluster assignment of a training dataset.

    Labels are cluster indices in [0, n_clusters), one per training instance
    in dataset order.
    """
    n_clusters: int
    labels: np.ndarray

    def __post_init__(self):
        self.labels = np.asarray(self.labels)

    def cluster_sizes(self) -> Dict[int, int]:
        """Instances per cluster, including empty clusters."""
        counts = np.bincount(self.labels.astype(int), minlength=self.n_clusters)
        return {c: int(n) for c, n in enumerate(counts)}

    def get_cluster_members(self, cluster_id: int) -> List[int]:
        """Get dataset row indices for a specific cluster."""
        return [int(i) for i in np.flatnonzero(self.labels == cluster_id)]

    def summary(self) -> Dict:
        return {
            "n_instances": int(len(self.labels)),
            "n_clusters": self.n_clusters,
            "cluster_sizes": self.cluster_sizes(),
        }


@runtime_checkable
class HardClusterer(Protocol):
    """Protocol for clusterers that give each instance exactly one cluster."""

    def partition(self, dataset: Dataset) -> PartitionResult:
        """Fit on the dataset and return the cluster index of every instance."""
        ...

    def assign_cluster(self, instance: Instance) -> int:
        """Cluster index for a new instance, consistent with partition()."""
        ...
