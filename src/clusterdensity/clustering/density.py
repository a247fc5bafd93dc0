"""
Cluster Density Model - soft clustering on top of any hard clusterer.

Wraps a HardClusterer and fits, within each cluster it produces, an add-one
smoothed discrete distribution per symbolic attribute and a Gaussian per
numeric attribute. Attributes are treated as independent given the cluster,
so the model answers two questions for a new instance:

- density:      sum_c P(c) * prod_a P(x_a | c)
- distribution: P(c | x), the per-cluster terms normalized to sum to 1

Missing attribute values contribute no factor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union
import logging
import math

import numpy as np

from clusterdensity.clustering.protocols import HardClusterer, PartitionResult
from clusterdensity.config import DensityConfig, config as default_config
from clusterdensity.errors import (
    ClustererNotSetError,
    ConfigurationError,
    DegenerateEstimationError,
    InvalidPartitionError,
    ModelNotFittedError,
    SchemaMismatchError,
)
from clusterdensity.estimators import (
    DiscreteFrequencyEstimator,
    GaussianAccumulator,
    GaussianParams,
)
from clusterdensity.ingest import Dataset, DatasetSchema, Instance

logger = logging.getLogger(__name__)

InstanceLike = Union[Instance, Sequence[Any], np.ndarray]


@dataclass(frozen=True)
class FittedState:
    """Everything produced by one fit() call. Never mutated after creation."""
    schema: DatasetSchema
    clusterer: HardClusterer
    priors: np.ndarray
    cluster_sizes: np.ndarray
    discrete_estimators: List[List[Optional[DiscreteFrequencyEstimator]]]
    gaussian_params: List[List[Optional[GaussianParams]]]

    @property
    def num_clusters(self) -> int:
        return len(self.priors)


class ClusterDensityModel:
    """
    Turn a hard clusterer into a density and posterior estimator.

    The clusterer is injected, not subclassed, and is only referenced by the
    model: it is reused unchanged for hard assignments after fitting.

    Once fit() returns, the fitted state is read-only, so inference may be
    called concurrently from several threads. fit() itself must not run
    concurrently with other calls on the same model.

    Example:
        >>> model = ClusterDensityModel(KMeansClusterer(n_clusters=3))
        >>> model.fit(dataset)
        >>> model.distribution_for_instance(dataset.instance(0))
        array([0.98, 0.01, 0.01])
        >>> print(model.report())
    """

    def __init__(
        self,
        clusterer: Optional[HardClusterer] = None,
        min_std_dev: Optional[float] = None,
        config: Optional[DensityConfig] = None,
    ):
        """
        Initialize the model.

        Args:
            clusterer: Hard clusterer to wrap (may also be passed to fit)
            min_std_dev: Floor for fitted standard deviations,
                        overrides config.min_std_dev
            config: Settings (defaults to clusterdensity.config.config)
        """
        self.config = config or default_config
        self.min_std_dev = self.config.min_std_dev if min_std_dev is None else min_std_dev
        if not math.isfinite(self.min_std_dev) or self.min_std_dev <= 0:
            raise ConfigurationError(
                f"min_std_dev must be a positive finite number, got {self.min_std_dev}"
            )

        self.clusterer = clusterer
        self._state: Optional[FittedState] = None

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def fit(
        self,
        dataset: Dataset,
        clusterer: Optional[HardClusterer] = None,
    ) -> ClusterDensityModel:
        """
        Cluster the training data and fit per-cluster estimators.

        The previous fitted state is kept if anything fails.

        Args:
            dataset: Non-empty training dataset
            clusterer: Clusterer to wrap; defaults to the one given at construction

        Returns:
            Self (for chaining)
        """
        clusterer = clusterer if clusterer is not None else self.clusterer
        if clusterer is None:
            raise ClustererNotSetError("No clusterer has been set")
        if len(dataset) == 0:
            raise DegenerateEstimationError("Cannot fit a density model on an empty dataset")

        logger.info(f"Fitting density model on {dataset} using {clusterer}")

        partition = clusterer.partition(dataset)
        labels = self._check_partition(partition, len(dataset))
        n_clusters = partition.n_clusters
        schema = dataset.schema
        symbolic = [attr.is_symbolic for attr in schema]

        discrete: List[List[Optional[DiscreteFrequencyEstimator]]] = []
        accumulators: List[List[Optional[GaussianAccumulator]]] = []
        for _ in range(n_clusters):
            discrete.append([
                DiscreteFrequencyEstimator(num_symbols=attr.num_values, name=attr.name)
                if attr.is_symbolic else None
                for attr in schema
            ])
            accumulators.append([
                None if attr.is_symbolic else GaussianAccumulator()
                for attr in schema
            ])
        counts = np.zeros(n_clusters)

        # Single pass over the training instances
        for row, cluster in zip(dataset.values, labels):
            counts[cluster] += 1
            for j, value in enumerate(row):
                if math.isnan(value):
                    continue
                if symbolic[j]:
                    discrete[cluster][j].add_value(int(value), 1.0)
                else:
                    accumulators[cluster][j].add(float(value))

        gaussians: List[List[Optional[GaussianParams]]] = []
        for c in range(n_clusters):
            if counts[c] > 0:
                gaussians.append([
                    acc.finalize(counts[c], self.min_std_dev) if acc is not None else None
                    for acc in accumulators[c]
                ])
            else:
                logger.warning(f"Cluster {c} received no training instances")
                gaussians.append([None] * len(schema))

        total = counts.sum()
        if total <= 0:
            raise DegenerateEstimationError("No training instances were assigned to any cluster")
        priors = counts / total

        self._state = FittedState(
            schema=schema,
            clusterer=clusterer,
            priors=priors,
            cluster_sizes=counts,
            discrete_estimators=discrete,
            gaussian_params=gaussians,
        )
        self.clusterer = clusterer

        logger.info(
            f"Density model fitted: {n_clusters} clusters, "
            f"sizes={[int(n) for n in counts]}"
        )
        for c in range(n_clusters):
            logger.debug(f"Cluster {c}: prior={priors[c]:.4f}")
        return self

    @staticmethod
    def _check_partition(partition: PartitionResult, n_instances: int) -> np.ndarray:
        if partition.n_clusters < 1:
            raise InvalidPartitionError(
                f"Clusterer reported {partition.n_clusters} clusters"
            )
        labels = np.asarray(partition.labels)
        if labels.shape != (n_instances,):
            raise InvalidPartitionError(
                f"Clusterer returned {labels.size} labels for {n_instances} instances"
            )
        if labels.size and not np.all(np.mod(labels, 1) == 0):
            raise InvalidPartitionError("Clusterer returned non-integer labels")
        labels = labels.astype(int)
        if labels.size and (labels.min() < 0 or labels.max() >= partition.n_clusters):
            raise InvalidPartitionError(
                f"Cluster labels must lie in [0, {partition.n_clusters}), "
                f"got range [{labels.min()}, {labels.max()}]"
            )
        return labels

    # ------------------------------------------------------------------
    # Inference
    # ------------------------------------------------------------------

    def density_for_instance(self, instance: InstanceLike) -> float:
        """
        Mixture density of an instance: sum over clusters of prior times likelihood.

        Args:
            instance: Instance, or a raw row of labels / numbers / None

        Returns:
            Non-negative density (unnormalized over the attribute space)
        """
        state = self._require_state()
        return float(np.exp(self._log_weights(self._values(instance, state), state)).sum())

    def log_density_for_instance(self, instance: InstanceLike) -> float:
        """Natural log of density_for_instance, stable when the density underflows."""
        state = self._require_state()
        log_weights = self._log_weights(self._values(instance, state), state)
        peak = log_weights.max()
        if not math.isfinite(peak):
            return float(peak)
        return float(peak + math.log(np.exp(log_weights - peak).sum()))

    def distribution_for_instance(self, instance: InstanceLike) -> np.ndarray:
        """
        Posterior probability of each cluster given the instance.

        If every cluster weight underflows to zero the result is uniform over
        the clusters with nonzero prior.

        Args:
            instance: Instance, or a raw row of labels / numbers / None

        Returns:
            Array of length num_clusters summing to 1
        """
        state = self._require_state()
        log_weights = self._log_weights(self._values(instance, state), state)
        weights = np.exp(log_weights)
        total = weights.sum()

        if total > 0 and math.isfinite(total):
            return weights / total

        peak = log_weights.max()
        if total > 0 and math.isfinite(peak):
            # Linear weights overflowed
            shifted = np.exp(log_weights - peak)
            return shifted / shifted.sum()

        logger.warning("All cluster weights underflowed; falling back to uniform over non-empty clusters")
        nonempty = state.priors > 0
        return nonempty / nonempty.sum()

    def distribution_for_dataset(self, dataset: Dataset) -> np.ndarray:
        """Posterior for every instance, shape (len(dataset), num_clusters)."""
        state = self._require_state()
        if dataset.schema != state.schema:
            raise SchemaMismatchError("Dataset schema differs from the fitted schema")
        if len(dataset) == 0:
            return np.empty((0, state.num_clusters))
        return np.vstack([self.distribution_for_instance(inst) for inst in dataset])

    def cluster_instance(self, instance: InstanceLike) -> int:
        """Most probable cluster under the fitted posterior."""
        return int(np.argmax(self.distribution_for_instance(instance)))

    def assign_cluster(self, instance: InstanceLike) -> int:
        """Hard assignment from the wrapped clusterer, as made during training."""
        state = self._require_state()
        values = self._values(instance, state)
        return int(state.clusterer.assign_cluster(Instance(values=values, schema=state.schema)))

    def _log_weights(self, values: np.ndarray, state: FittedState) -> np.ndarray:
        """log(prior * likelihood) per cluster; -inf for clusters with zero prior."""
        present = [j for j, v in enumerate(values) if not math.isnan(v)]
        log_weights = np.full(state.num_clusters, -np.inf)

        for c in range(state.num_clusters):
            prior = state.priors[c]
            if prior <= 0:
                continue
            log_likelihood = 0.0
            for j in present:
                estimator = state.discrete_estimators[c][j]
                if estimator is not None:
                    log_likelihood += math.log(estimator.get_probability(int(values[j])))
                else:
                    log_likelihood += state.gaussian_params[c][j].log_density(values[j])
            log_weights[c] = log_likelihood + math.log(prior)

        return log_weights

    def _values(self, instance: InstanceLike, state: FittedState) -> np.ndarray:
        """Validate an instance against the fitted schema and return its values."""
        if not isinstance(instance, Instance):
            return state.schema.encode(list(instance))

        if instance.schema is not None and instance.schema != state.schema:
            raise SchemaMismatchError("Instance schema differs from the fitted schema")
        if len(instance) != len(state.schema):
            raise SchemaMismatchError(
                f"Instance has {len(instance)} values but the model was fitted on "
                f"{len(state.schema)} attributes"
            )
        state.schema.check_matrix(instance.values.reshape(1, -1))
        return instance.values

    def _require_state(self) -> FittedState:
        state = self._state
        if state is None:
            raise ModelNotFittedError("Model has not been fitted; call fit() first")
        return state

    # ------------------------------------------------------------------
    # Fitted parameters
    # ------------------------------------------------------------------

    @property
    def is_fitted(self) -> bool:
        return self._state is not None

    @property
    def num_clusters(self) -> int:
        return self._require_state().num_clusters

    def number_of_clusters(self) -> int:
        """Number of clusters produced by the wrapped clusterer's last partition."""
        return self.num_clusters

    @property
    def schema(self) -> DatasetSchema:
        return self._require_state().schema

    @property
    def priors(self) -> np.ndarray:
        """Cluster prior probabilities (a copy)."""
        return self._require_state().priors.copy()

    @property
    def discrete_estimators(self) -> List[List[Optional[DiscreteFrequencyEstimator]]]:
        """[cluster][attribute] estimators; None for numeric attributes."""
        return self._require_state().discrete_estimators

    @property
    def gaussian_params(self) -> List[List[Optional[GaussianParams]]]:
        """[cluster][attribute] Gaussians; None for symbolic attributes and empty clusters."""
        return self._require_state().gaussian_params

    def summary(self) -> Dict[str, Any]:
        """Get fitted model summary."""
        state = self._require_state()
        return {
            "n_clusters": state.num_clusters,
            "n_training_instances": int(state.cluster_sizes.sum()),
            "cluster_sizes": {c: int(n) for c, n in enumerate(state.cluster_sizes)},
            "priors": {c: float(p) for c, p in enumerate(state.priors)},
            "attributes": state.schema.names,
            "min_std_dev": self.min_std_dev,
        }

    def report(self) -> str:
        """
        Human-readable description of the fitted estimators.

        Lists every cluster with its prior, then every attribute in
        declaration order with its discrete counts or Gaussian parameters.
        """
        state = self._state
        if state is None:
            return "ClusterDensityModel: No model built yet."

        precision = self.config.report_precision
        lines = [
            "ClusterDensityModel",
            "",
            f"Wrapped clusterer: {state.clusterer}",
            "",
            "Fitted estimators:",
        ]
        for c in range(state.num_clusters):
            lines.append("")
            lines.append(f"Cluster: {c} Prior probability: {state.priors[c]:.{precision}f}")
            lines.append("")
            for j, attr in enumerate(state.schema):
                lines.append(f"Attribute: {attr.name}")
                if attr.is_symbolic:
                    lines.append(state.discrete_estimators[c][j].to_string(attr.values))
                elif state.gaussian_params[c][j] is not None:
                    lines.append(state.gaussian_params[c][j].to_string(precision))
                else:
                    lines.append("Normal Distribution. (no training instances)")
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.report()
