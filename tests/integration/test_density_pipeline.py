"""
Integration tests for the density pipeline.

Tests the complete flow:
1. Load a DataFrame into a Dataset
2. Partition it with k-means
3. Fit the cluster density model
4. Query densities and posteriors for new data
"""

import numpy as np
import pandas as pd
import pytest

from clusterdensity import (
    ClusterDensityModel,
    KMeansClusterer,
    load_dataset,
)


@pytest.fixture(scope="module")
def frame() -> pd.DataFrame:
    """Two device populations with a few missing cells."""
    rng = np.random.default_rng(11)
    n = 60
    laptops = pd.DataFrame({
        "device": rng.choice(["laptop", "phone"], size=n, p=[0.9, 0.1]),
        "bytes_kb": rng.normal(50.0, 5.0, n),
        "peers": rng.normal(10.0, 2.0, n),
    })
    servers = pd.DataFrame({
        "device": rng.choice(["server", "laptop"], size=n, p=[0.9, 0.1]),
        "bytes_kb": rng.normal(500.0, 20.0, n),
        "peers": rng.normal(200.0, 10.0, n),
    })
    df = pd.concat([laptops, servers], ignore_index=True)
    df.loc[[3, 70], "peers"] = np.nan
    df.loc[[5], "device"] = None
    return df


@pytest.fixture(scope="module")
def fitted(frame: pd.DataFrame):
    dataset = load_dataset(frame)
    clusterer = KMeansClusterer(n_clusters=2, normalize=False)
    model = ClusterDensityModel(clusterer).fit(dataset)
    return dataset, model


class TestDensityPipeline:
    """End-to-end tests with k-means as the wrapped clusterer."""

    def test_priors(self, fitted):
        """Test that the two populations get equal priors."""
        _, model = fitted
        assert model.number_of_clusters() == 2
        assert model.priors.sum() == pytest.approx(1.0)
        assert model.priors == pytest.approx([0.5, 0.5])

    def test_posteriors_match_populations(self, fitted):
        """Test that training instances are confidently placed with their population."""
        dataset, model = fitted
        dists = model.distribution_for_dataset(dataset)

        assert np.allclose(dists.sum(axis=1), 1.0)
        first = np.argmax(dists[:60], axis=1)
        second = np.argmax(dists[60:], axis=1)
        assert len(set(first)) == 1
        assert len(set(second)) == 1
        assert first[0] != second[0]

    def test_posterior_agrees_with_hard_assignment(self, fitted):
        """Test that the soft model agrees with the wrapped clusterer."""
        dataset, model = fitted
        agree = sum(
            model.cluster_instance(inst) == model.assign_cluster(inst)
            for inst in dataset
        )
        assert agree / len(dataset) >= 0.95

    def test_new_data(self, fitted, frame: pd.DataFrame):
        """Test querying rows encoded against the fitted schema."""
        dataset, model = fitted
        query = load_dataset(
            pd.DataFrame({
                "device": ["server", "laptop"],
                "bytes_kb": [480.0, 52.0],
                "peers": [np.nan, 9.0],
            }),
            schema=dataset.schema,
        )

        server_cluster = model.cluster_instance(dataset.instance(100))
        laptop_cluster = model.cluster_instance(dataset.instance(0))
        assert model.cluster_instance(query.instance(0)) == server_cluster
        assert model.cluster_instance(query.instance(1)) == laptop_cluster

    def test_density_ranks_typical_above_outlier(self, fitted):
        """Test that a typical instance is denser than an outlier."""
        _, model = fitted
        typical = model.density_for_instance(["laptop", 50.0, 10.0])
        outlier = model.density_for_instance(["laptop", 5000.0, 10.0])

        assert typical > outlier
        assert model.log_density_for_instance(["laptop", 5000.0, 10.0]) < np.log(typical)

    def test_report(self, fitted):
        """Test that the report covers every attribute in each cluster."""
        _, model = fitted
        text = model.report()

        assert "KMeansClusterer(n_clusters=2" in text
        for name in ("device", "bytes_kb", "peers"):
            assert text.count(f"Attribute: {name}") == 2
