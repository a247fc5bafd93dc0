"""
Unit tests for clusterdensity estimators module.
"""

import math

import numpy as np
import pytest

from clusterdensity.errors import SymbolOutOfRangeError
from clusterdensity.estimators import (
    DiscreteFrequencyEstimator,
    GaussianAccumulator,
    GaussianParams,
    normal_density,
    log_normal_density,
)


class TestDiscreteFrequencyEstimator:
    """Tests for add-one smoothed discrete estimation."""

    def test_create_empty(self):
        """Test that an empty estimator is uniform."""
        est = DiscreteFrequencyEstimator(num_symbols=4, name="test")
        assert est.total() == 0
        assert est.name == "test"
        for i in range(4):
            assert est.get_probability(i) == pytest.approx(0.25)

    def test_smoothed_counts(self):
        """Test counts {2, 0, 1} over three symbols give {3/6, 1/6, 2/6}."""
        est = DiscreteFrequencyEstimator(num_symbols=3)
        est.add_value(0)
        est.add_value(0)
        est.add_value(2)

        assert est.get_probability(0) == pytest.approx(3 / 6)
        assert est.get_probability(1) == pytest.approx(1 / 6)
        assert est.get_probability(2) == pytest.approx(2 / 6)

    def test_unseen_symbol_positive(self):
        """Test that symbols never observed still get positive probability."""
        est = DiscreteFrequencyEstimator(num_symbols=2)
        for _ in range(1000):
            est.add_value(0)
        assert est.get_probability(1) > 0

    def test_probabilities_sum_to_one(self):
        """Test that the smoothed distribution sums to 1."""
        est = DiscreteFrequencyEstimator(num_symbols=5)
        est.add_value(1, 3.5)
        est.add_value(4, 0.25)
        est.add_value(2)

        probs = est.probabilities()
        assert probs.sum() == pytest.approx(1.0)
        assert sum(est.get_probability(i) for i in range(5)) == pytest.approx(1.0)
        assert np.all(probs > 0)

    def test_weighted_values(self):
        """Test that weights accumulate into buckets and total."""
        est = DiscreteFrequencyEstimator(num_symbols=2)
        est.add_value(0, 2.5)
        est.add_value(1, 0.5)

        assert est.count(0) == 2.5
        assert est.count(1) == 0.5
        assert est.total() == 3.0
        assert est.get_probability(0) == pytest.approx(3.5 / 5.0)

    def test_zero_weight_allowed(self):
        """Test that a zero weight leaves the distribution unchanged."""
        est = DiscreteFrequencyEstimator(num_symbols=2)
        est.add_value(0, 0.0)
        assert est.total() == 0
        assert est.get_probability(0) == pytest.approx(0.5)

    def test_negative_weight_rejected(self):
        """Test that negative weights are rejected."""
        est = DiscreteFrequencyEstimator(num_symbols=2)
        with pytest.raises(ValueError):
            est.add_value(0, -1.0)
        assert est.total() == 0

    @pytest.mark.parametrize("index", [-1, 3, 1.5, float("nan")])
    def test_out_of_range(self, index):
        """Test that invalid symbol indices raise SymbolOutOfRangeError."""
        est = DiscreteFrequencyEstimator(num_symbols=3)
        with pytest.raises(SymbolOutOfRangeError):
            est.add_value(index)
        with pytest.raises(SymbolOutOfRangeError):
            est.get_probability(index)

    def test_out_of_range_is_index_error(self):
        """Test that range errors can be caught as IndexError."""
        est = DiscreteFrequencyEstimator(num_symbols=1)
        with pytest.raises(IndexError):
            est.get_probability(1)

    def test_integral_float_index(self):
        """Test that encoded float indices are accepted."""
        est = DiscreteFrequencyEstimator(num_symbols=3)
        est.add_value(2.0)
        assert est.count(2) == 1

    def test_requires_symbols(self):
        """Test that an estimator needs at least one symbol."""
        with pytest.raises(ValueError):
            DiscreteFrequencyEstimator(num_symbols=0)

    def test_to_string(self):
        """Test the readable description."""
        est = DiscreteFrequencyEstimator(num_symbols=3)
        est.add_value(0, 2)
        est.add_value(2)

        assert "Counts = 2 0 1" in str(est)
        assert "Total = 3" in str(est)
        assert "red=2" in est.to_string(["red", "green", "blue"])


class TestGaussian:
    """Tests for Gaussian density and parameter estimation."""

    def test_density_at_mean(self):
        """Test the density peak value."""
        assert normal_density(0.0, 0.0, 1.0) == pytest.approx(1 / math.sqrt(2 * math.pi))
        assert normal_density(3.0, 3.0, 2.0) == pytest.approx(1 / (2 * math.sqrt(2 * math.pi)))

    def test_density_symmetric(self):
        """Test symmetry around the mean."""
        assert normal_density(1.5, 1.0, 0.3) == pytest.approx(normal_density(0.5, 1.0, 0.3))

    def test_log_density_matches(self):
        """Test that log density is the log of the density."""
        for x in (-2.0, 0.0, 0.7, 4.0):
            assert log_normal_density(x, 0.5, 1.3) == pytest.approx(
                math.log(normal_density(x, 0.5, 1.3))
            )

    def test_log_density_finite_when_density_underflows(self):
        """Test that far-away points keep a finite log density."""
        assert normal_density(1e4, 0.0, 1.0) == 0.0
        assert math.isfinite(log_normal_density(1e4, 0.0, 1.0))

    def test_accumulator_finalize(self):
        """Test mean and population standard deviation."""
        acc = GaussianAccumulator()
        for v in (1.0, 2.0, 3.0):
            acc.add(v)

        params = acc.finalize(count=3, min_std_dev=1e-6)
        assert params.mean == pytest.approx(2.0)
        assert params.std_dev == pytest.approx(math.sqrt(2 / 3))

    def test_zero_variance_clamped(self):
        """Test that identical values give the minimum standard deviation."""
        acc = GaussianAccumulator()
        for _ in range(3):
            acc.add(1.0)

        params = acc.finalize(count=3, min_std_dev=1e-6)
        assert params.mean == 1.0
        assert params.std_dev == 1e-6

    def test_cancellation_never_nan(self):
        """Test that large equal values cannot produce a NaN deviation."""
        acc = GaussianAccumulator()
        for _ in range(7):
            acc.add(1e8 + 0.1)

        params = acc.finalize(count=7, min_std_dev=1e-6)
        assert math.isfinite(params.std_dev)
        assert params.std_dev >= 1e-6

    def test_small_spread_below_floor(self):
        """Test that a spread smaller than the floor is clamped."""
        acc = GaussianAccumulator()
        acc.add(0.0)
        acc.add(1e-9)

        params = acc.finalize(count=2, min_std_dev=1e-3)
        assert params.std_dev == 1e-3

    def test_finalize_requires_count(self):
        """Test that finalizing over zero instances is rejected."""
        with pytest.raises(ValueError):
            GaussianAccumulator().finalize(count=0, min_std_dev=1e-6)

    def test_params_methods(self):
        """Test GaussianParams helpers."""
        params = GaussianParams(mean=1.0, std_dev=0.5)
        assert params.density(1.0) == pytest.approx(normal_density(1.0, 1.0, 0.5))
        assert params.log_density(2.0) == pytest.approx(log_normal_density(2.0, 1.0, 0.5))
        assert str(params) == "Normal Distribution. Mean = 1.0000 StdDev = 0.5000"
