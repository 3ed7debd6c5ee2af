# tests/variates/core/test_distributions.py
"""Tests for random variate generators.

Tests verify that all generators:
- Draw values inside the distribution's support
- Are reproducible with seeds
- Have correct theoretical moments
- Handle boundary parameters properly
"""

import math
import warnings
from unittest.mock import MagicMock

import pytest
import numpy as np
from scipy import stats as scipy_stats

from src.variates.core.distributions import (
    BernoulliGenerator,
    FiniteGenerator,
    GeometricGenerator,
    PoissonGenerator,
    RandomVariateGenerator,
    get_generator,
)
from src.variates.core.schemas import (
    BernoulliParams,
    FiniteParams,
    GeometricParams,
    PoissonParams,
)


def stub_rng(*draws: float) -> MagicMock:
    """Random number generator whose uniform draws are fixed."""
    rng = MagicMock(spec=np.random.Generator)
    rng.random.side_effect = list(draws)
    return rng


class TestGeneratorBase:
    """Test abstract RandomVariateGenerator base class."""

    def test_cannot_instantiate_abstract_base(self):
        """Test that the base class has no sampling algorithm of its own."""
        with pytest.raises(TypeError):
            RandomVariateGenerator()

    def test_batch_generation(self):
        """Test generating multiple variates at once."""
        gen = PoissonGenerator(rate=2.0)
        batch = gen.generate_batch(100)

        assert len(batch) == 100
        assert all(x >= 0 for x in batch)

    def test_batch_generation_invalid_size(self):
        """Test that invalid batch sizes raise errors."""
        gen = BernoulliGenerator(p=0.5)

        with pytest.raises(ValueError, match="Size must be positive"):
            gen.generate_batch(0)

        with pytest.raises(ValueError, match="Size must be positive"):
            gen.generate_batch(-5)

    def test_default_streams_are_private(self):
        """Test that instances without an injected rng do not share one."""
        gen1 = BernoulliGenerator(p=0.5)
        gen2 = BernoulliGenerator(p=0.5)

        assert gen1._rng is not gen2._rng

    def test_generate_returns_float(self):
        """Test that every generator returns a real number."""
        generators = [
            PoissonGenerator(rate=1.0),
            BernoulliGenerator(p=0.5),
            GeometricGenerator(p=0.5),
            FiniteGenerator(values=[1, 2], probabilities=[0.5, 0.5]),
        ]

        for gen in generators:
            assert isinstance(gen.generate(), float)


class TestPoissonGenerator:
    """Test Poisson generator."""

    def test_initialization(self):
        gen = PoissonGenerator(rate=3.58)
        assert gen.rate == 3.58

    def test_generate_returns_non_negative_integers(self, rng):
        """Test that generated values are counts."""
        gen = PoissonGenerator(rate=5.0, rng=rng)

        for value in gen.generate_batch(1000):
            assert value >= 0
            assert value == int(value)

    def test_reproducibility_with_seed(self):
        """Test that same seed produces same sequence."""
        gen1 = PoissonGenerator(rate=3.0, rng=np.random.default_rng(42))
        gen2 = PoissonGenerator(rate=3.0, rng=np.random.default_rng(42))

        samples1 = [gen1.generate() for _ in range(20)]
        samples2 = [gen2.generate() for _ in range(20)]

        np.testing.assert_array_equal(samples1, samples2)

    def test_moments(self):
        """Test theoretical mean and variance."""
        gen = PoissonGenerator(rate=3.5)

        assert gen.get_mean() == pytest.approx(3.5)
        assert gen.get_variance() == pytest.approx(3.5)

    @pytest.mark.parametrize("rate", [1.0, 3.58, 8.0])
    def test_empirical_mean_matches_theory(self, rate, rng):
        """Test that empirical mean is within a few standard errors."""
        gen = PoissonGenerator(rate=rate, rng=rng)
        n = 100_000

        empirical_mean = np.mean(gen.generate_batch(n))

        assert empirical_mean == pytest.approx(
            rate, abs=5 * math.sqrt(rate / n)
        )

    def test_negative_rate_fails_at_sampling_time(self):
        """Test that an unchecked negative rate surfaces from numpy."""
        gen = PoissonGenerator(rate=-1.0)

        with pytest.raises(ValueError):
            gen.generate()

    def test_zero_rate_always_zero(self, rng):
        gen = PoissonGenerator(rate=0.0, rng=rng)
        assert set(gen.generate_batch(100)) == {0.0}

    def test_get_params_and_repr(self):
        gen = PoissonGenerator(rate=2.5)

        assert gen.get_params() == {"rate": 2.5}
        assert repr(gen) == "PoissonGenerator(rate=2.5)"


class TestBernoulliGenerator:
    """Test Bernoulli generator."""

    def test_generate_in_support(self, rng):
        gen = BernoulliGenerator(p=0.58, rng=rng)
        assert set(gen.generate_batch(1000)) <= {0.0, 1.0}

    @pytest.mark.parametrize("p, expected", [(0.0, 0.0), (1.0, 1.0)])
    def test_degenerate_probabilities(self, p, expected, rng):
        """Test that p=0 and p=1 are deterministic."""
        gen = BernoulliGenerator(p=p, rng=rng)
        assert set(gen.generate_batch(1000)) == {expected}

    def test_moments(self):
        gen = BernoulliGenerator(p=0.3)

        assert gen.get_mean() == pytest.approx(0.3)
        assert gen.get_variance() == pytest.approx(0.21)

    @pytest.mark.parametrize("p", [0.0, 1.0])
    def test_degenerate_moments_without_warnings(self, p):
        gen = BernoulliGenerator(p=p)

        with warnings.catch_warnings():
            warnings.simplefilter("error", RuntimeWarning)
            assert gen.get_mean() == p
            assert gen.get_variance() == 0.0

    @pytest.mark.parametrize("p", [0.1, 0.58, 0.83])
    def test_empirical_mean_matches_theory(self, p, rng):
        """Test that the mean is within 0.01 at 100,000 draws."""
        gen = BernoulliGenerator(p=p, rng=rng)

        empirical_mean = np.mean(gen.generate_batch(100_000))

        assert empirical_mean == pytest.approx(p, abs=0.01)

    def test_threshold_comparison(self):
        """Test that a draw equal to p counts as failure."""
        gen = BernoulliGenerator(p=0.5, rng=stub_rng(0.49, 0.5, 0.51))

        assert gen.generate_batch(3) == [1.0, 0.0, 0.0]

    def test_repr(self):
        assert repr(BernoulliGenerator(p=0.25)) == "BernoulliGenerator(p=0.25)"


class TestGeometricGenerator:
    """Test geometric generator."""

    def test_generate_counts_failures(self, rng):
        """Test that the support starts at zero."""
        gen = GeometricGenerator(p=0.5, rng=rng)
        samples = gen.generate_batch(10_000)

        assert min(samples) == 0.0
        assert all(x == int(x) for x in samples)
        assert max(samples) > 1.0

    def test_certain_success_gives_zero_failures(self, rng):
        gen = GeometricGenerator(p=1.0, rng=rng)
        assert set(gen.generate_batch(100)) == {0.0}

    def test_certain_success_moments_without_warnings(self):
        """Test that p=1 moments are exact and emit no RuntimeWarning."""
        gen = GeometricGenerator(p=1.0)

        with warnings.catch_warnings():
            warnings.simplefilter("error", RuntimeWarning)
            assert gen.get_mean() == 0.0
            assert gen.get_variance() == 0.0

    def test_impossible_success_is_unbounded(self):
        """Test that p=0 never raises and reports infinite failures."""
        gen = GeometricGenerator(p=0.0)

        assert gen.generate() == float("inf")
        assert gen.get_mean() == float("inf")
        assert gen.get_variance() == float("inf")

    def test_moments(self):
        gen = GeometricGenerator(p=0.25)

        assert gen.get_mean() == pytest.approx(3.0)
        assert gen.get_variance() == pytest.approx(12.0)

    @pytest.mark.parametrize("p", [0.35, 0.58, 0.83])
    def test_empirical_mean_matches_theory(self, p, rng):
        gen = GeometricGenerator(p=p, rng=rng)
        n = 100_000
        expected = (1 - p) / p
        std_error = math.sqrt((1 - p) / p**2 / n)

        empirical_mean = np.mean(gen.generate_batch(n))

        assert empirical_mean == pytest.approx(expected, abs=5 * std_error)


class TestFiniteGenerator:
    """Test finite discrete generator."""

    def test_cumulative_table(self):
        gen = FiniteGenerator(values=[1, 2, 3], probabilities=[0.3, 0.3, 0.4])

        np.testing.assert_allclose(gen.cumulative, [0.3, 0.6, 1.0])

    def test_cumulative_table_is_read_only(self):
        gen = FiniteGenerator(values=[1, 2], probabilities=[0.5, 0.5])

        with pytest.raises(ValueError):
            gen.cumulative[0] = 0.9

    def test_constructor_copies_inputs(self):
        values = [1.0, 2.0]
        gen = FiniteGenerator(values=values, probabilities=[0.5, 0.5])
        values.append(3.0)

        assert gen.values == [1.0, 2.0]

    def test_interval_upper_bound_is_closed(self):
        """Test that a draw equal to a cumulative value maps to that slot."""
        gen = FiniteGenerator(
            values=[10, 20, 30],
            probabilities=[0.3, 0.3, 0.4],
            rng=stub_rng(0.3, 0.30001, 0.75, 0.1),
        )

        assert gen.generate_batch(4) == [10.0, 20.0, 30.0, 10.0]

    def test_zero_draw_falls_back_to_last_value(self):
        """Test that u == 0 matches no interval and returns the last value."""
        gen = FiniteGenerator(
            values=[10, 20, 30],
            probabilities=[0.3, 0.3, 0.4],
            rng=stub_rng(0.0),
        )

        assert gen.generate() == 30.0

    def test_draw_above_table_total_falls_back_to_last_value(self):
        gen = FiniteGenerator(
            values=[1, 2],
            probabilities=[0.5, 0.5 - 1e-10],
            rng=stub_rng(0.99999999999),
        )

        assert gen.generate() == 2.0

    def test_zero_probability_outcome_is_skipped(self, rng):
        gen = FiniteGenerator(
            values=[1, 2, 3], probabilities=[0.0, 0.5, 0.5], rng=rng
        )

        assert 1.0 not in gen.generate_batch(5000)

    def test_single_outcome(self, rng):
        gen = FiniteGenerator(values=[7.5], probabilities=[1.0], rng=rng)
        assert set(gen.generate_batch(100)) == {7.5}

    def test_moments(self):
        gen = FiniteGenerator(values=[1, 2, 3], probabilities=[0.3, 0.3, 0.4])

        assert gen.get_mean() == pytest.approx(2.1)
        assert gen.get_variance() == pytest.approx(0.69)

    def test_empirical_mean_matches_theory(self, rng):
        gen = FiniteGenerator(
            values=[1, 2, 3], probabilities=[0.3, 0.3, 0.4], rng=rng
        )

        empirical_mean = np.mean(gen.generate_batch(100_000))

        assert empirical_mean == pytest.approx(2.1, abs=0.02)

    def test_symmetric_values_average_to_zero(self, rng):
        values = [1, -1, 2, -2, 3, -3, 4, -4, 5, -5]
        gen = FiniteGenerator(values=values, probabilities=[0.1] * 10, rng=rng)

        empirical_mean = np.mean(gen.generate_batch(100_000))

        assert empirical_mean == pytest.approx(0.0, abs=0.06)

    def test_follows_distribution(self, rng):
        """Test outcome frequencies with a chi-square goodness-of-fit test."""
        probabilities = [0.1, 0.2, 0.3, 0.4]
        gen = FiniteGenerator(
            values=[0, 1, 2, 3], probabilities=probabilities, rng=rng
        )
        n = 20_000

        samples = np.asarray(gen.generate_batch(n), dtype=int)
        observed = np.bincount(samples, minlength=4)
        expected = np.asarray(probabilities) * n

        _, p_value = scipy_stats.chisquare(observed, expected)

        assert p_value > 0.001

    def test_get_params(self):
        gen = FiniteGenerator(values=[1, 2], probabilities=[0.25, 0.75])
        params = gen.get_params()

        assert params["values"] == [1, 2]
        assert params["probabilities"] == [0.25, 0.75]
        assert params["support_size"] == 2
        assert repr(gen) == "FiniteGenerator(support_size=2)"


class TestGetGenerator:
    """Test the registry dispatch function."""

    def test_poisson_creation(self):
        gen = get_generator(PoissonParams(rate=2.0))

        assert isinstance(gen, PoissonGenerator)
        assert gen.rate == 2.0

    def test_bernoulli_creation(self):
        gen = get_generator(BernoulliParams(p=0.4))

        assert isinstance(gen, BernoulliGenerator)
        assert gen.p == 0.4

    def test_geometric_creation(self):
        gen = get_generator(GeometricParams(p=0.4))

        assert isinstance(gen, GeometricGenerator)
        assert gen.p == 0.4

    def test_finite_creation(self):
        gen = get_generator(
            FiniteParams(values=[1, 2], probabilities=[0.5, 0.5])
        )

        assert isinstance(gen, FiniteGenerator)
        assert gen.values == [1.0, 2.0]

    def test_with_custom_rng(self):
        """Test that the injected rng drives sampling."""
        params = PoissonParams(rate=1.5)

        gen1 = get_generator(params, rng=np.random.default_rng(42))
        gen2 = get_generator(params, rng=np.random.default_rng(42))

        np.testing.assert_array_equal(
            gen1.generate_batch(10), gen2.generate_batch(10)
        )

    def test_unsupported_distribution(self):
        params = MagicMock()
        params.distribution = "triangular"

        with pytest.raises(NotImplementedError, match="not supported"):
            get_generator(params)
