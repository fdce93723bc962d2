"""
Unit tests for sampler.py module.

Tests Box-Muller variates, population generation, clamps, correlation
between value and retention, and the Population container.
"""

import numpy as np
import pytest

from src.config import CalibrationConfig, SamplerConfig, ScenarioParametersConfig
from src.exceptions import UnknownScenarioError, ValidationError
from src.sampler import (
    Population,
    Sample,
    box_muller,
    generate_from_config,
    generate_population,
)
from src.scenario import DEFAULT_SCENARIO_PARAMETERS, SCENARIO_KEYS


class _ScriptedRng:
    """Generator stand-in returning pre-set uniform draws."""

    def __init__(self, draws):
        self.draws = [np.array(d, dtype=float) for d in draws]
        self.sizes = []

    def random(self, n):
        self.sizes.append(n)
        out = self.draws.pop(0)
        assert out.shape == (n,)
        return out.copy()


# ============================================================================
# BOX-MULLER
# ============================================================================

class TestBoxMuller:
    """Tests for the standard-normal generator."""

    def test_zero_draws_are_redrawn(self):
        """u1 == 0 is redrawn until non-zero, so no -inf/NaN appears."""
        rng = _ScriptedRng([
            [0.0, 0.5, 0.25],   # u1: first entry zero
            [0.0],              # redraw still zero
            [0.75],             # redraw ok
            [0.0, 0.0, 0.0],    # u2: cos(0) == 1
        ])
        z = box_muller(3, rng)

        expected = np.sqrt(-2.0 * np.log(np.array([0.75, 0.5, 0.25])))
        assert np.all(np.isfinite(z))
        np.testing.assert_allclose(z, expected)
        assert rng.sizes == [3, 1, 1, 3]

    def test_moments(self):
        """Variates have mean ~0 and standard deviation ~1."""
        z = box_muller(200_000, np.random.default_rng(0))

        assert abs(z.mean()) < 0.02
        assert abs(z.std() - 1.0) < 0.02

    def test_empty(self):
        """n=0 returns an empty array."""
        assert box_muller(0, np.random.default_rng(0)).shape == (0,)

    def test_negative_n(self):
        """Negative sizes are rejected."""
        with pytest.raises(ValidationError):
            box_muller(-1, np.random.default_rng(0))


# ============================================================================
# GENERATE POPULATION
# ============================================================================

class TestGeneratePopulation:
    """Tests for generate_population()."""

    @pytest.mark.parametrize("key", SCENARIO_KEYS)
    def test_size_and_bounds(self, key):
        """Every scenario yields 10,000 samples within the clamps."""
        population = generate_population(key, seed=1)

        assert len(population) == 10_000
        assert population.values.min() >= 50.0
        assert population.retention.min() >= 0.5
        assert population.retention.max() <= 0.95
        assert population.scenario == key

    def test_seed_reproducible(self):
        """Same seed gives identical populations."""
        a = generate_population("base", seed=123)
        b = generate_population("base", seed=123)

        np.testing.assert_array_equal(a.values, b.values)
        np.testing.assert_array_equal(a.retention, b.retention)

    def test_different_seeds_differ(self):
        """Different seeds give different populations."""
        a = generate_population("base", seed=1)
        b = generate_population("base", seed=2)

        assert not np.array_equal(a.values, b.values)

    def test_explicit_rng_is_advanced(self):
        """Two calls on the same generator draw different populations."""
        rng = np.random.default_rng(5)
        a = generate_population("base", rng=rng, n_sims=100)
        b = generate_population("base", rng=rng, n_sims=100)

        assert not np.array_equal(a.values, b.values)

    def test_same_variate_drives_both_fields(self):
        """Unclamped samples share one z: (v - mu)/sigma == (r - m)/0.08."""
        params = DEFAULT_SCENARIO_PARAMETERS["base"]
        population = generate_population("base", seed=7)
        v, r = population.values, population.retention

        free = (v > 50.0) & (r > 0.5) & (r < 0.95)
        z_value = (v[free] - params.mean_value) / params.std_dev_value
        z_retention = (r[free] - params.mean_retention) / 0.08

        assert free.sum() > 9_000
        np.testing.assert_allclose(z_value, z_retention, atol=1e-9)

    def test_positive_correlation(self):
        """Value and retention are strongly positively correlated."""
        population = generate_population("all", seed=3)
        corr = np.corrcoef(population.values, population.retention)[0, 1]

        assert corr > 0.9

    def test_mean_near_parameters(self):
        """Sample mean tracks the scenario mean value."""
        population = generate_population("optimistic", seed=11)

        assert population.values.mean() == pytest.approx(108.7, abs=0.5)

    def test_floor_applies(self):
        """A scenario far below the floor clamps every value to it."""
        calibration = CalibrationConfig(
            scenarios={"bust": ScenarioParametersConfig(mean_value=-500.0, std_dev_value=1.0, mean_retention=0.6)},
            growth_factors={"bust": [0.1] * 6},
        )
        population = generate_population("bust", seed=0, n_sims=500, calibration=calibration)

        assert np.all(population.values == 50.0)

    def test_unknown_scenario(self):
        """Unknown key raises UnknownScenarioError; no fallback."""
        with pytest.raises(UnknownScenarioError, match="extreme"):
            generate_population("extreme", seed=0)

    def test_unknown_under_custom_calibration(self):
        """Built-in keys are unknown when a calibration does not define them."""
        calibration = CalibrationConfig(
            scenarios={"custom": ScenarioParametersConfig(mean_value=60.0, std_dev_value=5.0, mean_retention=0.7)},
            growth_factors={"custom": [0.2] * 6},
        )
        with pytest.raises(UnknownScenarioError):
            generate_population("base", calibration=calibration)

    def test_invalid_n_sims(self):
        """n_sims must be positive."""
        with pytest.raises(ValidationError, match="n_sims"):
            generate_population("base", n_sims=0)

    def test_negative_seed(self):
        """A negative seed is a validation error, not a numpy ValueError."""
        with pytest.raises(ValidationError, match="seed must be non-negative"):
            generate_population("base", n_sims=10, seed=-1)

    def test_invalid_retention_bounds(self):
        """min_retention must be below max_retention."""
        with pytest.raises(ValidationError, match="min_retention"):
            generate_population("base", min_retention=0.9, max_retention=0.8)

    def test_from_config(self):
        """generate_from_config takes size, seed and clamps from SamplerConfig."""
        config = SamplerConfig(n_sims=300, seed=9, floor_value=80.0, min_retention=0.6, max_retention=0.9)
        population = generate_from_config("base", config)

        assert len(population) == 300
        assert population.values.min() >= 80.0
        assert population.retention.min() >= 0.6
        assert population.retention.max() <= 0.9
        np.testing.assert_array_equal(
            population.values, generate_from_config("base", config).values
        )


# ============================================================================
# POPULATION
# ============================================================================

class TestPopulation:
    """Tests for the Population container."""

    def test_length_mismatch(self):
        """values and retention must have equal length."""
        with pytest.raises(ValidationError, match="equal length"):
            Population(values=np.array([1.0, 2.0]), retention=np.array([0.6]))

    def test_not_1d(self):
        """2-D arrays are rejected."""
        with pytest.raises(ValidationError, match="1-D"):
            Population(values=np.ones((2, 2)), retention=np.ones((2, 2)))

    def test_read_only(self):
        """Stored arrays cannot be modified in place."""
        population = Population(values=np.array([60.0]), retention=np.array([0.7]))

        with pytest.raises(ValueError):
            population.values[0] = 1.0

    def test_input_not_aliased(self):
        """Mutating the source array does not change the population."""
        values = np.array([60.0, 70.0])
        population = Population(values=values, retention=np.array([0.7, 0.8]))
        values[0] = 0.0

        assert population.values[0] == 60.0

    def test_samples_in_order(self, small_population):
        """Iteration yields Samples in generation order."""
        samples = list(small_population)

        assert samples[0] == Sample(value=-5.0, retention=0.5)
        assert samples[-1] == Sample(value=100.0, retention=0.6)
        assert len(samples) == 6

    def test_head(self, small_population):
        """head(n) keeps the first n samples; larger n keeps everything."""
        assert small_population.head(2).values.tolist() == [-5.0, 0.0]
        assert len(small_population.head(100)) == 6
        assert len(small_population.head(0)) == 0

    def test_head_negative(self, small_population):
        with pytest.raises(ValidationError):
            small_population.head(-1)

    def test_from_samples(self):
        """from_samples round-trips Sample objects."""
        population = Population.from_samples(
            [Sample(55.0, 0.6), Sample(65.0, 0.7)], scenario="base"
        )

        assert population.values.tolist() == [55.0, 65.0]
        assert population.retention.tolist() == [0.6, 0.7]
        assert population.scenario == "base"

    def test_to_frame(self, small_population):
        """to_frame exposes value and retention columns."""
        df = small_population.to_frame()

        assert list(df.columns) == ["value", "retention"]
        assert len(df) == 6
