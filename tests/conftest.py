"""
Pytest configuration and fixtures for NPVSim test suite.

This module provides reusable fixtures for testing all NPVSim components.
Fixtures follow the principle of "arrange-act-assert" with clear separation.
"""

import numpy as np
import pytest

from src.aggregation import SummaryStatistics, compute_statistics
from src.config import EngineConfig, SamplerConfig
from src.sampler import Population, generate_population
from src.simulation import AnalyticsEngine


# ---------------------------------------------------------------------------
# Randomness Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def seed() -> int:
    """Standard random seed for reproducibility."""
    return 42


@pytest.fixture
def rng(seed) -> np.random.Generator:
    """Seeded NumPy generator."""
    return np.random.default_rng(seed)


# ---------------------------------------------------------------------------
# Population Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def base_population(seed) -> Population:
    """Full-size (10,000) seeded population for the base scenario."""
    return generate_population("base", seed=seed)


@pytest.fixture
def base_stats(base_population) -> SummaryStatistics:
    """Statistics of the seeded base population."""
    return compute_statistics(base_population)


@pytest.fixture
def small_population() -> Population:
    """
    Hand-built population with known statistics.

    values:    -5, 0, 50, 80, 81, 100
    retention: 0.50, 0.75, 0.76, 0.80, 0.90, 0.60
    """
    return Population(
        values=np.array([-5.0, 0.0, 50.0, 80.0, 81.0, 100.0]),
        retention=np.array([0.50, 0.75, 0.76, 0.80, 0.90, 0.60]),
    )


@pytest.fixture
def reference_stats() -> SummaryStatistics:
    """
    Fixed statistics for projection checks.

    median=89.4, p10=74.2, p90=108.7 (remaining fields are placeholders).
    """
    return SummaryStatistics(
        n=10_000,
        mean=89.4,
        std=11.2,
        median=89.4,
        p10=74.2,
        p90=108.7,
        min=50.0,
        max=140.0,
        positive_fraction=1.0,
        above_80_fraction=0.8,
        avg_retention_pct=74.9,
        retention_above_75_fraction=0.5,
    )


# ---------------------------------------------------------------------------
# Engine Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def engine() -> AnalyticsEngine:
    """Engine with default configuration (10,000 samples, 40 bins, 800-point scatter)."""
    return AnalyticsEngine()


@pytest.fixture
def small_engine() -> AnalyticsEngine:
    """Faster engine (2,000 samples) for behavioural tests."""
    return AnalyticsEngine(EngineConfig(sampler=SamplerConfig(n_sims=2_000)))
