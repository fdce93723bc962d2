"""
Global constants for NPVSim.

Purpose
-------
Centralizes default values and magic numbers used throughout the NPVSim
engine. Every threshold that shapes an observable output (statistics,
histogram, trajectory bands, risk tiers) lives here so alternate
calibrations can be tested without touching the algorithms.

Usage
-----
>>> from src.constants import N_SIMULATIONS, FLOOR_VALUE
>>> population = generate_population("base", n_sims=N_SIMULATIONS)

Categories
----------
- Simulation: population size, clamps, seed
- Statistics: percentile fractions, indicator thresholds
- Histogram: bin count
- Trajectory: horizon years, band spreads
- Risk: tier thresholds, scatter prefix
"""

from typing import Tuple

__all__ = [
    # Simulation
    "N_SIMULATIONS",
    "FLOOR_VALUE",
    "RETENTION_SIGMA",
    "MIN_RETENTION",
    "MAX_RETENTION",
    "DEFAULT_SEED",
    # Statistics
    "P10_FRACTION",
    "MEDIAN_FRACTION",
    "P90_FRACTION",
    "POSITIVE_THRESHOLD",
    "HIGH_WATER_THRESHOLD",
    "RETENTION_THRESHOLD",
    "RETENTION_SCALE",
    # Histogram
    "DEFAULT_BIN_COUNT",
    # Trajectory
    "HORIZON_YEARS",
    "P90_SPREAD",
    "P10_SPREAD",
    "ROUND_DECIMALS",
    # Risk
    "LOW_RISK_THRESHOLD",
    "MEDIUM_RISK_THRESHOLD",
    "SCATTER_PREFIX_SIZE",
    # Engine
    "DEFAULT_MAX_RESAMPLES",
    "DEFAULT_CACHE_SIZE",
]


# =============================================================================
# Simulation Defaults
# =============================================================================

N_SIMULATIONS: int = 10_000
"""Number of (value, retention) draws per scenario run."""

FLOOR_VALUE: float = 50.0
"""Lower clamp applied to every sampled value (billions)."""

RETENTION_SIGMA: float = 0.08
"""Scale of the shared normal variate applied to the retention rate."""

MIN_RETENTION: float = 0.5
"""Lower clamp for sampled retention (market share fraction)."""

MAX_RETENTION: float = 0.95
"""Upper clamp for sampled retention (market share fraction)."""

DEFAULT_SEED: int = 42
"""Default random seed for reproducible runs (tests, examples)."""


# =============================================================================
# Statistics
# =============================================================================

P10_FRACTION: float = 0.1
MEDIAN_FRACTION: float = 0.5
P90_FRACTION: float = 0.9

POSITIVE_THRESHOLD: float = 0.0
"""Values strictly above this count as positive outcomes."""

HIGH_WATER_THRESHOLD: float = 80.0
"""Values strictly above this count toward the high-water fraction ($80B target)."""

RETENTION_THRESHOLD: float = 0.75
"""Retention strictly above this counts as a dominant position."""

RETENTION_SCALE: float = 100.0
"""Scale applied to mean retention for display (fraction -> percent)."""


# =============================================================================
# Histogram
# =============================================================================

DEFAULT_BIN_COUNT: int = 40
"""Number of equal-width bins spanning [min, max] of sampled values."""


# =============================================================================
# Trajectory
# =============================================================================

HORIZON_YEARS: Tuple[int, ...] = (2026, 2027, 2028, 2029, 2030, 2031)
"""Projection years; growth curves are applied positionally."""

P90_SPREAD: float = 1.05
"""Multiplier widening the upper band. Fixed approximation, not a fitted interval."""

P10_SPREAD: float = 0.95
"""Multiplier widening the lower band. Fixed approximation, not a fitted interval."""

ROUND_DECIMALS: int = 1
"""Decimal places kept on every displayed trajectory and scatter coordinate."""


# =============================================================================
# Risk Tiers
# =============================================================================

LOW_RISK_THRESHOLD: float = 0.78
"""Retention strictly above this is Low risk."""

MEDIUM_RISK_THRESHOLD: float = 0.70
"""Retention strictly above this (and <= LOW_RISK_THRESHOLD) is Medium risk."""

SCATTER_PREFIX_SIZE: int = 800
"""Number of leading samples (generation order) shown in the risk scatter."""


# =============================================================================
# Engine
# =============================================================================

DEFAULT_MAX_RESAMPLES: int = 3
"""Resampling attempts after a degenerate value range before giving up."""

DEFAULT_CACHE_SIZE: int = 64
"""Seeded results kept by the engine cache when caching is enabled."""
