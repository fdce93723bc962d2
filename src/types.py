"""
Type definitions for NPVSim.

Purpose
-------
Provides TypedDict definitions for the dictionary form of every engine
output. These are the payloads handed to display layers and written by
``serialization.save_result``.

Type Definitions
----------------
SummaryStatisticsDict
    Order statistics and indicator fractions over a population
HistogramBinDict
    Bin center and probability mass {"center", "probability_pct"}
TrajectoryPointDict
    Projection point {"year", "expected", "p10", "p90"}
ScatterPointDict
    Risk scatter point {"market_share_pct", "value", "risk_tier"}
ScenarioRowDict
    Static comparison row
AnalyticsResultDict
    Full pipeline output for one scenario selection
"""

from typing import List, Optional
from typing_extensions import TypedDict

__all__ = [
    "SummaryStatisticsDict",
    "HistogramBinDict",
    "TrajectoryPointDict",
    "ScatterPointDict",
    "ScenarioRowDict",
    "AnalyticsResultDict",
]


class SummaryStatisticsDict(TypedDict):
    """
    Summary statistics over the sampled values.

    Fractions are in [0, 1]; ``avg_retention_pct`` is already scaled to percent.
    """

    n: int
    mean: float
    std: float
    median: float
    p10: float
    p90: float
    min: float
    max: float
    positive_fraction: float
    above_80_fraction: float
    avg_retention_pct: float
    retention_above_75_fraction: float


class HistogramBinDict(TypedDict):
    center: float
    probability_pct: float


class TrajectoryPointDict(TypedDict):
    year: int
    expected: float
    p10: float
    p90: float


class ScatterPointDict(TypedDict):
    """Scatter point; ``risk_tier`` is one of "low", "medium", "high"."""

    market_share_pct: float
    value: float
    risk_tier: str


class ScenarioRowDict(TypedDict):
    name: str
    target_value: float
    predicted_value: float
    probability_pct: float
    simulation_count: int
    display_color: str


class AnalyticsResultDict(TypedDict):
    """
    Full pipeline output for one scenario selection.

    The raw population is not included; it is regenerated on every run.
    """

    schema_version: str
    scenario: str
    seed: Optional[int]
    statistics: SummaryStatisticsDict
    histogram: List[HistogramBinDict]
    trajectory: List[TrajectoryPointDict]
    scatter: List[ScatterPointDict]
    scenario_table: List[ScenarioRowDict]
