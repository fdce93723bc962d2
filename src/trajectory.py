"""
Multi-year projection of the summary statistics.

Each scenario carries a fixed growth curve (one factor per projection year).
For year i:

    expected = round(median * f[i], 1)
    p90      = round(p90 * f[i] * 1.05, 1)
    p10      = round(p10 * f[i] * 0.95, 1)

The 1.05 / 0.95 spreads are a fixed widening of the band, not a
statistically derived confidence interval.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence

import pandas as pd

from .aggregation import SummaryStatistics
from .constants import HORIZON_YEARS, P10_SPREAD, P90_SPREAD, ROUND_DECIMALS
from .exceptions import ConfigurationError
from .scenario import resolve_growth_factors
from .types import TrajectoryPointDict

if TYPE_CHECKING:
    from .config import CalibrationConfig

__all__ = [
    "TrajectoryPoint",
    "project_trajectory",
    "trajectory_frame",
]


@dataclass(frozen=True)
class TrajectoryPoint:
    year: int
    expected: float
    p10: float
    p90: float

    def to_dict(self) -> TrajectoryPointDict:
        return TrajectoryPointDict(year=self.year, expected=self.expected, p10=self.p10, p90=self.p90)


def project_trajectory(
    scenario_key: str,
    stats: SummaryStatistics,
    *,
    calibration: Optional[CalibrationConfig] = None,
) -> List[TrajectoryPoint]:
    """Project median / p10 / p90 over the horizon with the scenario's growth curve.

    Raises
    ------
    UnknownScenarioError
        If *scenario_key* is not a recognized scenario.
    """
    factors = resolve_growth_factors(scenario_key, calibration)
    years: Sequence[int] = calibration.years if calibration is not None else HORIZON_YEARS
    if len(factors) != len(years):
        raise ConfigurationError(
            f"Growth curve for {scenario_key!r} has {len(factors)} factors, "
            f"expected {len(years)}."
        )

    return [
        TrajectoryPoint(
            year=int(year),
            expected=round(stats.median * f, ROUND_DECIMALS),
            p10=round(stats.p10 * f * P10_SPREAD, ROUND_DECIMALS),
            p90=round(stats.p90 * f * P90_SPREAD, ROUND_DECIMALS),
        )
        for year, f in zip(years, factors)
    ]


def trajectory_frame(points: Sequence[TrajectoryPoint]) -> pd.DataFrame:
    """Trajectory as a DataFrame indexed by year."""
    return pd.DataFrame(
        {
            "expected": [p.expected for p in points],
            "p10": [p.p10 for p in points],
            "p90": [p.p90 for p in points],
        },
        index=pd.Index([p.year for p in points], name="year"),
    )
