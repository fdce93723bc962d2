"""
Summary statistics over a sampled population.

Percentiles use nearest-rank with floor truncation: the value at sorted
index ``floor(f * n)``, no interpolation. This is biased against
interpolated estimators but it is the behaviour displayed outputs are
compared against, so it is kept exactly.

Means and the standard deviation (population form, divide by n) are taken
over sorted arrays so results do not depend on sample order.
"""
from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Sequence, Union

import numpy as np

from .constants import (
    P10_FRACTION,
    MEDIAN_FRACTION,
    P90_FRACTION,
    POSITIVE_THRESHOLD,
    HIGH_WATER_THRESHOLD,
    RETENTION_THRESHOLD,
    RETENTION_SCALE,
)
from .exceptions import EmptyPopulationError
from .sampler import Population
from .types import SummaryStatisticsDict

__all__ = [
    "SummaryStatistics",
    "nearest_rank",
    "compute_statistics",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SummaryStatistics:
    """
    Read-only snapshot of one population.

    Attributes
    ----------
    n : int
        Population size.
    mean, std : float
        Arithmetic mean and population standard deviation of values.
    median, p10, p90 : float
        Nearest-rank (floor) percentiles of values.
    min, max : float
        Extremes of values.
    positive_fraction : float
        Share of values > 0.
    above_80_fraction : float
        Share of values > 80 (high-water mark).
    avg_retention_pct : float
        Mean retention scaled to percent.
    retention_above_75_fraction : float
        Share of retention > 0.75.
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

    @property
    def positive_pct(self) -> float:
        return self.positive_fraction * 100.0

    @property
    def above_80_pct(self) -> float:
        return self.above_80_fraction * 100.0

    @property
    def retention_above_75_pct(self) -> float:
        return self.retention_above_75_fraction * 100.0

    def to_dict(self) -> SummaryStatisticsDict:
        return SummaryStatisticsDict(**asdict(self))


def nearest_rank(sorted_values: Union[Sequence[float], np.ndarray], fraction: float) -> float:
    """Value at index ``floor(fraction * n)`` of an ascending sequence.

    ``fraction == 1`` maps to the last element.
    """
    n = len(sorted_values)
    if n == 0:
        raise EmptyPopulationError("Cannot take a percentile of an empty sequence.")
    if not 0.0 <= fraction <= 1.0:
        raise ValueError(f"fraction must be in [0, 1], got {fraction}.")
    idx = min(n - 1, int(math.floor(fraction * n)))
    return float(sorted_values[idx])


def compute_statistics(population: Population) -> SummaryStatistics:
    """Compute SummaryStatistics for *population*.

    Raises
    ------
    EmptyPopulationError
        If the population holds no samples.
    """
    n = len(population)
    if n == 0:
        raise EmptyPopulationError("Cannot compute statistics of an empty population.")

    values = np.sort(population.values)
    retention = np.sort(population.retention)

    mean = float(values.mean())
    std = float(np.sqrt(np.mean((values - mean) ** 2)))

    stats = SummaryStatistics(
        n=n,
        mean=mean,
        std=std,
        median=nearest_rank(values, MEDIAN_FRACTION),
        p10=nearest_rank(values, P10_FRACTION),
        p90=nearest_rank(values, P90_FRACTION),
        min=float(values[0]),
        max=float(values[-1]),
        positive_fraction=int(np.count_nonzero(values > POSITIVE_THRESHOLD)) / n,
        above_80_fraction=int(np.count_nonzero(values > HIGH_WATER_THRESHOLD)) / n,
        avg_retention_pct=float(retention.mean()) * RETENTION_SCALE,
        retention_above_75_fraction=int(np.count_nonzero(retention > RETENTION_THRESHOLD)) / n,
    )
    logger.debug(
        "Statistics over %d samples: median=%.2f p10=%.2f p90=%.2f",
        n, stats.median, stats.p10, stats.p90,
    )
    return stats
