"""
Distribution binning for the value histogram.

Splits [min, max] into ``bin_count`` equal-width bins and reports the
probability mass of each non-empty bin in percent. The maximum value is
clamped into the last bin.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np
import pandas as pd

from .aggregation import SummaryStatistics
from .constants import DEFAULT_BIN_COUNT
from .exceptions import DegenerateRangeError, EmptyPopulationError, ValidationError
from .sampler import Population
from .types import HistogramBinDict

__all__ = [
    "HistogramBin",
    "build_histogram",
    "histogram_frame",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistogramBin:
    center: float
    probability_pct: float

    def to_dict(self) -> HistogramBinDict:
        return HistogramBinDict(center=self.center, probability_pct=self.probability_pct)


def build_histogram(
    population: Population,
    stats: SummaryStatistics,
    bin_count: int = DEFAULT_BIN_COUNT,
) -> List[HistogramBin]:
    """Bin population values into a sparse probability histogram.

    Parameters
    ----------
    population : Population
        Samples to bin.
    stats : SummaryStatistics
        Statistics of the same population (supplies min and max).
    bin_count : int
        Number of equal-width bins.

    Returns
    -------
    list of HistogramBin
        Non-empty bins in ascending bin order.

    Raises
    ------
    DegenerateRangeError
        If ``stats.max == stats.min`` (zero-width bins).
    EmptyPopulationError
        If the population is empty.
    """
    if bin_count < 1:
        raise ValidationError(f"bin_count must be >= 1, got {bin_count}.")
    n = len(population)
    if n == 0:
        raise EmptyPopulationError("Cannot bin an empty population.")
    if stats.max == stats.min:
        raise DegenerateRangeError(
            f"Cannot bin values: max == min == {stats.min}. "
            f"Resample or report a single-point distribution."
        )

    width = (stats.max - stats.min) / bin_count
    idx = np.floor((population.values - stats.min) / width).astype(np.int64)
    if idx.min() < 0:
        raise ValidationError(
            "Population holds values below stats.min; statistics must come "
            "from the same population."
        )
    idx = np.minimum(bin_count - 1, idx)
    counts = np.bincount(idx, minlength=bin_count)

    bins = [
        HistogramBin(
            center=stats.min + (i + 0.5) * width,
            probability_pct=100.0 * int(c) / n,
        )
        for i, c in enumerate(counts)
        if c > 0
    ]
    logger.debug("Histogram: %d of %d bins non-empty (width=%.4f)", len(bins), bin_count, width)
    return bins


def histogram_frame(bins: Sequence[HistogramBin]) -> pd.DataFrame:
    """Histogram as a DataFrame with columns ``center`` and ``probability_pct``."""
    return pd.DataFrame(
        {
            "center": [b.center for b in bins],
            "probability_pct": [b.probability_pct for b in bins],
        }
    )
