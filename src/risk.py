"""
Risk tier classification for the retention / value scatter.

Tiers by retention r:
- Low:    r > 0.78
- Medium: 0.70 < r <= 0.78
- High:   r <= 0.70

Only the first ``prefix_size`` samples in generation order are classified
(not a random subsample), so the plotted points stay tied to the draw order.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence

import pandas as pd

from .constants import (
    LOW_RISK_THRESHOLD,
    MEDIUM_RISK_THRESHOLD,
    ROUND_DECIMALS,
    SCATTER_PREFIX_SIZE,
)
from .exceptions import ValidationError
from .sampler import Population
from .types import ScatterPointDict

__all__ = [
    "RiskTier",
    "ScatterPoint",
    "TierBreakdown",
    "classify_tier",
    "classify_scatter",
    "risk_breakdown",
    "scatter_frame",
]


class RiskTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class ScatterPoint:
    market_share_pct: float
    value: float
    risk_tier: RiskTier

    def to_dict(self) -> ScatterPointDict:
        return ScatterPointDict(
            market_share_pct=self.market_share_pct,
            value=self.value,
            risk_tier=self.risk_tier.value,
        )


@dataclass(frozen=True)
class TierBreakdown:
    count: int
    share_pct: float


def classify_tier(retention: float) -> RiskTier:
    """Map a retention fraction to its risk tier (strict lower bounds)."""
    if retention > LOW_RISK_THRESHOLD:
        return RiskTier.LOW
    if retention > MEDIUM_RISK_THRESHOLD:
        return RiskTier.MEDIUM
    return RiskTier.HIGH


def classify_scatter(
    population: Population,
    prefix_size: int = SCATTER_PREFIX_SIZE,
) -> List[ScatterPoint]:
    """Classify the first *prefix_size* samples.

    Output length is ``min(prefix_size, len(population))``.
    """
    if prefix_size < 0:
        raise ValidationError(f"prefix_size must be non-negative, got {prefix_size}.")
    head = population.head(prefix_size)
    return [
        ScatterPoint(
            market_share_pct=round(r * 100.0, ROUND_DECIMALS),
            value=round(v, ROUND_DECIMALS),
            risk_tier=classify_tier(r),
        )
        for v, r in zip(head.values.tolist(), head.retention.tolist())
    ]


def risk_breakdown(points: Sequence[ScatterPoint]) -> Dict[RiskTier, TierBreakdown]:
    """Count and share per tier for the scatter legend.

    Every tier is present, in Low/Medium/High order. Shares are 0 when
    there are no points.
    """
    counts = {tier: 0 for tier in RiskTier}
    for p in points:
        counts[p.risk_tier] += 1
    total = len(points)
    return {
        tier: TierBreakdown(count=c, share_pct=100.0 * c / total if total else 0.0)
        for tier, c in counts.items()
    }


def scatter_frame(points: Sequence[ScatterPoint]) -> pd.DataFrame:
    """Scatter points as a DataFrame with a categorical ``risk_tier`` column."""
    return pd.DataFrame(
        {
            "market_share_pct": [p.market_share_pct for p in points],
            "value": [p.value for p in points],
            "risk_tier": pd.Categorical(
                [p.risk_tier.value for p in points],
                categories=[t.value for t in RiskTier],
            ),
        }
    )
