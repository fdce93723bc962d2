"""
Unit tests for risk.py module.

Tests tier boundaries, scatter prefix length, generation-order selection
and rounding of plotted coordinates.
"""

import numpy as np
import pytest

from src.exceptions import ValidationError
from src.risk import (
    RiskTier,
    ScatterPoint,
    TierBreakdown,
    classify_scatter,
    classify_tier,
    risk_breakdown,
    scatter_frame,
)
from src.sampler import Population


class TestClassifyTier:
    """Tests for classify_tier() boundaries."""

    def test_boundary_078_is_medium(self):
        """0.78 exactly is Medium, not Low."""
        assert classify_tier(0.78) is RiskTier.MEDIUM

    def test_boundary_070_is_high(self):
        """0.70 exactly is High, not Medium."""
        assert classify_tier(0.70) is RiskTier.HIGH

    @pytest.mark.parametrize(
        "retention, tier",
        [
            (0.95, RiskTier.LOW),
            (0.7800001, RiskTier.LOW),
            (0.75, RiskTier.MEDIUM),
            (0.7000001, RiskTier.MEDIUM),
            (0.65, RiskTier.HIGH),
            (0.5, RiskTier.HIGH),
        ],
    )
    def test_tiers(self, retention, tier):
        assert classify_tier(retention) is tier

    def test_tier_values(self):
        """Tiers compare equal to their string labels."""
        assert RiskTier.LOW == "low"
        assert [t.value for t in RiskTier] == ["low", "medium", "high"]


class TestClassifyScatter:
    """Tests for classify_scatter()."""

    def test_prefix_of_full_population(self, base_population):
        """Default prefix keeps the first 800 samples."""
        points = classify_scatter(base_population)

        assert len(points) == 800

    def test_prefix_larger_than_population(self, small_population):
        """Output length is min(prefix_size, len(population))."""
        assert len(classify_scatter(small_population, prefix_size=800)) == 6
        assert len(classify_scatter(small_population, prefix_size=4)) == 4
        assert classify_scatter(small_population, prefix_size=0) == []

    def test_generation_order(self, base_population):
        """Points follow generation order, not sorted order."""
        points = classify_scatter(base_population, prefix_size=50)

        expected = [round(v, 1) for v in base_population.values[:50].tolist()]
        assert [p.value for p in points] == expected

    def test_rounding_and_tier(self):
        """Market share is retention * 100 rounded to 1 decimal; value rounded to 1 decimal."""
        population = Population(
            values=np.array([89.4449, 120.06, 55.0]),
            retention=np.array([0.7349, 0.81, 0.70]),
        )
        points = classify_scatter(population)

        assert points[0] == ScatterPoint(market_share_pct=73.5, value=89.4, risk_tier=RiskTier.MEDIUM)
        assert points[1] == ScatterPoint(market_share_pct=81.0, value=120.1, risk_tier=RiskTier.LOW)
        assert points[2] == ScatterPoint(market_share_pct=70.0, value=55.0, risk_tier=RiskTier.HIGH)

    def test_tier_uses_unrounded_retention(self):
        """0.7801 rounds to 78.0% on screen but is still Low."""
        population = Population(values=np.array([90.0]), retention=np.array([0.7801]))
        point = classify_scatter(population)[0]

        assert point.market_share_pct == 78.0
        assert point.risk_tier is RiskTier.LOW

    def test_negative_prefix(self, small_population):
        with pytest.raises(ValidationError):
            classify_scatter(small_population, prefix_size=-1)


class TestRiskBreakdown:
    """Tests for risk_breakdown() and scatter_frame()."""

    def test_counts(self, small_population):
        """Retention 0.50, 0.75, 0.76, 0.80, 0.90, 0.60 -> 2 low, 2 medium, 2 high."""
        breakdown = risk_breakdown(classify_scatter(small_population))

        assert {t: b.count for t, b in breakdown.items()} == {RiskTier.LOW: 2, RiskTier.MEDIUM: 2, RiskTier.HIGH: 2}

    def test_shares(self, small_population):
        """Shares are percentages of the plotted points."""
        breakdown = risk_breakdown(classify_scatter(small_population, prefix_size=4))

        # retention 0.50, 0.75, 0.76, 0.80
        assert breakdown[RiskTier.LOW] == TierBreakdown(count=1, share_pct=25.0)
        assert breakdown[RiskTier.MEDIUM] == TierBreakdown(count=2, share_pct=50.0)
        assert breakdown[RiskTier.HIGH] == TierBreakdown(count=1, share_pct=25.0)

    def test_every_tier_present(self):
        """Tiers without points are reported with zero."""
        breakdown = risk_breakdown([])

        assert list(breakdown) == [RiskTier.LOW, RiskTier.MEDIUM, RiskTier.HIGH]
        assert all(b == TierBreakdown(count=0, share_pct=0.0) for b in breakdown.values())

    def test_frame(self, small_population):
        df = scatter_frame(classify_scatter(small_population))

        assert list(df.columns) == ["market_share_pct", "value", "risk_tier"]
        assert list(df["risk_tier"].cat.categories) == ["low", "medium", "high"]

    def test_to_dict(self):
        point = ScatterPoint(market_share_pct=80.0, value=95.5, risk_tier=RiskTier.LOW)

        assert point.to_dict() == {"market_share_pct": 80.0, "value": 95.5, "risk_tier": "low"}
