"""Analytics pipeline for NPVSim

Runs one full recomputation for a scenario selection:

    sample -> statistics -> {histogram, trajectory}
    sample -> risk scatter

plus the static scenario table. Each run owns its population; nothing is
shared between runs except an optional cache of seeded results.

Design goals
------------
- Pure recomputation per selection; unseeded runs are never cached.
- Unknown selectors are rejected before any sampling.
- A degenerate value range (max == min) is recovered by resampling from
  the same generator, up to ``max_resamples`` times.

Typical usage
-------------
>>> engine = AnalyticsEngine()
>>> result = engine.run("base", seed=42)
>>> result.statistics.median > 50
True
>>> [p.year for p in result.trajectory]
[2026, 2027, 2028, 2029, 2030, 2031]
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from .aggregation import SummaryStatistics, compute_statistics
from .config import CalibrationConfig, EngineConfig
from .exceptions import DegenerateRangeError, UnknownScenarioError, ValidationError
from .histogram import HistogramBin, build_histogram
from .risk import ScatterPoint, classify_scatter
from .sampler import Population, generate_from_config
from .scenario import ScenarioRow, known_scenarios, scenario_table
from .serialization import SCHEMA_VERSION
from .trajectory import TrajectoryPoint, project_trajectory
from .types import AnalyticsResultDict

__all__ = [
    "AnalyticsResult",
    "AnalyticsEngine",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AnalyticsResult:
    scenario: str
    seed: Optional[int]
    population: Population
    statistics: SummaryStatistics
    histogram: Tuple[HistogramBin, ...]
    trajectory: Tuple[TrajectoryPoint, ...]
    scatter: Tuple[ScatterPoint, ...]
    scenario_table: Tuple[ScenarioRow, ...]

    def to_dict(self) -> AnalyticsResultDict:
        """Structured payload for display layers (population excluded)."""
        return AnalyticsResultDict(
            schema_version=SCHEMA_VERSION,
            scenario=self.scenario,
            seed=self.seed,
            statistics=self.statistics.to_dict(),
            histogram=[b.to_dict() for b in self.histogram],
            trajectory=[p.to_dict() for p in self.trajectory],
            scatter=[p.to_dict() for p in self.scatter],
            scenario_table=[row.to_dict() for row in self.scenario_table],
        )


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class AnalyticsEngine:
    """Pipeline invoked once per scenario selection."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        calibration: Optional[CalibrationConfig] = None,
    ):
        self.cfg = config if config is not None else EngineConfig()
        self.calibration = calibration
        self._cache: OrderedDict[Tuple[str, int], AnalyticsResult] = OrderedDict()

    @property
    def scenarios(self) -> Tuple[str, ...]:
        return known_scenarios(self.calibration)

    # -------------------- Single selection --------------------
    def run(self, scenario_key: str, seed: Optional[int] = None) -> AnalyticsResult:
        """Recompute every output for *scenario_key*.

        Parameters
        ----------
        scenario_key : str
            Scenario selector.
        seed : int, optional
            Overrides ``config.sampler.seed``. Runs without any seed draw
            fresh entropy and bypass the cache.

        Raises
        ------
        UnknownScenarioError
            If *scenario_key* is not recognized.
        ValidationError
            If the seed is negative.
        DegenerateRangeError
            If every attempt produced a zero-width value range.
        """
        if scenario_key not in self.scenarios:
            raise UnknownScenarioError(scenario_key, self.scenarios)

        seed = seed if seed is not None else self.cfg.sampler.seed
        if seed is not None and seed < 0:
            raise ValidationError(f"seed must be non-negative, got {seed}.")
        cache_key = (scenario_key, seed) if seed is not None else None
        if self.cfg.cache_enabled and cache_key in self._cache:
            logger.debug("Cache hit for scenario %r seed %s", scenario_key, seed)
            self._cache.move_to_end(cache_key)
            return self._cache[cache_key]

        rng = np.random.default_rng(seed)
        population, stats, histogram = self._sample_and_bin(scenario_key, rng)

        result = AnalyticsResult(
            scenario=scenario_key,
            seed=seed,
            population=population,
            statistics=stats,
            histogram=tuple(histogram),
            trajectory=tuple(project_trajectory(scenario_key, stats, calibration=self.calibration)),
            scatter=tuple(classify_scatter(population, self.cfg.scatter_prefix)),
            scenario_table=tuple(scenario_table()),
        )
        logger.info(
            "Scenario %r: n=%d median=%.1f p10=%.1f p90=%.1f above80=%.1f%%",
            scenario_key, stats.n, stats.median, stats.p10, stats.p90, stats.above_80_pct,
        )

        if self.cfg.cache_enabled and cache_key is not None:
            self._cache[cache_key] = result
            while len(self._cache) > self.cfg.cache_size:
                self._cache.popitem(last=False)
        return result

    def _sample_and_bin(
        self, scenario_key: str, rng: np.random.Generator
    ) -> Tuple[Population, SummaryStatistics, List[HistogramBin]]:
        attempts = self.cfg.max_resamples + 1
        attempt = 0
        while True:
            attempt += 1
            population = generate_from_config(
                scenario_key, self.cfg.sampler, rng=rng, calibration=self.calibration
            )
            stats = compute_statistics(population)
            try:
                histogram = build_histogram(population, stats, self.cfg.bin_count)
            except DegenerateRangeError:
                if attempt == attempts:
                    raise
                logger.warning(
                    "Degenerate value range for scenario %r (attempt %d/%d); resampling",
                    scenario_key, attempt, attempts,
                )
                continue
            return population, stats, histogram

    # -------------------- All selections --------------------
    def run_all(self, seed: Optional[int] = None) -> Dict[str, AnalyticsResult]:
        """Run every recognized scenario (same seed for each, if given)."""
        return {key: self.run(key, seed=seed) for key in self.scenarios}

    def clear_cache(self) -> None:
        self._cache.clear()
