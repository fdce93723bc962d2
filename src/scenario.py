"""
Scenario definitions for NPVSim

Purpose
-------
Holds the calibration constants that drive every run:
- ScenarioParameters per scenario key (sampling distribution).
- Growth factor curves per scenario key (trajectory projection).
- The static Scenario Table shown next to the simulation outputs.

Lookups go through ``resolve_parameters`` / ``resolve_growth_factors`` so a
custom ``CalibrationConfig`` can replace the built-in tables. An unknown key
always raises ``UnknownScenarioError``; there is no default fallback.

Typical usage
-------------
>>> params = resolve_parameters("base")
>>> params.mean_value
89.4
>>> resolve_growth_factors("optimistic")[-1]
1.05
>>> [row.name for row in scenario_table()]
['Conservative', 'Base Case', 'Optimistic']
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, List, Mapping, Optional, Tuple

import pandas as pd

from .exceptions import ConfigurationError, UnknownScenarioError
from .types import ScenarioRowDict

if TYPE_CHECKING:
    from .config import CalibrationConfig

__all__ = [
    "ScenarioParameters",
    "ScenarioRow",
    "SCENARIO_KEYS",
    "SCENARIO_COLORS",
    "DEFAULT_SCENARIO_PARAMETERS",
    "DEFAULT_GROWTH_FACTORS",
    "known_scenarios",
    "resolve_parameters",
    "resolve_growth_factors",
    "scenario_table",
    "scenario_table_frame",
]


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScenarioParameters:
    mean_value: float
    std_dev_value: float
    mean_retention: float

    def __post_init__(self):
        if not self.std_dev_value > 0:
            raise ConfigurationError(
                f"std_dev_value must be > 0, got {self.std_dev_value}."
            )


SCENARIO_KEYS: Tuple[str, ...] = ("all", "conservative", "base", "optimistic")

DEFAULT_SCENARIO_PARAMETERS: Mapping[str, ScenarioParameters] = MappingProxyType({
    "all": ScenarioParameters(mean_value=89.4, std_dev_value=14.3, mean_retention=0.749),
    "conservative": ScenarioParameters(mean_value=74.2, std_dev_value=8.5, mean_retention=0.70),
    "base": ScenarioParameters(mean_value=89.4, std_dev_value=11.2, mean_retention=0.749),
    "optimistic": ScenarioParameters(mean_value=108.7, std_dev_value=9.8, mean_retention=0.82),
})

# Fraction of the terminal value realized in each projection year.
DEFAULT_GROWTH_FACTORS: Mapping[str, Tuple[float, ...]] = MappingProxyType({
    "all": (0.15, 0.28, 0.42, 0.58, 0.75, 0.88),
    "conservative": (0.10, 0.20, 0.32, 0.45, 0.60, 0.72),
    "base": (0.15, 0.28, 0.42, 0.58, 0.75, 0.88),
    "optimistic": (0.20, 0.38, 0.55, 0.72, 0.88, 1.05),
})

SCENARIO_COLORS: Mapping[str, str] = MappingProxyType({
    "all": "#8b5cf6",
    "conservative": "#f59e0b",
    "base": "#3b82f6",
    "optimistic": "#10b981",
})


def known_scenarios(calibration: Optional[CalibrationConfig] = None) -> Tuple[str, ...]:
    """Return the recognized scenario keys for *calibration* (built-in if None)."""
    if calibration is None:
        return SCENARIO_KEYS
    return tuple(calibration.scenarios)


def resolve_parameters(
    key: str,
    calibration: Optional[CalibrationConfig] = None,
) -> ScenarioParameters:
    """Look up sampling parameters for *key*.

    Raises
    ------
    UnknownScenarioError
        If *key* is not a recognized scenario.
    """
    if calibration is None:
        try:
            return DEFAULT_SCENARIO_PARAMETERS[key]
        except (KeyError, TypeError):
            raise UnknownScenarioError(key, SCENARIO_KEYS) from None
    cfg = calibration.scenarios.get(key)
    if cfg is None:
        raise UnknownScenarioError(key, calibration.scenarios)
    return ScenarioParameters(
        mean_value=cfg.mean_value,
        std_dev_value=cfg.std_dev_value,
        mean_retention=cfg.mean_retention,
    )


def resolve_growth_factors(
    key: str,
    calibration: Optional[CalibrationConfig] = None,
) -> Tuple[float, ...]:
    """Look up the growth factor curve for *key*.

    Raises
    ------
    UnknownScenarioError
        If *key* is not a recognized scenario.
    """
    if calibration is None:
        try:
            return DEFAULT_GROWTH_FACTORS[key]
        except (KeyError, TypeError):
            raise UnknownScenarioError(key, SCENARIO_KEYS) from None
    curve = calibration.growth_factors.get(key)
    if curve is None:
        raise UnknownScenarioError(key, calibration.growth_factors)
    return tuple(curve)


# ---------------------------------------------------------------------------
# Scenario Table (static reference data, not derived from sampling)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScenarioRow:
    """One row of the scenario comparison table."""
    name: str
    target_value: float
    predicted_value: float
    probability_pct: float
    simulation_count: int
    display_color: str

    def to_dict(self) -> ScenarioRowDict:
        return ScenarioRowDict(**asdict(self))


_SCENARIO_TABLE: Tuple[ScenarioRow, ...] = (
    ScenarioRow("Conservative", 80.0, 74.2, 24.0, 2443, "#f59e0b"),
    ScenarioRow("Base Case", 80.0, 89.4, 51.0, 5050, "#3b82f6"),
    ScenarioRow("Optimistic", 80.0, 108.7, 25.0, 2507, "#10b981"),
)


def scenario_table() -> List[ScenarioRow]:
    """Return the fixed Conservative / Base Case / Optimistic comparison rows."""
    return list(_SCENARIO_TABLE)


def scenario_table_frame() -> pd.DataFrame:
    """Scenario table as a DataFrame (one row per scenario, indexed by name)."""
    return pd.DataFrame([asdict(row) for row in _SCENARIO_TABLE]).set_index("name")
