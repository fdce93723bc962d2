"""
Configuration management module for NPVSim.

Purpose
-------
Centralized configuration using Pydantic models for type-safe parameter management,
validation, and serialization. Supports environment variables, JSON configs,
and programmatic defaults.

Design Principles
-----------------
- Type-safe: Pydantic enforces types and validates ranges
- Immutable: Frozen models prevent accidental mutation
- Serializable: Easy conversion to/from JSON for calibration files
- Environment-aware: Supports .env files via AppSettings
- Defaults: Built-in calibration reproduces the reference dashboard

Example
-------
>>> from src.config import SamplerConfig, EngineConfig, CalibrationConfig
>>> sampler = SamplerConfig(n_sims=5_000, seed=42)
>>> engine_cfg = EngineConfig(sampler=sampler, bin_count=20)
>>>
>>> # Serialize to dict/JSON
>>> data = engine_cfg.model_dump()
>>> json_str = CalibrationConfig.default().model_dump_json()
>>>
>>> # Load from dict/JSON
>>> loaded = CalibrationConfig.model_validate_json(json_str)
"""

from __future__ import annotations
from typing import Dict, List, Literal, Optional
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    N_SIMULATIONS,
    FLOOR_VALUE,
    RETENTION_SIGMA,
    MIN_RETENTION,
    MAX_RETENTION,
    DEFAULT_BIN_COUNT,
    SCATTER_PREFIX_SIZE,
    DEFAULT_CACHE_SIZE,
    DEFAULT_MAX_RESAMPLES,
    HORIZON_YEARS,
)

__all__ = [
    "ScenarioParametersConfig",
    "SamplerConfig",
    "CalibrationConfig",
    "EngineConfig",
    "AppSettings",
]


# ---------------------------------------------------------------------------
# Scenario Parameters
# ---------------------------------------------------------------------------

class ScenarioParametersConfig(BaseModel):
    """
    Distribution parameters for one named scenario.

    Attributes
    ----------
    mean_value : float
        Mean of the sampled value (billions).
    std_dev_value : float
        Standard deviation of the sampled value. Must be > 0.
    mean_retention : float
        Mean retention (market share) as a fraction in (0, 1).

    Examples
    --------
    >>> ScenarioParametersConfig(mean_value=89.4, std_dev_value=11.2, mean_retention=0.749)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    mean_value: float = Field(description="Mean sampled value")
    std_dev_value: float = Field(gt=0, description="Standard deviation of sampled value")
    mean_retention: float = Field(gt=0, lt=1, description="Mean retention fraction")


# ---------------------------------------------------------------------------
# Sampler Configuration
# ---------------------------------------------------------------------------

class SamplerConfig(BaseModel):
    """
    Configuration for population sampling.

    Attributes
    ----------
    n_sims : int
        Population size (default 10,000).
    floor_value : float
        Lower clamp for sampled values.
    retention_sigma : float
        Scale of the shared normal variate on retention.
    min_retention, max_retention : float
        Clamp bounds for retention; min must be below max.
    seed : int, optional
        Random seed for reproducibility. If None, every run draws fresh entropy.

    Examples
    --------
    >>> config = SamplerConfig(n_sims=2_000, seed=7)
    >>> config.floor_value
    50.0
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    n_sims: int = Field(
        default=N_SIMULATIONS,
        ge=1,
        le=1_000_000,
        description="Number of samples per population"
    )
    floor_value: float = Field(
        default=FLOOR_VALUE,
        description="Lower clamp for sampled values"
    )
    retention_sigma: float = Field(
        default=RETENTION_SIGMA,
        gt=0,
        description="Retention sensitivity to the shared normal variate"
    )
    min_retention: float = Field(
        default=MIN_RETENTION,
        ge=0,
        le=1,
        description="Lower retention clamp"
    )
    max_retention: float = Field(
        default=MAX_RETENTION,
        ge=0,
        le=1,
        description="Upper retention clamp"
    )
    seed: Optional[int] = Field(
        default=None,
        ge=0,
        description="Random seed for reproducibility"
    )

    @model_validator(mode="after")
    def validate_retention_bounds(self):
        """Ensure min_retention < max_retention."""
        if self.min_retention >= self.max_retention:
            raise ValueError(
                f"min_retention ({self.min_retention}) must be < "
                f"max_retention ({self.max_retention})"
            )
        return self


# ---------------------------------------------------------------------------
# Calibration
# ---------------------------------------------------------------------------

class CalibrationConfig(BaseModel):
    """
    Scenario calibration: distribution parameters and growth curves.

    The keys of ``scenarios`` define the recognized scenario selectors;
    every key must have a growth curve with one factor per projection year.

    Attributes
    ----------
    scenarios : dict of str -> ScenarioParametersConfig
        Sampling parameters per scenario key.
    growth_factors : dict of str -> list of float
        Positional growth factors applied to the projection years.
    years : list of int
        Strictly increasing projection years.

    Examples
    --------
    >>> calibration = CalibrationConfig.default()
    >>> sorted(calibration.scenarios)
    ['all', 'base', 'conservative', 'optimistic']
    >>> calibration.growth_factors["base"][0]
    0.15
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    scenarios: Dict[str, ScenarioParametersConfig] = Field(
        min_length=1,
        description="Sampling parameters per scenario key"
    )
    growth_factors: Dict[str, List[float]] = Field(
        description="Growth factor curve per scenario key"
    )
    years: List[int] = Field(
        default_factory=lambda: list(HORIZON_YEARS),
        min_length=1,
        description="Projection years"
    )

    @field_validator("years")
    @classmethod
    def validate_years_increasing(cls, v):
        """Years must be strictly increasing."""
        if any(b <= a for a, b in zip(v, v[1:])):
            raise ValueError(f"years must be strictly increasing, got {v}")
        return v

    @model_validator(mode="after")
    def validate_curves(self):
        """Scenario keys must match and every curve must span the horizon."""
        missing = set(self.scenarios) ^ set(self.growth_factors)
        if missing:
            raise ValueError(
                f"scenarios and growth_factors must share keys; "
                f"mismatched: {sorted(missing)}"
            )
        for key, curve in self.growth_factors.items():
            if len(curve) != len(self.years):
                raise ValueError(
                    f"growth_factors[{key!r}] has {len(curve)} entries, "
                    f"expected {len(self.years)} (one per year)"
                )
        return self

    @classmethod
    def default(cls) -> "CalibrationConfig":
        """Return the built-in calibration."""
        from .scenario import DEFAULT_SCENARIO_PARAMETERS, DEFAULT_GROWTH_FACTORS

        return cls(
            scenarios={
                key: ScenarioParametersConfig(
                    mean_value=p.mean_value,
                    std_dev_value=p.std_dev_value,
                    mean_retention=p.mean_retention,
                )
                for key, p in DEFAULT_SCENARIO_PARAMETERS.items()
            },
            growth_factors={k: list(v) for k, v in DEFAULT_GROWTH_FACTORS.items()},
            years=list(HORIZON_YEARS),
        )


# ---------------------------------------------------------------------------
# Engine Configuration
# ---------------------------------------------------------------------------

class EngineConfig(BaseModel):
    """
    Configuration for the analytics pipeline.

    Attributes
    ----------
    sampler : SamplerConfig
        Population sampling parameters.
    bin_count : int
        Histogram bins over [min, max].
    scatter_prefix : int
        Leading samples shown in the risk scatter.
    max_resamples : int
        Resampling attempts after a degenerate value range.
    cache_enabled : bool
        Reuse results of seeded runs keyed by (scenario, seed).
    cache_size : int
        Maximum number of cached results; the least recently used is evicted.

    Examples
    --------
    >>> EngineConfig(bin_count=20, cache_enabled=True).sampler.n_sims
    10000
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    sampler: SamplerConfig = Field(
        default_factory=SamplerConfig,
        description="Sampling parameters"
    )
    bin_count: int = Field(
        default=DEFAULT_BIN_COUNT,
        ge=1,
        le=10_000,
        description="Histogram bin count"
    )
    scatter_prefix: int = Field(
        default=SCATTER_PREFIX_SIZE,
        ge=0,
        description="Scatter prefix size"
    )
    max_resamples: int = Field(
        default=DEFAULT_MAX_RESAMPLES,
        ge=0,
        le=100,
        description="Resampling attempts on degenerate ranges"
    )
    cache_enabled: bool = Field(
        default=False,
        description="Cache seeded results"
    )
    cache_size: int = Field(
        default=DEFAULT_CACHE_SIZE,
        ge=1,
        description="Maximum cached results (least recently used evicted)"
    )


# ---------------------------------------------------------------------------
# Application Settings (Environment Variables)
# ---------------------------------------------------------------------------

class AppSettings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Supports .env files for local development. Environment variables
    should be prefixed with NPVSIM_ (e.g., NPVSIM_LOG_LEVEL=DEBUG).

    Attributes
    ----------
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR"
    default_scenario : str
        Scenario used when the CLI gets no --scenario
    seed : int, optional
        Default seed for CLI runs
    calibration_path : Path, optional
        JSON calibration file replacing the built-in calibration

    Examples
    --------
    >>> settings = AppSettings()
    >>> settings.log_level
    'WARNING'
    """

    model_config = SettingsConfigDict(
        env_prefix="NPVSIM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )
    default_scenario: str = Field(
        default="all",
        min_length=1,
        description="Default scenario selector"
    )
    seed: Optional[int] = Field(
        default=None,
        ge=0,
        description="Default random seed"
    )
    calibration_path: Optional[Path] = Field(
        default=None,
        description="Calibration JSON file"
    )
