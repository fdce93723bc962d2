"""
Serialization module for NPVSim.

Purpose
-------
JSON persistence for calibrations (scenario parameters and growth curves)
and JSON export of pipeline results for display layers.

Design Principles
-----------------
- Type-safe: calibrations are validated through ``CalibrationConfig``
- Human-readable: indented JSON for easy editing
- Versioned: every file carries ``schema_version``; a mismatch warns

Example
-------
>>> from pathlib import Path
>>> from src.config import CalibrationConfig
>>> from src.serialization import save_calibration, load_calibration
>>>
>>> save_calibration(CalibrationConfig.default(), Path("calibration.json"))
>>> calibration = load_calibration(Path("calibration.json"))
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict
from pathlib import Path
import json
import logging
import warnings

from .config import CalibrationConfig
from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .simulation import AnalyticsResult
    from .types import AnalyticsResultDict

__all__ = [
    "SCHEMA_VERSION",
    "calibration_to_dict",
    "calibration_from_dict",
    "save_calibration",
    "load_calibration",
    "result_to_dict",
    "save_result",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Schema Version
# ---------------------------------------------------------------------------

SCHEMA_VERSION = "0.1.0"


def _check_schema_version(data: Dict[str, Any], source: str) -> None:
    schema_version = data.get("schema_version", "0.0.0")
    if schema_version != SCHEMA_VERSION:
        logger.warning("Schema version %s in %s differs from %s", schema_version, source, SCHEMA_VERSION)
        warnings.warn(
            f"Schema version {schema_version} in {source} differs from current "
            f"version {SCHEMA_VERSION}. May encounter compatibility issues.",
            UserWarning,
        )


# ---------------------------------------------------------------------------
# Calibration Serialization
# ---------------------------------------------------------------------------

def calibration_to_dict(calibration: CalibrationConfig) -> Dict[str, Any]:
    """
    Convert CalibrationConfig to a JSON-ready dictionary.

    Parameters
    ----------
    calibration : CalibrationConfig
        Calibration to serialize

    Returns
    -------
    dict
        ``schema_version`` plus the calibration fields
    """
    return {"schema_version": SCHEMA_VERSION, **calibration.model_dump()}


def calibration_from_dict(data: Dict[str, Any], *, source: str = "<dict>") -> CalibrationConfig:
    """
    Create CalibrationConfig from a dictionary.

    Parameters
    ----------
    data : dict
        Dictionary as produced by ``calibration_to_dict``
    source : str
        Label used in schema-version warnings

    Returns
    -------
    CalibrationConfig
        Validated calibration

    Raises
    ------
    ConfigurationError
        If *data* is not a mapping (e.g. a JSON list or number).
    pydantic.ValidationError
        If the dictionary does not describe a valid calibration.
    """
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Calibration in {source} must be a JSON object, got {type(data).__name__}."
        )
    payload = dict(data)
    _check_schema_version(payload, source)
    payload.pop("schema_version", None)
    return CalibrationConfig.model_validate(payload)


def save_calibration(calibration: CalibrationConfig, path: Path) -> None:
    """
    Save a calibration to a JSON file.

    Examples
    --------
    >>> save_calibration(CalibrationConfig.default(), Path("calibration.json"))
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(calibration_to_dict(calibration), f, indent=2)


def load_calibration(path: Path) -> CalibrationConfig:
    """
    Load a calibration from a JSON file.

    Parameters
    ----------
    path : Path
        Input file path

    Returns
    -------
    CalibrationConfig
        Validated calibration

    Examples
    --------
    >>> calibration = load_calibration(Path("calibration.json"))
    >>> engine = AnalyticsEngine(calibration=calibration)
    """
    path = Path(path)
    with open(path, "r") as f:
        data = json.load(f)
    return calibration_from_dict(data, source=str(path))


# ---------------------------------------------------------------------------
# Result Serialization
# ---------------------------------------------------------------------------

def result_to_dict(result: AnalyticsResult) -> AnalyticsResultDict:
    """Structured payload of one pipeline run (raw population excluded)."""
    return result.to_dict()


def save_result(result: AnalyticsResult, path: Path) -> None:
    """
    Save a pipeline result to a JSON file.

    Examples
    --------
    >>> result = AnalyticsEngine().run("base", seed=42)
    >>> save_result(result, Path("results/base.json"))
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(result_to_dict(result), f, indent=2)
