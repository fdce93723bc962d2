"""
Custom exceptions for NPVSim.

Purpose
-------
Provides a unified exception hierarchy for consistent error handling
across all NPVSim modules. All exceptions inherit from NPVSimError,
enabling catch-all handling when needed.

Exception Hierarchy
-------------------
NPVSimError (base)
├── ConfigurationError - Invalid configuration or parameters
│   └── UnknownScenarioError - Scenario key outside the calibrated set
└── ValidationError - Data validation failures
    ├── EmptyPopulationError - Statistics requested over zero samples
    └── DegenerateRangeError - All sampled values identical (max == min)

Usage
-----
>>> from src.exceptions import UnknownScenarioError, NPVSimError
>>>
>>> try:
...     population = generate_population("extreme")
... except UnknownScenarioError as e:
...     print(e.key, e.known)
>>>
>>> # Catch all NPVSim exceptions
>>> try:
...     result = engine.run("base")
... except NPVSimError as e:
...     print(f"NPVSim error: {e}")
"""

from typing import Iterable, Optional


class NPVSimError(Exception):
    """
    Base exception for all NPVSim errors.

    Examples
    --------
    >>> try:
    ...     engine.run(scenario)
    ... except NPVSimError as e:
    ...     logger.error("Simulation failed: %s", e)
    """
    pass


class ConfigurationError(NPVSimError):
    """
    Invalid configuration or parameters.

    Raised when calibration or engine configuration is unusable, such as:
    - Non-positive value standard deviation
    - Growth curve length not matching the projection horizon
    - Unknown scenario selector
    - Calibration payload that is not a JSON object
    """
    pass


class UnknownScenarioError(ConfigurationError):
    """
    Scenario key is not part of the calibrated set.

    The input is rejected before any sampling happens; there is no
    fallback to a default parameter set.

    Attributes
    ----------
    key : str
        The rejected selector.
    known : tuple of str
        Recognized selectors, sorted.

    Examples
    --------
    >>> raise UnknownScenarioError("extreme", ["all", "base"])
    Traceback (most recent call last):
    ...
    UnknownScenarioError: Unknown scenario 'extreme'. Expected one of: all, base.
    """

    def __init__(self, key: str, known: Optional[Iterable[str]] = None):
        self.key = key
        self.known = tuple(sorted(known)) if known is not None else ()
        message = f"Unknown scenario {key!r}."
        if self.known:
            message += f" Expected one of: {', '.join(self.known)}."
        super().__init__(message)


class ValidationError(NPVSimError):
    """
    Data validation failures.

    Raised when input data fails validation checks, such as:
    - Mismatched array lengths in a population
    - Empty populations
    - Zero-width value ranges
    """
    pass


class EmptyPopulationError(ValidationError):
    """
    Statistics requested over an empty population.

    Unreachable through the sampler (N > 0 by construction); hitting it
    indicates a logic error in the caller.
    """
    pass


class DegenerateRangeError(ValidationError):
    """
    All sampled values are identical so histogram bins have zero width.

    Practically impossible with continuous sampling. The engine recovers
    by resampling; direct callers may special-case a single bin instead.

    Examples
    --------
    >>> raise DegenerateRangeError(
    ...     "Cannot bin values: max == min == 50.0. "
    ...     "Resample or report a single-point distribution."
    ... )
    """
    pass
