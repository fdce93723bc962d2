"""
NPVSim: Monte Carlo investment analytics

Samples correlated (value, retention) outcomes for a named scenario and
derives summary statistics, a probability histogram, a multi-year
projection and a risk-tier scatter, next to a static scenario table.

Modules
-------
- sampler      : Box-Muller sampling of the scenario population
- aggregation  : Order statistics and indicator fractions
- histogram    : Sparse probability histogram of values
- trajectory   : Growth-curve projection of median / p10 / p90
- risk         : Risk tier classification of the scatter prefix
- scenario     : Calibration tables and the scenario comparison table
- simulation   : Pipeline orchestration (AnalyticsEngine)

"""

from .simulation import AnalyticsEngine, AnalyticsResult
from .exceptions import NPVSimError, UnknownScenarioError
from . import constants
