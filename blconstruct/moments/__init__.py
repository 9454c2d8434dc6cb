"""Returns matrix assembly and equilibrium prior estimation."""

from blconstruct.moments._config import (
    AlignmentMethod,
    CovEstimatorType,
    EquilibriumConfig,
    ReturnsMatrixConfig,
    RiskAversionMethod,
)
from blconstruct.moments._equilibrium import (
    EquilibriumReturnsEstimator,
    market_cap_weights,
)
from blconstruct.moments._factory import build_cov_estimator
from blconstruct.moments._matrix import ReturnsMatrixBuilder
from blconstruct.moments._result import EquilibriumResult

__all__ = [
    "AlignmentMethod",
    "CovEstimatorType",
    "EquilibriumConfig",
    "EquilibriumResult",
    "EquilibriumReturnsEstimator",
    "ReturnsMatrixBuilder",
    "ReturnsMatrixConfig",
    "RiskAversionMethod",
    "build_cov_estimator",
    "market_cap_weights",
]
