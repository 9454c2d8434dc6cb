"""Insight-driven portfolio construction around the equilibrium prior."""

from blconstruct.construction._config import (
    ConstructionConfig,
    DegradedTargetPolicy,
    InsightReturnMethod,
    WeightingType,
)
from blconstruct.construction._orchestrator import (
    ConstructionState,
    PortfolioConstructionModel,
    PortfolioConstructionOrchestrator,
)
from blconstruct.construction._types import (
    Insight,
    InsightDirection,
    PortfolioTarget,
)
from blconstruct.construction._weighting import (
    EqualWeighting,
    MeanVarianceWeighting,
    TargetWeighting,
    build_weighting,
)

__all__ = [
    "ConstructionConfig",
    "ConstructionState",
    "DegradedTargetPolicy",
    "EqualWeighting",
    "Insight",
    "InsightDirection",
    "InsightReturnMethod",
    "MeanVarianceWeighting",
    "PortfolioConstructionModel",
    "PortfolioConstructionOrchestrator",
    "PortfolioTarget",
    "TargetWeighting",
    "WeightingType",
    "build_weighting",
]
