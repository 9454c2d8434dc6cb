"""Configuration for the portfolio construction orchestrator."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from blconstruct.exceptions import ConfigurationError
from blconstruct.moments._config import EquilibriumConfig, ReturnsMatrixConfig
from blconstruct.returns._config import ReturnSeriesConfig


class InsightReturnMethod(str, Enum):
    """How an insight is turned into a recorded return.

    ``FIXED`` records ``insight_return`` for every insight.
    ``MAGNITUDE`` records ``direction * magnitude``, falling back to
    ``insight_return`` for insights without a magnitude.
    """

    FIXED = "fixed"
    MAGNITUDE = "magnitude"


class WeightingType(str, Enum):
    """Target weighting scheme selection."""

    MEAN_VARIANCE = "mean_variance"
    EQUAL = "equal"


class DegradedTargetPolicy(str, Enum):
    """What happens to the last good targets after a failed cycle."""

    CLEAR = "clear"
    RETAIN = "retain"


@dataclass(frozen=True)
class ConstructionConfig:
    """Immutable configuration for :class:`PortfolioConstructionOrchestrator`.

    Parameters
    ----------
    series : ReturnSeriesConfig
        Per-instrument return window configuration.
    matrix : ReturnsMatrixConfig
        Returns matrix alignment configuration.
    equilibrium : EquilibriumConfig
        Equilibrium estimator configuration.
    insight_return : float
        Return recorded per insight under the ``FIXED`` method.
    insight_return_method : InsightReturnMethod
        How insights map to recorded returns.
    weighting : WeightingType
        Scheme mapping the equilibrium result to target weights.
    degraded_policy : DegradedTargetPolicy
        Whether ``last_targets`` survives a failed cycle.
    """

    series: ReturnSeriesConfig = field(default_factory=ReturnSeriesConfig)
    matrix: ReturnsMatrixConfig = field(default_factory=ReturnsMatrixConfig)
    equilibrium: EquilibriumConfig = field(default_factory=EquilibriumConfig)
    insight_return: float = 0.1
    insight_return_method: InsightReturnMethod = InsightReturnMethod.FIXED
    weighting: WeightingType = WeightingType.MEAN_VARIANCE
    degraded_policy: DegradedTargetPolicy = DegradedTargetPolicy.CLEAR

    def __post_init__(self) -> None:
        if not math.isfinite(self.insight_return):
            raise ConfigurationError(
                f"insight_return must be finite, got {self.insight_return}"
            )

    # -- factory methods -----------------------------------------------------

    @classmethod
    def for_minimal(cls) -> ConstructionConfig:
        """Two-observation windows with placeholder backfill."""
        return cls(series=ReturnSeriesConfig.for_minimal())

    @classmethod
    def for_magnitude_returns(cls) -> ConstructionConfig:
        """Record signed insight magnitudes as returns."""
        return cls(insight_return_method=InsightReturnMethod.MAGNITUDE)
