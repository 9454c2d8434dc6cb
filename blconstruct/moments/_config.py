"""Configuration for returns matrix assembly and equilibrium estimation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from blconstruct.exceptions import ConfigurationError


class AlignmentMethod(str, Enum):
    """How per-instrument series are aligned into matrix rows.

    ``INTERSECTION`` joins on timestamps present in every series.
    ``POSITIONAL`` pairs the k most recent observations of each series,
    k being the shortest series length, assuming the i-th observation
    of every series refers to the same period.
    """

    INTERSECTION = "intersection"
    POSITIONAL = "positional"


class CovEstimatorType(str, Enum):
    """Covariance estimator selection."""

    EMPIRICAL = "empirical"
    LEDOIT_WOLF = "ledoit_wolf"
    OAS = "oas"
    SHRUNK = "shrunk"


class RiskAversionMethod(str, Enum):
    """Risk-aversion coefficient source for reverse optimisation."""

    FIXED = "fixed"
    IMPLIED = "implied"


@dataclass(frozen=True)
class ReturnsMatrixConfig:
    """Immutable configuration for :class:`ReturnsMatrixBuilder`.

    Parameters
    ----------
    alignment : AlignmentMethod
        Row alignment strategy.
    min_rows : int
        Minimum number of aligned rows (a covariance needs two).
    min_assets : int
        Minimum number of distinct instruments in the cross-section.
    drop_empty_rows : bool
        Drop rows whose absolute return sum is zero before counting.
    positional_fallback : bool
        Under ``INTERSECTION``, retry with ``POSITIONAL`` alignment when
        fewer than ``min_rows`` common timestamps remain.
    """

    alignment: AlignmentMethod = AlignmentMethod.INTERSECTION
    min_rows: int = 2
    min_assets: int = 2
    drop_empty_rows: bool = False
    positional_fallback: bool = True

    def __post_init__(self) -> None:
        if self.min_rows < 2:
            raise ConfigurationError(
                f"min_rows must be >= 2, got {self.min_rows}"
            )
        if self.min_assets < 2:
            raise ConfigurationError(
                f"min_assets must be >= 2, got {self.min_assets}"
            )

    # -- factory methods -----------------------------------------------------

    @classmethod
    def for_positional(cls) -> ReturnsMatrixConfig:
        """Index-aligned rows with empty rows dropped."""
        return cls(alignment=AlignmentMethod.POSITIONAL, drop_empty_rows=True)


@dataclass(frozen=True)
class EquilibriumConfig:
    """Immutable configuration for :class:`EquilibriumReturnsEstimator`.

    Parameters
    ----------
    risk_aversion : float
        Risk-aversion coefficient used by the ``FIXED`` method.
    risk_aversion_method : RiskAversionMethod
        ``FIXED`` uses ``risk_aversion``; ``IMPLIED`` derives it from
        the annualised excess return and variance of the weighted
        portfolio.
    cov_estimator : CovEstimatorType
        Which covariance estimator to use.
    shrunk_cov_shrinkage : float
        Shrinkage intensity for ``ShrunkCovariance``.
    regularization : float
        Ridge ``epsilon`` added to the diagonal of a singular covariance
        or when assets outnumber observations.
    singular_tolerance : float
        Smallest eigenvalue at or below which the covariance is treated
        as singular.
    risk_free_rate : float
        Annual risk-free rate for the ``IMPLIED`` method.
    annualization_factor : int
        Periods per year for the ``IMPLIED`` method.
    """

    risk_aversion: float = 2.5
    risk_aversion_method: RiskAversionMethod = RiskAversionMethod.FIXED
    cov_estimator: CovEstimatorType = CovEstimatorType.EMPIRICAL
    shrunk_cov_shrinkage: float = 0.1
    regularization: float = 1e-8
    singular_tolerance: float = 1e-12
    risk_free_rate: float = 0.0
    annualization_factor: int = 252

    def __post_init__(self) -> None:
        if self.risk_aversion <= 0:
            raise ConfigurationError(
                f"risk_aversion must be strictly positive, got {self.risk_aversion}"
            )
        if self.regularization <= 0:
            raise ConfigurationError(
                f"regularization must be strictly positive, got {self.regularization}"
            )
        if not 0.0 <= self.shrunk_cov_shrinkage <= 1.0:
            raise ConfigurationError(
                "shrunk_cov_shrinkage must be in [0, 1], "
                f"got {self.shrunk_cov_shrinkage}"
            )
        if self.annualization_factor < 1:
            raise ConfigurationError(
                "annualization_factor must be a positive integer, "
                f"got {self.annualization_factor}"
            )

    # -- factory methods -----------------------------------------------------

    @classmethod
    def for_sample(cls) -> EquilibriumConfig:
        """Sample covariance with a fixed risk aversion of 2.5."""
        return cls()

    @classmethod
    def for_implied_risk_aversion(
        cls, risk_free_rate: float = 0.0
    ) -> EquilibriumConfig:
        """Sample covariance, risk aversion implied by the data."""
        return cls(
            risk_aversion_method=RiskAversionMethod.IMPLIED,
            risk_free_rate=risk_free_rate,
        )

    @classmethod
    def for_ledoit_wolf(cls) -> EquilibriumConfig:
        """Ledoit-Wolf shrunk covariance with a fixed risk aversion."""
        return cls(cov_estimator=CovEstimatorType.LEDOIT_WOLF)
