"""Factory for the skfolio covariance estimators behind the prior."""

from __future__ import annotations

from skfolio.moments import (
    OAS,
    EmpiricalCovariance,
    LedoitWolf,
    ShrunkCovariance,
)
from skfolio.moments.covariance._base import BaseCovariance

from blconstruct.moments._config import CovEstimatorType, EquilibriumConfig


def build_cov_estimator(config: EquilibriumConfig | None = None) -> BaseCovariance:
    """Build a skfolio covariance estimator from *config*.

    Nearest-positive-definite projection is disabled on every estimator
    so the fitted ``covariance_`` is the estimator's raw output;
    symmetry and regularisation are handled by the caller.

    Parameters
    ----------
    config : EquilibriumConfig or None
        Equilibrium configuration.  Defaults to ``EquilibriumConfig()``
        (sample covariance, ``ddof=1``).

    Returns
    -------
    BaseCovariance
        A fitted-ready skfolio covariance estimator.
    """
    if config is None:
        config = EquilibriumConfig()

    match config.cov_estimator:
        case CovEstimatorType.EMPIRICAL:
            return EmpiricalCovariance(ddof=1, nearest=False)
        case CovEstimatorType.LEDOIT_WOLF:
            return LedoitWolf(nearest=False)
        case CovEstimatorType.OAS:
            return OAS(nearest=False)
        case CovEstimatorType.SHRUNK:
            return ShrunkCovariance(
                shrinkage=config.shrunk_cov_shrinkage, nearest=False
            )
