"""Equilibrium (prior) returns by reverse mean-variance optimisation."""

from __future__ import annotations

import logging

import numpy as np
import numpy.typing as npt
import pandas as pd
from skfolio.moments.covariance._base import BaseCovariance
from sklearn.base import clone

from blconstruct.exceptions import (
    ConfigurationError,
    DataError,
    DegenerateInputError,
)
from blconstruct.moments._config import EquilibriumConfig, RiskAversionMethod
from blconstruct.moments._factory import build_cov_estimator
from blconstruct.moments._result import EquilibriumResult

logger = logging.getLogger(__name__)


def market_cap_weights(market_caps: pd.Series) -> pd.Series:
    """Normalise market capitalisations into market weights.

    Raises
    ------
    DataError
        If any capitalisation is negative or non-finite, or the total
        is not strictly positive.
    """
    caps = market_caps.astype(np.float64)
    if not np.isfinite(caps.to_numpy()).all() or (caps < 0).any():
        raise DataError("Market capitalisations must be finite and non-negative")
    total = caps.sum()
    if total <= 0:
        raise DataError(f"Total market capitalisation must be positive, got {total}")
    return caps / total


class EquilibriumReturnsEstimator:
    """Implied equilibrium returns and covariance from a returns matrix.

    Reverse optimisation recovers the expected returns under which the
    market portfolio is mean-variance optimal:

    .. math::

        \\Pi = \\delta \\, \\Sigma \\, w

    ``Σ`` is the sample covariance of the columns (``ddof=1``) unless
    another estimator is configured.  It is symmetrised exactly and, when
    singular or when assets outnumber observations, regularised as
    ``Σ + εI`` with ``ε = config.regularization``.

    Parameters
    ----------
    config : EquilibriumConfig or None
        Estimator configuration.  Defaults to ``EquilibriumConfig()``.
    cov_estimator : BaseCovariance or None
        Unfitted skfolio covariance estimator overriding
        ``config.cov_estimator``.  It is cloned before every fit and
        never mutated.
    """

    def __init__(
        self,
        config: EquilibriumConfig | None = None,
        cov_estimator: BaseCovariance | None = None,
    ) -> None:
        self.config = config if config is not None else EquilibriumConfig()
        self.cov_estimator = cov_estimator

    def estimate(
        self,
        returns: pd.DataFrame | npt.ArrayLike,
        weights: pd.Series | npt.ArrayLike | None = None,
        risk_aversion: float | None = None,
    ) -> EquilibriumResult:
        """Estimate (Π, Σ) from *returns*.

        Parameters
        ----------
        returns : pd.DataFrame or array-like, shape (n_obs, n_assets)
            Aligned period returns, one column per instrument.
        weights : pd.Series or array-like or None
            Market weights.  A Series is aligned on the columns; an
            array must be in column order.  Defaults to ``1 / n_assets``.
        risk_aversion : float or None
            Overrides the configured risk-aversion coefficient.

        Returns
        -------
        EquilibriumResult

        Raises
        ------
        DegenerateInputError
            If *returns* has no columns, fewer than two rows, or any
            non-finite value, or if the estimate itself is non-finite.
        DataError
            If *weights* cannot be aligned with the columns.
        ConfigurationError
            If *risk_aversion* is not strictly positive.
        """
        frame = self._validate_returns(returns)
        values = frame.to_numpy(dtype=np.float64)
        n_obs, n_assets = values.shape

        sigma = self._covariance(values)
        epsilon = 0.0
        if (
            n_assets > n_obs
            or np.linalg.eigvalsh(sigma).min() <= self.config.singular_tolerance
        ):
            epsilon = self.config.regularization
            sigma = sigma + epsilon * np.eye(n_assets)
            logger.debug(
                "Regularised singular covariance (%d assets, %d obs) with eps=%g",
                n_assets,
                n_obs,
                epsilon,
            )

        w = self._resolve_weights(weights, frame.columns)
        delta = self._resolve_risk_aversion(risk_aversion, values, sigma, w)

        mu = delta * sigma @ w
        if not np.isfinite(mu).all():
            raise DegenerateInputError("Equilibrium returns are not finite")

        columns = frame.columns
        return EquilibriumResult(
            mu=pd.Series(mu, index=columns),
            covariance=pd.DataFrame(sigma, index=columns, columns=columns),
            weights=pd.Series(w, index=columns),
            risk_aversion=delta,
            regularization=epsilon,
        )

    # -- internals -----------------------------------------------------------

    @staticmethod
    def _validate_returns(returns: pd.DataFrame | npt.ArrayLike) -> pd.DataFrame:
        if not isinstance(returns, pd.DataFrame):
            arr = np.asarray(returns)
            if arr.ndim != 2:
                raise DegenerateInputError(
                    f"Returns must be two-dimensional, got {arr.ndim} dimension(s)"
                )
            returns = pd.DataFrame(arr)

        n_obs, n_assets = returns.shape
        if n_assets == 0:
            raise DegenerateInputError("Returns matrix has no columns")
        if n_obs < 2:
            raise DegenerateInputError(
                f"Covariance needs at least 2 observations, got {n_obs}"
            )
        try:
            values = returns.to_numpy(dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise DataError("Returns matrix must be numeric") from exc
        if not np.isfinite(values).all():
            bad = returns.columns[~np.isfinite(values).all(axis=0)]
            raise DegenerateInputError(
                f"Returns matrix contains non-finite values in: {list(bad)}"
            )
        return returns

    def _covariance(self, values: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        if values.shape[1] == 1:
            raw = np.atleast_2d(np.var(values[:, 0], ddof=1))
        else:
            if self.cov_estimator is not None:
                estimator = clone(self.cov_estimator)
            else:
                estimator = build_cov_estimator(self.config)
            try:
                with np.errstate(over="ignore", invalid="ignore"):
                    estimator.fit(values)
            except (ValueError, np.linalg.LinAlgError) as exc:
                raise DegenerateInputError(
                    f"Covariance estimation failed: {exc}"
                ) from exc
            raw = np.asarray(estimator.covariance_, dtype=np.float64)
        if not np.isfinite(raw).all():
            raise DegenerateInputError("Covariance estimate is not finite")
        # elementwise addition commutes, so the result is exactly symmetric
        return (raw + raw.T) / 2.0

    @staticmethod
    def _resolve_weights(
        weights: pd.Series | npt.ArrayLike | None,
        columns: pd.Index,
    ) -> npt.NDArray[np.float64]:
        n_assets = len(columns)
        if weights is None:
            return np.full(n_assets, 1.0 / n_assets)

        if isinstance(weights, pd.Series):
            missing = [c for c in columns if c not in weights.index]
            if missing:
                raise DataError(f"No market weight for: {missing}")
            w = weights.reindex(columns).to_numpy(dtype=np.float64)
        else:
            w = np.asarray(weights, dtype=np.float64).ravel()
            if w.shape != (n_assets,):
                raise DataError(
                    f"Expected {n_assets} weights, got {w.shape[0]}"
                )

        if not np.isfinite(w).all():
            raise DegenerateInputError("Market weights contain non-finite values")
        return w

    def _resolve_risk_aversion(
        self,
        risk_aversion: float | None,
        values: npt.NDArray[np.float64],
        sigma: npt.NDArray[np.float64],
        w: npt.NDArray[np.float64],
    ) -> float:
        if risk_aversion is not None:
            if not risk_aversion > 0:
                raise ConfigurationError(
                    f"risk_aversion must be strictly positive, got {risk_aversion}"
                )
            return float(risk_aversion)

        if self.config.risk_aversion_method == RiskAversionMethod.FIXED:
            return float(self.config.risk_aversion)

        periods = self.config.annualization_factor
        with np.errstate(all="ignore"):
            annual_return = w @ ((1.0 + values.mean(axis=0)) ** periods - 1.0)
            annual_variance = w @ (periods * sigma) @ w
            delta = (annual_return - self.config.risk_free_rate) / annual_variance
        if not np.isfinite(delta) or delta <= 0:
            raise DegenerateInputError(
                f"Implied risk aversion is not strictly positive: {delta}"
            )
        return float(delta)
