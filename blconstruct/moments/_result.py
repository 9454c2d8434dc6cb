"""Equilibrium result value object."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import pandas as pd

from blconstruct.exceptions import DataError


@dataclass(frozen=True)
class EquilibriumResult:
    """Immutable output of :class:`EquilibriumReturnsEstimator`.

    Attributes
    ----------
    mu : pd.Series
        Implied equilibrium returns (Π), indexed by instrument.
    covariance : pd.DataFrame
        Return covariance (Σ), exactly symmetric, instruments on both
        axes in the same order as ``mu``.
    weights : pd.Series
        Market weights used in the reverse optimisation.
    risk_aversion : float
        Risk-aversion coefficient (δ) used.
    regularization : float
        Diagonal ridge added to Σ, ``0.0`` when none was needed.
    """

    mu: pd.Series
    covariance: pd.DataFrame
    weights: pd.Series
    risk_aversion: float
    regularization: float = 0.0

    def __post_init__(self) -> None:
        matrix = self.covariance.to_numpy()
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise DataError("Covariance matrix must be square")
        if matrix.shape[0] != len(self.mu):
            raise DataError(
                f"Covariance size {matrix.shape[0]} doesn't match "
                f"{len(self.mu)} expected returns"
            )
        if not np.array_equal(matrix, matrix.T):
            raise DataError("Covariance matrix must be exactly symmetric")

    @property
    def n_assets(self) -> int:
        """Number of assets in the cross-section."""
        return len(self.mu)

    @property
    def tickers(self) -> list[Hashable]:
        """Instruments in column order."""
        return list(self.mu.index)

    @property
    def is_positive_semidefinite(self) -> bool:
        """Check if the covariance is positive semi-definite."""
        eigenvalues = np.linalg.eigvalsh(self.covariance.to_numpy())
        return bool(np.all(eigenvalues >= -1e-10))

    @property
    def condition_number(self) -> float:
        """Ratio of largest to smallest eigenvalue (``inf`` if singular)."""
        eigenvalues = np.linalg.eigvalsh(self.covariance.to_numpy())
        if eigenvalues.min() <= 0:
            return float("inf")
        return float(eigenvalues.max() / eigenvalues.min())

    def portfolio_variance(self, weights: npt.ArrayLike) -> float:
        """Variance of a portfolio with *weights* in column order."""
        w = np.asarray(weights, dtype=np.float64)
        return float(w @ self.covariance.to_numpy() @ w)
