"""Target weighting schemes applied to an equilibrium result."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

import numpy as np
import pandas as pd

from blconstruct.construction._config import WeightingType
from blconstruct.construction._types import Insight
from blconstruct.exceptions import DegenerateInputError
from blconstruct.moments._result import EquilibriumResult


class TargetWeighting(Protocol):
    """Maps an equilibrium result and its insight batch to weights."""

    def compute(
        self, result: EquilibriumResult, insights: Sequence[Insight]
    ) -> pd.Series:
        """Return weights indexed like ``result.mu``."""
        ...


class MeanVarianceWeighting:
    """Unconstrained mean-variance weights ``(δΣ)⁻¹ Π``.

    Without views blended in, these recover the market weights the
    prior was implied from.  Weights are scaled to unit gross exposure.
    """

    def compute(
        self, result: EquilibriumResult, insights: Sequence[Insight]
    ) -> pd.Series:
        sigma = result.covariance.to_numpy(dtype=np.float64)
        mu = result.mu.to_numpy(dtype=np.float64)
        try:
            raw = np.linalg.solve(result.risk_aversion * sigma, mu)
        except np.linalg.LinAlgError as exc:
            raise DegenerateInputError(
                "Covariance is singular; cannot solve for weights"
            ) from exc

        gross = np.abs(raw).sum()
        if not np.isfinite(gross) or gross == 0.0:
            raise DegenerateInputError(
                f"Mean-variance weights have unusable gross exposure {gross}"
            )
        return pd.Series(raw / gross, index=result.mu.index)


class EqualWeighting:
    """``direction / N`` per instrument, using each one's last insight."""

    def compute(
        self, result: EquilibriumResult, insights: Sequence[Insight]
    ) -> pd.Series:
        directions = {}
        for insight in insights:
            directions[insight.instrument] = int(insight.direction)
        n_assets = result.n_assets
        weights = [directions.get(t, 0) / n_assets for t in result.tickers]
        return pd.Series(weights, index=result.mu.index, dtype=np.float64)


def build_weighting(weighting: WeightingType) -> TargetWeighting:
    """Build the weighting scheme selected by *weighting*."""
    match weighting:
        case WeightingType.MEAN_VARIANCE:
            return MeanVarianceWeighting()
        case WeightingType.EQUAL:
            return EqualWeighting()
