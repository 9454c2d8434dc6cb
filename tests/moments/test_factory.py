"""Tests for the covariance estimator factory."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest
from skfolio.moments import (
    OAS,
    EmpiricalCovariance,
    LedoitWolf,
    ShrunkCovariance,
)

from blconstruct.moments import (
    CovEstimatorType,
    EquilibriumConfig,
    build_cov_estimator,
)


class TestBuildCovEstimator:
    @pytest.mark.parametrize(
        ("cov_type", "expected_class"),
        [
            (CovEstimatorType.EMPIRICAL, EmpiricalCovariance),
            (CovEstimatorType.LEDOIT_WOLF, LedoitWolf),
            (CovEstimatorType.OAS, OAS),
            (CovEstimatorType.SHRUNK, ShrunkCovariance),
        ],
    )
    def test_each_type_produces_correct_class(
        self,
        cov_type: CovEstimatorType,
        expected_class: type,
    ) -> None:
        cfg = EquilibriumConfig(cov_estimator=cov_type)
        estimator = build_cov_estimator(cfg)
        assert isinstance(estimator, expected_class)
        assert estimator.nearest is False

    def test_default_config(self) -> None:
        estimator = build_cov_estimator()
        assert isinstance(estimator, EmpiricalCovariance)
        assert estimator.ddof == 1

    def test_shrinkage_forwarded(self) -> None:
        cfg = EquilibriumConfig(
            cov_estimator=CovEstimatorType.SHRUNK,
            shrunk_cov_shrinkage=0.3,
        )
        estimator = build_cov_estimator(cfg)
        assert estimator.shrinkage == 0.3

    def test_empirical_matches_sample_covariance(
        self, returns_df: pd.DataFrame
    ) -> None:
        estimator = build_cov_estimator()
        estimator.fit(returns_df.to_numpy())
        np.testing.assert_allclose(
            estimator.covariance_,
            np.cov(returns_df.to_numpy(), rowvar=False, ddof=1),
        )
