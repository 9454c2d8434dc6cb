"""Tests for matrix and equilibrium configs and related enums."""

from __future__ import annotations

import pytest

from blconstruct import ConfigurationError
from blconstruct.moments import (
    AlignmentMethod,
    CovEstimatorType,
    EquilibriumConfig,
    ReturnsMatrixConfig,
    RiskAversionMethod,
)


class TestEnums:
    def test_alignment_members(self) -> None:
        assert set(AlignmentMethod) == {
            AlignmentMethod.INTERSECTION,
            AlignmentMethod.POSITIONAL,
        }

    def test_cov_estimator_members(self) -> None:
        assert set(CovEstimatorType) == {
            CovEstimatorType.EMPIRICAL,
            CovEstimatorType.LEDOIT_WOLF,
            CovEstimatorType.OAS,
            CovEstimatorType.SHRUNK,
        }

    def test_risk_aversion_members(self) -> None:
        assert set(RiskAversionMethod) == {
            RiskAversionMethod.FIXED,
            RiskAversionMethod.IMPLIED,
        }

    def test_str_serialization(self) -> None:
        assert AlignmentMethod.INTERSECTION.value == "intersection"
        assert CovEstimatorType.LEDOIT_WOLF.value == "ledoit_wolf"
        assert RiskAversionMethod.IMPLIED.value == "implied"


class TestReturnsMatrixConfig:
    def test_default_values(self) -> None:
        cfg = ReturnsMatrixConfig()
        assert cfg.alignment == AlignmentMethod.INTERSECTION
        assert cfg.min_rows == 2
        assert cfg.min_assets == 2
        assert cfg.drop_empty_rows is False
        assert cfg.positional_fallback is True

    def test_frozen(self) -> None:
        cfg = ReturnsMatrixConfig()
        with pytest.raises(AttributeError):
            cfg.min_rows = 5  # type: ignore[misc]

    @pytest.mark.parametrize("kwargs", [{"min_rows": 1}, {"min_assets": 1}])
    def test_invalid_values_raise(self, kwargs: dict[str, int]) -> None:
        with pytest.raises(ConfigurationError):
            ReturnsMatrixConfig(**kwargs)

    def test_for_positional(self) -> None:
        cfg = ReturnsMatrixConfig.for_positional()
        assert cfg.alignment == AlignmentMethod.POSITIONAL
        assert cfg.drop_empty_rows is True


class TestEquilibriumConfig:
    def test_default_values(self) -> None:
        cfg = EquilibriumConfig()
        assert cfg.risk_aversion == 2.5
        assert cfg.risk_aversion_method == RiskAversionMethod.FIXED
        assert cfg.cov_estimator == CovEstimatorType.EMPIRICAL
        assert cfg.shrunk_cov_shrinkage == 0.1
        assert cfg.regularization == 1e-8
        assert cfg.risk_free_rate == 0.0
        assert cfg.annualization_factor == 252

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"risk_aversion": 0.0},
            {"risk_aversion": -1.0},
            {"regularization": 0.0},
            {"shrunk_cov_shrinkage": 1.5},
            {"annualization_factor": 0},
        ],
    )
    def test_invalid_values_raise(self, kwargs: dict[str, float]) -> None:
        with pytest.raises(ConfigurationError):
            EquilibriumConfig(**kwargs)  # type: ignore[arg-type]

    def test_for_sample(self) -> None:
        assert EquilibriumConfig.for_sample() == EquilibriumConfig()

    def test_for_implied_risk_aversion(self) -> None:
        cfg = EquilibriumConfig.for_implied_risk_aversion(risk_free_rate=0.02)
        assert cfg.risk_aversion_method == RiskAversionMethod.IMPLIED
        assert cfg.risk_free_rate == 0.02

    def test_for_ledoit_wolf(self) -> None:
        cfg = EquilibriumConfig.for_ledoit_wolf()
        assert cfg.cov_estimator == CovEstimatorType.LEDOIT_WOLF
