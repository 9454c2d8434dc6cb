"""Tests for ConstructionConfig and related enums."""

from __future__ import annotations

import pytest

from blconstruct import ConfigurationError
from blconstruct.construction import (
    ConstructionConfig,
    DegradedTargetPolicy,
    Insight,
    InsightDirection,
    InsightReturnMethod,
    WeightingType,
)
from blconstruct.moments import EquilibriumConfig, ReturnsMatrixConfig
from blconstruct.returns import ReturnSeriesConfig


class TestEnums:
    def test_direction_values(self) -> None:
        assert int(InsightDirection.UP) == 1
        assert int(InsightDirection.FLAT) == 0
        assert int(InsightDirection.DOWN) == -1

    def test_str_serialization(self) -> None:
        assert InsightReturnMethod.MAGNITUDE.value == "magnitude"
        assert WeightingType.MEAN_VARIANCE.value == "mean_variance"
        assert DegradedTargetPolicy.RETAIN.value == "retain"


class TestInsight:
    def test_constructors(self) -> None:
        assert Insight.up("SPY", 0.1) == Insight("SPY", InsightDirection.UP, 0.1)
        assert Insight.down("SPY").direction == InsightDirection.DOWN
        assert Insight.flat("SPY").magnitude is None

    def test_frozen(self) -> None:
        insight = Insight.up("SPY")
        with pytest.raises(AttributeError):
            insight.magnitude = 0.2  # type: ignore[misc]


class TestConstructionConfig:
    def test_default_values(self) -> None:
        cfg = ConstructionConfig()
        assert cfg.series == ReturnSeriesConfig()
        assert cfg.matrix == ReturnsMatrixConfig()
        assert cfg.equilibrium == EquilibriumConfig()
        assert cfg.insight_return == 0.1
        assert cfg.insight_return_method == InsightReturnMethod.FIXED
        assert cfg.weighting == WeightingType.MEAN_VARIANCE
        assert cfg.degraded_policy == DegradedTargetPolicy.CLEAR

    def test_non_finite_insight_return(self) -> None:
        with pytest.raises(ConfigurationError):
            ConstructionConfig(insight_return=float("inf"))

    def test_for_minimal(self) -> None:
        assert ConstructionConfig.for_minimal().series.period == 2

    def test_for_magnitude_returns(self) -> None:
        cfg = ConstructionConfig.for_magnitude_returns()
        assert cfg.insight_return_method == InsightReturnMethod.MAGNITUDE
