"""Shared test fixtures for the construction test suite."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from blconstruct.returns import (
    BackfillPolicy,
    ReturnSeriesConfig,
    ReturnSeriesRegistry,
)


@pytest.fixture()
def t0() -> pd.Timestamp:
    """Reference engine time."""
    return pd.Timestamp("2018-08-07")


@pytest.fixture()
def returns_df() -> pd.DataFrame:
    """Synthetic returns: 5 assets, 120 obs, seed 42."""
    rng = np.random.default_rng(42)
    data = rng.normal(loc=0.001, scale=0.02, size=(120, 5))
    tickers = [f"TICK_{i:02d}" for i in range(5)]
    return pd.DataFrame(
        data,
        columns=tickers,
        index=pd.bdate_range("2023-01-02", periods=120, freq="B"),
    )


@pytest.fixture()
def empty_registry() -> ReturnSeriesRegistry:
    """Registry with 5-observation windows and no backfill."""
    return ReturnSeriesRegistry(
        ReturnSeriesConfig(period=5, backfill=BackfillPolicy.NONE)
    )


@pytest.fixture()
def linear_registry(
    empty_registry: ReturnSeriesRegistry, t0: pd.Timestamp
) -> ReturnSeriesRegistry:
    """Two instruments each holding daily returns 0, 1, 2, 3, 4."""
    empty_registry.on_universe_changed(["SPY", "AAPL"], [], t0)
    for symbol in ("SPY", "AAPL"):
        for i in range(5):
            empty_registry.record_return(symbol, t0 + pd.Timedelta(days=i), i)
    return empty_registry
