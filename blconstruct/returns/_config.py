"""Configuration for per-instrument return series."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import pandas as pd

from blconstruct.exceptions import ConfigurationError


class BackfillPolicy(str, Enum):
    """How a newly added instrument's series is seeded without history."""

    NONE = "none"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class ReturnSeriesConfig:
    """Immutable configuration for :class:`ReturnSeries`.

    Parameters
    ----------
    period : int
        Window capacity: at most ``period`` most-recent observations
        are kept.
    min_history : int or None
        Observations required before the series is ready.  Defaults to
        ``period``.
    lookback : int
        Rate-of-change lookback (in price updates) for
        :meth:`ReturnSeries.update_price`.
    sampling_interval : pd.Timedelta
        Spacing between placeholder backfill observations.
    backfill : BackfillPolicy
        Seeding policy used by the registry when no genuine history is
        supplied for a newly added instrument.
    """

    period: int = 21
    min_history: int | None = None
    lookback: int = 1
    sampling_interval: pd.Timedelta = field(
        default_factory=lambda: pd.Timedelta(days=1)
    )
    backfill: BackfillPolicy = BackfillPolicy.PLACEHOLDER

    def __post_init__(self) -> None:
        if self.period < 1:
            raise ConfigurationError(
                f"period must be a positive integer, got {self.period}"
            )
        if self.min_history is not None and not (
            1 <= self.min_history <= self.period
        ):
            raise ConfigurationError(
                f"min_history must be in [1, {self.period}], "
                f"got {self.min_history}"
            )
        if self.lookback < 1:
            raise ConfigurationError(
                f"lookback must be a positive integer, got {self.lookback}"
            )
        if pd.Timedelta(self.sampling_interval) <= pd.Timedelta(0):
            raise ConfigurationError(
                "sampling_interval must be strictly positive, "
                f"got {self.sampling_interval}"
            )

    @property
    def required_history(self) -> int:
        """Observation count at which a series becomes ready."""
        return self.period if self.min_history is None else self.min_history

    @property
    def backfill_length(self) -> int:
        """Number of placeholder observations seeded on add."""
        return 2 * self.period + 1

    # -- factory methods -----------------------------------------------------

    @classmethod
    def for_daily(cls) -> ReturnSeriesConfig:
        """One trading year of daily returns."""
        return cls(period=252)

    @classmethod
    def for_monthly_window(cls) -> ReturnSeriesConfig:
        """One trading month of daily returns (21 observations)."""
        return cls(period=21)

    @classmethod
    def for_minimal(cls) -> ReturnSeriesConfig:
        """Smallest usable window: two observations, one-step ROC."""
        return cls(period=2, lookback=1)
