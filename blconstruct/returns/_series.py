"""Fixed-capacity rolling window of returns for one instrument."""

from __future__ import annotations

import math
from collections import deque
from collections.abc import Hashable, Iterator
from typing import Any, NamedTuple

import pandas as pd

from blconstruct.exceptions import DegenerateInputError, OutOfOrderUpdateError
from blconstruct.returns._config import ReturnSeriesConfig


class Observation(NamedTuple):
    """A single ``(timestamp, return)`` pair."""

    timestamp: pd.Timestamp
    value: float


class ObservationView:
    """Read-only, restartable view over a series' observations.

    Each call to ``iter()`` starts again from the oldest observation.
    Mutating the series while an iteration is in progress raises
    ``RuntimeError``.
    """

    __slots__ = ("_window",)

    def __init__(self, window: deque[Observation]) -> None:
        self._window = window

    def __iter__(self) -> Iterator[Observation]:
        return iter(self._window)

    def __len__(self) -> int:
        return len(self._window)

    def __repr__(self) -> str:
        return f"ObservationView(n={len(self._window)})"


class ReturnSeries:
    """Rolling window of period returns for a single instrument.

    Holds at most ``config.period`` observations with strictly
    increasing timestamps; the oldest observation is evicted when the
    window is full.  Returns can be appended directly with
    :meth:`update` or derived from prices with :meth:`update_price`,
    which applies a rate of change over ``config.lookback`` prices.

    Parameters
    ----------
    instrument : Hashable
        Identifier of the instrument this series belongs to.
    config : ReturnSeriesConfig or None
        Window configuration.  Defaults to ``ReturnSeriesConfig()``.
    """

    def __init__(
        self,
        instrument: Hashable,
        config: ReturnSeriesConfig | None = None,
    ) -> None:
        self.instrument = instrument
        self.config = config if config is not None else ReturnSeriesConfig()
        self._window: deque[Observation] = deque(maxlen=self.config.period)
        self._prices: deque[Observation] = deque(
            maxlen=self.config.lookback + 1
        )

    # -- properties ----------------------------------------------------------

    @property
    def capacity(self) -> int:
        """Maximum number of stored observations."""
        return self.config.period

    @property
    def last_timestamp(self) -> pd.Timestamp | None:
        """Timestamp of the most recent observation, if any."""
        return self._window[-1].timestamp if self._window else None

    def __len__(self) -> int:
        return len(self._window)

    def __repr__(self) -> str:
        return (
            f"ReturnSeries(instrument={self.instrument!r}, "
            f"n={len(self._window)}, capacity={self.capacity})"
        )

    # -- updates -------------------------------------------------------------

    def update(self, timestamp: Any, value: float) -> None:
        """Append a return observation.

        Raises
        ------
        OutOfOrderUpdateError
            If *timestamp* is not strictly after the last stored one.
            The series is left unchanged.
        DegenerateInputError
            If *value* is NaN or infinite.
        """
        ts = pd.Timestamp(timestamp)
        self._check_order(ts, self.last_timestamp)
        value = float(value)
        if not math.isfinite(value):
            raise DegenerateInputError(
                f"Non-finite return {value} for {self.instrument!r} at {ts}"
            )
        self._window.append(Observation(ts, value))

    def update_price(self, timestamp: Any, price: float) -> bool:
        """Feed a price and append its rate of change once primed.

        The return is ``(p_t - p_{t-k}) / p_{t-k}`` with ``k`` the
        configured lookback, and ``0.0`` when the past price is zero.

        Returns
        -------
        bool
            ``True`` if a return observation was appended.
        """
        ts = pd.Timestamp(timestamp)
        price = float(price)
        if not math.isfinite(price):
            raise DegenerateInputError(
                f"Non-finite price {price} for {self.instrument!r} at {ts}"
            )
        self._check_order(ts, self._prices[-1].timestamp if self._prices else None)

        if len(self._prices) >= self._prices.maxlen - 1:
            # validate before touching either window
            self._check_order(ts, self.last_timestamp)

        self._prices.append(Observation(ts, price))
        if len(self._prices) < self._prices.maxlen:
            return False

        past = self._prices[0].value
        roc = 0.0 if past == 0.0 else (price - past) / past
        self._window.append(Observation(ts, roc))
        return True

    def reset(self) -> None:
        """Discard all stored returns and prices."""
        self._window.clear()
        self._prices.clear()

    # -- reads ---------------------------------------------------------------

    def is_ready(self) -> bool:
        """Whether enough observations are stored for estimation."""
        return len(self._window) >= self.config.required_history

    def values(self) -> ObservationView:
        """Chronological read-only view of the stored observations."""
        return ObservationView(self._window)

    def to_series(self) -> pd.Series:
        """Copy the window into a ``pd.Series`` indexed by timestamp."""
        return pd.Series(
            [obs.value for obs in self._window],
            index=pd.DatetimeIndex([obs.timestamp for obs in self._window]),
            name=self.instrument,
            dtype="float64",
        )

    # -- internals -----------------------------------------------------------

    def _check_order(
        self, ts: pd.Timestamp, last: pd.Timestamp | None
    ) -> None:
        if last is not None and ts <= last:
            raise OutOfOrderUpdateError(ts, last)
