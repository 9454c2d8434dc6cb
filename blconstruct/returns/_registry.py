"""Registry of per-instrument return series tracking the tradable universe."""

from __future__ import annotations

import logging
import threading
from collections.abc import Hashable, Iterable, Mapping
from typing import Any

import numpy as np
import pandas as pd

from blconstruct.exceptions import DataError
from blconstruct.returns._config import BackfillPolicy, ReturnSeriesConfig
from blconstruct.returns._series import ReturnSeries

logger = logging.getLogger(__name__)


class ReturnSeriesRegistry:
    """Owns one :class:`ReturnSeries` per instrument in the universe.

    Series are created when instruments are added and deleted when they
    are removed, so a removed instrument's history never leaks into a
    later returns matrix.  Updates for unregistered instruments are
    ignored rather than re-creating a series.

    All mutators run under :attr:`lock`, a re-entrant lock that callers
    may also hold across a whole read-modify-write cycle.

    Parameters
    ----------
    config : ReturnSeriesConfig or None
        Configuration applied to every series created by the registry.
    """

    def __init__(self, config: ReturnSeriesConfig | None = None) -> None:
        self.config = config if config is not None else ReturnSeriesConfig()
        self.lock = threading.RLock()
        self._series: dict[Hashable, ReturnSeries] = {}

    def __contains__(self, instrument: object) -> bool:
        return instrument in self._series

    def __len__(self) -> int:
        return len(self._series)

    @property
    def instruments(self) -> list[Hashable]:
        """Registered instruments in registration order."""
        return list(self._series)

    def get(self, instrument: Hashable) -> ReturnSeries | None:
        """Return the series for *instrument*, or ``None``; never creates."""
        return self._series.get(instrument)

    # -- universe bookkeeping ------------------------------------------------

    def on_universe_changed(
        self,
        added: Iterable[Hashable],
        removed: Iterable[Hashable],
        reference_time: Any,
        history: Mapping[Hashable, pd.Series] | None = None,
    ) -> None:
        """Apply a universe change.

        Removals are applied first and discard the accumulated history.
        Each added instrument gets a new series, seeded from *history*
        when available, otherwise according to ``config.backfill``.
        Non-finite history values are skipped, history timestamps are
        converted to the reference time's timezone, and unusable history
        (non-numeric values or a non-datetime index) is discarded with a
        warning in favour of ``config.backfill``.  Instruments already
        registered keep their existing series.

        Parameters
        ----------
        added : iterable of Hashable
            Instruments entering the universe.
        removed : iterable of Hashable
            Instruments leaving the universe.
        reference_time : timestamp-like
            Current engine time.  Seeded observations are strictly
            before it.
        history : mapping of Hashable to pd.Series, optional
            Genuine historical returns indexed by timestamp.
        """
        ref = pd.Timestamp(reference_time)
        with self.lock:
            for instrument in removed:
                if self._series.pop(instrument, None) is not None:
                    logger.info("Removed return series for %s", instrument)

            for instrument in added:
                if instrument in self._series:
                    continue
                series = self._new_series(instrument, ref, history)
                self._series[instrument] = series
                logger.info(
                    "Added return series for %s (%d observations, ready=%s)",
                    instrument,
                    len(series),
                    series.is_ready(),
                )

    # -- updates -------------------------------------------------------------

    def record_return(
        self, instrument: Hashable, timestamp: Any, value: float
    ) -> bool:
        """Forward a return to the instrument's series.

        Returns ``False`` without side effects when the instrument is not
        registered.  Errors from :meth:`ReturnSeries.update` propagate.
        """
        with self.lock:
            series = self._series.get(instrument)
            if series is None:
                logger.debug("Ignoring return for unregistered %s", instrument)
                return False
            series.update(timestamp, value)
            return True

    def record_price(
        self, instrument: Hashable, timestamp: Any, price: float
    ) -> bool:
        """Forward a price; ``True`` only if a return was appended."""
        with self.lock:
            series = self._series.get(instrument)
            if series is None:
                logger.debug("Ignoring price for unregistered %s", instrument)
                return False
            return series.update_price(timestamp, price)

    # -- internals -----------------------------------------------------------

    def _new_series(
        self,
        instrument: Hashable,
        ref: pd.Timestamp,
        history: Mapping[Hashable, pd.Series] | None,
    ) -> ReturnSeries:
        # Fully seeded before it is registered.
        if history is not None and instrument in history:
            series = ReturnSeries(instrument, self.config)
            try:
                self._seed_from_history(series, history[instrument], ref)
                return series
            except DataError as exc:
                logger.warning(
                    "Discarded history for %s, falling back to %s backfill: %s",
                    instrument,
                    self.config.backfill.value,
                    exc,
                )

        series = ReturnSeries(instrument, self.config)
        if self.config.backfill == BackfillPolicy.PLACEHOLDER:
            self._seed_placeholder(series, ref)
        return series

    def _seed_placeholder(self, series: ReturnSeries, ref: pd.Timestamp) -> None:
        # Deterministic 0, 1, ..., 2 * period; the last point is one
        # sampling interval before ``ref``.
        n = self.config.backfill_length
        step = pd.Timedelta(self.config.sampling_interval)
        start = ref - n * step
        for i in range(n):
            series.update(start + i * step, float(i))

    @staticmethod
    def _seed_from_history(
        series: ReturnSeries, returns: pd.Series, ref: pd.Timestamp
    ) -> None:
        try:
            index = pd.DatetimeIndex(returns.index)
        except (TypeError, ValueError) as exc:
            raise DataError(
                f"History index for {series.instrument!r} is not datetime-like"
            ) from exc
        try:
            values = returns.to_numpy(dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise DataError(
                f"History for {series.instrument!r} must be numeric"
            ) from exc

        # compare on the reference time's clock
        if ref.tz is not None:
            index = (
                index.tz_localize(ref.tz)
                if index.tz is None
                else index.tz_convert(ref.tz)
            )
        elif index.tz is not None:
            index = index.tz_convert(None)

        clean = pd.Series(values, index=index)
        clean = clean[np.isfinite(values)]
        clean = clean[~clean.index.duplicated(keep="last")].sort_index()
        for ts, value in clean[clean.index < ref].items():
            series.update(ts, value)
