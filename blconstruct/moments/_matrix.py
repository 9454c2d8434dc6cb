"""Assembly of a time-aligned returns matrix from the series registry."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable

import numpy as np
import pandas as pd

from blconstruct.exceptions import (
    AlignmentError,
    DegenerateInputError,
    InsufficientHistoryError,
)
from blconstruct.moments._config import AlignmentMethod, ReturnsMatrixConfig
from blconstruct.returns._registry import ReturnSeriesRegistry

logger = logging.getLogger(__name__)


class ReturnsMatrixBuilder:
    """Build a dense returns matrix for a list of instruments.

    Rows are aligned observations, columns are the requested instruments
    in request order (duplicates collapsed, first occurrence kept).
    Every cell is a genuine observation of its instrument: nothing is
    filled forward or backward.  The registry is read under its lock
    and never modified, and each call returns a new DataFrame.

    Parameters
    ----------
    config : ReturnsMatrixConfig or None
        Alignment configuration.  Defaults to ``ReturnsMatrixConfig()``.
    """

    def __init__(self, config: ReturnsMatrixConfig | None = None) -> None:
        self.config = config if config is not None else ReturnsMatrixConfig()

    def build(
        self,
        instruments: Iterable[Hashable],
        registry: ReturnSeriesRegistry,
    ) -> pd.DataFrame:
        """Return the aligned returns matrix for *instruments*.

        Raises
        ------
        DegenerateInputError
            If fewer than ``config.min_assets`` distinct instruments are
            requested.
        InsufficientHistoryError
            If any instrument is unregistered or its series is not ready.
            All offending instruments are named.
        AlignmentError
            If fewer than ``config.min_rows`` aligned rows remain, after
            the positional fallback when it is enabled.
        """
        selected = list(dict.fromkeys(instruments))
        if len(selected) < self.config.min_assets:
            raise DegenerateInputError(
                f"Equilibrium estimation needs at least {self.config.min_assets} "
                f"instruments, got {len(selected)}"
            )

        with registry.lock:
            missing = []
            columns: list[pd.Series] = []
            for instrument in selected:
                series = registry.get(instrument)
                if series is None or not series.is_ready():
                    missing.append(instrument)
                else:
                    columns.append(series.to_series())
        if missing:
            raise InsufficientHistoryError(missing)

        frame = self._align(columns, selected, self.config.alignment)
        if (
            len(frame) < self.config.min_rows
            and self.config.alignment == AlignmentMethod.INTERSECTION
            and self.config.positional_fallback
        ):
            logger.debug(
                "Only %d common timestamps for %s; aligning by position",
                len(frame),
                selected,
            )
            frame = self._align(columns, selected, AlignmentMethod.POSITIONAL)

        if len(frame) < self.config.min_rows:
            raise AlignmentError(len(frame), self.config.min_rows)
        return frame

    # -- internals -----------------------------------------------------------

    def _align(
        self,
        columns: list[pd.Series],
        selected: list[Hashable],
        alignment: AlignmentMethod,
    ) -> pd.DataFrame:
        if alignment == AlignmentMethod.POSITIONAL:
            frame = self._align_positional(columns)
        else:
            frame = self._align_intersection(columns)
        frame.columns = pd.Index(selected, dtype=object, tupleize_cols=False)

        if self.config.drop_empty_rows:
            frame = frame.loc[frame.abs().sum(axis=1) != 0.0]
        return frame

    @staticmethod
    def _align_intersection(columns: list[pd.Series]) -> pd.DataFrame:
        frame = pd.concat(columns, axis=1, join="inner", ignore_index=True)
        return frame.sort_index()

    @staticmethod
    def _align_positional(columns: list[pd.Series]) -> pd.DataFrame:
        k = min(len(col) for col in columns)
        data = np.column_stack([col.to_numpy(dtype=np.float64)[-k:] for col in columns])
        return pd.DataFrame(data, index=pd.RangeIndex(k))
