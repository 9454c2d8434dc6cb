"""Custom exception hierarchy for the construction library."""

from __future__ import annotations

from collections.abc import Hashable, Iterable
from typing import Any


class ConstructionError(Exception):
    """Base exception for all construction library errors."""


class ConfigurationError(ConstructionError):
    """Invalid configuration parameters or missing required arguments."""


class DataError(ConstructionError):
    """Invalid input data: wrong type, shape, or alignment."""


class InsufficientHistoryError(DataError):
    """One or more instruments have no series or too few observations."""

    def __init__(self, instruments: Iterable[Hashable]) -> None:
        self.instruments: tuple[Hashable, ...] = tuple(instruments)
        names = ", ".join(str(i) for i in self.instruments)
        super().__init__(f"Insufficient return history for: {names}")


class AlignmentError(DataError):
    """The aligned time axis has too few common observations."""

    def __init__(self, n_rows: int, min_rows: int) -> None:
        self.n_rows = n_rows
        self.min_rows = min_rows
        super().__init__(
            f"Aligned returns matrix has {n_rows} row(s), "
            f"at least {min_rows} required"
        )


class DegenerateInputError(DataError):
    """Too few assets, non-finite values, or an unusable shape."""


class OutOfOrderUpdateError(DataError):
    """An observation was not strictly after the last recorded timestamp."""

    def __init__(self, timestamp: Any, last_timestamp: Any) -> None:
        self.timestamp = timestamp
        self.last_timestamp = last_timestamp
        super().__init__(
            f"Observation at {timestamp} is not after the last "
            f"recorded timestamp {last_timestamp}"
        )
