"""Per-instrument rolling return series and their registry."""

from blconstruct.returns._config import BackfillPolicy, ReturnSeriesConfig
from blconstruct.returns._registry import ReturnSeriesRegistry
from blconstruct.returns._series import (
    Observation,
    ObservationView,
    ReturnSeries,
)

__all__ = [
    "BackfillPolicy",
    "Observation",
    "ObservationView",
    "ReturnSeries",
    "ReturnSeriesConfig",
    "ReturnSeriesRegistry",
]
