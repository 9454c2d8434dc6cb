"""Portfolio construction orchestrator: universe changes and insight batches."""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable, Mapping
from enum import Enum
from typing import Any, Protocol

import pandas as pd

from blconstruct.construction._config import (
    ConstructionConfig,
    DegradedTargetPolicy,
    InsightReturnMethod,
)
from blconstruct.construction._types import Insight, PortfolioTarget
from blconstruct.construction._weighting import TargetWeighting, build_weighting
from blconstruct.exceptions import ConstructionError, DataError
from blconstruct.moments._equilibrium import EquilibriumReturnsEstimator
from blconstruct.moments._matrix import ReturnsMatrixBuilder
from blconstruct.moments._result import EquilibriumResult
from blconstruct.returns._registry import ReturnSeriesRegistry

logger = logging.getLogger(__name__)


class ConstructionState(str, Enum):
    """Lifecycle state of the orchestrator."""

    IDLE = "idle"
    TRACKING = "tracking"
    READY = "ready"
    DEGRADED = "degraded"


class PortfolioConstructionModel(Protocol):
    """Capability interface the trading engine drives."""

    def on_securities_changed(
        self, added: Iterable[Hashable], removed: Iterable[Hashable]
    ) -> None: ...

    def create_targets(
        self, insights: Iterable[Insight]
    ) -> list[PortfolioTarget]: ...


def _utc_now() -> pd.Timestamp:
    return pd.Timestamp.now(tz="UTC")


class PortfolioConstructionOrchestrator:
    """Equilibrium-prior construction model.

    Composes a :class:`ReturnSeriesRegistry`, a
    :class:`ReturnsMatrixBuilder`, an :class:`EquilibriumReturnsEstimator`
    and a :class:`TargetWeighting` scheme.  :meth:`create_targets` never
    raises a :class:`ConstructionError`: a failed cycle moves the
    orchestrator to ``DEGRADED``, records the reason, and yields no
    targets.

    Parameters
    ----------
    config : ConstructionConfig or None
        Construction configuration.  Defaults to ``ConstructionConfig()``.
    clock : callable or None
        Returns the current engine time.  Defaults to UTC wall-clock.
    registry : ReturnSeriesRegistry or None
        Registry to use; a new one built from ``config.series`` when
        omitted.
    weighting : TargetWeighting or None
        Overrides the scheme selected by ``config.weighting``.
    """

    def __init__(
        self,
        config: ConstructionConfig | None = None,
        clock: Callable[[], Any] | None = None,
        registry: ReturnSeriesRegistry | None = None,
        weighting: TargetWeighting | None = None,
    ) -> None:
        self.config = config if config is not None else ConstructionConfig()
        self.clock = clock if clock is not None else _utc_now
        self.registry = (
            registry
            if registry is not None
            else ReturnSeriesRegistry(self.config.series)
        )
        self.builder = ReturnsMatrixBuilder(self.config.matrix)
        self.estimator = EquilibriumReturnsEstimator(self.config.equilibrium)
        self.weighting = (
            weighting if weighting is not None else build_weighting(self.config.weighting)
        )

        self.state = ConstructionState.IDLE if len(self.registry) == 0 else (
            ConstructionState.TRACKING
        )
        self.failure_reason: str | None = None
        self.last_error: ConstructionError | None = None
        self.last_result: EquilibriumResult | None = None
        self.last_targets: list[PortfolioTarget] = []

    # -- engine callbacks ----------------------------------------------------

    def on_securities_changed(
        self,
        added: Iterable[Hashable],
        removed: Iterable[Hashable],
        history: Mapping[Hashable, pd.Series] | None = None,
    ) -> None:
        """Register added instruments and drop removed ones."""
        with self.registry.lock:
            self.registry.on_universe_changed(
                added, removed, self.clock(), history=history
            )
            if len(self.registry) == 0:
                self.state = ConstructionState.IDLE
            elif self.state == ConstructionState.IDLE:
                self.state = ConstructionState.TRACKING

    def on_price(self, instrument: Hashable, timestamp: Any, price: float) -> bool:
        """Feed a price event into the instrument's return series."""
        return self.registry.record_price(instrument, timestamp, price)

    def create_targets(self, insights: Iterable[Insight]) -> list[PortfolioTarget]:
        """Run one construction cycle over an insight batch.

        Records one return per insight at the current time, builds the
        returns matrix over the distinct instruments referenced (in
        first-seen order), estimates the equilibrium prior, and emits one
        target per instrument.  An empty batch is a no-op.
        """
        insights = list(insights)
        if not insights:
            return []

        now = pd.Timestamp(self.clock())
        instruments = list(dict.fromkeys(i.instrument for i in insights))

        with self.registry.lock:
            for insight in insights:
                self._record(insight, now)
            try:
                returns = self.builder.build(instruments, self.registry)
                result = self.estimator.estimate(returns)
                weights = self.weighting.compute(result, insights)
            except ConstructionError as exc:
                return self._degrade(exc)

        targets = [
            PortfolioTarget(instrument, float(weight))
            for instrument, weight in zip(result.tickers, weights.to_numpy())
        ]
        self.state = ConstructionState.READY
        self.failure_reason = None
        self.last_error = None
        self.last_result = result
        self.last_targets = targets
        return targets

    # -- internals -----------------------------------------------------------

    def _insight_return(self, insight: Insight) -> float:
        if (
            self.config.insight_return_method == InsightReturnMethod.MAGNITUDE
            and insight.magnitude is not None
        ):
            try:
                magnitude = float(insight.magnitude)
            except (TypeError, ValueError) as exc:
                raise DataError(
                    f"Insight magnitude {insight.magnitude!r} is not numeric"
                ) from exc
            return int(insight.direction) * magnitude
        return self.config.insight_return

    def _record(self, insight: Insight, now: pd.Timestamp) -> None:
        try:
            self.registry.record_return(
                insight.instrument, now, self._insight_return(insight)
            )
        except DataError as exc:
            logger.debug("Skipped return for %s: %s", insight.instrument, exc)

    def _degrade(self, exc: ConstructionError) -> list[PortfolioTarget]:
        self.state = ConstructionState.DEGRADED
        self.failure_reason = f"{type(exc).__name__}: {exc}"
        self.last_error = exc
        if self.config.degraded_policy == DegradedTargetPolicy.CLEAR:
            self.last_targets = []
        logger.warning("Construction cycle degraded: %s", self.failure_reason)
        return []
