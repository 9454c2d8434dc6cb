"""Insight and portfolio target types."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from enum import Enum


class InsightDirection(int, Enum):
    """Predicted direction of an instrument's price."""

    DOWN = -1
    FLAT = 0
    UP = 1


@dataclass(frozen=True)
class Insight:
    """A directional trading signal for one instrument.

    Parameters
    ----------
    instrument : Hashable
        Instrument the signal refers to.
    direction : InsightDirection
        Predicted direction.
    magnitude : float or None
        Predicted move size, if the signal carries one.
    confidence : float or None
        Signal confidence in [0, 1], if provided.
    """

    instrument: Hashable
    direction: InsightDirection = InsightDirection.UP
    magnitude: float | None = None
    confidence: float | None = None

    @classmethod
    def up(cls, instrument: Hashable, magnitude: float | None = None) -> Insight:
        return cls(instrument, InsightDirection.UP, magnitude)

    @classmethod
    def down(cls, instrument: Hashable, magnitude: float | None = None) -> Insight:
        return cls(instrument, InsightDirection.DOWN, magnitude)

    @classmethod
    def flat(cls, instrument: Hashable) -> Insight:
        return cls(instrument, InsightDirection.FLAT)


@dataclass(frozen=True)
class PortfolioTarget:
    """Target portfolio weight for one instrument."""

    instrument: Hashable
    weight: float
