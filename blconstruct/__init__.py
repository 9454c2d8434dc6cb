"""Black-Litterman portfolio construction core built on skfolio.

Modules
-------
returns
    Rolling per-instrument return series and the registry that tracks
    them as instruments enter and leave the tradable universe.
moments
    Time-aligned returns matrix assembly and equilibrium (prior)
    estimation by reverse optimisation: implied returns and covariance.
construction
    Insight and target types, target weighting schemes, and the
    orchestrator reacting to universe changes and insight batches.
"""

import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

logging.getLogger("blconstruct").addHandler(logging.NullHandler())

from blconstruct.exceptions import (
    AlignmentError,
    ConfigurationError,
    ConstructionError,
    DataError,
    DegenerateInputError,
    InsufficientHistoryError,
    OutOfOrderUpdateError,
)

__all__ = [
    "AlignmentError",
    "ConfigurationError",
    "ConstructionError",
    "DataError",
    "DegenerateInputError",
    "InsufficientHistoryError",
    "OutOfOrderUpdateError",
]

try:
    __version__ = _pkg_version("blconstruct")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"
