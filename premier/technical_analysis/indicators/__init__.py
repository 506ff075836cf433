"""Concrete streaming indicators."""

from .trend import SMA, EMA
from .minmax import RollingMinMax
from .composite import Stochastic
from .functional import FunctionalIndicator
from .momentum import PremierStochasticOscillator, normalize_k, pso_transform

__all__ = [
    "SMA",
    "EMA",
    "RollingMinMax",
    "Stochastic",
    "FunctionalIndicator",
    "PremierStochasticOscillator",
    "normalize_k",
    "pso_transform",
]
