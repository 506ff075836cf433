"""
Premier technical analysis.

Streaming indicators that take one bar at a time, with the Premier
Stochastic Oscillator (PSO) and the pieces it is assembled from: moving
averages, rolling extremes, the stochastic oscillator and a functional
indicator that wraps arbitrary callables.

Indicators are built directly or through the factory:

    import premier.technical_analysis as ta

    pso = ta.create('pso', period=14)       # or ta.PremierStochasticOscillator(14)
    for bar in bars:
        sample = pso.update(bar)
        if pso.is_ready:
            print(sample.timestamp, sample.value)

Replaying a pandas frame of bars and checking the output against reference
values lives in `premier.technical_analysis.validation`.
"""

__version__ = "1.0.0"
__author__ = "Premier Development Team"

from .base import BaseIndicator
from .types import Bar, ScalarSample
from .exceptions import (
    IndicatorError,
    InvalidParameterError,
    MissingInputError,
    InsufficientDataError,
    InvalidDataError,
    IndicatorNotFoundError,
    ReferenceDataError,
)
from .indicators import (
    SMA,
    EMA,
    RollingMinMax,
    Stochastic,
    FunctionalIndicator,
    PremierStochasticOscillator,
    normalize_k,
    pso_transform,
)
from .factory import (
    create,
    create_from_config,
    list_indicators,
    describe,
    validate_period,
    validate_input_field,
)

__all__ = [
    "BaseIndicator",
    "Bar",
    "ScalarSample",
    "SMA",
    "EMA",
    "RollingMinMax",
    "Stochastic",
    "FunctionalIndicator",
    "PremierStochasticOscillator",
    "normalize_k",
    "pso_transform",
    "create",
    "create_from_config",
    "list_indicators",
    "describe",
    "validate_period",
    "validate_input_field",
    "IndicatorError",
    "InvalidParameterError",
    "MissingInputError",
    "InsufficientDataError",
    "InvalidDataError",
    "IndicatorNotFoundError",
    "ReferenceDataError",
    "__version__",
    "__author__",
]
