"""
Momentum technical indicators.

This module implements oscillators that measure the strength of price
movements relative to their recent range.

Classes:
    PremierStochasticOscillator: Stochastic %K, normalized, EMA-smoothed and
        squashed into (-1, 1)
"""

import math
import logging
from functools import partial
from typing import Any, Dict, Optional

from ..base import BaseIndicator, IndicatorInput
from ..types import ScalarSample
from .composite import Stochastic
from .functional import FunctionalIndicator
from .trend import EMA

logger = logging.getLogger(__name__)

# Smoothing stage is fixed, callers only choose the stochastic lookback
SMOOTHING_PERIOD = 5
NORMALIZATION_SCALE = 0.1
STOCHASTIC_MIDPOINT = 50.0


def normalize_k(k: float) -> float:
    """Center %K on zero: the usual [0, 100] range maps to roughly [-5, 5]."""
    return NORMALIZATION_SCALE * (k - STOCHASTIC_MIDPOINT)


def pso_transform(smoothed: float) -> float:
    """
    Squash the smoothed, normalized %K into (-1, 1).

    Equivalent to (e^ss - 1) / (e^ss + 1), evaluated as tanh(ss / 2) so that a
    large |ss| saturates at +/-1 instead of overflowing. NaN passes through.
    """
    return math.tanh(smoothed / 2.0)


def _compute_pso(stochastic: Stochastic, smoothing: EMA, data_point: Dict[str, Any]) -> float:
    stochastic.update(data_point)
    nsk = normalize_k(stochastic.k)

    # The smoothing stage only depends on call order; fall back to a sequence number
    timestamp = data_point.get('timestamp')
    if timestamp is None:
        timestamp = stochastic.samples

    smoothing.update(ScalarSample(timestamp, nsk))
    return pso_transform(smoothing.value)


def _sub_indicators_ready(stochastic: Stochastic, smoothing: EMA) -> bool:
    return smoothing.is_ready and stochastic.is_ready


def _reset_sub_indicators(stochastic: Stochastic, smoothing: EMA) -> None:
    stochastic.reset()
    smoothing.reset()


class PremierStochasticOscillator(BaseIndicator):
    """
    Premier Stochastic Oscillator (PSO).

    Normalizes a fast stochastic %K around zero, smooths it with a 5-period
    EMA and maps the result into the open interval (-1, 1).

    Mathematical Formula:
        k   = Fast %K(period)
        nsk = 0.1 * (k - 50)
        ss  = EMA(nsk, 5)
        PSO = (e^ss - 1) / (e^ss + 1) = tanh(ss / 2)

    Composition:
        The oscillator owns one Stochastic, one EMA and one FunctionalIndicator
        (exposed as `pso`). The functional node's behaviors are bound to the two
        sub-indicators only, so resetting the node resets the whole pipeline.

    Readiness:
        Ready when both the stochastic (period bars) and the EMA (5 samples)
        are ready, i.e. after max(period, 5) bars. `warm_up_period` reports
        `period` alone, so for period < 5 readiness arrives later than the
        advertised warm-up. Before readiness `value` is NaN and must not be used;
        `current` carries the last computed PSO regardless, for diagnostics.

    Note:
        Output is in (-1, 1), not rescaled to the 0-100 range commonly quoted
        for this oscillator.

    Example:
        >>> pso = PremierStochasticOscillator(period=14)
        >>> for bar in bars:
        ...     pso.update(bar)
        ...     if pso.is_ready and pso.value > 0.9:
        ...         print(f"Strong momentum: PSO = {pso.value:.3f}")
    """

    required_inputs = ('close', 'low', 'high')

    def __init__(self, period: int = 14, name: Optional[str] = None):
        """
        Initialize Premier Stochastic Oscillator.

        Args:
            period (int): Stochastic lookback period. Standard period is 8 to 14.
            name (Optional[str]): Display name, defaults to "PSO(<period>)".

        Raises:
            InvalidParameterError: If period is not a positive integer.
        """
        self._validate_period(period)
        name = name or f"PSO({period})"
        super().__init__(period, input_field='close', name=name)

        self._stochastic = Stochastic(k_period=period, d_period=0, smooth_k=1, name=f"{name}_STO")
        self._smoothing = EMA(SMOOTHING_PERIOD, input_field='value', name=f"{name}_EMA")

        self.pso = FunctionalIndicator(
            compute=partial(_compute_pso, self._stochastic, self._smoothing),
            ready_predicate=partial(_sub_indicators_ready, self._stochastic, self._smoothing),
            reset_action=partial(_reset_sub_indicators, self._stochastic, self._smoothing),
            name=f"{name}_PSO",
            period=period
        )
        self._children = [self.pso]

        logger.debug(f"Composed {name} from {self._stochastic!r} and {self._smoothing!r}")

    def update(self, data_point: IndicatorInput) -> ScalarSample:
        """
        Process a new bar and update the oscillator.

        Algorithm:
        1. Update the stochastic and read %K
        2. Normalize: nsk = 0.1 * (k - 50)
        3. Feed nsk to the 5-period EMA and read ss
        4. PSO = tanh(ss / 2)

        Args:
            data_point: Bar or mapping with high, low and close.

        Returns:
            ScalarSample: The last computed PSO, not masked during warm-up.

        Raises:
            MissingInputError: If high, low or close is missing.
            InvalidDataError: If any of them is None, NaN or infinite.
        """
        data_point = self._prepare(data_point)

        self.pso.update(data_point)

        return self._record(data_point)

    @property
    def value(self) -> float:
        """
        Get the current PSO value.

        Returns:
            float: Value in (-1, 1), or NaN until is_ready is True.
        """
        if not self.is_ready:
            return math.nan

        return self.pso.value

    @property
    def current(self) -> ScalarSample:
        """Last computed PSO with its bar timestamp; check is_ready before trusting it."""
        return ScalarSample(self._last_update_time, self.pso.value)

    @property
    def is_ready(self) -> bool:
        """True once both the stochastic and the smoothing stage are ready."""
        return self.pso.is_ready

    @property
    def warm_up_period(self) -> int:
        """Advertised warm-up, equal to the stochastic period."""
        return self.period

    @property
    def stochastic_k(self) -> float:
        """Latest %K fed into the pipeline (NaN before the first bar)."""
        return self._stochastic.k

    @property
    def normalized_k(self) -> float:
        """Latest %K after centering and scaling."""
        return normalize_k(self._stochastic.k)

    @property
    def smoothed_k(self) -> float:
        """Latest EMA of the normalized %K (NaN while the EMA seeds)."""
        return self._smoothing.value
