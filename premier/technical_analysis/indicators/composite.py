"""
Indicators assembled from other indicators.

Classes:
    Stochastic: Position of the close inside the recent high/low range
"""

import math
from typing import Dict, Optional

from ..base import BaseIndicator, IndicatorInput
from ..exceptions import InvalidParameterError
from ..types import ScalarSample
from .trend import SMA
from .minmax import RollingMinMax

K_MIDPOINT = 50.0


def _check_int(parameter_name: str, value, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise InvalidParameterError(parameter_name, value, f"integer >= {minimum}", "Stochastic")


class Stochastic(BaseIndicator):
    """
    Stochastic oscillator, fast or slow.

        raw %K = 100 * (close - lowest low) / (highest high - lowest low)
        %K     = raw %K                  with smooth_k == 1 (fast)
               = SMA(raw %K, smooth_k)   otherwise (slow)
        %D     = SMA(%K, d_period)       omitted with d_period == 0

    Extremes are taken over the last `k_period` bars. A window whose high
    equals its low gives raw %K = 50.

    Raw %K is produced from the first bar on, over the bars seen so far.
    `k` exposes it during warm-up so that downstream smoothing can seed
    itself; `value` stays a pair of NaNs until `is_ready`.

    Attributes:
        lows (RollingMinMax): Window over bar lows.
        highs (RollingMinMax): Window over bar highs.
        k_smoother (Optional[SMA]): Slow %K average, None for a fast stochastic.
        d_line (Optional[SMA]): %D average, None when d_period is 0.
    """

    required_inputs = ('close', 'low', 'high')

    def __init__(
        self,
        k_period: int = 14,
        d_period: int = 3,
        smooth_k: int = 3,
        input_field: str = 'close',
        name: Optional[str] = None
    ):
        """
        Args:
            k_period (int): Bars in the high/low window.
            d_period (int): %D averaging period; 0 disables %D.
            smooth_k (int): %K averaging period; 1 gives the fast stochastic.
            input_field (str): Price located inside the range.
            name (Optional[str]): Display name, defaults to "Stochastic".

        Raises:
            InvalidParameterError: If a period is out of range.
        """
        _check_int("k_period", k_period, 1)
        _check_int("d_period", d_period, 0)
        _check_int("smooth_k", smooth_k, 1)

        super().__init__(period=k_period, input_field=input_field, name=name)
        self.required_inputs = (input_field, 'low', 'high')

        self.lows = RollingMinMax(k_period)
        self.highs = RollingMinMax(k_period)
        self.k_smoother = SMA(smooth_k, input_field='raw_k') if smooth_k > 1 else None
        self.d_line = SMA(d_period, input_field='k') if d_period else None
        self._children = [sma for sma in (self.k_smoother, self.d_line) if sma is not None]

        self._raw_k = math.nan
        self._smoothed_k = math.nan

    def update(self, data_point: IndicatorInput) -> ScalarSample:
        """Add a bar to the high/low windows and recompute %K and %D."""
        data_point = self._prepare(data_point)

        self.lows.update(data_point['low'])
        self.highs.update(data_point['high'])
        self._raw_k = self._locate(data_point[self.input_field], self.lows.min, self.highs.max)

        if self._window_full:
            if self.k_smoother is None:
                self._smoothed_k = self._raw_k
            else:
                self.k_smoother.update({'raw_k': self._raw_k})
                self._smoothed_k = self.k_smoother.value

            if self.d_line is not None and not math.isnan(self._smoothed_k):
                self.d_line.update({'k': self._smoothed_k})

        return self._record(data_point)

    @staticmethod
    def _locate(price: float, low: float, high: float) -> float:
        span = high - low
        if span == 0:
            return K_MIDPOINT
        if math.isinf(span):
            # Finite extremes whose difference overflows; halving keeps both terms finite
            return 100.0 * (price / 2 - low / 2) / (high / 2 - low / 2)
        return 100.0 * (price - low) / span

    @property
    def _window_full(self) -> bool:
        return self.lows.is_ready and self.highs.is_ready

    @property
    def k(self) -> float:
        """
        Most recent %K, warm-up included.

        The smoothed %K once it exists, else raw %K over the bars seen so far;
        NaN only before the first bar.
        """
        return self._raw_k if math.isnan(self._smoothed_k) else self._smoothed_k

    @property
    def value(self) -> Dict[str, float]:
        """{'k': %K, 'd': %D}; both NaN until ready, 'd' NaN while %D warms up."""
        if not self.is_ready:
            return {'k': math.nan, 'd': math.nan}
        d = self.d_line.value if self.d_line is not None else math.nan
        return {'k': self._smoothed_k, 'd': d}

    @property
    def current(self) -> ScalarSample:
        """%K alone, as the scalar sample downstream stages consume."""
        return ScalarSample(self._last_update_time, self.value['k'])

    @property
    def is_ready(self) -> bool:
        """Window full and, for a slow stochastic, the %K average filled."""
        if self.k_smoother is not None:
            return self._window_full and self.k_smoother.is_ready
        return self._window_full

    def reset(self) -> None:
        """Clear the extremes and both averages."""
        super().reset()
        self.lows.reset()
        self.highs.reset()
        self._raw_k = math.nan
        self._smoothed_k = math.nan
