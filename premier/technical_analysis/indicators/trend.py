"""
Moving averages.

Both averages work on any single numeric field, so they smooth raw bars
(`input_field='close'`) as readily as the output of another indicator
(`input_field='value'` with ScalarSample inputs).

Classes:
    SMA: Arithmetic mean over a fixed window, kept as a running sum
    EMA: Exponential average whose first value is the SMA of the first window
"""

import math
from typing import Optional

from ..base import BaseIndicator, IndicatorInput
from ..exceptions import InvalidParameterError
from ..types import ScalarSample


class SMA(BaseIndicator):
    """
    Simple moving average over the last `period` samples.

    The window sum is adjusted by the entering and leaving sample, so each
    update is constant time regardless of the period:

        sum += x_new - x_oldest
        SMA  = sum / period

    Example:
        >>> sma = SMA(period=20)
        >>> for bar in bars:
        ...     sma.update(bar)
        >>> sma.value if sma.is_ready else None
    """

    required_inputs = ('close',)

    def __init__(self, period: int, input_field: str = 'close', name: Optional[str] = None):
        """
        Args:
            period (int): Window length.
            input_field (str): Field to average; 'value' for ScalarSample inputs.
            name (Optional[str]): Display name, defaults to "SMA".

        Raises:
            InvalidParameterError: If period is not a positive integer.
        """
        super().__init__(period, input_field, name=name)
        self.required_inputs = (input_field,)
        self._sum = 0.0

    def update(self, data_point: IndicatorInput) -> ScalarSample:
        """Slide the window by one sample and adjust the running sum."""
        data_point = self._prepare(data_point)
        x = data_point[self.input_field]

        if len(self._buffer) == self.period:
            self._sum -= self._buffer[0]
        self._buffer.append(x)
        self._sum += x

        return self._record(data_point)

    @property
    def value(self) -> float:
        """Window mean; NaN until `period` samples have arrived."""
        return self._sum / self.period if self.is_ready else math.nan

    def reset(self) -> None:
        """Clear the window and the running sum."""
        super().reset()
        self._sum = 0.0


class EMA(BaseIndicator):
    """
    Exponential moving average seeded with a simple average.

        EMA_t = alpha * x_t + (1 - alpha) * EMA_(t-1)

    with alpha = 2 / (period + 1) unless given. The first `period` samples
    go into an SMA; when it fills, its mean becomes the first EMA value and
    the recursion takes over from the next sample on. A period of 1 tracks
    the input exactly.

    The recursion is driven by update order alone. Timestamps are kept for
    `current` but never enter the arithmetic.

    Example:
        >>> smoother = EMA(period=5, input_field='value')
        >>> smoother.update(ScalarSample(timestamp=0, value=1.5))
    """

    required_inputs = ('close',)

    def __init__(
        self,
        period: int,
        input_field: str = 'close',
        alpha: Optional[float] = None,
        name: Optional[str] = None
    ):
        """
        Args:
            period (int): Seed window and, by default, the decay horizon.
            input_field (str): Field to smooth.
            alpha (Optional[float]): Weight of the newest sample, in (0, 1].
            name (Optional[str]): Display name, defaults to "EMA".

        Raises:
            InvalidParameterError: If period or alpha is out of range.
        """
        super().__init__(period, input_field, name=name)
        self.required_inputs = (input_field,)

        if alpha is None:
            alpha = 2.0 / (period + 1)
        elif isinstance(alpha, bool) or not isinstance(alpha, (int, float)) or not 0 < alpha <= 1:
            raise InvalidParameterError("alpha", alpha, "number in (0, 1]", self._name)
        self._alpha = float(alpha)

        self._seed: Optional[SMA] = self._new_seed()
        self._ema: Optional[float] = None

    def _new_seed(self) -> Optional[SMA]:
        # period 1 needs no averaging before the recursion starts
        return SMA(self.period, input_field=self.input_field) if self.period > 1 else None

    def update(self, data_point: IndicatorInput) -> ScalarSample:
        """Feed the seed SMA until it fills, then apply the exponential recursion."""
        data_point = self._prepare(data_point)
        x = data_point[self.input_field]

        if self._seed is not None:
            self._seed.update(data_point)
            if self._seed.is_ready:
                self._ema = self._seed.value
                self._seed = None
        elif self._ema is None:
            self._ema = x
        else:
            self._ema = self._alpha * x + (1.0 - self._alpha) * self._ema

        return self._record(data_point)

    @property
    def value(self) -> float:
        """Smoothed value; NaN while the seed window is filling."""
        if self._ema is None or not self.is_ready:
            return math.nan
        return self._ema

    @property
    def alpha(self) -> float:
        """Weight given to the newest sample."""
        return self._alpha

    def reset(self) -> None:
        """Drop the smoothed value and start a fresh seed window."""
        super().reset()
        self._ema = None
        self._seed = self._new_seed()
