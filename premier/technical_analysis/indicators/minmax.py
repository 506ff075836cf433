"""
Rolling extremes for range-based oscillators.

Classes:
    RollingMinMax: Windowed minimum and maximum in amortized constant time.
"""

import operator
from collections import deque
from typing import Callable, Deque, Tuple

from ..exceptions import InvalidParameterError

_Candidates = Deque[Tuple[float, int]]


def _push(candidates: _Candidates, value: float, seq: int, oldest_kept: int,
          dominates: Callable[[float, float], bool]) -> None:
    if candidates and candidates[0][1] < oldest_kept:
        candidates.popleft()
    while candidates and dominates(value, candidates[-1][0]):
        candidates.pop()
    candidates.append((value, seq))


class RollingMinMax:
    """
    Minimum and maximum of the last `period` values.

    Each side keeps a monotonic deque of (value, sequence number) pairs. A new
    value evicts every tail entry it dominates, and the head is dropped once
    its sequence number leaves the window, so the head is always the extreme.

    Until `period` values have arrived the extremes cover what has been seen,
    which range oscillators use to produce a value during warm-up.
    """

    def __init__(self, period: int):
        """
        Raises:
            InvalidParameterError: If period is not a positive integer.
        """
        if isinstance(period, bool) or not isinstance(period, int) or period <= 0:
            raise InvalidParameterError("period", period, "positive integer (> 0)", "RollingMinMax")

        self.period = period
        self._lows: _Candidates = deque()
        self._highs: _Candidates = deque()
        self._count = 0

    def update(self, value: float) -> None:
        oldest_kept = self._count - self.period + 1
        _push(self._lows, value, self._count, oldest_kept, operator.le)
        _push(self._highs, value, self._count, oldest_kept, operator.ge)
        self._count += 1

    @property
    def count(self) -> int:
        return self._count

    @property
    def is_ready(self) -> bool:
        return self._count >= self.period

    @property
    def min(self) -> float:
        """Window minimum; +inf before the first value."""
        return self._lows[0][0] if self._lows else float('inf')

    @property
    def max(self) -> float:
        """Window maximum; -inf before the first value."""
        return self._highs[0][0] if self._highs else float('-inf')

    def reset(self) -> None:
        self._lows.clear()
        self._highs.clear()
        self._count = 0
