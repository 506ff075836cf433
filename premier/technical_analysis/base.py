"""Streaming indicator contract shared by every indicator in the library."""

import math
import logging
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Mapping
from itertools import islice
from typing import Any, Deque, Dict, List, Optional, Tuple, Union

from .exceptions import InvalidParameterError, MissingInputError, InvalidDataError
from .types import Bar, ScalarSample, Timestamp

logger = logging.getLogger(__name__)

IndicatorInput = Union[Bar, ScalarSample, Mapping]
IndicatorValue = Union[float, Dict[str, float]]

HISTORY_LENGTH = 1000


def _numeric_problem(value: Any) -> Optional[str]:
    """Describe why a required field cannot be used, or None if it can."""
    if value is None:
        return "value is None"
    if isinstance(value, float):
        if math.isnan(value):
            return "value is NaN"
        if math.isinf(value):
            return "value is infinite"
    return None


class BaseIndicator(ABC):
    """
    Streaming indicator: one data point per update, O(1) state per step.

    Subclasses implement `update` and `value`. An update reads:

        data_point = self._prepare(data_point)
        ...incremental arithmetic...
        return self._record(data_point)

    `is_ready` defaults to "at least `period` samples seen". Composite
    indicators override it to delegate to the indicators they own, and list
    those in `_children` so that `reset` cascades.

    Attributes:
        period (int): Lookback period, also the default readiness threshold.
        input_field (str): Field of the data point the indicator reads.
    """

    # Fields every data point must carry; subclasses narrow this per instance
    required_inputs: Tuple[str, ...] = ()

    def __init__(self, period: int, input_field: str = 'close', name: Optional[str] = None):
        self._validate_period(period)

        self.period = period
        self.input_field = input_field
        self._name = name or type(self).__name__

        self._buffer: Deque[Any] = deque(maxlen=period)
        self._history: Deque[IndicatorValue] = deque(maxlen=HISTORY_LENGTH)
        self._ready_threshold = period
        self._data_count = 0
        self._last_update_time: Timestamp = None
        self._children: List['BaseIndicator'] = []

        logger.debug(f"Created {self._name}: period={period}, input_field={input_field}")

    @abstractmethod
    def update(self, data_point: IndicatorInput) -> ScalarSample:
        """
        Fold one data point into the indicator.

        Args:
            data_point: Bar, ScalarSample or mapping carrying `required_inputs`.

        Returns:
            ScalarSample: The indicator's current sample after the update.

        Raises:
            MissingInputError: A required field is absent.
            InvalidDataError: A required field is None, NaN or infinite.
        """

    @property
    @abstractmethod
    def value(self) -> IndicatorValue:
        """
        Latest indicator value.

        Scalar indicators return a float, multi-line indicators a dict. Before
        `is_ready` the value is NaN (or a dict of NaNs) and must not be used.
        """

    @property
    def current(self) -> ScalarSample:
        """Latest value paired with the timestamp of the sample that produced it."""
        return ScalarSample(self._last_update_time, self.value)

    @property
    def is_ready(self) -> bool:
        """True once the value is meaningful."""
        return self._data_count >= self._ready_threshold

    @property
    def samples(self) -> int:
        """Data points processed since construction or the last reset."""
        return self._data_count

    @property
    def name(self) -> str:
        return self._name

    @property
    def last_update_time(self) -> Timestamp:
        return self._last_update_time

    @property
    def children(self) -> List['BaseIndicator']:
        """Indicators owned by this one (a copy; empty for leaf indicators)."""
        return list(self._children)

    def get_history(self, n: int = 10) -> List[IndicatorValue]:
        """
        Last n values, oldest first.

        Values recorded before the indicator was ready are NaN.
        """
        if n <= 0:
            return []
        skip = max(0, len(self._history) - n)
        return list(islice(self._history, skip, None))

    def reset(self) -> None:
        """
        Return to the post-construction state, cascading to every child.

        Resetting an already reset indicator changes nothing.
        """
        self._buffer.clear()
        self._history.clear()
        self._data_count = 0
        self._last_update_time = None

        for child in self._children:
            child.reset()

        logger.debug(f"{self._name} reset")

    def _prepare(self, data_point: IndicatorInput) -> Mapping:
        """
        Turn an update argument into a validated mapping.

        Raises:
            InvalidDataError: Unsupported input type or unusable field value.
            MissingInputError: A required field is absent.
        """
        if isinstance(data_point, (Bar, ScalarSample)):
            data_point = data_point.as_data_point()
        elif not isinstance(data_point, Mapping):
            raise InvalidDataError(
                "data_point", type(data_point).__name__, "expected Bar, ScalarSample or mapping", self._name
            )

        missing = [field for field in self.required_inputs if field not in data_point]
        if missing:
            raise MissingInputError(missing, list(self.required_inputs), self._name)

        for field in self.required_inputs:
            problem = _numeric_problem(data_point[field])
            if problem:
                raise InvalidDataError(field, data_point[field], problem, self._name)

        return data_point

    def _record(self, data_point: Mapping) -> ScalarSample:
        """Count the sample, remember its timestamp and the new value; return current."""
        self._data_count += 1
        if 'timestamp' in data_point:
            self._last_update_time = data_point['timestamp']
        self._history.append(self.value)
        return self.current

    @staticmethod
    def _validate_period(period: Any) -> None:
        """
        Raises:
            InvalidParameterError: period is not a positive integer.
        """
        if isinstance(period, bool) or not isinstance(period, int):
            raise InvalidParameterError("period", period, "positive integer")
        if period <= 0:
            raise InvalidParameterError("period", period, "positive integer (> 0)")

    def __repr__(self) -> str:
        if self.is_ready:
            state = "ready"
        else:
            state = f"warming up {self._data_count}/{self._ready_threshold}"
        return f"{self._name}(period={self.period}, {state})"
