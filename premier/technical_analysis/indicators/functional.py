"""
Indicators assembled from injected behaviors instead of subclassing.

Classes:
    FunctionalIndicator: Wraps compute / readiness / reset callables in the
        streaming indicator interface.
"""

import math
from typing import Any, Callable, Dict, Optional

from ..base import BaseIndicator, IndicatorInput
from ..exceptions import InvalidParameterError
from ..types import ScalarSample

ComputeFn = Callable[[Dict[str, Any]], float]
ReadyPredicate = Callable[[], bool]
ResetAction = Callable[[], None]


class FunctionalIndicator(BaseIndicator):
    """
    Streaming indicator whose behavior is supplied as three callables.

    Any transform pipeline over other indicators can be exposed through the
    BaseIndicator interface by binding:

        compute(data_point) -> float   run on every update, result becomes current
        ready_predicate() -> bool      answers is_ready, evaluated on every call
        reset_action() -> None         run on reset before local state is cleared

    The indicator keeps no readiness threshold of its own: `is_ready` is
    whatever the predicate reports at the moment it is asked.

    Example:
        >>> ema = EMA(5)
        >>> doubled = FunctionalIndicator(
        ...     compute=lambda bar: 2 * ema.update(bar).value,
        ...     ready_predicate=lambda: ema.is_ready,
        ...     reset_action=ema.reset,
        ...     name='double_ema',
        ... )
    """

    required_inputs = ()

    def __init__(
        self,
        compute: ComputeFn,
        ready_predicate: ReadyPredicate,
        reset_action: ResetAction,
        name: Optional[str] = None,
        period: int = 1
    ):
        """
        Initialize the functional indicator.

        Args:
            compute: Maps a data point dict to the new indicator value.
            ready_predicate: Reports whether the value is meaningful.
            reset_action: Resets whatever state compute relies on.
            name (Optional[str]): Display name, defaults to the class name.
            period (int): Nominal period, informational only.

        Raises:
            InvalidParameterError: If any behavior is not callable.
        """
        for parameter_name, behavior in (
            ("compute", compute),
            ("ready_predicate", ready_predicate),
            ("reset_action", reset_action),
        ):
            if not callable(behavior):
                raise InvalidParameterError(parameter_name, behavior, "callable", name or "FunctionalIndicator")

        super().__init__(period, input_field='value', name=name)

        self._compute = compute
        self._ready_predicate = ready_predicate
        self._reset_action = reset_action

        self._current_value = math.nan

    def update(self, data_point: IndicatorInput) -> ScalarSample:
        """
        Run compute on the data point and store the result as current.

        Args:
            data_point: Bar, ScalarSample or mapping handed to compute as a dict.

        Returns:
            ScalarSample: The freshly computed sample.
        """
        data_point = self._prepare(data_point)

        self._current_value = self._compute(data_point)

        return self._record(data_point)

    @property
    def value(self) -> float:
        """Last computed value, NaN before the first update or after reset."""
        return self._current_value

    @property
    def is_ready(self) -> bool:
        """Delegates to the injected readiness predicate."""
        return bool(self._ready_predicate())

    def reset(self) -> None:
        """Run the injected reset action, then clear the current value and sample count."""
        self._reset_action()
        super().reset()
        self._current_value = math.nan
