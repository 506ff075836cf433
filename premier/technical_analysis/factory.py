"""Name-based construction of indicators, for code and for configuration files."""

import inspect
import logging
from typing import Any, Dict, Iterable, List, Sequence, Tuple, Type

from .base import BaseIndicator
from .exceptions import InvalidParameterError, IndicatorNotFoundError
from .indicators.trend import SMA, EMA
from .indicators.composite import Stochastic
from .indicators.momentum import PremierStochasticOscillator

logger = logging.getLogger(__name__)

VALID_INPUT_FIELDS = ('open', 'high', 'low', 'close', 'volume', 'value')

# (canonical name, class, aliases)
_BUILTINS: Tuple[Tuple[str, Type[BaseIndicator], Tuple[str, ...]], ...] = (
    ('sma', SMA, ('simple_ma', 'simple_moving_average')),
    ('ema', EMA, ('exp_ma', 'exponential_moving_average')),
    ('stochastic', Stochastic, ('stoch',)),
    ('premier_stochastic_oscillator', PremierStochasticOscillator,
     ('pso', 'premier_stochastic', 'premierstochasticoscillator')),
)


class IndicatorRegistry:
    """Case-insensitive mapping from names and aliases to indicator classes."""

    def __init__(self, entries: Iterable[Tuple[str, Type[BaseIndicator], Sequence[str]]] = _BUILTINS):
        self._by_name: Dict[str, Type[BaseIndicator]] = {}
        for name, indicator_class, aliases in entries:
            self.register(name, indicator_class, aliases)

    def register(self, name: str, indicator_class: Type[BaseIndicator], aliases: Sequence[str] = ()) -> None:
        for key in (name, *aliases):
            self._by_name[key.lower()] = indicator_class

    def get(self, name: str) -> Type[BaseIndicator]:
        """
        Raises:
            IndicatorNotFoundError: name is neither a registered name nor an alias.
        """
        try:
            return self._by_name[name.lower()]
        except KeyError:
            raise IndicatorNotFoundError(name, self.list_indicators()) from None

    def list_indicators(self) -> List[str]:
        """One entry per class: the lower-cased class name."""
        return sorted({cls.__name__.lower() for cls in self._by_name.values()})

    def get_aliases(self, name: str) -> List[str]:
        """Every key that resolves to the same class as name; empty if unknown."""
        target = self._by_name.get(name.lower())
        if target is None:
            return []
        return [key for key, cls in self._by_name.items() if cls is target]


_REGISTRY = IndicatorRegistry()


def _constructor_parameters(indicator_class: Type[BaseIndicator]) -> Dict[str, inspect.Parameter]:
    parameters = inspect.signature(indicator_class.__init__).parameters
    return {key: param for key, param in parameters.items() if key != 'self'}


def create(name: str, **kwargs) -> BaseIndicator:
    """
    Instantiate a registered indicator.

    Args:
        name (str): Registered name or alias, any case.
        **kwargs: Constructor arguments.

    Returns:
        BaseIndicator: The new indicator.

    Raises:
        IndicatorNotFoundError: Unknown name.
        InvalidParameterError: Arguments rejected by the constructor.

    Examples:
        >>> import premier.technical_analysis as ta
        >>> pso = ta.create('pso', period=8)
        >>> smoother = ta.create('EMA', period=5, input_field='value')
    """
    indicator_class = _REGISTRY.get(name)
    try:
        indicator = indicator_class(**kwargs)
    except TypeError as e:
        accepted = list(_constructor_parameters(indicator_class))
        raise InvalidParameterError("constructor", kwargs, f"keyword arguments among {accepted}", name) from e

    logger.debug(f"Factory built {indicator!r} for '{name}'")
    return indicator


def create_from_config(specs: Iterable[Dict[str, Any]]) -> Dict[str, BaseIndicator]:
    """
    Build every indicator listed in a configuration section.

    Each entry carries the registered name under 'type'; its remaining keys
    become constructor arguments, with 'period' and 'input_field' checked
    before the constructor sees them.

    Returns:
        Dict[str, BaseIndicator]: Indicators keyed by display name, in entry order.

    Raises:
        InvalidParameterError: Entry without 'type', or with bad arguments.
        IndicatorNotFoundError: Entry with an unknown 'type'.

    Example:
        >>> indicators = create_from_config([
        ...     {'type': 'pso', 'period': 14},
        ...     {'type': 'pso', 'period': 8, 'name': 'fast_pso'},
        ... ])
        >>> list(indicators)
        ['PSO(14)', 'fast_pso']
    """
    indicators: Dict[str, BaseIndicator] = {}

    for spec in specs:
        params = dict(spec)
        indicator_type = params.pop('type', None)
        if not indicator_type:
            raise InvalidParameterError("type", spec, "indicator entry with a 'type' key")

        if 'period' in params:
            params['period'] = validate_period(params['period'])
        if 'input_field' in params:
            params['input_field'] = validate_input_field(params['input_field'])

        indicator = create(indicator_type, **params)
        indicators[indicator.name] = indicator

    logger.info(f"Configured {len(indicators)} indicator(s): {', '.join(indicators) or 'none'}")
    return indicators


def list_indicators() -> List[str]:
    """Lower-cased class names of every registered indicator, sorted."""
    return _REGISTRY.list_indicators()


def describe(name: str) -> Dict[str, Any]:
    """
    Summarize a registered indicator for help output.

    Returns:
        Dict[str, Any]: 'name' (class name), 'aliases', 'parameters' (per
            constructor argument: type, default, required), 'docstring' and
            'required_inputs'.

    Raises:
        IndicatorNotFoundError: Unknown name.
    """
    indicator_class = _REGISTRY.get(name)
    empty = inspect.Parameter.empty

    parameters = {
        key: {
            'type': 'Any' if param.annotation is empty else param.annotation,
            'default': None if param.default is empty else param.default,
            'required': param.default is empty,
        }
        for key, param in _constructor_parameters(indicator_class).items()
    }

    return {
        'name': indicator_class.__name__,
        'aliases': _REGISTRY.get_aliases(name),
        'parameters': parameters,
        'docstring': indicator_class.__doc__,
        'required_inputs': indicator_class.required_inputs,
    }


def validate_period(period: Any, name: str = "period") -> int:
    """Return period unchanged if it is a positive int, else raise InvalidParameterError."""
    if isinstance(period, bool) or not isinstance(period, int) or period <= 0:
        raise InvalidParameterError(name, period, "positive integer (> 0)")
    return period


def validate_input_field(input_field: Any) -> str:
    """Return the lower-cased field name if it is a known bar or sample field."""
    field = input_field.lower() if isinstance(input_field, str) else None
    if field not in VALID_INPUT_FIELDS:
        raise InvalidParameterError("input_field", input_field, f"one of {list(VALID_INPUT_FIELDS)}")
    return field
