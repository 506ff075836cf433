"""Errors raised by indicators, the factory and the validation harness."""

import difflib
from typing import Any, List, Optional, Sequence


class IndicatorError(Exception):
    """Root of the library's exceptions; the message is prefixed with the indicator name."""

    def __init__(self, message: str, indicator_name: Optional[str] = None):
        super().__init__(f"[{indicator_name}] {message}" if indicator_name else message)
        self.indicator_name = indicator_name


class InvalidParameterError(IndicatorError):
    """Constructor or factory argument out of range or of the wrong type."""

    def __init__(self, parameter_name: str, value: Any, expected: str, indicator_name: Optional[str] = None):
        self.parameter_name, self.value, self.expected = parameter_name, value, expected
        super().__init__(f"Invalid parameter '{parameter_name}': got {value!r}, expected {expected}", indicator_name)


class MissingInputError(IndicatorError):
    """Data point lacks a field the indicator reads."""

    def __init__(self, missing_fields: Sequence[str], required_fields: Sequence[str],
                 indicator_name: Optional[str] = None):
        self.missing_fields = list(missing_fields)
        self.required_fields = list(required_fields)
        super().__init__(
            f"Data point is missing {', '.join(self.missing_fields)}; "
            f"this indicator reads {', '.join(self.required_fields)}",
            indicator_name,
        )


class InsufficientDataError(IndicatorError):
    """Fewer bars than the operation needs."""

    def __init__(self, current_count: int, required_count: int, indicator_name: Optional[str] = None):
        self.current_count = current_count
        self.required_count = required_count
        super().__init__(f"Need at least {required_count} bars, got {current_count}", indicator_name)


class InvalidDataError(IndicatorError):
    """Field value is None, NaN or infinite, or the input has an unsupported type."""

    def __init__(self, field_name: str, value: Any, reason: str, indicator_name: Optional[str] = None):
        self.field_name, self.value, self.reason = field_name, value, reason
        super().__init__(f"Invalid data in field '{field_name}': {value!r} ({reason})", indicator_name)


class IndicatorNotFoundError(IndicatorError):
    """Factory lookup for a name that is not registered."""

    def __init__(self, indicator_name: str, available_indicators: Optional[List[str]] = None):
        self.available_indicators = sorted(available_indicators or [])

        parts = [f"Unknown indicator '{indicator_name}'"]
        guess = difflib.get_close_matches(indicator_name.lower(), self.available_indicators, n=1)
        if guess:
            parts.append(f", did you mean '{guess[0]}'?")
        if self.available_indicators:
            parts.append(f" Available indicators: {', '.join(self.available_indicators)}")

        # The unknown name is the subject of the message, not a prefix
        super().__init__(''.join(parts))
        self.indicator_name = indicator_name


class ReferenceDataError(IndicatorError):
    """Bars or reference frame lacks columns the comparison needs."""

    def __init__(self, missing_columns: List[str], available_columns: Optional[List[str]] = None):
        self.missing_columns = missing_columns
        self.available_columns = available_columns or []
        message = f"Reference data is missing columns: {', '.join(missing_columns)}"
        if self.available_columns:
            message += f". Available: {', '.join(self.available_columns)}"
        super().__init__(message)
