"""Immutable input and output types exchanged between streaming indicators."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Union

# Bars carry either a real datetime or a logical sequence number
Timestamp = Union[datetime, int, None]


# --- Price Bars ---------------------------------------------------
@dataclass(frozen=True)
class Bar:
    """Single OHLCV price observation for one time interval."""
    # Required fields come first
    timestamp: Timestamp
    open: float
    high: float
    low: float
    close: float
    # Default field comes last
    volume: float = 0.0

    def as_data_point(self) -> Dict[str, Any]:
        """Dictionary form consumed by indicator update methods."""
        return {
            'timestamp': self.timestamp,
            'open': self.open,
            'high': self.high,
            'low': self.low,
            'close': self.close,
            'volume': self.volume,
        }


# --- Scalar Samples -----------------------------------------------
@dataclass(frozen=True)
class ScalarSample:
    """Timestamped scalar value, the unit passed between indicator stages."""
    timestamp: Timestamp
    value: Any

    def as_data_point(self) -> Dict[str, Any]:
        """Dictionary form consumed by indicator update methods."""
        return {'timestamp': self.timestamp, 'value': self.value}

    def __repr__(self) -> str:
        """String representation."""
        return f"ScalarSample(ts={self.timestamp}, value={self.value})"
