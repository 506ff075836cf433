"""
Reference comparison for streaming indicators.

Replays a DataFrame of bars through an indicator and checks its output against
a precomputed reference column (e.g. values exported from a charting
platform) within an absolute tolerance.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Union

import numpy as np
import pandas as pd

from .base import BaseIndicator
from .exceptions import ReferenceDataError, InsufficientDataError
from .types import Bar

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ('high', 'low', 'close')
TIMESTAMP_COLUMNS = ('timestamp', 'date', 'time')
DEFAULT_TOLERANCE = 1e-4


@dataclass
class ReferenceComparison:
    """Outcome of comparing an indicator against a reference column."""
    indicator_name: str
    reference_column: str
    tolerance: float
    compared: int
    max_abs_diff: float
    mismatches: pd.DataFrame

    @property
    def passed(self) -> bool:
        """True when at least one row was compared and none exceeded the tolerance."""
        return self.compared > 0 and self.mismatches.empty

    def __repr__(self) -> str:
        """String representation."""
        status = "PASSED" if self.passed else "FAILED"
        return (f"ReferenceComparison({self.indicator_name} vs {self.reference_column}: {status}, "
                f"compared={self.compared}, mismatches={len(self.mismatches)}, "
                f"max_abs_diff={self.max_abs_diff:.2e})")


def prepare_bars_frame(df: pd.DataFrame) -> pd.DataFrame:
    """
    Normalize a bars DataFrame: lower-case column names and parse timestamps.

    The first of 'timestamp', 'date' or 'time' found is parsed into a UTC
    'timestamp' column.

    Raises:
        ReferenceDataError: If high, low or close is missing.
    """
    frame = df.rename(columns=lambda column: str(column).strip().lower())

    missing = [column for column in REQUIRED_COLUMNS if column not in frame.columns]
    if missing:
        raise ReferenceDataError(missing, list(frame.columns))

    timestamp_column = next((column for column in TIMESTAMP_COLUMNS if column in frame.columns), None)
    if timestamp_column is not None:
        frame['timestamp'] = pd.to_datetime(frame[timestamp_column], utc=True)

    return frame.reset_index(drop=True)


def load_bars_csv(path: Union[str, Path]) -> pd.DataFrame:
    """Read a CSV of bars (optionally with reference columns) and normalize it."""
    frame = prepare_bars_frame(pd.read_csv(path))
    logger.info(f"Loaded {len(frame)} bars from {path}")
    return frame


def iter_bars(frame: pd.DataFrame) -> Iterator[Bar]:
    """
    Yield a Bar per row.

    Rows without a timestamp column are numbered by position; a missing open
    defaults to the close and a missing volume to zero.
    """
    for position, record in enumerate(frame.to_dict('records')):
        timestamp = record.get('timestamp', position)
        if isinstance(timestamp, pd.Timestamp):
            timestamp = timestamp.to_pydatetime()

        yield Bar(
            timestamp=timestamp,
            open=float(record.get('open', record['close'])),
            high=float(record['high']),
            low=float(record['low']),
            close=float(record['close']),
            volume=float(record.get('volume', 0.0)),
        )


def run_indicator(indicator: BaseIndicator, frame: pd.DataFrame, reset: bool = True) -> pd.Series:
    """
    Replay every bar of the frame through the indicator.

    Args:
        indicator: A scalar indicator (its current sample value is recorded).
        frame: Normalized bars DataFrame.
        reset: Reset the indicator before replaying.

    Returns:
        pd.Series: One value per row, NaN while the indicator is not ready.
    """
    if reset:
        indicator.reset()

    values = []
    for bar in iter_bars(frame):
        sample = indicator.update(bar)
        values.append(sample.value if indicator.is_ready else np.nan)

    return pd.Series(values, index=frame.index, name=indicator.name, dtype=float)


def compare_with_reference(
    indicator: BaseIndicator,
    frame: pd.DataFrame,
    reference_column: str = 'pso',
    tolerance: float = DEFAULT_TOLERANCE
) -> ReferenceComparison:
    """
    Compare indicator output against a reference column.

    Rows where the indicator is not ready or the reference is blank are skipped.

    Args:
        indicator: Indicator to replay (it is reset first).
        frame: Bars DataFrame holding the reference column.
        reference_column: Column name, matched case-insensitively.
        tolerance: Maximum allowed absolute difference.

    Returns:
        ReferenceComparison: Summary including the offending rows.

    Raises:
        ReferenceDataError: If the reference column or price columns are missing.
        InsufficientDataError: If the frame is shorter than the warm-up period.
    """
    frame = prepare_bars_frame(frame)
    column = reference_column.strip().lower()
    if column not in frame.columns:
        raise ReferenceDataError([column], list(frame.columns))

    warm_up = getattr(indicator, 'warm_up_period', indicator.period)
    if len(frame) < warm_up:
        raise InsufficientDataError(len(frame), warm_up, indicator.name)

    computed = run_indicator(indicator, frame)
    expected = pd.to_numeric(frame[column], errors='coerce')

    mask = computed.notna() & expected.notna()
    abs_diff = np.abs(computed[mask].to_numpy() - expected[mask].to_numpy())
    outside = abs_diff > tolerance

    mismatches = pd.DataFrame({
        'computed': computed[mask].to_numpy()[outside],
        'expected': expected[mask].to_numpy()[outside],
        'abs_diff': abs_diff[outside],
    }, index=computed[mask].index[outside])

    result = ReferenceComparison(
        indicator_name=indicator.name,
        reference_column=column,
        tolerance=tolerance,
        compared=int(mask.sum()),
        max_abs_diff=float(abs_diff.max()) if abs_diff.size else float('nan'),
        mismatches=mismatches,
    )

    logger.info(f"{result!r}")
    if not mismatches.empty:
        logger.warning(f"{indicator.name}: {len(mismatches)} row(s) differ from '{column}' by more than {tolerance}")

    return result
