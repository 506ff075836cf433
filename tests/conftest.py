"""Shared fixtures for the indicator test suite."""

import math
import sys
from datetime import datetime, timedelta
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from premier.technical_analysis.types import Bar


def make_wave_bars(n: int, start: datetime = datetime(2024, 1, 1)):
    """Deterministic oscillating bars with a slight upward drift."""
    bars = []
    for i in range(n):
        close = 100 + 5 * math.sin(i / 3) + 0.1 * i
        bars.append(Bar(
            timestamp=start + timedelta(days=i),
            open=close - 0.2,
            high=close + 1 + abs(math.cos(i)),
            low=close - 1 - abs(math.sin(i / 2)),
            close=close,
            volume=1000 + i,
        ))
    return bars


@pytest.fixture
def wave_bars():
    """Sixty oscillating bars."""
    return make_wave_bars(60)


@pytest.fixture
def flat_bars():
    """Twenty bars whose close sits exactly mid-range."""
    return [
        Bar(timestamp=datetime(2024, 1, 1) + timedelta(days=i), open=100.0, high=105.0, low=95.0, close=100.0)
        for i in range(20)
    ]


@pytest.fixture
def ramp_bars():
    """Five flat bars followed by closes ramping to a new high of 120."""
    bars = [Bar(timestamp=i, open=100.0, high=105.0, low=95.0, close=100.0) for i in range(5)]
    for offset, close in enumerate([101.0, 103.0, 105.0, 108.0, 111.0, 114.0, 117.0, 120.0]):
        bars.append(Bar(timestamp=5 + offset, open=close, high=max(105.0, close), low=95.0, close=close))
    return bars


@pytest.fixture
def wave_frame():
    """Sixty oscillating bars as a DataFrame with a 'date' column."""
    return pd.DataFrame([
        {
            'date': bar.timestamp.strftime('%Y-%m-%d'),
            'open': bar.open,
            'high': bar.high,
            'low': bar.low,
            'close': bar.close,
            'volume': bar.volume,
        }
        for bar in make_wave_bars(60)
    ])


def compute_reference_pso(frame: pd.DataFrame, period: int) -> pd.Series:
    """Independent vectorized PSO: fast %K, 0.1 * (k - 50), SMA-seeded EMA(5), tanh(ss / 2)."""
    lowest = frame['low'].rolling(period, min_periods=1).min()
    highest = frame['high'].rolling(period, min_periods=1).max()
    span = highest - lowest
    k = (100 * (frame['close'] - lowest) / span).where(span != 0, 50.0)
    nsk = 0.1 * (k - 50)

    seeded = nsk.iloc[4:].copy()
    seeded.iloc[0] = nsk.iloc[:5].mean()
    ss = seeded.ewm(span=5, adjust=False).mean().reindex(frame.index)

    ready = pd.Series(np.arange(len(frame)) >= max(period, 5) - 1, index=frame.index)
    return np.tanh(ss / 2).where(ready)


@pytest.fixture
def reference_pso():
    """Vectorized pandas PSO used as the external reference."""
    return compute_reference_pso
