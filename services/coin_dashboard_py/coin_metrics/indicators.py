"""Relative Strength Index over a candle series using pandas.

Only a single RSI value is produced per series: the simple average of
gains and losses over the first ``period`` chronological changes (no
Wilder smoothing).  The function never raises; a series too short for
the period yields 0.
"""

from __future__ import annotations

import math
from typing import Sequence

import pandas as pd

from .models import Candle


def _round_half_up(value: float, ndigits: int = 2) -> float:
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def closes_chronological(candles: Sequence[Candle]) -> pd.Series:
    """Closing prices of a newest-first series, oldest first."""
    return pd.Series([c.trade_price for c in reversed(candles)], dtype=float)


def compute_rsi(candles: Sequence[Candle], period: int = 14) -> float:
    """
    Compute RSI for a newest-first candle series.

    Changes are taken walking forward from the oldest adjacent pair
    (newer close minus older close) and only the first ``period`` of
    them are used.  RSI is 100 when there is no loss at all.
    """
    if period <= 0 or len(candles) < period + 1:
        return 0.0

    delta = closes_chronological(candles).diff().iloc[1:]
    window = delta.iloc[:period]
    gain = window.where(window > 0, 0.0)
    loss = -window.where(window < 0, 0.0)

    avg_gain = gain.sum() / period
    avg_loss = loss.sum() / period
    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    rsi = 100 - (100 / (1 + rs))
    return _round_half_up(rsi, 2)
