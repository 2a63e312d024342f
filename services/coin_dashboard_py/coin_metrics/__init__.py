"""Core of the coin dashboard.

This package fetches hourly candles from the Upbit public API,
computes RSI and per-market metrics concurrently, and ranks the
resulting rows for display.  Per-market upstream failures are
contained; the functions are deterministic given the same candles.
"""

from .config import TOP_MARKETS
from .errors import EmptySeries, FetchError, PipelineError
from .models import Candle, MarketOutcome, MetricRecord
from .candle_fetcher import fetch_candles
from .indicators import compute_rsi
from .aggregator import build_record, collect_outcomes, get_coin_metrics
from .ranking import normalize_sort_key, sort_metrics

__all__ = [
    "TOP_MARKETS",
    "EmptySeries",
    "FetchError",
    "PipelineError",
    "Candle",
    "MarketOutcome",
    "MetricRecord",
    "fetch_candles",
    "compute_rsi",
    "build_record",
    "collect_outcomes",
    "get_coin_metrics",
    "normalize_sort_key",
    "sort_metrics",
]
