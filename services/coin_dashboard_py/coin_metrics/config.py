# coin_metrics/config.py
"""Runtime configuration for the coin dashboard.

Everything is read once from the environment at import time.  The
market list is a constant rather than an environment setting: it is
passed explicitly into the aggregator so tests can substitute it.
"""
from __future__ import annotations

import logging
import os
from typing import Optional, Tuple

# ──────────────────────────────────────────────────────────────────────────────
# Env helpers (strip quotes/whitespace so .env "KEY=value " doesn’t break things)
# ──────────────────────────────────────────────────────────────────────────────

def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    if v is None:
        return default
    v = v.strip()
    if (v.startswith('"') and v.endswith('"')) or (v.startswith("'") and v.endswith("'")):
        v = v[1:-1].strip()
    return v or default

# ──────────────────────────────────────────────────────────────────────────────
# Upbit
# ──────────────────────────────────────────────────────────────────────────────

UPBIT_BASE_URL = (_env("UPBIT_BASE_URL", "https://api.upbit.com") or "").rstrip("/")
UPBIT_TIMEOUT_SECS = float(_env("UPBIT_TIMEOUT_SECS", "10") or "10")
CANDLE_UNIT_MINUTES = 60
CANDLE_COUNT = int(_env("CANDLE_COUNT", "30") or "30")
RSI_PERIOD = int(_env("RSI_PERIOD", "14") or "14")

MARKET_PREFIX = "KRW-"

TOP_MARKETS: Tuple[str, ...] = (
    "KRW-BTC",
    "KRW-ETH",
    "KRW-XRP",
    "KRW-SOL",
    "KRW-DOGE",
    "KRW-ADA",
    "KRW-AVAX",
    "KRW-SHIB",
    "KRW-MATIC",
    "KRW-DOT",
    "KRW-TRX",
    "KRW-LINK",
    "KRW-BCH",
    "KRW-NEAR",
    "KRW-UNI",
)

# ──────────────────────────────────────────────────────────────────────────────
# HTTP / logging
# ──────────────────────────────────────────────────────────────────────────────

CACHE_MAX_AGE = int(_env("CACHE_MAX_AGE", "60") or "60")
LOG_LEVEL = (_env("DASHBOARD_LOG_LEVEL", "INFO") or "INFO").upper()


def get_logger(name: str) -> logging.Logger:
    """Return a named logger with the shared stream handler attached once."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        _h = logging.StreamHandler()
        _h.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"))
        logger.addHandler(_h)
    logger.setLevel(LOG_LEVEL)
    return logger
