import datetime as dt

import pytest

from coin_metrics.models import Candle


def _candle_payload(market: str, close: float, prev_close: float, when: dt.datetime, acc_value: float) -> dict:
    change = close - prev_close
    return {
        "market": market,
        "candle_date_time_utc": when.strftime("%Y-%m-%dT%H:%M:%S"),
        "candle_date_time_kst": (when + dt.timedelta(hours=9)).strftime("%Y-%m-%dT%H:%M:%S"),
        "opening_price": prev_close,
        "high_price": max(close, prev_close),
        "low_price": min(close, prev_close),
        "trade_price": close,
        "timestamp": int(when.replace(tzinfo=dt.timezone.utc).timestamp() * 1000),
        "candle_acc_trade_price": acc_value,
        "candle_acc_trade_volume": acc_value / close,
        "prev_closing_price": prev_close,
        "change_price": change,
        "change_rate": change / prev_close,
        "unit": 60,
    }


@pytest.fixture
def candle_payloads():
    """Build an Upbit-shaped JSON list (newest first) from oldest-first closes."""

    def build(closes, market="KRW-BTC", acc_value=1_000_000_000.0):
        start = dt.datetime(2024, 1, 1, 0, 0, 0)
        rows = []
        for i, close in enumerate(closes):
            prev = closes[i - 1] if i else close
            when = start + dt.timedelta(hours=i)
            rows.append(_candle_payload(market, float(close), float(prev), when, acc_value))
        return list(reversed(rows))

    return build


@pytest.fixture
def make_candles(candle_payloads):
    """Same as ``candle_payloads`` but validated into ``Candle`` objects."""

    def build(closes, market="KRW-BTC", acc_value=1_000_000_000.0):
        return [Candle.model_validate(p) for p in candle_payloads(closes, market, acc_value)]

    return build
