"""
Data types flowing through the metrics pipeline.

``Candle`` mirrors one object of the Upbit minute-candle response and is
validated with pydantic.  ``MetricRecord`` is one dashboard row and
``MarketOutcome`` is the per-market result of the concurrent fetch.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import asdict, dataclass
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class Candle(BaseModel):
    model_config = {"extra": "ignore", "frozen": True}

    market: str = Field(..., description="Market identifier, e.g. KRW-BTC")
    candle_date_time_utc: dt.datetime = Field(..., description="Bucket start (UTC)")
    candle_date_time_kst: Optional[dt.datetime] = Field(None, description="Bucket start (KST)")
    opening_price: float
    high_price: float
    low_price: float
    trade_price: float = Field(..., description="Closing price of the bucket")
    timestamp: Optional[int] = Field(None, description="Last trade time in ms")
    candle_acc_trade_price: float = Field(..., description="Cumulative traded value")
    candle_acc_trade_volume: float = Field(..., description="Cumulative traded volume")
    prev_closing_price: Optional[float] = None
    change_price: Optional[float] = None
    change_rate: Optional[float] = Field(None, description="Change vs. previous close, as a fraction")

    @model_validator(mode="before")
    @classmethod
    def _fill_change(cls, data):
        """Derive change fields from prev_closing_price when upstream omits them."""
        if not isinstance(data, dict) or data.get("change_rate") is not None:
            return data
        try:
            close = float(data["trade_price"])
            prev = float(data["prev_closing_price"])
        except (KeyError, TypeError, ValueError):
            return data
        if not prev:
            return data
        data = dict(data)
        if data.get("change_price") is None:
            data["change_price"] = close - prev
        data["change_rate"] = (close - prev) / prev
        return data

    @field_validator("candle_date_time_utc")
    @classmethod
    def _as_utc(cls, v: dt.datetime) -> dt.datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=dt.timezone.utc)
        return v.astimezone(dt.timezone.utc)


@dataclass(frozen=True)
class MetricRecord:
    symbol: str
    name: str
    current_price: float
    volume_24h: float
    rsi: float
    change_rate: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class MarketOutcome:
    """Either a computed record or the reason the market was dropped."""
    market: str
    record: Optional[MetricRecord] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None
