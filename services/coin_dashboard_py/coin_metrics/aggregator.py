"""
Concurrent per-market metrics collection.

Every market is fetched at once on the event loop and the results are
joined with ``asyncio.gather``.  Each market resolves to a
``MarketOutcome``; failed or empty markets are logged and left out of
the returned list so one flaky market never blocks the dashboard.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence

import httpx

from .candle_fetcher import fetch_candles
from .config import CANDLE_COUNT, MARKET_PREFIX, RSI_PERIOD, TOP_MARKETS, get_logger
from .errors import EmptySeries, FetchError
from .indicators import compute_rsi
from .models import Candle, MarketOutcome, MetricRecord

logger = get_logger("metrics_aggregator")

Fetcher = Callable[..., Awaitable[List[Candle]]]


def display_name(market: str) -> str:
    return market.replace(MARKET_PREFIX, "", 1)


def change_rate(candles: Sequence[Candle]) -> float:
    """Newest candle's change as a fraction, falling back to the previous candle's close."""
    latest = candles[0]
    if latest.change_rate is not None:
        return latest.change_rate
    if len(candles) > 1 and candles[1].trade_price:
        prev = candles[1].trade_price
        return (latest.trade_price - prev) / prev
    return 0.0


def build_record(market: str, candles: Sequence[Candle], period: int = RSI_PERIOD) -> MetricRecord:
    """Reduce a non-empty newest-first series to one dashboard row."""
    if not candles:
        raise EmptySeries(market)
    latest = candles[0]
    return MetricRecord(
        symbol=market,
        name=display_name(market),
        current_price=latest.trade_price,
        volume_24h=latest.candle_acc_trade_price,
        rsi=compute_rsi(candles, period),
        change_rate=change_rate(candles) * 100,
    )


async def collect_market(
    market: str,
    fetcher: Fetcher,
    client: httpx.AsyncClient,
    count: int = CANDLE_COUNT,
) -> MarketOutcome:
    try:
        candles = await fetcher(market, count, client=client)
        record = build_record(market, candles)
    except (FetchError, httpx.HTTPError) as e:
        logger.warning("Error fetching %s: %s", market, e)
        return MarketOutcome(market=market, error=str(e) or type(e).__name__)
    return MarketOutcome(market=market, record=record)


async def collect_outcomes(
    markets: Sequence[str] = TOP_MARKETS,
    count: int = CANDLE_COUNT,
    fetcher: Fetcher = fetch_candles,
    client: Optional[httpx.AsyncClient] = None,
) -> List[MarketOutcome]:
    """Fan out one fetch per market and wait for all of them."""
    if client is None:
        async with httpx.AsyncClient() as own_client:
            return await collect_outcomes(markets, count, fetcher, own_client)

    results = await asyncio.gather(
        *(collect_market(m, fetcher, client, count) for m in markets),
        return_exceptions=True,
    )
    # every market has resolved here; only now surface an uncontained failure
    for market, result in zip(markets, results):
        if isinstance(result, BaseException):
            logger.error("Unexpected error for %s: %r", market, result)
            raise result
    return list(results)


async def get_coin_metrics(
    markets: Sequence[str] = TOP_MARKETS,
    count: int = CANDLE_COUNT,
    fetcher: Fetcher = fetch_candles,
    client: Optional[httpx.AsyncClient] = None,
) -> List[MetricRecord]:
    outcomes = await collect_outcomes(markets, count, fetcher, client)
    records = [o.record for o in outcomes if o.ok]
    dropped = len(outcomes) - len(records)
    if dropped:
        logger.info("Collected %d/%d markets (%d dropped)", len(records), len(outcomes), dropped)
    return records
