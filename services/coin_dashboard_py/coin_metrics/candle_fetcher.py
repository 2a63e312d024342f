# coin_metrics/candle_fetcher.py
"""Fetch hourly candles for one market from the Upbit public API.

The upstream answers with a JSON array of candle objects ordered
newest-first.  A non-success status raises ``FetchError``; nothing is
retried here, recovery belongs to the aggregator.
"""
from __future__ import annotations

from typing import List, Optional

import httpx
from pydantic import ValidationError

from .config import CANDLE_UNIT_MINUTES, UPBIT_BASE_URL, UPBIT_TIMEOUT_SECS, get_logger
from .errors import FetchError
from .models import Candle

logger = get_logger("candle_fetcher")


def _candles_url() -> str:
    return f"{UPBIT_BASE_URL}/v1/candles/minutes/{CANDLE_UNIT_MINUTES}"


async def _get_candles_json(client: httpx.AsyncClient, market: str, count: int) -> httpx.Response:
    params = {"market": market, "count": count}
    return await client.get(_candles_url(), params=params, timeout=UPBIT_TIMEOUT_SECS)


async def fetch_candles(
    market: str,
    count: int = 14,
    client: Optional[httpx.AsyncClient] = None,
) -> List[Candle]:
    """
    Return up to ``count`` hourly candles for ``market``, newest first.

    When ``client`` is omitted a short-lived ``httpx.AsyncClient`` is
    opened for the single request.
    """
    if client is None:
        async with httpx.AsyncClient() as own_client:
            return await fetch_candles(market, count, client=own_client)

    resp = await _get_candles_json(client, market, count)
    status = resp.status_code
    if not resp.is_success:
        logger.debug("Upbit %s for %s: %s", status, market, resp.reason_phrase)
        raise FetchError(market, status, resp.reason_phrase)

    try:
        payload = resp.json()
    except ValueError as e:
        raise FetchError(market, status, "malformed response") from e
    if not isinstance(payload, list):
        raise FetchError(market, status, "malformed response")

    try:
        candles = [Candle.model_validate(item) for item in payload[:count]]
    except ValidationError as e:
        raise FetchError(market, status, "malformed response") from e

    logger.debug("Fetched %d candles for %s", len(candles), market)
    return candles
