"""
FastAPI application serving the coin dashboard.  Each request fetches
fresh candles for the fixed market list, computes metrics, and renders
them; responses carry a short public cache lifetime so repeated hits
within the window can be served from a cache.
"""
from __future__ import annotations
import datetime as dt
from typing import List

from fastapi import FastAPI, Query, Request, Response
from fastapi.responses import HTMLResponse, PlainTextResponse
from pydantic import BaseModel

from coin_metrics import (
    TOP_MARKETS,
    PipelineError,
    get_coin_metrics,
    normalize_sort_key,
    sort_metrics,
)
from coin_metrics.config import CACHE_MAX_AGE, get_logger

from .render import render_dashboard

logger = get_logger("dashboard_api")
app = FastAPI(title="Coin Indicator Dashboard")


# ----------------------------------------------------------------------
# Models
# ----------------------------------------------------------------------
class MetricResponse(BaseModel):
    symbol: str
    name: str
    current_price: float
    volume_24h: float
    rsi: float
    change_rate: float


def _cache_headers() -> dict:
    return {"Cache-Control": f"public, max-age={CACHE_MAX_AGE}"}


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError) -> PlainTextResponse:
    return PlainTextResponse(f"Error: {exc}", status_code=500)


async def _ranked_metrics(sort: str):
    try:
        coins = await get_coin_metrics(TOP_MARKETS)
    except Exception as e:
        logger.exception("Unhandled error while collecting metrics")
        raise PipelineError(str(e) or type(e).__name__) from e
    return sort_metrics(coins, sort)


# ----------------------------------------------------------------------
# Endpoints
# ----------------------------------------------------------------------
@app.get("/", response_class=HTMLResponse)
async def dashboard(
    sort: str = Query("volume", description="Sort key: volume or rsi"),
) -> HTMLResponse:
    """Render the dashboard sorted by 24h traded value or RSI."""
    sort_by = normalize_sort_key(sort)
    coins = await _ranked_metrics(sort_by)
    html_doc = render_dashboard(coins, sort_by, now=dt.datetime.now(dt.timezone.utc))
    return HTMLResponse(
        html_doc,
        media_type="text/html; charset=utf-8",
        headers=_cache_headers(),
    )


@app.get("/api/metrics", response_model=List[MetricResponse])
async def metrics(
    response: Response,
    sort: str = Query("volume", description="Sort key: volume or rsi"),
) -> List[MetricResponse]:
    """Same rows as the dashboard, as JSON."""
    coins = await _ranked_metrics(normalize_sort_key(sort))
    response.headers["Cache-Control"] = _cache_headers()["Cache-Control"]
    return [MetricResponse(**c.to_dict()) for c in coins]
