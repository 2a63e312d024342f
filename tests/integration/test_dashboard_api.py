"""
End-to-end tests for the dashboard HTTP API.

The upstream is replaced either by patching the aggregator or by
routing the real fetcher through an ``httpx.MockTransport``, so no
network access is needed.
"""
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from coin_metrics import aggregator
from coin_metrics.config import TOP_MARKETS
from coin_metrics.models import MetricRecord
from dashboard.api import app


def _coins():
    return [
        MetricRecord("KRW-BTC", "BTC", 95_000_000.0, 100.0, 20.0, 1.0),
        MetricRecord("KRW-ETH", "ETH", 4_800_000.0, 300.0, 80.0, -1.0),
        MetricRecord("KRW-SOL", "SOL", 200_000.0, 200.0, 50.0, 0.5),
    ]


@pytest.fixture
def client():
    return TestClient(app)


def test_dashboard_defaults_to_volume_sort(client):
    with patch("dashboard.api.get_coin_metrics", AsyncMock(return_value=_coins())) as mock_get:
        resp = client.get("/")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "text/html; charset=utf-8"
    assert resp.headers["cache-control"] == "public, max-age=60"
    body = resp.text
    assert body.index(">ETH<") < body.index(">SOL<") < body.index(">BTC<")
    mock_get.assert_awaited_once_with(TOP_MARKETS)


def test_dashboard_sorts_by_rsi(client):
    with patch("dashboard.api.get_coin_metrics", AsyncMock(return_value=_coins())):
        resp = client.get("/", params={"sort": "rsi"})

    body = resp.text
    assert body.index(">ETH<") < body.index(">SOL<") < body.index(">BTC<")


def test_unknown_sort_falls_back_to_volume(client):
    with patch("dashboard.api.get_coin_metrics", AsyncMock(return_value=_coins())):
        resp = client.get("/api/metrics", params={"sort": "price"})

    assert resp.status_code == 200
    assert [row["name"] for row in resp.json()] == ["ETH", "SOL", "BTC"]


def test_metrics_json_by_rsi(client):
    with patch("dashboard.api.get_coin_metrics", AsyncMock(return_value=_coins())):
        resp = client.get("/api/metrics", params={"sort": "rsi"})

    rows = resp.json()
    assert [r["rsi"] for r in rows] == [80.0, 50.0, 20.0]
    assert rows[0] == {
        "symbol": "KRW-ETH",
        "name": "ETH",
        "current_price": 4_800_000.0,
        "volume_24h": 300.0,
        "rsi": 80.0,
        "change_rate": -1.0,
    }
    assert resp.headers["cache-control"] == "public, max-age=60"


def test_pipeline_failure_returns_plain_text_500(client):
    with patch("dashboard.api.get_coin_metrics", AsyncMock(side_effect=ValueError("bad shape"))):
        resp = client.get("/")

    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.text == "Error: bad shape"


def test_partial_upstream_failure_degrades_dashboard(client, candle_payloads):
    def handler(request: httpx.Request) -> httpx.Response:
        market = request.url.params["market"]
        if market == "KRW-DOGE":
            return httpx.Response(500, text="upstream down")
        return httpx.Response(200, json=candle_payloads(list(range(100, 130)), market=market))

    async def get_metrics(markets):
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            return await aggregator.get_coin_metrics(markets, client=http)

    with patch("dashboard.api.get_coin_metrics", get_metrics):
        resp = client.get("/api/metrics")

    assert resp.status_code == 200
    names = [row["name"] for row in resp.json()]
    assert len(names) == len(TOP_MARKETS) - 1
    assert "DOGE" not in names
    assert all(row["rsi"] == 100.0 for row in resp.json())


def test_metrics_json_is_validated_by_response_model(client):
    coin = MetricRecord("KRW-BTC", "BTC", 95_000_000, 100, 20, 1)
    with patch("dashboard.api.get_coin_metrics", AsyncMock(return_value=[coin])):
        resp = client.get("/api/metrics")

    row = resp.json()[0]
    assert isinstance(row["current_price"], float)
    assert isinstance(row["rsi"], float)
    assert resp.headers["cache-control"] == "public, max-age=60"
    schema = client.get("/openapi.json").json()
    assert "MetricResponse" in schema["components"]["schemas"]
