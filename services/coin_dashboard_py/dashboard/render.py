"""
Render ranked metric rows to a standalone HTML document.

Pure formatting: rows are sorted with ``sort_metrics`` and written out
with f-strings.  Text coming from the upstream (market names) is
escaped.
"""
from __future__ import annotations

import datetime as dt
import html
import math
from typing import Iterable, Optional

from coin_metrics.config import RSI_PERIOD
from coin_metrics.models import MetricRecord
from coin_metrics.ranking import sort_metrics

KST = dt.timezone(dt.timedelta(hours=9), name="KST")

RSI_OVERBOUGHT = 70.0
RSI_OVERSOLD = 30.0

_RED = "#ef4444"
_BLUE = "#3b82f6"
_SLATE = "#64748b"
_GREEN = "#10b981"


def rsi_color(rsi: float) -> str:
    if rsi >= RSI_OVERBOUGHT:
        return _RED
    if rsi <= RSI_OVERSOLD:
        return _BLUE
    return _SLATE


def change_color(change_rate: float) -> str:
    return _GREEN if change_rate >= 0 else _RED


def format_price(value: float) -> str:
    """Thousands separators, at most three decimals, no trailing zeros."""
    s = f"{value:,.3f}".rstrip("0").rstrip(".")
    return s or "0"


def format_millions(value: float) -> str:
    return f"{math.floor(value / 1_000_000 + 0.5):,}M"


def format_change(change_rate: float) -> str:
    sign = "+" if change_rate >= 0 else ""
    return f"{sign}{change_rate:.2f}%"


def format_timestamp(now: dt.datetime) -> str:
    """Korean locale style, e.g. ``2024. 3. 5. 오후 2:07:09``."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=dt.timezone.utc)
    t = now.astimezone(KST)
    meridiem = "오전" if t.hour < 12 else "오후"
    hour12 = t.hour % 12 or 12
    return f"{t.year}. {t.month}. {t.day}. {meridiem} {hour12}:{t.minute:02d}:{t.second:02d}"


def _render_row(rank: int, coin: MetricRecord) -> str:
    rc = rsi_color(coin.rsi)
    cc = change_color(coin.change_rate)
    return f"""
        <tr style="border-bottom: 1px solid #e2e8f0;">
          <td style="padding: 16px; text-align: center; font-weight: 500;">{rank}</td>
          <td style="padding: 16px; font-weight: 600; color: #1e293b;">{html.escape(coin.name)}</td>
          <td class="num">{format_price(coin.current_price)} KRW</td>
          <td class="num">{format_millions(coin.volume_24h)}</td>
          <td style="padding: 16px; text-align: center;">
            <span class="badge" style="background-color: {rc}22; color: {rc};">{coin.rsi:.2f}</span>
          </td>
          <td class="num" style="color: {cc}; font-weight: 600;">{format_change(coin.change_rate)}</td>
        </tr>"""


_STYLE = """
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
      background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
      min-height: 100vh;
      padding: 20px;
    }
    .container { max-width: 1200px; margin: 0 auto; }
    .header {
      background: white; padding: 30px; border-radius: 16px;
      box-shadow: 0 10px 30px rgba(0,0,0,0.1); margin-bottom: 20px; text-align: center;
    }
    h1 { color: #1e293b; font-size: 32px; margin-bottom: 10px; }
    .subtitle { color: #64748b; font-size: 14px; }
    .controls {
      background: white; padding: 20px; border-radius: 12px;
      box-shadow: 0 4px 12px rgba(0,0,0,0.05); margin-bottom: 20px;
      display: flex; gap: 10px; justify-content: center; flex-wrap: wrap;
    }
    .btn {
      padding: 10px 24px; border: none; border-radius: 8px; font-weight: 600;
      cursor: pointer; transition: all 0.2s; font-size: 14px;
      text-decoration: none; display: inline-block; color: white;
    }
    .btn-primary { background: #667eea; }
    .btn-primary:hover { background: #5568d3; transform: translateY(-1px); }
    .btn-secondary { background: #764ba2; }
    .btn-secondary:hover { background: #5f3d82; transform: translateY(-1px); }
    .table-container {
      background: white; border-radius: 16px;
      box-shadow: 0 10px 30px rgba(0,0,0,0.1); overflow: hidden;
    }
    table { width: 100%; border-collapse: collapse; }
    thead { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; }
    th {
      padding: 16px; text-align: left; font-weight: 600; font-size: 14px;
      text-transform: uppercase; letter-spacing: 0.5px;
    }
    tr:hover { background-color: #f8fafc; }
    .num { padding: 16px; text-align: right; font-family: 'Courier New', monospace; }
    .badge {
      display: inline-block; padding: 6px 12px; border-radius: 6px;
      font-weight: 600; font-family: 'Courier New', monospace;
    }
    .update-time { text-align: center; color: white; margin-top: 20px; font-size: 14px; opacity: 0.9; }
    @media (max-width: 768px) {
      .table-container { overflow-x: auto; }
      table { font-size: 12px; }
      th, td { padding: 10px 8px !important; }
    }
"""


def render_dashboard(
    coins: Iterable[MetricRecord],
    sort_by: Optional[str] = "volume",
    now: Optional[dt.datetime] = None,
) -> str:
    """Return the full dashboard document for ``coins`` ordered by ``sort_by``."""
    ranked = sort_metrics(coins, sort_by)
    rows = "".join(_render_row(i, coin) for i, coin in enumerate(ranked, start=1))
    updated = format_timestamp(now or dt.datetime.now(dt.timezone.utc))
    return f"""<!DOCTYPE html>
<html lang="ko">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>코인 지표 대시보드</title>
  <style>{_STYLE}  </style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>📊 코인 지표 대시보드</h1>
      <div class="subtitle">실시간 거래량 &amp; RSI 분석</div>
    </div>

    <div class="controls">
      <a href="/?sort=volume" class="btn btn-primary">💰 거래량순 정렬</a>
      <a href="/?sort=rsi" class="btn btn-secondary">📈 RSI순 정렬</a>
    </div>

    <div class="table-container">
      <table>
        <thead>
          <tr>
            <th style="text-align: center; width: 60px;">#</th>
            <th>코인</th>
            <th style="text-align: right;">현재가</th>
            <th style="text-align: right;">거래대금(24h)</th>
            <th style="text-align: center;">RSI({RSI_PERIOD})</th>
            <th style="text-align: right;">변동률</th>
          </tr>
        </thead>
        <tbody>{rows}
        </tbody>
      </table>
    </div>

    <div class="update-time">마지막 업데이트: {updated}</div>
  </div>
</body>
</html>
"""
