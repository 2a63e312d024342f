"""
Exceptions raised by the metrics pipeline.

Per-market failures (``FetchError`` and its ``EmptySeries`` subclass)
are contained by the aggregator.  ``PipelineError`` marks a failure of
the whole request and is turned into an error response by the API.
"""
from __future__ import annotations

from typing import Optional


class FetchError(RuntimeError):
    """Upstream returned a non-success status (or an unusable body) for one market."""

    def __init__(self, market: str, status: Optional[int], reason: str = "") -> None:
        self.market = market
        self.status = status
        self.reason = reason
        detail = " ".join(str(p) for p in (status, reason) if p)
        super().__init__(f"Failed to fetch {market}: {detail}")


class EmptySeries(FetchError):
    """Upstream answered successfully but with zero candles."""

    def __init__(self, market: str) -> None:
        super().__init__(market, None, "no candles returned")


class PipelineError(RuntimeError):
    pass
