"""Order dashboard rows by the selected key, descending."""
from __future__ import annotations

from typing import Iterable, List, Optional

from .models import MetricRecord

SORT_KEYS = ("volume", "rsi")


def normalize_sort_key(sort_by: Optional[str]) -> str:
    """Map any unrecognised or missing value to ``"volume"``."""
    return sort_by if sort_by in SORT_KEYS else "volume"


def sort_metrics(records: Iterable[MetricRecord], sort_by: Optional[str] = "volume") -> List[MetricRecord]:
    """
    Return a new list sorted by RSI (``"rsi"``) or by 24h traded value
    (anything else).  ``sorted`` is stable, so equal keys keep their
    input order.
    """
    if normalize_sort_key(sort_by) == "rsi":
        return sorted(records, key=lambda r: r.rsi, reverse=True)
    return sorted(records, key=lambda r: r.volume_24h, reverse=True)
