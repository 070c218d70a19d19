"""
Market data types: quote snapshot and candle range.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Candle columns returned by every provider, in order.
CANDLE_COLUMNS = ("open", "high", "low", "close", "volume")


class TimeRange(Enum):
    DAY = "1D"
    MONTH = "1M"
    YEAR = "1Y"


@dataclass(frozen=True)
class Quote:
    """Latest price for a symbol. Immutable."""

    symbol: str
    price: float
    change: float = 0.0
    change_percent: float = 0.0
    name: str | None = None
