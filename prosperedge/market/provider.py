"""
Market data abstraction.

MarketDataProvider ABC: get_quote, get_candles. The ledger never calls a
provider; hosts use quotes to build transactions and to refresh prices.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from prosperedge.market.types import Quote, TimeRange

if TYPE_CHECKING:
    import pandas as pd


class MarketDataProvider(ABC):
    """
    Source of quotes and OHLCV candles.
    Implementations: SyntheticMarketData (offline), FinnhubMarketData (HTTP).
    """

    @abstractmethod
    def get_quote(self, symbol: str) -> Quote:
        """Latest price, absolute change and percent change for symbol."""
        ...

    @abstractmethod
    def get_candles(self, symbol: str, time_range: TimeRange) -> "pd.DataFrame":
        """
        Candles for symbol over time_range, oldest first.
        DataFrame has a DatetimeIndex named 'datetime' and columns open, high, low, close, volume.
        Contents are not validated for internal consistency.
        """
        ...

    def latest_prices(self, symbols: list[str]) -> dict[str, float]:
        """symbol -> quote price, skipping symbols quoted at zero or below."""
        prices: dict[str, float] = {}
        for sym in symbols:
            quote = self.get_quote(sym)
            if quote.price > 0:
                prices[sym] = quote.price
        return prices

    def close(self) -> None:
        """Release any held connections. No-op for providers without any."""

    def __enter__(self) -> MarketDataProvider:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
