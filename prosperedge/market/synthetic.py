"""
Synthetic market data: seeded random-walk candles and quotes.

No network. Used in mock mode and as the fallback for the HTTP provider.
"""

from __future__ import annotations

from datetime import datetime

import numpy as np
import pandas as pd

from prosperedge.market.provider import MarketDataProvider
from prosperedge.market.types import CANDLE_COLUMNS, Quote, TimeRange

# Daily bars generated per range (plus today's bar). 1D shows the last week.
RANGE_DAYS = {
    TimeRange.DAY: 7,
    TimeRange.MONTH: 30,
    TimeRange.YEAR: 365,
}

BAR_VOLATILITY = 0.02


class SyntheticMarketData(MarketDataProvider):
    """
    Random-walk provider. Each bar moves by up to ±1% of the previous close
    from open to close, with wicks up to half the bar volatility.
    Same seed and call sequence gives the same data.
    """

    def __init__(
        self,
        seed: int | None = 0,
        *,
        start_price: float = 150.0,
        now: datetime | None = None,
    ) -> None:
        self._rng = np.random.default_rng(seed)
        self.start_price = start_price
        self._now = now

    def generate(self, days: int) -> pd.DataFrame:
        """days + 1 daily bars ending today."""
        end = pd.Timestamp(self._now or datetime.now()).normalize()
        index = pd.date_range(end=end, periods=days + 1, freq="D", name="datetime")
        rows = []
        price = self.start_price
        for _ in index:
            vol = price * BAR_VOLATILITY
            u = self._rng.random(5)
            open_ = price + (u[0] - 0.5) * vol
            close = open_ + (u[1] - 0.5) * vol
            high = max(open_, close) + u[2] * vol * 0.5
            low = min(open_, close) - u[3] * vol * 0.5
            volume = float(np.floor(u[4] * 1_000_000) + 500_000)
            rows.append((open_, high, low, close, volume))
            price = close
        return pd.DataFrame(rows, index=index, columns=list(CANDLE_COLUMNS))

    def get_candles(self, symbol: str, time_range: TimeRange) -> pd.DataFrame:
        df = self.generate(RANGE_DAYS[TimeRange(time_range)])
        df.attrs["symbol"] = symbol
        return df

    def get_quote(self, symbol: str) -> Quote:
        price, change = self._rng.random(2)
        price = 100.0 + price * 100.0
        change = (change - 0.5) * 5.0
        return Quote(
            symbol=symbol,
            price=round(price, 2),
            change=round(change, 2),
            change_percent=round(change / price * 100.0, 2),
            name=f"{symbol} Corp (Mock)",
        )
