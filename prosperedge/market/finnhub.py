"""
Finnhub market data over HTTP.

Candle requests that fail (transport error, bad status, or a payload without
s == "ok") fall back to synthetic monthly candles; quote failures return a
zero quote. Failures are logged, never raised.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

import httpx
import pandas as pd

from prosperedge.market.provider import MarketDataProvider
from prosperedge.market.synthetic import SyntheticMarketData
from prosperedge.market.types import CANDLE_COLUMNS, Quote, TimeRange

logger = logging.getLogger(__name__)

BASE_URL = "https://finnhub.io/api/v1"

# Lookback in seconds and candle resolution per range.
RANGE_LOOKBACK = {
    TimeRange.DAY: 86_400,
    TimeRange.MONTH: 2_592_000,
    TimeRange.YEAR: 31_536_000,
}
RANGE_RESOLUTION = {
    TimeRange.DAY: "60",
    TimeRange.MONTH: "D",
    TimeRange.YEAR: "D",
}


class FinnhubMarketData(MarketDataProvider):
    """
    Quotes and candles from the Finnhub REST API.

    Pass client to reuse a connection pool or to inject a mock transport;
    otherwise one httpx.Client is created per provider and closed by close()
    or on leaving a with block.
    """

    def __init__(
        self,
        api_key: str,
        *,
        client: httpx.Client | None = None,
        fallback: MarketDataProvider | None = None,
        base_url: str = BASE_URL,
        timeout: float = 20.0,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._api_key = api_key
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)
        self._fallback = fallback or SyntheticMarketData()
        self._base_url = base_url.rstrip("/")
        self._clock = clock or datetime.now

    def _get(self, endpoint: str, params: dict) -> dict:
        params = {**params, "token": self._api_key}
        logger.debug("Finnhub request: %s %s", endpoint, {k: v for k, v in params.items() if k != "token"})
        response = self._client.get(f"{self._base_url}/{endpoint}", params=params)
        response.raise_for_status()
        return response.json()

    def get_candles(self, symbol: str, time_range: TimeRange) -> pd.DataFrame:
        time_range = TimeRange(time_range)
        to = int(self._clock().timestamp())
        params = {
            "symbol": symbol,
            "resolution": RANGE_RESOLUTION[time_range],
            "from": to - RANGE_LOOKBACK[time_range],
            "to": to,
        }
        try:
            data = self._get("stock/candle", params)
            if data.get("s") != "ok":
                raise ValueError(f"Finnhub candle status {data.get('s')!r}")
            index = pd.to_datetime(data["t"], unit="s")
            index.name = "datetime"
            df = pd.DataFrame(
                {
                    "open": data["o"],
                    "high": data["h"],
                    "low": data["l"],
                    "close": data["c"],
                    "volume": data["v"],
                },
                index=index,
            )[list(CANDLE_COLUMNS)].astype(float)
        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.exception("Candle fetch failed for %s, falling back to synthetic data: %s", symbol, e)
            return self._fallback.get_candles(symbol, TimeRange.MONTH)
        df.attrs["symbol"] = symbol
        return df

    def get_quote(self, symbol: str) -> Quote:
        try:
            data = self._get("quote", {"symbol": symbol})
            return Quote(
                symbol=symbol,
                price=float(data["c"]),
                change=float(data.get("d") or 0.0),
                change_percent=float(data.get("dp") or 0.0),
                name=symbol,
            )
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.exception("Quote fetch failed for %s: %s", symbol, e)
            return Quote(symbol=symbol, price=0.0)

    def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            self._client.close()
