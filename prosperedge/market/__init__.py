"""
Market data collaborators: provider interface, synthetic generator, Finnhub client.

The reconciliation core only consumes prices; it never fetches them.
"""

from prosperedge.market.provider import MarketDataProvider
from prosperedge.market.synthetic import SyntheticMarketData
from prosperedge.market.finnhub import FinnhubMarketData
from prosperedge.market.types import CANDLE_COLUMNS, Quote, TimeRange

__all__ = [
    "CANDLE_COLUMNS",
    "MarketDataProvider",
    "Quote",
    "TimeRange",
    "SyntheticMarketData",
    "FinnhubMarketData",
]
