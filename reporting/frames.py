"""
Tabular views of ledger state for hosts that render tables and charts.

Also normalizes externally supplied candle frames to the provider shape.
"""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from prosperedge.holding import Holding
from prosperedge.market.types import CANDLE_COLUMNS
from prosperedge.summary import Summary
from prosperedge.transaction import Transaction

HOLDING_COLUMNS = (
    "symbol", "name", "kind", "quantity", "avg_cost", "price", "value", "cost", "profit", "profit_pct",
)
TRANSACTION_COLUMNS = ("id", "symbol", "type", "price", "quantity", "total")


# Lowercased raw column -> candle column. Covers Finnhub's single-letter keys.
CANDLE_ALIASES = {
    "o": "open",
    "h": "high",
    "l": "low",
    "c": "close",
    "adj close": "close",
    "v": "volume",
    "vol": "volume",
}


def load_candles(
    df: pd.DataFrame,
    *,
    datetime_index: str | None = None,
    symbol: str | None = None,
) -> pd.DataFrame:
    """
    Normalize a candle DataFrame: DatetimeIndex named 'datetime', sorted, and
    only the open/high/low/close/volume columns that are present.

    Parameters
    ----------
    df : pd.DataFrame
        Raw candles (columns may be mixed case or single-letter aliases).
    datetime_index : str, optional
        Column to use as index. If None, the existing index is converted.
    symbol : str, optional
        Stored in df.attrs['symbol'].
    """
    by_name = {}
    for raw in df.columns:
        key = str(raw).lower().strip()
        by_name.setdefault(CANDLE_ALIASES.get(key, key), raw)
    if datetime_index is not None and datetime_index.lower() in by_name:
        index = pd.DatetimeIndex(pd.to_datetime(df[by_name[datetime_index.lower()]]))
    else:
        index = pd.DatetimeIndex(pd.to_datetime(df.index))
    out = pd.DataFrame(
        {col: df[by_name[col]].to_numpy() for col in CANDLE_COLUMNS if col in by_name},
        index=index.rename("datetime"),
    ).sort_index()
    if symbol is not None:
        out.attrs["symbol"] = symbol
    return out


def holdings_frame(holdings: Iterable[Holding]) -> pd.DataFrame:
    """One row per holding with valuation columns, in snapshot order."""
    rows = []
    for h in holdings:
        profit = h.value - h.cost
        rows.append(
            {
                "symbol": h.symbol,
                "name": h.name,
                "kind": h.kind.value,
                "quantity": h.quantity,
                "avg_cost": h.avg_cost,
                "price": h.price,
                "value": h.value,
                "cost": h.cost,
                "profit": profit,
                "profit_pct": profit / h.cost * 100.0 if h.cost > 0 else 0.0,
            }
        )
    return pd.DataFrame(rows, columns=list(HOLDING_COLUMNS))


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Transaction log indexed by date, oldest first (stable for equal dates)."""
    records = [
        {"date": tx.date, "id": tx.id, "symbol": tx.symbol, "type": tx.type.value,
         "price": tx.price, "quantity": tx.quantity, "total": tx.total}
        for tx in transactions
    ]
    if not records:
        return pd.DataFrame(columns=list(TRANSACTION_COLUMNS), index=pd.DatetimeIndex([], name="date"))
    df = pd.DataFrame(records).set_index("date").sort_index(kind="stable")
    return df[list(TRANSACTION_COLUMNS)]


def allocation_frame(summary: Summary) -> pd.DataFrame:
    """Value and weight per asset kind, largest first."""
    rows = [{"kind": kind.value, "value": value} for kind, value in summary.allocation_by_kind.items()]
    df = pd.DataFrame(rows, columns=["kind", "value"])
    total = summary.total_value
    df["weight_pct"] = df["value"] / total * 100.0 if total else 0.0
    return df.sort_values("value", ascending=False, kind="stable").reset_index(drop=True)
