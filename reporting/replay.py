"""
Replay: apply a transaction log to a starting ledger in order.

Rejected transactions are skipped and recorded; the portfolio value after each
accepted trade forms the value curve.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

import pandas as pd

from prosperedge.ledger import HoldingsLedger
from prosperedge.summary import summarize
from prosperedge.transaction import Transaction
from prosperedge.validation import TransactionRejected


@dataclass
class ReplayResult:
    """Final ledger, rejected transactions with reasons, and (date, total value) points."""

    ledger: HoldingsLedger
    rejected: list[tuple[Transaction, str]] = field(default_factory=list)
    value_curve: list[tuple[datetime, float]] = field(default_factory=list)

    def value_series(self) -> pd.Series:
        """Value curve as a Series indexed by trade date."""
        if not self.value_curve:
            return pd.Series(dtype=float, name="total_value")
        dates, values = zip(*self.value_curve)
        return pd.Series(values, index=pd.DatetimeIndex(dates, name="date"), name="total_value")


def replay(ledger: HoldingsLedger, transactions: Iterable[Transaction]) -> ReplayResult:
    """
    Apply transactions in the given order starting from ledger.

    Parameters
    ----------
    ledger : HoldingsLedger
        Starting state; not modified.
    transactions : iterable of Transaction
        Trades in execution order.

    Returns
    -------
    ReplayResult
        Final ledger, rejected (transaction, reason) pairs, and value curve.
    """
    result = ReplayResult(ledger=ledger)
    for tx in transactions:
        try:
            result.ledger = result.ledger.apply(tx)
        except TransactionRejected as e:
            result.rejected.append((tx, e.reason))
            continue
        result.value_curve.append((tx.date, summarize(result.ledger.holdings).total_value))
    return result
