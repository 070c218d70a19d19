"""
Portfolio summary: value, cost, unrealized profit and allocation by asset kind.

Pure aggregation over a holdings snapshot. No rounding; formatting belongs to the caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from prosperedge.holding import AssetKind, Holding


@dataclass(frozen=True)
class Summary:
    """Aggregate metrics for one holdings snapshot."""

    total_value: float
    total_cost: float
    profit: float
    profit_percent: float
    cash_balance: float = 0.0
    allocation_by_kind: dict[AssetKind, float] = field(default_factory=dict)


class SummaryCalculator:
    """
    Stateless calculator. Valuation uses current_price when present and
    falls back to avg_cost otherwise.
    """

    def summarize(self, holdings: Iterable[Holding]) -> Summary:
        """
        Compute totals for the snapshot.

        Parameters
        ----------
        holdings : iterable of Holding
            Snapshot to aggregate; not modified.

        Returns
        -------
        Summary
            total_value, total_cost, profit, profit_percent (0 when total_cost
            is not positive), cash_balance and allocation_by_kind.
        """
        snapshot = list(holdings)
        quantities = np.array([h.quantity for h in snapshot], dtype=float)
        prices = np.array([h.price for h in snapshot], dtype=float)
        costs = np.array([h.avg_cost for h in snapshot], dtype=float)
        values = quantities * prices

        total_value = float(values.sum())
        total_cost = float((quantities * costs).sum())
        profit = total_value - total_cost
        profit_percent = (profit / total_cost) * 100.0 if total_cost > 0 else 0.0

        allocation: dict[AssetKind, float] = {}
        for h, value in zip(snapshot, values):
            allocation[h.kind] = allocation.get(h.kind, 0.0) + float(value)

        cash_balance = sum(h.quantity for h in snapshot if h.is_cash)

        return Summary(
            total_value=total_value,
            total_cost=total_cost,
            profit=profit,
            profit_percent=profit_percent,
            cash_balance=float(cash_balance),
            allocation_by_kind=allocation,
        )


def summarize(holdings: Iterable[Holding]) -> Summary:
    """Module-level shortcut for SummaryCalculator().summarize."""
    return SummaryCalculator().summarize(holdings)
