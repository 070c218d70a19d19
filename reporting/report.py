"""
Portfolio report: print a summary of a ledger.
"""

from __future__ import annotations

from prosperedge.ledger import HoldingsLedger
from prosperedge.summary import Summary, summarize


def print_summary(ledger: HoldingsLedger) -> Summary:
    """
    Summarize the ledger and print totals and allocation.

    Returns
    -------
    Summary
        The computed summary (e.g. for programmatic use).
    """
    summary = summarize(ledger.holdings)
    sign = "+" if summary.profit >= 0 else ""
    print("--- Portfolio Summary ---")
    print(f"Total value:     {summary.total_value:,.2f}")
    print(f"Total cost:      {summary.total_cost:,.2f}")
    print(f"Profit:          {sign}{summary.profit:,.2f} ({summary.profit_percent:.2f}%)")
    print(f"Cash balance:    {summary.cash_balance:,.2f}")
    for kind, value in summary.allocation_by_kind.items():
        print(f"  {kind.value:<14} {value:,.2f}")
    print(f"Holdings:        {len(ledger.holdings)}")
    print(f"Transactions:    {len(ledger.transactions)}")
    return summary
