"""
prosperedge: deterministic portfolio reconciliation core.

Applies trades to a holdings snapshot and summarizes it. No I/O in the core;
market data and commentary live behind collaborator interfaces.
"""

__version__ = "0.1.0"

from prosperedge.holding import AssetKind, Holding
from prosperedge.transaction import Transaction, TradeType
from prosperedge.validation import InvalidSnapshot, TransactionRejected
from prosperedge.ledger import HoldingsLedger, apply
from prosperedge.summary import Summary, SummaryCalculator, summarize
from prosperedge.session import PortfolioSession, TradeResult, TradeStatus

__all__ = [
    "AssetKind",
    "Holding",
    "Transaction",
    "TradeType",
    "InvalidSnapshot",
    "TransactionRejected",
    "HoldingsLedger",
    "apply",
    "Summary",
    "SummaryCalculator",
    "summarize",
    "PortfolioSession",
    "TradeResult",
    "TradeStatus",
]
