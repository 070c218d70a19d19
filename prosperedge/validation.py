"""
Pre-condition checks for transactions and holdings snapshots.

The ledger calls these before computing either leg of a trade, so a rejected
transaction never leaves a partial update behind.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from prosperedge.holding import AssetKind, Holding
from prosperedge.transaction import Transaction, TradeType


class TransactionRejected(ValueError):
    """Transaction fails a pre-condition. reason is a stable code for display/logging."""

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason


class InvalidSnapshot(ValueError):
    """Holdings snapshot breaks a ledger invariant."""


def find_holding(holdings: Iterable[Holding], symbol: str) -> Holding | None:
    """The holding for symbol, or None."""
    for h in holdings:
        if h.symbol == symbol:
            return h
    return None


def find_cash(holdings: Iterable[Holding]) -> Holding | None:
    """The cash holding, or None if the snapshot has none."""
    for h in holdings:
        if h.is_cash:
            return h
    return None


def validate_snapshot(holdings: Iterable[Holding]) -> None:
    """Raise InvalidSnapshot on duplicate symbols, several cash holdings, or an empty non-cash position."""
    seen: set[str] = set()
    cash_count = 0
    for h in holdings:
        if h.symbol in seen:
            raise InvalidSnapshot(f"Duplicate holding for symbol {h.symbol}")
        seen.add(h.symbol)
        if h.is_cash:
            cash_count += 1
        elif h.quantity <= 0:
            raise InvalidSnapshot(f"Holding {h.symbol} has non-positive quantity {h.quantity}")
    if cash_count > 1:
        raise InvalidSnapshot(f"Expected at most one cash holding, found {cash_count}")


def validate_transaction(holdings: Iterable[Holding], tx: Transaction) -> None:
    """
    Check tx against the snapshot it will be applied to.

    Raises TransactionRejected with one of the reasons:
    invalid_number, non_positive_quantity, negative_price, cash_symbol,
    kind_required, untracked_symbol.
    """
    for label, number in (("quantity", tx.quantity), ("price", tx.price), ("total", tx.total)):
        if not math.isfinite(number):
            raise TransactionRejected("invalid_number", f"{label.capitalize()} must be finite, got {number}")
    if tx.quantity <= 0:
        raise TransactionRejected("non_positive_quantity", f"Quantity must be positive, got {tx.quantity}")
    if tx.price < 0:
        raise TransactionRejected("negative_price", f"Price must not be negative, got {tx.price}")

    existing = find_holding(holdings, tx.symbol)
    if existing is not None and existing.is_cash:
        raise TransactionRejected("cash_symbol", f"{tx.symbol} is the cash holding and cannot be traded")

    if tx.type == TradeType.BUY:
        if existing is None and tx.kind is None:
            raise TransactionRejected(
                "kind_required",
                f"Opening a position in {tx.symbol} requires an explicit asset kind",
            )
        if existing is None and tx.kind == AssetKind.CASH:
            raise TransactionRejected("cash_symbol", "Cash holdings are not opened by trades")
    elif existing is None:
        raise TransactionRejected("untracked_symbol", f"No holding in {tx.symbol} to sell")
