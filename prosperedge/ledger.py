"""
HoldingsLedger: holdings snapshot plus append-only transaction log.

Reconciliation is a pure function of (holdings, transaction). Nothing here is
mutated in place; every apply returns new values and callers keep the latest.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from prosperedge.holding import Holding
from prosperedge.transaction import Transaction, TradeType
from prosperedge.validation import find_cash, find_holding, validate_snapshot, validate_transaction

logger = logging.getLogger(__name__)


def _position_leg(existing: Holding | None, tx: Transaction) -> Holding | None:
    """New state of the traded holding; None when a sell closes it out."""
    if tx.type == TradeType.BUY:
        if existing is None:
            return Holding(
                id=tx.id,
                symbol=tx.symbol,
                name=tx.name or tx.symbol,
                quantity=tx.quantity,
                avg_cost=tx.price,
                kind=tx.kind,
                current_price=tx.price,
                last_updated=tx.date,
            )
        quantity = existing.quantity + tx.quantity
        avg_cost = (existing.quantity * existing.avg_cost + tx.total) / quantity
        return existing.evolve(quantity=quantity, avg_cost=avg_cost, last_updated=tx.date)

    quantity = existing.quantity - tx.quantity
    if quantity <= 0:
        return None
    return existing.evolve(quantity=quantity, last_updated=tx.date)


def apply(holdings: Iterable[Holding], tx: Transaction) -> tuple[Holding, ...]:
    """
    Apply one transaction to a holdings snapshot and return the new snapshot.

    BUY merges into an existing position at the volume-weighted average cost
    or opens a new one; SELL reduces the position and drops it at zero or
    below. The cash holding moves by tx.total in the opposite direction. If
    there is no cash holding the cash leg is skipped with a warning.

    Order of the input is preserved and a newly opened holding is appended.
    Holdings not touched by the trade are returned as the same objects.

    Raises TransactionRejected if tx is not valid for this snapshot.
    """
    before = tuple(holdings)
    validate_transaction(before, tx)

    existing = find_holding(before, tx.symbol)
    position = _position_leg(existing, tx)

    cash = find_cash(before)
    if cash is None:
        logger.warning("No cash holding; cash leg of %s %s skipped", tx.type.value, tx.id)
        new_cash = None
    else:
        delta = -tx.total if tx.type == TradeType.BUY else tx.total
        new_cash = cash.evolve(quantity=cash.quantity + delta, last_updated=tx.date)

    after: list[Holding] = []
    for h in before:
        if h is existing:
            if position is not None:
                after.append(position)
        elif h is cash:
            after.append(new_cash)
        else:
            after.append(h)
    if existing is None:
        after.append(position)
    return tuple(after)


@dataclass(frozen=True)
class HoldingsLedger:
    """
    Immutable ledger state: holdings (at most one per symbol) and the log of
    transactions that produced them. The log is for display only; apply
    never replays it.
    """

    holdings: tuple[Holding, ...] = ()
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "holdings", tuple(self.holdings))
        object.__setattr__(self, "transactions", tuple(self.transactions))
        validate_snapshot(self.holdings)

    def apply(self, tx: Transaction) -> HoldingsLedger:
        """Return the ledger after tx. Raises TransactionRejected; self is unchanged either way."""
        return HoldingsLedger(
            holdings=apply(self.holdings, tx),
            transactions=self.transactions + (tx,),
        )

    def get(self, symbol: str) -> Holding | None:
        return find_holding(self.holdings, symbol)

    @property
    def cash(self) -> Holding | None:
        return find_cash(self.holdings)

    @property
    def symbols(self) -> list[str]:
        return [h.symbol for h in self.holdings]

    def with_prices(self, prices: Mapping[str, float]) -> HoldingsLedger:
        """Refresh current_price from a symbol -> price mapping. Cash and unlisted symbols are left alone."""
        refreshed = tuple(
            h.evolve(current_price=float(prices[h.symbol]))
            if h.symbol in prices and not h.is_cash
            else h
            for h in self.holdings
        )
        return HoldingsLedger(holdings=refreshed, transactions=self.transactions)
