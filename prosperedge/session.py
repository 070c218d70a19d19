"""
Portfolio session: single-writer owner of one ledger.

Submissions are serialized with a lock so the position and cash legs of each
trade land atomically relative to other trades on the same portfolio.
Rejections come back as TradeResult values and are kept in a log.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol

from prosperedge.ledger import HoldingsLedger
from prosperedge.summary import Summary, summarize
from prosperedge.transaction import Transaction
from prosperedge.validation import TransactionRejected

logger = logging.getLogger(__name__)


class TradeStatus(Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class TradeResult:
    """Outcome of one submission. ledger is the state after the call (unchanged on rejection)."""

    status: TradeStatus
    transaction: Transaction
    ledger: HoldingsLedger
    reason: str | None = None
    message: str | None = None

    @property
    def accepted(self) -> bool:
        return self.status == TradeStatus.ACCEPTED


@dataclass(frozen=True)
class RejectedTransactionLog:
    """One rejected submission."""

    transaction: Transaction
    reason: str
    message: str
    timestamp: datetime


class TradeObserver(Protocol):
    """Called after each accepted trade with the new ledger."""

    def __call__(self, tx: Transaction, ledger: HoldingsLedger) -> None:
        ...


class PortfolioSession:
    """
    Holds the latest ledger for one portfolio. Thread-safe: submit runs
    read, apply and replace under one lock.
    """

    def __init__(
        self,
        ledger: HoldingsLedger | None = None,
        *,
        observers: Sequence[TradeObserver] = (),
    ) -> None:
        self._ledger = ledger if ledger is not None else HoldingsLedger()
        self.observers: list[TradeObserver] = list(observers)
        self._lock = threading.Lock()
        self._rejected_log: list[RejectedTransactionLog] = []

    @property
    def ledger(self) -> HoldingsLedger:
        return self._ledger

    def submit(self, tx: Transaction) -> TradeResult:
        """Apply tx to the current ledger. Never raises for invalid trades."""
        with self._lock:
            current = self._ledger
            try:
                updated = current.apply(tx)
            except TransactionRejected as e:
                self._rejected_log.append(
                    RejectedTransactionLog(transaction=tx, reason=e.reason, message=str(e), timestamp=tx.date)
                )
                logger.info("Transaction %s rejected: %s", tx.id, e)
                return TradeResult(
                    status=TradeStatus.REJECTED,
                    transaction=tx,
                    ledger=current,
                    reason=e.reason,
                    message=str(e),
                )
            self._ledger = updated
            logger.info(
                "Transaction %s accepted: %s %s %s @ %s",
                tx.id,
                tx.type.value,
                tx.quantity,
                tx.symbol,
                tx.price,
            )
        for obs in self.observers:
            obs(tx, updated)
        return TradeResult(status=TradeStatus.ACCEPTED, transaction=tx, ledger=updated)

    def update_prices(self, prices: dict[str, float]) -> HoldingsLedger:
        """Refresh live prices on the current ledger."""
        with self._lock:
            self._ledger = self._ledger.with_prices(prices)
            return self._ledger

    def summary(self) -> Summary:
        return summarize(self._ledger.holdings)

    def get_rejected_log(self) -> list[RejectedTransactionLog]:
        """Return log of rejected submissions for display and reporting."""
        return list(self._rejected_log)
