"""
Transaction: an executed trade as handed to the ledger.

Immutable. total is taken as given by the caller; the ledger never re-derives it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from prosperedge.holding import AssetKind


class TradeType(Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class Transaction:
    """
    A BUY or SELL of quantity units of symbol at price.

    kind and name are only read when a BUY opens a new position.
    """

    id: str
    date: datetime
    symbol: str
    type: TradeType
    price: float
    quantity: float
    total: float
    kind: AssetKind | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.date, datetime):
            object.__setattr__(self, "date", datetime.fromisoformat(str(self.date).replace("Z", "+00:00")))
        if not isinstance(self.type, TradeType):
            object.__setattr__(self, "type", TradeType(self.type))
        if self.kind is not None and not isinstance(self.kind, AssetKind):
            object.__setattr__(self, "kind", AssetKind(self.kind))

    @classmethod
    def create(
        cls,
        id: str,
        date: datetime,
        symbol: str,
        type: TradeType,
        price: float,
        quantity: float,
        *,
        kind: AssetKind | None = None,
        name: str | None = None,
    ) -> Transaction:
        """Build a transaction with total = price * quantity."""
        return cls(
            id=id,
            date=date,
            symbol=symbol,
            type=type,
            price=price,
            quantity=quantity,
            total=price * quantity,
            kind=kind,
            name=name,
        )

    @property
    def is_buy(self) -> bool:
        return self.type == TradeType.BUY

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "date": self.date.isoformat(),
            "symbol": self.symbol,
            "type": self.type.value,
            "price": self.price,
            "quantity": self.quantity,
            "total": self.total,
        }
        if self.kind is not None:
            out["kind"] = self.kind.value
        if self.name is not None:
            out["name"] = self.name
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transaction:
        return cls(
            id=str(data["id"]),
            date=data["date"],
            symbol=data["symbol"],
            type=TradeType(data["type"]),
            price=float(data["price"]),
            quantity=float(data["quantity"]),
            total=float(data["total"]),
            kind=AssetKind(data["kind"]) if data.get("kind") else None,
            name=data.get("name"),
        )
