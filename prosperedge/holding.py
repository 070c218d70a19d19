"""
Holding: a position in one symbol, including the cash balance.

Immutable. The ledger replaces holdings instead of mutating them.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any


class AssetKind(Enum):
    STOCK = "STOCK"
    CASH = "CASH"
    CRYPTO = "CRYPTO"
    REAL_ESTATE = "REAL_ESTATE"


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass(frozen=True)
class Holding:
    """
    One tracked position. For the cash holding, quantity is the available
    balance and avg_cost is conventionally 1.
    """

    id: str
    symbol: str
    quantity: float
    avg_cost: float
    kind: AssetKind = AssetKind.STOCK
    name: str = ""
    current_price: float | None = None
    last_updated: datetime | None = None

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", self.symbol)
        if not isinstance(self.kind, AssetKind):
            object.__setattr__(self, "kind", AssetKind(self.kind))
        object.__setattr__(self, "last_updated", _parse_timestamp(self.last_updated))

    @property
    def is_cash(self) -> bool:
        return self.kind == AssetKind.CASH

    @property
    def price(self) -> float:
        """Valuation price: live price when known, else average cost."""
        return self.current_price if self.current_price is not None else self.avg_cost

    @property
    def value(self) -> float:
        return self.quantity * self.price

    @property
    def cost(self) -> float:
        return self.quantity * self.avg_cost

    def evolve(self, **changes: Any) -> Holding:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "name": self.name,
            "quantity": self.quantity,
            "avgCost": self.avg_cost,
            "kind": self.kind.value,
            "currentPrice": self.current_price,
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Holding:
        return cls(
            id=str(data["id"]),
            symbol=data["symbol"],
            name=data.get("name") or "",
            quantity=float(data["quantity"]),
            avg_cost=float(data["avgCost"]),
            kind=AssetKind(data.get("kind", data.get("type", "STOCK"))),
            current_price=None if data.get("currentPrice") is None else float(data["currentPrice"]),
            last_updated=data.get("lastUpdated"),
        )
