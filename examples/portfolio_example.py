"""
Portfolio example: trade against a starting snapshot and print the summary.

Shows: PortfolioSession with an observer, price refresh from a market data
provider (synthetic unless PROSPEREDGE_FINNHUB_API_KEY is set), rejected
trades, replay of the log, and commentary (OpenAI when
PROSPEREDGE_OPENAI_API_KEY is set, else the offline template).
"""

from __future__ import annotations

import logging
from datetime import datetime

from prosperedge import AssetKind, Holding, HoldingsLedger, PortfolioSession, Transaction, TradeType
from prosperedge.analysis import trend_label
from prosperedge.config import analyst_from_env, market_data_from_env
from prosperedge.market import TimeRange
from reporting import holdings_frame, print_summary, replay

DEFAULT_HOLDINGS = [
    Holding(id="1", symbol="AAPL", name="Apple Inc.", quantity=10, avg_cost=145, kind=AssetKind.STOCK,
            current_price=175, last_updated="2023-10-25T10:30:00Z"),
    Holding(id="2", symbol="USD", name="Cash", quantity=5000, avg_cost=1, kind=AssetKind.CASH,
            current_price=1, last_updated="2023-10-01T09:00:00Z"),
    Holding(id="3", symbol="BTC", name="Bitcoin", quantity=0.1, avg_cost=30000, kind=AssetKind.CRYPTO,
            current_price=45000, last_updated="2023-11-15T14:20:00Z"),
]


def print_fill_observer(tx: Transaction, ledger: HoldingsLedger) -> None:
    cash = ledger.cash.quantity if ledger.cash else 0.0
    print(f"  [Observer] {tx.type.value} {tx.quantity} {tx.symbol} @ {tx.price:.2f} (cash {cash:,.2f})")




def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    start = HoldingsLedger(holdings=DEFAULT_HOLDINGS)
    session = PortfolioSession(start, observers=[print_fill_observer])
    symbol = "NVDA"

    with market_data_from_env() as market:
        quote = market.get_quote(symbol)
        now = datetime.now()
        trades = [
            Transaction.create("t1", now, symbol, TradeType.BUY, quote.price, 5, kind=AssetKind.STOCK, name="NVIDIA"),
            Transaction.create("t2", now, "AAPL", TradeType.SELL, 180.0, 4),
            Transaction.create("t3", now, "TSLA", TradeType.SELL, 250.0, 1),  # not held: rejected
        ]

        print("--- Submitting trades ---")
        for tx in trades:
            result = session.submit(tx)
            if not result.accepted:
                print(f"  Rejected {tx.id}: {result.reason} ({result.message})")

        session.update_prices(market.latest_prices([symbol, "AAPL"]))
        candles = market.get_candles(symbol, TimeRange.MONTH)

    print()
    print_summary(session.ledger)
    print()
    print(holdings_frame(session.ledger.holdings).to_string(index=False))

    print("\n--- Replay of accepted log from the starting snapshot ---")
    replayed = replay(start, session.ledger.transactions)
    print(replayed.value_series())

    print("\n--- Commentary ---")
    print(analyst_from_env().analyze(symbol, float(candles["close"].iloc[-1]), trend_label(candles)))


if __name__ == "__main__":
    main()
