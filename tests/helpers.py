"""
Builders for test data.
"""

from decimal import Decimal

from polybot.models import Market, OrderBook, OrderBookLevel, Trade

NOW_MS = 1_700_000_000_000
DAY_MS = 24 * 60 * 60 * 1000


def level(price: str, size: str) -> OrderBookLevel:
    return OrderBookLevel(price=Decimal(price), size=Decimal(size))


def book(bids=(), asks=(), market: str = "m1") -> OrderBook:
    """Build an order book from (price, size) string pairs."""
    return OrderBook(
        market=market,
        bids=[level(p, s) for p, s in bids],
        asks=[level(p, s) for p, s in asks]
    )


def trade(
    trade_id: str = "t1",
    market: str = "m1",
    outcome: str = "yes",
    side: str = "buy",
    price: str = "0.40",
    size: str = "50",
    timestamp: int = NOW_MS - 1000,
    maker: str = "0xM",
    taker: str = "0xT"
) -> Trade:
    return Trade(
        id=trade_id,
        market=market,
        outcome=outcome,
        side=side,
        price=Decimal(price),
        size=Decimal(size),
        timestamp=timestamp,
        maker=maker,
        taker=taker
    )


def market(market_id: str = "m1", active: bool = True) -> Market:
    return Market(id=market_id, question=f"Question {market_id}?", active=active, outcomes=("yes", "no"))
