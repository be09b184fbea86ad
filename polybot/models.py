"""
Domain types for markets, order books, trades and positions.

Prices and sizes are ``Decimal`` values parsed from the exact decimal
strings the API sends and serialised back the same way. Timestamps are
epoch milliseconds.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional
import time

OUTCOMES = ("yes", "no")


def to_decimal(value: Any, default: str = "0") -> Decimal:
    """Parse an API numeric field without going through float."""
    if value is None or value == "":
        return Decimal(default)
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def decimal_str(value: Decimal) -> str:
    """Format a decimal as a plain string (no exponent notation)."""
    return format(value, "f")


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Market:
    """Market snapshot."""
    id: str
    question: str
    active: bool = True
    outcomes: tuple[str, ...] = ()
    description: str = ""
    condition_id: str = ""
    end_date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Market":
        return cls(
            id=str(data.get("id", "")),
            question=data.get("question", ""),
            active=bool(data.get("active", True)),
            outcomes=tuple(data.get("outcomes") or ()),
            description=data.get("description", ""),
            condition_id=data.get("conditionId", ""),
            end_date=data.get("endDate"),
        )


@dataclass
class OrderBookLevel:
    """Resting order at one price."""
    price: Decimal
    size: Decimal
    maker: Optional[str] = None
    timestamp: int = 0
    id: str = ""
    outcome: str = ""
    side: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "OrderBookLevel":
        return cls(
            price=to_decimal(data.get("price")),
            size=to_decimal(data.get("size")),
            maker=data.get("maker"),
            timestamp=int(data.get("timestamp") or 0),
            id=str(data.get("id", "")),
            outcome=data.get("outcome", ""),
            side=data.get("side", ""),
        )


@dataclass
class OrderBook:
    """Order book for one market outcome. Bids and asks are unordered."""
    market: str
    bids: list[OrderBookLevel] = field(default_factory=list)
    asks: list[OrderBookLevel] = field(default_factory=list)

    @property
    def best_bid(self) -> Optional[OrderBookLevel]:
        """Bid level with the highest price."""
        if self.bids:
            return max(self.bids, key=lambda level: level.price)
        return None

    @property
    def best_ask(self) -> Optional[OrderBookLevel]:
        """Ask level with the lowest price."""
        if self.asks:
            return min(self.asks, key=lambda level: level.price)
        return None

    @classmethod
    def from_dict(cls, data: dict, market: str = "") -> "OrderBook":
        return cls(
            market=data.get("market", market),
            bids=[OrderBookLevel.from_dict(b) for b in data.get("bids") or []],
            asks=[OrderBookLevel.from_dict(a) for a in data.get("asks") or []],
        )


@dataclass(frozen=True)
class Trade:
    """Executed trade, as reported by a market's trade history."""
    id: str
    market: str
    outcome: str
    side: str
    price: Decimal
    size: Decimal
    timestamp: int
    maker: str
    taker: str

    @classmethod
    def from_dict(cls, data: dict) -> "Trade":
        return cls(
            id=str(data.get("id", "")),
            market=str(data.get("market", "")),
            outcome=data.get("outcome", ""),
            side=data.get("side", ""),
            price=to_decimal(data.get("price")),
            size=to_decimal(data.get("size")),
            timestamp=int(data.get("timestamp") or 0),
            maker=data.get("maker", ""),
            taker=data.get("taker", ""),
        )


@dataclass(frozen=True)
class Position:
    """Open position in one market outcome."""
    market: str
    outcome: str
    side: str
    size: Decimal
    average_price: Decimal
    unrealized_pnl: Decimal = Decimal("0")
    realized_pnl: Decimal = Decimal("0")

    @property
    def key(self) -> tuple[str, str]:
        return (self.market, self.outcome)

    @classmethod
    def from_dict(cls, data: dict) -> "Position":
        return cls(
            market=str(data.get("market", "")),
            outcome=data.get("outcome", ""),
            side=data.get("side", ""),
            size=to_decimal(data.get("size")),
            average_price=to_decimal(data.get("averagePrice")),
            unrealized_pnl=to_decimal(data.get("unrealizedPnl")),
            realized_pnl=to_decimal(data.get("realizedPnl")),
        )


@dataclass(frozen=True)
class Account:
    """Account summary."""
    address: str
    balance: Decimal
    positions: tuple[Position, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "Account":
        return cls(
            address=data.get("address", ""),
            balance=to_decimal(data.get("balance")),
            positions=tuple(Position.from_dict(p) for p in data.get("positions") or []),
        )


@dataclass(frozen=True)
class OrderRequest:
    """Candidate order, before validation."""
    market: str
    outcome: str
    side: str  # "buy" or "sell"
    price: Decimal
    size: Decimal
    expiration: Optional[int] = None

    def to_payload(self) -> dict:
        """Request body for ``POST /orders``."""
        return {
            "market": self.market,
            "outcome": self.outcome,
            "side": self.side,
            "price": decimal_str(self.price),
            "size": decimal_str(self.size),
            "expiration": self.expiration or now_ms() + 24 * 60 * 60 * 1000,
        }


@dataclass(frozen=True)
class Fill:
    """Partial or full execution of an order."""
    id: str
    price: Decimal
    size: Decimal
    timestamp: int

    @classmethod
    def from_dict(cls, data: dict) -> "Fill":
        return cls(
            id=str(data.get("id", "")),
            price=to_decimal(data.get("price")),
            size=to_decimal(data.get("size")),
            timestamp=int(data.get("timestamp") or 0),
        )


@dataclass(frozen=True)
class OrderResponse:
    """Order state returned by the API."""
    id: str
    status: str  # pending, filled, cancelled, rejected
    fills: tuple[Fill, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "OrderResponse":
        return cls(
            id=str(data.get("id", "")),
            status=data.get("status", "pending"),
            fills=tuple(Fill.from_dict(f) for f in data.get("fills") or []),
        )


@dataclass(frozen=True)
class ArbitrageOpportunity:
    """Crossed book in one market outcome: buy at the ask, sell at the bid."""
    market: str
    outcome: str
    buy_price: Decimal
    sell_price: Decimal
    size: Decimal
    profit_margin: Decimal
    buy_level: OrderBookLevel
    sell_level: OrderBookLevel

    @property
    def key(self) -> tuple[str, str]:
        return (self.market, self.outcome)

    @property
    def expected_profit(self) -> Decimal:
        return (self.sell_price - self.buy_price) * self.size


@dataclass
class TraderActivity:
    """Rolling state for one followed trader."""
    address: str
    recent_trades: list[Trade] = field(default_factory=list)
    win_rate: float = 0.0
    total_trades: int = 0
    last_trade_time: int = 0
