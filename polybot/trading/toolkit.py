"""
Shared trading helpers injected into each strategy.
"""

from decimal import Decimal
from typing import Optional

from ..clients.api_client import MarketDataClient
from ..config import TradingConfig
from ..models import OrderRequest, OrderResponse, Position
from ..utils.logger import get_logger
from .ledger import PositionLedger
from .order_gate import OrderGate

logger = get_logger("toolkit")


class TradingToolkit:
    """
    Order placement, position lookup and balance helpers for one account.

    Strategies receive a toolkit instead of inheriting these helpers.
    """

    def __init__(
        self,
        api: MarketDataClient,
        account_address: str,
        config: TradingConfig,
        ledger: Optional[PositionLedger] = None,
        gate: Optional[OrderGate] = None
    ):
        self.api = api
        self.account_address = account_address
        self.max_positions = config.max_positions
        self.ledger = ledger or PositionLedger(api, account_address)
        self.gate = gate or OrderGate(api, self.ledger, config)

    async def buy(self, market: str, outcome: str, price: Decimal, size: Decimal) -> OrderResponse:
        """Place a buy order."""
        return await self.gate.place_order(OrderRequest(
            market=market,
            outcome=outcome,
            side="buy",
            price=price,
            size=size
        ))

    async def sell(self, market: str, outcome: str, price: Decimal, size: Decimal) -> OrderResponse:
        """Place a sell order."""
        return await self.gate.place_order(OrderRequest(
            market=market,
            outcome=outcome,
            side="sell",
            price=price,
            size=size
        ))

    async def place_order(self, order: OrderRequest) -> OrderResponse:
        return await self.gate.place_order(order)

    async def refresh_positions(self) -> None:
        await self.ledger.refresh()

    def get_position(self, market: str, outcome: str) -> Optional[Position]:
        return self.ledger.get(market, outcome)

    def can_open_position(self) -> bool:
        """Check the open position count against the configured cap."""
        return len(self.ledger) < self.max_positions

    async def get_best_prices(
        self,
        market: str,
        outcome: str
    ) -> Optional[tuple[Decimal, Decimal]]:
        """
        Best bid and best ask prices for a market outcome.

        Returns:
            (best_bid, best_ask), or None when either side is empty or
            the order book could not be fetched
        """
        try:
            order_book = await self.api.get_order_book(market, outcome)
        except Exception as e:
            logger.error(f"Failed to get best prices for {market}: {e}")
            return None

        best_bid = order_book.best_bid
        best_ask = order_book.best_ask
        if best_bid is None or best_ask is None:
            return None

        return best_bid.price, best_ask.price

    async def get_balance(self) -> Decimal:
        """Get account balance."""
        try:
            account = await self.api.get_account(self.account_address)
        except Exception as e:
            logger.error(f"Failed to get account balance: {e}")
            raise
        return account.balance

    @staticmethod
    def calculate_position_size(balance: Decimal, risk_percent: Decimal = Decimal("1")) -> Decimal:
        """Amount to risk: ``risk_percent`` percent of ``balance``."""
        return balance * risk_percent / Decimal("100")
