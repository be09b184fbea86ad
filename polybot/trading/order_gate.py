"""
Pre-submission order checks.
"""

from decimal import Decimal

from ..clients.api_client import MarketDataClient
from ..config import TradingConfig
from ..errors import ValidationError
from ..models import OrderRequest, OrderResponse, decimal_str
from ..utils.logger import get_logger, TradeLogger
from .ledger import PositionLedger

logger = get_logger("order_gate")
trade_logger = TradeLogger()

MIN_PRICE = Decimal("0")
MAX_PRICE = Decimal("1")


class OrderGate:
    """
    Validates orders against configured bounds, submits them, and
    refreshes the position ledger after every submission.
    """

    def __init__(
        self,
        api: MarketDataClient,
        ledger: PositionLedger,
        config: TradingConfig
    ):
        self.api = api
        self.ledger = ledger
        self.min_order_size = config.min_order_size
        self.max_order_size = config.max_order_size

    def validate(self, order: OrderRequest) -> None:
        """
        Check size and price bounds.

        Raises:
            ValidationError: size outside [min_order_size, max_order_size]
                or price outside [0, 1]
        """
        if order.size < self.min_order_size:
            raise ValidationError(
                f"Order size {decimal_str(order.size)} is below minimum {decimal_str(self.min_order_size)}",
                details={"size": decimal_str(order.size)}
            )
        if order.size > self.max_order_size:
            raise ValidationError(
                f"Order size {decimal_str(order.size)} exceeds maximum {decimal_str(self.max_order_size)}",
                details={"size": decimal_str(order.size)}
            )
        if order.price < MIN_PRICE or order.price > MAX_PRICE:
            raise ValidationError(
                f"Invalid price {decimal_str(order.price)}. Must be between 0 and 1",
                details={"price": decimal_str(order.price)}
            )

    async def place_order(self, order: OrderRequest) -> OrderResponse:
        """
        Validate and submit an order, then refresh positions.

        Validation happens before any network call. Failures are logged
        and re-raised.
        """
        try:
            self.validate(order)

            logger.info(
                f"Placing {order.side} order",
                extra={
                    "market": order.market,
                    "outcome": order.outcome,
                    "price": decimal_str(order.price),
                    "size": decimal_str(order.size)
                }
            )

            response = await self.api.create_order(order)

            trade_logger.order_placed(
                order_id=response.id,
                market_id=order.market,
                outcome=order.outcome,
                side=order.side,
                size=decimal_str(order.size),
                price=decimal_str(order.price)
            )
        except Exception as e:
            logger.error(f"Failed to place order: {e}")
            raise

        await self.ledger.refresh()
        return response
