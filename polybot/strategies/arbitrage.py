"""
Crossed-book arbitrage.

Polls order books for both outcomes of the first active markets. When
the best bid is above the best ask by at least the configured margin,
buys at the ask and sells at the bid.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
import random

from ..clients.api_client import MarketDataClient
from ..clients.websocket_client import PushClient
from ..config import ArbitrageConfig
from ..models import OUTCOMES, ArbitrageOpportunity, Market, OrderBook, decimal_str
from ..trading.toolkit import TradingToolkit
from ..utils.logger import get_logger, TradeLogger
from .base import IntervalTimer

logger = get_logger("arbitrage")
trade_logger = TradeLogger()


def find_opportunity(
    order_book: OrderBook,
    market: str,
    outcome: str,
    min_profit_margin: Decimal,
    max_position_size: Decimal
) -> Optional[ArbitrageOpportunity]:
    """
    Check one order book for a crossed market.

    Args:
        order_book: Book for ``outcome`` of ``market``
        market: Market ID
        outcome: Outcome the book belongs to
        min_profit_margin: Smallest (bid - ask) / ask worth trading
        max_position_size: Cap on the traded size

    Returns:
        ArbitrageOpportunity, or None if a side is empty, the book is not
        crossed, the best ask is zero, or the margin is below the floor
    """
    best_bid = order_book.best_bid
    best_ask = order_book.best_ask

    if best_bid is None or best_ask is None:
        return None

    if best_bid.price <= best_ask.price:
        return None

    # A zero ask has no defined margin
    if best_ask.price == 0:
        return None

    profit_margin = (best_bid.price - best_ask.price) / best_ask.price
    if profit_margin < min_profit_margin:
        return None

    return ArbitrageOpportunity(
        market=market,
        outcome=outcome,
        buy_price=best_ask.price,
        sell_price=best_bid.price,
        size=min(best_bid.size, best_ask.size, max_position_size),
        profit_margin=profit_margin,
        buy_level=best_ask,
        sell_level=best_bid
    )


@dataclass
class ArbitrageStats:
    """Counters for the arbitrage bot."""
    scans: int = 0
    opportunities_detected: int = 0
    opportunities_skipped: int = 0
    executions_attempted: int = 0
    executions_failed: int = 0


class ArbitrageBot:
    """
    Polls order books and executes crossed-book arbitrage.

    An opportunity's (market, outcome) key stays in the active set from
    the start of execution until both legs were attempted; a second
    opportunity on the same key in that window is dropped. The set is
    only safe because ticks share a single event loop.
    """

    name = "arbitrage"

    def __init__(
        self,
        api: MarketDataClient,
        toolkit: TradingToolkit,
        config: ArbitrageConfig,
        rng: Optional[random.Random] = None,
        push: Optional[PushClient] = None
    ):
        """
        Initialize arbitrage bot.

        Args:
            api: Market data client
            toolkit: Order placement and position helpers
            config: Margin floor, size cap, poll interval
            rng: Source for the periodic market refresh draw
            push: Optional push client; an update for a scanned market
                triggers an immediate check of that market
        """
        self.api = api
        self.toolkit = toolkit
        self.config = config
        self.rng = rng or random.Random()
        self.push = push

        self.markets: list[Market] = []
        self._subscribed: set[str] = set()
        self._active_opportunities: dict[tuple[str, str], ArbitrageOpportunity] = {}
        self._timer = IntervalTimer(
            self.scan_for_opportunities,
            config.check_interval_seconds,
            name="arbitrage-scan"
        )
        self._running = False
        self._stats = ArbitrageStats()

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Load markets and start polling."""
        if self._running:
            logger.warning("Arbitrage bot is already running")
            return

        logger.info("Starting arbitrage bot...")
        self._running = True

        try:
            await self.load_markets()
        except Exception:
            self._running = False
            raise

        self._timer.start()
        logger.info("Arbitrage bot started")

    async def stop(self) -> None:
        """Stop scheduling scans. A scan already running is not interrupted."""
        if not self._running:
            return

        logger.info("Stopping arbitrage bot...")
        self._running = False
        self._timer.stop()
        logger.info("Arbitrage bot stopped")

    async def load_markets(self) -> None:
        """Replace the cached list with the currently active markets."""
        try:
            markets = await self.api.get_markets()
        except Exception as e:
            logger.error(f"Failed to load markets: {e}")
            raise

        self.markets = [m for m in markets if m.active]
        logger.info(f"Loaded {len(self.markets)} active markets")

        if self.push:
            await self._subscribe_markets()

    async def _subscribe_markets(self) -> None:
        """Follow push updates for exactly the markets that are scanned."""
        scanned = self.markets[:self.config.scan_markets]
        wanted = {market.id for market in scanned}

        for market_id in self._subscribed - wanted:
            await self.push.unsubscribe(market_id)

        for market in scanned:
            if market.id not in self._subscribed:
                await self.push.subscribe(market.id, self._make_update_handler(market))

        self._subscribed = wanted

    def _make_update_handler(self, market: Market):
        async def on_update(message: dict) -> None:
            if not self._running:
                return
            logger.debug(f"Push update for market {market.id}")
            await self.check_market(market)

        return on_update

    async def scan_for_opportunities(self) -> None:
        """One tick: check the first markets and execute what is found."""
        if not self._running:
            return

        self._stats.scans += 1

        try:
            if self.rng.random() < self.config.market_refresh_probability:
                await self.load_markets()
        except Exception as e:
            logger.error(f"Error scanning for opportunities: {e}")
            return

        for market in self.markets[:self.config.scan_markets]:
            try:
                await self.check_market(market)
            except Exception as e:
                logger.debug(f"Error checking market {market.id}: {e}")

    async def check_market(self, market: Market) -> None:
        """Check both outcomes of a market, then execute any hits."""
        opportunities = []
        for outcome in OUTCOMES:
            opportunity = await self.find_arbitrage_opportunity(market.id, outcome)
            if opportunity:
                opportunities.append(opportunity)

        for opportunity in opportunities:
            await self.execute_arbitrage(opportunity)

    async def find_arbitrage_opportunity(
        self,
        market_id: str,
        outcome: str
    ) -> Optional[ArbitrageOpportunity]:
        """Fetch a book and look for a crossed market. Errors yield None."""
        try:
            order_book = await self.api.get_order_book(market_id, outcome)
            opportunity = find_opportunity(
                order_book,
                market_id,
                outcome,
                self.config.min_profit_margin,
                self.config.max_position_size
            )
        except Exception as e:
            logger.debug(f"Error finding arbitrage opportunity for {market_id}/{outcome}: {e}")
            return None

        if opportunity:
            self._stats.opportunities_detected += 1
            trade_logger.opportunity_detected(
                market_id=market_id,
                outcome=outcome,
                buy_price=decimal_str(opportunity.buy_price),
                sell_price=decimal_str(opportunity.sell_price),
                profit_margin=float(opportunity.profit_margin),
                size=decimal_str(opportunity.size)
            )

        return opportunity

    async def execute_arbitrage(self, opportunity: ArbitrageOpportunity) -> bool:
        """
        Buy at the ask, then sell at the bid.

        The legs are submitted one after the other with no rollback: if
        the sell fails after the buy succeeded, the bought size is kept.

        Returns:
            True if both legs were accepted
        """
        key = opportunity.key
        if key in self._active_opportunities:
            logger.debug(f"Already executing arbitrage for {key[0]}-{key[1]}")
            self._stats.opportunities_skipped += 1
            return False

        if not self.toolkit.can_open_position():
            logger.warning("Cannot execute arbitrage: max positions reached")
            self._stats.opportunities_skipped += 1
            return False

        logger.info(
            "Executing arbitrage",
            extra={
                "market": opportunity.market,
                "outcome": opportunity.outcome,
                "buy_price": decimal_str(opportunity.buy_price),
                "sell_price": decimal_str(opportunity.sell_price),
                "size": decimal_str(opportunity.size),
                "profit_margin_pct": round(float(opportunity.profit_margin) * 100, 2)
            }
        )

        self._active_opportunities[key] = opportunity
        self._stats.executions_attempted += 1

        try:
            buy_order = await self.toolkit.buy(
                opportunity.market,
                opportunity.outcome,
                opportunity.buy_price,
                opportunity.size
            )
            sell_order = await self.toolkit.sell(
                opportunity.market,
                opportunity.outcome,
                opportunity.sell_price,
                opportunity.size
            )
        except Exception as e:
            self._stats.executions_failed += 1
            trade_logger.trade_failed(
                market_id=opportunity.market,
                reason="Arbitrage leg failed",
                error=str(e)
            )
            return False
        finally:
            self._active_opportunities.pop(key, None)

        trade_logger.arbitrage_executed(
            market_id=opportunity.market,
            outcome=opportunity.outcome,
            buy_order_id=buy_order.id,
            sell_order_id=sell_order.id,
            expected_profit=decimal_str(opportunity.expected_profit)
        )
        return True

    def get_active_opportunities(self) -> list[ArbitrageOpportunity]:
        """Opportunities currently being executed."""
        return list(self._active_opportunities.values())

    def get_stats(self) -> ArbitrageStats:
        return self._stats
