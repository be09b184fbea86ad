"""
Copy trading.

Watches the trade history of active markets for trades taken by
followed addresses and mirrors them at a capped size.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional

from ..clients.api_client import MarketDataClient
from ..config import CopyTradingConfig
from ..models import Trade, TraderActivity, decimal_str, now_ms
from ..trading.toolkit import TradingToolkit
from ..utils.logger import get_logger, TradeLogger
from .base import IntervalTimer

logger = get_logger("copy_trading")
trade_logger = TradeLogger()

RECENT_WINDOW_MS = 7 * 24 * 60 * 60 * 1000
MAX_WIN_RATE = 0.95


def calculate_win_rate(trades: list[Trade], now: Optional[int] = None) -> float:
    """
    Confidence proxy for a trader, based on how active they were recently.

    This is not profit and loss: 0 without trades, 0.5 without trades in
    the last 7 days, otherwise 0.5 plus 0.01 per recent trade, capped at
    0.95.
    """
    if not trades:
        return 0.0

    now = now_ms() if now is None else now
    recent = [t for t in trades if now - t.timestamp < RECENT_WINDOW_MS]

    if not recent:
        return 0.5

    return min(MAX_WIN_RATE, 0.5 + len(recent) / 100)


def mirror_price(trade: Trade, slippage: Decimal) -> Decimal:
    """Trader's price moved by ``slippage`` towards a fill."""
    if trade.side == "buy":
        return trade.price + slippage
    if trade.side == "sell":
        return trade.price - slippage
    raise ValueError(f"Unknown trade side: {trade.side!r}")


def _same_address(a: str, b: str) -> bool:
    return bool(a) and bool(b) and a.lower() == b.lower()


@dataclass
class CopyTradingStats:
    """Counters for the copy trading bot."""
    trades_seen: int = 0
    trades_copied: int = 0
    trades_skipped: int = 0
    trades_failed: int = 0


class CopyTradingBot:
    """
    Mirrors taker trades of followed addresses.

    Per-trader state lives in ``TraderActivity`` objects owned by this
    instance and is mutated by ticks on the shared event loop.
    """

    name = "copy_trading"

    def __init__(
        self,
        api: MarketDataClient,
        toolkit: TradingToolkit,
        config: CopyTradingConfig,
        slippage: Decimal,
        clock: Callable[[], int] = now_ms
    ):
        """
        Initialize copy trading bot.

        Args:
            api: Market data client
            toolkit: Order placement and position helpers
            config: Followed addresses, confidence floor, size cap, poll interval
            slippage: Price allowance added in the trade's direction
            clock: Epoch-millisecond clock used by the win rate
        """
        self.api = api
        self.toolkit = toolkit
        self.config = config
        self.slippage = slippage
        self.clock = clock

        self._followed_traders: dict[str, None] = dict.fromkeys(config.trader_addresses)
        self._activities: dict[str, TraderActivity] = {}
        self._timer = IntervalTimer(
            self.monitor_trades,
            config.poll_interval_seconds,
            name="copy-trading-poll"
        )
        self._running = False
        self._stats = CopyTradingStats()

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Seed trader activity and start polling."""
        if self._running:
            logger.warning("Copy trading bot is already running")
            return

        logger.info("Starting copy trading bot...")
        self._running = True

        for address in list(self._followed_traders):
            await self.initialize_trader(address)

        self._timer.start()
        logger.info("Copy trading bot started")

    async def stop(self) -> None:
        """Stop scheduling polls. A poll already running is not interrupted."""
        if not self._running:
            return

        logger.info("Stopping copy trading bot...")
        self._running = False
        self._timer.stop()
        logger.info("Copy trading bot stopped")

    async def initialize_trader(self, address: str) -> None:
        """Record a trader's current history so only later trades are mirrored."""
        try:
            recent_trades = await self.get_recent_trades_for_trader(address)
            activity = TraderActivity(
                address=address,
                recent_trades=recent_trades,
                win_rate=calculate_win_rate(recent_trades, self.clock()),
                total_trades=len(recent_trades),
                last_trade_time=recent_trades[0].timestamp if recent_trades else 0
            )
            self._activities[address] = activity
            logger.info(
                f"Initialized activity for trader {address}",
                extra={"win_rate": activity.win_rate, "total_trades": activity.total_trades}
            )
        except Exception as e:
            logger.error(f"Failed to initialize activity for trader {address}: {e}")

    async def monitor_trades(self) -> None:
        """One tick: check every followed trader in turn."""
        if not self._running:
            return

        for address in list(self._followed_traders):
            try:
                await self.check_trader_trades(address)
            except Exception as e:
                logger.error(f"Error checking trades for trader {address}: {e}")

    async def check_trader_trades(self, address: str) -> None:
        """Mirror a trader's new taker trades and update their activity."""
        activity = self._activities.get(address)
        if activity is None:
            await self.initialize_trader(address)
            return

        recent_trades = await self.get_recent_trades_for_trader(address)

        new_trades = [
            trade for trade in recent_trades
            if trade.timestamp > activity.last_trade_time and _same_address(trade.taker, address)
        ]

        if new_trades:
            logger.info(f"Found {len(new_trades)} new trades from trader {address}")

        for trade in sorted(new_trades, key=lambda t: t.timestamp):
            self._stats.trades_seen += 1
            await self.process_trader_trade(activity, trade)

        activity.recent_trades = recent_trades
        activity.last_trade_time = max(
            [t.timestamp for t in recent_trades] + [activity.last_trade_time]
        )
        activity.win_rate = calculate_win_rate(recent_trades, self.clock())
        activity.total_trades = len(recent_trades)

    async def process_trader_trade(self, activity: TraderActivity, trade: Trade) -> bool:
        """
        Mirror one trade if the trader and our positions allow it.

        Returns:
            True if a mirrored order was submitted
        """
        if not _same_address(trade.taker, activity.address):
            return False

        if trade.side not in ("buy", "sell"):
            logger.debug(f"Skipping trade {trade.id}: unknown side {trade.side!r}")
            self._stats.trades_skipped += 1
            return False

        if activity.win_rate < self.config.min_confidence:
            logger.debug(
                f"Skipping trade from {activity.address}: win rate {activity.win_rate} below threshold"
            )
            self._stats.trades_skipped += 1
            return False

        if not self.toolkit.can_open_position():
            logger.warning("Cannot open new position: max positions reached")
            self._stats.trades_skipped += 1
            return False

        size = min(trade.size, self.config.max_position_size)
        price = mirror_price(trade, self.slippage)

        try:
            if trade.side == "buy":
                await self.toolkit.buy(trade.market, trade.outcome, price, size)
            elif trade.side == "sell":
                await self.toolkit.sell(trade.market, trade.outcome, price, size)
        except Exception as e:
            self._stats.trades_failed += 1
            trade_logger.trade_failed(
                market_id=trade.market,
                reason=f"Copy of trade {trade.id} from {activity.address} failed",
                error=str(e)
            )
            return False

        self._stats.trades_copied += 1
        trade_logger.trade_copied(
            trader=activity.address,
            market_id=trade.market,
            outcome=trade.outcome,
            side=trade.side,
            size=decimal_str(size),
            price=decimal_str(price),
            trader_win_rate=activity.win_rate
        )
        return True

    async def get_recent_trades_for_trader(self, address: str) -> list[Trade]:
        """
        Trades involving ``address`` (as maker or taker) in the first active
        markets, newest first. A market whose history cannot be fetched is
        skipped.
        """
        markets = await self.api.get_markets()
        active_markets = [m for m in markets if m.active][:self.config.scan_markets]

        trades: list[Trade] = []
        for market in active_markets:
            try:
                market_trades = await self.api.get_trades(market.id, self.config.trades_per_market)
            except Exception as e:
                logger.debug(f"Failed to get trades for market {market.id}: {e}")
                continue

            trades.extend(
                t for t in market_trades
                if _same_address(t.maker, address) or _same_address(t.taker, address)
            )

        return sorted(trades, key=lambda t: t.timestamp, reverse=True)

    def add_trader(self, address: str) -> None:
        """Follow a trader. Their history is recorded on the next poll."""
        self._followed_traders[address] = None
        logger.info(f"Added trader {address} to follow list")

    def remove_trader(self, address: str) -> None:
        """Stop following a trader and forget their activity."""
        self._followed_traders.pop(address, None)
        self._activities.pop(address, None)
        logger.info(f"Removed trader {address} from follow list")

    def get_followed_traders(self) -> list[str]:
        return list(self._followed_traders)

    def get_activity(self, address: str) -> Optional[TraderActivity]:
        return self._activities.get(address)

    def get_stats(self) -> CopyTradingStats:
        return self._stats
