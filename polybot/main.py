"""
Main entry point for the Polymarket trading bots.
Wires the configured strategies together and runs until a shutdown signal.
"""

import asyncio
import signal
import sys
from typing import Optional

from .config import load_config, Config
from .clients.api_client import MarketDataClient
from .clients.websocket_client import PushClient
from .strategies.base import Strategy
from .strategies.arbitrage import ArbitrageBot
from .strategies.copy_trading import CopyTradingBot
from .trading.toolkit import TradingToolkit
from .utils.logger import setup_logging, get_logger

logger = get_logger("main")


class TradingApp:
    """
    Process orchestrator.

    Owns the shared API client and trading toolkit, the enabled
    strategies, and the optional push channel.
    """

    def __init__(self, config: Config):
        """Build components from configuration."""
        self.config = config
        self._shutdown_event = asyncio.Event()
        self._push_task: Optional[asyncio.Task] = None

        self.api = MarketDataClient(config.polymarket)
        self.toolkit = TradingToolkit(
            api=self.api,
            account_address=config.account_address,
            config=config.trading
        )

        self.push: Optional[PushClient] = None
        if config.polymarket.push_updates:
            self.push = PushClient(config.polymarket.ws_url)

        self.strategies: list[Strategy] = []

        if config.copy_trading.enabled:
            self.strategies.append(CopyTradingBot(
                api=self.api,
                toolkit=self.toolkit,
                config=config.copy_trading,
                slippage=config.trading.default_slippage
            ))
        else:
            logger.info("Copy trading bot is disabled")

        if config.arbitrage.enabled:
            self.strategies.append(ArbitrageBot(
                api=self.api,
                toolkit=self.toolkit,
                config=config.arbitrage,
                push=self.push
            ))
        else:
            logger.info("Arbitrage bot is disabled")

    async def initialize(self) -> None:
        """Open the API session and load current positions."""
        logger.info(
            "Configuration",
            extra={
                "copy_trading_enabled": self.config.copy_trading.enabled,
                "arbitrage_enabled": self.config.arbitrage.enabled,
                "account_address": self.config.account_address
            }
        )

        await self.api.initialize()
        await self.toolkit.refresh_positions()

        try:
            balance = await self.toolkit.get_balance()
            logger.info("Account balance", extra={"balance": str(balance)})
        except Exception as e:
            logger.warning(f"Could not check balance: {e}")

    async def start(self) -> None:
        """Start every enabled strategy."""
        for strategy in self.strategies:
            await strategy.start()
            logger.info(f"{strategy.name} bot started")

        if self.push:
            self._push_task = asyncio.create_task(self.push.run())

        logger.info("All enabled bots are running")

    async def wait_for_shutdown(self) -> None:
        await self._shutdown_event.wait()

    def request_shutdown(self) -> None:
        """Request graceful shutdown."""
        self._shutdown_event.set()

    async def shutdown(self) -> None:
        """Stop strategies and close connections."""
        logger.info("Shutting down bots")

        for strategy in self.strategies:
            await strategy.stop()

        if self.push:
            await self.push.disconnect()
        if self._push_task:
            self._push_task.cancel()

        await self.api.close()
        logger.info("All bots stopped successfully")


def setup_signal_handlers(app: TradingApp) -> None:
    """Route SIGINT/SIGTERM and unhandled task errors to a graceful shutdown."""
    loop = asyncio.get_running_loop()

    def signal_handler(sig: signal.Signals) -> None:
        logger.info(f"Received {sig.name}, shutting down gracefully...")
        app.request_shutdown()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler, sig)

    def exception_handler(loop: asyncio.AbstractEventLoop, context: dict) -> None:
        logger.error(f"Unhandled error: {context.get('exception') or context.get('message')}")
        app.request_shutdown()

    loop.set_exception_handler(exception_handler)


async def main() -> int:
    """
    Main entry point.

    Returns:
        Process exit code: 0 after a clean shutdown, 1 on configuration
        error, startup failure or failed shutdown
    """
    # Load configuration
    try:
        config = load_config()
    except ValueError as e:
        print(f"Configuration error: {e}")
        return 1

    # Set up logging
    setup_logging(
        level=config.logging.log_level,
        json_format=config.logging.json_logging,
        log_file=config.logging.log_file
    )

    logger.info("Starting Polymarket trading bots...")

    app = TradingApp(config)

    if not app.strategies:
        logger.warning("No bots are enabled. Please enable at least one bot in configuration.")
        return 1

    setup_signal_handlers(app)

    try:
        await app.initialize()
        await app.start()
    except Exception as e:
        logger.error(f"Failed to start bots: {e}")
        await app.shutdown()
        return 1

    await app.wait_for_shutdown()

    try:
        await app.shutdown()
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")
        return 1

    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
