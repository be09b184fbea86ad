"""
Tests for the process entry point.
"""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from polybot import main as entry
from polybot.clients.api_client import MarketDataClient
from polybot.config import ArbitrageConfig, Config, CopyTradingConfig, PolymarketConfig
from polybot.models import Account
from polybot.strategies.arbitrage import ArbitrageBot
from polybot.strategies.copy_trading import CopyTradingBot


@pytest.fixture
def api():
    api = AsyncMock(spec=MarketDataClient)
    api.get_positions.return_value = []
    api.get_markets.return_value = []
    api.get_account.return_value = Account(address="0xA", balance=Decimal("100"))
    return api


@pytest.fixture
def patched(api):
    """Patch configuration, logging, signals and the API client."""
    with patch.object(entry, "load_config") as load_config, \
            patch.object(entry, "setup_logging"), \
            patch.object(entry, "setup_signal_handlers") as signals, \
            patch.object(entry, "MarketDataClient", return_value=api):
        yield load_config, signals


def arbitrage_only() -> Config:
    return Config(account_address="0xA", arbitrage=ArbitrageConfig(enabled=True))


class TestTradingApp:
    """Tests for wiring strategies from configuration."""

    def test_builds_enabled_strategies_only(self, patched):
        app = entry.TradingApp(Config(
            account_address="0xA",
            copy_trading=CopyTradingConfig(enabled=True, trader_addresses=("0xT",)),
        ))

        assert [type(s) for s in app.strategies] == [CopyTradingBot]
        assert app.push is None

    def test_push_channel_feeds_arbitrage(self, patched):
        app = entry.TradingApp(Config(
            account_address="0xA",
            polymarket=PolymarketConfig(push_updates=True),
            copy_trading=CopyTradingConfig(enabled=True),
            arbitrage=ArbitrageConfig(enabled=True),
        ))

        assert [type(s) for s in app.strategies] == [CopyTradingBot, ArbitrageBot]
        assert app.strategies[1].push is app.push

    @pytest.mark.asyncio
    async def test_initialize_survives_balance_failure(self, patched, api):
        api.get_account.side_effect = aiohttp.ClientError("down")
        app = entry.TradingApp(arbitrage_only())

        await app.initialize()

        api.initialize.assert_awaited_once()
        api.get_positions.assert_awaited_once_with("0xA")


class TestMain:
    """Tests for exit codes."""

    @pytest.mark.asyncio
    async def test_configuration_error_exits_with_1(self, patched, capsys):
        load_config, _ = patched
        load_config.side_effect = ValueError("Required environment variable ACCOUNT_ADDRESS is not set")

        assert await entry.main() == 1
        assert "ACCOUNT_ADDRESS" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_no_enabled_strategy_exits_with_1(self, patched, api):
        load_config, _ = patched
        load_config.return_value = Config(account_address="0xA")

        assert await entry.main() == 1
        api.initialize.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_startup_failure_exits_with_1(self, patched, api):
        load_config, _ = patched
        load_config.return_value = arbitrage_only()
        api.get_markets.side_effect = aiohttp.ClientError("down")

        assert await entry.main() == 1
        api.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_clean_shutdown_exits_with_0(self, patched, api):
        load_config, signals = patched
        load_config.return_value = arbitrage_only()

        def schedule_shutdown(app):
            asyncio.get_running_loop().call_later(0.05, app.request_shutdown)

        signals.side_effect = schedule_shutdown

        assert await entry.main() == 0
        api.get_markets.assert_awaited_once()
        api.close.assert_awaited_once()
