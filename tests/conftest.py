"""
Shared fixtures for the bot tests.
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from polybot.clients.api_client import MarketDataClient
from polybot.config import TradingConfig, CopyTradingConfig, ArbitrageConfig
from polybot.models import OrderResponse
from polybot.trading.toolkit import TradingToolkit


@pytest.fixture
def trading_config():
    return TradingConfig(
        min_order_size=Decimal("1"),
        max_order_size=Decimal("100"),
        default_slippage=Decimal("0.01"),
        max_positions=10
    )


@pytest.fixture
def copy_config():
    return CopyTradingConfig(
        enabled=True,
        trader_addresses=("0xT",),
        min_confidence=0.6,
        max_position_size=Decimal("20"),
        poll_interval_seconds=60.0,
        scan_markets=3,
        trades_per_market=100
    )


@pytest.fixture
def arbitrage_config():
    return ArbitrageConfig(
        enabled=True,
        min_profit_margin=Decimal("0.02"),
        max_position_size=Decimal("500"),
        check_interval_seconds=60.0,
        scan_markets=2,
        market_refresh_probability=0.1
    )


@pytest.fixture
def mock_api():
    """Create a mock market API client."""
    api = AsyncMock(spec=MarketDataClient)
    api.get_positions.return_value = []
    api.create_order.return_value = OrderResponse(id="order-1", status="pending")
    return api


@pytest.fixture
def mock_toolkit():
    """Create a mock trading toolkit that accepts every order."""
    toolkit = AsyncMock(spec=TradingToolkit)
    toolkit.can_open_position.return_value = True
    toolkit.buy.return_value = OrderResponse(id="buy-1", status="pending")
    toolkit.sell.return_value = OrderResponse(id="sell-1", status="pending")
    return toolkit
