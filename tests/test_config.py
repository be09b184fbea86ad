"""
Tests for environment configuration loading.
"""

from decimal import Decimal

import pytest

from polybot.config import load_config

ENV_KEYS = [
    "ACCOUNT_ADDRESS",
    "POLYMARKET_API_URL",
    "POLYMARKET_WS_URL",
    "POLYMARKET_API_KEY",
    "POLYMARKET_PRIVATE_KEY",
    "PUSH_UPDATES_ENABLED",
    "MIN_ORDER_SIZE",
    "MAX_ORDER_SIZE",
    "DEFAULT_SLIPPAGE",
    "MAX_POSITIONS",
    "COPY_TRADING_ENABLED",
    "TRADER_ADDRESSES",
    "MIN_CONFIDENCE",
    "COPY_MAX_POSITION_SIZE",
    "FOLLOW_DELAY",
    "ARBITRAGE_ENABLED",
    "MIN_PROFIT_MARGIN",
    "ARBITRAGE_MAX_POSITION_SIZE",
    "ARBITRAGE_CHECK_INTERVAL",
    "LOG_LEVEL",
    "LOG_FILE",
    "JSON_LOGGING",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Start every test from an empty environment and no .env file."""
    for key in ENV_KEYS:
        # setenv first so monkeypatch removes values a .env file adds later
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def empty_env_file(tmp_path):
    path = tmp_path / "empty.env"
    path.write_text("")
    return str(path)


class TestLoadConfig:
    """Tests for load_config."""

    def test_account_address_is_required(self, empty_env_file):
        with pytest.raises(ValueError, match="ACCOUNT_ADDRESS"):
            load_config(empty_env_file)

    def test_defaults(self, monkeypatch, empty_env_file):
        monkeypatch.setenv("ACCOUNT_ADDRESS", "0xA")

        config = load_config(empty_env_file)

        assert config.account_address == "0xA"
        assert config.polymarket.api_url == "https://clob.polymarket.com"
        assert config.polymarket.api_key is None
        assert config.polymarket.push_updates is False
        assert config.trading.min_order_size == Decimal("0.01")
        assert config.trading.max_order_size == Decimal("1000")
        assert config.trading.default_slippage == Decimal("0.01")
        assert config.trading.max_positions == 10
        assert config.copy_trading.enabled is False
        assert config.copy_trading.trader_addresses == ()
        assert config.copy_trading.min_confidence == 0.6
        assert config.copy_trading.max_position_size == Decimal("100")
        assert config.copy_trading.poll_interval_seconds == 1.0
        assert config.arbitrage.enabled is False
        assert config.arbitrage.min_profit_margin == Decimal("0.02")
        assert config.arbitrage.max_position_size == Decimal("500")
        assert config.arbitrage.check_interval_seconds == 5.0
        assert config.logging.log_level == "INFO"
        assert config.logging.json_logging is True

    def test_overrides(self, monkeypatch, empty_env_file):
        monkeypatch.setenv("ACCOUNT_ADDRESS", "0xA")
        monkeypatch.setenv("COPY_TRADING_ENABLED", "true")
        monkeypatch.setenv("TRADER_ADDRESSES", " 0xT1, 0xT2 ,,")
        monkeypatch.setenv("FOLLOW_DELAY", "2500")
        monkeypatch.setenv("ARBITRAGE_ENABLED", "1")
        monkeypatch.setenv("ARBITRAGE_CHECK_INTERVAL", "250")
        monkeypatch.setenv("MIN_PROFIT_MARGIN", "0.035")
        monkeypatch.setenv("COPY_MAX_POSITION_SIZE", "20")
        monkeypatch.setenv("ARBITRAGE_MAX_POSITION_SIZE", "75.5")
        monkeypatch.setenv("PUSH_UPDATES_ENABLED", "yes")
        monkeypatch.setenv("JSON_LOGGING", "false")

        config = load_config(empty_env_file)

        assert config.copy_trading.enabled is True
        assert config.copy_trading.trader_addresses == ("0xT1", "0xT2")
        assert config.copy_trading.poll_interval_seconds == 2.5
        assert config.copy_trading.max_position_size == Decimal("20")
        assert config.arbitrage.enabled is True
        assert config.arbitrage.check_interval_seconds == 0.25
        assert config.arbitrage.min_profit_margin == Decimal("0.035")
        assert config.arbitrage.max_position_size == Decimal("75.5")
        assert config.polymarket.push_updates is True
        assert config.logging.json_logging is False

    def test_invalid_decimal(self, monkeypatch, empty_env_file):
        monkeypatch.setenv("ACCOUNT_ADDRESS", "0xA")
        monkeypatch.setenv("MAX_ORDER_SIZE", "lots")

        with pytest.raises(ValueError, match="MAX_ORDER_SIZE"):
            load_config(empty_env_file)

    def test_reads_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "ACCOUNT_ADDRESS=0xFromFile\n"
            "ARBITRAGE_ENABLED=true\n"
            "MAX_POSITIONS=3\n"
        )

        config = load_config(str(env_file))

        assert config.account_address == "0xFromFile"
        assert config.arbitrage.enabled is True
        assert config.trading.max_positions == 3

    def test_environment_wins_over_env_file(self, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("ACCOUNT_ADDRESS=0xFromFile\n")
        monkeypatch.setenv("ACCOUNT_ADDRESS", "0xFromEnv")

        config = load_config(str(env_file))

        assert config.account_address == "0xFromEnv"
