"""
Configuration module for the Polymarket trading bots.
Loads settings from environment variables with validation.
"""

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional
from dotenv import load_dotenv


@dataclass(frozen=True)
class PolymarketConfig:
    """Polymarket API configuration."""
    api_url: str = "https://clob.polymarket.com"
    ws_url: str = "wss://clob.polymarket.com"
    api_key: Optional[str] = None
    private_key: Optional[str] = None  # Loaded for completeness; orders are not signed locally
    push_updates: bool = False


@dataclass(frozen=True)
class TradingConfig:
    """Limits shared by every strategy."""
    min_order_size: Decimal = Decimal("0.01")
    max_order_size: Decimal = Decimal("1000")
    default_slippage: Decimal = Decimal("0.01")
    max_positions: int = 10


@dataclass(frozen=True)
class CopyTradingConfig:
    """Copy trading parameters."""
    enabled: bool = False
    trader_addresses: tuple[str, ...] = ()
    min_confidence: float = 0.6
    max_position_size: Decimal = Decimal("100")
    poll_interval_seconds: float = 1.0
    scan_markets: int = 20
    trades_per_market: int = 100


@dataclass(frozen=True)
class ArbitrageConfig:
    """Arbitrage parameters."""
    enabled: bool = False
    min_profit_margin: Decimal = Decimal("0.02")
    max_position_size: Decimal = Decimal("500")
    check_interval_seconds: float = 5.0
    scan_markets: int = 50
    market_refresh_probability: float = 0.1


@dataclass(frozen=True)
class LogConfig:
    """Logging configuration."""
    log_level: str = "INFO"
    log_file: Optional[str] = None
    json_logging: bool = True


@dataclass(frozen=True)
class Config:
    """Main configuration container."""
    account_address: str
    polymarket: PolymarketConfig = field(default_factory=PolymarketConfig)
    trading: TradingConfig = field(default_factory=TradingConfig)
    copy_trading: CopyTradingConfig = field(default_factory=CopyTradingConfig)
    arbitrage: ArbitrageConfig = field(default_factory=ArbitrageConfig)
    logging: LogConfig = field(default_factory=LogConfig)


def get_env(key: str, default: Optional[str] = None, required: bool = True) -> str:
    """Get environment variable with validation."""
    value = os.getenv(key, default)
    if required and not value:
        raise ValueError(f"Required environment variable {key} is not set")
    return value or ""


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean environment variable."""
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes")


def get_env_int(key: str, default: int) -> int:
    """Get integer environment variable."""
    value = os.getenv(key, str(default))
    return int(value)


def get_env_float(key: str, default: float) -> float:
    """Get float environment variable."""
    value = os.getenv(key, str(default))
    return float(value)


def get_env_decimal(key: str, default: str) -> Decimal:
    """Get decimal environment variable, kept exact."""
    value = os.getenv(key, default).strip()
    try:
        return Decimal(value)
    except InvalidOperation:
        raise ValueError(f"Environment variable {key} is not a decimal: {value!r}")


def get_env_list(key: str) -> tuple[str, ...]:
    """Get comma-separated environment variable as a tuple."""
    value = os.getenv(key, "")
    return tuple(item.strip() for item in value.split(",") if item.strip())


def load_config(env_file: Optional[str] = None) -> Config:
    """Load and validate configuration from environment."""

    # Load .env file if present
    load_dotenv(env_file)

    return Config(
        account_address=get_env("ACCOUNT_ADDRESS"),
        polymarket=PolymarketConfig(
            api_url=get_env("POLYMARKET_API_URL", "https://clob.polymarket.com", required=False),
            ws_url=get_env("POLYMARKET_WS_URL", "wss://clob.polymarket.com", required=False),
            api_key=os.getenv("POLYMARKET_API_KEY") or None,
            private_key=os.getenv("POLYMARKET_PRIVATE_KEY") or None,
            push_updates=get_env_bool("PUSH_UPDATES_ENABLED", False),
        ),
        trading=TradingConfig(
            min_order_size=get_env_decimal("MIN_ORDER_SIZE", "0.01"),
            max_order_size=get_env_decimal("MAX_ORDER_SIZE", "1000"),
            default_slippage=get_env_decimal("DEFAULT_SLIPPAGE", "0.01"),
            max_positions=get_env_int("MAX_POSITIONS", 10),
        ),
        copy_trading=CopyTradingConfig(
            enabled=get_env_bool("COPY_TRADING_ENABLED", False),
            trader_addresses=get_env_list("TRADER_ADDRESSES"),
            min_confidence=get_env_float("MIN_CONFIDENCE", 0.6),
            max_position_size=get_env_decimal("COPY_MAX_POSITION_SIZE", "100"),
            poll_interval_seconds=get_env_int("FOLLOW_DELAY", 1000) / 1000,
        ),
        arbitrage=ArbitrageConfig(
            enabled=get_env_bool("ARBITRAGE_ENABLED", False),
            min_profit_margin=get_env_decimal("MIN_PROFIT_MARGIN", "0.02"),
            max_position_size=get_env_decimal("ARBITRAGE_MAX_POSITION_SIZE", "500"),
            check_interval_seconds=get_env_int("ARBITRAGE_CHECK_INTERVAL", 5000) / 1000,
        ),
        logging=LogConfig(
            log_level=get_env("LOG_LEVEL", "INFO", required=False),
            log_file=os.getenv("LOG_FILE") or None,
            json_logging=get_env_bool("JSON_LOGGING", True),
        ),
    )
