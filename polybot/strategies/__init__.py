# Trading strategies
from .base import Strategy, IntervalTimer
from .arbitrage import ArbitrageBot, find_opportunity
from .copy_trading import CopyTradingBot, calculate_win_rate

__all__ = [
    "Strategy",
    "IntervalTimer",
    "ArbitrageBot",
    "find_opportunity",
    "CopyTradingBot",
    "calculate_win_rate",
]
