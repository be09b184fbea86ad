"""
Structured logging for the Polymarket trading bots.
Supports JSON logging and an optional log file.
"""

import logging
import sys
from typing import Optional
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with additional fields."""
    
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['timestamp'] = self.formatTime(record, self.datefmt)


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None,
    logger_name: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging configuration.
    
    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Whether to use JSON format
        log_file: Optional path of a file that receives the same records
        logger_name: Optional specific logger name
    
    Returns:
        Configured logger instance
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger(logger_name or "polybot")
    logger.setLevel(log_level)
    
    # Remove existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    
    if json_format:
        formatter = CustomJsonFormatter(
            '%(timestamp)s %(level)s %(name)s %(message)s'
        )
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
    
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger with the given name."""
    return logging.getLogger(f"polybot.{name}")


class TradeLogger:
    """Specialized logger for trade-related events."""
    
    def __init__(self):
        self.logger = get_logger("trades")
    
    def opportunity_detected(
        self,
        market_id: str,
        outcome: str,
        buy_price: str,
        sell_price: str,
        profit_margin: float,
        size: str
    ):
        """Log when an arbitrage opportunity is detected."""
        self.logger.info(
            "Arbitrage opportunity detected",
            extra={
                "event": "opportunity_detected",
                "market_id": market_id,
                "outcome": outcome,
                "buy_price": buy_price,
                "sell_price": sell_price,
                "profit_margin_pct": round(profit_margin * 100, 2),
                "size": size
            }
        )
    
    def order_placed(
        self,
        order_id: str,
        market_id: str,
        outcome: str,
        side: str,
        size: str,
        price: str
    ):
        """Log when an order is accepted by the API."""
        self.logger.info(
            "Order placed",
            extra={
                "event": "order_placed",
                "order_id": order_id,
                "market_id": market_id,
                "outcome": outcome,
                "side": side,
                "size": size,
                "price": price
            }
        )
    
    def trade_copied(
        self,
        trader: str,
        market_id: str,
        outcome: str,
        side: str,
        size: str,
        price: str,
        trader_win_rate: float
    ):
        """Log when a followed trader's trade has been mirrored."""
        self.logger.info(
            "Trade copied",
            extra={
                "event": "trade_copied",
                "trader": trader,
                "market_id": market_id,
                "outcome": outcome,
                "side": side,
                "size": size,
                "price": price,
                "trader_win_rate": trader_win_rate
            }
        )
    
    def arbitrage_executed(
        self,
        market_id: str,
        outcome: str,
        buy_order_id: str,
        sell_order_id: str,
        expected_profit: str
    ):
        """Log when both legs of an arbitrage were submitted."""
        self.logger.info(
            "Arbitrage executed",
            extra={
                "event": "arbitrage_executed",
                "market_id": market_id,
                "outcome": outcome,
                "buy_order_id": buy_order_id,
                "sell_order_id": sell_order_id,
                "expected_profit": expected_profit
            }
        )
    
    def trade_failed(
        self,
        market_id: str,
        reason: str,
        error: Optional[str] = None
    ):
        """Log when a trade fails."""
        self.logger.error(
            "Trade failed",
            extra={
                "event": "trade_failed",
                "market_id": market_id,
                "reason": reason,
                "error": error
            }
        )
