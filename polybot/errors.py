"""
Exception types raised by the trading bots.

HTTP and transport failures are not wrapped: they surface as the
``aiohttp`` exceptions raised by the API client.
"""

from typing import Any, Optional


class TradingBotError(Exception):
    """Base class for bot errors."""
    
    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Any] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


class ValidationError(TradingBotError):
    """Order rejected before submission (size or price out of bounds)."""
    
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, "VALIDATION_ERROR", details)
