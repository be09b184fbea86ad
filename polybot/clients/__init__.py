# Polymarket clients
from .api_client import MarketDataClient
from .websocket_client import PushClient

__all__ = ["MarketDataClient", "PushClient"]
