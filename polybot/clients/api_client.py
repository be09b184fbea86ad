"""
REST client for the Polymarket market API.
Reads markets, order books, trades, accounts and positions; creates and cancels orders.
"""

from typing import Any, Optional

import aiohttp

from ..config import PolymarketConfig
from ..models import (
    Account,
    Market,
    OrderBook,
    OrderRequest,
    OrderResponse,
    Position,
    Trade,
)
from ..utils.logger import get_logger

logger = get_logger("api")


class MarketDataClient:
    """
    Async client for the market REST API.

    Every call hits the network: there is no cache and no retry.
    HTTP errors (``aiohttp.ClientResponseError``) and transport errors
    (``aiohttp.ClientError``) are logged and re-raised unchanged.
    After ``close()`` requests raise ``RuntimeError`` until
    ``initialize()`` is called again.
    """

    def __init__(self, config: PolymarketConfig, timeout_seconds: float = 30.0):
        """
        Initialize API client.

        Args:
            config: API endpoint and credentials
            timeout_seconds: Total timeout per request
        """
        self.base_url = config.api_url.rstrip("/")
        self.api_key = config.api_key
        self.timeout_seconds = timeout_seconds
        self._session: Optional[aiohttp.ClientSession] = None
        self._closed = False

    async def initialize(self) -> None:
        """Initialize HTTP session."""
        self._closed = False
        if not self._session:
            headers = {"Content-Type": "application/json"}
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._session = aiohttp.ClientSession(
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds)
            )
        logger.info("API client initialized", extra={"base_url": self.base_url})

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None
        self._closed = True

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None
    ) -> Any:
        """Make HTTP request and return the decoded JSON body."""
        if self._closed:
            raise RuntimeError(f"API client is closed: {method} {endpoint}")
        if not self._session:
            await self.initialize()

        url = f"{self.base_url}{endpoint}"
        logger.debug(f"API Request: {method} {endpoint}")

        try:
            async with self._session.request(method, url, params=params, json=json) as response:
                response.raise_for_status()
                if response.content_length == 0:
                    return None
                return await response.json(content_type=None)
        except aiohttp.ClientResponseError as e:
            logger.error(
                "API Response Error",
                extra={"status": e.status, "method": method, "endpoint": endpoint, "error": e.message}
            )
            raise
        except aiohttp.ClientError as e:
            logger.error(f"API request failed: {method} {endpoint}: {e}")
            raise

    async def get_markets(self) -> list[Market]:
        """Get all markets."""
        data = await self._request("GET", "/markets")
        return [Market.from_dict(m) for m in data or []]

    async def get_market(self, market_id: str) -> Market:
        """Get market by ID."""
        data = await self._request("GET", f"/markets/{market_id}")
        return Market.from_dict(data)

    async def get_order_book(self, market_id: str, outcome: str) -> OrderBook:
        """Get order book for one outcome of a market."""
        data = await self._request(
            "GET",
            f"/markets/{market_id}/orderbook",
            params={"outcome": outcome}
        )
        return OrderBook.from_dict(data or {}, market=market_id)

    async def get_trades(self, market_id: str, limit: int = 100) -> list[Trade]:
        """Get recent trades for a market."""
        data = await self._request(
            "GET",
            f"/markets/{market_id}/trades",
            params={"limit": limit}
        )
        return [Trade.from_dict(t) for t in data or []]

    async def get_account(self, address: str) -> Account:
        """Get account information."""
        data = await self._request("GET", f"/accounts/{address}")
        return Account.from_dict(data)

    async def get_positions(self, address: str) -> list[Position]:
        """Get positions for an account."""
        data = await self._request("GET", f"/accounts/{address}/positions")
        return [Position.from_dict(p) for p in data or []]

    async def create_order(self, order: OrderRequest) -> OrderResponse:
        """Submit a new order."""
        payload = order.to_payload()
        logger.info("Creating order", extra=payload)
        data = await self._request("POST", "/orders", json=payload)
        return OrderResponse.from_dict(data or {})

    async def cancel_order(self, order_id: str) -> None:
        """Cancel an order."""
        await self._request("DELETE", f"/orders/{order_id}")
        logger.info(f"Order {order_id} cancelled")

    async def get_order(self, order_id: str) -> OrderResponse:
        """Get order status."""
        data = await self._request("GET", f"/orders/{order_id}")
        return OrderResponse.from_dict(data or {})
