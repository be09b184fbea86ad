"""
WebSocket client for per-market push updates.
Handles connection, subscription, and message dispatch.
"""

import asyncio
import json
from typing import Any, Callable

import websockets
from websockets.protocol import State

from ..utils.logger import get_logger

logger = get_logger("websocket")


def channel_for(market_id: str) -> str:
    """Channel name used by the push API for a market."""
    return f"market:{market_id}"


class PushClient:
    """
    Async WebSocket client for market push updates.

    Messages are routed to the callback registered for their ``channel``.
    The channel is best effort: whenever the connection drops the client
    waits a fixed delay and reconnects, without a cap on attempts.
    """

    def __init__(self, url: str, reconnect_delay: float = 5.0):
        """
        Initialize WebSocket client.

        Args:
            url: Push API URL
            reconnect_delay: Seconds to wait before every reconnection
        """
        self.url = url
        self.reconnect_delay = reconnect_delay

        self._ws = None
        self._callbacks: dict[str, Callable[[dict], Any]] = {}
        self._running = False

    @property
    def is_connected(self) -> bool:
        """Check if WebSocket is connected."""
        if self._ws is None:
            return False
        return self._ws.state == State.OPEN

    @property
    def subscribed_channels(self) -> list[str]:
        return list(self._callbacks)

    async def connect(self) -> None:
        """Establish WebSocket connection and resubscribe known channels."""
        logger.info("Connecting to push API", extra={"url": self.url})

        self._ws = await websockets.connect(
            self.url,
            ping_interval=30,
            ping_timeout=10,
            close_timeout=5
        )
        logger.info("WebSocket connected")

        for channel in list(self._callbacks):
            await self._send_subscribe(channel)

    async def disconnect(self) -> None:
        """Close WebSocket connection and stop reconnecting."""
        self._running = False
        if self._ws:
            await self._ws.close()
            self._ws = None
        logger.info("WebSocket disconnected")

    async def subscribe(self, market_id: str, callback: Callable[[dict], Any]) -> None:
        """
        Subscribe to updates for a market.

        The subscription is remembered; if the socket is not open yet the
        subscribe message is sent on the next (re)connection.

        Args:
            market_id: Market to follow
            callback: Called with each decoded message for the market
        """
        channel = channel_for(market_id)
        self._callbacks[channel] = callback

        if self.is_connected:
            await self._send_subscribe(channel)

    async def unsubscribe(self, market_id: str) -> None:
        """Stop dispatching updates for a market."""
        self._callbacks.pop(channel_for(market_id), None)

    async def _send_subscribe(self, channel: str) -> None:
        await self._ws.send(json.dumps({"type": "subscribe", "channel": channel}))
        logger.info(f"Subscribed to {channel}")

    async def run(self) -> None:
        """
        Main loop - connect and process messages.
        Reconnects after a fixed delay whenever the connection is lost.
        """
        self._running = True

        while self._running:
            try:
                if not self.is_connected:
                    await self.connect()

                await self._process_messages()

                if self._running:
                    logger.warning("WebSocket closed, attempting to reconnect...")

            except websockets.ConnectionClosed as e:
                logger.warning(f"WebSocket connection closed: {e}")

            except (OSError, asyncio.TimeoutError, websockets.WebSocketException) as e:
                logger.error(f"WebSocket error: {e}")

            if self._running:
                self._ws = None
                await asyncio.sleep(self.reconnect_delay)

    async def _process_messages(self) -> None:
        """Process incoming WebSocket messages."""
        if not self._ws:
            return

        async for message in self._ws:
            await self.handle_message(message)

    async def handle_message(self, message) -> None:
        """Decode one raw message and dispatch it to its channel callback."""
        try:
            data = json.loads(message)
        except (json.JSONDecodeError, TypeError):
            logger.error(f"Error parsing WebSocket message: {str(message)[:100]}")
            return

        if not isinstance(data, dict):
            return

        callback = self._callbacks.get(data.get("channel"))
        if callback is None:
            return

        try:
            result = callback(data)
            if asyncio.iscoroutine(result):
                await result
        except Exception as e:
            logger.error(f"Error in handler for {data.get('channel')}: {e}")
