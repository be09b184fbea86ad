"""
In-memory position ledger keyed by (market, outcome).
"""

from typing import Optional

from ..clients.api_client import MarketDataClient
from ..models import Position
from ..utils.logger import get_logger

logger = get_logger("ledger")


class PositionLedger:
    """
    Last-known positions of one account.

    ``refresh`` discards every cached entry and replaces the mapping with
    a fresh fetch, so entries may be stale between an order submission
    and the next refresh.
    """

    def __init__(self, api: MarketDataClient, account_address: str):
        self.api = api
        self.account_address = account_address
        self._positions: dict[tuple[str, str], Position] = {}

    async def refresh(self) -> None:
        """Replace all positions with the account's current ones."""
        try:
            positions = await self.api.get_positions(self.account_address)
        except Exception as e:
            logger.error(f"Failed to refresh positions: {e}")
            raise

        self._positions = {position.key: position for position in positions}
        logger.debug(f"Refreshed {len(positions)} positions")

    def get(self, market: str, outcome: str) -> Optional[Position]:
        return self._positions.get((market, outcome))

    def all(self) -> list[Position]:
        return list(self._positions.values())

    def __len__(self) -> int:
        return len(self._positions)
