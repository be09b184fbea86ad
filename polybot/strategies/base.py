"""
Strategy interface and the periodic timer that drives strategy ticks.
"""

import asyncio
from typing import Awaitable, Callable, Optional, Protocol

from ..utils.logger import get_logger

logger = get_logger("strategy")


class Strategy(Protocol):
    """Anything the entry point can start and stop."""

    name: str

    async def start(self) -> None:
        ...

    async def stop(self) -> None:
        ...


class IntervalTimer:
    """
    Fires ``tick`` every ``interval`` seconds.

    Each tick runs as its own task and the timer does not wait for it, so
    a tick that outlasts the interval overlaps the next one. ``stop``
    cancels the timer only: ticks already running are left to finish.
    """

    def __init__(
        self,
        tick: Callable[[], Awaitable[None]],
        interval: float,
        name: str = "timer"
    ):
        self.tick = tick
        self.interval = interval
        self.name = name

        self._task: Optional[asyncio.Task] = None
        self._in_flight: set[asyncio.Task] = set()

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def in_flight(self) -> int:
        """Number of ticks currently executing."""
        return len(self._in_flight)

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name=self.name)

    def stop(self) -> None:
        if self._task:
            self._task.cancel()
            self._task = None

    async def wait_idle(self) -> None:
        """Wait for ticks that were running when called."""
        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            task = asyncio.create_task(self._run_tick())
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)

    async def _run_tick(self) -> None:
        try:
            await self.tick()
        except Exception as e:
            logger.error(f"{self.name} tick failed: {e}")
