"""
Tests for the periodic strategy timer.
"""

import asyncio

import pytest

from polybot.strategies.base import IntervalTimer


class TestIntervalTimer:
    """Tests for tick scheduling and stop semantics."""

    @pytest.mark.asyncio
    async def test_ticks_repeatedly_until_stopped(self):
        ticks = []

        async def tick():
            ticks.append(1)

        timer = IntervalTimer(tick, 0.01)
        timer.start()
        await asyncio.sleep(0.1)
        timer.stop()
        await timer.wait_idle()

        count = len(ticks)
        assert count >= 2
        assert not timer.is_running

        await asyncio.sleep(0.05)
        assert len(ticks) == count

    @pytest.mark.asyncio
    async def test_slow_ticks_overlap(self):
        release = asyncio.Event()
        started = []
        finished = []

        async def tick():
            started.append(1)
            await release.wait()
            finished.append(1)

        timer = IntervalTimer(tick, 0.01)
        timer.start()
        await asyncio.sleep(0.1)

        assert timer.in_flight >= 2

        timer.stop()
        release.set()
        await timer.wait_idle()

        # Ticks that had started when the timer stopped still ran to completion
        assert len(finished) == len(started)

    @pytest.mark.asyncio
    async def test_failing_tick_does_not_stop_timer(self):
        ticks = []

        async def tick():
            ticks.append(1)
            raise RuntimeError("tick failed")

        timer = IntervalTimer(tick, 0.01)
        timer.start()
        await asyncio.sleep(0.1)

        assert timer.is_running
        assert len(ticks) >= 2

        timer.stop()
        await timer.wait_idle()

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self):
        async def tick():
            pass

        timer = IntervalTimer(tick, 60)
        timer.start()
        task = timer._task
        timer.start()

        assert timer._task is task
        timer.stop()
