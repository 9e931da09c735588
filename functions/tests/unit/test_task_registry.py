"""Unit tests for the keyed task registry."""

import asyncio

import pytest

from utils.task_registry import KeyedTaskRegistry


async def _value_after(value, delay):
    await asyncio.sleep(delay)
    return value


class TestKeyedTaskRegistry:
    """At most one live task per key."""

    @pytest.mark.asyncio
    async def test_schedule_and_complete(self):
        tasks = KeyedTaskRegistry()

        task = tasks.schedule("proj-1", _value_after("done", 0))

        assert tasks.is_pending("proj-1")
        assert await task == "done"
        await asyncio.sleep(0)
        assert len(tasks) == 0
        assert tasks.get("proj-1") is None

    @pytest.mark.asyncio
    async def test_rescheduling_cancels_stale_task(self):
        tasks = KeyedTaskRegistry()

        stale = tasks.schedule("proj-1", _value_after("stale", 10))
        fresh = tasks.schedule("proj-1", _value_after("fresh", 0))

        assert await fresh == "fresh"
        with pytest.raises(asyncio.CancelledError):
            await stale

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        tasks = KeyedTaskRegistry()

        first = tasks.schedule("proj-1", _value_after(1, 0))
        second = tasks.schedule("proj-2", _value_after(2, 0))

        assert await asyncio.gather(first, second) == [1, 2]

    @pytest.mark.asyncio
    async def test_cancel(self):
        tasks = KeyedTaskRegistry()
        task = tasks.schedule("proj-1", _value_after("never", 10))

        assert tasks.cancel("proj-1") is True
        assert tasks.cancel("proj-1") is False
        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_cancel_all(self):
        tasks = KeyedTaskRegistry()
        pending = [tasks.schedule(f"proj-{i}", _value_after(i, 10)) for i in range(3)]

        assert tasks.cancel_all() == 3
        assert len(tasks) == 0
        results = await asyncio.gather(*pending, return_exceptions=True)
        assert all(isinstance(r, asyncio.CancelledError) for r in results)
