"""Keyed registry of abortable asyncio tasks.

Simulated-latency work (estimate preview, contractor responses) runs as a
task keyed by project or request id. Scheduling a key again cancels the
previous task, so a stale result is never applied after a newer request.
"""

import asyncio
from typing import Any, Awaitable, Dict, Optional

import structlog

logger = structlog.get_logger(__name__)


class KeyedTaskRegistry:
    """At most one live task per key."""

    def __init__(self):
        self._tasks: Dict[str, asyncio.Task] = {}

    def schedule(self, key: str, coro: Awaitable[Any]) -> asyncio.Task:
        """Start `coro` under `key`, cancelling any task already running for it.

        Must be called from within a running event loop.
        """
        stale = self._tasks.get(key)
        if stale is not None and not stale.done():
            logger.debug("task_superseded", key=key)
            stale.cancel()

        task = asyncio.ensure_future(coro)
        self._tasks[key] = task
        task.add_done_callback(lambda t, k=key: self._forget(k, t))
        return task

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]

    def get(self, key: str) -> Optional[asyncio.Task]:
        return self._tasks.get(key)

    def is_pending(self, key: str) -> bool:
        task = self._tasks.get(key)
        return task is not None and not task.done()

    def cancel(self, key: str) -> bool:
        """Cancel the task for `key`. Returns True if a live task was cancelled."""
        task = self._tasks.pop(key, None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.debug("task_cancelled", key=key)
        return True

    def cancel_all(self) -> int:
        """Cancel every live task; returns how many were cancelled."""
        cancelled = 0
        for key in list(self._tasks):
            if self.cancel(key):
                cancelled += 1
        return cancelled

    def __len__(self) -> int:
        return len(self._tasks)
