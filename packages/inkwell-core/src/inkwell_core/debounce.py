"""Cancellable single-shot timers that coalesce bursts of calls."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from inkwell_core.util.logging import get_logger

logger = get_logger(__name__)

type Action = Callable[[], Awaitable[object]]


@dataclass
class _PendingCall:
    task: asyncio.Task[None]
    action: Action


class Debouncer:
    """Run an action once a key has been quiet for ``delay`` seconds.

    Each key holds at most one pending timer; scheduling again replaces it.
    Once a timer fires the action is detached from the key, so a later
    ``schedule``/``cancel`` never interrupts a write already in progress.
    """

    def __init__(self, delay: float) -> None:
        """Initialize the debouncer.

        Args:
            delay: Quiet period in seconds.

        Raises:
            ValueError: If *delay* is negative.
        """
        if delay < 0:
            raise ValueError("delay must not be negative")
        self.delay = delay
        self._pending: dict[str, _PendingCall] = {}
        self._running: set[asyncio.Task[None]] = set()

    def schedule(self, key: str, action: Action) -> None:
        """(Re)start the timer for *key*; only the latest *action* will run."""
        self.cancel(key)
        task = asyncio.get_running_loop().create_task(self._fire(key, action), name=f"debounce:{key}")
        task.add_done_callback(self._report)
        self._pending[key] = _PendingCall(task=task, action=action)

    def cancel(self, key: str) -> bool:
        """Drop the pending timer for *key* without running it.

        Returns:
            bool: True if a timer was pending.
        """
        pending = self._pending.pop(key, None)
        if pending is None:
            return False
        pending.task.cancel()
        return True

    def is_pending(self, key: str) -> bool:
        """Return True when *key* has a timer that has not fired yet."""
        return key in self._pending

    @property
    def pending_keys(self) -> list[str]:
        """Keys with a timer that has not fired yet."""
        return list(self._pending)

    async def flush(self, key: str) -> bool:
        """Run the pending action for *key* now instead of waiting for the timer.

        Returns:
            bool: True if an action was pending and has been run.
        """
        pending = self._pending.pop(key, None)
        if pending is None:
            return False
        pending.task.cancel()
        await pending.action()
        return True

    async def flush_all(self) -> None:
        """Run every pending action now and wait for timers already firing."""
        for key in list(self._pending):
            await self.flush(key)
        if self._running:
            await asyncio.gather(*self._running, return_exceptions=True)

    async def _fire(self, key: str, action: Action) -> None:
        await asyncio.sleep(self.delay)
        current = self._pending.get(key)
        if current is None or current.task is not asyncio.current_task():
            return
        del self._pending[key]
        task = current.task
        self._running.add(task)
        try:
            await action()
        finally:
            self._running.discard(task)

    @staticmethod
    def _report(task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Debounced action %s failed: %s", task.get_name(), exc, exc_info=exc)
