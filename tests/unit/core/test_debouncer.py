"""Unit tests for the debounce timer."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import pytest

from inkwell_core.debounce import Debouncer


class _Counter:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def action(self, label: str) -> Callable[[], Awaitable[None]]:
        async def _run() -> None:
            self.calls.append(label)

        return _run


@pytest.mark.anyio
async def test_burst_coalesces_to_last_action() -> None:
    """Rescheduling replaces the pending timer; only the last action runs."""
    counter = _Counter()
    debouncer = Debouncer(0.05)

    for index in range(5):
        debouncer.schedule("k", counter.action(f"call-{index}"))
        await asyncio.sleep(0.005)
    await asyncio.sleep(0.15)

    assert counter.calls == ["call-4"]
    assert not debouncer.is_pending("k")


@pytest.mark.anyio
async def test_keys_are_independent() -> None:
    """Each key has its own timer."""
    counter = _Counter()
    debouncer = Debouncer(0.01)

    debouncer.schedule("a", counter.action("a"))
    debouncer.schedule("b", counter.action("b"))
    await asyncio.sleep(0.05)

    assert sorted(counter.calls) == ["a", "b"]


@pytest.mark.anyio
async def test_cancel_drops_pending_action() -> None:
    """Cancelled timers never fire."""
    counter = _Counter()
    debouncer = Debouncer(0.01)

    debouncer.schedule("k", counter.action("x"))
    assert debouncer.cancel("k") is True
    assert debouncer.cancel("k") is False
    await asyncio.sleep(0.03)

    assert counter.calls == []


@pytest.mark.anyio
async def test_flush_runs_immediately() -> None:
    """Flushing runs the pending action without waiting for the delay."""
    counter = _Counter()
    debouncer = Debouncer(10)

    debouncer.schedule("k", counter.action("x"))
    assert debouncer.pending_keys == ["k"]
    assert await debouncer.flush("k") is True
    assert await debouncer.flush("k") is False

    assert counter.calls == ["x"]
    assert debouncer.pending_keys == []


@pytest.mark.anyio
async def test_flush_all_runs_every_pending_action() -> None:
    """flush_all empties the pending set."""
    counter = _Counter()
    debouncer = Debouncer(10)

    debouncer.schedule("a", counter.action("a"))
    debouncer.schedule("b", counter.action("b"))
    await debouncer.flush_all()

    assert sorted(counter.calls) == ["a", "b"]
    assert debouncer.pending_keys == []


@pytest.mark.anyio
async def test_failing_action_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    """Errors raised by a fired action are logged, not lost."""
    debouncer = Debouncer(0)

    async def _boom() -> None:
        raise RuntimeError("disk full")

    debouncer.schedule("k", _boom)
    await asyncio.sleep(0.02)

    assert "disk full" in caplog.text


def test_negative_delay_rejected() -> None:
    """Delays must not be negative."""
    with pytest.raises(ValueError, match="negative"):
        Debouncer(-1)
