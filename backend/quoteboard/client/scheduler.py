"""Cancellable timers for the dashboard session.

Callbacks are coroutine functions. The session talks to the ``Scheduler``
protocol only, so tests can swap in a scheduler driven by a simulated clock.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], Awaitable[None]]


class ScheduledHandle(Protocol):
    def cancel(self) -> None: ...

    @property
    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    def call_soon(self, callback: Callback) -> ScheduledHandle: ...

    def call_later(self, delay: float, callback: Callback) -> ScheduledHandle: ...

    def call_every(self, interval: float, callback: Callback) -> ScheduledHandle: ...


class _AsyncioHandle:
    def __init__(self) -> None:
        self._timer: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task[None]] = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
        if self._task is not None and not self._task.done():
            self._task.cancel()


class AsyncioScheduler:
    """Scheduler backed by the running event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    async def _run(self, callback: Callback) -> None:
        try:
            await callback()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Scheduled callback %r failed", callback)

    def _spawn(self, handle: _AsyncioHandle, callback: Callback) -> None:
        if handle.cancelled:
            return
        task = self.loop.create_task(self._run(callback))
        handle._task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def call_soon(self, callback: Callback) -> ScheduledHandle:
        handle = _AsyncioHandle()
        handle._timer = self.loop.call_soon(self._spawn, handle, callback)
        return handle

    def call_later(self, delay: float, callback: Callback) -> ScheduledHandle:
        handle = _AsyncioHandle()
        handle._timer = self.loop.call_later(delay, self._spawn, handle, callback)
        return handle

    def call_every(self, interval: float, callback: Callback) -> ScheduledHandle:
        handle = _AsyncioHandle()

        def _tick() -> None:
            if handle.cancelled:
                return
            self._spawn(handle, callback)
            handle._timer = self.loop.call_later(interval, _tick)

        handle._timer = self.loop.call_later(interval, _tick)
        return handle

    async def wait_idle(self) -> None:
        """Wait for callbacks that are currently running to finish."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


__all__ = ["AsyncioScheduler", "Callback", "ScheduledHandle", "Scheduler"]
