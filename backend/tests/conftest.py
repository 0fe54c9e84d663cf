import asyncio
import inspect
import itertools
import pathlib
import sys
from datetime import datetime, timezone
from typing import Awaitable, Callable

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quoteboard.schemas import QuoteSchema  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the suite."""

    config.addinivalue_line("markers", "asyncio: mark test as running in an asyncio event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            funcargs = pyfuncitem.funcargs
            testargs = {arg: funcargs[arg] for arg in pyfuncitem._fixtureinfo.argnames}
            loop.run_until_complete(test_function(**testargs))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


class ManualHandle:
    def __init__(
        self,
        due: float,
        seq: int,
        callback: Callable[[], Awaitable[None]],
        interval: float | None = None,
    ) -> None:
        self.due = due
        self.seq = seq
        self.callback = callback
        self.interval = interval
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ManualScheduler:
    """Scheduler driven by a simulated clock; callbacks run inside ``advance``."""

    def __init__(self) -> None:
        self.now = 0.0
        self.delays: list[float] = []
        self._handles: list[ManualHandle] = []
        self._seq = itertools.count()

    def _add(self, delay: float, callback, interval: float | None = None) -> ManualHandle:
        handle = ManualHandle(self.now + delay, next(self._seq), callback, interval)
        self._handles.append(handle)
        return handle

    def call_soon(self, callback) -> ManualHandle:
        return self._add(0.0, callback)

    def call_later(self, delay: float, callback) -> ManualHandle:
        self.delays.append(delay)
        return self._add(delay, callback)

    def call_every(self, interval: float, callback) -> ManualHandle:
        return self._add(interval, callback, interval)

    @property
    def active(self) -> list[ManualHandle]:
        return [handle for handle in self._handles if not handle.cancelled]

    async def advance(self, seconds: float = 0.0) -> None:
        target = self.now + seconds
        while True:
            due = [handle for handle in self.active if handle.due <= target]
            if not due:
                break
            handle = min(due, key=lambda item: (item.due, item.seq))
            self.now = max(self.now, handle.due)
            if handle.interval is None:
                self._handles.remove(handle)
            else:
                handle.due += handle.interval
            await handle.callback()
        self.now = target


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


def make_quote(symbol: str, price: float = 100.0) -> QuoteSchema:
    return QuoteSchema(
        symbol=symbol,
        price=price,
        change=1.5,
        change_percent=1.52,
        previous_close=price - 1.5,
        last_updated=datetime(2024, 5, 1, 14, 30, tzinfo=timezone.utc),
    )
