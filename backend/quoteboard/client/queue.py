"""Rate-limited request queue that feeds the dashboard watch-list.

Symbols are drained in fixed-size batches. Each batch is fetched concurrently
and failures stay isolated to their symbol. When symbols remain after a batch
the queue stays in the draining state until a cooldown timer fires, so at most
one batch is ever in flight.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Deque, Iterable, Optional

from quoteboard.client.proxy_client import ProxyRequestError
from quoteboard.client.scheduler import ScheduledHandle, Scheduler
from quoteboard.client.watchlist import Watchlist
from quoteboard.schemas import QuoteSchema

logger = logging.getLogger(__name__)

FetchQuote = Callable[[str], Awaitable[QuoteSchema]]


@dataclass
class BatchResult:
    symbols: list[str]
    generation: int
    quotes: list[QuoteSchema] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None
    discarded: int = 0


def _failure_message(symbol: str, exc: BaseException) -> str:
    if isinstance(exc, ProxyRequestError):
        return exc.message
    return str(exc) or f"Failed to fetch data for {symbol}"


class RequestQueue:
    """Pending symbols plus a single-flight drain loop."""

    def __init__(
        self,
        fetch_quote: FetchQuote,
        scheduler: Scheduler,
        watchlist: Watchlist | None = None,
        *,
        batch_size: int = 5,
        cooldown_seconds: float = 60.0,
        call_budget: int = 25,
        on_batch: Callable[[BatchResult], None] | None = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._fetch_quote = fetch_quote
        self._scheduler = scheduler
        self.watchlist = watchlist if watchlist is not None else Watchlist()
        self.batch_size = batch_size
        self.cooldown_seconds = cooldown_seconds
        self.call_budget = call_budget
        self.remaining_calls = call_budget
        self.error: Optional[str] = None
        self._on_batch = on_batch
        self._pending: Deque[str] = deque()
        self._draining = False
        self._in_flight = False
        self._cooldown: ScheduledHandle | None = None
        self._generation = 0
        self._closed = False

    @property
    def pending(self) -> list[str]:
        return list(self._pending)

    @property
    def is_draining(self) -> bool:
        return self._draining

    @property
    def in_flight(self) -> bool:
        """True only while a batch request is outstanding, not during the cooldown."""

        return self._in_flight

    @property
    def generation(self) -> int:
        return self._generation

    def enqueue(self, symbols: Iterable[str]) -> None:
        """Append symbols; duplicates are kept and simply refetch."""

        if self._closed:
            return
        was_empty = not self._pending
        added = [symbol.strip().upper() for symbol in symbols if symbol and symbol.strip()]
        self._pending.extend(added)
        if was_empty and added:
            self._scheduler.call_soon(self.drain)

    def clear(self) -> None:
        """Drop pending symbols and retire responses from earlier generations."""

        self._pending.clear()
        self._generation += 1

    async def drain(self) -> BatchResult | None:
        """Send one batch. A no-op while another drain or its cooldown is active."""

        if self._draining or not self._pending or self._closed:
            return None
        self._draining = True
        try:
            count = min(self.batch_size, len(self._pending))
            batch = [self._pending.popleft() for _ in range(count)]
            generation = self._generation
            logger.info("Fetching batch of %d symbols: %s", len(batch), ", ".join(batch))
            self._in_flight = True
            try:
                outcomes = await asyncio.gather(
                    *(self._fetch_quote(symbol) for symbol in batch),
                    return_exceptions=True,
                )
            finally:
                self._in_flight = False
            result = self._merge(batch, outcomes, generation)
            self.remaining_calls = max(0, self.remaining_calls - len(batch))
        finally:
            if self._pending and not self._closed:
                self._cooldown = self._scheduler.call_later(self.cooldown_seconds, self._resume)
            else:
                self._draining = False

        logger.info(
            "Batch done: %d ok, %d failed, %d stale, %d pending, %d calls remaining",
            len(result.quotes),
            len(result.failures),
            result.discarded,
            len(self._pending),
            self.remaining_calls,
        )
        if self._on_batch is not None:
            self._on_batch(result)
        return result

    async def _resume(self) -> None:
        self._cooldown = None
        self._draining = False
        await self.drain()

    def _merge(
        self,
        batch: list[str],
        outcomes: list[QuoteSchema | BaseException],
        generation: int,
    ) -> BatchResult:
        result = BatchResult(symbols=batch, generation=generation)
        stale = generation != self._generation
        for symbol, outcome in zip(batch, outcomes):
            if stale:
                result.discarded += 1
                continue
            if isinstance(outcome, BaseException):
                message = _failure_message(symbol, outcome)
                logger.warning("Error fetching %s: %s", symbol, message)
                result.failures[symbol] = message
                result.error = message
                continue
            self.watchlist.upsert(outcome)
            result.quotes.append(outcome)
        if stale:
            logger.debug("Discarded %d responses from generation %d", result.discarded, generation)
        if result.error is not None:
            self.error = result.error
        return result

    def close(self) -> None:
        """Cancel the cooldown timer and stop accepting work."""

        self._closed = True
        if self._cooldown is not None:
            self._cooldown.cancel()
            self._cooldown = None
        self._pending.clear()
        self._draining = False


__all__ = ["BatchResult", "FetchQuote", "RequestQueue"]
