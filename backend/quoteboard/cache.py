"""In-memory response cache for the proxy endpoints.

Entries are never evicted in the background. An entry older than the caller's
TTL reads as absent and is overwritten by the next ``put`` for that key. The
cache is process-local and best-effort: concurrent misses for the same key may
both reach the provider, which only costs a duplicate upstream call.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from quoteboard.config import AppSettings

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: Any
    stored_at: float


class ResponseCache:
    """Mapping of cache key to ``(payload, stored_at)``; TTL is supplied per read."""

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str, ttl_seconds: float, now: float | None = None) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        current = self._clock() if now is None else now
        if current - entry.stored_at >= ttl_seconds:
            logger.debug("Cache entry %s expired", key)
            return None
        return entry.payload

    def put(self, key: str, payload: Any, now: float | None = None) -> CacheEntry:
        stored_at = self._clock() if now is None else now
        entry = CacheEntry(key=key, payload=payload, stored_at=stored_at)
        self._entries[key] = entry
        return entry

    def entry(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class NamespacedCache:
    """A :class:`ResponseCache` bound to one endpoint class and its TTL."""

    def __init__(self, prefix: str, ttl_seconds: float, cache: ResponseCache | None = None) -> None:
        self.prefix = prefix
        self.ttl_seconds = ttl_seconds
        self.cache = cache if cache is not None else ResponseCache()

    def key_for(self, value: str) -> str:
        return f"{self.prefix}_{value}"

    def get(self, value: str) -> Any | None:
        key = self.key_for(value)
        payload = self.cache.get(key, self.ttl_seconds)
        logger.debug("Cache %s for %s", "hit" if payload is not None else "miss", key)
        return payload

    def put(self, value: str, payload: Any) -> CacheEntry:
        return self.cache.put(self.key_for(value), payload)


class ProxyCaches:
    """One private cache per endpoint class."""

    def __init__(
        self,
        *,
        quote_ttl_seconds: float,
        history_ttl_seconds: float,
        search_ttl_seconds: float,
        clock: Clock = time.monotonic,
    ) -> None:
        self.quote = NamespacedCache("stock", quote_ttl_seconds, ResponseCache(clock))
        self.history = NamespacedCache("history", history_ttl_seconds, ResponseCache(clock))
        self.search = NamespacedCache("search", search_ttl_seconds, ResponseCache(clock))

    @classmethod
    def from_settings(cls, settings: AppSettings, clock: Clock = time.monotonic) -> "ProxyCaches":
        return cls(
            quote_ttl_seconds=settings.quote_cache_ttl_seconds,
            history_ttl_seconds=settings.history_cache_ttl_seconds,
            search_ttl_seconds=settings.search_cache_ttl_seconds,
            clock=clock,
        )

    def clear(self) -> None:
        for namespace in (self.quote, self.history, self.search):
            namespace.cache.clear()


__all__ = ["CacheEntry", "NamespacedCache", "ProxyCaches", "ResponseCache"]
