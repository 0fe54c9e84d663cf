"""Response cache tests."""

from __future__ import annotations

from quoteboard.cache import NamespacedCache, ProxyCaches, ResponseCache


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_hit_within_ttl_returns_stored_payload():
    clock = FakeClock(100.0)
    cache = ResponseCache(clock)
    payload = {"symbol": "AAPL", "price": 190.5}
    cache.put("stock_AAPL", payload)

    clock.now = 399.0
    assert cache.get("stock_AAPL", ttl_seconds=300) is payload


def test_entry_at_or_past_ttl_reads_as_absent():
    clock = FakeClock(0.0)
    cache = ResponseCache(clock)
    cache.put("stock_AAPL", {"price": 1})

    clock.now = 300.0
    assert cache.get("stock_AAPL", ttl_seconds=300) is None
    # expired entries stay until overwritten
    assert cache.entry("stock_AAPL") is not None
    assert len(cache) == 1


def test_put_overwrites_stored_at():
    cache = ResponseCache(FakeClock())
    cache.put("k", "old", now=1.0)
    entry = cache.put("k", "new", now=50.0)

    assert entry.stored_at == 50.0
    assert cache.get("k", ttl_seconds=10, now=55.0) == "new"


def test_same_cache_serves_different_ttls():
    cache = ResponseCache(FakeClock())
    cache.put("k", "value", now=0.0)

    assert cache.get("k", ttl_seconds=60, now=120.0) is None
    assert cache.get("k", ttl_seconds=3600, now=120.0) == "value"


def test_missing_key():
    assert ResponseCache().get("nope", ttl_seconds=10) is None


def test_proxy_caches_keep_namespaces_apart():
    clock = FakeClock()
    caches = ProxyCaches(
        quote_ttl_seconds=300,
        history_ttl_seconds=3600,
        search_ttl_seconds=86400,
        clock=clock,
    )
    caches.quote.put("AAPL", {"kind": "quote"})

    assert caches.history.get("AAPL") is None
    assert caches.quote.get("AAPL") == {"kind": "quote"}
    assert caches.quote.key_for("AAPL") == "stock_AAPL"
    assert caches.history.key_for("AAPL") == "history_AAPL"
    assert caches.search.key_for("apple") == "search_apple"

    caches.clear()
    assert caches.quote.get("AAPL") is None


def test_namespaced_cache_uses_its_own_ttl():
    clock = FakeClock()
    namespace = NamespacedCache("history", 3600, ResponseCache(clock))
    namespace.put("MSFT", {"symbol": "MSFT"})

    clock.now = 3599.0
    assert namespace.get("MSFT") == {"symbol": "MSFT"}
    clock.now = 3600.0
    assert namespace.get("MSFT") is None


def test_namespaced_cache_keeps_injected_empty_cache():
    injected = ResponseCache(FakeClock())

    namespace = NamespacedCache("stock", 300, injected)

    assert namespace.cache is injected


def test_proxy_caches_stamp_entries_with_given_clock():
    clock = FakeClock(42.0)
    caches = ProxyCaches(quote_ttl_seconds=300, history_ttl_seconds=3600, search_ttl_seconds=86400, clock=clock)

    entry = caches.quote.put("AAPL", {"symbol": "AAPL"})

    assert entry.stored_at == 42.0
    clock.now = 342.0
    assert caches.quote.get("AAPL") is None
