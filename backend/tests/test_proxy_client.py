from __future__ import annotations

import httpx
import pytest
from httpx import ASGITransport

from quoteboard.cache import ProxyCaches
from quoteboard.client.proxy_client import ProxyClient, ProxyRequestError
from quoteboard.config import AppSettings
from quoteboard.main import create_app


def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def test_fetch_quote_parses_payload():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/stock"
        assert request.url.params["symbol"] == "IBM"
        return httpx.Response(
            200,
            json={
                "symbol": "IBM",
                "price": 168.23,
                "change": 2.23,
                "changePercent": 1.34,
                "previousClose": 166.0,
                "lastUpdated": "2024-05-01T12:00:00Z",
            },
        )

    proxy = ProxyClient("http://proxy/", client=_mock_client(handler))
    quote = await proxy.fetch_quote("IBM")

    assert quote.symbol == "IBM"
    assert quote.change_percent == 1.34


async def test_error_body_becomes_exception_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": "API rate limit exceeded. Please try again later."})

    proxy = ProxyClient("http://proxy", client=_mock_client(handler))
    with pytest.raises(ProxyRequestError) as excinfo:
        await proxy.fetch_quote("IBM")

    assert excinfo.value.status_code == 429
    assert excinfo.value.message == "API rate limit exceeded. Please try again later."


async def test_error_without_body_uses_fallback_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    proxy = ProxyClient("http://proxy", client=_mock_client(handler))
    with pytest.raises(ProxyRequestError) as excinfo:
        await proxy.fetch_quote("IBM")

    assert excinfo.value.message == "Failed to fetch data for IBM"


async def test_search_against_running_app():
    class SearchProvider:
        configured = True

        async def symbol_search(self, keywords: str):
            return {"bestMatches": [{"1. symbol": "IBM", "2. name": "International Business Machines"}]}

        async def aclose(self) -> None:
            return None

    settings = AppSettings(alphavantage_api_key="test")
    app = create_app(settings, provider=SearchProvider(), caches=ProxyCaches.from_settings(settings))  # type: ignore[arg-type]
    http = httpx.AsyncClient(transport=ASGITransport(app=app))
    proxy = ProxyClient("http://test", client=http)
    try:
        matches = await proxy.search_symbols("ibm")
    finally:
        await http.aclose()

    assert [match.symbol for match in matches] == ["IBM"]
    assert matches[0].name == "International Business Machines"


async def test_check_api_key_returns_sample():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/test-api-key"
        return httpx.Response(
            200,
            json={"success": True, "message": "API key is valid and working", "sample": {"symbol": "IBM"}},
        )

    proxy = ProxyClient("http://proxy", client=_mock_client(handler))
    result = await proxy.check_api_key()

    assert result["success"] is True
    assert result["sample"] == {"symbol": "IBM"}


async def test_check_api_key_surfaces_rejection():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "Invalid API key", "details": "apikey is invalid"})

    proxy = ProxyClient("http://proxy", client=_mock_client(handler))
    with pytest.raises(ProxyRequestError) as excinfo:
        await proxy.check_api_key()

    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "Invalid API key"
