"""Client helpers for the Quoteboard proxy endpoints."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from quoteboard.schemas import HistoryResponse, QuoteSchema, SearchMatchSchema, SearchResponse


class ProxyRequestError(RuntimeError):
    """Raised when a proxy endpoint answers with an error or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProxyClient:
    """Thin async wrapper over the proxy's JSON endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def _get(self, path: str, params: dict[str, Any], fallback_error: str) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise ProxyRequestError(f"{fallback_error}: {exc}") from exc

        if response.status_code >= 400:
            detail: Any = None
            try:
                payload = response.json()
                detail = payload.get("error") if isinstance(payload, dict) else None
            except ValueError:
                detail = None
            raise ProxyRequestError(str(detail or fallback_error), status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise ProxyRequestError(f"{fallback_error}: invalid JSON payload") from exc

    async def fetch_quote(self, symbol: str) -> QuoteSchema:
        payload = await self._get("/api/stock", {"symbol": symbol}, f"Failed to fetch data for {symbol}")
        return QuoteSchema.model_validate(payload)

    async def fetch_history(self, symbol: str) -> HistoryResponse:
        payload = await self._get(
            "/api/stock/history", {"symbol": symbol}, "Failed to fetch historical data"
        )
        return HistoryResponse.model_validate(payload)

    async def search_symbols(self, query: str) -> list[SearchMatchSchema]:
        payload = await self._get("/api/stock/search", {"query": query}, "Failed to search symbols")
        return SearchResponse.model_validate(payload).results

    async def check_api_key(self) -> dict[str, Any]:
        return await self._get("/api/test-api-key", {}, "Failed to test API key")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["ProxyClient", "ProxyRequestError"]
