"""Alpha Vantage client used by the proxy endpoints."""

from __future__ import annotations

import asyncio
import enum
import logging
import time
from collections import deque
from typing import Any, Deque, Dict, Literal, Optional

import httpx

from quoteboard.config import AppSettings, get_settings
from quoteboard.config.settings import DEFAULT_BASE_URL
from quoteboard.core.errors import (
    InvalidCredential,
    NotFound,
    QuoteboardError,
    RateLimited,
    UpstreamFailure,
)

logger = logging.getLogger(__name__)

_WINDOW_SECONDS = 60.0

_CREDENTIAL_MARKERS = ("invalid api key", "apikey is invalid", "the parameter apikey is invalid")
_RATE_LIMIT_MARKERS = ("call frequency", "premium", "rate limit", "requests per day", "requests per minute")
_NOT_FOUND_MARKERS = ("invalid api call", "no data found")


class ProviderErrorKind(str, enum.Enum):
    """Enumerated provider failure classes."""

    INVALID_CREDENTIAL = "invalid_credential"
    RATE_LIMITED = "rate_limited"
    NOT_FOUND = "not_found"
    UPSTREAM = "upstream"


class AlphaVantageError(RuntimeError):
    """Raised when Alpha Vantage returns an error payload or cannot be reached."""

    def __init__(self, message: str, kind: ProviderErrorKind = ProviderErrorKind.UPSTREAM) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind

    def to_http_error(self, *, not_found_message: str | None = None) -> QuoteboardError:
        """Translate into the error taxonomy rendered by the API layer."""

        if self.kind is ProviderErrorKind.INVALID_CREDENTIAL:
            return InvalidCredential()
        if self.kind is ProviderErrorKind.RATE_LIMITED:
            return RateLimited()
        if self.kind is ProviderErrorKind.NOT_FOUND:
            return NotFound(not_found_message or self.message)
        return UpstreamFailure(self.message)


def classify_provider_message(message: str, *, field: str = "Error Message") -> ProviderErrorKind:
    """Map an Alpha Vantage ``Error Message``/``Information``/``Note`` text onto a kind."""

    lowered = message.lower()
    if any(marker in lowered for marker in _CREDENTIAL_MARKERS) or (
        field == "Error Message" and "apikey" in lowered
    ):
        return ProviderErrorKind.INVALID_CREDENTIAL
    if any(marker in lowered for marker in _RATE_LIMIT_MARKERS):
        return ProviderErrorKind.RATE_LIMITED
    if field == "Error Message" and any(marker in lowered for marker in _NOT_FOUND_MARKERS):
        return ProviderErrorKind.NOT_FOUND
    return ProviderErrorKind.UPSTREAM


def _raise_for_payload(payload: Any) -> None:
    if not isinstance(payload, dict):
        raise AlphaVantageError("Alpha Vantage returned an unexpected payload")
    for field in ("Error Message", "Information", "Note"):
        message = payload.get(field)
        if message:
            kind = classify_provider_message(str(message), field=field)
            raise AlphaVantageError(str(message), kind)


class AlphaVantageClient:
    """Optionally throttled Alpha Vantage client with convenience helpers."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 15.0,
        requests_per_minute: int | None = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.requests_per_minute = requests_per_minute
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient()
        self._calls: Deque[float] = deque()
        self._lock = asyncio.Lock()

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def _throttle(self) -> None:
        if not self.requests_per_minute:
            return
        async with self._lock:
            while True:
                now = time.monotonic()
                while self._calls and now - self._calls[0] >= _WINDOW_SECONDS:
                    self._calls.popleft()
                if len(self._calls) < self.requests_per_minute:
                    self._calls.append(now)
                    return
                wait_for = _WINDOW_SECONDS - (now - self._calls[0])
                logger.debug("Throttling Alpha Vantage call for %.2fs", wait_for)
                await asyncio.sleep(wait_for)

    async def _request(self, params: Dict[str, Any]) -> dict[str, Any]:
        if not self.api_key:
            raise AlphaVantageError("API key not configured", ProviderErrorKind.INVALID_CREDENTIAL)
        await self._throttle()
        query = {**params, "apikey": self.api_key}
        try:
            response = await self._client.get(self.base_url, params=query, timeout=self.timeout_seconds)
        except httpx.HTTPError as exc:
            raise AlphaVantageError(f"Failed to reach Alpha Vantage: {exc}") from exc
        if response.status_code >= 400:
            raise AlphaVantageError(f"Alpha Vantage API responded with status: {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise AlphaVantageError("Alpha Vantage returned invalid JSON payload") from exc
        _raise_for_payload(payload)
        return payload

    async def global_quote(self, symbol: str) -> dict[str, Any]:
        return await self._request({"function": "GLOBAL_QUOTE", "symbol": symbol})

    async def time_series_daily(
        self, symbol: str, output: Literal["compact", "full"] = "compact"
    ) -> dict[str, Any]:
        return await self._request(
            {"function": "TIME_SERIES_DAILY", "symbol": symbol, "outputsize": output}
        )

    async def symbol_search(self, keywords: str) -> dict[str, Any]:
        return await self._request({"function": "SYMBOL_SEARCH", "keywords": keywords})

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def get_alpha_vantage_client(settings: AppSettings | None = None) -> AlphaVantageClient:
    """Build a client from ``settings``, defaulting to the process settings."""

    settings = settings if settings is not None else get_settings()
    return AlphaVantageClient(
        api_key=settings.alphavantage_api_key,
        base_url=settings.alphavantage_base_url,
        timeout_seconds=settings.alphavantage_timeout_seconds,
        requests_per_minute=settings.alphavantage_requests_per_minute,
    )


__all__ = [
    "AlphaVantageClient",
    "AlphaVantageError",
    "ProviderErrorKind",
    "classify_provider_message",
    "get_alpha_vantage_client",
]
