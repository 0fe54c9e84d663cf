"""Quote, daily history and symbol search proxy endpoints."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional

from fastapi import APIRouter, Depends, Query

from quoteboard.api.dependencies import get_app_settings, get_caches, get_provider
from quoteboard.cache import NamespacedCache, ProxyCaches
from quoteboard.config import AppSettings
from quoteboard.core.errors import ConfigurationError, InvalidInput, QuoteboardError, UpstreamFailure
from quoteboard.providers.alpha_vantage import AlphaVantageClient, AlphaVantageError
from quoteboard.schemas import ErrorResponse, HistoryResponse, QuoteSchema, SearchResponse
from quoteboard.services.normalize import parse_daily_series, parse_global_quote, parse_search_matches

router = APIRouter()
logger = logging.getLogger(__name__)

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse} for code in (400, 404, 429, 500)
}


def _require(value: Optional[str], message: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise InvalidInput(message)
    return cleaned


async def _cached_fetch(
    cache: NamespacedCache,
    key: str,
    provider: AlphaVantageClient,
    fetch: Callable[[], Awaitable[dict[str, Any]]],
    reshape: Callable[[dict[str, Any]], dict[str, Any]],
    *,
    description: str,
    not_found_message: str | None = None,
) -> dict[str, Any]:
    """Shared template: credential check, cache lookup, provider call, reshape, store."""

    if not provider.configured:
        raise ConfigurationError()

    cached = cache.get(key)
    if cached is not None:
        return cached

    try:
        payload = await fetch()
        result = reshape(payload)
    except AlphaVantageError as exc:
        logger.error("Error fetching %s: %s", description, exc)
        raise exc.to_http_error(not_found_message=not_found_message) from exc
    except QuoteboardError:
        raise
    except Exception as exc:
        logger.exception("Unexpected error fetching %s", description)
        raise UpstreamFailure(f"Failed to fetch {description}") from exc

    cache.put(key, result)
    return result


@router.get("/stock", response_model=QuoteSchema, responses=_ERROR_RESPONSES)
async def get_quote(
    symbol: Optional[str] = Query(default=None, description="Ticker symbol"),
    caches: ProxyCaches = Depends(get_caches),
    provider: AlphaVantageClient = Depends(get_provider),
) -> dict[str, Any]:
    normalized = _require(symbol, "Stock symbol is required").upper()
    return await _cached_fetch(
        caches.quote,
        normalized,
        provider,
        lambda: provider.global_quote(normalized),
        lambda payload: parse_global_quote(payload, normalized),
        description=f"stock data for {normalized}",
        not_found_message=f"Stock data not found for symbol: {normalized}",
    )


@router.get("/stock/history", response_model=HistoryResponse, responses=_ERROR_RESPONSES)
async def get_history(
    symbol: Optional[str] = Query(default=None, description="Ticker symbol"),
    caches: ProxyCaches = Depends(get_caches),
    provider: AlphaVantageClient = Depends(get_provider),
    settings: AppSettings = Depends(get_app_settings),
) -> dict[str, Any]:
    normalized = _require(symbol, "Stock symbol is required").upper()
    return await _cached_fetch(
        caches.history,
        normalized,
        provider,
        lambda: provider.time_series_daily(normalized),
        lambda payload: parse_daily_series(payload, normalized, limit=settings.history_max_bars),
        description=f"historical stock data for {normalized}",
        not_found_message=f"No historical data found for symbol: {normalized}",
    )


@router.get("/stock/search", response_model=SearchResponse, responses=_ERROR_RESPONSES)
async def search_symbols(
    query: Optional[str] = Query(default=None, description="Ticker or company keywords"),
    caches: ProxyCaches = Depends(get_caches),
    provider: AlphaVantageClient = Depends(get_provider),
) -> dict[str, Any]:
    keywords = _require(query, "Search query is required")
    logger.info("Searching symbols with query: %s", keywords)
    return await _cached_fetch(
        caches.search,
        keywords.lower(),
        provider,
        lambda: provider.symbol_search(keywords),
        parse_search_matches,
        description=f"search results for {keywords!r}",
    )


__all__ = ["router"]
