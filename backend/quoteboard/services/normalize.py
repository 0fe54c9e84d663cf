"""Reshape raw Alpha Vantage payloads into the proxy's response contract."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from quoteboard.core.errors import NotFound
from quoteboard.schemas import (
    DailyBarSchema,
    HistoryResponse,
    QuoteSchema,
    SearchMatchSchema,
    SearchResponse,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_float(raw: Any) -> float:
    return float(str(raw).strip().rstrip("%"))


def parse_global_quote(payload: dict[str, Any], symbol: str, *, now: Clock = _utcnow) -> dict[str, Any]:
    """Return the JSON-ready quote for ``symbol``.

    ``lastUpdated`` is the moment of normalisation; the provider's trading day
    is not used.
    """

    quote = payload.get("Global Quote")
    if not quote:
        raise NotFound(f"Stock data not found for symbol: {symbol}")
    try:
        schema = QuoteSchema(
            symbol=quote.get("01. symbol") or symbol,
            price=_to_float(quote["05. price"]),
            change=_to_float(quote["09. change"]),
            change_percent=_to_float(quote["10. change percent"]),
            previous_close=_to_float(quote["08. previous close"]),
            last_updated=now(),
        )
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Incomplete quote payload for %s: %s", symbol, exc)
        raise NotFound(f"Stock data not found for symbol: {symbol}") from exc
    return schema.model_dump(mode="json", by_alias=True)


def parse_daily_series(payload: dict[str, Any], symbol: str, *, limit: int = 30) -> dict[str, Any]:
    """Convert the date-keyed daily series into newest-first bars, truncated to ``limit``."""

    series = payload.get("Time Series (Daily)")
    if not series:
        raise NotFound(f"No historical data found for symbol: {symbol}")
    bars: list[DailyBarSchema] = []
    for day_str, values in series.items():
        try:
            day = datetime.strptime(day_str, "%Y-%m-%d").date()
            bars.append(
                DailyBarSchema(
                    date=day,
                    open=float(values["1. open"]),
                    high=float(values["2. high"]),
                    low=float(values["3. low"]),
                    close=float(values["4. close"]),
                    volume=int(float(values["5. volume"])),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.debug("Skipping malformed bar %s for %s: %s", day_str, symbol, exc)
            continue
    if not bars:
        raise NotFound(f"No historical data found for symbol: {symbol}")
    bars.sort(key=lambda bar: bar.date, reverse=True)
    response = HistoryResponse(symbol=symbol, data=bars[:limit])
    return response.model_dump(mode="json")


def parse_search_matches(payload: dict[str, Any]) -> dict[str, Any]:
    """Project ``bestMatches`` into search results; no matches is an empty list."""

    matches = payload.get("bestMatches") or []
    results: list[SearchMatchSchema] = []
    for match in matches:
        if not isinstance(match, dict):
            continue
        symbol = match.get("1. symbol")
        if not symbol:
            logger.warning("Skipping match with empty symbol")
            continue
        results.append(
            SearchMatchSchema(
                symbol=symbol,
                name=match.get("2. name") or symbol,
                type=match.get("3. type"),
                region=match.get("4. region"),
                currency=match.get("8. currency"),
            )
        )
    return SearchResponse(results=results).model_dump(mode="json")


__all__ = ["parse_daily_series", "parse_global_quote", "parse_search_matches"]
