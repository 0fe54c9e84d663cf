from __future__ import annotations

from typing import Iterator

from quoteboard.schemas import QuoteSchema


class Watchlist:
    """Latest quote per symbol.

    Upserts overwrite by symbol. Iteration follows first-insertion order, so the
    table keeps a stable row order across refreshes.
    """

    def __init__(self) -> None:
        self._quotes: dict[str, QuoteSchema] = {}

    def upsert(self, quote: QuoteSchema) -> None:
        self._quotes[quote.symbol.upper()] = quote

    def get(self, symbol: str) -> QuoteSchema | None:
        return self._quotes.get(symbol.upper())

    def symbols(self) -> list[str]:
        return list(self._quotes)

    def quotes(self) -> list[QuoteSchema]:
        return list(self._quotes.values())

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and symbol.upper() in self._quotes

    def __iter__(self) -> Iterator[QuoteSchema]:
        return iter(self.quotes())

    def __len__(self) -> int:
        return len(self._quotes)


__all__ = ["Watchlist"]
