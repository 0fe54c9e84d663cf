"""Dashboard session state: watch-list, search box, view toggles and timers."""

from __future__ import annotations

import logging
from typing import Callable, Literal, Optional

from quoteboard.client.proxy_client import ProxyClient, ProxyRequestError
from quoteboard.client.queue import BatchResult, RequestQueue
from quoteboard.client.scheduler import ScheduledHandle, Scheduler
from quoteboard.client.watchlist import Watchlist
from quoteboard.config import ClientSettings
from quoteboard.schemas import DailyBarSchema, QuoteSchema, SearchMatchSchema

logger = logging.getLogger(__name__)

View = Literal["table", "chart"]
ChartType = Literal["price", "change", "historical"]


class DashboardSession:
    """One browser-tab equivalent: owns the queue, watch-list and timers."""

    def __init__(
        self,
        proxy: ProxyClient,
        scheduler: Scheduler,
        settings: ClientSettings,
        *,
        on_update: Callable[["DashboardSession"], None] | None = None,
    ) -> None:
        self.proxy = proxy
        self.settings = settings
        self._scheduler = scheduler
        self._on_update = on_update
        self.watchlist = Watchlist()
        self.queue = RequestQueue(
            proxy.fetch_quote,
            scheduler,
            self.watchlist,
            batch_size=settings.batch_size,
            cooldown_seconds=settings.cooldown_seconds,
            call_budget=settings.daily_call_budget,
            on_batch=self._handle_batch,
        )
        self.search_query = ""
        self.search_symbol = ""
        self.suggestions: list[SearchMatchSchema] = []
        self.is_searching = False
        self.view: View = "table"
        self.chart_type: ChartType = "price"
        self.chart_symbol: Optional[str] = None
        self.history: list[DailyBarSchema] = []
        self._refresh_timer: ScheduledHandle | None = None
        self._debounce_timer: ScheduledHandle | None = None
        self._history_timer: ScheduledHandle | None = None

    # state

    @property
    def error(self) -> Optional[str]:
        return self.queue.error

    @property
    def loading(self) -> bool:
        return self.queue.in_flight

    @property
    def remaining_calls(self) -> int:
        return self.queue.remaining_calls

    def visible_quotes(self) -> list[QuoteSchema]:
        quotes = self.watchlist.quotes()
        if not self.search_symbol:
            return quotes
        return [quote for quote in quotes if self.search_symbol in quote.symbol]

    # lifecycle

    def start(self) -> None:
        """Load the default watch-list now and every refresh interval."""

        self.refresh_all()
        self._refresh_timer = self._scheduler.call_every(
            self.settings.refresh_interval_seconds, self._periodic_refresh
        )

    async def _periodic_refresh(self) -> None:
        self.refresh_all()

    def refresh_all(self) -> None:
        self.queue.error = None
        self.queue.clear()
        symbols = list(self.settings.default_symbols)
        if self.search_symbol:
            symbols.append(self.search_symbol)
        logger.info("Full refresh of %d symbols", len(symbols))
        self.queue.enqueue(symbols)

    async def close(self) -> None:
        for handle in (self._refresh_timer, self._debounce_timer, self._history_timer):
            if handle is not None:
                handle.cancel()
        self._refresh_timer = None
        self._debounce_timer = None
        self._history_timer = None
        self.queue.close()
        await self.proxy.aclose()

    # search box

    def set_search_query(self, text: str) -> None:
        """Update the search box; suggestions load after the debounce delay."""

        self.search_query = text
        if self._debounce_timer is not None:
            self._debounce_timer.cancel()
        self._debounce_timer = self._scheduler.call_later(
            self.settings.search_debounce_seconds, self._run_suggestions
        )

    async def _run_suggestions(self) -> None:
        self._debounce_timer = None
        await self.load_suggestions(self.search_query)

    async def load_suggestions(self, query: str) -> list[SearchMatchSchema]:
        cleaned = query.strip()
        if len(cleaned) < self.settings.search_min_length:
            self.suggestions = []
            return self.suggestions
        self.is_searching = True
        try:
            self.suggestions = await self.proxy.search_symbols(cleaned)
        except ProxyRequestError as exc:
            logger.error("Error searching symbols: %s", exc)
        finally:
            self.is_searching = False
        self._notify()
        return self.suggestions

    def submit_search(self) -> None:
        cleaned = self.search_query.strip()
        if not cleaned:
            return
        self.search_symbol = cleaned.upper()
        self.suggestions = []
        self.queue.enqueue([self.search_symbol])

    def select_suggestion(self, symbol: str) -> None:
        self.search_query = symbol
        self.suggestions = []

    # views

    def toggle_view(self) -> View:
        self.view = "chart" if self.view == "table" else "table"
        return self.view

    def set_chart_type(self, chart_type: ChartType) -> None:
        self.chart_type = chart_type
        if chart_type == "historical":
            self._schedule_history()

    def select_chart_symbol(self, symbol: str) -> None:
        self.chart_symbol = symbol.upper()
        if self.chart_type == "historical":
            self._schedule_history()

    def _schedule_history(self) -> None:
        if self._history_timer is not None:
            self._history_timer.cancel()
        self._history_timer = self._scheduler.call_soon(self._run_history)

    async def _run_history(self) -> None:
        self._history_timer = None
        await self.load_history()

    def default_chart_symbol(self) -> Optional[str]:
        if self.chart_symbol:
            return self.chart_symbol
        quotes = self.visible_quotes()
        return quotes[0].symbol if quotes else None

    async def load_history(self, symbol: Optional[str] = None) -> list[DailyBarSchema]:
        target = symbol or self.default_chart_symbol()
        if not target:
            self.history = []
            return self.history
        try:
            response = await self.proxy.fetch_history(target)
            self.history = response.data
        except ProxyRequestError as exc:
            logger.error("Error fetching historical data for %s: %s", target, exc)
            self.history = []
        self._notify()
        return self.history

    # internals

    def _handle_batch(self, result: BatchResult) -> None:
        if self.chart_symbol is None and self.chart_type == "historical":
            first = self.default_chart_symbol()
            if first is not None:
                self.select_chart_symbol(first)
        self._notify()

    def _notify(self) -> None:
        if self._on_update is not None:
            self._on_update(self)


__all__ = ["ChartType", "DashboardSession", "View"]
