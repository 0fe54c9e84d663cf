"""CLI dashboard that polls the proxy and prints the watch-list."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Optional

from quoteboard.client import AsyncioScheduler, DashboardSession, ProxyClient, ProxyRequestError
from quoteboard.client.render import render_session
from quoteboard.config import ClientSettings, get_client_settings
from quoteboard.core.logging import setup_logging


def _settings(base_url: str | None, symbols: list[str]) -> ClientSettings:
    settings = get_client_settings()
    overrides: dict[str, object] = {}
    if base_url:
        overrides["proxy_base_url"] = base_url
    if symbols:
        overrides["default_symbols"] = [symbol.upper() for symbol in symbols]
    if overrides:
        settings = settings.model_copy(update=overrides)
    return settings


async def _check_key(settings: ClientSettings) -> None:
    proxy = ProxyClient(settings.proxy_base_url, timeout_seconds=settings.request_timeout_seconds)
    try:
        result = await proxy.check_api_key()
        print(f"{result.get('message')}: {result.get('sample')}")
    except ProxyRequestError as exc:
        print(f"API key check failed ({exc.status_code}): {exc.message}")
    finally:
        await proxy.aclose()


async def _run(
    settings: ClientSettings,
    *,
    search: Optional[str],
    once: bool,
    chart_type: Optional[str],
    chart_symbol: Optional[str],
) -> None:
    proxy = ProxyClient(settings.proxy_base_url, timeout_seconds=settings.request_timeout_seconds)
    scheduler = AsyncioScheduler()
    done = asyncio.Event()

    def _print(session: DashboardSession) -> None:
        print(render_session(session), flush=True)
        if once and not session.queue.pending and not session.queue.is_draining:
            done.set()

    session = DashboardSession(proxy, scheduler, settings, on_update=_print)
    if chart_type:
        session.toggle_view()
        session.set_chart_type(chart_type)  # type: ignore[arg-type]
    if chart_symbol:
        session.select_chart_symbol(chart_symbol)
    if search:
        session.search_query = search
        session.submit_search()
    session.start()
    try:
        await done.wait()
        await scheduler.wait_idle()
    finally:
        await session.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Watch stock quotes through the Quoteboard proxy")
    parser.add_argument("--base-url", default=None, help="Proxy base URL")
    parser.add_argument("--symbols", nargs="*", default=[], help="Override the default watch-list")
    parser.add_argument("--search", default=None, help="Also track this symbol")
    parser.add_argument(
        "--chart",
        dest="chart_type",
        nargs="?",
        const="price",
        choices=["price", "change", "historical"],
        default=None,
        help="Start in chart view with the given chart type",
    )
    parser.add_argument("--chart-symbol", default=None, help="Symbol for the historical chart")
    parser.add_argument("--once", action="store_true", help="Exit after the queue drains")
    parser.add_argument("--check-key", action="store_true", help="Verify the proxy's API key and exit")
    args = parser.parse_args()
    setup_logging(logging.WARNING)
    settings = _settings(args.base_url, args.symbols)
    try:
        if args.check_key:
            asyncio.run(_check_key(settings))
            return
        asyncio.run(
            _run(
                settings,
                search=args.search,
                once=args.once,
                chart_type=args.chart_type,
                chart_symbol=args.chart_symbol,
            )
        )
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
