"""Plain-text rendering of the dashboard for terminal use."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

import pandas as pd

from quoteboard.client.dashboard import DashboardSession
from quoteboard.schemas import DailyBarSchema, QuoteSchema

_TABLE_COLUMNS = ["Symbol", "Price", "Change", "Change %", "Previous Close"]
_BAR_WIDTH = 40


def quotes_frame(quotes: Sequence[QuoteSchema]) -> pd.DataFrame:
    rows = [
        {
            "Symbol": quote.symbol,
            "Price": quote.price,
            "Change": quote.change,
            "Change %": quote.change_percent,
            "Previous Close": quote.previous_close,
        }
        for quote in quotes
    ]
    return pd.DataFrame(rows, columns=_TABLE_COLUMNS)


def history_frame(bars: Sequence[DailyBarSchema]) -> pd.DataFrame:
    """Bars as a frame indexed by date, oldest first for plotting."""

    if not bars:
        return pd.DataFrame(columns=["open", "high", "low", "close", "volume"])
    df = pd.DataFrame([bar.model_dump() for bar in bars]).set_index("date").sort_index()
    df.index = pd.to_datetime(df.index)
    return df


def chart_series(session: DashboardSession) -> pd.Series:
    quotes = session.visible_quotes()
    if session.chart_type == "historical":
        frame = history_frame(session.history)
        return frame["close"] if not frame.empty else pd.Series(dtype=float)
    if session.chart_type == "change":
        return pd.Series({quote.symbol: quote.change_percent for quote in quotes}, dtype=float)
    return pd.Series({quote.symbol: quote.price for quote in quotes}, dtype=float)


def render_table(quotes: Sequence[QuoteSchema]) -> str:
    if not quotes:
        return "No stocks found."
    df = quotes_frame(quotes)
    formatters = {
        "Price": "${:,.2f}".format,
        "Change": "{:+,.2f}".format,
        "Change %": "{:+.2f}%".format,
        "Previous Close": "${:,.2f}".format,
    }
    return df.to_string(index=False, formatters=formatters)


def render_chart(series: pd.Series, *, width: int = _BAR_WIDTH) -> str:
    if series.empty:
        return "No data available to display in chart."
    peak = float(series.abs().max()) or 1.0
    lines = []
    for label, value in series.items():
        if isinstance(label, (pd.Timestamp, datetime)):
            label = label.strftime("%Y-%m-%d")
        length = int(round(abs(float(value)) / peak * width))
        bar = ("#" if value >= 0 else "-") * length
        lines.append(f"{str(label):>10} | {bar} {float(value):,.2f}")
    return "\n".join(lines)


def render_session(session: DashboardSession) -> str:
    parts = [f"Stock Dashboard  (last updated: {datetime.now():%Y-%m-%d %H:%M:%S})"]
    if session.error:
        parts.append(f"Error: {session.error}")
    if session.loading:
        parts.append("Loading...")
    elif session.view == "chart":
        parts.append(f"[{session.chart_type}]")
        parts.append(render_chart(chart_series(session)))
    else:
        parts.append(render_table(session.visible_quotes()))
    parts.append(
        f"API calls remaining today: {session.remaining_calls}/{session.queue.call_budget}"
    )
    return "\n".join(parts)


__all__ = [
    "chart_series",
    "history_frame",
    "quotes_frame",
    "render_chart",
    "render_session",
    "render_table",
]
