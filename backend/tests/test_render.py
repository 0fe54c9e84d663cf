from __future__ import annotations

from datetime import date

import pandas as pd
from conftest import make_quote

from quoteboard.client.dashboard import DashboardSession
from quoteboard.client.render import (
    chart_series,
    history_frame,
    render_chart,
    render_session,
    render_table,
)
from quoteboard.config import ClientSettings
from quoteboard.schemas import DailyBarSchema


class NullProxy:
    async def fetch_quote(self, symbol: str):
        return make_quote(symbol)

    async def aclose(self) -> None:
        return None


def _bar(day: int, close: float) -> DailyBarSchema:
    return DailyBarSchema(date=date(2024, 5, day), open=close, high=close, low=close, close=close, volume=10)


def test_render_table_formats_columns():
    text = render_table([make_quote("AAPL", 190.0)])

    assert "Symbol" in text
    assert "AAPL" in text
    assert "$190.00" in text
    assert "+1.52%" in text


def test_render_table_empty():
    assert render_table([]) == "No stocks found."


def test_history_frame_is_oldest_first():
    frame = history_frame([_bar(3, 12.0), _bar(2, 11.0), _bar(1, 10.0)])

    assert list(frame["close"]) == [10.0, 11.0, 12.0]
    assert frame.index[0] == pd.Timestamp("2024-05-01")


def test_render_chart_scales_bars():
    text = render_chart(pd.Series({"AAPL": 200.0, "MSFT": 100.0}), width=10)
    lines = text.splitlines()

    assert lines[0].count("#") == 10
    assert lines[1].count("#") == 5


def test_render_chart_empty():
    assert render_chart(pd.Series(dtype=float)) == "No data available to display in chart."


def test_session_chart_series_and_footer(scheduler):
    session = DashboardSession(NullProxy(), scheduler, ClientSettings())  # type: ignore[arg-type]
    session.watchlist.upsert(make_quote("AAPL", 190.0))
    session.watchlist.upsert(make_quote("MSFT", 410.0))

    session.set_chart_type("change")
    assert list(chart_series(session).index) == ["AAPL", "MSFT"]

    session.history = [_bar(2, 11.0), _bar(1, 10.0)]
    session.set_chart_type("historical")
    assert list(chart_series(session)) == [10.0, 11.0]

    session.toggle_view()
    text = render_session(session)
    assert "[historical]" in text
    assert text.endswith("API calls remaining today: 25/25")
