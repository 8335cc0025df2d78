import asyncio
from datetime import date, timedelta

import pytest
from screener_backend.services.chart_shaper import (
    PERIOD_DAYS,
    fetch_price_chart,
    period_window,
    resolve_period,
    shape_financial_series,
    shape_price_series,
)

_TODAY = date(2024, 6, 30)


# ---------------------------------------------------------------------------
# Period mapping
# ---------------------------------------------------------------------------

def test_one_year_window_is_365_days_ending_today():
    start, end = period_window("1Y", _TODAY)
    assert end == _TODAY
    assert (end - start).days == 365


@pytest.mark.parametrize("period", [None, "", "2Y", "1m", "bogus"])
def test_unknown_period_falls_back_to_30_days(period):
    start, end = period_window(period, _TODAY)
    assert resolve_period(period) == "1M"
    assert (end - start).days == 30


def test_period_table():
    assert PERIOD_DAYS == {
        "1D": 1, "1W": 7, "1M": 30, "3M": 90, "6M": 180, "1Y": 365, "3Y": 1095, "5Y": 1825,
    }


# ---------------------------------------------------------------------------
# Price series
# ---------------------------------------------------------------------------

def test_price_series_sorted_and_mapped():
    bars = [
        {"Date": "2024-06-28", "O": 10, "H": 12, "L": 9, "C": 11, "V": 1000, "AdjC": 10.5},
        {"Date": "2024-06-27", "O": 9, "H": 10, "L": 8, "C": 9.5, "V": 800, "AdjC": None},
    ]
    points = shape_price_series(bars)
    assert [p["date"] for p in points] == ["2024-06-27", "2024-06-28"]
    assert points[0]["adjusted_close"] == 9.5
    assert points[1] == {
        "date": "2024-06-28", "open": 10.0, "high": 12.0, "low": 9.0,
        "close": 11.0, "volume": 1000.0, "adjusted_close": 10.5,
    }


def test_fetch_price_chart_queries_period_window():
    class Client:
        async def fetch_daily_bars_range(self, code, from_str, to_str):
            self.args = (code, from_str, to_str)
            return [{"Date": "2024-06-28", "C": 1}]

    client = Client()
    points = asyncio.run(fetch_price_chart(client, "7203", "1W", today=_TODAY))
    assert client.args == ("7203", "20240623", "20240630")
    assert len(points) == 1


# ---------------------------------------------------------------------------
# Financial series
# ---------------------------------------------------------------------------

def test_financial_series_keeps_last_five_ascending():
    rows = [{"FY": str(2016 + i), "Sales": str(100 * i), "NI": "5"} for i in range(8)]
    rows.reverse()
    rows.append({"FY": "", "Sales": "999"})
    series = shape_financial_series(rows)
    assert [s["fiscal_year"] for s in series] == ["2019", "2020", "2021", "2022", "2023"]
    assert series[-1]["revenue"] == 700.0


def test_financial_series_zero_fills_unparseable():
    series = shape_financial_series([{"FY": "2023", "Sales": "", "OI": None, "RP": "abc", "NI": "12"}])
    assert series == [{
        "fiscal_year": "2023", "revenue": 0.0, "operating_income": 0.0,
        "ordinary_income": 0.0, "net_income": 12.0,
    }]


def test_financial_series_fewer_than_five():
    series = shape_financial_series([{"FY": "2023"}, {"FY": "2022"}])
    assert [s["fiscal_year"] for s in series] == ["2022", "2023"]


def test_window_uses_calendar_days():
    start, _ = period_window("5Y", _TODAY)
    assert start == _TODAY - timedelta(days=1825)
