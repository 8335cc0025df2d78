"""
Chart data shapers for the stock detail view.

Both series are fetched live for one symbol and never cached.

Price series:
  period label → lookback days (unknown label → 1M / 30 days)
  window = [today - days, today], bars sorted ascending by date string
  adjustedClose = AdjC, else C

Financial series:
  rows with a fiscal-year label (FY), ascending by label, last 5 kept.
  Missing amounts are zero-filled for plotting:
    revenue = Sales, operatingIncome = OI, ordinaryIncome = RP, netIncome = NI
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any

from screener_backend.api_clients.jquants_client import JQuantsClient
from screener_backend.normalizers.jquants_normalizer import num_or_null
from screener_backend.services.price_resolver import to_yyyymmdd

logger = logging.getLogger(__name__)

PERIOD_DAYS: dict[str, int] = {
    "1D": 1,
    "1W": 7,
    "1M": 30,
    "3M": 90,
    "6M": 180,
    "1Y": 365,
    "3Y": 1095,
    "5Y": 1825,
}
DEFAULT_PERIOD: str = "1M"
FINANCIAL_TREND_YEARS: int = 5


def resolve_period(period: str | None) -> str:
    return period if period in PERIOD_DAYS else DEFAULT_PERIOD


def period_window(period: str | None, today: date | None = None) -> tuple[date, date]:
    """(start, end) dates of the query window for a period label."""
    end = today or date.today()
    return end - timedelta(days=PERIOD_DAYS[resolve_period(period)]), end


# ---------------------------------------------------------------------------
# Shaping
# ---------------------------------------------------------------------------

def shape_price_series(bars: list[dict[str, Any]]) -> list[dict[str, Any]]:
    points = [
        {
            "date": str(bar.get("Date") or ""),
            "open": num_or_null(bar.get("O")),
            "high": num_or_null(bar.get("H")),
            "low": num_or_null(bar.get("L")),
            "close": num_or_null(bar.get("C")),
            "volume": num_or_null(bar.get("V")),
            "adjusted_close": num_or_null(bar.get("AdjC")) or num_or_null(bar.get("C")),
        }
        for bar in bars
    ]
    return sorted(points, key=lambda p: p["date"])


def _zero_fill(v: Any) -> float:
    return num_or_null(v) or 0.0


def shape_financial_series(
    rows: list[dict[str, Any]],
    years: int = FINANCIAL_TREND_YEARS,
) -> list[dict[str, Any]]:
    labelled = sorted((r for r in rows if r.get("FY")), key=lambda r: str(r["FY"]))
    return [
        {
            "fiscal_year": str(r["FY"]),
            "revenue": _zero_fill(r.get("Sales")),
            "operating_income": _zero_fill(r.get("OI")),
            "ordinary_income": _zero_fill(r.get("RP")),
            "net_income": _zero_fill(r.get("NI")),
        }
        for r in labelled[-years:]
    ]


# ---------------------------------------------------------------------------
# Live fetch + shape
# ---------------------------------------------------------------------------

async def fetch_price_chart(
    client: JQuantsClient,
    code: str,
    period: str | None,
    today: date | None = None,
) -> list[dict[str, Any]]:
    start, end = period_window(period, today)
    from_str, to_str = to_yyyymmdd(start), to_yyyymmdd(end)
    logger.info("[Chart] %s %s: %s ~ %s", code, resolve_period(period), from_str, to_str)
    bars = await client.fetch_daily_bars_range(code, from_str, to_str)
    points = shape_price_series(bars)
    logger.info("[Chart] %s: %d points", code, len(points))
    return points


async def fetch_financial_trend(client: JQuantsClient, code: str) -> list[dict[str, Any]]:
    rows = await client.fetch_fin_summary(code)
    series = shape_financial_series(rows)
    logger.info("[Chart] %s: %d fiscal years", code, len(series))
    return series
