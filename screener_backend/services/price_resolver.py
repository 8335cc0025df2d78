"""
Latest trading-day price resolution.

Walks back from today one calendar day at a time (offsets 1..lookback) and
returns the daily bars of the first date that has any.  Weekends and
holidays simply come back empty; a failed lookup is logged and treated the
same way.  If the whole window is empty the result is [] and every symbol
gets a null price for that cycle.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any

from screener_backend.api_clients.jquants_client import JQuantsClient, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_DAYS: int = 5


def to_yyyymmdd(d: date) -> str:
    return d.strftime("%Y%m%d")


async def resolve_latest_bars(
    client: JQuantsClient,
    today: date | None = None,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
) -> list[dict[str, Any]]:
    today = today or date.today()

    for offset in range(1, lookback_days + 1):
        date_str = to_yyyymmdd(today - timedelta(days=offset))
        try:
            bars = await client.fetch_daily_bars(date_str)
        except UpstreamError as exc:
            logger.warning("[Prices] lookup for %s failed (status=%s): %s", date_str, exc.status, exc)
            continue
        if bars:
            logger.info("[Prices] %d bars for %s", len(bars), date_str)
            return bars
        logger.debug("[Prices] no bars for %s", date_str)

    logger.warning("[Prices] no trading data in the last %d days", lookback_days)
    return []
