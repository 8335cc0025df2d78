"""
Per-symbol financial summary fetcher.

Requests run strictly one after another through a RequestPacer, which
enforces a minimum interval between request starts (100 ms by default).
This sequential loop is what keeps the screener under the upstream rate
limit; do not fan it out.

Failure policy per symbol:
  429         → sleep the cooldown (2 s), move on without retrying the symbol
  other error → log, move on
Symbols that fail have no financial data for this cycle.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from screener_backend.api_clients.jquants_client import JQuantsClient, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_SYMBOL_CAP: int = 30
DEFAULT_INTERVAL_S: float = 0.1
DEFAULT_COOLDOWN_S: float = 2.0

SleepFn = Callable[[float], Awaitable[None]]


class RequestPacer:
    """Spaces successive requests at least ``interval_s`` apart."""

    def __init__(
        self,
        interval_s: float = DEFAULT_INTERVAL_S,
        sleep: SleepFn = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.interval_s = interval_s
        self._sleep = sleep
        self._clock = clock
        self._last_request: float | None = None

    async def wait(self) -> None:
        if self._last_request is not None:
            lag = self._clock() - self._last_request
            if lag < self.interval_s:
                await self._sleep(self.interval_s - lag)
        self._last_request = self._clock()

    async def cooldown(self, seconds: float) -> None:
        await self._sleep(seconds)


async def fetch_latest_financials(
    client: JQuantsClient,
    codes: list[str],
    cap: int = DEFAULT_SYMBOL_CAP,
    pacer: RequestPacer | None = None,
    cooldown_s: float = DEFAULT_COOLDOWN_S,
) -> dict[str, dict[str, Any]]:
    """
    Return {upstream_code: latest summary row} for the first ``cap`` codes.
    "Latest" is the last row of the series as returned upstream.
    """
    pacer = pacer or RequestPacer()
    targets = codes[:cap]
    logger.info("[Financials] fetching summaries for %d symbols", len(targets))

    latest: dict[str, dict[str, Any]] = {}
    for code in targets:
        await pacer.wait()
        try:
            rows = await client.fetch_fin_summary(code)
        except UpstreamError as exc:
            if exc.is_rate_limited:
                logger.warning("[Financials][429] rate limited on %s, cooling down %.1fs", code, cooldown_s)
                await pacer.cooldown(cooldown_s)
            else:
                logger.warning("[Financials] %s skipped: %s", code, exc)
            continue
        if rows:
            latest[code] = rows[-1]

    logger.info("[Financials] %d/%d symbols with data", len(latest), len(targets))
    return latest
