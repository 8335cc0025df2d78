"""
Screening pipeline orchestrator.

Execution order for one aggregation cycle:
  1: Master list          → /equities/master, filtered to accepted markets
  2: Latest prices        → price_resolver (walk back up to N days)
  3: Financial summaries  → financial_fetcher (first K symbols, paced)
  4: Derive records       → metrics_calculator (first M universe symbols)

Master and financial failures other than 429 are not recovered here: an
upstream error from step 1 propagates to the caller.

ScreeningContext is built once at process start and owns the settings,
the single cache slot and the way upstream clients are opened.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

import httpx

from screener_backend.api_clients.jquants_client import JQuantsClient
from screener_backend.config import Settings
from screener_backend.models import ScreeningPayload, StockRecord
from screener_backend.normalizers.jquants_normalizer import build_price_map
from screener_backend.services import metrics_calculator
from screener_backend.services.financial_fetcher import RequestPacer, fetch_latest_financials
from screener_backend.services.price_resolver import resolve_latest_bars
from screener_backend.services.screening_cache import ScreeningCache

logger = logging.getLogger(__name__)


@dataclass
class ScreeningContext:
    settings: Settings
    transport: httpx.AsyncBaseTransport | None = None
    cache: ScreeningCache[ScreeningPayload] = field(init=False)

    def __post_init__(self) -> None:
        self.cache = ScreeningCache(ttl_s=self.settings.cache_ttl_s)

    @asynccontextmanager
    async def open_client(self) -> AsyncIterator[JQuantsClient]:
        async with httpx.AsyncClient(
            timeout=self.settings.http_timeout_s,
            transport=self.transport,
        ) as http:
            yield JQuantsClient(http, self.settings.api_key, self.settings.base_url)

    def new_pacer(self) -> RequestPacer:
        return RequestPacer(interval_s=self.settings.request_interval_s)

    async def get_screening(self, force: bool = False) -> ScreeningPayload:
        return await self.cache.get(self._compute, force=force)

    async def _compute(self) -> ScreeningPayload:
        async with self.open_client() as client:
            return await run_screening_pipeline(client, self.settings, pacer=self.new_pacer())


async def run_screening_pipeline(
    client: JQuantsClient,
    settings: Settings,
    today: date | None = None,
    pacer: RequestPacer | None = None,
) -> ScreeningPayload:
    logger.info("[Screening] pipeline start")

    master_rows = await client.fetch_master()
    universe = metrics_calculator.select_universe(master_rows, settings.markets)
    logger.info("[Screening] %d/%d symbols in accepted markets", len(universe), len(master_rows))

    bars = await resolve_latest_bars(client, today=today, lookback_days=settings.price_lookback_days)
    price_map = build_price_map(bars)

    targets = [m["upstream_code"] for m in universe[: settings.universe_cap]]
    financials = await fetch_latest_financials(
        client,
        targets,
        cap=settings.financial_cap,
        pacer=pacer or RequestPacer(interval_s=settings.request_interval_s),
        cooldown_s=settings.rate_limit_cooldown_s,
    )

    records = metrics_calculator.build_stock_records(
        universe, price_map, financials, universe_cap=settings.universe_cap
    )
    return ScreeningPayload(
        stocks=[StockRecord(**r) for r in records],
        total=len(universe),
        updated_at=datetime.now(timezone.utc),
    )
