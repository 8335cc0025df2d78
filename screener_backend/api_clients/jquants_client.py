"""
J-Quants API client.

Thin authenticated wrapper over the v2 REST endpoints used by the screener:

  GET /equities/master                       → listed securities
  GET /equities/bars/daily?date=YYYYMMDD     → all symbols, one trading day
  GET /equities/bars/daily?code=&from=&to=   → one symbol, date range
  GET /fins/summary?code=                    → financial summaries per period

Every request carries the ``x-api-key`` header.  No retry happens here:
callers decide how to react to a failed call (the financial fetcher cools
down on 429, the price resolver skips the day, the screening endpoint
surfaces a 500).
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

API_KEY_HEADER: str = "x-api-key"

MASTER_PATH: str = "/equities/master"
DAILY_BARS_PATH: str = "/equities/bars/daily"
FIN_SUMMARY_PATH: str = "/fins/summary"


class UpstreamError(RuntimeError):
    """Failed upstream call.  ``status`` is None for transport failures."""

    def __init__(self, message: str, status: int | None = None, path: str = ""):
        super().__init__(message)
        self.status = status
        self.path = path

    @property
    def is_rate_limited(self) -> bool:
        return self.status == 429


class MissingCredentialError(RuntimeError):
    pass


class JQuantsClient:
    """
    Issues GETs against the J-Quants API through a caller-owned
    ``httpx.AsyncClient`` and returns the ``data`` array of each response.
    """

    def __init__(self, http: httpx.AsyncClient, api_key: str, base_url: str = ""):
        if not api_key:
            raise MissingCredentialError("JQUANTS_API_KEY environment variable is not set")
        self._http = http
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    async def get(self, path: str, params: dict[str, str] | None = None) -> list[dict[str, Any]]:
        url = f"{self._base_url}{path}"
        try:
            resp = await self._http.get(
                url,
                params=params or {},
                headers={API_KEY_HEADER: self._api_key},
            )
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Request to {path} failed: {exc}", path=path) from exc

        if not resp.is_success:
            logger.debug("[JQuants] %s params=%s status=%d", path, params, resp.status_code)
            raise UpstreamError(
                f"HTTP {resp.status_code}: {resp.reason_phrase} ({path})",
                status=resp.status_code,
                path=path,
            )

        try:
            body = resp.json()
        except ValueError as exc:
            raise UpstreamError(
                f"Non-JSON response from {path}", status=resp.status_code, path=path
            ) from exc

        data = body.get("data") if isinstance(body, dict) else None
        return data if isinstance(data, list) else []

    async def fetch_master(self) -> list[dict[str, Any]]:
        return await self.get(MASTER_PATH)

    async def fetch_daily_bars(self, date_str: str) -> list[dict[str, Any]]:
        """Daily bars for every symbol on one date (YYYYMMDD)."""
        return await self.get(DAILY_BARS_PATH, {"date": date_str})

    async def fetch_daily_bars_range(
        self, code: str, from_str: str, to_str: str
    ) -> list[dict[str, Any]]:
        """Daily bars for one symbol between two dates (YYYYMMDD, inclusive)."""
        return await self.get(DAILY_BARS_PATH, {"code": code, "from": from_str, "to": to_str})

    async def fetch_fin_summary(self, code: str) -> list[dict[str, Any]]:
        return await self.get(FIN_SUMMARY_PATH, {"code": code})
