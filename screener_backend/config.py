"""
Runtime settings for the screening backend.

All tunables are read once from the environment (``.env`` is loaded by
``main.py`` before this module is consulted).  Defaults mirror the fixed
constants of the dashboard server:

  cache TTL              = 300 s
  inter-request pacing   = 100 ms
  429 cooldown           = 2 s
  financial enrichment   = first 30 symbols
  screener universe      = first 200 symbols
  price lookback         = 5 calendar days
  accepted markets       = 0111 (Prime), 0112 (Standard)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL: str = "https://api.jquants.com/v2"
DEFAULT_MARKETS: tuple[str, ...] = ("0111", "0112")


@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    cache_ttl_s: float = 300.0
    request_interval_s: float = 0.1
    rate_limit_cooldown_s: float = 2.0
    financial_cap: int = 30
    universe_cap: int = 200
    price_lookback_days: int = 5
    markets: tuple[str, ...] = DEFAULT_MARKETS
    http_timeout_s: float = 30.0


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("[Config] %s=%r is not a number, using %s", name, raw, default)
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("[Config] %s=%r is not an integer, using %s", name, raw, default)
        return default


def _env_markets(name: str) -> tuple[str, ...]:
    raw = os.environ.get(name, "")
    codes = tuple(c.strip() for c in raw.split(",") if c.strip())
    return codes or DEFAULT_MARKETS


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    return Settings(
        api_key=os.environ.get("JQUANTS_API_KEY", "").strip(),
        base_url=os.environ.get("JQUANTS_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        cache_ttl_s=_env_float("SCREENER_CACHE_TTL_S", 300.0),
        request_interval_s=_env_float("SCREENER_REQUEST_INTERVAL_S", 0.1),
        rate_limit_cooldown_s=_env_float("SCREENER_RATE_LIMIT_COOLDOWN_S", 2.0),
        financial_cap=_env_int("SCREENER_FINANCIAL_CAP", 30),
        universe_cap=_env_int("SCREENER_UNIVERSE_CAP", 200),
        price_lookback_days=_env_int("SCREENER_PRICE_LOOKBACK_DAYS", 5),
        markets=_env_markets("SCREENER_MARKETS"),
        http_timeout_s=_env_float("SCREENER_HTTP_TIMEOUT_S", 30.0),
    )
