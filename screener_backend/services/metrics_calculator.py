"""
Screening metrics calculator.

Joins one master row with its resolved price and latest financial summary
and derives the valuation / profitability set.

Key formulas:
  PER          = price / eps                        (eps > 0)
  PBR          = price / bps                        (bps > 0)
               = price / (equity / shares)          fallback when bps unusable
  Div. yield % = 100 * dividend / price             (dividend > 0)
  Market cap   = price * shares
  ROE %        = 100 * net_income / equity          (equity > 0)
  ROA %        = 100 * net_income / total_assets    (total_assets > 0)
  Equity ratio = 100 * equity / total_assets        (total_assets > 0)

Every output is a finite float or None.  A missing input never becomes 0.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from screener_backend.normalizers.jquants_normalizer import (
    normalize_master,
    resolve_financials,
)
from screener_backend.services.value_score import compute_value_score, score_grade

logger = logging.getLogger(__name__)

DEFAULT_MARKETS: tuple[str, ...] = ("0111", "0112")
DEFAULT_UNIVERSE_CAP: int = 200


# ---------------------------------------------------------------------------
# Basic numeric helpers
# ---------------------------------------------------------------------------

def _is_num(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def _finite(v: float) -> float | None:
    return v if _is_num(v) else None


def _safe_div(a: Any, b: Any) -> float | None:
    """Return a/b or None if either is non-numeric or b==0."""
    if not _is_num(a) or not _is_num(b) or b == 0:
        return None
    return _finite(a / b)


def _safe_div_pct(a: Any, b: Any) -> float | None:
    r = _safe_div(a, b)
    return _finite(r * 100) if r is not None else None


def _positive(v: Any) -> bool:
    return _is_num(v) and v > 0


# ---------------------------------------------------------------------------
# Ratios
# ---------------------------------------------------------------------------

def compute_per(price: float | None, eps: float | None) -> float | None:
    if not _positive(price) or not _positive(eps):
        return None
    return _safe_div(price, eps)


def compute_pbr(
    price: float | None,
    bps: float | None,
    equity: float | None = None,
    shares: float | None = None,
) -> float | None:
    """Direct BPS first; otherwise book value per share derived from equity / shares."""
    if not _positive(price):
        return None
    if _positive(bps):
        return _safe_div(price, bps)
    calc_bps = _safe_div(equity, shares)
    if _positive(calc_bps):
        return _safe_div(price, calc_bps)
    return None


def compute_dividend_yield(dividend: float | None, price: float | None) -> float | None:
    if not _positive(dividend) or not _positive(price):
        return None
    return _safe_div_pct(dividend, price)


def compute_market_cap(price: float | None, shares: float | None) -> float | None:
    if not _is_num(price) or not _is_num(shares):
        return None
    return _finite(price * shares)


def compute_roe(net_income: float | None, equity: float | None) -> float | None:
    if not _positive(equity):
        return None
    return _safe_div_pct(net_income, equity)


def compute_roa(net_income: float | None, total_assets: float | None) -> float | None:
    if not _positive(total_assets):
        return None
    return _safe_div_pct(net_income, total_assets)


def compute_equity_ratio(equity: float | None, total_assets: float | None) -> float | None:
    if not _positive(total_assets):
        return None
    return _safe_div_pct(equity, total_assets)


# ---------------------------------------------------------------------------
# Record derivation
# ---------------------------------------------------------------------------

def derive_stock_record(
    master: dict[str, Any],
    price: float | None,
    financial: dict[str, Any] | None,
) -> dict[str, Any]:
    """
    master:    normalized master row (see jquants_normalizer.normalize_master)
    price:     selected price for the symbol, or None
    financial: latest raw /fins/summary row, or None
    """
    price = price if _positive(price) else None
    fin = resolve_financials(financial)
    eps, bps, dividend = fin["eps"], fin["bps"], fin["dividend"]
    shares, equity = fin["shares"], fin["equity"]
    total_assets, net_income = fin["total_assets"], fin["net_income"]

    record: dict[str, Any] = {
        "code": master["code"],
        "name": master["name"],
        "sector": master["sector"],
        "market": master["market"],
        "price": price,
        "per": compute_per(price, eps),
        "pbr": compute_pbr(price, bps, equity, shares),
        "dividend_yield": compute_dividend_yield(dividend, price),
        "market_cap": compute_market_cap(price, shares),
        "roe": compute_roe(net_income, equity),
        "roa": compute_roa(net_income, total_assets),
        "equity_ratio": compute_equity_ratio(equity, total_assets),
        "eps": eps,
        "bps": bps,
        "dividend": dividend,
        "net_income": net_income,
        "equity": equity,
        "total_assets": total_assets,
        "shares": shares,
    }
    record["value_score"] = compute_value_score(record)
    record["score_grade"] = score_grade(record["value_score"])
    return record


def select_universe(
    master_rows: list[dict[str, Any]],
    markets: tuple[str, ...] = DEFAULT_MARKETS,
) -> list[dict[str, Any]]:
    """Normalized master rows restricted to the accepted market segments."""
    return [m for m in map(normalize_master, master_rows) if m["market_code"] in markets]


def build_stock_records(
    universe: list[dict[str, Any]],
    price_map: dict[str, float | None],
    financials: dict[str, dict[str, Any]],
    universe_cap: int = DEFAULT_UNIVERSE_CAP,
) -> list[dict[str, Any]]:
    """Derive one record per symbol for the first ``universe_cap`` universe entries."""
    records = [
        derive_stock_record(
            m,
            price_map.get(m["upstream_code"]),
            financials.get(m["upstream_code"]),
        )
        for m in universe[:universe_cap]
    ]
    logger.info(
        "[Screening] %d records, %d with PER",
        len(records), sum(1 for r in records if r["per"] is not None),
    )
    return records
