"""
J-Quants data normalizers.

Maps the upstream schema (opaque PascalCase abbreviations) onto the
screener's own field names.

Master (/equities/master):
  Code   → code (5-char internal code, truncated to its 4-char root)
  CoName → name
  S33Nm  → sector (defaults to UNKNOWN_SECTOR)
  Mkt    → market_code, MktNm → market

Daily bars (/equities/bars/daily):
  price = AdjC, else C

Financial summary (/fins/summary), ordered priority per field:
  eps          = FEPS → EPS
  bps          = BPS
  dividend     = FDivAnn → DivAnn
  shares       = ShOutFY
  equity       = Eq
  total_assets = TA
  net_income   = FNI → NI

A candidate counts only if it parses to a finite, non-zero number.  Upstream
sends "" for undisclosed values, and a literal 0 in these fields means
"not reported", so both fall through to the next candidate and finally to None.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

UNKNOWN_SECTOR: str = "不明"


# ---------------------------------------------------------------------------
# Numeric helpers
# ---------------------------------------------------------------------------

def num_or_null(v: Any) -> float | None:
    """Return float if v is a valid finite number (or numeric string), else None."""
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, str) and not v.strip():
        return None
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    if math.isnan(f) or math.isinf(f):
        return None
    return f


def _nonzero_or_null(v: Any) -> float | None:
    f = num_or_null(v)
    return f if f else None


# ---------------------------------------------------------------------------
# Fallback field resolution
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldSpec:
    field: str
    sources: tuple[str, ...]
    description: str = ""


FINANCIAL_FIELDS: dict[str, FieldSpec] = {
    "eps": FieldSpec("eps", ("FEPS", "EPS"), "Forecast EPS, else actual EPS."),
    "bps": FieldSpec("bps", ("BPS",), "Book value per share."),
    "dividend": FieldSpec("dividend", ("FDivAnn", "DivAnn"), "Forecast annual dividend, else actual."),
    "shares": FieldSpec("shares", ("ShOutFY",), "Shares outstanding at fiscal year end."),
    "equity": FieldSpec("equity", ("Eq",), "Shareholders' equity."),
    "total_assets": FieldSpec("total_assets", ("TA",), "Total assets."),
    "net_income": FieldSpec("net_income", ("FNI", "NI"), "Forecast net income, else actual."),
}


def resolve_field(record: dict[str, Any], spec: FieldSpec) -> float | None:
    """Return the first usable source value for ``spec``, in priority order."""
    for key in spec.sources:
        v = _nonzero_or_null(record.get(key))
        if v is not None:
            return v
    return None


def resolve_financials(record: dict[str, Any] | None) -> dict[str, float | None]:
    """Resolve every FINANCIAL_FIELDS entry from one summary row (or none)."""
    record = record or {}
    return {name: resolve_field(record, spec) for name, spec in FINANCIAL_FIELDS.items()}


# ---------------------------------------------------------------------------
# Master / price rows
# ---------------------------------------------------------------------------

def normalize_code(code: Any) -> str:
    """Truncate an upstream symbol code ("72030") to its 4-char root ("7203")."""
    return str(code or "")[:4]


def normalize_master(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "upstream_code": str(row.get("Code") or ""),
        "code": normalize_code(row.get("Code")),
        "name": row.get("CoName") or "",
        "sector": row.get("S33Nm") or UNKNOWN_SECTOR,
        "market_code": row.get("Mkt") or "",
        "market": row.get("MktNm") or "",
    }


def select_price(row: dict[str, Any]) -> float | None:
    """Adjusted close, falling back to the raw close."""
    return _nonzero_or_null(row.get("AdjC")) or _nonzero_or_null(row.get("C"))


def build_price_map(rows: list[dict[str, Any]]) -> dict[str, float | None]:
    """Index daily-bar rows by upstream code → selected price."""
    prices: dict[str, float | None] = {}
    for row in rows:
        code = row.get("Code")
        if code:
            prices[str(code)] = select_price(row)
    return prices
