"""Top-N rankings over a list of stock records."""

from __future__ import annotations

import math
from typing import Any

DEFAULT_LIMIT: int = 10


def _has(v: Any) -> bool:
    return isinstance(v, (int, float)) and math.isfinite(v)


def _lowest_positive(records: list[dict[str, Any]], key: str, limit: int) -> list[dict[str, Any]]:
    eligible = [r for r in records if _has(r.get(key)) and r[key] > 0]
    return sorted(eligible, key=lambda r: r[key])[:limit]


def _highest(records: list[dict[str, Any]], key: str, limit: int) -> list[dict[str, Any]]:
    eligible = [r for r in records if _has(r.get(key))]
    return sorted(eligible, key=lambda r: r[key], reverse=True)[:limit]


def build_rankings(records: list[dict[str, Any]], limit: int = DEFAULT_LIMIT) -> dict[str, Any]:
    return {
        "limit": limit,
        "per": _lowest_positive(records, "per", limit),
        "pbr": _lowest_positive(records, "pbr", limit),
        "dividend_yield": _highest(records, "dividend_yield", limit),
        "roe": _highest(records, "roe", limit),
        "value_score": _highest(records, "value_score", limit),
    }
