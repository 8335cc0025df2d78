"""
Value score: a 0-13 "cheap and sound" heuristic over a stock record.

  PER            < 10 → 3   < 15 → 2   < 20 → 1
  PBR            <  1 → 3   < 1.5 → 2  <  2 → 1
  Dividend yield >= 4 → 3   >= 3 → 2   >= 2 → 1
  ROE            >= 15 → 2  >= 10 → 1
  Equity ratio   >= 50 → 2  >= 40 → 1

PER and PBR only score when positive.  A missing field scores 0.
"""

from __future__ import annotations

import math
from typing import Any

MAX_SCORE: int = 13

# (upper bound exclusive, points), checked in order
_PER_TIERS: tuple[tuple[float, int], ...] = ((10, 3), (15, 2), (20, 1))
_PBR_TIERS: tuple[tuple[float, int], ...] = ((1, 3), (1.5, 2), (2, 1))
# (lower bound inclusive, points), checked in order
_YIELD_TIERS: tuple[tuple[float, int], ...] = ((4, 3), (3, 2), (2, 1))
_ROE_TIERS: tuple[tuple[float, int], ...] = ((15, 2), (10, 1))
_EQUITY_RATIO_TIERS: tuple[tuple[float, int], ...] = ((50, 2), (40, 1))

# Score badge bands, highest first
GRADE_BANDS: tuple[tuple[int, str], ...] = ((10, "excellent"), (7, "good"), (4, "fair"))
LOWEST_GRADE: str = "low"


def _is_num(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def _score_below(v: Any, tiers: tuple[tuple[float, int], ...]) -> int:
    if not _is_num(v) or v <= 0:
        return 0
    for bound, points in tiers:
        if v < bound:
            return points
    return 0


def _score_at_least(v: Any, tiers: tuple[tuple[float, int], ...]) -> int:
    if not _is_num(v):
        return 0
    for bound, points in tiers:
        if v >= bound:
            return points
    return 0


def compute_value_score(record: dict[str, Any]) -> int:
    return (
        _score_below(record.get("per"), _PER_TIERS)
        + _score_below(record.get("pbr"), _PBR_TIERS)
        + _score_at_least(record.get("dividend_yield"), _YIELD_TIERS)
        + _score_at_least(record.get("roe"), _ROE_TIERS)
        + _score_at_least(record.get("equity_ratio"), _EQUITY_RATIO_TIERS)
    )


def score_grade(score: int) -> str:
    for floor, label in GRADE_BANDS:
        if score >= floor:
            return label
    return LOWEST_GRADE
