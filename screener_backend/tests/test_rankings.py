from screener_backend.services.rankings import build_rankings

_RECORDS = [
    {"code": "A", "per": 8.0, "pbr": 0.8, "dividend_yield": None, "roe": 12.0, "value_score": 7},
    {"code": "B", "per": -4.0, "pbr": 1.2, "dividend_yield": 3.5, "roe": 20.0, "value_score": 9},
    {"code": "C", "per": None, "pbr": None, "dividend_yield": 1.0, "roe": None, "value_score": 0},
    {"code": "D", "per": 15.0, "pbr": 0.0, "dividend_yield": 4.2, "roe": 5.0, "value_score": 4},
]


def _codes(rows):
    return [r["code"] for r in rows]


def test_lowest_positive_per_and_pbr():
    out = build_rankings(_RECORDS)
    assert _codes(out["per"]) == ["A", "D"]
    assert _codes(out["pbr"]) == ["A", "B"]


def test_highest_yield_roe_and_score():
    out = build_rankings(_RECORDS)
    assert _codes(out["dividend_yield"]) == ["D", "B", "C"]
    assert _codes(out["roe"]) == ["B", "A", "D"]
    assert _codes(out["value_score"]) == ["B", "A", "D", "C"]


def test_limit():
    out = build_rankings(_RECORDS, limit=1)
    assert out["limit"] == 1
    assert all(len(out[k]) <= 1 for k in ("per", "pbr", "dividend_yield", "roe", "value_score"))
