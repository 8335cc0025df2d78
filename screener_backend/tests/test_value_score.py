import pytest
from screener_backend.services.value_score import MAX_SCORE, compute_value_score, score_grade


def _rec(**kw):
    base = {"per": None, "pbr": None, "dividend_yield": None, "roe": None, "equity_ratio": None}
    base.update(kw)
    return base


def test_empty_record_scores_zero():
    assert compute_value_score(_rec()) == 0


def test_best_case_scores_max():
    rec = _rec(per=5.0, pbr=0.5, dividend_yield=5.0, roe=20.0, equity_ratio=60.0)
    assert compute_value_score(rec) == MAX_SCORE == 13


@pytest.mark.parametrize("per,points", [(25.0, 0), (19.9, 1), (14.9, 2), (9.9, 3), (20.0, 0), (10.0, 2)])
def test_per_tiers(per, points):
    assert compute_value_score(_rec(per=per)) == points


@pytest.mark.parametrize("pbr,points", [(2.5, 0), (1.9, 1), (1.4, 2), (0.9, 3), (1.0, 2)])
def test_pbr_tiers(pbr, points):
    assert compute_value_score(_rec(pbr=pbr)) == points


@pytest.mark.parametrize("dy,points", [(1.9, 0), (2.0, 1), (3.0, 2), (4.0, 3)])
def test_dividend_yield_tiers(dy, points):
    assert compute_value_score(_rec(dividend_yield=dy)) == points


@pytest.mark.parametrize("roe,points", [(9.9, 0), (10.0, 1), (15.0, 2)])
def test_roe_tiers(roe, points):
    assert compute_value_score(_rec(roe=roe)) == points


@pytest.mark.parametrize("er,points", [(39.9, 0), (40.0, 1), (50.0, 2)])
def test_equity_ratio_tiers(er, points):
    assert compute_value_score(_rec(equity_ratio=er)) == points


def test_non_positive_per_and_pbr_score_zero():
    assert compute_value_score(_rec(per=0.0, pbr=0.0)) == 0
    assert compute_value_score(_rec(per=-3.0, pbr=-0.5)) == 0


def test_score_monotone_as_per_decreases():
    scores = [compute_value_score(_rec(per=p)) for p in (30, 19, 14, 9)]
    assert scores == sorted(scores)


@pytest.mark.parametrize("score,grade", [(13, "excellent"), (10, "excellent"), (7, "good"),
                                         (4, "fair"), (3, "low"), (0, "low")])
def test_score_grade(score, grade):
    assert score_grade(score) == grade
