from screener_backend.normalizers.jquants_normalizer import (
    FINANCIAL_FIELDS,
    FieldSpec,
    build_price_map,
    normalize_code,
    num_or_null,
    resolve_field,
    resolve_financials,
    select_price,
)


# ---------------------------------------------------------------------------
# Numeric parsing
# ---------------------------------------------------------------------------

def test_num_or_null_parses_strings_and_numbers():
    assert num_or_null("125.5") == 125.5
    assert num_or_null(3) == 3.0
    assert num_or_null(" 42 ") == 42.0


def test_num_or_null_rejects_garbage():
    for v in (None, "", "  ", "-", "abc", "nan", "inf", True, {}):
        assert num_or_null(v) is None


# ---------------------------------------------------------------------------
# Ordered-priority resolution
# ---------------------------------------------------------------------------

def test_resolve_field_walks_sources_in_order():
    spec = FieldSpec("x", ("A", "B", "C"))
    assert resolve_field({"A": "1", "B": "2"}, spec) == 1.0
    assert resolve_field({"A": "", "B": "2"}, spec) == 2.0
    assert resolve_field({"A": "0", "B": "", "C": "3"}, spec) == 3.0
    assert resolve_field({}, spec) is None


def test_financial_field_priorities():
    assert FINANCIAL_FIELDS["eps"].sources == ("FEPS", "EPS")
    assert FINANCIAL_FIELDS["dividend"].sources == ("FDivAnn", "DivAnn")
    assert FINANCIAL_FIELDS["net_income"].sources == ("FNI", "NI")


def test_resolve_financials_handles_missing_row():
    resolved = resolve_financials(None)
    assert set(resolved) == set(FINANCIAL_FIELDS)
    assert all(v is None for v in resolved.values())


# ---------------------------------------------------------------------------
# Codes and prices
# ---------------------------------------------------------------------------

def test_normalize_code_truncates_to_root():
    assert normalize_code("72030") == "7203"
    assert normalize_code("130A0") == "130A"
    assert normalize_code(None) == ""


def test_select_price_prefers_adjusted_close():
    assert select_price({"AdjC": 2500, "C": 2600}) == 2500.0
    assert select_price({"AdjC": None, "C": 2600}) == 2600.0
    assert select_price({}) is None


def test_build_price_map_keys_by_upstream_code():
    prices = build_price_map([
        {"Code": "72030", "AdjC": 2500},
        {"Code": "67580", "C": 13000},
        {"AdjC": 1},
    ])
    assert prices == {"72030": 2500.0, "67580": 13000.0}
