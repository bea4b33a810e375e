from __future__ import annotations

from deficit_core.columns import CANONICAL_HEADERS, project, retained_indices
from deficit_core.filters import DEFAULT_SORT_KEY, CategoryFilter


def test_canonical_headers() -> None:
    assert len(CANONICAL_HEADERS) == 9
    assert CANONICAL_HEADERS[0] == "GRANDE COMANDO"
    assert CANONICAL_HEADERS[1] == "OPM"
    assert CANONICAL_HEADERS[-1] == DEFAULT_SORT_KEY


def test_all_keeps_every_column() -> None:
    assert retained_indices(CategoryFilter.ALL) == tuple(range(9))


def test_tier_a_keeps_cap_columns() -> None:
    headers, _, _ = project(CANONICAL_HEADERS, [], None, CategoryFilter.TIER_A)
    assert headers == ("GRANDE COMANDO", "OPM", "DEFICIT CAP QOEM", "DEFICIT CAP QOE", "DEFICIT TOTAL")


def test_tier_b_keeps_both_ten_tiers() -> None:
    assert retained_indices(CategoryFilter.TIER_B) == (0, 1, 4, 5, 6, 7, 8)


def test_quadro_filters_match_exact_tag() -> None:
    assert retained_indices(CategoryFilter.QOEM) == (0, 1, 2, 4, 6, 8)
    assert retained_indices(CategoryFilter.QOE) == (0, 1, 3, 5, 7, 8)


def test_identity_and_total_always_retained() -> None:
    for category in CategoryFilter:
        idx = retained_indices(category)
        assert {0, 1, 8} <= set(idx)
        assert list(idx) == sorted(idx)


def test_projection_applies_to_rows_and_total() -> None:
    rows = [("A", "X", 1, 2, 3, 4, 5, 6, 21)]
    total = ("TOTAL", "", 1, 2, 3, 4, 5, 6, 21)
    headers, out_rows, out_total = project(CANONICAL_HEADERS, rows, total, CategoryFilter.TIER_A)
    assert len(headers) == 5
    assert out_rows == (("A", "X", 1, 2, 21),)
    assert out_total == ("TOTAL", "", 1, 2, 21)
