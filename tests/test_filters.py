from __future__ import annotations

import itertools

from deficit_core.data import DEFICIT_RECORDS, command_options
from deficit_core.filters import (
    ALL,
    CategoryFilter,
    SortDirection,
    ViewParameters,
    filter_records,
    normalize_view_params,
    parse_category,
    resolve_sub_unit,
    sub_unit_options,
)


def test_row_count_matches_location_predicates(store_frame) -> None:
    commands = [ALL] + command_options(store_frame)
    sub_units = [ALL] + sub_unit_options(store_frame, ALL)
    for cmd, sub in itertools.product(commands, sub_units):
        expected = sum(
            1
            for r in DEFICIT_RECORDS
            if (cmd == ALL or r.command_unit == cmd) and (sub == ALL or r.sub_unit == sub)
        )
        assert len(filter_records(store_frame, cmd, sub)) == expected


def test_filter_keeps_record_order(store_frame) -> None:
    out = filter_records(store_frame, "CPI", ALL)
    assert out["sub_unit"].tolist() == ["2º BPM", "3º BPM", "6º BPM", "8º BPM", "10º BPM"]


def test_sub_unit_options_are_sorted_and_scoped(store_frame) -> None:
    assert sub_unit_options(store_frame, "CPM") == sorted(["4º BPM", "7º BPM", "12º BPM"])
    assert len(sub_unit_options(store_frame, ALL)) == len(DEFICIT_RECORDS)
    assert sub_unit_options(store_frame, "missing") == []


def test_resolve_sub_unit_resets_unknown_values(store_frame) -> None:
    assert resolve_sub_unit(store_frame, "CPC", "1º BPM") == "1º BPM"
    assert resolve_sub_unit(store_frame, "CPM", "1º BPM") == ALL
    assert resolve_sub_unit(store_frame, "CPM", None) == ALL


def test_command_options_keep_first_seen_order(store_frame) -> None:
    assert command_options(store_frame) == ["CPC", "CPM", "CPI"]


def test_normalize_view_params_defaults() -> None:
    assert normalize_view_params({}) == ViewParameters()
    assert ViewParameters().sort_direction is SortDirection.DESCENDING


def test_normalize_view_params_fails_open() -> None:
    params = normalize_view_params(
        {
            "command_filter": "  ",
            "sub_unit_filter": None,
            "category_filter": "bogus",
            "sort_key": "OPM",
            "sort_direction": "sideways",
        }
    )
    assert params.command_filter == ALL
    assert params.sub_unit_filter == ALL
    assert params.category_filter is CategoryFilter.ALL
    assert params.sort_key == "OPM"
    assert params.sort_direction is SortDirection.ASCENDING


def test_parse_category_aliases() -> None:
    assert parse_category("tierA") is CategoryFilter.TIER_A
    assert parse_category("CAP") is CategoryFilter.TIER_A
    assert parse_category("tierb") is CategoryFilter.TIER_B
    assert parse_category("QOE") is CategoryFilter.QOE
    assert parse_category(None) is CategoryFilter.ALL
