from __future__ import annotations

from deficit_core.data import load_deficit_data
from deficit_core.filters import ViewParameters
from deficit_core.metrics_deficit import compute_deficit, view_to_frame
from deficit_core.view import build_view


def test_view_to_frame_appends_total(example_frame) -> None:
    df = view_to_frame(build_view(example_frame, ViewParameters()))
    assert list(df.columns)[0] == "GRANDE COMANDO"
    assert len(df) == 3
    assert df.iloc[-1].tolist() == ["TOTAL", "", 3, 2, 1, 0, 0, 0, 6]


def test_compute_deficit_options_and_empty_charts() -> None:
    ctx = load_deficit_data()
    payload = compute_deficit(ViewParameters(command_filter="nowhere"), ctx)
    assert payload["options"]["commands"] == ["CPC", "CPM", "CPI"]
    assert payload["options"]["sub_units"] == []
    assert payload["charts"] == {}
    assert payload["view"]["rows"] == []
    assert payload["view"]["total_row"] == ["TOTAL", "", 0, 0, 0, 0, 0, 0, 0]


def test_compute_deficit_chart_spec() -> None:
    payload = compute_deficit(ViewParameters(command_filter="CPC"), load_deficit_data())
    spec = payload["charts"]["deficit_by_sub_unit"]
    assert spec["mark"] in ("bar", {"type": "bar"})
