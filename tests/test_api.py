from __future__ import annotations

from fastapi.testclient import TestClient

from deficit_api.main import app

client = TestClient(app)


def test_meta_commands() -> None:
    res = client.get("/meta/commands")
    assert res.status_code == 200
    assert res.json() == {"commands": ["CPC", "CPM", "CPI"]}


def test_meta_sub_units_scoped_by_command() -> None:
    res = client.get("/meta/sub-units", params={"command_filter": "CPM"})
    assert res.status_code == 200
    assert res.json()["sub_units"] == sorted(["4º BPM", "7º BPM", "12º BPM"])


def test_deficit_payload() -> None:
    res = client.post("/deficit", json={"category_filter": "tierA"})
    assert res.status_code == 200
    body = res.json()
    assert body["filters"]["category_filter"] == "tierA"
    assert len(body["view"]["headers"]) == 5
    assert body["view"]["total_row"][0] == "TOTAL"
    assert body["view"]["summary"]["total_deficit"] == body["view"]["total_row"][-1]
    assert "deficit_by_sub_unit" in body["charts"]


def test_deficit_resets_stale_sub_unit() -> None:
    res = client.post("/deficit", json={"command_filter": "CPM", "sub_unit_filter": "1º BPM"})
    assert res.status_code == 200
    assert res.json()["filters"]["sub_unit_filter"] == "all"


def test_deficit_sort_toggles_direction() -> None:
    params = {"sort_key": "OPM", "sort_direction": "ascending"}
    res = client.post("/deficit/sort", params={"header": "OPM"}, json=params)
    assert res.status_code == 200
    assert res.json()["view"]["sort_indicator"]["direction"] == "descending"


def test_deficit_filters_command_change() -> None:
    change = {"params": {"sub_unit_filter": "1º BPM"}, "command_filter": "CPC"}
    res = client.post("/deficit/filters", json=change)
    assert res.status_code == 200
    body = res.json()
    assert body["filters"]["command_filter"] == "CPC"
    assert body["filters"]["sub_unit_filter"] == "all"
    assert len(body["view"]["rows"]) == 4


def test_export_deficit_csv() -> None:
    res = client.post("/export/deficit", json={"command_filter": "CPI", "category_filter": "qoe"})
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    lines = res.text.strip().splitlines()
    assert lines[0] == "GRANDE COMANDO,OPM,DEFICIT CAP QOE,DEFICIT 1º TEN QOE,DEFICIT 2º TEN QOE,DEFICIT TOTAL"
    assert lines[-1].startswith("TOTAL,")
    assert len(lines) == 1 + 5 + 1
