from __future__ import annotations

import pandas as pd

from evtable.metrics_breakdown import compute_breakdowns
from evtable.metrics_summary import cafv_status, compute_summary, round_half_up
from evtable.records import RecordStore
from evtable.schema import CAFV_ELIGIBLE, EV_SCHEMA


def test_summary(ev_rows: list[dict]) -> None:
    summary = compute_summary(RecordStore.from_records(ev_rows, EV_SCHEMA))

    assert summary["total_vehicles"] == 8
    assert summary["unique_makes"] == 6
    assert summary["unique_models"] == 8
    assert summary["unique_counties"] == 4
    assert summary["avg_electric_range"] == 149
    assert summary["vehicle_types"] == {"bev": 6, "phev": 2}
    assert summary["cafv"] == {"eligible": 5, "not_eligible": 1, "unknown": 2, "eligible_pct": 63}
    assert summary["year_range"] == {"min": 2013, "max": 2023}
    assert summary["avg_msrp"] == 48750


def test_summary_of_empty_store() -> None:
    summary = compute_summary(RecordStore.empty(EV_SCHEMA))
    assert summary["total_vehicles"] == 0
    assert summary["year_range"] == {"min": None, "max": None}
    assert summary["cafv"]["eligible_pct"] == 0


def test_cafv_status_uses_enumerated_values() -> None:
    raw = pd.Series([CAFV_ELIGIBLE, "Clean Alternative Fuel Vehicle Eligible (pending)", ""])
    assert cafv_status(raw).tolist() == ["eligible", "unknown", "unknown"]


def test_round_half_up() -> None:
    assert round_half_up(62.5) == 63
    assert round_half_up(2.5) == 3
    assert round_half_up(None) is None


def test_breakdowns(ev_rows: list[dict]) -> None:
    out = compute_breakdowns(RecordStore.from_records(ev_rows, EV_SCHEMA), reference_year=2023)

    assert out["top_makes"][0] == {"make": "TESLA", "count": 3}
    assert [m["make"] for m in out["top_makes"][1:]] == ["NISSAN", "BMW", "CHEVROLET", "TOYOTA", "KIA"]
    assert out["vehicle_types"] == [
        {"name": "BEV", "value": 6, "percentage": 75},
        {"name": "PHEV", "value": 2, "percentage": 25},
    ]
    assert out["years"] == [
        {"year": 2013, "count": 1},
        {"year": 2017, "count": 2},
        {"year": 2019, "count": 2},
        {"year": 2020, "count": 1},
        {"year": 2021, "count": 1},
        {"year": 2023, "count": 1},
    ]
    assert [c["county"] for c in out["top_counties"]] == ["King", "Pierce", "Snohomish", "Clark"]
    assert out["electric_range"] == [
        {"range": "0-50", "count": 3},
        {"range": "51-100", "count": 1},
        {"range": "101-200", "count": 1},
        {"range": "201-300", "count": 3},
        {"range": "300+", "count": 0},
    ]


def test_breakdown_year_window(ev_rows: list[dict]) -> None:
    out = compute_breakdowns(RecordStore.from_records(ev_rows, EV_SCHEMA), reference_year=2020)
    assert [y["year"] for y in out["years"]] == [2013, 2017, 2019, 2020]


def test_breakdowns_of_empty_store() -> None:
    out = compute_breakdowns(RecordStore.empty(EV_SCHEMA), reference_year=2024)
    assert out["top_makes"] == []
    assert all(b["count"] == 0 for b in out["electric_range"])
